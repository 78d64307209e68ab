"""Console output: startup banner."""
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .config import APP_VERSION

console = Console()


def print_startup(host: str, port: int, catalog_size: int, open_access: bool):
    table = Table.grid(padding=(0, 2))
    table.add_row("[dim]listening[/dim]", f"http://{host}:{port}  (ws on / and /ws)")
    table.add_row("[dim]songs[/dim]", str(catalog_size) if catalog_size else "[yellow]none loaded[/yellow]")
    if open_access:
        table.add_row("[dim]access[/dim]", "[bold red]OPEN[/bold red]: RADIO_KEY not set, anyone can play/stop/skip")
    else:
        table.add_row("[dim]access[/dim]", "[green]key required[/green]")

    console.print(Panel(
        table,
        title=f"[bold cyan]🔊  SMP Audio Server[/bold cyan] [dim]v{APP_VERSION}[/dim]",
        expand=False,
    ))
