"""SMP Audio Server: entry point."""
import logging
import sys

import uvicorn
from rich.logging import RichHandler

from smpaudio.catalog import Catalog
from smpaudio.config import HOST, PORT, SONGS_FILE, LOG_LEVEL
from smpaudio.station import Station
from smpaudio.ui import print_startup, console
from smpaudio.web.server import create_app


def main():
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )
    logger = logging.getLogger("smpaudio")

    station = Station(Catalog.load(SONGS_FILE))
    if station.open_access:
        logger.warning("RADIO_KEY is not set: control commands are open to everyone")

    print_startup(HOST, PORT, len(station.catalog), station.open_access)
    uvicorn.run(create_app(station), host=HOST, port=PORT, log_config=None)


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        console.print("\n  Goodbye.\n")
        sys.exit(0)
