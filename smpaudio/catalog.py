"""Song catalog: normalized name -> (url, title), loaded once at startup."""
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .errors import CatalogLoadError, format_error

logger = logging.getLogger(__name__)


def normalize(name: str) -> str:
    return str(name or "").lower().strip()


@dataclass(frozen=True)
class CatalogEntry:
    url: str
    title: str = ""


class Catalog:
    def __init__(self, entries: Optional[dict[str, CatalogEntry]] = None):
        self._entries: dict[str, CatalogEntry] = {}
        for name, entry in (entries or {}).items():
            self._entries[normalize(name)] = entry

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: str) -> bool:
        return normalize(name) in self._entries

    def resolve(self, name: str) -> Optional[CatalogEntry]:
        """Exact lookup on the normalized name. None on a miss."""
        return self._entries.get(normalize(name))

    @classmethod
    def from_mapping(cls, raw: dict) -> "Catalog":
        """Build from the songs.json shape: {name: {"url": ..., "title": ...}}.

        Entries without a usable url are skipped, the rest still load.
        """
        entries = {}
        for name, value in raw.items():
            if not isinstance(value, dict):
                logger.warning("[LIB] skipping %r: entry is not an object", name)
                continue
            url = value.get("url")
            if not isinstance(url, str) or not url.strip():
                logger.warning("[LIB] skipping %r: missing url", name)
                continue
            title = value.get("title")
            entries[name] = CatalogEntry(url=url, title=title if isinstance(title, str) else "")
        return cls(entries)

    @classmethod
    def load(cls, path) -> "Catalog":
        """Load the songs file. Never raises: any failure yields an empty catalog."""
        path = Path(path)
        try:
            catalog = cls.from_mapping(_read_songs(path))
        except CatalogLoadError as e:
            format_error("catalog_load", str(e), {"path": str(path)})
            logger.info("[LIB] %s NOT loaded (continuing): %s", path.name, e)
            return cls()
        logger.info("[LIB] %s loaded (%d songs)", path.name, len(catalog))
        return catalog


def _read_songs(path: Path) -> dict:
    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise CatalogLoadError(f"{path} does not exist")
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise CatalogLoadError(f"invalid JSON: {e}")
    except OSError as e:
        raise CatalogLoadError(str(e))
    if not isinstance(raw, dict):
        raise CatalogLoadError("top level must be an object")
    return raw
