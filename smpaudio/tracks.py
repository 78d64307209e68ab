"""Track value + builder: turns play input into a canonical Track."""
import re
from dataclasses import dataclass, asdict
from typing import Optional

from .catalog import Catalog
from .config import DEFAULT_TRACK_TEXT, UNKNOWN_REQUESTER
from .errors import UnresolvedInputError

# scheme://... (http, https, rtmp, ...)
_ABSOLUTE_REF = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*://\S+")


@dataclass(frozen=True)
class Track:
    location: str
    text: str = DEFAULT_TRACK_TEXT
    requester: str = UNKNOWN_REQUESTER

    def to_dict(self) -> dict:
        return asdict(self)

    def label(self) -> dict:
        """Queue snapshot form: what listeners see, without the location."""
        return {"text": self.text, "requester": self.requester}


def is_absolute(location) -> bool:
    return isinstance(location, str) and bool(_ABSOLUTE_REF.match(location.strip()))


def _non_blank(value) -> bool:
    return isinstance(value, str) and bool(value.strip())


def build_track(
    catalog: Catalog,
    location: Optional[str] = None,
    query: Optional[str] = None,
    text: Optional[str] = None,
    requester: Optional[str] = None,
) -> Track:
    """
    Resolution order, first match wins:
      1. absolute location            -> Track(location, text or default)
      2. query, or bare-name location -> catalog lookup (title > text > default)
      3. anything else                -> UnresolvedInputError("invalid")
    A catalog miss raises UnresolvedInputError("not_found").
    """
    who = requester.strip() if _non_blank(requester) else UNKNOWN_REQUESTER

    if is_absolute(location):
        shown = text if _non_blank(text) else DEFAULT_TRACK_TEXT
        return Track(location=location.strip(), text=shown, requester=who)

    name = query if _non_blank(query) else location if _non_blank(location) else None
    if name is None:
        raise UnresolvedInputError("invalid")

    entry = catalog.resolve(name)
    if entry is None:
        raise UnresolvedInputError("not_found", query=name.strip())

    if entry.title:
        shown = entry.title
    elif _non_blank(text):
        shown = text
    else:
        shown = DEFAULT_TRACK_TEXT
    return Track(location=entry.url, text=shown, requester=who)
