"""Error types and structured error logging (JSON lines to errors.log)."""
import json
import logging
import sys
from datetime import datetime
from typing import Optional

from .config import ERRORS_LOG, OUTPUT_DIR, DEV_MODE

logger = logging.getLogger(__name__)


class StationError(Exception):
    """Base class for command failures reported back to a caller."""


class AuthorizationError(StationError):
    def __init__(self, message: str = "unauthorized"):
        super().__init__(message)


class UnresolvedInputError(StationError):
    """Play input could not be turned into a track.

    reason is "not_found" (catalog miss) or "invalid" (nothing usable given).
    """

    def __init__(self, reason: str, query: str = ""):
        self.reason = reason
        self.query = query
        if reason == "not_found":
            message = f"Song not found: {query}"
        else:
            message = "Invalid play payload"
        super().__init__(message)


class InvalidCommandError(StationError):
    """Inbound message does not match any known command."""


class CatalogLoadError(Exception):
    """Songs file missing or unreadable. Never escapes Catalog.load()."""


_FRIENDLY_MESSAGES = {
    "catalog_load": "Song library not loaded. Continuing with an empty catalog.",
}


def format_error(
    stage: str,
    raw: str = "",
    payload: Optional[dict] = None,
) -> str:
    entry = {
        "timestamp": datetime.now().isoformat(),
        "stage": stage,
        "payload": payload,
        "error": raw,
        "python": sys.version.split()[0],
    }

    _append_to_log(entry)
    logger.warning("Error at %s: %s", stage, raw)

    if DEV_MODE:
        return json.dumps(entry, indent=2)
    return _FRIENDLY_MESSAGES.get(stage, f"Something went wrong ({stage}).")


def _append_to_log(entry: dict):
    try:
        OUTPUT_DIR.mkdir(parents=True, exist_ok=True)
        with open(ERRORS_LOG, "a") as f:
            f.write(json.dumps(entry, default=str) + "\n")
    except OSError:
        pass
