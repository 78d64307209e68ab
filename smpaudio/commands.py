"""Inbound command variants and the parser that produces them.

Accepts the current field names (location, queryName, credential) and the
legacy ones older clients still send (url, query, key).
"""
from dataclasses import dataclass
from typing import Optional, Union

from .errors import InvalidCommandError


@dataclass(frozen=True)
class PlayCommand:
    location: Optional[str] = None
    query: Optional[str] = None
    text: Optional[str] = None
    requester: Optional[str] = None
    credential: Optional[str] = None


@dataclass(frozen=True)
class StopCommand:
    credential: Optional[str] = None


@dataclass(frozen=True)
class SkipCommand:
    credential: Optional[str] = None


@dataclass(frozen=True)
class QueueListCommand:
    credential: Optional[str] = None


@dataclass(frozen=True)
class EndedCommand:
    location: Optional[str] = None


Command = Union[PlayCommand, StopCommand, SkipCommand, QueueListCommand, EndedCommand]


def _field(data: dict, *names: str) -> Optional[str]:
    """First string value among names. Non-strings count as absent."""
    for name in names:
        value = data.get(name)
        if isinstance(value, str):
            return value
    return None


def parse_command(data, action: Optional[str] = None) -> Command:
    """Turn a decoded JSON payload into a Command.

    action overrides data["action"] (the HTTP routes carry it in the path).
    Raises InvalidCommandError for anything that isn't a known command.
    """
    if not isinstance(data, dict):
        raise InvalidCommandError("payload must be a JSON object")

    action = action or data.get("action")
    credential = _field(data, "credential", "key")

    if action == "play":
        return PlayCommand(
            location=_field(data, "location", "url"),
            query=_field(data, "queryName", "query"),
            text=_field(data, "text"),
            requester=_field(data, "requester"),
            credential=credential,
        )
    if action == "stop":
        return StopCommand(credential=credential)
    if action == "skip":
        return SkipCommand(credential=credential)
    if action == "queueList":
        return QueueListCommand(credential=credential)
    if action == "ended":
        return EndedCommand(location=_field(data, "location", "url"))

    raise InvalidCommandError(f"unknown action: {action!r}")
