"""Station: owns playback state, runs commands, broadcasts the result.

Every command runs read -> mutate -> broadcast under one asyncio.Lock, and
broadcasting only enqueues, so no command waits on a listener and no two
transitions interleave.
"""
import asyncio
import hmac
import logging
from typing import Optional

from .catalog import Catalog
from .commands import (
    Command,
    PlayCommand,
    StopCommand,
    SkipCommand,
    QueueListCommand,
    EndedCommand,
)
from .config import RADIO_KEY, QUEUE_LIST_LIMIT
from .errors import AuthorizationError, InvalidCommandError
from .playback import Playback
from .tracks import build_track
from .web.state import SessionRegistry

logger = logging.getLogger(__name__)


class Station:
    def __init__(self, catalog: Optional[Catalog] = None, secret: Optional[str] = None):
        self.catalog = catalog if catalog is not None else Catalog()
        self.secret = RADIO_KEY if secret is None else secret
        self.playback = Playback()
        self.sessions = SessionRegistry(self.playback)
        self._lock = asyncio.Lock()

    @property
    def open_access(self) -> bool:
        """True when no key is configured and every command is authorized."""
        return not self.secret

    def authorize(self, credential: Optional[str]):
        if self.open_access:
            return
        if not credential or not hmac.compare_digest(credential.encode(), self.secret.encode()):
            raise AuthorizationError()

    # ── Subscribers ──────────────────────────────────────────────────────────

    async def connect(self, client_id: str) -> asyncio.Queue:
        # Under the lock so the initial snapshot is never from a half-run command
        async with self._lock:
            return self.sessions.subscribe(client_id)

    def disconnect(self, client_id: str):
        self.sessions.unsubscribe(client_id)

    async def announce_error(self, text: str):
        await self.sessions.broadcast_error(text)

    # ── Commands ─────────────────────────────────────────────────────────────

    async def execute(self, command: Command) -> dict:
        """Run one command. Raises AuthorizationError / UnresolvedInputError."""
        if isinstance(command, PlayCommand):
            return await self.play(command)
        if isinstance(command, StopCommand):
            return await self.stop(command.credential)
        if isinstance(command, SkipCommand):
            return await self.skip(command.credential)
        if isinstance(command, QueueListCommand):
            return self.queue_list()
        if isinstance(command, EndedCommand):
            return await self.track_ended(command.location)
        raise InvalidCommandError(f"unsupported command: {type(command).__name__}")

    async def play(self, command: PlayCommand) -> dict:
        self.authorize(command.credential)
        track = build_track(
            self.catalog,
            location=command.location,
            query=command.query,
            text=command.text,
            requester=command.requester,
        )
        async with self._lock:
            event = self.playback.enqueue_or_start(track)
            await self.sessions.broadcast_state()
        return {"success": True, "event": event, "track": track.to_dict()}

    async def stop(self, credential: Optional[str] = None) -> dict:
        self.authorize(credential)
        async with self._lock:
            event = self.playback.reset()
            await self.sessions.broadcast_state()
        return {"success": True, "event": event}

    async def skip(self, credential: Optional[str] = None) -> dict:
        self.authorize(credential)
        async with self._lock:
            event = self.playback.skip()
            await self.sessions.broadcast_state()
        return {"success": True, "event": event}

    async def track_ended(self, location: Optional[str]) -> dict:
        """Ungated. Advances at most once per track however many report it."""
        async with self._lock:
            event = self.playback.track_ended(location)
            if event is not None:
                await self.sessions.broadcast_state()
        return {"advanced": event is not None, "event": event}

    def queue_list(self, limit: int = QUEUE_LIST_LIMIT) -> dict:
        return {"action": "queueList", "lines": self.playback.queue_lines(limit)}

    def snapshot(self) -> dict:
        return {
            "state": self.playback.state_message(),
            "queue": self.playback.queue_message(),
        }
