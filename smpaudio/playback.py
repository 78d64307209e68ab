"""Playback state machine: the single now-playing slot and the FIFO queue.

Plain synchronous transitions. Serialization (one command at a time) is the
caller's job, see Station.
"""
import logging
from collections import deque
from typing import Optional

from .tracks import Track

logger = logging.getLogger(__name__)

PLAY = "play"
QUEUED = "queued"
STOP = "stop"


class Playback:
    def __init__(self):
        self.now_playing: Optional[Track] = None
        self.queue: deque[Track] = deque()

    @property
    def is_idle(self) -> bool:
        return self.now_playing is None

    # ── Transitions ──────────────────────────────────────────────────────────

    def enqueue_or_start(self, track: Track) -> str:
        if self.now_playing is None:
            self._start(track)
            return PLAY
        self.queue.append(track)
        logger.info("[QUEUE] + %s", track.text)
        return QUEUED

    def advance(self) -> str:
        if not self.queue:
            self.now_playing = None
            logger.info("[QUEUE] empty -> stop")
            return STOP
        self._start(self.queue.popleft())
        return PLAY

    def skip(self) -> str:
        logger.info("[SKIP]")
        return self.advance()

    def reset(self) -> str:
        self.now_playing = None
        self.queue.clear()
        logger.info("[STOP] cleared")
        return STOP

    def track_ended(self, location: Optional[str]) -> Optional[str]:
        """Advance only if location names the track playing right now.

        Every listener reports the same end, so all but the first report are
        stale by the time they arrive and are ignored (returns None).
        """
        if self.now_playing is None or not location:
            return None
        if location != self.now_playing.location:
            logger.debug("[ENDED] stale signal for %s ignored", location)
            return None
        logger.info("[ENDED] -> next")
        return self.advance()

    def _start(self, track: Track):
        self.now_playing = track
        logger.info("[PLAY] %s (%s)", track.text, track.location)

    # ── Snapshots ────────────────────────────────────────────────────────────

    def state_message(self) -> dict:
        track = self.now_playing
        if track is None:
            return {"action": STOP, "location": None, "text": None, "requester": None}
        return {"action": PLAY, **track.to_dict()}

    def queue_message(self) -> dict:
        return {
            "action": "queue",
            "nowPlaying": self.now_playing.label() if self.now_playing else None,
            "queue": [t.label() for t in self.queue],
        }

    def queue_lines(self, limit: int = 10) -> list[str]:
        """Human-readable listing: current track, then up to `limit` queued."""
        lines = []
        if self.now_playing:
            lines.append(f"Now: {self.now_playing.text}")
        else:
            lines.append("Now: (nothing playing)")

        if not self.queue:
            lines.append("Queue: (empty)")
            return lines

        lines.append("Queue:")
        for i, track in enumerate(list(self.queue)[:limit], 1):
            lines.append(f"{i}. {track.text}")
        if len(self.queue) > limit:
            lines.append(f"+{len(self.queue) - limit} more...")
        return lines
