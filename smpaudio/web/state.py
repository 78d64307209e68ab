"""SessionRegistry: live WebSocket subscribers and fan-out of playback state."""
import asyncio
import logging
from typing import Any

from ..config import SUBSCRIBER_QUEUE_SIZE
from ..playback import Playback

logger = logging.getLogger(__name__)


class SessionRegistry:
    def __init__(self, playback: Playback, queue_size: int = SUBSCRIBER_QUEUE_SIZE):
        self.playback = playback
        # Room for the two sync messages subscribe() enqueues
        self._queue_size = max(queue_size, 2)
        self._subscribers: dict[str, asyncio.Queue] = {}

    def subscribe(self, client_id: str) -> asyncio.Queue:
        """Register a new client. Returns a queue of outbound messages,
        already holding the current state and queue snapshot."""
        q: asyncio.Queue = asyncio.Queue(maxsize=self._queue_size)
        q.put_nowait(self.playback.state_message())
        q.put_nowait(self.playback.queue_message())
        self._subscribers[client_id] = q
        return q

    def unsubscribe(self, client_id: str):
        self._subscribers.pop(client_id, None)

    @property
    def client_count(self) -> int:
        return len(self._subscribers)

    async def broadcast(self, message: dict[str, Any]):
        """Push a message to all connected clients."""
        dead = []
        for cid, q in self._subscribers.items():
            try:
                q.put_nowait(message)
            except asyncio.QueueFull:
                # Client too slow: drop oldest
                try:
                    q.get_nowait()
                    q.put_nowait(message)
                except (asyncio.QueueEmpty, asyncio.QueueFull):
                    dead.append(cid)
        for cid in dead:
            logger.info("Dropping unresponsive client %s", cid)
            self._subscribers.pop(cid, None)

    async def broadcast_state(self):
        await self.broadcast(self.playback.state_message())
        await self.broadcast(self.playback.queue_message())

    async def broadcast_error(self, text: str):
        await self.broadcast({"action": "error", "text": text})
