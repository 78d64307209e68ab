import asyncio

from smpaudio.playback import Playback
from smpaudio.tracks import Track
from smpaudio.web.state import SessionRegistry


def _drain(q: asyncio.Queue) -> list:
    items = []
    while not q.empty():
        items.append(q.get_nowait())
    return items


def test_subscribe_sends_current_state_and_queue():
    playback = Playback()
    playback.enqueue_or_start(Track("http://x/a.mp3", "A"))
    playback.enqueue_or_start(Track("http://x/b.mp3", "B"))
    registry = SessionRegistry(playback)

    q = registry.subscribe("c1")
    assert _drain(q) == [playback.state_message(), playback.queue_message()]
    assert registry.client_count == 1


def test_late_joiner_matches_last_broadcast():
    async def scenario():
        playback = Playback()
        registry = SessionRegistry(playback)
        early = registry.subscribe("early")
        _drain(early)

        playback.enqueue_or_start(Track("http://x/a.mp3", "A"))
        await registry.broadcast_state()
        late = registry.subscribe("late")
        return _drain(early), _drain(late)

    early_msgs, late_msgs = asyncio.run(scenario())
    assert early_msgs == late_msgs
    assert late_msgs[0]["action"] == "play"


def test_unsubscribe_twice_is_harmless():
    registry = SessionRegistry(Playback())
    registry.subscribe("c1")
    registry.unsubscribe("c1")
    registry.unsubscribe("c1")
    registry.unsubscribe("never-registered")
    assert registry.client_count == 0


def test_broadcast_reaches_everyone():
    async def scenario():
        registry = SessionRegistry(Playback())
        queues = [registry.subscribe(f"c{i}") for i in range(3)]
        for q in queues:
            _drain(q)
        await registry.broadcast_error("boom")
        return [_drain(q) for q in queues]

    for msgs in asyncio.run(scenario()):
        assert msgs == [{"action": "error", "text": "boom"}]


def test_slow_client_drops_oldest_without_blocking_others():
    async def scenario():
        registry = SessionRegistry(Playback(), queue_size=2)
        slow = registry.subscribe("slow")    # full: holds the two sync messages
        fast = registry.subscribe("fast")
        _drain(fast)
        await registry.broadcast({"action": "error", "text": "one"})
        return registry, _drain(slow), _drain(fast)

    registry, slow_msgs, fast_msgs = asyncio.run(scenario())
    assert registry.client_count == 2
    assert slow_msgs[0]["action"] == "queue"
    assert slow_msgs[-1] == {"action": "error", "text": "one"}
    assert fast_msgs == [{"action": "error", "text": "one"}]


def test_tiny_queue_size_still_fits_sync_messages():
    registry = SessionRegistry(Playback(), queue_size=1)
    q = registry.subscribe("c1")
    assert [m["action"] for m in _drain(q)] == ["stop", "queue"]
