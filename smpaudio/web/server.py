"""Starlette app: HTTP control routes + WebSocket fan-out."""
import asyncio
import contextlib
import json
import logging
import uuid
from typing import Optional

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse, PlainTextResponse
from starlette.routing import Route, WebSocketRoute
from starlette.websockets import WebSocket, WebSocketDisconnect

from ..catalog import Catalog
from ..commands import QueueListCommand, parse_command
from ..config import APP_VERSION, CORS_ORIGINS, SONGS_FILE
from ..errors import (
    AuthorizationError,
    InvalidCommandError,
    UnresolvedInputError,
)
from ..station import Station

logger = logging.getLogger(__name__)

# Shared state, set by create_app()
_station: Optional[Station] = None


# ── Status ───────────────────────────────────────────────────────────────────

async def status(request):
    return PlainTextResponse(
        f"SMP Audio Server running. Clients: {_station.sessions.client_count}"
    )


async def health(request):
    return JSONResponse({
        "status": "ok",
        "version": APP_VERSION,
        "clients": _station.sessions.client_count,
        "catalog_size": len(_station.catalog),
        "secured": not _station.open_access,
        "idle": _station.playback.is_idle,
    })


async def queue_listing(request):
    """Read-only: no key needed to see what's queued."""
    return JSONResponse({**_station.queue_list(), **_station.snapshot()})


# ── Control routes ───────────────────────────────────────────────────────────

async def _read_body(request) -> dict:
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        return json.loads(raw)
    except (ValueError, RecursionError):
        # ValueError covers JSONDecodeError and UnicodeDecodeError
        raise InvalidCommandError("request body must be JSON")


async def _control(request, action: str):
    try:
        data = await _read_body(request)
        command = parse_command(data, action=action)
        result = await _station.execute(command)
    except AuthorizationError:
        return JSONResponse({"error": "unauthorized"}, status_code=403)
    except UnresolvedInputError as e:
        return JSONResponse({"error": str(e), "reason": e.reason}, status_code=400)
    except InvalidCommandError as e:
        return JSONResponse({"error": str(e)}, status_code=400)
    return JSONResponse(result)


async def play(request):
    return await _control(request, "play")


async def stop(request):
    return await _control(request, "stop")


async def skip(request):
    return await _control(request, "skip")


async def ended(request):
    return await _control(request, "ended")


# ── WebSocket ────────────────────────────────────────────────────────────────

async def websocket_endpoint(websocket: WebSocket):
    await websocket.accept()
    client_id = str(uuid.uuid4())
    # Comes pre-loaded with the current state + queue snapshot
    queue = await _station.connect(client_id)
    logger.info("WS connected: %s (%d clients)", client_id, _station.sessions.client_count)

    # Two tasks: one reads from client, one writes from queue
    async def _reader():
        try:
            while True:
                message = await websocket.receive()
                if message["type"] == "websocket.disconnect":
                    break
                raw = message.get("text")
                if raw is None and message.get("bytes") is not None:
                    raw = message["bytes"].decode("utf-8", errors="replace")
                await _handle_ws_message(queue, raw)
        except WebSocketDisconnect:
            pass
        except Exception as e:
            logger.error("WS reader error: %s", e)

    async def _writer():
        try:
            while True:
                msg = await queue.get()
                await websocket.send_json(msg)
        except Exception:
            pass

    reader_task = asyncio.create_task(_reader())
    writer_task = asyncio.create_task(_writer())

    try:
        done, pending = await asyncio.wait(
            [reader_task, writer_task],
            return_when=asyncio.FIRST_COMPLETED,
        )
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
    finally:
        _station.disconnect(client_id)
        logger.info("WS disconnected: %s", client_id)


def _reply(queue: asyncio.Queue, message: dict):
    """Answer only the sending client, through its own outbound queue."""
    try:
        queue.put_nowait(message)
    except asyncio.QueueFull:
        logger.debug("Reply dropped, client queue full")


async def _handle_ws_message(queue: asyncio.Queue, raw: Optional[str]):
    """Route one incoming WebSocket message to the station."""
    try:
        data = json.loads(raw or "")
    except (ValueError, RecursionError):
        logger.debug("Ignoring non-JSON WS message")
        return

    try:
        command = parse_command(data)
    except InvalidCommandError as e:
        logger.warning("Unknown WS message: %s", e)
        _reply(queue, {"action": "error", "text": "Unknown command"})
        return

    try:
        result = await _station.execute(command)
    except AuthorizationError:
        logger.info("Unauthorized %s rejected", type(command).__name__)
        _reply(queue, {"action": "error", "text": "unauthorized"})
        return
    except UnresolvedInputError as e:
        # Passive listeners are waiting too, so everyone hears about it
        logger.info("Play request unresolved: %s", e)
        await _station.announce_error(str(e))
        return

    if isinstance(command, QueueListCommand):
        _reply(queue, result)


# ── App factory ──────────────────────────────────────────────────────────────

@contextlib.asynccontextmanager
async def _lifespan(app):
    logger.info(
        "Station ready: %d songs, %s",
        len(_station.catalog),
        "open access" if _station.open_access else "key required",
    )
    yield
    logger.info("Station stopped")


def create_app(station: Optional[Station] = None) -> Starlette:
    global _station

    _station = station if station is not None else Station(Catalog.load(SONGS_FILE))

    routes = [
        Route("/", status),
        Route("/api/health", health),
        Route("/queue", queue_listing),
        Route("/play", play, methods=["POST"]),
        Route("/stop", stop, methods=["POST"]),
        Route("/skip", skip, methods=["POST"]),
        Route("/ended", ended, methods=["POST"]),
        WebSocketRoute("/", websocket_endpoint),
        WebSocketRoute("/ws", websocket_endpoint),
    ]

    middleware = [
        Middleware(
            CORSMiddleware,
            allow_origins=CORS_ORIGINS,
            allow_methods=["*"],
            allow_headers=["*"],
        ),
    ]

    return Starlette(routes=routes, middleware=middleware, lifespan=_lifespan)
