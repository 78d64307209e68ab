"""Config & Constants"""
import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root (one level up from smpaudio/)
_ROOT = Path(__file__).parent.parent
load_dotenv(_ROOT / ".env")

# ─── Paths ────────────────────────────────────────────────────────────────────
ROOT_DIR = _ROOT
SONGS_FILE = Path(os.getenv("SONGS_FILE", str(ROOT_DIR / "songs.json")))
OUTPUT_DIR = ROOT_DIR / os.getenv("OUTPUT_DIR", "output")
ERRORS_LOG = OUTPUT_DIR / "errors.log"

# ─── Web server ──────────────────────────────────────────────────────────────
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8080"))
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

# ─── Access control ──────────────────────────────────────────────────────────
# Empty means every control command is accepted. Deliberate: a forgotten key
# gives an open server, not a bricked one. The startup banner warns about it.
RADIO_KEY = os.getenv("RADIO_KEY", "")

# ─── Playback ────────────────────────────────────────────────────────────────
DEFAULT_TRACK_TEXT = "Now playing"
UNKNOWN_REQUESTER = "unknown"
QUEUE_LIST_LIMIT = int(os.getenv("QUEUE_LIST_LIMIT", "10"))

# Outbound messages buffered per WebSocket client before the oldest is dropped
# Floor of 2: a new client is handed the state and the queue snapshot up front
SUBSCRIBER_QUEUE_SIZE = max(2, int(os.getenv("SUBSCRIBER_QUEUE_SIZE", "50")))

APP_VERSION = "1.0.0"

# ─── Logging / dev mode ──────────────────────────────────────────────────────
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
DEV_MODE = os.getenv("DEV_MODE", "0").strip() in ("1", "true", "yes")
