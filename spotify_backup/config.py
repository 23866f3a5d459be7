"""Configuration: env, Spotify credentials, page and batch sizes."""
import json
import os
from pathlib import Path

from dotenv import load_dotenv

# Base paths (project root = parent of spotify_backup package)
BASE_DIR = Path(__file__).resolve().parent.parent

# Load .env from project root so SPOTIFY_CLIENT_ID etc. are set
load_dotenv(BASE_DIR / ".env")

# Legacy credentials file: {"client_id": ..., "client_secret": ..., "redirect_uri": ...}
CONFIG_JSON_PATH = Path(os.getenv("SPOTIFY_BACKUP_CONFIG", str(BASE_DIR / "config.json")))


def _load_config_json(path: Path) -> dict:
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError):
        return {}
    return data if isinstance(data, dict) else {}


_file_config = _load_config_json(CONFIG_JSON_PATH)

# API
API_HOST = os.getenv("SPOTIFY_BACKUP_API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("SPOTIFY_BACKUP_API_PORT", "8080"))

# Spotify (OAuth; token kept in memory per browser session)
SPOTIFY_CLIENT_ID = os.getenv("SPOTIFY_CLIENT_ID") or _file_config.get("client_id", "")
SPOTIFY_CLIENT_SECRET = os.getenv("SPOTIFY_CLIENT_SECRET") or _file_config.get("client_secret", "")
SPOTIFY_REDIRECT_URI = (
    os.getenv("SPOTIFY_REDIRECT_URI")
    or _file_config.get("redirect_uri")
    or "http://localhost:8080/callback"
)
SPOTIFY_SCOPES = (
    "playlist-read-private playlist-read-collaborative user-library-read "
    "playlist-modify-public playlist-modify-private"
)
# Anti-forgery state sent with /login and checked on /callback
OAUTH_STATE = "abc123"
SESSION_COOKIE = "spotify_backup_session"
# Idle sessions (token + last backup) are dropped after this many seconds
SESSION_TTL_SEC = float(os.getenv("SPOTIFY_BACKUP_SESSION_TTL", "3600"))

# Remote API limits
PAGE_SIZE = 100  # max items per playlist_items page
BATCH_SIZE = 100  # max items per playlist_add_items call

# Retry wrapper around remote calls (0 = single attempt)
MAX_RETRIES = int(os.getenv("SPOTIFY_BACKUP_MAX_RETRIES", "0"))
BACKOFF_FACTOR = float(os.getenv("SPOTIFY_BACKUP_BACKOFF", "1.0"))
REQUEST_TIMEOUT = float(os.getenv("SPOTIFY_BACKUP_REQUEST_TIMEOUT", "10"))

DOWNLOAD_FILENAME = "spotify_backup.json"
