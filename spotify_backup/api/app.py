"""FastAPI app and route registration."""
import logging

from fastapi import FastAPI

logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s: %(name)s: %(message)s",
)

from spotify_backup.api.state import AppState, get_state

# Import routes after state to avoid circular imports
from spotify_backup.api.routes import auth, backup

__all__ = ["app", "AppState", "get_state"]

app = FastAPI(
    title="Spotify Playlist Backup",
    description="Back up Spotify playlists to JSON and restore them on any account",
)

app.include_router(auth.router, tags=["auth"])
app.include_router(backup.router, tags=["backup"])
