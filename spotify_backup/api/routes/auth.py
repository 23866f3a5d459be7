"""Spotify OAuth: login redirect, callback (runs the backup), logout."""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, PlainTextResponse, RedirectResponse

from spotify_backup.api.pages import render_playlists
from spotify_backup.api.state import AppState, get_session, get_state
from spotify_backup.core.backup import backup_current_user
from spotify_backup.core.errors import AuthError, RemoteError
from spotify_backup.core.session import Session
from spotify_backup.core.spotify_client import exchange_code, get_auth_url

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/login")
def login():
    """Redirect to the Spotify authorization page."""
    return RedirectResponse(url=get_auth_url(), status_code=307)


@router.get("/callback")
def callback(
    request: Request,
    code: Optional[str] = None,
    state: Optional[str] = None,
    app_state: AppState = Depends(get_state),
):
    """Exchange the code for a token, back up every playlist and list them.

    Each successful login starts a new session under a fresh id.
    """
    try:
        token_info = exchange_code(code or "", state)
    except AuthError as e:
        logger.error("Error getting token: %s", e)
        return PlainTextResponse("Couldn't get token", status_code=403)

    session = app_state.start_session(request)
    with session.lock:
        session.token_info = token_info
        client = app_state.client_for(session)
        try:
            session.document = backup_current_user(client)
        except AuthError as e:
            logger.error("Token rejected during backup: %s", e)
            response = PlainTextResponse("Couldn't get token", status_code=403)
            app_state.end_session(session, response)
            return response
        except RemoteError as e:
            logger.error("Error getting playlists: %s", e)
            # token stays usable for /restore
            return app_state.attach_session(
                session, PlainTextResponse("Couldn't get playlists", status_code=500)
            )
    return app_state.attach_session(session, HTMLResponse(render_playlists(session.document)))


@router.post("/logout")
def logout(
    app_state: AppState = Depends(get_state),
    session: Session = Depends(get_session),
):
    """Forget the token and the last backup for this browser."""
    response = RedirectResponse(url="/", status_code=303)
    app_state.end_session(session, response)
    return response
