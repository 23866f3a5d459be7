"""Shared application state (injected into routes)."""
from typing import Callable

from fastapi import Depends, Request, Response

from spotify_backup.config import SESSION_COOKIE, SESSION_TTL_SEC
from spotify_backup.core.session import Session, SessionStore
from spotify_backup.core.spotify_client import SpotifyGateway

ClientFactory = Callable[[dict], SpotifyGateway]


class AppState:
    def __init__(self) -> None:
        self.sessions = SessionStore(ttl_sec=SESSION_TTL_SEC)
        # token_info -> API client; swapped out in tests
        self.client_factory: ClientFactory = SpotifyGateway.from_token

    def client_for(self, session: Session) -> SpotifyGateway:
        return self.client_factory(session.token_info)

    def start_session(self, request: Request) -> Session:
        """New session under a fresh id, replacing any the browser had."""
        old_id = request.cookies.get(SESSION_COOKIE)
        if old_id:
            self.sessions.drop(old_id)
        return self.sessions.create()

    @staticmethod
    def attach_session(session: Session, response: Response) -> Response:
        response.set_cookie(SESSION_COOKIE, session.session_id, httponly=True, samesite="lax")
        return response

    def end_session(self, session: Session, response: Response) -> None:
        if session.stored:
            self.sessions.drop(session.session_id)
        response.delete_cookie(SESSION_COOKIE)


_state = AppState()


def get_state() -> AppState:
    return _state


def get_session(request: Request, state: AppState = Depends(get_state)) -> Session:
    """Session named by the cookie, or a throwaway anonymous one.

    Only /callback creates stored sessions, so unknown or forged cookie
    values never add entries to the store.
    """
    session = state.sessions.find(request.cookies.get(SESSION_COOKIE))
    return session if session is not None else Session()
