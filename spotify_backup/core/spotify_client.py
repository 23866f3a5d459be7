"""Spotify API client via Spotipy; token held in a per-session memory cache."""
import logging
import random
import time
from typing import Any, Callable, List, Optional, Sequence

import requests
from spotipy import Spotify, SpotifyException
from spotipy.cache_handler import CacheHandler, MemoryCacheHandler
from spotipy.oauth2 import SpotifyOAuth, SpotifyOauthError

from spotify_backup import config
from spotify_backup.core.errors import AuthError, RemoteError

logger = logging.getLogger(__name__)

_RETRY_STATUSES = (429, 500, 502, 503, 504)
_PLAYLISTS_PAGE = 50


def build_oauth(cache_handler: Optional[CacheHandler] = None) -> SpotifyOAuth:
    """SpotifyOAuth for the configured app, using the fixed anti-forgery state."""
    return SpotifyOAuth(
        client_id=config.SPOTIFY_CLIENT_ID,
        client_secret=config.SPOTIFY_CLIENT_SECRET,
        redirect_uri=config.SPOTIFY_REDIRECT_URI,
        scope=config.SPOTIFY_SCOPES,
        state=config.OAUTH_STATE,
        cache_handler=cache_handler or MemoryCacheHandler(),
        open_browser=False,
    )


def get_auth_url() -> str:
    return build_oauth().get_authorize_url(state=config.OAUTH_STATE)


def exchange_code(code: str, state: Optional[str]) -> dict:
    """Exchange an OAuth code for a token dict. Raises AuthError on any failure."""
    if not config.SPOTIFY_CLIENT_ID or not config.SPOTIFY_CLIENT_SECRET:
        raise AuthError("SPOTIFY_CLIENT_ID / SPOTIFY_CLIENT_SECRET not set")
    if state != config.OAUTH_STATE:
        raise AuthError("OAuth state mismatch")
    if not code:
        raise AuthError("Missing authorization code")
    cache = MemoryCacheHandler()
    auth = build_oauth(cache)
    try:
        auth.get_access_token(code=code, as_dict=False, check_cache=False)
    except (SpotifyOauthError, requests.RequestException) as e:
        raise AuthError(str(e)) from e
    token_info = cache.get_cached_token()
    if not token_info:
        raise AuthError("Token exchange returned no token")
    return token_info


def _is_retryable(exc: Exception) -> bool:
    if isinstance(exc, SpotifyException):
        return exc.http_status in _RETRY_STATUSES
    return isinstance(exc, (requests.ConnectionError, requests.Timeout))


def _retry_after(exc: Exception) -> Optional[float]:
    headers = getattr(exc, "headers", None) or {}
    value = headers.get("Retry-After") or headers.get("retry-after")
    try:
        return float(value) if value is not None else None
    except (TypeError, ValueError):
        return None


def call_with_retry(
    fn: Callable[..., Any],
    *args: Any,
    max_retries: int = 0,
    backoff_factor: float = 1.0,
    sleep: Callable[[float], None] = time.sleep,
    **kwargs: Any,
) -> Any:
    """Call fn, retrying rate-limit / transient errors up to max_retries times.

    Wait is backoff_factor * 2**attempt plus jitter, or Retry-After if larger.
    Non-retryable errors and the last failure are re-raised unchanged.
    """
    attempt = 0
    while True:
        try:
            return fn(*args, **kwargs)
        except (SpotifyException, requests.RequestException) as e:
            if attempt >= max_retries or not _is_retryable(e):
                raise
            wait = backoff_factor * (2 ** attempt) + random.uniform(0, 0.5)
            retry_after = _retry_after(e)
            if retry_after is not None:
                wait = max(wait, retry_after)
            attempt += 1
            logger.warning(
                "Transient Spotify error (%s), retrying in %.1fs (attempt %d/%d)",
                e, wait, attempt, max_retries,
            )
            sleep(wait)


class SpotifyGateway:
    """The subset of the Web API that backup and restore need.

    API and transport failures surface as RemoteError so callers can treat
    them as a per-playlist or per-batch failure. A rejected token refresh
    surfaces as AuthError and ends the whole run.
    """

    def __init__(
        self,
        sp: Spotify,
        *,
        max_retries: int = config.MAX_RETRIES,
        backoff_factor: float = config.BACKOFF_FACTOR,
    ) -> None:
        self._sp = sp
        self._max_retries = max_retries
        self._backoff_factor = backoff_factor

    @classmethod
    def from_token(cls, token_info: dict) -> "SpotifyGateway":
        auth = build_oauth(MemoryCacheHandler(token_info=token_info))
        sp = Spotify(
            auth_manager=auth,
            requests_timeout=config.REQUEST_TIMEOUT,
            # retries are handled by call_with_retry
            retries=0,
            status_retries=0,
        )
        return cls(sp)

    def _call(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        try:
            return call_with_retry(
                fn,
                *args,
                max_retries=self._max_retries,
                backoff_factor=self._backoff_factor,
                **kwargs,
            )
        except SpotifyOauthError as e:
            # token refresh rejected; the session has to log in again
            raise AuthError(str(e)) from e
        except SpotifyException as e:
            raise RemoteError(e.msg or str(e), http_status=e.http_status) from e
        except requests.RequestException as e:
            raise RemoteError(str(e)) from e

    def list_playlist_items(self, playlist_id: str, limit: int, offset: int) -> dict:
        return self._call(
            self._sp.playlist_items,
            playlist_id,
            limit=limit,
            offset=offset,
            additional_types=("track",),
        )

    def create_playlist(
        self,
        user_id: str,
        name: str,
        description: str = "",
        public: bool = False,
        collaborative: bool = False,
    ) -> dict:
        return self._call(
            self._sp.user_playlist_create,
            user_id,
            name,
            public=public,
            collaborative=collaborative,
            description=description,
        )

    def add_tracks_to_playlist(self, playlist_id: str, track_ids: Sequence[str]) -> dict:
        return self._call(self._sp.playlist_add_items, playlist_id, list(track_ids))

    def current_user(self) -> dict:
        return self._call(self._sp.current_user)

    def current_user_playlists(self) -> List[dict]:
        """All playlists owned by or followed by the user, every page."""
        playlists: List[dict] = []
        offset = 0
        while True:
            page = self._call(
                self._sp.current_user_playlists, limit=_PLAYLISTS_PAGE, offset=offset
            ) or {}
            items = page.get("items") or []
            playlists.extend(p for p in items if p)
            if not page.get("next") or len(items) < _PLAYLISTS_PAGE:
                break
            offset += _PLAYLISTS_PAGE
        return playlists
