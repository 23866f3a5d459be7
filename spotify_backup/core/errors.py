"""Exceptions raised by backup and restore."""
from typing import Optional


class SpotifyBackupError(Exception):
    """Base class for all spotify_backup errors."""


class AuthError(SpotifyBackupError):
    """OAuth code exchange or token validation failed."""


class TransferFormatError(SpotifyBackupError):
    """An uploaded transfer document could not be parsed."""


class MalformedRecordError(SpotifyBackupError):
    """A transfer entry has no usable track URI."""

    def __init__(self, uri: str, reason: str) -> None:
        super().__init__(f"{reason}: {uri!r}")
        self.uri = uri
        self.reason = reason


class RemoteError(SpotifyBackupError):
    """A Spotify Web API call failed (transport or service level)."""

    def __init__(self, message: str, http_status: Optional[int] = None) -> None:
        super().__init__(message)
        self.http_status = http_status


class FetchError(RemoteError):
    """A playlist page request failed; the whole playlist is unavailable."""


class CreateError(RemoteError):
    """Creating the target playlist failed."""


class BatchSubmitError(RemoteError):
    """One add-tracks call failed."""
