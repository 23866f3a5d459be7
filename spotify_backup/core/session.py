"""Per-browser session state: OAuth token, last backup, restore progress."""
import threading
import time
import uuid
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional

from spotify_backup.models.restore import CompletionEvent, ProgressEvent, RestoreReport
from spotify_backup.models.transfer import TransferDocument


@dataclass
class Session:
    """State for one browser session.

    lock is held for the whole of a backup or restore, so two requests of the
    same session never interleave their writes. An empty session_id marks an
    anonymous session that is not kept in any store.
    """
    session_id: str = ""
    token_info: Optional[dict] = None
    document: TransferDocument = field(default_factory=list)
    last_progress: Optional[ProgressEvent] = None
    last_completion: Optional[CompletionEvent] = None
    report: Optional[RestoreReport] = None
    last_seen: float = 0.0
    lock: threading.RLock = field(default_factory=threading.RLock, repr=False)

    @property
    def logged_in(self) -> bool:
        return self.token_info is not None

    @property
    def stored(self) -> bool:
        return bool(self.session_id)

    def record_progress(self, event: ProgressEvent) -> None:
        self.last_progress = event

    def record_completion(self, event: CompletionEvent) -> None:
        self.last_completion = event


class SessionStore:
    """In-memory sessions keyed by server-issued ids; lost on restart.

    Sessions idle for longer than ttl_sec are discarded. Ids presented by a
    client that this store never issued are not honoured.
    """

    def __init__(self, ttl_sec: float, clock: Callable[[], float] = time.monotonic) -> None:
        self._sessions: Dict[str, Session] = {}
        self._lock = threading.Lock()
        self._ttl = ttl_sec
        self._clock = clock

    def _expired(self, session: Session, now: float) -> bool:
        return now - session.last_seen > self._ttl

    def _purge(self, now: float) -> None:
        for session_id in [k for k, s in self._sessions.items() if self._expired(s, now)]:
            del self._sessions[session_id]

    def create(self) -> Session:
        """Start a session under a fresh random id."""
        with self._lock:
            now = self._clock()
            self._purge(now)
            session = Session(session_id=uuid.uuid4().hex, last_seen=now)
            self._sessions[session.session_id] = session
            return session

    def find(self, session_id: Optional[str]) -> Optional[Session]:
        """Live session for session_id, or None if unknown or expired."""
        if not session_id:
            return None
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return None
            now = self._clock()
            if self._expired(session, now):
                del self._sessions[session_id]
                return None
            session.last_seen = now
            return session

    def drop(self, session_id: str) -> None:
        with self._lock:
            self._sessions.pop(session_id, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
