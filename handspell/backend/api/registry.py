import threading
import uuid
from typing import Dict, Optional, Tuple

from handspell.backend.ml.fingerspell import FingerspellConfig, FingerspellSession


class SessionRegistry:
    """
    In-memory sessions for the REST API. Nothing is persisted: a restart
    drops every session.
    Each session carries its own lock so frames for one session are
    processed one at a time, in arrival order.
    """

    def __init__(self, config: Optional[FingerspellConfig] = None):
        self.config = config or FingerspellConfig()
        self._lock = threading.Lock()
        self._sessions: Dict[str, Tuple[FingerspellSession, threading.Lock]] = {}

    def create(self) -> str:
        session_id = uuid.uuid4().hex
        with self._lock:
            self._sessions[session_id] = (FingerspellSession(self.config), threading.Lock())
        return session_id

    def get(self, session_id: str) -> Optional[Tuple[FingerspellSession, threading.Lock]]:
        with self._lock:
            return self._sessions.get(session_id)

    def remove(self, session_id: str) -> bool:
        with self._lock:
            return self._sessions.pop(session_id, None) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
