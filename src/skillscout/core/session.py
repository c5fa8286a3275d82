"""Per-conversation cache of already-resolved skill content."""

import logging
import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime

from skillscout.core.exceptions import SessionNotFoundError

logger = logging.getLogger(__name__)


def _new_session_id() -> str:
    return uuid.uuid4().hex


@dataclass
class Session:
    """Runtime state for a single conversation.

    Only the DisclosureResolver mutates a session. ``lock`` serializes the
    read-modify-write of budget and loaded sets when a host issues concurrent
    queries against one session.
    """

    session_id: str = field(default_factory=_new_session_id)
    generation: int = 0

    loaded_skill_ids: set[str] = field(default_factory=set)
    loaded_reference_paths: set[str] = field(default_factory=set)
    consumed_budget: int = 0
    created_at: datetime = field(default_factory=datetime.now)

    lock: threading.RLock = field(
        default_factory=threading.RLock, repr=False, compare=False
    )

    def has(self, key: str) -> bool:
        """True if ``key`` (a skill id or a reference key) was already loaded."""
        return self.has_skill(key) or self.has_reference(key)

    def has_skill(self, skill_id: str) -> bool:
        return skill_id in self.loaded_skill_ids

    def has_reference(self, reference_key: str) -> bool:
        return reference_key in self.loaded_reference_paths

    def record_skill(self, skill_id: str, cost: int) -> None:
        with self.lock:
            if skill_id in self.loaded_skill_ids:
                return
            self.loaded_skill_ids.add(skill_id)
            self.consumed_budget += cost

    def record_reference(self, reference_key: str, cost: int) -> None:
        with self.lock:
            if reference_key in self.loaded_reference_paths:
                return
            self.loaded_reference_paths.add(reference_key)
            self.consumed_budget += cost

    def reset(self) -> None:
        """Forget everything loaded so far."""
        with self.lock:
            self.loaded_skill_ids.clear()
            self.loaded_reference_paths.clear()
            self.consumed_budget = 0


class SessionManager:
    """Registry of live sessions, one independent cache per conversation."""

    def __init__(self) -> None:
        self._sessions: dict[str, Session] = {}
        self._lock = threading.Lock()

    def new_session(self, generation: int = 0) -> Session:
        session = Session(generation=generation)
        with self._lock:
            self._sessions[session.session_id] = session
        logger.debug(f"Started session {session.session_id}")
        return session

    def get(self, session_id: str) -> Session:
        with self._lock:
            session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def end(self, session_id: str) -> None:
        """Discard a session at conversation end."""
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if session is None:
            raise SessionNotFoundError(session_id)
        logger.debug(f"Ended session {session_id}")

    def invalidate_all(self) -> int:
        """Reset and drop every session. Returns how many were dropped."""
        with self._lock:
            sessions = list(self._sessions.values())
            self._sessions.clear()
        for session in sessions:
            session.reset()
        if sessions:
            logger.info(f"Invalidated {len(sessions)} session(s)")
        return len(sessions)

    def list_ids(self) -> list[str]:
        with self._lock:
            return sorted(self._sessions)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
