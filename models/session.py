"""User session model"""

import logging
import threading
import time
from dataclasses import dataclass, fields, replace
from typing import Callable

from states import PendingInput

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MessageTarget:
    """Outbound message the bot may edit in place"""
    chat_id: int
    message_id: int


@dataclass
class UserSession:
    """Navigation state of a single user"""
    selected_chain: str | None = None
    target: MessageTarget | None = None
    pending_input: PendingInput = PendingInput.NONE
    displayed_text: str | None = None  # last text rendered into target
    last_activity: float = 0.0
    created_at: float = 0.0


_FIELDS = {f.name for f in fields(UserSession)} - {"last_activity", "created_at"}


class SessionStorage:
    """Thread-safe storage for user sessions"""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._sessions: dict[int, UserSession] = {}
        self._lock = threading.RLock()
        self._clock = clock

    def get(self, telegram_id: int) -> UserSession | None:
        """Get a snapshot of the user session by telegram ID"""
        with self._lock:
            session = self._sessions.get(telegram_id)
            return replace(session) if session else None

    def exists(self, telegram_id: int) -> bool:
        """Check if user session exists"""
        with self._lock:
            return telegram_id in self._sessions

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def set(self, telegram_id: int, patch: dict | None) -> UserSession | None:
        """
        Merge fields into the user session or delete it

        Args:
            telegram_id: Telegram user ID
            patch: Fields to merge (session is created if absent), or None to delete

        Returns:
            Snapshot of the resulting session, None after a delete
        """
        if patch is None:
            with self._lock:
                self._sessions.pop(telegram_id, None)
            return None

        unknown = set(patch) - _FIELDS
        if unknown:
            raise TypeError(f"Unknown session fields: {', '.join(sorted(unknown))}")

        with self._lock:
            now = self._clock()
            session = self._sessions.get(telegram_id) or UserSession(created_at=now)
            session = replace(session, **patch, last_activity=now)
            if session.pending_input != PendingInput.NONE and not session.selected_chain:
                logger.warning(f"Dropping pending input for user {telegram_id}: no chain selected")
                session.pending_input = PendingInput.NONE
            self._sessions[telegram_id] = session
            return replace(session)

    def reset(self, telegram_id: int) -> UserSession:
        """Replace the user session with an empty one"""
        with self._lock:
            self.set(telegram_id, None)
            return self.set(telegram_id, {})

    def touch(self, telegram_id: int) -> UserSession:
        """Stamp activity without changing state"""
        return self.set(telegram_id, {})

    def select_chain(self, telegram_id: int, chain: str, target: MessageTarget | None = None) -> UserSession:
        """Focus a chain, dropping any pending input"""
        patch = {"selected_chain": chain, "pending_input": PendingInput.NONE}
        if target is not None:
            patch["target"] = target
            patch["displayed_text"] = None
        return self.set(telegram_id, patch)

    def track_message(self, telegram_id: int, target: MessageTarget, text: str | None = None) -> UserSession:
        """Remember the message to edit and what it currently shows"""
        return self.set(telegram_id, {"target": target, "displayed_text": text})

    def await_pool_id(self, telegram_id: int) -> bool:
        """Expect a pool ID as the next message; requires a selected chain"""
        with self._lock:
            session = self._sessions.get(telegram_id)
            if not session or not session.selected_chain:
                return False
            self.set(telegram_id, {"pending_input": PendingInput.AWAITING_POOL_ID})
            return True

    def clear_pending_input(self, telegram_id: int) -> None:
        """Return to plain menu navigation"""
        with self._lock:
            if telegram_id in self._sessions:
                self.set(telegram_id, {"pending_input": PendingInput.NONE})

    def sweep_idle(self, max_age: float) -> int:
        """
        Delete sessions idle longer than max_age seconds

        Returns:
            Number of deleted sessions
        """
        now = self._clock()
        with self._lock:
            expired = [
                telegram_id for telegram_id, session in self._sessions.items()
                if now - session.last_activity > max_age
            ]
            for telegram_id in expired:
                del self._sessions[telegram_id]
        return len(expired)

    def sweep_stale(self, max_age: float) -> int:
        """
        Delete sessions created more than max_age seconds ago, active or not

        Returns:
            Number of deleted sessions
        """
        now = self._clock()
        with self._lock:
            expired = [
                telegram_id for telegram_id, session in self._sessions.items()
                if now - session.created_at > max_age
            ]
            for telegram_id in expired:
                del self._sessions[telegram_id]
        return len(expired)


session_storage = SessionStorage()
