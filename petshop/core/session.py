"""Session-scoped key-value storage for promo and last-order state"""

from datetime import datetime, timezone
from typing import Optional, Protocol
from dataclasses import dataclass, field


PROMO_KEY = "applied_promo_code"
LAST_ORDER_KEY = "last_order"


class SessionStore(Protocol):
    """Key-value store scoped to one browsing session"""

    def get(self, session_id: str, key: str) -> Optional[str]: ...

    def set(self, session_id: str, key: str, value: str) -> None: ...

    def delete(self, session_id: str, key: str) -> None: ...

    def cleanup_old_sessions(self, max_age_hours: int = 24) -> int: ...


@dataclass
class SessionData:
    """Values stored for a single session"""
    session_id: str
    created_at: datetime
    updated_at: datetime
    values: dict[str, str] = field(default_factory=dict)

    def touch(self) -> None:
        self.updated_at = datetime.now(timezone.utc)


class InMemorySessionStore:
    """Manages session values in process memory"""

    def __init__(self):
        self.sessions: dict[str, SessionData] = {}

    def _get_or_create(self, session_id: str) -> SessionData:
        data = self.sessions.get(session_id)
        if data is None:
            now = datetime.now(timezone.utc)
            data = SessionData(session_id=session_id, created_at=now, updated_at=now)
            self.sessions[session_id] = data
        return data

    def get(self, session_id: str, key: str) -> Optional[str]:
        data = self.sessions.get(session_id)
        if data is None:
            return None
        return data.values.get(key)

    def set(self, session_id: str, key: str, value: str) -> None:
        data = self._get_or_create(session_id)
        data.values[key] = value
        data.touch()

    def delete(self, session_id: str, key: str) -> None:
        data = self.sessions.get(session_id)
        if data is not None:
            data.values.pop(key, None)
            data.touch()

    def cleanup_old_sessions(self, max_age_hours: int = 24) -> int:
        """Remove sessions older than max_age_hours"""
        now = datetime.now(timezone.utc)
        old_sessions = [
            sid for sid, data in self.sessions.items()
            if (now - data.updated_at).total_seconds() > max_age_hours * 3600
        ]
        for sid in old_sessions:
            del self.sessions[sid]
        return len(old_sessions)


# Singleton instance
session_store = InMemorySessionStore()
