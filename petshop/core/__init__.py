# Core modules

from .config import settings
from .session import SessionStore, InMemorySessionStore, session_store
from .errors import ErrorKind, ShopError, PreconditionFailure

__all__ = [
    "settings",
    "SessionStore",
    "InMemorySessionStore",
    "session_store",
    "ErrorKind",
    "ShopError",
    "PreconditionFailure",
]
