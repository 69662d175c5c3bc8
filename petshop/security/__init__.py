# Request identity

from .identity import get_current_user_id, require_user, get_session_id

__all__ = ["get_current_user_id", "require_user", "get_session_id"]
