"""
Request Identity

Resolves who is calling. Authentication itself is handled by the hosted
backend; this service only reads the identity it forwards.
"""

import logging
from typing import Optional

from fastapi import Depends, Header, HTTPException, Request

logger = logging.getLogger(__name__)


class IdentityDependency:
    """
    FastAPI dependency returning the current user id.

    Without a user id the request is anonymous; cart operations are then
    answered with a sign-in prompt.
    """

    def __init__(self, require_user: bool = False):
        """
        Args:
            require_user: If True, reject anonymous requests
        """
        self.require_user = require_user

    async def __call__(self, request: Request) -> Optional[str]:
        user_id = request.headers.get("X-User-Id")
        user_id = user_id.strip() if user_id else None

        if self.require_user and not user_id:
            raise HTTPException(status_code=401, detail="Please sign in to continue.")

        request.state.user_id = user_id or None
        return user_id or None


def get_session_id(
    x_session_id: Optional[str] = Header(None),
    x_user_id: Optional[str] = Header(None),
) -> Optional[str]:
    """Browsing session id; falls back to one session per user, None when anonymous"""
    session_id = x_session_id.strip() if x_session_id else ""
    if session_id:
        return session_id
    user_id = x_user_id.strip() if x_user_id else ""
    if user_id:
        return f"user:{user_id}"
    return None


def require_session(session_id: Optional[str] = Depends(get_session_id)) -> str:
    """Session id for session-scoped state; anonymous callers must send X-Session-Id"""
    if not session_id:
        raise HTTPException(status_code=400, detail="Missing X-Session-Id header.")
    return session_id


# Dependency instances
get_current_user_id = IdentityDependency(require_user=False)
require_user = IdentityDependency(require_user=True)
