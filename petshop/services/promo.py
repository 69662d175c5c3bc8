"""Promo code resolution and the session's applied promo"""

import logging
from decimal import Decimal
from typing import Optional

from kungfu import Result, Ok, Error

from ..core.session import SessionStore, PROMO_KEY
from ..models.promo import PromoCode, PromoRule, PromoRejection

logger = logging.getLogger(__name__)

PROMO_TABLE: dict[str, PromoRule] = {
    "WELCOME10": PromoRule(percent=Decimal("10"), description="Flat 10% off"),
}

REJECTION_MESSAGES = {
    PromoRejection.EMPTY: "Please enter a promo code.",
    PromoRejection.UNKNOWN: "Invalid promo code. Please try again.",
}


def resolve_promo(
    code_input: Optional[str],
    table: Optional[dict[str, PromoRule]] = None,
) -> Result[PromoCode, PromoRejection]:
    """Match a user-entered code against the allow-list, ignoring case and surrounding spaces"""
    table = PROMO_TABLE if table is None else table
    code = (code_input or "").strip().upper()
    if not code:
        return Error(PromoRejection.EMPTY)

    rule = table.get(code)
    if rule is None:
        return Error(PromoRejection.UNKNOWN)
    return Ok(PromoCode(code=code, rule=rule))


class PromoService:
    """The one promo applied in a browsing session"""

    def __init__(self, store: SessionStore, table: Optional[dict[str, PromoRule]] = None):
        self.store = store
        self.table = PROMO_TABLE if table is None else table

    def apply(self, session_id: str, code_input: Optional[str]) -> Result[PromoCode, PromoRejection]:
        """Apply a code, replacing any promo already applied"""
        result = resolve_promo(code_input, self.table)
        match result:
            case Ok(promo):
                self.store.set(session_id, PROMO_KEY, promo.code)
                logger.info(f"Promo {promo.code} applied for session {session_id}")
            case Error(reason):
                logger.debug(f"Promo rejected ({reason.value}) for session {session_id}")
        return result

    def remove(self, session_id: str) -> None:
        self.store.delete(session_id, PROMO_KEY)

    def current(self, session_id: Optional[str]) -> Optional[PromoCode]:
        """The applied promo; a stored code that no longer resolves counts as none"""
        if not session_id:
            return None
        saved = self.store.get(session_id, PROMO_KEY)
        if not saved:
            return None
        match resolve_promo(saved, self.table):
            case Ok(promo):
                return promo
            case Error(_):
                return None
