"""
Checkout

Freezes the cart and its price breakdown into an order snapshot and clears
the cart. The snapshot only becomes the session's last order once the
ledger has confirmed the clear.
"""

import logging
import secrets
import string
from datetime import datetime, timezone
from typing import Iterable, Optional

from kungfu import Result, Ok, Error

from ..core.errors import ShopError, PreconditionFailure, SIGN_IN_REQUIRED, BUSY, persistence
from ..core.session import SessionStore, LAST_ORDER_KEY
from ..models.cart import CartLine
from ..models.checkout import (
    CheckoutState,
    Contact,
    DeliveryMethod,
    OrderItem,
    OrderSnapshot,
    PayMode,
    PriceBreakdown,
    ShippingAddress,
)
from .cart import CartView
from .pricing import PricingPolicy, DEFAULT_POLICY, compute_breakdown
from .promo import PromoService

logger = logging.getLogger(__name__)

BASE36 = string.digits + string.ascii_uppercase

# Minimum trimmed lengths of the address fields
ADDRESS_MIN_LENGTHS = {
    "name": 2,
    "line1": 3,
    "city": 2,
    "state": 2,
    "pincode": 4,
}
PHONE_MIN_LENGTH = 8


def to_base36(number: int) -> str:
    if number == 0:
        return "0"
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(BASE36[remainder])
    return "".join(reversed(digits))


def generate_order_id(now: Optional[datetime] = None, suffix_length: int = 3) -> str:
    """Time-based order token, e.g. BM-LZ8K3Q1A-7QX; not a durable primary key"""
    now = now or datetime.now(timezone.utc)
    stamp = to_base36(int(now.timestamp() * 1000))
    suffix = "".join(secrets.choice(BASE36) for _ in range(suffix_length))
    return f"BM-{stamp}-{suffix}"


def contact_problems(contact: Contact) -> list[str]:
    problems = []
    if "@" not in contact.email.strip():
        problems.append("email")
    if len(contact.phone.strip()) < PHONE_MIN_LENGTH:
        problems.append("phone")
    return problems


def address_problems(address: ShippingAddress) -> list[str]:
    return [
        field
        for field, minimum in ADDRESS_MIN_LENGTHS.items()
        if len(getattr(address, field).strip()) < minimum
    ]


def is_valid_form(contact: Contact, address: ShippingAddress) -> bool:
    return not contact_problems(contact) and not address_problems(address)


def build_snapshot(
    lines: Iterable[CartLine],
    breakdown: PriceBreakdown,
    contact: Contact,
    address: ShippingAddress,
    delivery: DeliveryMethod,
    pay_mode: PayMode,
    now: Optional[datetime] = None,
    currency: str = "INR",
) -> OrderSnapshot:
    """
    Freeze an order.

    Raises:
        PreconditionFailure: empty cart, or contact/address details incomplete
    """
    lines = list(lines)
    if not lines:
        raise PreconditionFailure("Your cart is empty.")

    problems = contact_problems(contact) + address_problems(address)
    if problems:
        raise PreconditionFailure(
            f"Please fill contact & shipping details ({', '.join(problems)})."
        )

    now = now or datetime.now(timezone.utc)
    items = tuple(
        OrderItem(
            id=line.id,
            product_id=line.product_id,
            name=line.name,
            unit_price=line.unit_price,
            quantity=line.quantity,
            image_url=line.image_url,
        )
        for line in lines
    )
    return OrderSnapshot(
        order_id=generate_order_id(now),
        placed_at=now,
        items=items,
        summary=breakdown,
        contact=contact.model_copy(),
        address=address.model_copy(),
        delivery=delivery,
        pay_mode=pay_mode,
        currency=currency,
    )


def load_last_order(store: SessionStore, session_id: str) -> Optional[OrderSnapshot]:
    """The session's most recent completed order"""
    raw = store.get(session_id, LAST_ORDER_KEY)
    if not raw:
        return None
    return OrderSnapshot.model_validate_json(raw)


class CheckoutFlow:
    """
    Checkout of one session's cart.

    idle -> validating -> committing -> success, or back to idle with a
    message when validation or the cart clear fails. Nothing is retried.
    """

    def __init__(
        self,
        session_id: Optional[str],
        cart: CartView,
        promos: PromoService,
        store: SessionStore,
        policy: PricingPolicy = DEFAULT_POLICY,
        currency: str = "INR",
    ):
        self.session_id = session_id
        self.cart = cart
        self.promos = promos
        self.store = store
        self.policy = policy
        self.currency = currency
        self.state = CheckoutState.IDLE
        self.history: list[CheckoutState] = [CheckoutState.IDLE]
        self.message: Optional[str] = None

    def _enter(self, state: CheckoutState) -> None:
        self.state = state
        self.history.append(state)

    def _fail(self, error: ShopError) -> Result[OrderSnapshot, ShopError]:
        self._enter(CheckoutState.FAILED)
        self._enter(CheckoutState.IDLE)
        self.message = error.message
        return Error(error)

    def breakdown(self, delivery: DeliveryMethod = DeliveryMethod.STANDARD) -> PriceBreakdown:
        """Price the cart as it is right now"""
        return compute_breakdown(
            self.cart.lines,
            delivery,
            self.promos.current(self.session_id),
            self.policy,
        )

    def problems(self, contact: Contact, address: ShippingAddress) -> list[str]:
        """Fields still blocking the order; empty when it can be placed"""
        problems = contact_problems(contact) + address_problems(address)
        if not self.cart.lines:
            problems.insert(0, "cart")
        return problems

    def can_place(self, contact: Contact, address: ShippingAddress) -> bool:
        """Whether place_order would get past validation right now"""
        return (
            self.state == CheckoutState.IDLE
            and bool(self.cart.user_id)
            and not self.cart.busy
            and bool(self.cart.lines)
            and is_valid_form(contact, address)
        )

    async def place_order(
        self,
        contact: Contact,
        address: ShippingAddress,
        delivery: DeliveryMethod = DeliveryMethod.STANDARD,
        pay_mode: PayMode = PayMode.CARD,
    ) -> Result[OrderSnapshot, ShopError]:
        """Validate, snapshot and commit the order"""
        if not self.cart.user_id:
            return self._fail(SIGN_IN_REQUIRED)
        if self.state != CheckoutState.IDLE or self.cart.busy:
            return Error(BUSY)

        self.message = None
        self._enter(CheckoutState.VALIDATING)

        # The snapshot covers exactly the ledger rows the commit clears
        match await self.cart.load():
            case Error(_):
                return self._fail(persistence("Could not load your cart. Please try again."))

        try:
            snapshot = build_snapshot(
                self.cart.lines,
                self.breakdown(delivery),
                contact,
                address,
                delivery,
                pay_mode,
                currency=self.currency,
            )
        except PreconditionFailure as e:
            return self._fail(e.error)

        self._enter(CheckoutState.COMMITTING)
        match await self.cart.clear():
            case Error(e):
                return self._fail(ShopError(e.kind, "Could not clear cart. Please try again."))

        self.store.set(self.session_id, LAST_ORDER_KEY, snapshot.model_dump_json())
        self.promos.remove(self.session_id)
        self._enter(CheckoutState.SUCCESS)

        logger.info(
            f"Order {snapshot.order_id} placed: {self.currency} {snapshot.summary.total} "
            f"({len(snapshot.items)} lines, {delivery.value} delivery)"
        )
        return Ok(snapshot)
