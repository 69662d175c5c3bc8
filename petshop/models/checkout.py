"""Checkout models for the pet shop"""

from decimal import Decimal
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from enum import Enum


class DeliveryMethod(str, Enum):
    STANDARD = "standard"
    EXPRESS = "express"


class PayMode(str, Enum):
    CARD = "card"
    UPI = "upi"
    NETBANKING = "netbanking"
    WALLET = "wallet"


class CheckoutState(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    COMMITTING = "committing"
    SUCCESS = "success"
    FAILED = "failed"


class Contact(BaseModel):
    """Contact details for order"""
    email: str = ""
    phone: str = ""


class ShippingAddress(BaseModel):
    """Shipping address for order"""
    name: str = ""
    line1: str = ""
    line2: str = ""
    city: str = ""
    state: str = ""
    pincode: str = ""


class PriceBreakdown(BaseModel):
    """Derived price summary of a cart"""
    subtotal: Decimal = Decimal("0")
    cgst: Decimal = Decimal("0")
    sgst: Decimal = Decimal("0")
    total_tax: Decimal = Decimal("0")
    delivery_fee: Decimal = Decimal("0")
    promo_code: Optional[str] = None
    promo_discount: Decimal = Decimal("0")
    total: Decimal = Decimal("0")

    class Config:
        frozen = True


class CheckoutRequest(BaseModel):
    """Request to place an order from the current cart"""
    contact: Contact
    address: ShippingAddress
    delivery: DeliveryMethod = DeliveryMethod.STANDARD
    pay_mode: PayMode = PayMode.CARD


class OrderItem(BaseModel):
    """Item frozen into an order"""
    id: str
    product_id: str
    name: str
    unit_price: Decimal
    quantity: int = Field(ge=1)
    image_url: Optional[str] = None

    class Config:
        frozen = True


class OrderSnapshot(BaseModel):
    """Completed (simulated) purchase"""
    order_id: str
    placed_at: datetime
    items: tuple[OrderItem, ...]
    summary: PriceBreakdown
    contact: Contact
    address: ShippingAddress
    delivery: DeliveryMethod
    pay_mode: PayMode
    currency: str = "INR"

    class Config:
        frozen = True


class CheckoutResponse(BaseModel):
    """Response from checkout"""
    success: bool
    state: CheckoutState
    order: Optional[OrderSnapshot] = None
    error_message: Optional[str] = None


class CheckoutReadiness(BaseModel):
    """Whether the order can be placed with the given details"""
    ready: bool
    problems: list[str] = []


class InvoiceRow(BaseModel):
    label: str
    value: Decimal


class Invoice(BaseModel):
    """Printable summary of the last order"""
    order_id: str
    placed_at: datetime
    rows: list[InvoiceRow]
    total: str
    payment_method: str
    delivery_type: str
    lines: list[str]
