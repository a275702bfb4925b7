"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF Serializers)
and the Service layer.  DTOs are immutable (``frozen=True``) and
strip surrounding whitespace from every string before validating it.

- ``CreateOrderDTO``: input for order placement (shipping + payment).
- ``UpdateOrderStatusDTO``: input for the admin status setter.
- ``AssignDeliveryDTO``: input for delivery partner assignment.
- ``VerifyPaymentDTO``: input for payment verification.
- ``OrderStatsDTO``: output of the admin dashboard counters.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Dict, Optional, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator

from modules.orders.constants import (
    MIN_ADDRESS_LINE_LENGTH,
    MIN_CITY_LENGTH,
    MIN_PARTNER_NAME_LENGTH,
    MIN_PHONE_LENGTH,
    MIN_POSTAL_CODE_LENGTH,
    MIN_STATE_LENGTH,
    VERIFIABLE_PAYMENT_STATUSES,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
    PaymentType,
)

_SHIPPING_MIN_LENGTHS: Dict[str, tuple[int, str]] = {
    "address_line": (MIN_ADDRESS_LINE_LENGTH, "Address line"),
    "city": (MIN_CITY_LENGTH, "City"),
    "state": (MIN_STATE_LENGTH, "State"),
    "postal_code": (MIN_POSTAL_CODE_LENGTH, "Postal code"),
    "phone": (MIN_PHONE_LENGTH, "Phone number"),
}


def _require_choice(value: str, choices: type, label: str) -> str:
    if value not in choices.values:
        allowed = ", ".join(choices.values)
        raise ValueError(f"Invalid {label} '{value}'. Allowed: {allowed}.")
    return value


# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class CreateOrderDTO(BaseModel):
    """Immutable DTO for order placement requests.

    Validates (after trimming):
    - ``quantity`` is at least 1.
    - shipping fields meet their minimum lengths; ``area`` is optional.
    - payment enums hold known values.

    ``payment_status`` is optional: the service derives it from
    ``payment_type`` when the caller does not assert one.
    ``payment_verified`` is deliberately absent.
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    customer_id: UUID
    product_id: UUID
    quantity: int
    size: str = ""
    address_line: str
    area: str = ""
    city: str
    state: str
    postal_code: str
    phone: str
    payment_type: str = PaymentType.CASH_ON_DELIVERY
    payment_method: str = PaymentMethod.CASH
    payment_status: Optional[str] = None
    payment_id: str = ""
    payment_amount: Optional[Decimal] = None

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Quantity must be at least 1.")
        return v

    @field_validator("address_line", "city", "state", "postal_code", "phone")
    @classmethod
    def shipping_field_min_length(cls, v: str, info: ValidationInfo) -> str:
        minimum, label = _SHIPPING_MIN_LENGTHS[info.field_name]
        if len(v) < minimum:
            raise ValueError(f"{label} must be at least {minimum} characters.")
        return v

    @field_validator("payment_type")
    @classmethod
    def payment_type_must_be_known(cls, v: str) -> str:
        return _require_choice(v, PaymentType, "payment type")

    @field_validator("payment_method")
    @classmethod
    def payment_method_must_be_known(cls, v: str) -> str:
        return _require_choice(v, PaymentMethod, "payment method")

    @field_validator("payment_status")
    @classmethod
    def payment_status_must_be_known(cls, v: Optional[str]) -> Optional[str]:
        if v is None or v == "":
            return None
        return _require_choice(v, PaymentStatus, "payment status")

    @field_validator("payment_amount")
    @classmethod
    def payment_amount_not_negative(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        if v is not None and v < 0:
            raise ValueError("Payment amount cannot be negative.")
        return v


class UpdateOrderStatusDTO(BaseModel):
    """Immutable DTO for the admin lifecycle status setter."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    status: str
    notes: str = ""

    @field_validator("status")
    @classmethod
    def status_must_be_known(cls, v: str) -> str:
        return _require_choice(v, OrderStatus, "order status")


class AssignDeliveryDTO(BaseModel):
    """Immutable DTO for delivery partner assignment.

    ``estimated_delivery`` accepts a date or datetime; whether it lies in
    the past is decided by the service against the current clock.
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    partner_name: str
    partner_phone: str
    estimated_delivery: Optional[Union[datetime, date]] = None

    @field_validator("partner_name")
    @classmethod
    def partner_name_min_length(cls, v: str) -> str:
        if len(v) < MIN_PARTNER_NAME_LENGTH:
            raise ValueError(
                f"Delivery partner name must be at least "
                f"{MIN_PARTNER_NAME_LENGTH} characters."
            )
        return v

    @field_validator("partner_phone")
    @classmethod
    def partner_phone_min_length(cls, v: str) -> str:
        if len(v) < MIN_PHONE_LENGTH:
            raise ValueError(
                f"Delivery partner phone must be at least {MIN_PHONE_LENGTH} characters."
            )
        return v


class VerifyPaymentDTO(BaseModel):
    """Immutable DTO for payment verification (Paid or Failed only)."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    payment_status: str

    @field_validator("payment_status")
    @classmethod
    def payment_status_must_be_verifiable(cls, v: str) -> str:
        if v not in VERIFIABLE_PAYMENT_STATUSES:
            allowed = ", ".join(sorted(VERIFIABLE_PAYMENT_STATUSES))
            raise ValueError(f"Invalid payment status '{v}'. Allowed: {allowed}.")
        return v


# ---------------------------------------------------------------------------
# Output DTOs
# ---------------------------------------------------------------------------


class OrderStatsDTO(BaseModel):
    """Immutable DTO for the admin dashboard counters."""

    model_config = ConfigDict(frozen=True)

    total_orders: int
    by_status: Dict[str, int]
    returns_requested: int
    returns_approved: int
    returns_completed: int
