"""Domain events for the Orders bounded context."""

from __future__ import annotations

from dataclasses import dataclass

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class OrderPlaced(DomainEvent):
    """Raised when a purchaser places an order."""

    customer_id: str = ""
    payment_type: str = ""


@dataclass(frozen=True)
class OrderStatusChanged(DomainEvent):
    """Raised when an order's lifecycle status changes."""

    old_status: str = ""
    new_status: str = ""


@dataclass(frozen=True)
class DeliveryAssigned(DomainEvent):
    """Raised when a delivery partner is (re)assigned."""

    tracking_id: str = ""
    partner_name: str = ""


@dataclass(frozen=True)
class PaymentVerified(DomainEvent):
    """Raised when an admin records the outcome of a payment."""

    payment_status: str = ""
