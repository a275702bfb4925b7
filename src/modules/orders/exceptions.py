"""Order domain exceptions.

Raised by the Service Layer when business rules are violated.
The API layer (Views) catches these and translates them into
appropriate HTTP responses through their taxonomy base class.
"""

from __future__ import annotations

from shared.domain.exceptions import (
    ActionNotAllowed,
    ConcurrencyConflict,
    EntityNotFound,
    InvalidInput,
    InvalidState,
)


class InvalidOrderData(InvalidInput):
    """Order input failed validation (names the offending field)."""


class OrderNotFound(EntityNotFound):
    """The requested order does not exist."""


class OrderAccessDenied(ActionNotAllowed):
    """The caller is not the purchaser of the order."""


class InactiveCustomer(ActionNotAllowed):
    """The customer is inactive and cannot place orders."""


class InvalidOrderStatus(InvalidState):
    """The order's lifecycle status does not allow the operation."""


class OrderConflict(ConcurrencyConflict):
    """The order was modified by a concurrent writer."""
