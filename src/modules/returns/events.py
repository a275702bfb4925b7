"""Domain events for the Returns bounded context."""

from __future__ import annotations

from dataclasses import dataclass

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class ReturnRequested(DomainEvent):
    """Raised when a purchaser asks to return a delivered order."""

    days_since_delivery: int = 0


@dataclass(frozen=True)
class ReturnStatusChanged(DomainEvent):
    """Raised when an admin approves, rejects or completes a return."""

    old_return_status: str = ""
    new_return_status: str = ""
