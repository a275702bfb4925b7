"""Return workflow exceptions."""

from __future__ import annotations

from typing import Any, Dict

from shared.domain.exceptions import InvalidInput, InvalidState, PolicyViolation


class InvalidReturnPolicy(InvalidInput):
    """The requested return window is outside 1..365 days."""


class InvalidReturnStatus(InvalidState):
    """The order's return status does not allow the operation."""


class ReturnWindowExpired(PolicyViolation):
    """The return window configured by the policy has elapsed."""

    def __init__(self, message: str, days_since_delivery: int, return_days: int) -> None:
        super().__init__(message)
        self.days_since_delivery = days_since_delivery
        self.return_days = return_days

    def context(self) -> Dict[str, Any]:
        return {
            "days_since_delivery": self.days_since_delivery,
            "return_days": self.return_days,
        }
