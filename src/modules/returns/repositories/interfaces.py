"""Return policy repository interface."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.returns.models import ReturnPolicy


class IReturnPolicyRepository(IRepository["ReturnPolicy"]):
    """Repository contract for the return policy configuration row."""

    @abstractmethod
    def get_current(self) -> ReturnPolicy:
        """Return the policy row, creating it with defaults if absent."""

    @abstractmethod
    def get_current_for_update(self) -> ReturnPolicy:
        """Return the policy row holding a row-level lock until commit."""
