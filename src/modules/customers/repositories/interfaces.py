"""Customer repository interface.

Extends ``IRepository[Customer]`` with the look-ups the order core
needs from the purchaser record store.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.customers.models import Customer


class ICustomerRepository(IRepository["Customer"]):
    """Repository contract for the Customer aggregate."""

    @abstractmethod
    def get_or_create_for_user(self, user: Any) -> Customer:
        """Return the purchaser profile of an authenticated user.

        The profile is created from the user's account data on first use.
        """
