"""Order repository interface.

Extends ``IRepository[Order]`` with the methods required by the order
lifecycle: locked reads, version-checked saves, status history tracking,
per-purchaser listing and dashboard counters.

The Service Layer depends exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, List, Optional
from uuid import UUID

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from modules.orders.models import Order, OrderStatusHistory


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate root.

    The Order aggregate includes OrderStatusHistory records.  Mutations
    must be atomic; ``save`` on an existing order must fail with
    ``OrderConflict`` if the stored ``version`` moved on.
    """

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[Order]:
        """Retrieve an order with its product and purchaser joined."""

    @abstractmethod
    def get_for_update(self, id: str) -> Optional[Order]:
        """Retrieve an order holding a row-level lock until commit."""

    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> QuerySet:
        """All orders newest first, with product and purchaser joined."""

    @abstractmethod
    def list_for_customer(self, customer_id: UUID) -> List[Order]:
        """A purchaser's orders newest first, skipping orphaned products."""

    @abstractmethod
    def add_history(
        self,
        order_id: UUID,
        status: str,
        notes: str = "",
        old_status: Optional[str] = None,
        user_id: Optional[Any] = None,
    ) -> OrderStatusHistory:
        """Record a status change in the order's audit trail."""

    @abstractmethod
    def count_by_status(self) -> Dict[str, int]:
        """Number of orders per lifecycle status."""

    @abstractmethod
    def count_by_return_status(self) -> Dict[str, int]:
        """Number of orders per return status."""
