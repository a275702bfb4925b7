"""Return workflow services.

- ``ReturnPolicyService``: reads and writes the configurable return window.
- ``ReturnService``: purchaser return requests and admin return decisions.

Business rules enforced:
- Only the purchaser may request a return, only for a Delivered order
  whose return status is still None, and only within the policy window
  (``floor((now - delivered_date) / 1 day) <= return_days``).
- The policy is read fresh on every request.
- Approve/Reject require a Requested return; Complete requires Approved.
"""

from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING
from uuid import UUID

import structlog
from django.db import transaction
from django.utils import timezone

from modules.orders.constants import OrderStatus, ReturnStatus
from modules.orders.exceptions import (
    InvalidOrderStatus,
    OrderAccessDenied,
    OrderNotFound,
)
from modules.returns.events import ReturnRequested, ReturnStatusChanged
from modules.returns.exceptions import InvalidReturnStatus, ReturnWindowExpired

if TYPE_CHECKING:
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.returns.dtos import (
        RequestReturnDTO,
        UpdateReturnPolicyDTO,
        UpdateReturnStatusDTO,
    )
    from modules.returns.models import ReturnPolicy
    from modules.returns.repositories.interfaces import IReturnPolicyRepository

logger = structlog.get_logger(__name__)


class ReturnPolicyService:
    """Application service for the return window configuration."""

    def __init__(self, policy_repository: IReturnPolicyRepository) -> None:
        self._policy_repo = policy_repository

    def get_policy(self) -> ReturnPolicy:
        return self._policy_repo.get_current()

    def get_return_days(self) -> int:
        return self._policy_repo.get_current().return_days

    @transaction.atomic
    def set_policy(self, dto: UpdateReturnPolicyDTO) -> ReturnPolicy:
        """Update the return window under a row lock (single writer)."""
        policy = self._policy_repo.get_current_for_update()
        old_days = policy.return_days
        policy.return_days = dto.return_days
        self._policy_repo.save(policy)
        logger.info(
            "return_policy.updated",
            old_return_days=old_days,
            return_days=dto.return_days,
        )
        return policy


class ReturnService:
    """Application service for the post-delivery return workflow."""

    def __init__(
        self,
        order_repository: IOrderRepository,
        policy_service: ReturnPolicyService,
    ) -> None:
        self._order_repo = order_repository
        self._policy_service = policy_service

    @transaction.atomic
    def request_return(
        self,
        order_id: UUID,
        customer_id: UUID,
        dto: RequestReturnDTO,
    ) -> Order:
        """Open a return for a delivered order (purchaser).

        Raises:
            OrderNotFound: order does not exist.
            OrderAccessDenied: caller is not the purchaser.
            InvalidOrderStatus: order is not Delivered or has no delivery date.
            InvalidReturnStatus: a return was already requested or processed.
            ReturnWindowExpired: the policy window has elapsed.
        """
        order = self._order_repo.get_for_update(str(order_id))
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")

        log = logger.bind(order_id=str(order_id), customer_id=str(customer_id))

        if order.customer_id != customer_id:
            log.warning("order.return_access_denied")
            raise OrderAccessDenied("You can only return your own orders.")
        if order.status != OrderStatus.DELIVERED:
            raise InvalidOrderStatus(
                "Only delivered orders can be returned.",
                current=order.status,
                required=[OrderStatus.DELIVERED],
            )
        if order.return_status != ReturnStatus.NONE:
            raise InvalidReturnStatus(
                "Return already requested or processed.",
                current=order.return_status,
                required=[ReturnStatus.NONE],
            )
        if order.delivered_date is None:
            raise InvalidOrderStatus(
                "Order delivery date is not recorded.",
                current=order.status,
            )

        now = timezone.now()
        days_since_delivery = (now - order.delivered_date) // timedelta(days=1)
        return_days = self._policy_service.get_return_days()
        if days_since_delivery > return_days:
            log.info(
                "order.return_window_expired",
                days_since_delivery=days_since_delivery,
                return_days=return_days,
            )
            raise ReturnWindowExpired(
                f"Return period expired. You can only return within "
                f"{return_days} days of delivery.",
                days_since_delivery=days_since_delivery,
                return_days=return_days,
            )

        order.return_status = ReturnStatus.REQUESTED
        order.return_reason = dto.reason
        order.return_request_date = now
        order.add_domain_event(
            ReturnRequested(
                aggregate_id=order.id, days_since_delivery=days_since_delivery
            )
        )
        self._order_repo.save(order)

        log.info("order.return_requested", days_since_delivery=days_since_delivery)
        return order

    @transaction.atomic
    def update_return_status(
        self,
        order_id: UUID,
        dto: UpdateReturnStatusDTO,
    ) -> Order:
        """Approve, reject or complete a return (admin).

        Raises:
            OrderNotFound: order does not exist.
            InvalidReturnStatus: the current return status does not allow it.
        """
        order = self._order_repo.get_for_update(str(order_id))
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")

        new_status = dto.return_status
        log = logger.bind(
            order_id=str(order_id),
            current_return_status=order.return_status,
            new_return_status=new_status,
        )

        if not order.can_transition_return_to(new_status):
            log.warning("order.invalid_return_transition")
            if new_status == ReturnStatus.COMPLETED:
                raise InvalidReturnStatus(
                    "Only approved returns can be completed.",
                    current=order.return_status,
                    required=[ReturnStatus.APPROVED],
                )
            raise InvalidReturnStatus(
                "Only requested returns can be approved or rejected.",
                current=order.return_status,
                required=[ReturnStatus.REQUESTED],
            )

        old_status = order.return_status
        order.return_status = new_status
        if new_status == ReturnStatus.APPROVED:
            order.return_approved_date = timezone.now()
        order.add_domain_event(
            ReturnStatusChanged(
                aggregate_id=order.id,
                old_return_status=old_status,
                new_return_status=new_status,
            )
        )
        self._order_repo.save(order)

        log.info("order.return_status_updated")
        return order
