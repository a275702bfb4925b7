"""Order service layer (Use Cases).

Orchestrates the order lifecycle: placement, admin status changes,
delivery partner assignment and payment verification.  All write
operations are atomic and the service defines the unit-of-work boundary.

Business rules enforced:
- The purchaser must exist and be active.
- Status transitions are validated against the lifecycle state machine;
  terminal states (Rejected, Delivered) are never left.
- ``delivered_date`` is stamped only when the order becomes Delivered.
- Delivery assignment requires status Accepted or Assigned, generates the
  tracking ID once and advances Accepted to Assigned.
- ``payment_verified`` only becomes true through ``verify_payment``.
- History is recorded on every lifecycle status change.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, List, Optional
from uuid import UUID

import structlog
from django.db import transaction
from django.db.models import QuerySet
from django.utils import timezone

from modules.customers.exceptions import CustomerNotFound
from modules.orders.constants import (
    ASSIGNABLE_STATES,
    VALID_TRANSITIONS,
    OrderStatus,
    PaymentStatus,
    PaymentType,
    ReturnStatus,
)
from modules.orders.delivery import generate_tracking_id, resolve_estimated_delivery
from modules.orders.dtos import OrderStatsDTO
from modules.orders.events import (
    DeliveryAssigned,
    OrderPlaced,
    OrderStatusChanged,
    PaymentVerified,
)
from modules.orders.exceptions import (
    InactiveCustomer,
    InvalidOrderStatus,
    OrderAccessDenied,
    OrderNotFound,
)
from modules.orders.models import Order

if TYPE_CHECKING:
    from modules.customers.repositories.interfaces import ICustomerRepository
    from modules.orders.dtos import (
        AssignDeliveryDTO,
        CreateOrderDTO,
        UpdateOrderStatusDTO,
        VerifyPaymentDTO,
    )
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class OrderService:
    """Application service for Order use-cases.

    Receives repositories via constructor injection (DIP).
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        customer_repository: ICustomerRepository,
        product_repository: IProductRepository,
    ) -> None:
        self._order_repo = order_repository
        self._customer_repo = customer_repository
        self._product_repo = product_repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_order(self, dto: CreateOrderDTO) -> Order:
        """Place a new order for a purchaser.

        ``payment_amount`` defaults to the flat ``price * quantity`` when
        the product resolves (0 otherwise); ``payment_status`` defaults to
        Paid for online payments and Pending for cash on delivery.

        Raises:
            CustomerNotFound: purchaser does not exist.
            InactiveCustomer: purchaser is inactive.
        """
        log = logger.bind(
            customer_id=str(dto.customer_id), product_id=str(dto.product_id)
        )
        log.info("order.creation_started")

        customer = self._customer_repo.get_by_id(str(dto.customer_id))
        if not customer:
            raise CustomerNotFound(f"Customer {dto.customer_id} not found.")
        if not customer.is_active:
            raise InactiveCustomer(f"Customer {dto.customer_id} is inactive.")

        payment_amount = dto.payment_amount
        if payment_amount is None:
            product = self._product_repo.get_by_id(str(dto.product_id))
            payment_amount = (
                product.price * dto.quantity if product else Decimal("0.00")
            )

        payment_status = dto.payment_status
        if payment_status is None:
            payment_status = (
                PaymentStatus.PAID
                if dto.payment_type == PaymentType.ONLINE
                else PaymentStatus.PENDING
            )

        order = Order(
            customer_id=dto.customer_id,
            product_id=dto.product_id,
            quantity=dto.quantity,
            size=dto.size,
            address_line=dto.address_line,
            area=dto.area,
            city=dto.city,
            state=dto.state,
            postal_code=dto.postal_code,
            phone=dto.phone,
            delivery_address=Order.build_delivery_address(
                dto.address_line, dto.area, dto.city, dto.state, dto.postal_code
            ),
            status=OrderStatus.PENDING,
            payment_type=dto.payment_type,
            payment_method=dto.payment_method,
            payment_status=payment_status,
            payment_id=dto.payment_id,
            payment_amount=payment_amount,
            payment_verified=False,
        )
        order.add_domain_event(
            OrderPlaced(
                aggregate_id=order.id,
                customer_id=str(dto.customer_id),
                payment_type=dto.payment_type,
            )
        )
        self._order_repo.save(order)

        self._order_repo.add_history(
            order_id=order.id,
            status=OrderStatus.PENDING,
            notes="Order placed",
        )

        log.info("order.created", order_id=str(order.id))
        return order

    @transaction.atomic
    def update_status(
        self,
        order_id: UUID,
        dto: UpdateOrderStatusDTO,
        actor_id: Optional[Any] = None,
    ) -> Order:
        """Move an order to a new lifecycle status (admin).

        Acquires a row-level lock before validating the transition so
        concurrent writers re-evaluate against the committed state.

        Raises:
            OrderNotFound: order does not exist.
            InvalidOrderStatus: the move would regress, repeat the current
                status or leave a terminal state.
            OrderConflict: the row changed underneath the lock.
        """
        order = self._load_for_update(order_id)
        new_status = dto.status

        log = logger.bind(
            order_id=str(order_id),
            current_status=order.status,
            new_status=new_status,
        )

        if not order.can_transition_to(new_status):
            log.warning("order.invalid_transition")
            raise InvalidOrderStatus(
                f"Cannot transition from {order.status} to {new_status}.",
                current=order.status,
                required=[
                    status
                    for status, targets in VALID_TRANSITIONS.items()
                    if new_status in targets
                ],
            )

        old_status = order.status
        order.apply_status(new_status)
        order.add_domain_event(
            OrderStatusChanged(
                aggregate_id=order.id, old_status=old_status, new_status=new_status
            )
        )
        self._order_repo.save(order)

        self._order_repo.add_history(
            order_id=order.id,
            status=new_status,
            notes=dto.notes,
            old_status=old_status,
            user_id=actor_id,
        )

        log.info("order.status_updated")
        return order

    @transaction.atomic
    def assign_delivery(
        self,
        order_id: UUID,
        dto: AssignDeliveryDTO,
        actor_id: Optional[Any] = None,
    ) -> Order:
        """Assign (or reassign) a delivery partner (admin).

        The tracking ID and estimated delivery are set on the first
        assignment only; partner name and phone are rewritten every time.
        An Accepted order advances to Assigned.

        Raises:
            OrderNotFound: order does not exist.
            InvalidOrderStatus: order is not Accepted or Assigned.
            InvalidOrderData: supplied estimated delivery lies in the past.
        """
        now = timezone.now()
        estimated_delivery = resolve_estimated_delivery(dto.estimated_delivery, now)

        order = self._load_for_update(order_id)
        log = logger.bind(order_id=str(order_id), current_status=order.status)

        if not order.can_assign_delivery:
            log.warning("order.assignment_not_allowed")
            raise InvalidOrderStatus(
                "Order must be accepted before assigning a delivery partner.",
                current=order.status,
                required=ASSIGNABLE_STATES,
            )

        order.delivery_partner_name = dto.partner_name
        order.delivery_partner_phone = dto.partner_phone
        if not order.tracking_id:
            order.tracking_id = generate_tracking_id(now)
        if order.estimated_delivery is None:
            order.estimated_delivery = estimated_delivery

        old_status = order.status
        if old_status == OrderStatus.ACCEPTED:
            order.apply_status(OrderStatus.ASSIGNED)
            order.add_domain_event(
                OrderStatusChanged(
                    aggregate_id=order.id,
                    old_status=old_status,
                    new_status=OrderStatus.ASSIGNED,
                )
            )
        order.add_domain_event(
            DeliveryAssigned(
                aggregate_id=order.id,
                tracking_id=order.tracking_id,
                partner_name=order.delivery_partner_name,
            )
        )
        self._order_repo.save(order)

        if old_status != order.status:
            self._order_repo.add_history(
                order_id=order.id,
                status=order.status,
                notes=f"Delivery partner assigned: {order.delivery_partner_name}",
                old_status=old_status,
                user_id=actor_id,
            )

        log.info("order.delivery_assigned", tracking_id=order.tracking_id)
        return order

    @transaction.atomic
    def verify_payment(self, order_id: UUID, dto: VerifyPaymentDTO) -> Order:
        """Record an externally asserted payment outcome (admin).

        Applies regardless of the lifecycle status.

        Raises:
            OrderNotFound: order does not exist.
        """
        order = self._load_for_update(order_id)

        order.payment_status = dto.payment_status
        order.payment_verified = True
        order.payment_verified_at = timezone.now()
        order.add_domain_event(
            PaymentVerified(aggregate_id=order.id, payment_status=dto.payment_status)
        )
        self._order_repo.save(order)

        logger.info(
            "order.payment_verified",
            order_id=str(order_id),
            payment_status=dto.payment_status,
        )
        return order

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id: str, customer_id: Optional[UUID] = None) -> Order:
        """Retrieve a single order by ID.

        When ``customer_id`` is given the order must belong to that
        purchaser; admins call without it.

        Raises:
            OrderNotFound: if the order does not exist.
            OrderAccessDenied: if the order belongs to someone else.
        """
        order = self._order_repo.get_by_id(order_id)
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        if customer_id is not None and order.customer_id != customer_id:
            raise OrderAccessDenied("You can only view your own orders.")
        return order

    def list_orders(self, filters: Optional[Dict[str, Any]] = None) -> QuerySet:
        """Return all orders newest first, optionally filtered."""
        return self._order_repo.list(filters)

    def list_my_orders(self, customer_id: UUID) -> List[Order]:
        """Return a purchaser's orders newest first, skipping orphaned products."""
        return self._order_repo.list_for_customer(customer_id)

    def get_stats(self) -> OrderStatsDTO:
        """Dashboard counters: totals per lifecycle status and return progress."""
        by_status = {status: 0 for status in OrderStatus.values}
        by_status.update(self._order_repo.count_by_status())
        by_return = self._order_repo.count_by_return_status()
        return OrderStatsDTO(
            total_orders=sum(by_status.values()),
            by_status=by_status,
            returns_requested=by_return.get(ReturnStatus.REQUESTED, 0),
            returns_approved=by_return.get(ReturnStatus.APPROVED, 0),
            returns_completed=by_return.get(ReturnStatus.COMPLETED, 0),
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _load_for_update(self, order_id: UUID) -> Order:
        order = self._order_repo.get_for_update(str(order_id))
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order
