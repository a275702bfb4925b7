"""Order and OrderStatusHistory models.

Business rules implemented:
- Lifecycle status only moves forward (enforced at service layer through
  ``VALID_TRANSITIONS``; terminal states are never left).
- ``delivered_date`` is set iff status is Delivered (DB check constraint).
- ``return_status`` may leave None only for delivered orders (DB check).
- Each lifecycle status change generates a history record.
- Order number auto-generated as human-readable identifier.
- ``version`` is bumped on every persisted mutation (optimistic locking).
- Customer FK uses PROTECT to preserve financial history.
- Product reference is not FK-enforced: a deleted product leaves an
  orphaned reference that readers treat as "no product".
"""

from __future__ import annotations

import secrets
from decimal import Decimal
from typing import Any, Optional

import structlog
from django.conf import settings
from django.core.exceptions import ObjectDoesNotExist
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from modules.core.models import BaseModel
from modules.orders.constants import (
    ASSIGNABLE_STATES,
    ORDER_NUMBER_MAX_RETRIES,
    TERMINAL_STATES,
    VALID_RETURN_TRANSITIONS,
    VALID_TRANSITIONS,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
    PaymentType,
    ReturnStatus,
)
from shared.domain.events import DomainEventMixin

logger = structlog.get_logger(__name__)


class Order(DomainEventMixin, BaseModel):
    """Order aggregate root: one product line of a checkout.

    ``order_number`` is a human-readable identifier auto-generated on first
    save (format: ``ORD-YYYYMMDD-XXXXXX``).  The UUIDv7 ``id`` is used for
    all internal references and API lookups.
    """

    order_number = models.CharField(max_length=20, unique=True, editable=False)
    customer = models.ForeignKey(
        "customers.Customer",
        on_delete=models.PROTECT,
        related_name="orders",
    )
    product = models.ForeignKey(
        "products.Product",
        on_delete=models.DO_NOTHING,
        db_constraint=False,
        null=True,
        related_name="orders",
    )
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    size = models.CharField(max_length=50, blank=True, default="")

    # Shipping
    address_line = models.CharField(max_length=255)
    area = models.CharField(max_length=255, blank=True, default="")
    city = models.CharField(max_length=100)
    state = models.CharField(max_length=100)
    postal_code = models.CharField(max_length=20)
    phone = models.CharField(max_length=20)
    delivery_address = models.TextField()

    # Lifecycle
    status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING,
    )
    delivered_date = models.DateTimeField(null=True, blank=True)

    # Delivery assignment
    delivery_partner_name = models.CharField(max_length=255, blank=True, default="")
    delivery_partner_phone = models.CharField(max_length=20, blank=True, default="")
    tracking_id = models.CharField(max_length=40, unique=True, null=True, blank=True)
    estimated_delivery = models.DateTimeField(null=True, blank=True)

    # Payment (externally asserted)
    payment_type = models.CharField(
        max_length=20,
        choices=PaymentType.choices,
        default=PaymentType.CASH_ON_DELIVERY,
    )
    payment_method = models.CharField(
        max_length=20,
        choices=PaymentMethod.choices,
        default=PaymentMethod.CASH,
    )
    payment_status = models.CharField(
        max_length=20,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING,
    )
    payment_id = models.CharField(max_length=255, blank=True, default="")
    payment_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
    )
    payment_verified = models.BooleanField(default=False)
    payment_verified_at = models.DateTimeField(null=True, blank=True)

    # Returns
    return_status = models.CharField(
        max_length=20,
        choices=ReturnStatus.choices,
        default=ReturnStatus.NONE,
    )
    return_reason = models.TextField(blank=True, default="")
    return_request_date = models.DateTimeField(null=True, blank=True)
    return_approved_date = models.DateTimeField(null=True, blank=True)

    version = models.PositiveIntegerField(default=1)

    class Meta:
        db_table = "orders"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="orders_status_idx"),
            models.Index(fields=["-created_at"], name="orders_created_idx"),
            models.Index(
                fields=["customer", "-created_at"], name="orders_customer_idx"
            ),
            models.Index(fields=["return_status"], name="orders_return_status_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name="orders_quantity_positive",
            ),
            models.CheckConstraint(
                condition=(
                    models.Q(status=OrderStatus.DELIVERED, delivered_date__isnull=False)
                    | (
                        ~models.Q(status=OrderStatus.DELIVERED)
                        & models.Q(delivered_date__isnull=True)
                    )
                ),
                name="orders_delivered_date_iff_delivered",
            ),
            models.CheckConstraint(
                condition=(
                    models.Q(return_status=ReturnStatus.NONE)
                    | models.Q(status=OrderStatus.DELIVERED)
                ),
                name="orders_return_requires_delivery",
            ),
        ]

    # ------------------------------------------------------------------
    # State Machine helpers
    # ------------------------------------------------------------------

    @property
    def is_terminal(self) -> bool:
        """Return ``True`` if the order is in a terminal state."""
        return self.status in TERMINAL_STATES

    def can_transition_to(self, new_status: str) -> bool:
        """Check whether transitioning to *new_status* is valid."""
        allowed = VALID_TRANSITIONS.get(self.status, set())
        return new_status in allowed

    @property
    def can_assign_delivery(self) -> bool:
        return self.status in ASSIGNABLE_STATES

    def can_transition_return_to(self, new_return_status: str) -> bool:
        allowed = VALID_RETURN_TRANSITIONS.get(self.return_status, set())
        return new_return_status in allowed

    def apply_status(self, new_status: str) -> None:
        """Set the lifecycle status, stamping ``delivered_date`` on delivery."""
        self.status = new_status
        if new_status == OrderStatus.DELIVERED:
            self.delivered_date = timezone.now()

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @staticmethod
    def build_delivery_address(
        address_line: str,
        area: str,
        city: str,
        state: str,
        postal_code: str,
    ) -> str:
        """Join the non-empty shipping parts into a display address."""
        parts = [address_line, area, city, state, postal_code]
        return ", ".join(part for part in parts if part)

    @property
    def resolved_product(self) -> Optional[Any]:
        """The referenced product, or ``None`` when the reference is orphaned."""
        if self.product_id is None:
            return None
        try:
            return self.product
        except ObjectDoesNotExist:
            return None

    # ------------------------------------------------------------------
    # Order number generation
    # ------------------------------------------------------------------

    @staticmethod
    def generate_order_number() -> str:
        """Generate a human-readable order number: ``ORD-YYYYMMDD-XXXXXX``."""
        now = timezone.now()
        suffix = secrets.token_hex(3).upper()
        return f"ORD-{now:%Y%m%d}-{suffix}"

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self, *args: Any, **kwargs: Any) -> None:
        if not self.order_number:
            for attempt in range(ORDER_NUMBER_MAX_RETRIES):
                candidate = self.generate_order_number()
                if not Order.objects.filter(order_number=candidate).exists():
                    self.order_number = candidate
                    break
            else:
                raise RuntimeError(
                    f"Failed to generate unique order_number after "
                    f"{ORDER_NUMBER_MAX_RETRIES} attempts"
                )
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.order_number} ({self.status})"


class OrderStatusHistory(BaseModel):
    """Append-only audit trail for order status transitions.

    Audit records are immutable.  ``user`` is nullable: ``None`` means the
    change was performed by the system.
    """

    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="status_history",
    )
    old_status = models.CharField(  # noqa: DJ01
        max_length=20,
        choices=OrderStatus.choices,
        null=True,
        blank=True,
    )
    new_status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
    )
    notes = models.TextField(blank=True, default="")

    class Meta:
        db_table = "order_status_history"
        ordering = ["-created_at"]
        indexes = [
            models.Index(
                fields=["order", "-created_at"],
                name="osh_order_created_idx",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.order} : {self.old_status} -> {self.new_status}"
