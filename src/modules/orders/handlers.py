"""Event handlers for Orders domain events.

Handlers run when the outbox relay publishes an event on the in-process
bus.  They log the event; notification delivery (e-mail, SMS) hooks in here.
"""

from __future__ import annotations

import structlog

from modules.orders.events import (
    DeliveryAssigned,
    OrderPlaced,
    OrderStatusChanged,
    PaymentVerified,
)
from shared.domain.bus import IEventHandler

logger = structlog.get_logger(__name__)


class OrderPlacedHandler(IEventHandler[OrderPlaced]):
    def handle(self, event: OrderPlaced) -> None:
        logger.info(
            "order.placed.handled",
            order_id=str(event.aggregate_id),
            customer_id=event.customer_id,
            payment_type=event.payment_type,
        )


class OrderStatusChangedHandler(IEventHandler[OrderStatusChanged]):
    def handle(self, event: OrderStatusChanged) -> None:
        logger.info(
            "order.status_changed.handled",
            order_id=str(event.aggregate_id),
            old_status=event.old_status,
            new_status=event.new_status,
        )


class DeliveryAssignedHandler(IEventHandler[DeliveryAssigned]):
    def handle(self, event: DeliveryAssigned) -> None:
        logger.info(
            "order.delivery_assigned.handled",
            order_id=str(event.aggregate_id),
            tracking_id=event.tracking_id,
        )


class PaymentVerifiedHandler(IEventHandler[PaymentVerified]):
    def handle(self, event: PaymentVerified) -> None:
        logger.info(
            "order.payment_verified.handled",
            order_id=str(event.aggregate_id),
            payment_status=event.payment_status,
        )


order_placed_handler = OrderPlacedHandler()
order_status_changed_handler = OrderStatusChangedHandler()
delivery_assigned_handler = DeliveryAssignedHandler()
payment_verified_handler = PaymentVerifiedHandler()
