"""Django ORM implementation of the Order repository.

Satisfies ``IOrderRepository`` using Django's QuerySet API.
All write operations are wrapped in ``transaction.atomic()`` so the order
row, its history and its outbox events commit together.

Concurrency control is two-layered: ``get_for_update`` takes a row lock
(``SELECT ... FOR UPDATE``) and ``save`` performs a compare-and-swap on
``version`` so a stale in-memory copy can never overwrite a newer row.
"""

from __future__ import annotations

import json
from dataclasses import asdict
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional
from uuid import UUID

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Count, QuerySet
from django.utils import timezone

from modules.core.models import OutboxEvent
from modules.orders.exceptions import OrderConflict
from modules.orders.models import Order, OrderStatusHistory
from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)

# Never rewritten once the row exists.
_IMMUTABLE_FIELDS = {"id", "created_at", "order_number"}


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: str) -> Optional[Order]:
        """Retrieve an order with product and purchaser joined.

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return (
                Order.objects.select_related("customer", "product")
                .filter(id=id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def get_for_update(self, id: str) -> Optional[Order]:
        """Retrieve an order with a row-level lock (SELECT FOR UPDATE).

        Only the order row is locked (``of=("self",)``); the joined
        product may be missing.  Returns ``None`` for non-existent or
        invalid IDs.
        """
        try:
            return (
                Order.objects.select_for_update(of=("self",))
                .select_related("customer", "product")
                .filter(id=id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> QuerySet:
        """Return a lazily evaluated queryset so callers can filter and paginate."""
        queryset = Order.objects.select_related("customer", "product").order_by(
            "-created_at", "-id"
        )
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    def list_for_customer(self, customer_id: UUID) -> List[Order]:
        orders = self.list({"customer_id": customer_id})
        return [order for order in orders if order.resolved_product is not None]

    def count_by_status(self) -> Dict[str, int]:
        rows = Order.objects.order_by().values("status").annotate(total=Count("id"))
        return {row["status"]: row["total"] for row in rows}

    def count_by_return_status(self) -> Dict[str, int]:
        rows = (
            Order.objects.order_by()
            .values("return_status")
            .annotate(total=Count("id"))
        )
        return {row["return_status"]: row["total"] for row in rows}

    # ------------------------------------------------------------------
    # Save (IRepository contract)
    # ------------------------------------------------------------------

    @transaction.atomic
    def save(self, entity: Order) -> Order:
        """Persist an order and flush its domain events to the outbox.

        New orders are inserted; existing ones are written only if their
        stored ``version`` still matches the in-memory one.

        Raises:
            OrderConflict: another writer committed a newer version.
        """
        if entity._state.adding:
            entity.save()
        else:
            self._update_with_version_check(entity)

        events = entity.domain_events
        for event in events:
            OutboxEvent.objects.create(
                event_type=event.event_name,
                aggregate_id=str(event.aggregate_id),
                payload=_serialize_event_payload(event),
                topic="orders",
            )
        entity.clear_domain_events()

        logger.info(
            "order.saved",
            order_id=str(entity.id),
            version=entity.version,
            event_count=len(events),
        )
        return entity

    def _update_with_version_check(self, entity: Order) -> None:
        expected_version = entity.version
        values = {
            field.attname: getattr(entity, field.attname)
            for field in Order._meta.concrete_fields
            if field.name not in _IMMUTABLE_FIELDS
        }
        values["version"] = expected_version + 1
        values["updated_at"] = timezone.now()

        updated = Order.objects.filter(id=entity.id, version=expected_version).update(
            **values
        )
        if updated == 0:
            logger.warning(
                "order.version_conflict",
                order_id=str(entity.id),
                expected_version=expected_version,
            )
            raise OrderConflict(
                f"Order {entity.id} was modified concurrently; reload and retry."
            )
        entity.version = values["version"]
        entity.updated_at = values["updated_at"]

    # ------------------------------------------------------------------
    # Order-specific writes
    # ------------------------------------------------------------------

    @transaction.atomic
    def add_history(
        self,
        order_id: UUID,
        status: str,
        notes: str = "",
        old_status: Optional[str] = None,
        user_id: Optional[Any] = None,
    ) -> OrderStatusHistory:
        """Record a status change in the order's audit trail."""
        history = OrderStatusHistory(
            order_id=order_id,
            old_status=old_status,
            new_status=status,
            notes=notes,
            user_id=user_id,
        )
        history.save()

        logger.info(
            "order.history_added",
            order_id=str(order_id),
            old_status=old_status,
            new_status=status,
        )
        return history


def _serialize_event_payload(event: Any) -> Dict[str, Any]:
    data = asdict(event)
    normalized = _normalize_for_json(data)
    return json.loads(json.dumps(normalized))


def _normalize_for_json(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, list):
        return [_normalize_for_json(item) for item in value]
    if isinstance(value, dict):
        return {key: _normalize_for_json(val) for key, val in value.items()}
    return value
