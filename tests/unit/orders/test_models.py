"""Unit tests for the Order model: derived values and DB guarantees."""

from __future__ import annotations

import re
import uuid

import pytest
from django.db import IntegrityError, transaction
from django.utils import timezone

from modules.orders.constants import OrderStatus, PaymentStatus, ReturnStatus
from modules.orders.models import Order, OrderStatusHistory
from modules.products.models import Product

pytestmark = pytest.mark.unit


class TestBuildDeliveryAddress:
    def test_joins_all_parts(self):
        address = Order.build_delivery_address(
            "12 MG Road", "Indiranagar", "Bengaluru", "Karnataka", "560038"
        )
        assert address == "12 MG Road, Indiranagar, Bengaluru, Karnataka, 560038"

    def test_skips_empty_area(self):
        address = Order.build_delivery_address(
            "12 MG Road", "", "Bengaluru", "Karnataka", "560038"
        )
        assert address == "12 MG Road, Bengaluru, Karnataka, 560038"


class TestOrderDefaults:
    def test_new_order_defaults(self, make_order):
        order = make_order()
        order.refresh_from_db()

        assert order.status == OrderStatus.PENDING
        assert order.return_status == ReturnStatus.NONE
        assert order.payment_status == PaymentStatus.PENDING
        assert order.payment_verified is False
        assert order.delivered_date is None
        assert order.tracking_id is None
        assert order.version == 1

    def test_order_number_format(self, make_order):
        order = make_order()
        assert re.fullmatch(r"ORD-\d{8}-[0-9A-F]{6}", order.order_number)

    def test_order_numbers_are_unique(self, make_order):
        numbers = {make_order().order_number for _ in range(10)}
        assert len(numbers) == 10

    def test_id_is_uuid7(self, make_order):
        order = make_order()
        assert isinstance(order.id, uuid.UUID)
        assert order.id.version == 7

    def test_str(self, make_order):
        order = make_order()
        assert str(order) == f"{order.order_number} (Pending)"


class TestResolvedProduct:
    def test_returns_product(self, make_order, product):
        order = make_order()
        assert order.resolved_product == product

    def test_orphaned_reference_resolves_to_none(self, make_order, product):
        order = make_order()
        Product.objects.filter(id=product.id).delete()

        reloaded = Order.objects.get(id=order.id)

        assert reloaded.product_id == product.id
        assert reloaded.resolved_product is None

    def test_missing_reference_resolves_to_none(self, make_order):
        order = make_order(product=None)
        assert order.resolved_product is None


class TestDatabaseConstraints:
    def test_delivered_without_date_rejected(self, make_order):
        with pytest.raises(IntegrityError), transaction.atomic():
            make_order(status=OrderStatus.DELIVERED, delivered_date=None)

    def test_delivered_date_on_undelivered_order_rejected(self, make_order):
        with pytest.raises(IntegrityError), transaction.atomic():
            make_order(status=OrderStatus.ACCEPTED, delivered_date=timezone.now())

    def test_return_on_undelivered_order_rejected(self, make_order):
        with pytest.raises(IntegrityError), transaction.atomic():
            make_order(status=OrderStatus.ASSIGNED, return_status=ReturnStatus.REQUESTED)

    def test_zero_quantity_rejected(self, make_order):
        with pytest.raises(IntegrityError), transaction.atomic():
            make_order(quantity=0)


def test_history_str(make_order):
    order = make_order()
    history = OrderStatusHistory.objects.create(
        order=order, old_status=None, new_status=OrderStatus.PENDING
    )
    assert str(history).endswith("None -> Pending")
