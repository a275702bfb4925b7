"""Status update concurrency integration test.

Proves that the row lock in ``OrderService.update_status`` serializes
concurrent admin updates of the same order.

Scenario:
- One Pending order.
- 8 threads try to accept it simultaneously.
- Exactly 1 succeeds; the rest see the committed Accepted status and
  raise ``InvalidOrderStatus`` (a repeat is not a valid transition).
- Exactly one Accepted history row is written and ``version`` is 2.

Uses ``TransactionTestCase`` so each thread can see committed data.
Needs a server database with row locking; SQLite in-memory is skipped.
"""

from __future__ import annotations

import logging
import unittest
from concurrent.futures import ThreadPoolExecutor, as_completed
from decimal import Decimal

import django
from django.contrib.auth import get_user_model
from django.db import connection
from django.test import TransactionTestCase

from modules.customers.models import Customer
from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.orders.constants import OrderStatus
from modules.orders.dtos import UpdateOrderStatusDTO
from modules.orders.exceptions import InvalidOrderStatus, OrderConflict
from modules.orders.models import Order, OrderStatusHistory
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository

logger = logging.getLogger(__name__)

NUM_WORKERS = 8


@unittest.skipIf(
    connection.vendor == "sqlite", "row locking needs a server database"
)
class TestStatusUpdateConcurrency(TransactionTestCase):
    def setUp(self):
        user = get_user_model().objects.create_user(
            username="concurrency", password="testpass123"
        )
        customer = Customer.objects.create(user=user, name="Concurrency Customer")
        product = Product.objects.create(name="Linen Shirt", price=Decimal("1499.00"))
        self.order = Order.objects.create(
            customer=customer,
            product=product,
            quantity=1,
            address_line="221 Linking Road",
            city="Mumbai",
            state="Maharashtra",
            postal_code="400050",
            phone="9820012345",
            delivery_address="221 Linking Road, Mumbai, Maharashtra, 400050",
        )

    def _accept_in_thread(self, thread_id: int) -> str:
        django.db.connections.close_all()

        service = OrderService(
            order_repository=OrderDjangoRepository(),
            customer_repository=CustomerDjangoRepository(),
            product_repository=ProductDjangoRepository(),
        )
        try:
            service.update_status(
                self.order.id,
                UpdateOrderStatusDTO(status="Accepted", notes=f"thread {thread_id}"),
            )
            return "success"
        except (InvalidOrderStatus, OrderConflict):
            logger.warning("Thread %d: lost the race (expected)", thread_id)
            return "refused"
        finally:
            django.db.connections.close_all()

    def test_only_one_accept_wins(self):
        results = []

        with ThreadPoolExecutor(max_workers=NUM_WORKERS) as pool:
            futures = [pool.submit(self._accept_in_thread, i) for i in range(NUM_WORKERS)]
            for future in as_completed(futures):
                results.append(future.result())

        self.assertEqual(results.count("success"), 1)
        self.assertEqual(results.count("refused"), NUM_WORKERS - 1)

        self.order.refresh_from_db()
        self.assertEqual(self.order.status, OrderStatus.ACCEPTED)
        self.assertEqual(self.order.version, 2)
        self.assertEqual(
            OrderStatusHistory.objects.filter(
                order=self.order, new_status=OrderStatus.ACCEPTED
            ).count(),
            1,
        )
