from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.utils import timezone
from rest_framework.test import APIClient

from modules.customers.models import Customer
from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.orders.constants import OrderStatus
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.returns.repositories.django_repository import (
    ReturnPolicyDjangoRepository,
)
from modules.returns.services import ReturnPolicyService, ReturnService

User = get_user_model()


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture(autouse=True)
def _clear_cache():
    """Throttle counters live in the cache; start every test from zero."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


# ---------------------------------------------------------------------------
# Identities
# ---------------------------------------------------------------------------


@pytest.fixture()
def user():
    return User.objects.create_user(
        username="asha",
        password="testpass123",
        email="asha@example.com",
        first_name="Asha",
        last_name="Rao",
    )


@pytest.fixture()
def other_user():
    return User.objects.create_user(
        username="ravi", password="testpass123", email="ravi@example.com"
    )


@pytest.fixture()
def staff_user():
    return User.objects.create_user(
        username="store-admin", password="testpass123", is_staff=True
    )


@pytest.fixture()
def customer(user) -> Customer:
    return Customer.objects.create(
        user=user, name="Asha Rao", email="asha@example.com", phone="9876543210"
    )


@pytest.fixture()
def other_customer(other_user) -> Customer:
    return Customer.objects.create(
        user=other_user, name="Ravi Kumar", email="ravi@example.com"
    )


@pytest.fixture()
def customer_client(user, customer) -> APIClient:
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture()
def other_client(other_user, other_customer) -> APIClient:
    client = APIClient()
    client.force_authenticate(user=other_user)
    return client


@pytest.fixture()
def staff_client(staff_user) -> APIClient:
    client = APIClient()
    client.force_authenticate(user=staff_user)
    return client


# ---------------------------------------------------------------------------
# Catalog and orders
# ---------------------------------------------------------------------------


@pytest.fixture()
def product() -> Product:
    return Product.objects.create(
        name="Cotton Kurta",
        price=Decimal("899.00"),
        image="uploads/kurta.jpg",
    )


@pytest.fixture()
def make_order(customer, product):
    """Factory persisting an order directly, bypassing the service layer."""

    def _make(**overrides) -> Order:
        fields = {
            "customer": customer,
            "product": product,
            "quantity": 2,
            "size": "M",
            "address_line": "12 MG Road",
            "area": "Indiranagar",
            "city": "Bengaluru",
            "state": "Karnataka",
            "postal_code": "560038",
            "phone": "9876543210",
            "delivery_address": "12 MG Road, Indiranagar, Bengaluru, Karnataka, 560038",
            "payment_amount": Decimal("1798.00"),
        }
        fields.update(overrides)
        if fields.get("status") == OrderStatus.DELIVERED:
            fields.setdefault("delivered_date", timezone.now())
        return Order.objects.create(**fields)

    return _make


@pytest.fixture()
def order_payload(product) -> dict:
    return {
        "product_id": str(product.id),
        "quantity": 2,
        "size": "M",
        "shipping_info": {
            "address_line": "12 MG Road",
            "area": "Indiranagar",
            "city": "Bengaluru",
            "state": "Karnataka",
            "postal_code": "560038",
            "phone": "9876543210",
        },
        "payment_info": {
            "payment_type": "Cash on Delivery",
            "payment_method": "Cash",
        },
    }


# ---------------------------------------------------------------------------
# Services wired to the Django repositories
# ---------------------------------------------------------------------------


@pytest.fixture()
def order_service() -> OrderService:
    return OrderService(
        order_repository=OrderDjangoRepository(),
        customer_repository=CustomerDjangoRepository(),
        product_repository=ProductDjangoRepository(),
    )


@pytest.fixture()
def policy_service() -> ReturnPolicyService:
    return ReturnPolicyService(ReturnPolicyDjangoRepository())


@pytest.fixture()
def return_service(policy_service) -> ReturnService:
    return ReturnService(
        order_repository=OrderDjangoRepository(),
        policy_service=policy_service,
    )
