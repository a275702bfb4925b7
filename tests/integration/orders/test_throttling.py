"""Integration tests for throttling on the order API."""

from __future__ import annotations

from unittest.mock import patch

import pytest
from rest_framework.throttling import ScopedRateThrottle

pytestmark = pytest.mark.integration

RATES = {"order_creation": "3/minute", "order_listing": "5/minute"}


@pytest.fixture(autouse=True)
def _tight_rates():
    with patch.object(ScopedRateThrottle, "THROTTLE_RATES", RATES):
        yield


def test_order_creation_is_throttled(customer_client, order_payload):
    for _ in range(3):
        response = customer_client.post("/api/v1/orders/", order_payload, format="json")
        assert response.status_code == 201

    response = customer_client.post("/api/v1/orders/", order_payload, format="json")
    assert response.status_code == 429


def test_listing_has_its_own_budget(customer_client, order_payload):
    for _ in range(3):
        customer_client.post("/api/v1/orders/", order_payload, format="json")

    for _ in range(5):
        response = customer_client.get("/api/v1/orders/mine/")
        assert response.status_code == 200

    response = customer_client.get("/api/v1/orders/mine/")
    assert response.status_code == 429


def test_admin_transitions_are_not_scoped(staff_client, make_order):
    order = make_order()
    for _ in range(6):
        response = staff_client.put(
            f"/api/v1/orders/{order.id}/verify-payment/",
            {"payment_status": "Paid"},
            format="json",
        )
        assert response.status_code == 200
