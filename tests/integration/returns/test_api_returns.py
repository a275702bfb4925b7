"""Integration tests for the return request and return decision endpoints."""

from __future__ import annotations

from datetime import datetime, timedelta
from datetime import timezone as dt_timezone

import pytest
from freezegun import freeze_time

from modules.orders.constants import OrderStatus, ReturnStatus
from modules.orders.models import Order
from modules.returns.models import ReturnPolicy

pytestmark = pytest.mark.integration

URL = "/api/v1/orders/"
REASON = {"reason": "The kurta is two sizes too large."}
DELIVERED_AT = datetime(2026, 6, 1, 12, 0, tzinfo=dt_timezone.utc)


def _return_url(order):
    return f"{URL}{order.id}/return/"


def _return_status_url(order):
    return f"{URL}{order.id}/return-status/"


@pytest.fixture()
def delivered_order(make_order):
    return make_order(status=OrderStatus.DELIVERED, delivered_date=DELIVERED_AT)


class TestRequestReturn:
    @freeze_time(DELIVERED_AT + timedelta(days=2))
    def test_purchaser_requests_return(self, customer_client, delivered_order):
        response = customer_client.post(
            _return_url(delivered_order), REASON, format="json"
        )

        assert response.status_code == 200
        data = response.json()
        assert data["return_status"] == "Requested"
        assert data["return_reason"] == REASON["reason"]
        assert data["return_request_date"] is not None

    @freeze_time(DELIVERED_AT + timedelta(days=7, hours=23))
    def test_last_day_of_default_window(self, customer_client, delivered_order):
        response = customer_client.post(
            _return_url(delivered_order), REASON, format="json"
        )
        assert response.status_code == 200

    @freeze_time(DELIVERED_AT + timedelta(days=8))
    def test_window_expired(self, customer_client, delivered_order):
        response = customer_client.post(
            _return_url(delivered_order), REASON, format="json"
        )

        assert response.status_code == 400
        data = response.json()
        assert data["code"] == "policy_violation"
        assert data["days_since_delivery"] == 8
        assert data["return_days"] == 7
        assert Order.objects.get(id=delivered_order.id).return_status == "None"

    @freeze_time(DELIVERED_AT + timedelta(days=20))
    def test_window_follows_saved_policy(self, customer_client, delivered_order):
        ReturnPolicy.objects.create(return_days=30)

        response = customer_client.post(
            _return_url(delivered_order), REASON, format="json"
        )

        assert response.status_code == 200

    @pytest.mark.parametrize("status", list(OrderStatus))
    def test_other_purchaser_forbidden_in_any_status(
        self, other_client, make_order, status
    ):
        order = make_order(status=status)

        response = other_client.post(_return_url(order), REASON, format="json")

        assert response.status_code == 403
        assert response.json()["code"] == "not_allowed"
        assert Order.objects.get(id=order.id).return_status == "None"

    def test_undelivered_order_rejected(self, customer_client, make_order):
        order = make_order(status=OrderStatus.ASSIGNED)

        response = customer_client.post(_return_url(order), REASON, format="json")

        assert response.status_code == 400
        assert response.json()["current"] == "Assigned"

    @freeze_time(DELIVERED_AT + timedelta(days=1))
    def test_second_request_rejected(self, customer_client, delivered_order):
        customer_client.post(_return_url(delivered_order), REASON, format="json")

        response = customer_client.post(
            _return_url(delivered_order), REASON, format="json"
        )

        assert response.status_code == 400
        assert response.json()["current"] == "Requested"

    def test_short_reason_rejected(self, customer_client, delivered_order):
        response = customer_client.post(
            _return_url(delivered_order), {"reason": "  too big  "}, format="json"
        )

        assert response.status_code == 400
        assert response.json()["field"] == "reason"


class TestUpdateReturnStatus:
    def test_approve_then_complete(self, staff_client, make_order):
        order = make_order(
            status=OrderStatus.DELIVERED, return_status=ReturnStatus.REQUESTED
        )

        approved = staff_client.put(
            _return_status_url(order), {"return_status": "Approved"}, format="json"
        )
        completed = staff_client.put(
            _return_status_url(order), {"return_status": "Completed"}, format="json"
        )

        assert approved.status_code == 200
        assert approved.json()["return_approved_date"] is not None
        assert completed.status_code == 200
        assert completed.json()["return_status"] == "Completed"

    def test_complete_before_approval_rejected(self, staff_client, make_order):
        order = make_order(
            status=OrderStatus.DELIVERED, return_status=ReturnStatus.REQUESTED
        )

        response = staff_client.put(
            _return_status_url(order), {"return_status": "Completed"}, format="json"
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Only approved returns can be completed."

    def test_decision_without_request_rejected(self, staff_client, delivered_order):
        response = staff_client.put(
            _return_status_url(delivered_order),
            {"return_status": "Approved"},
            format="json",
        )

        assert response.status_code == 400
        assert response.json()["detail"] == (
            "Only requested returns can be approved or rejected."
        )

    def test_requested_is_not_admin_settable(self, staff_client, delivered_order):
        response = staff_client.put(
            _return_status_url(delivered_order),
            {"return_status": "Requested"},
            format="json",
        )

        assert response.status_code == 400
        assert response.json()["field"] == "return_status"

    def test_purchaser_forbidden(self, customer_client, make_order):
        order = make_order(
            status=OrderStatus.DELIVERED, return_status=ReturnStatus.REQUESTED
        )

        response = customer_client.put(
            _return_status_url(order), {"return_status": "Approved"}, format="json"
        )

        assert response.status_code == 403
