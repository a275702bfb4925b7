"""Unit tests for ReturnService and ReturnPolicyService with mocked dependencies."""

from __future__ import annotations

from datetime import timedelta
from unittest.mock import MagicMock
from uuid import uuid4

import pytest
from django.utils import timezone

from modules.orders.constants import OrderStatus, ReturnStatus
from modules.orders.exceptions import (
    InvalidOrderStatus,
    OrderAccessDenied,
    OrderNotFound,
)
from modules.orders.models import Order
from modules.returns.dtos import (
    RequestReturnDTO,
    UpdateReturnPolicyDTO,
    UpdateReturnStatusDTO,
)
from modules.returns.events import ReturnRequested, ReturnStatusChanged
from modules.returns.exceptions import InvalidReturnStatus, ReturnWindowExpired
from modules.returns.models import ReturnPolicy
from modules.returns.services import ReturnPolicyService, ReturnService

pytestmark = pytest.mark.unit

REASON = RequestReturnDTO(reason="Colour differs from the photo")


def _call(method, service, *args):
    return getattr(type(service), method).__wrapped__(service, *args)


@pytest.fixture()
def order_repo():
    return MagicMock()


@pytest.fixture()
def policy_service():
    policy = MagicMock()
    policy.get_return_days.return_value = 7
    return policy


@pytest.fixture()
def service(order_repo, policy_service):
    return ReturnService(order_repository=order_repo, policy_service=policy_service)


def _delivered(days_ago: float = 1, **fields) -> Order:
    fields.setdefault("return_status", ReturnStatus.NONE)
    return Order(
        id=uuid4(),
        customer_id=uuid4(),
        status=OrderStatus.DELIVERED,
        delivered_date=timezone.now() - timedelta(days=days_ago),
        **fields,
    )


class TestRequestReturn:
    def test_opens_return(self, service, order_repo):
        order = _delivered(days_ago=2.5)
        order_repo.get_for_update.return_value = order

        _call("request_return", service, order.id, order.customer_id, REASON)

        assert order.return_status == ReturnStatus.REQUESTED
        assert order.return_reason == "Colour differs from the photo"
        assert order.return_request_date is not None
        order_repo.save.assert_called_once_with(order)
        [event] = order.domain_events
        assert isinstance(event, ReturnRequested)
        assert event.days_since_delivery == 2

    def test_last_day_of_window_allowed(self, service, order_repo):
        order = _delivered(days_ago=7.9)
        order_repo.get_for_update.return_value = order

        _call("request_return", service, order.id, order.customer_id, REASON)

        assert order.return_status == ReturnStatus.REQUESTED

    def test_window_expired(self, service, order_repo):
        order = _delivered(days_ago=8)
        order_repo.get_for_update.return_value = order

        with pytest.raises(ReturnWindowExpired) as exc_info:
            _call("request_return", service, order.id, order.customer_id, REASON)

        assert exc_info.value.context() == {"days_since_delivery": 8, "return_days": 7}
        assert "7 days" in str(exc_info.value)
        order_repo.save.assert_not_called()

    def test_window_follows_current_policy(self, service, order_repo, policy_service):
        policy_service.get_return_days.return_value = 30
        order = _delivered(days_ago=20)
        order_repo.get_for_update.return_value = order

        _call("request_return", service, order.id, order.customer_id, REASON)

        assert order.return_status == ReturnStatus.REQUESTED

    def test_missing_order(self, service, order_repo):
        order_repo.get_for_update.return_value = None
        with pytest.raises(OrderNotFound):
            _call("request_return", service, uuid4(), uuid4(), REASON)

    @pytest.mark.parametrize("status", list(OrderStatus))
    def test_not_the_purchaser_in_any_status(self, service, order_repo, status):
        order = _delivered() if status == OrderStatus.DELIVERED else Order(
            id=uuid4(), customer_id=uuid4(), status=status
        )
        order_repo.get_for_update.return_value = order

        with pytest.raises(OrderAccessDenied):
            _call("request_return", service, order.id, uuid4(), REASON)
        order_repo.save.assert_not_called()

    @pytest.mark.parametrize(
        "status", [OrderStatus.PENDING, OrderStatus.ASSIGNED, OrderStatus.REJECTED]
    )
    def test_requires_delivered(self, service, order_repo, status):
        order = Order(id=uuid4(), customer_id=uuid4(), status=status)
        order_repo.get_for_update.return_value = order

        with pytest.raises(InvalidOrderStatus) as exc_info:
            _call("request_return", service, order.id, order.customer_id, REASON)

        assert exc_info.value.required == ["Delivered"]

    @pytest.mark.parametrize(
        "return_status",
        [ReturnStatus.REQUESTED, ReturnStatus.REJECTED, ReturnStatus.COMPLETED],
    )
    def test_only_one_return_per_order(self, service, order_repo, return_status):
        order = _delivered(return_status=return_status)
        order_repo.get_for_update.return_value = order

        with pytest.raises(InvalidReturnStatus, match="already requested"):
            _call("request_return", service, order.id, order.customer_id, REASON)

    def test_missing_delivery_date(self, service, order_repo):
        order = _delivered()
        order.delivered_date = None
        order_repo.get_for_update.return_value = order

        with pytest.raises(InvalidOrderStatus, match="delivery date"):
            _call("request_return", service, order.id, order.customer_id, REASON)


class TestUpdateReturnStatus:
    @pytest.mark.parametrize("target", [ReturnStatus.APPROVED, ReturnStatus.REJECTED])
    def test_decides_requested_return(self, service, order_repo, target):
        order = _delivered(return_status=ReturnStatus.REQUESTED)
        order_repo.get_for_update.return_value = order

        _call(
            "update_return_status",
            service,
            order.id,
            UpdateReturnStatusDTO(return_status=target),
        )

        assert order.return_status == target
        [event] = order.domain_events
        assert isinstance(event, ReturnStatusChanged)
        assert event.old_return_status == ReturnStatus.REQUESTED

    def test_approval_stamps_date(self, service, order_repo):
        order = _delivered(return_status=ReturnStatus.REQUESTED)
        order_repo.get_for_update.return_value = order

        _call(
            "update_return_status",
            service,
            order.id,
            UpdateReturnStatusDTO(return_status="Approved"),
        )

        assert order.return_approved_date is not None

    def test_rejection_leaves_approval_date_empty(self, service, order_repo):
        order = _delivered(return_status=ReturnStatus.REQUESTED)
        order_repo.get_for_update.return_value = order

        _call(
            "update_return_status",
            service,
            order.id,
            UpdateReturnStatusDTO(return_status="Rejected"),
        )

        assert order.return_approved_date is None

    def test_complete_requires_approved(self, service, order_repo):
        order_repo.get_for_update.return_value = _delivered(
            return_status=ReturnStatus.REQUESTED
        )

        with pytest.raises(InvalidReturnStatus) as exc_info:
            _call(
                "update_return_status",
                service,
                uuid4(),
                UpdateReturnStatusDTO(return_status="Completed"),
            )

        assert str(exc_info.value) == "Only approved returns can be completed."
        assert exc_info.value.required == ["Approved"]

    @pytest.mark.parametrize(
        "current",
        [ReturnStatus.NONE, ReturnStatus.APPROVED, ReturnStatus.COMPLETED],
    )
    def test_approve_requires_requested(self, service, order_repo, current):
        order_repo.get_for_update.return_value = _delivered(return_status=current)

        with pytest.raises(InvalidReturnStatus) as exc_info:
            _call(
                "update_return_status",
                service,
                uuid4(),
                UpdateReturnStatusDTO(return_status="Approved"),
            )

        assert str(exc_info.value) == (
            "Only requested returns can be approved or rejected."
        )
        order_repo.save.assert_not_called()

    def test_missing_order(self, service, order_repo):
        order_repo.get_for_update.return_value = None
        with pytest.raises(OrderNotFound):
            _call(
                "update_return_status",
                service,
                uuid4(),
                UpdateReturnStatusDTO(return_status="Approved"),
            )


class TestReturnPolicyService:
    def test_get_return_days(self):
        repo = MagicMock()
        repo.get_current.return_value = ReturnPolicy(return_days=14)

        assert ReturnPolicyService(repo).get_return_days() == 14

    def test_set_policy_updates_locked_row(self):
        repo = MagicMock()
        policy = ReturnPolicy(return_days=7)
        repo.get_current_for_update.return_value = policy
        service = ReturnPolicyService(repo)

        result = _call("set_policy", service, UpdateReturnPolicyDTO(return_days=30))

        assert result.return_days == 30
        repo.save.assert_called_once_with(policy)
