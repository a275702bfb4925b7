"""Integration tests for the Celery configuration and the outbox relay task."""

import logging
from unittest.mock import patch
from uuid import uuid4

import pytest

from modules.core.models import EventStatus, OutboxEvent
from modules.core.tasks import relay_outbox_events
from modules.orders.dtos import UpdateOrderStatusDTO

pytestmark = pytest.mark.integration


@pytest.fixture(autouse=True)
def _celery_eager(settings):
    """Run tasks synchronously in the test process."""
    settings.CELERY_TASK_ALWAYS_EAGER = True
    settings.CELERY_TASK_EAGER_PROPAGATES = True


class TestCeleryConfig:
    def test_celery_app_exported_from_init(self):
        from config import celery_app

        assert celery_app.main == "storefront"

    def test_celery_serializer_is_json(self, settings):
        assert settings.CELERY_TASK_SERIALIZER == "json"
        assert settings.CELERY_RESULT_SERIALIZER == "json"
        assert settings.CELERY_ACCEPT_CONTENT == ["json"]

    def test_celery_timezone_matches_django(self, settings):
        assert settings.CELERY_TIMEZONE == settings.TIME_ZONE

    def test_relay_is_scheduled(self, settings):
        entry = settings.CELERY_BEAT_SCHEDULE["relay-outbox-events"]
        assert entry["task"] == "core.relay_outbox_events"


class TestRelayOutboxEvents:
    def test_publishes_pending_events(self, order_service, make_order, caplog):
        order = make_order()
        order_service.update_status(order.id, UpdateOrderStatusDTO(status="Accepted"))

        with caplog.at_level(logging.INFO):
            result = relay_outbox_events.delay()

        assert result.successful()
        assert result.result == {"published": 1, "failed": 0}
        event = OutboxEvent.objects.get(aggregate_id=str(order.id))
        assert event.status == EventStatus.PUBLISHED
        assert event.processed_at is not None
        assert any(
            "order.status_changed.handled" in record.getMessage()
            for record in caplog.records
        )

    def test_published_events_not_relayed_twice(self, order_service, make_order):
        order = make_order()
        order_service.update_status(order.id, UpdateOrderStatusDTO(status="Accepted"))

        relay_outbox_events.delay()
        result = relay_outbox_events.delay()

        assert result.result == {"published": 0, "failed": 0}

    def test_unknown_event_marked_failed(self):
        event = OutboxEvent.objects.create(
            event_type="NoSuchEvent",
            payload={"aggregate_id": str(uuid4())},
            aggregate_id="x",
            topic="orders",
        )

        result = relay_outbox_events.delay()

        assert result.result == {"published": 0, "failed": 1}
        event.refresh_from_db()
        assert event.status == EventStatus.FAILED
        assert event.retry_count == 1
        assert "NoSuchEvent" in event.error_message

    def test_handler_failure_does_not_stop_batch(self, order_service, make_order):
        first = make_order()
        second = make_order()
        order_service.update_status(first.id, UpdateOrderStatusDTO(status="Accepted"))
        order_service.update_status(second.id, UpdateOrderStatusDTO(status="Rejected"))

        with patch(
            "modules.orders.handlers.order_status_changed_handler.handle",
            side_effect=[RuntimeError("smtp down"), None],
        ):
            result = relay_outbox_events.delay()

        assert result.result == {"published": 1, "failed": 1}

    def test_batch_size_limits_work(self, order_service, make_order):
        for _ in range(3):
            order = make_order()
            order_service.update_status(order.id, UpdateOrderStatusDTO(status="Accepted"))

        result = relay_outbox_events.delay(batch_size=2)

        assert result.result == {"published": 2, "failed": 0}
        assert OutboxEvent.objects.filter(status=EventStatus.PENDING).count() == 1

    def test_failed_event_retried_on_next_run(self, order_service, make_order):
        order = make_order()
        order_service.update_status(order.id, UpdateOrderStatusDTO(status="Accepted"))

        with patch(
            "modules.core.tasks.event_bus.publish_payload",
            side_effect=RuntimeError("broker down"),
        ):
            first = relay_outbox_events.delay()
        second = relay_outbox_events.delay()

        assert first.result == {"published": 0, "failed": 1}
        assert second.result == {"published": 1, "failed": 0}
        event = OutboxEvent.objects.get(aggregate_id=str(order.id))
        assert event.status == EventStatus.PUBLISHED
        assert event.retry_count == 1

    def test_retries_stop_at_max(self, settings):
        settings.OUTBOX_MAX_RETRIES = 2
        event = OutboxEvent.objects.create(
            event_type="NoSuchEvent",
            payload={"aggregate_id": str(uuid4())},
            aggregate_id="x",
            topic="orders",
        )

        results = [relay_outbox_events.delay().result for _ in range(3)]

        assert results == [
            {"published": 0, "failed": 1},
            {"published": 0, "failed": 1},
            {"published": 0, "failed": 0},
        ]
        event.refresh_from_db()
        assert event.status == EventStatus.FAILED
        assert event.retry_count == 2
