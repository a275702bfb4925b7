"""Async tasks of the core module."""

import structlog
from celery import shared_task
from django.conf import settings
from django.db import transaction
from django.db.models import Q

from modules.core.models import EventStatus, OutboxEvent
from shared.infrastructure.bus import event_bus

logger = structlog.get_logger(__name__)


@shared_task(name="core.relay_outbox_events")
def relay_outbox_events(batch_size: int = 100) -> dict:
    """Publish pending outbox rows on the in-process event bus.

    Rows are claimed with ``SELECT ... FOR UPDATE SKIP LOCKED`` so two
    workers never relay the same event.  Each row is marked PUBLISHED or
    FAILED (with its retry count bumped); a failure does not stop the batch.
    FAILED rows are claimed again on later runs until ``retry_count``
    reaches ``OUTBOX_MAX_RETRIES``.
    """
    retryable = Q(status=EventStatus.PENDING) | Q(
        status=EventStatus.FAILED, retry_count__lt=settings.OUTBOX_MAX_RETRIES
    )
    published = failed = 0
    with transaction.atomic():
        events = list(
            OutboxEvent.objects.select_for_update(skip_locked=True)
            .filter(retryable)
            .order_by("created_at")[:batch_size]
        )
        for event in events:
            log = logger.bind(
                outbox_id=str(event.id),
                event_type=event.event_type,
                aggregate_id=event.aggregate_id,
                attempt=event.retry_count + 1,
            )
            try:
                event_bus.publish_payload(event.event_type, event.payload)
            except Exception as exc:
                event.mark_as_failed(str(exc))
                failed += 1
                log.exception("outbox.relay_failed")
            else:
                event.mark_as_published()
                published += 1

    logger.info("outbox.relay_completed", published=published, failed=failed)
    return {"published": published, "failed": failed}
