"""Event handlers for Returns domain events."""

from __future__ import annotations

import structlog

from modules.returns.events import ReturnRequested, ReturnStatusChanged
from shared.domain.bus import IEventHandler

logger = structlog.get_logger(__name__)


class ReturnRequestedHandler(IEventHandler[ReturnRequested]):
    def handle(self, event: ReturnRequested) -> None:
        logger.info(
            "return.requested.handled",
            order_id=str(event.aggregate_id),
            days_since_delivery=event.days_since_delivery,
        )


class ReturnStatusChangedHandler(IEventHandler[ReturnStatusChanged]):
    def handle(self, event: ReturnStatusChanged) -> None:
        logger.info(
            "return.status_changed.handled",
            order_id=str(event.aggregate_id),
            old_return_status=event.old_return_status,
            new_return_status=event.new_return_status,
        )


return_requested_handler = ReturnRequestedHandler()
return_status_changed_handler = ReturnStatusChangedHandler()
