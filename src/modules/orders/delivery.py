"""Delivery assignment helpers.

Tracking ID generation and estimated-delivery resolution used by
``OrderService.assign_delivery``.  Both take ``now`` explicitly so the
calling service decides the clock.
"""

from __future__ import annotations

import secrets
import string
from datetime import date, datetime, time, timedelta
from typing import Optional, Union

from django.utils import timezone

from modules.orders.constants import (
    DEFAULT_DELIVERY_DAYS,
    TRACKING_ID_PREFIX,
    TRACKING_SUFFIX_LENGTH,
)
from modules.orders.exceptions import InvalidOrderData

_TRACKING_ALPHABET = string.ascii_uppercase + string.digits


def generate_tracking_id(now: Optional[datetime] = None) -> str:
    """Build ``TRK-<epoch-ms>-<6 uppercase alphanumerics>``."""
    now = now or timezone.now()
    millis = int(now.timestamp() * 1000)
    suffix = "".join(
        secrets.choice(_TRACKING_ALPHABET) for _ in range(TRACKING_SUFFIX_LENGTH)
    )
    return f"{TRACKING_ID_PREFIX}-{millis}-{suffix}"


def start_of_today(now: datetime) -> datetime:
    """Midnight of *now*'s calendar day in the configured ``TIME_ZONE``."""
    local = timezone.localtime(now)
    return local.replace(hour=0, minute=0, second=0, microsecond=0)


def _to_aware(value: Union[date, datetime]) -> datetime:
    if not isinstance(value, datetime):
        value = datetime.combine(value, time.min)
    if timezone.is_naive(value):
        value = timezone.make_aware(value)
    return value


def resolve_estimated_delivery(
    requested: Optional[Union[date, datetime]],
    now: datetime,
) -> datetime:
    """Return the estimated delivery to store on a first assignment.

    A supplied value must not fall before the start of the current day;
    otherwise ``now + DEFAULT_DELIVERY_DAYS`` is used.

    Raises:
        InvalidOrderData: the supplied value lies in the past.
    """
    if requested is None:
        return now + timedelta(days=DEFAULT_DELIVERY_DAYS)
    estimated = _to_aware(requested)
    if estimated < start_of_today(now):
        raise InvalidOrderData(
            "Estimated delivery date cannot be in the past.",
            field="estimated_delivery",
        )
    return estimated
