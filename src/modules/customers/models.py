"""Customer (purchaser) profile.

Business rules implemented:
- RN-CLI-001: One profile per authenticated user.
- RN-CLI-003: Inactive customer cannot place orders (enforced at service layer).
- RN-CLI-005: Contact phone is masked in ``__str__``.
"""

from __future__ import annotations

import structlog
from django.conf import settings
from django.db import models

from modules.core.models import BaseModel

logger = structlog.get_logger(__name__)


class Customer(BaseModel):
    """Purchaser aggregate root.

    Authentication lives in the identity provider (Django auth + JWT);
    this profile is the stable purchaser reference stored on orders.
    The purchaser's order list is the reverse relation ``orders``.
    """

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="customer",
    )
    name = models.CharField(max_length=255, blank=True, default="")
    email = models.EmailField(max_length=254, blank=True, default="")
    phone = models.CharField(max_length=20, blank=True, default="")
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = "customers"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["is_active"], name="customers_active_idx"),
        ]

    def __str__(self) -> str:
        suffix = self.phone[-4:] if self.phone else "????"
        return f"{self.name or self.email} (***{suffix})"
