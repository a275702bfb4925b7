"""Return policy model.

A single configuration row keyed by ``scope`` holds the number of days
after delivery during which a purchaser may request a return.  The row is
read fresh on every eligibility check and written under a row lock.
"""

from __future__ import annotations

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from modules.core.models import BaseModel
from modules.returns.constants import (
    DEFAULT_RETURN_DAYS,
    GLOBAL_POLICY_SCOPE,
    MAX_RETURN_DAYS,
    MIN_RETURN_DAYS,
)


class ReturnPolicy(BaseModel):
    scope = models.CharField(max_length=50, unique=True, default=GLOBAL_POLICY_SCOPE)
    return_days = models.PositiveSmallIntegerField(
        default=DEFAULT_RETURN_DAYS,
        validators=[
            MinValueValidator(MIN_RETURN_DAYS),
            MaxValueValidator(MAX_RETURN_DAYS),
        ],
    )

    class Meta:
        db_table = "return_policies"
        constraints = [
            models.CheckConstraint(
                condition=models.Q(
                    return_days__gte=MIN_RETURN_DAYS,
                    return_days__lte=MAX_RETURN_DAYS,
                ),
                name="return_policies_days_range",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.scope}: {self.return_days} days"
