"""Django ORM implementation of the return policy repository.

The policy is a single row keyed by ``GLOBAL_POLICY_SCOPE``.  It is never
cached: every read goes to the database so a freshly saved window applies
to the next eligibility check.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction

from modules.returns.constants import DEFAULT_RETURN_DAYS, GLOBAL_POLICY_SCOPE
from modules.returns.models import ReturnPolicy
from modules.returns.repositories.interfaces import IReturnPolicyRepository

logger = structlog.get_logger(__name__)


class ReturnPolicyDjangoRepository(IReturnPolicyRepository):
    """Concrete return policy repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[ReturnPolicy]:
        try:
            return ReturnPolicy.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[ReturnPolicy]:
        queryset = ReturnPolicy.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    @transaction.atomic
    def save(self, entity: ReturnPolicy) -> ReturnPolicy:
        entity.save()
        logger.info(
            "return_policy.saved",
            scope=entity.scope,
            return_days=entity.return_days,
        )
        return entity

    def get_current(self) -> ReturnPolicy:
        policy, created = ReturnPolicy.objects.get_or_create(
            scope=GLOBAL_POLICY_SCOPE,
            defaults={"return_days": DEFAULT_RETURN_DAYS},
        )
        if created:
            logger.info("return_policy.initialized", return_days=policy.return_days)
        return policy

    @transaction.atomic
    def get_current_for_update(self) -> ReturnPolicy:
        """Lock the policy row (``SELECT FOR UPDATE``), creating it first if needed.

        Must be called inside the caller's transaction for the lock to
        outlive this method.
        """
        self.get_current()
        return ReturnPolicy.objects.select_for_update().get(scope=GLOBAL_POLICY_SCOPE)
