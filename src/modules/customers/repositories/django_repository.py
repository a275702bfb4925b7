"""Django ORM implementation of the Customer repository.

Error handling follows the Null Object pattern: ``get_by_id`` returns
``None`` instead of raising; the Service Layer decides how to translate
a missing entity into an API response.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction

from modules.customers.models import Customer
from modules.customers.repositories.interfaces import ICustomerRepository

logger = structlog.get_logger(__name__)


class CustomerDjangoRepository(ICustomerRepository):
    """Concrete Customer repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[Customer]:
        """Retrieve a customer by primary key.

        Returns ``None`` for non-existent or invalid IDs (e.g. malformed UUID).
        """
        try:
            return Customer.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Customer]:
        queryset = Customer.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    @transaction.atomic
    def save(self, entity: Customer) -> Customer:
        """Persist (create or update) a customer."""
        entity.save()
        logger.info("customer.saved", customer_id=str(entity.id))
        return entity

    @transaction.atomic
    def get_or_create_for_user(self, user: Any) -> Customer:
        full_name = user.get_full_name() if hasattr(user, "get_full_name") else ""
        customer, created = Customer.objects.get_or_create(
            user=user,
            defaults={
                "name": full_name or user.get_username(),
                "email": getattr(user, "email", "") or "",
            },
        )
        if created:
            logger.info(
                "customer.profile_created",
                customer_id=str(customer.id),
                user_id=str(user.pk),
            )
        return customer
