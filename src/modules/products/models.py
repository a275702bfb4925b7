"""Product model (read side of the catalog).

Catalog administration and image upload live outside this service; the
order core only reads a product to enrich responses and to price an order
at a flat per-unit rate.

Business rules implemented:
- RN-PRO-003: Price must be greater than zero.
"""

from __future__ import annotations

from decimal import Decimal

import structlog
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import BaseModel

logger = structlog.get_logger(__name__)


class ProductStatus(models.TextChoices):
    ACTIVE = "active", "Active"
    INACTIVE = "inactive", "Inactive"


class Product(BaseModel):
    """Product aggregate root."""

    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
    )
    image = models.CharField(max_length=500, blank=True, default="")
    status = models.CharField(
        max_length=20,
        choices=ProductStatus.choices,
        default=ProductStatus.ACTIVE,
    )

    class Meta:
        db_table = "products"
        ordering = ["name"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(price__gt=0),
                name="products_price_positive",
            ),
        ]

    def clean(self) -> None:
        super().clean()
        if self.price is not None and self.price <= 0:
            raise ValidationError({"price": "Price must be greater than zero."})

    @property
    def image_url(self) -> str:
        """Public URL of the product image under the uploads mount."""
        if not self.image:
            return ""
        if self.image.startswith(("/uploads/", "http://", "https://")):
            return self.image
        return f"/uploads/products/{self.image.rsplit('/', 1)[-1]}"

    def __str__(self) -> str:
        return self.name
