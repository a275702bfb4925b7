"""Order DRF serializers for API input/output.

The serializer operates at the Interface layer (API Views): input
serializers only check transport shapes (types, UUIDs, dates).  Business
validation (trimmed lengths, allowed values) lives in the Pydantic DTOs
from ``dtos.py`` that the Service Layer receives.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from rest_framework import serializers

from modules.orders.models import Order, OrderStatusHistory

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class ShippingInfoSerializer(serializers.Serializer):
    address_line = serializers.CharField(allow_blank=True)
    area = serializers.CharField(required=False, allow_blank=True, default="")
    city = serializers.CharField(allow_blank=True)
    state = serializers.CharField(allow_blank=True)
    postal_code = serializers.CharField(allow_blank=True)
    phone = serializers.CharField(allow_blank=True)


class PaymentInfoSerializer(serializers.Serializer):
    """Payment details as asserted by the client (never ``payment_verified``)."""

    payment_type = serializers.CharField(required=False)
    payment_method = serializers.CharField(required=False)
    payment_status = serializers.CharField(required=False, allow_blank=True)
    payment_id = serializers.CharField(required=False, allow_blank=True, default="")
    payment_amount = serializers.DecimalField(
        max_digits=12, decimal_places=2, required=False
    )


class CreateOrderSerializer(serializers.Serializer):
    """Validates the order placement request payload."""

    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField()
    size = serializers.CharField(required=False, allow_blank=True, default="")
    shipping_info = ShippingInfoSerializer()
    payment_info = PaymentInfoSerializer(required=False)


class UpdateOrderStatusSerializer(serializers.Serializer):
    status = serializers.CharField()
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class AssignDeliverySerializer(serializers.Serializer):
    partner_name = serializers.CharField(allow_blank=True)
    partner_phone = serializers.CharField(allow_blank=True)
    estimated_delivery = serializers.DateTimeField(
        required=False,
        allow_null=True,
        input_formats=["iso-8601", "%Y-%m-%d"],
    )


class VerifyPaymentSerializer(serializers.Serializer):
    payment_status = serializers.CharField()


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


def _product_summary(order: Order) -> Optional[Dict[str, Any]]:
    product = order.resolved_product
    if product is None:
        return None
    return {
        "id": str(product.id),
        "name": product.name,
        "price": str(product.price),
        "image": product.image_url,
    }


class StatusHistorySerializer(serializers.ModelSerializer):
    """Read serializer for order status history records."""

    class Meta:
        model = OrderStatusHistory
        fields = [
            "id",
            "old_status",
            "new_status",
            "user_id",
            "notes",
            "created_at",
        ]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """Read serializer for a purchaser-facing order with its product summary."""

    product = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "customer_id",
            "product_id",
            "product",
            "quantity",
            "size",
            "address_line",
            "area",
            "city",
            "state",
            "postal_code",
            "phone",
            "delivery_address",
            "status",
            "delivered_date",
            "delivery_partner_name",
            "delivery_partner_phone",
            "tracking_id",
            "estimated_delivery",
            "payment_type",
            "payment_method",
            "payment_status",
            "payment_id",
            "payment_amount",
            "payment_verified",
            "payment_verified_at",
            "return_status",
            "return_reason",
            "return_request_date",
            "return_approved_date",
            "version",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_product(self, order: Order) -> Optional[Dict[str, Any]]:
        return _product_summary(order)


class AdminOrderSerializer(OrderSerializer):
    """Adds the purchaser summary shown in the admin console."""

    customer = serializers.SerializerMethodField()

    class Meta(OrderSerializer.Meta):
        fields = OrderSerializer.Meta.fields + ["customer"]
        read_only_fields = fields

    def get_customer(self, order: Order) -> Dict[str, Any]:
        customer = order.customer
        return {
            "id": str(customer.id),
            "name": customer.name,
            "email": customer.email,
        }


class OrderDetailSerializer(AdminOrderSerializer):
    """Single-order view including the status history trail."""

    status_history = StatusHistorySerializer(many=True, read_only=True)

    class Meta(AdminOrderSerializer.Meta):
        fields = AdminOrderSerializer.Meta.fields + ["status_history"]
        read_only_fields = fields


class OrderStatsSerializer(serializers.Serializer):
    total_orders = serializers.IntegerField()
    by_status = serializers.DictField(child=serializers.IntegerField())
    returns_requested = serializers.IntegerField()
    returns_approved = serializers.IntegerField()
    returns_completed = serializers.IntegerField()
