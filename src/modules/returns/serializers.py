"""Return workflow DRF serializers (transport shapes only)."""

from __future__ import annotations

from rest_framework import serializers

from modules.returns.models import ReturnPolicy


class RequestReturnSerializer(serializers.Serializer):
    reason = serializers.CharField(allow_blank=True)


class UpdateReturnStatusSerializer(serializers.Serializer):
    return_status = serializers.CharField()


class UpdateReturnPolicySerializer(serializers.Serializer):
    return_days = serializers.IntegerField()


class ReturnPolicySerializer(serializers.ModelSerializer):
    class Meta:
        model = ReturnPolicy
        fields = ["return_days", "updated_at"]
        read_only_fields = fields
