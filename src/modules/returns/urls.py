"""Returns URL configuration."""

from __future__ import annotations

from django.urls import path

from modules.returns.views import ReturnPolicyView

urlpatterns = [
    path("return-policy/", ReturnPolicyView.as_view(), name="return-policy"),
]
