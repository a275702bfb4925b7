"""Return policy API view.

``GET`` is public so the storefront can show the return window; ``PUT``
is restricted to admins.
"""

from __future__ import annotations

from pydantic import ValidationError
from rest_framework.permissions import AllowAny, BasePermission, IsAdminUser
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from modules.core.exceptions import domain_error_response
from modules.returns.dtos import UpdateReturnPolicyDTO
from modules.returns.exceptions import InvalidReturnPolicy
from modules.returns.repositories.django_repository import (
    ReturnPolicyDjangoRepository,
)
from modules.returns.serializers import (
    ReturnPolicySerializer,
    UpdateReturnPolicySerializer,
)
from modules.returns.services import ReturnPolicyService


class ReturnPolicyView(APIView):
    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = ReturnPolicyService(ReturnPolicyDjangoRepository())

    def get_permissions(self) -> list[BasePermission]:
        if self.request.method == "GET":
            return [AllowAny()]
        return [IsAdminUser()]

    def get(self, request: Request) -> Response:
        """GET /api/v1/return-policy/"""
        policy = self._service.get_policy()
        return Response(ReturnPolicySerializer(policy).data)

    def put(self, request: Request) -> Response:
        """PUT /api/v1/return-policy/"""
        serializer = UpdateReturnPolicySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            dto = UpdateReturnPolicyDTO(**serializer.validated_data)
        except ValidationError as exc:
            return domain_error_response(InvalidReturnPolicy.from_pydantic(exc))
        policy = self._service.set_policy(dto)
        return Response(ReturnPolicySerializer(policy).data)
