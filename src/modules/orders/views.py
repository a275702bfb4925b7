"""Order API views.

Exposes ``OrderService`` and ``ReturnService`` via HTTP using a DRF
ViewSet.  Request bodies are shape-checked by serializers, turned into
immutable DTOs, then handed to the service.  Domain exceptions are caught
and translated into HTTP responses by their taxonomy base class; the view
never swallows generic exceptions.
"""

from __future__ import annotations

from typing import Any, Dict, Type

from django_filters.rest_framework import DjangoFilterBackend
from pydantic import BaseModel as DTO
from pydantic import ValidationError
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.permissions import BasePermission, IsAdminUser, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.viewsets import GenericViewSet

from modules.core.exceptions import domain_error_response
from modules.core.pagination import StandardResultsSetPagination
from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.orders.dtos import (
    AssignDeliveryDTO,
    CreateOrderDTO,
    UpdateOrderStatusDTO,
    VerifyPaymentDTO,
)
from modules.orders.exceptions import InvalidOrderData
from modules.orders.filters import OrderFilter
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.serializers import (
    AdminOrderSerializer,
    AssignDeliverySerializer,
    CreateOrderSerializer,
    OrderDetailSerializer,
    OrderSerializer,
    OrderStatsSerializer,
    UpdateOrderStatusSerializer,
    VerifyPaymentSerializer,
)
from modules.orders.services import OrderService
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.returns.dtos import RequestReturnDTO, UpdateReturnStatusDTO
from modules.returns.repositories.django_repository import (
    ReturnPolicyDjangoRepository,
)
from modules.returns.serializers import (
    RequestReturnSerializer,
    UpdateReturnStatusSerializer,
)
from modules.returns.services import ReturnPolicyService, ReturnService
from shared.domain.exceptions import DomainError, InvalidInput

ADMIN_ACTIONS = {
    "list",
    "stats",
    "change_status",
    "assign_delivery",
    "verify_payment",
    "update_return_status",
}


def _build_dto(
    dto_class: Type[DTO],
    data: Dict[str, Any],
    error_class: Type[InvalidInput] = InvalidOrderData,
) -> Any:
    try:
        return dto_class(**data)
    except ValidationError as exc:
        raise error_class.from_pydantic(exc) from exc


class OrderViewSet(GenericViewSet):
    """ViewSet for Order operations.

    Uses ``OrderService`` and ``ReturnService`` with injected repositories
    (DIP).  Does **not** extend ``ModelViewSet``: all ORM access goes
    through the service/repository layer.
    """

    queryset = Order.objects.all()
    filterset_class = OrderFilter
    search_fields = ["order_number", "tracking_id"]
    ordering_fields = ["created_at", "payment_amount", "status"]
    ordering = ["-created_at", "-id"]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        order_repository = OrderDjangoRepository()
        self._customers = CustomerDjangoRepository()
        self._service = OrderService(
            order_repository=order_repository,
            customer_repository=self._customers,
            product_repository=ProductDjangoRepository(),
        )
        self._returns = ReturnService(
            order_repository=order_repository,
            policy_service=ReturnPolicyService(ReturnPolicyDjangoRepository()),
        )

    def get_permissions(self) -> list[BasePermission]:
        if self.action in ADMIN_ACTIONS:
            return [IsAdminUser()]
        return [IsAuthenticated()]

    def get_throttles(self) -> list[BaseThrottle]:
        """Throttling scopes per action."""
        throttle_scope: str | None
        if self.action == "create":
            throttle_scope = "order_creation"
        elif self.action in {"list", "retrieve", "mine"}:
            throttle_scope = "order_listing"
        else:
            throttle_scope = None
        self.throttle_scope = throttle_scope
        return super().get_throttles()

    def get_queryset(self):
        return self._service.list_orders()

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/orders/

        The purchaser is the authenticated user; ``payment_verified`` is
        never read from the payload.
        """
        serializer = CreateOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            customer = self._customers.get_or_create_for_user(request.user)
            dto = _build_dto(
                CreateOrderDTO,
                {
                    "customer_id": customer.id,
                    "product_id": data["product_id"],
                    "quantity": data["quantity"],
                    "size": data.get("size", ""),
                    **data["shipping_info"],
                    **data.get("payment_info", {}),
                },
            )
            order = self._service.create_order(dto)
        except DomainError as exc:
            return domain_error_response(exc)

        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/orders/ (admin)

        Filtering (status, return status, payment status/type, purchaser,
        date range) is handled by ``OrderFilter``; ``search`` matches order
        number and tracking ID.  Results are paginated.
        """
        queryset = self.filter_queryset(self.get_queryset())

        paginator = StandardResultsSetPagination()
        page = paginator.paginate_queryset(queryset, request, view=self)
        serializer = AdminOrderSerializer(page, many=True)
        return paginator.get_paginated_response(serializer.data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/ (admin or purchaser)"""
        try:
            customer_id = None
            if not request.user.is_staff:
                customer_id = self._customers.get_or_create_for_user(request.user).id
            order = self._service.get_order(str(pk), customer_id=customer_id)
        except DomainError as exc:
            return domain_error_response(exc)
        return Response(OrderDetailSerializer(order).data)

    @action(detail=False, methods=["get"])
    def mine(self, request: Request) -> Response:
        """GET /api/v1/orders/mine/"""
        customer = self._customers.get_or_create_for_user(request.user)
        orders = self._service.list_my_orders(customer.id)
        return Response(OrderSerializer(orders, many=True).data)

    @action(detail=False, methods=["get"])
    def stats(self, request: Request) -> Response:
        """GET /api/v1/orders/stats/ (admin)"""
        stats = self._service.get_stats()
        return Response(OrderStatsSerializer(stats.model_dump()).data)

    # ------------------------------------------------------------------
    # Lifecycle transitions (admin)
    # ------------------------------------------------------------------

    @action(detail=True, methods=["put"], url_path="status")
    def change_status(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/v1/orders/{pk}/status/"""
        serializer = UpdateOrderStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            dto = _build_dto(UpdateOrderStatusDTO, serializer.validated_data)
            order = self._service.update_status(str(pk), dto, actor_id=request.user.pk)
        except DomainError as exc:
            return domain_error_response(exc)
        return Response(AdminOrderSerializer(order).data)

    @action(detail=True, methods=["put"], url_path="assign-delivery")
    def assign_delivery(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/v1/orders/{pk}/assign-delivery/"""
        serializer = AssignDeliverySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            dto = _build_dto(AssignDeliveryDTO, serializer.validated_data)
            order = self._service.assign_delivery(
                str(pk), dto, actor_id=request.user.pk
            )
        except DomainError as exc:
            return domain_error_response(exc)
        return Response(AdminOrderSerializer(order).data)

    @action(detail=True, methods=["put"], url_path="verify-payment")
    def verify_payment(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/v1/orders/{pk}/verify-payment/"""
        serializer = VerifyPaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            dto = _build_dto(VerifyPaymentDTO, serializer.validated_data)
            order = self._service.verify_payment(str(pk), dto)
        except DomainError as exc:
            return domain_error_response(exc)
        return Response(AdminOrderSerializer(order).data)

    # ------------------------------------------------------------------
    # Returns
    # ------------------------------------------------------------------

    @action(detail=True, methods=["post"], url_path="return")
    def request_return(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/return/ (purchaser)"""
        serializer = RequestReturnSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            dto = _build_dto(RequestReturnDTO, serializer.validated_data)
            customer = self._customers.get_or_create_for_user(request.user)
            order = self._returns.request_return(str(pk), customer.id, dto)
        except DomainError as exc:
            return domain_error_response(exc)
        return Response(OrderSerializer(order).data)

    @action(detail=True, methods=["put"], url_path="return-status")
    def update_return_status(
        self, request: Request, pk: str | None = None
    ) -> Response:
        """PUT /api/v1/orders/{pk}/return-status/"""
        serializer = UpdateReturnStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            dto = _build_dto(UpdateReturnStatusDTO, serializer.validated_data)
            order = self._returns.update_return_status(str(pk), dto)
        except DomainError as exc:
            return domain_error_response(exc)
        return Response(AdminOrderSerializer(order).data)
