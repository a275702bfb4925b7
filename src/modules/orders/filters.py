import django_filters

from modules.orders.models import Order


class OrderFilter(django_filters.FilterSet):
    status = django_filters.CharFilter(field_name="status", lookup_expr="iexact")
    return_status = django_filters.CharFilter(
        field_name="return_status", lookup_expr="iexact"
    )
    payment_status = django_filters.CharFilter(
        field_name="payment_status", lookup_expr="iexact"
    )
    payment_type = django_filters.CharFilter(
        field_name="payment_type", lookup_expr="iexact"
    )
    customer = django_filters.UUIDFilter(field_name="customer_id")
    start_date = django_filters.DateFilter(
        field_name="created_at", lookup_expr="date__gte"
    )
    end_date = django_filters.DateFilter(
        field_name="created_at", lookup_expr="date__lte"
    )

    class Meta:
        model = Order
        fields = [
            "status",
            "return_status",
            "payment_status",
            "payment_type",
            "customer",
            "start_date",
            "end_date",
        ]
