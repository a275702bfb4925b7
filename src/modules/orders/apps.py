from django.apps import AppConfig


class OrdersConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "modules.orders"
    label = "orders"

    def ready(self) -> None:
        from modules.orders.events import (
            DeliveryAssigned,
            OrderPlaced,
            OrderStatusChanged,
            PaymentVerified,
        )
        from modules.orders.handlers import (
            delivery_assigned_handler,
            order_placed_handler,
            order_status_changed_handler,
            payment_verified_handler,
        )
        from shared.infrastructure.bus import event_bus

        event_bus.subscribe(OrderPlaced, order_placed_handler)
        event_bus.subscribe(OrderStatusChanged, order_status_changed_handler)
        event_bus.subscribe(DeliveryAssigned, delivery_assigned_handler)
        event_bus.subscribe(PaymentVerified, payment_verified_handler)
