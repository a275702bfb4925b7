from __future__ import annotations

import random
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand

from modules.customers.models import Customer
from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.orders.constants import OrderStatus, PaymentType
from modules.orders.dtos import (
    AssignDeliveryDTO,
    CreateOrderDTO,
    UpdateOrderStatusDTO,
)
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.products.models import Product, ProductStatus
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.returns.repositories.django_repository import (
    ReturnPolicyDjangoRepository,
)


class Command(BaseCommand):
    help = "Seed database with realistic development data."

    def handle(self, *args, **options):
        random.seed(42)
        self.stdout.write("Seeding development data...")

        users_created = self._seed_users()
        customers = self._seed_customers()
        products = self._seed_products()
        ReturnPolicyDjangoRepository().get_current()
        orders_created = self._seed_orders(customers, products)

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"users={users_created}, "
                f"customers={len(customers)}, "
                f"products={len(products)}, "
                f"orders={orders_created}"
            )
        )

    def _seed_users(self) -> int:
        User = get_user_model()
        created = 0
        if not User.objects.filter(username="admin").exists():
            User.objects.create_superuser("admin", password="admin123")
            created += 1
        for username in ("asha", "ravi", "meera"):
            if not User.objects.filter(username=username).exists():
                User.objects.create_user(
                    username,
                    password=f"{username}123",
                    email=f"{username}@example.com",
                )
                created += 1
        return created

    def _seed_customers(self) -> list[Customer]:
        self.stdout.write("Creating customers...")
        repository = CustomerDjangoRepository()
        User = get_user_model()
        customers = [
            repository.get_or_create_for_user(user)
            for user in User.objects.filter(is_staff=False).order_by("username")
        ]
        self.stdout.write(self.style.SUCCESS("Creating customers... Done!"))
        return customers

    def _seed_products(self) -> list[Product]:
        self.stdout.write("Creating products...")
        products: list[Product] = []
        catalog = [
            ("Cotton Kurta", "Apparel", Decimal("899.00")),
            ("Denim Jacket", "Apparel", Decimal("2499.00")),
            ("Silk Saree", "Apparel", Decimal("4999.00")),
            ("Running Shoes", "Footwear", Decimal("3299.00")),
            ("Leather Sandals", "Footwear", Decimal("1199.00")),
            ("Canvas Backpack", "Accessories", Decimal("1499.00")),
            ("Steel Water Bottle", "Accessories", Decimal("599.00")),
            ("Wireless Earbuds", "Electronics", Decimal("2799.00")),
        ]
        for name, category, price in catalog:
            product, _ = Product.objects.get_or_create(
                name=name,
                defaults={
                    "description": category,
                    "price": price,
                    "status": ProductStatus.ACTIVE,
                },
            )
            products.append(product)
        self.stdout.write(self.style.SUCCESS("Creating products... Done!"))
        return products

    def _seed_orders(self, customers: list[Customer], products: list[Product]) -> int:
        self.stdout.write("Creating orders...")
        if not customers or not products:
            self.stdout.write(
                self.style.WARNING("Skipping orders (no customers/products).")
            )
            return 0

        service = OrderService(
            order_repository=OrderDjangoRepository(),
            customer_repository=CustomerDjangoRepository(),
            product_repository=ProductDjangoRepository(),
        )
        # Final lifecycle stage reached by each seeded order.
        stages = [
            OrderStatus.PENDING,
            OrderStatus.ACCEPTED,
            OrderStatus.REJECTED,
            OrderStatus.ASSIGNED,
            OrderStatus.DELIVERED,
        ]

        orders_created = 0
        for i in range(20):
            customer = random.choice(customers)
            product = random.choice(products)
            order = service.create_order(
                CreateOrderDTO(
                    customer_id=customer.id,
                    product_id=product.id,
                    quantity=random.randint(1, 3),
                    address_line=f"{10 + i} MG Road",
                    city="Bengaluru",
                    state="Karnataka",
                    postal_code="560001",
                    phone="9876543210",
                    payment_type=random.choice(PaymentType.values),
                )
            )
            orders_created += 1

            stage = random.choice(stages)
            if stage == OrderStatus.PENDING:
                continue
            if stage == OrderStatus.REJECTED:
                service.update_status(order.id, UpdateOrderStatusDTO(status=stage))
                continue
            service.update_status(
                order.id, UpdateOrderStatusDTO(status=OrderStatus.ACCEPTED)
            )
            if stage == OrderStatus.ACCEPTED:
                continue
            service.assign_delivery(
                order.id,
                AssignDeliveryDTO(partner_name="Swift Couriers", partner_phone="9123456780"),
            )
            if stage == OrderStatus.DELIVERED:
                service.update_status(order.id, UpdateOrderStatusDTO(status=stage))

        self.stdout.write(self.style.SUCCESS("Creating orders... Done!"))
        return orders_created
