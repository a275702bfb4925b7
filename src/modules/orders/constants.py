"""Order domain constants.

Defines status choices, payment and return enums, and the transition
maps of the order lifecycle state machine and its return sub-state machine.
"""

from decouple import config
from django.db import models


class OrderStatus(models.TextChoices):
    PENDING = "Pending", "Pending"
    ACCEPTED = "Accepted", "Accepted"
    REJECTED = "Rejected", "Rejected"
    ASSIGNED = "Assigned", "Assigned"
    DELIVERED = "Delivered", "Delivered"


class PaymentType(models.TextChoices):
    ONLINE = "Online", "Online"
    CASH_ON_DELIVERY = "Cash on Delivery", "Cash on Delivery"


class PaymentMethod(models.TextChoices):
    CASH = "Cash", "Cash"
    UPI = "UPI", "UPI"
    GPAY = "GPay", "GPay"
    CARD = "Card", "Card"
    QR = "QR", "QR"
    PHONEPE = "PhonePe", "PhonePe"
    PAYTM = "Paytm", "Paytm"


class PaymentStatus(models.TextChoices):
    PENDING = "Pending", "Pending"
    PAID = "Paid", "Paid"
    FAILED = "Failed", "Failed"
    REFUNDED = "Refunded", "Refunded"


class ReturnStatus(models.TextChoices):
    NONE = "None", "None"
    REQUESTED = "Requested", "Requested"
    APPROVED = "Approved", "Approved"
    REJECTED = "Rejected", "Rejected"
    COMPLETED = "Completed", "Completed"


# Targets accepted by the admin status setter.  Forward skips are kept
# (e.g. PENDING -> DELIVERED); regressions and exits from terminal states
# are refused.
VALID_TRANSITIONS: dict[str, set[str]] = {
    OrderStatus.PENDING: {
        OrderStatus.ACCEPTED,
        OrderStatus.REJECTED,
        OrderStatus.ASSIGNED,
        OrderStatus.DELIVERED,
    },
    OrderStatus.ACCEPTED: {
        OrderStatus.REJECTED,
        OrderStatus.ASSIGNED,
        OrderStatus.DELIVERED,
    },
    OrderStatus.ASSIGNED: {OrderStatus.DELIVERED},
    OrderStatus.REJECTED: set(),
    OrderStatus.DELIVERED: set(),
}

TERMINAL_STATES: set[str] = {OrderStatus.REJECTED, OrderStatus.DELIVERED}

# Delivery partner may be (re)assigned only in these states.
ASSIGNABLE_STATES: set[str] = {OrderStatus.ACCEPTED, OrderStatus.ASSIGNED}

VALID_RETURN_TRANSITIONS: dict[str, set[str]] = {
    ReturnStatus.NONE: {ReturnStatus.REQUESTED},
    ReturnStatus.REQUESTED: {ReturnStatus.APPROVED, ReturnStatus.REJECTED},
    ReturnStatus.APPROVED: {ReturnStatus.COMPLETED},
    ReturnStatus.REJECTED: set(),
    ReturnStatus.COMPLETED: set(),
}

# Values an admin may set through the return-status operation.
ADMIN_RETURN_STATUSES: set[str] = {
    ReturnStatus.APPROVED,
    ReturnStatus.REJECTED,
    ReturnStatus.COMPLETED,
}

# Values an admin may assert through payment verification.
VERIFIABLE_PAYMENT_STATUSES: set[str] = {PaymentStatus.PAID, PaymentStatus.FAILED}

# Minimum trimmed lengths of free-text input.
MIN_ADDRESS_LINE_LENGTH = 5
MIN_CITY_LENGTH = 2
MIN_STATE_LENGTH = 2
MIN_POSTAL_CODE_LENGTH = 4
MIN_PHONE_LENGTH = 6
MIN_PARTNER_NAME_LENGTH = 2
MIN_RETURN_REASON_LENGTH = 10

TRACKING_ID_PREFIX = "TRK"
TRACKING_SUFFIX_LENGTH = 6
DEFAULT_DELIVERY_DAYS = config("DEFAULT_DELIVERY_DAYS", default=3, cast=int)

ORDER_NUMBER_MAX_RETRIES = 5
