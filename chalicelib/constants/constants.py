import os
from decimal import Decimal

ROLE_CUSTOMER = 'customer'
ROLE_RESTAURANT_OWNER = 'restaurant_owner'
ROLE_ADMIN = 'admin'
USER_ROLES = (ROLE_CUSTOMER, ROLE_RESTAURANT_OWNER, ROLE_ADMIN)
SELF_REGISTRATION_ROLES = (ROLE_CUSTOMER, ROLE_RESTAURANT_OWNER)

ORDER_CREATED = 'created'
ORDER_CONFIRMED = 'confirmed'
ORDER_PREPARING = 'preparing'
ORDER_OUT_FOR_DELIVERY = 'out_for_delivery'
ORDER_DELIVERED = 'delivered'
ORDER_CANCELED = 'canceled'
ORDER_STATUSES = (ORDER_CREATED, ORDER_CONFIRMED, ORDER_PREPARING, ORDER_OUT_FOR_DELIVERY, ORDER_DELIVERED,
                  ORDER_CANCELED)
ORDER_CANCELABLE_STATUSES = (ORDER_CREATED, ORDER_CONFIRMED)

PAYMENT_PENDING = 'pending'
PAYMENT_COMPLETED = 'completed'
PAYMENT_FAILED = 'failed'
PAYMENT_REFUNDED = 'refunded'
PAYMENT_STATUSES = (PAYMENT_PENDING, PAYMENT_COMPLETED, PAYMENT_FAILED, PAYMENT_REFUNDED)

MIN_PASSWORD_LENGTH = 6
MAX_CART_QUANTITY = 999
MIN_RATING = 1
MAX_RATING = 5

CENTS = Decimal('0.01')

DEFAULT_TAX_RATE = '0.08'
DEFAULT_DELIVERY_FEE = '3.99'
DEFAULT_PAYMENT_GATEWAY_DELAY = '1.0'
DEFAULT_PAYMENT_FAILURE_RATE = '0.05'
DEFAULT_REFUND_FAILURE_RATE = '0.02'


def tax_rate() -> Decimal:
    return Decimal(os.environ.get('TAX_RATE', DEFAULT_TAX_RATE))


def delivery_fee() -> Decimal:
    return Decimal(os.environ.get('DELIVERY_FEE', DEFAULT_DELIVERY_FEE)).quantize(CENTS)


def order_email_from() -> str:
    return os.environ.get('ORDER_EMAIL_FROM', 'orders@food-delivery.local')
