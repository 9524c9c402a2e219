__all__ = ["NotAuthorizedException", "AccessDenied", "RecordNotFound", "NumberOfRetriesExceeded",
           "MandatoryFieldsAreNotFilled", "ValidationException", "AuthorizationException", "EmailAlreadyRegistered",
           "SomeItemsAreNotAvailable", "CartIsEmpty", "OrderNotFound", "InvalidOrderStatus",
           "OrderCannotBeCanceled", "WrongPaymentStatus", "PaymentDeclined", "RecordAlreadyExists"]


class NotAuthorizedException(Exception):
    pass


# Generic Exceptions
class AccessDenied(Exception):
    pass


class MandatoryFieldsAreNotFilled(Exception):
    pass


# DynamoDB exceptions
class RecordNotFound(Exception):
    pass


# DB Performance Exception
class NumberOfRetriesExceeded(Exception):
    pass


# Validations exceptions
class ValidationException(Exception):
    pass


class AuthorizationException(Exception):
    LEVEL = 'warning'


class EmailAlreadyRegistered(Exception):
    LEVEL = 'warning'


# Cart and order exceptions
class SomeItemsAreNotAvailable(Exception):
    pass


class CartIsEmpty(Exception):
    LEVEL = 'warning'


class OrderNotFound(RecordNotFound):
    pass


class InvalidOrderStatus(ValidationException):
    pass


class OrderCannotBeCanceled(Exception):
    LEVEL = 'warning'


# Payment exceptions
class WrongPaymentStatus(Exception):
    LEVEL = 'warning'


class PaymentDeclined(Exception):
    LEVEL = 'warning'


class RecordAlreadyExists(Exception):
    pass
