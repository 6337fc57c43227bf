"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class ValidationError(DomainException):
    """Input rejected locally, before any call to the store"""

    pass


class InvalidInstallmentCountError(ValidationError):
    """Installment count is not a positive integer"""

    pass


class InvalidDueDateError(ValidationError):
    """Due date or payment date is missing or does not parse"""

    pass


class InvalidPaymentValueError(ValidationError):
    """Payment value is not a positive number of cents"""

    pass


class InvalidAmountError(ValidationError):
    """Human-entered money amount could not be converted to cents"""

    pass


class StoreAPIError(DomainException):
    """Order store returned an error or is unavailable"""

    pass


class OrderNotFoundError(StoreAPIError):
    """Order store has no order with the requested id"""

    pass
