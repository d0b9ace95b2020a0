"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidInputError(DomainException):
    """Caller passed a value the planners cannot work with (non-positive income, negative balance)"""

    pass
