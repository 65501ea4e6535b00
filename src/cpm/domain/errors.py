class AppError(Exception):
    """Base app error."""


class ValidationError(AppError):
    pass


class RegimeLockedError(ValidationError):
    """VAT regime can no longer change for this product."""
