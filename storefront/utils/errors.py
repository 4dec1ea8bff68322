# storefront/utils/errors.py


class NotFoundError(LookupError):
    """Missing resource, or one that belongs to another user."""


class InsufficientStockError(ValueError):
    def __init__(self, available: int, requested: int | None = None):
        self.available = available
        self.requested = requested
        if requested is None:
            message = f"Insufficient stock. Available: {available}"
        else:
            message = f"Insufficient stock. Available: {available}, requested: {requested}"
        super().__init__(message)


class ServiceError(RuntimeError):
    """Storage or integration failure, carries a user-safe message."""


class AssistantUnavailableError(ServiceError):
    pass
