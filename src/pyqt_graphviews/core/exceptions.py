"""Widget binding exceptions."""


class MissingBindingError(ValueError):
    """Raised when a widget is constructed without the object it must bind to."""


class SubscriptionError(RuntimeError):
    """Raised when a widget subscribes twice without releasing the first set."""
