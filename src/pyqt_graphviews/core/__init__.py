"""
Core utilities.

Subscription handles, a deferred two-phase pulse on the Qt event loop,
and the value formatting/drag arithmetic used by the property field.
No knowledge of any particular object graph.
"""

from .subscriptions import Subscription, SubscriptionSet, EventEmitter, unique_id
from .deferred_task import DeferredPulse
from .exceptions import MissingBindingError, SubscriptionError

__all__ = [
    "Subscription",
    "SubscriptionSet",
    "EventEmitter",
    "unique_id",
    "DeferredPulse",
    "MissingBindingError",
    "SubscriptionError",
]
