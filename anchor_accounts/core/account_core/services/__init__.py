"""Service layer for account access."""

from .account_client import AccountClient
from .namespace import AccountNamespace, build_namespace, camel_case, get_program_accounts
from .subscription_registry import (
    CHANGE_EVENT,
    AccountEventSource,
    Subscription,
    SubscriptionRegistry,
    default_registry,
)

__all__ = [
    "AccountClient",
    "AccountNamespace",
    "build_namespace",
    "camel_case",
    "get_program_accounts",
    "CHANGE_EVENT",
    "AccountEventSource",
    "Subscription",
    "SubscriptionRegistry",
    "default_registry",
]
