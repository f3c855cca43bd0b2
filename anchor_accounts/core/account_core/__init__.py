"""Account Core.

Fetches, decodes, scans and watches Anchor program accounts given the
program's IDL and id::

    decoder = get_coder(idl)
    accounts = build_namespace(idl, decoder, program_id, SolanaConnection(rpc_url))
    vault = await accounts["vault"].fetch(address)

Run the console with ``python -m anchor_accounts.core.account_core.console``.
"""

from .coder import ACCOUNT_DISCRIMINATOR_SIZE, AnchorAccountDecoder, account_discriminator, get_coder
from .errors import (
    AccountCoreError,
    AccountDoesNotExistError,
    AccountsBatchError,
    AccountTypeMismatchError,
    ProviderConfigError,
)
from .models import NoFilter, PredicateList, ProgramAccount, RawAccountInfo, RawSuffix
from .services import (
    AccountClient,
    AccountEventSource,
    AccountNamespace,
    SubscriptionRegistry,
    build_namespace,
    get_program_accounts,
)
from .clients import SolanaConnection

__all__ = [
    "ACCOUNT_DISCRIMINATOR_SIZE",
    "AnchorAccountDecoder",
    "account_discriminator",
    "get_coder",
    "AccountCoreError",
    "AccountDoesNotExistError",
    "AccountsBatchError",
    "AccountTypeMismatchError",
    "ProviderConfigError",
    "NoFilter",
    "PredicateList",
    "ProgramAccount",
    "RawAccountInfo",
    "RawSuffix",
    "AccountClient",
    "AccountEventSource",
    "AccountNamespace",
    "SubscriptionRegistry",
    "build_namespace",
    "get_program_accounts",
    "SolanaConnection",
]
