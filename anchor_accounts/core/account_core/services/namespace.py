from __future__ import annotations

import re
from typing import Any, Dict, Optional

from solders.pubkey import Pubkey

from ..clients.rpc_batch import GET_MULTIPLE_ACCOUNTS_LIMIT
from ..coder import AccountDecoder
from .account_client import AccountClient
from .subscription_registry import SubscriptionRegistry, default_registry

_LEADING_UPPER = re.compile(r"^([A-Z]+)(.*)$")


def _title_part(part: str) -> str:
    # all-caps words (``STATE``) fold to ``State``; mixed case keeps its humps
    tail = part[1:].lower() if part.isupper() else part[1:]
    return part[0].upper() + tail


def camel_case(name: str) -> str:
    """``vault_state``/``VaultState``/``vault_STATE`` -> ``vaultState``, ``SBState`` -> ``sbState``."""
    parts = [p for p in re.split(r"[_\-\s]+", name) if p]
    if not parts:
        return ""
    head = parts[0]
    m = _LEADING_UPPER.match(head)
    if m:
        run, rest = m.groups()
        if len(run) > 1 and rest[:1].islower():
            # keep the capital that starts the next word
            head = run[:-1].lower() + run[-1] + rest
        else:
            head = run.lower() + rest
    return head + "".join(_title_part(p) for p in parts[1:])


class AccountNamespace(Dict[str, AccountClient]):
    """Account clients keyed by camel-cased account name; attribute access works too."""

    def __getattr__(self, name: str) -> AccountClient:
        try:
            return self[name]
        except KeyError:
            raise AttributeError(name) from None


def build_namespace(
    idl: Any,
    decoder: AccountDecoder,
    program_id: Pubkey,
    connection: Any,
    registry: Optional[SubscriptionRegistry] = None,
    batch_limit: int = GET_MULTIPLE_ACCOUNTS_LIMIT,
) -> AccountNamespace:
    """Build one :class:`AccountClient` per account declared in ``idl``.

    All clients share ``registry`` (the process-wide :func:`default_registry`
    when omitted), so an address has at most one live listener across every
    account type.
    """
    registry = registry if registry is not None else default_registry()
    namespace = AccountNamespace()
    for idl_account in getattr(idl, "accounts", None) or []:
        namespace[camel_case(idl_account.name)] = AccountClient(
            idl,
            idl_account,
            program_id,
            connection,
            decoder=decoder,
            registry=registry,
            batch_limit=batch_limit,
        )
    return namespace


def get_program_accounts(
    idl: Any,
    coder: AccountDecoder,
    program_id: Pubkey,
    connection: Any,
) -> AccountNamespace:
    """Account clients for ``program_id`` without building a full anchorpy ``Program``."""
    return build_namespace(idl, coder, program_id, connection)


__all__ = ["camel_case", "AccountNamespace", "build_namespace", "get_program_accounts"]
