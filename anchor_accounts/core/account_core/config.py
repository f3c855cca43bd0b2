from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional

from anchor_accounts.core.core_constants import DEFAULT_RPC_URL

from .clients.rpc_batch import GET_MULTIPLE_ACCOUNTS_LIMIT


def _as_int(value: Optional[str], default: int) -> int:
    if value is None or not value.strip():
        return default
    try:
        return int(value.strip())
    except ValueError:
        return default


@dataclass(frozen=True)
class AccountCoreConfig:
    """Configuration container for account access."""

    rpc_url: str = field(default_factory=lambda: os.getenv("SOLANA_RPC_URL", DEFAULT_RPC_URL))

    # Derived from rpc_url (http -> ws) when unset
    ws_url: Optional[str] = field(default_factory=lambda: os.getenv("SOLANA_WS_URL") or None)

    # processed | confirmed | finalized; None defers to the node default
    commitment: Optional[str] = field(default_factory=lambda: os.getenv("SOLANA_COMMITMENT") or None)

    # getMultipleAccounts keys per request
    batch_limit: int = field(
        default_factory=lambda: _as_int(os.getenv("ACCOUNTS_BATCH_LIMIT"), GET_MULTIPLE_ACCOUNTS_LIMIT)
    )


def get_config() -> AccountCoreConfig:
    """Return an ``AccountCoreConfig`` with environment defaults applied."""

    return AccountCoreConfig()
