from __future__ import annotations

import os
from typing import Optional

from anchor_accounts.core.core_constants import LOCALNET_RPC_URL
from anchor_accounts.core.logging import log

from .clients.connection import SolanaConnection
from .errors import ProviderConfigError

DEFAULT_COMMITMENT = "processed"
PROVIDER_URL_ENV = "ANCHOR_PROVIDER_URL"


class Provider:
    """The cluster connection plus the default commitment used for reads."""

    def __init__(self, connection: SolanaConnection, commitment: Optional[str] = DEFAULT_COMMITMENT) -> None:
        self.connection = connection
        self.commitment = commitment

    @classmethod
    def local(cls, url: Optional[str] = None, commitment: Optional[str] = None) -> "Provider":
        """Provider for a local validator (``http://localhost:8899`` by default)."""
        commitment = commitment or DEFAULT_COMMITMENT
        connection = SolanaConnection(url or LOCALNET_RPC_URL, commitment=commitment)
        return cls(connection, commitment)

    @classmethod
    def env(cls) -> "Provider":
        """Provider for the cluster named by ``$ANCHOR_PROVIDER_URL``."""
        url = (os.getenv(PROVIDER_URL_ENV) or "").strip()
        if not url:
            raise ProviderConfigError(f"{PROVIDER_URL_ENV} is not defined")
        connection = SolanaConnection(url, commitment=DEFAULT_COMMITMENT)
        return cls(connection, DEFAULT_COMMITMENT)


_provider: Optional[Provider] = None


def set_provider(provider: Provider) -> None:
    """Sets the default provider."""
    global _provider
    _provider = provider


def get_provider() -> Provider:
    """Returns the default provider, a local one if none was set."""
    global _provider
    if _provider is None:
        log.info(f"no provider set; using {LOCALNET_RPC_URL}", source="provider")
        _provider = Provider.local()
    return _provider


__all__ = ["Provider", "set_provider", "get_provider", "DEFAULT_COMMITMENT"]
