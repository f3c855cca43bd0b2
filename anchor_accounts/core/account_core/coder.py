"""Discriminator helpers and the decoder seam used by account clients.

Anchor prefixes every account with an 8 byte discriminator equal to the first
8 bytes of ``sha256(b"account:" + <AccountName>)``. Clients compare that prefix
before handing bytes to the Borsh decoder.
"""

from __future__ import annotations

import hashlib
from typing import Any, Optional, Protocol

from anchorpy import Idl
from anchorpy.coder.accounts import AccountsCoder

from anchor_accounts.core.logging import log

ACCOUNT_DISCRIMINATOR_SIZE = 8  # bytes


def account_discriminator(name: str) -> bytes:
    """Anchor discriminator = first 8 bytes of sha256(b"account:" + name)."""
    return hashlib.sha256(f"account:{name}".encode("utf-8")).digest()[:ACCOUNT_DISCRIMINATOR_SIZE]


class AccountDecoder(Protocol):
    def decode(self, type_name: str, data: bytes) -> Any: ...

    def discriminator(self, type_name: str) -> bytes: ...

    def size(self, idl_account: Any) -> int: ...


class AnchorAccountDecoder:
    """Adapter over anchorpy's ``AccountsCoder``."""

    def __init__(self, idl: Idl, coder: Optional[AccountsCoder] = None) -> None:
        self.idl = idl
        self._coder = coder if coder is not None else AccountsCoder(idl)

    def decode(self, type_name: str, data: bytes) -> Any:
        # AccountsCoder switches on the discriminator embedded in ``data``.
        return self._coder.decode(bytes(data))

    def discriminator(self, type_name: str) -> bytes:
        return account_discriminator(type_name)

    def size(self, idl_account: Any) -> int:
        from anchorpy.coder.common import _account_size

        try:
            return int(_account_size(self.idl, idl_account) or 0)
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            log.debug(
                f"size unknown for {getattr(idl_account, 'name', idl_account)}: {exc}",
                source="coder",
            )
            return 0


def get_coder(idl: Idl) -> AnchorAccountDecoder:
    """Return a decoder for the accounts declared in ``idl``."""
    return AnchorAccountDecoder(idl)


class _Mismatch:
    def __repr__(self) -> str:
        return "MISMATCH"

    def __bool__(self) -> bool:
        return False


MISMATCH = _Mismatch()


def decode_if_matching(decoder: AccountDecoder, type_name: str, data: bytes) -> Any:
    """Decode ``data`` when its prefix is ``type_name``'s discriminator.

    Returns :data:`MISMATCH` otherwise; callers decide whether that is an error
    or an empty result.
    """
    expected = decoder.discriminator(type_name)
    if bytes(data[:ACCOUNT_DISCRIMINATOR_SIZE]) != expected:
        return MISMATCH
    return decoder.decode(type_name, data)


__all__ = [
    "ACCOUNT_DISCRIMINATOR_SIZE",
    "account_discriminator",
    "AccountDecoder",
    "AnchorAccountDecoder",
    "get_coder",
    "MISMATCH",
    "decode_if_matching",
]
