from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Union

from solders.pubkey import Pubkey

Address = Union[Pubkey, str]


def translate_address(address: Address) -> Pubkey:
    """Accept a ``Pubkey`` or its base-58 string and return a ``Pubkey``."""

    if isinstance(address, Pubkey):
        return address
    return Pubkey.from_string(str(address))


@dataclass
class RawAccountInfo:
    """Account payload as returned by the RPC layer."""

    data: bytes
    owner: Pubkey
    lamports: int
    executable: bool = False


@dataclass
class KeyedAccountInfo:
    public_key: Pubkey
    account: RawAccountInfo


@dataclass
class ProgramAccount:
    """Deserialized account owned by a program.

    ``account`` is ``None`` for address-only (prefetch) scans.
    """

    public_key: Pubkey
    account: Any


# ---------------------------------------------------------------------------
# Scan filters
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class NoFilter:
    """Match every account carrying the discriminator."""


@dataclass(frozen=True)
class RawSuffix:
    """Bytes that must follow the discriminator directly."""

    data: bytes


@dataclass(frozen=True)
class PredicateList:
    """Extra server-side filters (``MemcmpOpts`` or a data size int)."""

    filters: List[Any] = field(default_factory=list)


AccountFilter = Union[NoFilter, RawSuffix, PredicateList]


__all__ = [
    "Address",
    "translate_address",
    "RawAccountInfo",
    "KeyedAccountInfo",
    "ProgramAccount",
    "NoFilter",
    "RawSuffix",
    "PredicateList",
    "AccountFilter",
]
