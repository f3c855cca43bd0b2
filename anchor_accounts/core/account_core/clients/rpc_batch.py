"""
getMultipleAccounts batching.

RPC nodes cap the number of keys per getMultipleAccounts call. Longer lists are
split into consecutive chunks, the chunks are requested concurrently and the
results are stitched back together in input order.
"""
from __future__ import annotations

import asyncio
from typing import Any, Iterator, List, Optional, Sequence, TypeVar

from solders.pubkey import Pubkey

from anchor_accounts.core.logging import log

from ..errors import AccountsBatchError
from ..models import KeyedAccountInfo, RawAccountInfo

GET_MULTIPLE_ACCOUNTS_LIMIT = 99

T = TypeVar("T")


def chunks(items: Sequence[T], size: int) -> Iterator[List[T]]:
    if size < 1:
        raise ValueError("chunk size must be >= 1")
    for i in range(0, len(items), size):
        yield list(items[i:i + size])


async def _get_multiple_accounts_core(
    connection: Any,
    public_keys: List[Pubkey],
    commitment: Optional[str] = None,
) -> List[Optional[KeyedAccountInfo]]:
    infos: List[Optional[RawAccountInfo]] = await connection.get_multiple_accounts_raw(
        public_keys, commitment
    )
    if len(infos) != len(public_keys):
        raise AccountsBatchError(
            f"getMultipleAccounts returned {len(infos)} results for {len(public_keys)} keys"
        )
    # the response does not echo keys back; stamp them by position
    return [
        None if info is None else KeyedAccountInfo(public_key=pk, account=info)
        for pk, info in zip(public_keys, infos)
    ]


async def get_multiple_accounts(
    connection: Any,
    public_keys: Sequence[Pubkey],
    commitment: Optional[str] = None,
    limit: int = GET_MULTIPLE_ACCOUNTS_LIMIT,
) -> List[Optional[KeyedAccountInfo]]:
    """Fetch any number of accounts, ``None`` where nothing is stored.

    A failure in any chunk fails the whole call.
    """
    keys = list(public_keys)
    if len(keys) <= limit:
        return await _get_multiple_accounts_core(connection, keys, commitment)

    batches = list(chunks(keys, limit))
    log.debug(f"{len(keys)} keys split into {len(batches)} batches", source="rpc_batch")
    results = await asyncio.gather(
        *(_get_multiple_accounts_core(connection, batch, commitment) for batch in batches)
    )
    return [item for batch in results for item in batch]


__all__ = ["GET_MULTIPLE_ACCOUNTS_LIMIT", "chunks", "get_multiple_accounts"]
