from __future__ import annotations

import asyncio
import base64
import itertools
import json
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

import websockets
from solana.rpc.async_api import AsyncClient
from solana.rpc.types import DataSliceOpts
from solders.pubkey import Pubkey

from anchor_accounts.core.logging import log

from ..models import RawAccountInfo

AccountChangeCallback = Callable[[RawAccountInfo], None]


def ws_url_from_http(url: str) -> str:
    """http(s) -> ws(s)"""
    if url.startswith("http"):
        return url.replace("http", "ws", 1)
    return url


def _raw_from_account(account: Any) -> Optional[RawAccountInfo]:
    if account is None:
        return None
    return RawAccountInfo(
        data=bytes(account.data),
        owner=account.owner,
        lamports=int(account.lamports),
        executable=bool(account.executable),
    )


def _raw_from_notification(value: Dict[str, Any]) -> RawAccountInfo:
    data = value.get("data") or ["", "base64"]
    if isinstance(data, list):
        raw = base64.b64decode(data[0]) if data and data[0] else b""
    elif isinstance(data, dict) and "encoded" in data:
        raw = base64.b64decode(data["encoded"])
    else:
        raise ValueError(f"unsupported account data shape: {type(data).__name__}")
    return RawAccountInfo(
        data=raw,
        owner=Pubkey.from_string(value["owner"]),
        lamports=int(value.get("lamports") or 0),
        executable=bool(value.get("executable")),
    )


class SolanaConnection:
    """Narrow connection used by account clients.

    HTTP reads go through solana-py's ``AsyncClient``; account change listeners
    each hold one ``accountSubscribe`` websocket. Nothing here retries.
    """

    def __init__(
        self,
        rpc_url: str,
        ws_url: Optional[str] = None,
        commitment: Optional[str] = None,
        client: Optional[AsyncClient] = None,
    ) -> None:
        self.rpc_url = rpc_url
        self.ws_url = ws_url or ws_url_from_http(rpc_url)
        self.commitment = commitment
        self.client = client or AsyncClient(rpc_url, commitment=commitment)
        self._listener_ids = itertools.count()
        self._listeners: Dict[int, asyncio.Task] = {}

    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------
    async def get_account_info(
        self, address: Pubkey, commitment: Optional[str] = None
    ) -> Optional[RawAccountInfo]:
        resp = await self.client.get_account_info(
            address, commitment=commitment or self.commitment, encoding="base64"
        )
        return _raw_from_account(resp.value)

    async def get_multiple_accounts_raw(
        self, addresses: Sequence[Pubkey], commitment: Optional[str] = None
    ) -> List[Optional[RawAccountInfo]]:
        resp = await self.client.get_multiple_accounts(
            list(addresses), commitment=commitment or self.commitment, encoding="base64"
        )
        return [_raw_from_account(acc) for acc in resp.value]

    async def get_program_accounts(
        self,
        program_id: Pubkey,
        filters: Optional[Sequence[Any]] = None,
        commitment: Optional[str] = None,
        data_slice: Optional[Tuple[int, int]] = None,
    ) -> List[Tuple[Pubkey, RawAccountInfo]]:
        slice_opts = None
        if data_slice is not None:
            slice_opts = DataSliceOpts(offset=data_slice[0], length=data_slice[1])
        resp = await self.client.get_program_accounts(
            program_id,
            commitment=commitment or self.commitment,
            encoding="base64",
            data_slice=slice_opts,
            filters=list(filters or []),
        )
        return [(item.pubkey, _raw_from_account(item.account)) for item in resp.value]

    # ------------------------------------------------------------------
    # Websocket listeners
    # ------------------------------------------------------------------
    def on_account_change(
        self,
        address: Pubkey,
        callback: AccountChangeCallback,
        commitment: Optional[str] = None,
    ) -> int:
        listener_id = next(self._listener_ids)
        task = asyncio.get_running_loop().create_task(
            self._listen(listener_id, address, callback, commitment or self.commitment or "confirmed")
        )
        task.add_done_callback(lambda t: self._on_listener_done(listener_id, address, t))
        self._listeners[listener_id] = task
        return listener_id

    @staticmethod
    def _on_listener_done(listener_id: int, address: Pubkey, task: asyncio.Task) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            log.error(f"listener {listener_id} for {address} failed: {exc!r}", source="connection")
        else:
            log.error(f"listener {listener_id} for {address} stopped: socket closed", source="connection")

    async def remove_account_change_listener(self, listener_id: int) -> None:
        task = self._listeners.pop(listener_id)
        if task.done():
            # already reported by _on_listener_done
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def _listen(
        self,
        listener_id: int,
        address: Pubkey,
        callback: AccountChangeCallback,
        commitment: str,
    ) -> None:
        request = {
            "jsonrpc": "2.0",
            "id": listener_id,
            "method": "accountSubscribe",
            "params": [str(address), {"encoding": "base64", "commitment": commitment}],
        }
        async with websockets.connect(self.ws_url, ping_interval=20, ping_timeout=20, close_timeout=5) as ws:
            await ws.send(json.dumps(request))
            async for raw in ws:
                msg = json.loads(raw)
                if msg.get("method") != "accountNotification":
                    if "error" in msg:
                        log.error(f"accountSubscribe {address} failed: {msg['error']}", source="connection")
                        return
                    continue
                value = msg["params"]["result"]["value"]
                callback(_raw_from_notification(value))

    async def close(self) -> None:
        for listener_id in list(self._listeners):
            await self.remove_account_change_listener(listener_id)
        await self.client.close()


__all__ = ["SolanaConnection", "ws_url_from_http", "AccountChangeCallback"]
