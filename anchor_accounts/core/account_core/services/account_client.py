from __future__ import annotations

from typing import Any, List, Optional, Sequence, Union

import base58
from solana.rpc.types import MemcmpOpts
from solders.pubkey import Pubkey

from anchor_accounts.core.logging import log

from ..clients.rpc_batch import GET_MULTIPLE_ACCOUNTS_LIMIT, get_multiple_accounts
from ..coder import (
    ACCOUNT_DISCRIMINATOR_SIZE,
    MISMATCH,
    AccountDecoder,
    decode_if_matching,
    get_coder,
)
from ..errors import AccountDoesNotExistError, AccountTypeMismatchError
from ..models import (
    AccountFilter,
    Address,
    NoFilter,
    PredicateList,
    ProgramAccount,
    RawAccountInfo,
    RawSuffix,
    translate_address,
)
from .subscription_registry import (
    CHANGE_EVENT,
    AccountEventSource,
    SubscriptionRegistry,
    default_registry,
)

ASSOCIATED_SEED = b"anchor"


class AccountClient:
    """Fetch, scan and watch accounts of one IDL account type.

    ``connection`` is anything exposing ``get_account_info``,
    ``get_multiple_accounts_raw``, ``get_program_accounts``,
    ``on_account_change`` and ``remove_account_change_listener``
    (see :class:`SolanaConnection`).
    """

    def __init__(
        self,
        idl: Any,
        idl_account: Any,
        program_id: Pubkey,
        connection: Any,
        decoder: Optional[AccountDecoder] = None,
        registry: Optional[SubscriptionRegistry] = None,
        batch_limit: int = GET_MULTIPLE_ACCOUNTS_LIMIT,
    ) -> None:
        self._idl_account = idl_account
        self._program_id = program_id
        self._connection = connection
        self._coder = decoder if decoder is not None else get_coder(idl)
        self._registry = registry if registry is not None else default_registry()
        self._batch_limit = batch_limit
        self._size = ACCOUNT_DISCRIMINATOR_SIZE + (self._coder.size(idl_account) or 0)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------
    @property
    def name(self) -> str:
        return self._idl_account.name

    @property
    def size(self) -> int:
        """Number of bytes in this account, discriminator included."""
        return self._size

    @property
    def program_id(self) -> Pubkey:
        """Program owning every account of this type."""
        return self._program_id

    @property
    def coder(self) -> AccountDecoder:
        return self._coder

    @property
    def registry(self) -> SubscriptionRegistry:
        return self._registry

    @property
    def discriminator(self) -> bytes:
        return self._coder.discriminator(self.name)

    # ------------------------------------------------------------------
    # Single fetch
    # ------------------------------------------------------------------
    async def get_account_info(
        self, address: Address, commitment: Optional[str] = None
    ) -> Optional[RawAccountInfo]:
        return await self._connection.get_account_info(translate_address(address), commitment)

    async def fetch_nullable(self, address: Address, commitment: Optional[str] = None) -> Any:
        """Return the decoded account, or ``None`` if nothing is stored there.

        Raises :class:`AccountTypeMismatchError` when the stored bytes belong
        to another account type.
        """
        info = await self.get_account_info(address, commitment)
        if info is None:
            return None
        decoded = decode_if_matching(self._coder, self.name, info.data)
        if decoded is MISMATCH:
            raise AccountTypeMismatchError(
                address, self.discriminator, bytes(info.data[:ACCOUNT_DISCRIMINATOR_SIZE])
            )
        return decoded

    async def fetch(self, address: Address, commitment: Optional[str] = None) -> Any:
        """Return the decoded account; raise :class:`AccountDoesNotExistError` if absent."""
        data = await self.fetch_nullable(address, commitment)
        if data is None:
            raise AccountDoesNotExistError(address)
        return data

    # ------------------------------------------------------------------
    # Bulk
    # ------------------------------------------------------------------
    async def fetch_multiple(
        self, addresses: Sequence[Address], commitment: Optional[str] = None
    ) -> List[Any]:
        """Decode many accounts; missing, wrong-type or unreadable entries come back as ``None``.

        Results line up one-to-one with ``addresses``.
        """
        accounts = await get_multiple_accounts(
            self._connection,
            [translate_address(a) for a in addresses],
            commitment,
            limit=self._batch_limit,
        )
        out: List[Any] = []
        for keyed in accounts:
            if keyed is None:
                out.append(None)
                continue
            decoded = self._decode_or_mismatch(keyed.public_key, keyed.account.data)
            out.append(None if decoded is MISMATCH else decoded)
        return out

    async def all(
        self,
        filters: Optional[AccountFilter] = None,
        apply_data_slice_for_prefetching: bool = False,
    ) -> List[ProgramAccount]:
        """Return every account of this type owned by the program.

        ``filters`` narrows the server-side scan:

        - ``NoFilter()`` / ``None``: every instance.
        - ``RawSuffix(data)``: ``data`` must directly follow the discriminator.
        - ``PredicateList([...])``: extra filters appended after the discriminator filter.

        With ``apply_data_slice_for_prefetching`` the node returns no account
        bytes; entries carry only the public key and ``account`` is ``None``.
        """
        filters = filters if filters is not None else NoFilter()
        prefix = self.discriminator
        extra: List[Any] = []
        if isinstance(filters, RawSuffix):
            prefix = prefix + bytes(filters.data)
        elif isinstance(filters, PredicateList):
            extra = list(filters.filters)
        elif not isinstance(filters, NoFilter):
            raise TypeError(f"unsupported account filter: {type(filters).__name__}")

        resp = await self._connection.get_program_accounts(
            self._program_id,
            filters=[MemcmpOpts(offset=0, bytes=base58.b58encode(prefix).decode()), *extra],
            commitment=getattr(self._connection, "commitment", None),
            data_slice=(0, 0) if apply_data_slice_for_prefetching else None,
        )

        if apply_data_slice_for_prefetching:
            return [ProgramAccount(public_key=pk, account=None) for pk, _ in resp]

        out: List[ProgramAccount] = []
        for pk, info in resp:
            decoded = self._decode_or_mismatch(pk, info.data)
            if decoded is MISMATCH:
                continue
            out.append(ProgramAccount(public_key=pk, account=decoded))
        return out

    def _decode_or_mismatch(self, public_key: Any, data: bytes) -> Any:
        """Decode for the bulk paths: wrong-type or unreadable rows become ``MISMATCH``."""
        try:
            decoded = decode_if_matching(self._coder, self.name, data)
        except Exception as exc:
            log.debug(f"skipping {public_key}: decode failed: {exc!r}", source=self.name)
            return MISMATCH
        if decoded is MISMATCH:
            log.debug(f"skipping {public_key}: discriminator mismatch", source=self.name)
        return decoded

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------
    def subscribe(self, address: Address, commitment: Optional[str] = None) -> AccountEventSource:
        """Return an event source emitting ``"change"`` with the decoded account.

        Every subscriber of an address shares one event source and one listener;
        decoding follows the client that subscribed first.
        """
        public_key = translate_address(address)

        def _start(event_source: AccountEventSource) -> Any:
            def _on_change(info: RawAccountInfo) -> None:
                try:
                    account = self._coder.decode(self.name, info.data)
                except Exception as exc:
                    log.error(f"decode failed for {public_key}: {exc!r}", source=self.name)
                    return
                event_source.emit(CHANGE_EVENT, account)

            return self._connection.on_account_change(public_key, _on_change, commitment)

        return self._registry.subscribe(str(public_key), _start)

    async def unsubscribe(self, address: Address) -> None:
        """Stop watching ``address``; a no-op (with a warning) if it is not watched."""
        await self._registry.unsubscribe(str(translate_address(address)), self._connection)

    # ------------------------------------------------------------------
    # Associated accounts (deprecated)
    # ------------------------------------------------------------------
    def associated_address(self, *args: Union[Pubkey, bytes]) -> Pubkey:
        """Deprecated. PDA for seeds ``[b"anchor", *args]``; order matters."""
        seeds = [ASSOCIATED_SEED, *(bytes(arg) for arg in args)]
        return Pubkey.find_program_address(seeds, self._program_id)[0]

    async def associated(self, *args: Union[Pubkey, bytes]) -> Any:
        """Deprecated. Fetch the account at :meth:`associated_address`."""
        return await self.fetch(self.associated_address(*args))

    def __repr__(self) -> str:
        return f"AccountClient({self.name!r}, program_id={self._program_id})"


__all__ = ["AccountClient"]
