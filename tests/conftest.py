import os
import sys
from typing import Any, Callable, Dict, List, Optional

import base58
import pytest
from solders.pubkey import Pubkey

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, ROOT)

from anchor_accounts.core.account_core.coder import account_discriminator
from anchor_accounts.core.account_core.models import RawAccountInfo


class DummyDecoder:
    """Decodes ``disc || payload`` into a dict; sizes come from a lookup."""

    def __init__(self, sizes: Optional[Dict[str, int]] = None):
        self.sizes = sizes or {}
        self.decoded: List[str] = []

    def discriminator(self, type_name: str) -> bytes:
        return account_discriminator(type_name)

    def decode(self, type_name: str, data: bytes) -> Dict[str, Any]:
        self.decoded.append(type_name)
        return {"type": type_name, "payload": bytes(data[8:])}

    def size(self, idl_account: Any) -> int:
        return self.sizes.get(idl_account.name, 0)


class DummyConnection:
    """In-memory stand-in for SolanaConnection."""

    def __init__(self, program_id: Pubkey):
        self.program_id = program_id
        self.commitment = "processed"
        self.accounts: Dict[str, RawAccountInfo] = {}
        self.batch_calls: List[List[Pubkey]] = []
        self.gpa_calls: List[Dict[str, Any]] = []
        self.listeners: Dict[int, Callable[[RawAccountInfo], None]] = {}
        self.listener_addresses: Dict[int, Pubkey] = {}
        self.removed: List[int] = []
        self.fail_batch_containing: Optional[Pubkey] = None
        self.fail_remove = False
        self._next_listener = 0

    # -- setup helpers --
    def put(self, address: Pubkey, data: bytes, owner: Optional[Pubkey] = None) -> None:
        self.accounts[str(address)] = RawAccountInfo(
            data=data, owner=owner or self.program_id, lamports=1_000_000, executable=False
        )

    def notify(self, address: Pubkey, data: bytes) -> None:
        info = RawAccountInfo(data=data, owner=self.program_id, lamports=1, executable=False)
        for lid, cb in list(self.listeners.items()):
            if self.listener_addresses[lid] == address:
                cb(info)

    # -- connection interface --
    async def get_account_info(self, address, commitment=None):
        return self.accounts.get(str(address))

    async def get_multiple_accounts_raw(self, addresses, commitment=None):
        self.batch_calls.append(list(addresses))
        if self.fail_batch_containing is not None and self.fail_batch_containing in addresses:
            raise RuntimeError("rpc exploded")
        return [self.accounts.get(str(a)) for a in addresses]

    async def get_program_accounts(self, program_id, filters=None, commitment=None, data_slice=None):
        self.gpa_calls.append(
            {"program_id": program_id, "filters": list(filters or []), "data_slice": data_slice}
        )
        out = []
        for key, info in self.accounts.items():
            if info.owner != program_id:
                continue
            if not all(self._matches(f, info.data) for f in (filters or [])):
                continue
            if data_slice is not None:
                offset, length = data_slice
                info = RawAccountInfo(
                    data=info.data[offset:offset + length],
                    owner=info.owner,
                    lamports=info.lamports,
                    executable=info.executable,
                )
            out.append((Pubkey.from_string(key), info))
        return out

    @staticmethod
    def _matches(flt, data: bytes) -> bool:
        if isinstance(flt, int):
            return len(data) == flt
        want = base58.b58decode(flt.bytes)
        return data[flt.offset:flt.offset + len(want)] == want

    def on_account_change(self, address, callback, commitment=None):
        lid = self._next_listener
        self._next_listener += 1
        self.listeners[lid] = callback
        self.listener_addresses[lid] = address
        return lid

    async def remove_account_change_listener(self, listener_id):
        if self.fail_remove:
            raise RuntimeError("socket already closed")
        self.listeners.pop(listener_id)
        self.removed.append(listener_id)


class DummyIdlAccount:
    def __init__(self, name: str):
        self.name = name


class DummyIdl:
    def __init__(self, *names: str):
        self.accounts = [DummyIdlAccount(n) for n in names]


@pytest.fixture
def program_id():
    return Pubkey.new_unique()


@pytest.fixture
def connection(program_id):
    return DummyConnection(program_id)


@pytest.fixture
def decoder():
    return DummyDecoder(sizes={"Vault": 40, "Pool": 16})


@pytest.fixture
def idl():
    return DummyIdl("Vault", "Pool", "vault_state")


@pytest.fixture
def make_client(idl, program_id, connection, decoder):
    from anchor_accounts.core.account_core.services.account_client import AccountClient
    from anchor_accounts.core.account_core.services.subscription_registry import SubscriptionRegistry

    registry = SubscriptionRegistry()

    def _make(name: str = "Vault", batch_limit: int = 99):
        return AccountClient(
            idl,
            DummyIdlAccount(name),
            program_id,
            connection,
            decoder=decoder,
            registry=registry,
            batch_limit=batch_limit,
        )

    return _make


@pytest.fixture(autouse=True)
def fresh_default_registry(monkeypatch):
    from anchor_accounts.core.account_core.services import subscription_registry as registry_mod

    registry = registry_mod.SubscriptionRegistry()
    monkeypatch.setattr(registry_mod, "_DEFAULT_REGISTRY", registry)
    return registry
