import pytest
from solders.pubkey import Pubkey

from anchor_accounts.core.account_core.coder import account_discriminator
from anchor_accounts.core.account_core.services.account_client import AccountClient
from anchor_accounts.core.account_core.services.namespace import (
    build_namespace,
    camel_case,
    get_program_accounts,
)
from anchor_accounts.core.account_core.services.subscription_registry import SubscriptionRegistry


@pytest.mark.parametrize(
    "name,expected",
    [
        ("Vault", "vault"),
        ("vault", "vault"),
        ("VaultState", "vaultState"),
        ("vault_state", "vaultState"),
        ("SBState", "sbState"),
        ("AMM", "amm"),
        ("vault_STATE", "vaultState"),
        ("pool_lpMint", "poolLpMint"),
    ],
)
def test_camel_case(name, expected):
    assert camel_case(name) == expected


def test_build_namespace_keys_and_clients(idl, decoder, program_id, connection):
    ns = build_namespace(idl, decoder, program_id, connection)

    assert sorted(ns) == ["pool", "vault", "vaultState"]
    assert all(isinstance(c, AccountClient) for c in ns.values())
    assert ns.vault is ns["vault"]
    assert ns["vault"].name == "Vault"
    assert ns["vault"].size == 48
    assert ns["vault"].program_id == program_id
    assert ns["vault"].coder is decoder
    with pytest.raises(AttributeError):
        ns.missing


def test_clients_share_one_registry(idl, decoder, program_id, connection):
    registry = SubscriptionRegistry()
    ns = build_namespace(idl, decoder, program_id, connection, registry=registry)

    assert ns["vault"].registry is registry
    assert ns["pool"].registry is registry

    addr = Pubkey.new_unique()
    assert ns["vault"].subscribe(addr) is ns["pool"].subscribe(addr)
    assert len(connection.listeners) == 1


def test_empty_idl_gives_empty_namespace(decoder, program_id, connection):
    class NoAccounts:
        accounts = None

    assert build_namespace(NoAccounts(), decoder, program_id, connection) == {}


@pytest.mark.asyncio
async def test_get_program_accounts_entry_point(idl, decoder, program_id, connection):
    ns = get_program_accounts(idl, decoder, program_id, connection)
    addr = Pubkey.new_unique()
    connection.put(addr, account_discriminator("Pool") + bytes(16))

    rows = await ns["pool"].all()

    assert [r.public_key for r in rows] == [addr]
