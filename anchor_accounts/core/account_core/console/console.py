"""
Account Core Console

Commands:
  ping
  config
  discriminator <AccountName>
  fetch --idl <path> --program <pid> --account <AccountName> <address>
  all   --idl <path> --program <pid> --account <AccountName> [--prefetch]

--config points at an accounts.yaml (defaults to the packaged one); its
'accounts' section supplies rpc_http / rpc_ws / commitment / batch_limit.
"""
import argparse
import asyncio
from pathlib import Path
from typing import Any, Dict

from anchorpy import Idl
from solders.pubkey import Pubkey

from anchor_accounts.core.core_constants import CONFIG_DIR
from anchor_accounts.core.logging import configure_console_log

from ..clients.connection import SolanaConnection
from ..coder import account_discriminator, get_coder
from ..config_loader import ConfigError, config_from_section, load_accounts_config, pretty
from ..errors import AccountCoreError
from ..services.namespace import build_namespace, camel_case

DEFAULT_CFG = CONFIG_DIR / "accounts.yaml"

# --------- helpers ---------
def _load_cfg(args):
    cfg_path = Path(args.config) if getattr(args, "config", None) else DEFAULT_CFG
    return load_accounts_config(str(cfg_path))

def _load_idl(path: str) -> Idl:
    text = Path(path).read_text(encoding="utf-8")
    return Idl.from_json(text)

def _as_jsonable(value: Any) -> Any:
    if hasattr(value, "__dict__"):
        return {k: _as_jsonable(v) for k, v in vars(value).items() if not k.startswith("_")}
    if isinstance(value, dict):
        return {k: _as_jsonable(v) for k, v in value.items() if not str(k).startswith("_")}
    if isinstance(value, (list, tuple)):
        return [_as_jsonable(v) for v in value]
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).hex()
    return value

async def _with_client(args, op):
    section = _load_cfg(args)
    cfg = config_from_section(section)
    idl = _load_idl(args.idl)
    connection = SolanaConnection(cfg.rpc_url, ws_url=cfg.ws_url, commitment=cfg.commitment)
    try:
        namespace = build_namespace(
            idl, get_coder(idl), Pubkey.from_string(args.program), connection,
            batch_limit=cfg.batch_limit,
        )
        key = camel_case(args.account)
        if key not in namespace:
            print(f"⚠️  IDL has no account '{args.account}'. Known: {sorted(namespace)}")
            return 2
        return await op(namespace[key])
    finally:
        await connection.close()

# --------- commands ---------
def cmd_ping(args):
    print("OK: account_core console is alive.")
    return 0

def cmd_config(args):
    print(pretty(_load_cfg(args)))
    return 0

def cmd_discriminator(args):
    print(account_discriminator(args.name).hex())
    return 0

def cmd_fetch(args):
    async def _op(client):
        value = await client.fetch(args.address)
        print(pretty(_as_jsonable(value)))
        return 0
    return asyncio.run(_with_client(args, _op))

def cmd_all(args):
    async def _op(client):
        rows = await client.all(apply_data_slice_for_prefetching=args.prefetch)
        out: Dict[str, Any] = {
            "account": client.name,
            "count": len(rows),
            "items": [
                {"pubkey": str(r.public_key), "account": _as_jsonable(r.account)} for r in rows
            ],
        }
        print(pretty(out))
        return 0
    return asyncio.run(_with_client(args, _op))

def build_parser():
    p = argparse.ArgumentParser(prog="account_console", description="Anchor Account Console")
    p.add_argument("--config", help="Path to accounts.yaml (defaults to package config)")
    p.add_argument("--debug", action="store_true", help="debug logging")
    sub = p.add_subparsers(dest="cmd", required=True)

    s = sub.add_parser("ping");    s.set_defaults(func=cmd_ping)
    s = sub.add_parser("config");  s.set_defaults(func=cmd_config)

    s = sub.add_parser("discriminator", help="print the 8-byte discriminator for an account name")
    s.add_argument("name")
    s.set_defaults(func=cmd_discriminator)

    for name, fn, helptext in (
        ("fetch", cmd_fetch, "fetch and decode one account"),
        ("all", cmd_all, "scan every account of a type"),
    ):
        s = sub.add_parser(name, help=helptext)
        s.add_argument("--idl", required=True, help="path to the Anchor IDL JSON")
        s.add_argument("--program", required=True, help="program id (base58)")
        s.add_argument("--account", required=True, help="IDL account name")
        if name == "fetch":
            s.add_argument("address", help="account address (base58)")
        else:
            s.add_argument("--prefetch", action="store_true", help="addresses only (zero-length data slice)")
        s.set_defaults(func=fn)

    return p

def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_console_log(args.debug)
    try:
        return args.func(args)
    except (ConfigError, AccountCoreError, ValueError) as e:
        print(f"error: {e}")
        return 2

if __name__ == "__main__":
    raise SystemExit(main())
