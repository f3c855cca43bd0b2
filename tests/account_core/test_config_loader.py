import textwrap

import pytest

from anchor_accounts.core.account_core.config import get_config
from anchor_accounts.core.account_core.config_loader import (
    ConfigError,
    config_from_section,
    load_accounts_config,
)


def test_load_accounts_config(tmp_path, monkeypatch):
    p = tmp_path / "accounts.yaml"
    p.write_text(textwrap.dedent("""
    accounts:
      cluster: devnet
      rpc_http: "ENV:ACC_RPC"
      batch_limit: 50
    """), encoding="utf-8")
    monkeypatch.setenv("ACC_RPC", "https://api.devnet.solana.com")
    section = load_accounts_config(str(p), dotenv_path=str(tmp_path / "missing.env"))
    assert section["rpc_http"] == "https://api.devnet.solana.com"

    cfg = config_from_section(section)
    assert cfg.rpc_url == "https://api.devnet.solana.com"
    assert cfg.batch_limit == 50


def test_missing_accounts_section(tmp_path):
    p = tmp_path / "accounts.yaml"
    p.write_text("other: true")
    with pytest.raises(ConfigError):
        load_accounts_config(str(p))


def test_missing_env_placeholder(tmp_path, monkeypatch):
    p = tmp_path / "accounts.yaml"
    p.write_text("accounts:\n  rpc_http: ENV:NOPE_NOT_SET\n")
    monkeypatch.delenv("NOPE_NOT_SET", raising=False)
    with pytest.raises(ConfigError, match="NOPE_NOT_SET"):
        load_accounts_config(str(p))


def test_missing_file(tmp_path):
    with pytest.raises(ConfigError):
        load_accounts_config(str(tmp_path / "nope.yaml"))


def test_bad_batch_limit():
    with pytest.raises(ConfigError):
        config_from_section({"batch_limit": 0})
    with pytest.raises(ConfigError):
        config_from_section({"batch_limit": "many"})


def test_env_defaults(monkeypatch):
    monkeypatch.setenv("SOLANA_RPC_URL", "http://127.0.0.1:8899")
    monkeypatch.setenv("SOLANA_COMMITMENT", "finalized")
    monkeypatch.setenv("ACCOUNTS_BATCH_LIMIT", "junk")
    monkeypatch.delenv("SOLANA_WS_URL", raising=False)
    cfg = get_config()
    assert cfg.rpc_url == "http://127.0.0.1:8899"
    assert cfg.commitment == "finalized"
    assert cfg.ws_url is None
    assert cfg.batch_limit == 99
