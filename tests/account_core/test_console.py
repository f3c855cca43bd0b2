import hashlib
import textwrap

from anchor_accounts.core.account_core.console import console as cmod


def make_cfg(tmp_path):
    p = tmp_path / "accounts.yaml"
    p.write_text(textwrap.dedent("""
    accounts:
      cluster: mainnet
      rpc_http: "https://api.mainnet-beta.solana.com"
    """), encoding="utf-8")
    return str(p)


def test_console_ping(capsys):
    assert cmod.main(["ping"]) == 0
    out = capsys.readouterr().out
    assert "alive" in out


def test_console_config_show(tmp_path, capsys):
    path = make_cfg(tmp_path)
    cmod.main(["--config", path, "config"])
    out = capsys.readouterr().out
    assert "rpc_http" in out


def test_console_config_missing_file(tmp_path, capsys):
    assert cmod.main(["--config", str(tmp_path / "nope.yaml"), "config"]) == 2
    assert "error" in capsys.readouterr().out


def test_console_discriminator(capsys):
    cmod.main(["discriminator", "Vault"])
    out = capsys.readouterr().out.strip()
    assert out == hashlib.sha256(b"account:Vault").digest()[:8].hex()
