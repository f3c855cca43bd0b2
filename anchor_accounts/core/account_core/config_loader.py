import json
import os
from dataclasses import replace
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

from .config import AccountCoreConfig, get_config


class ConfigError(RuntimeError):
    pass


def _resolve_env(val: Any) -> Any:
    """Resolve ENV:FOO placeholders recursively inside the accounts subtree."""
    if isinstance(val, str) and val.startswith("ENV:"):
        env_key = val.split("ENV:", 1)[1].strip()
        v = os.environ.get(env_key)
        if v is None or v == "":
            raise ConfigError(f"Missing required environment variable: {env_key}")
        return v
    if isinstance(val, dict):
        return {k: _resolve_env(v) for k, v in val.items()}
    if isinstance(val, list):
        return [_resolve_env(v) for v in val]
    return val


def load_accounts_config(path: str, dotenv_path: Optional[str] = None) -> Dict[str, Any]:
    """Load only the 'accounts' subtree and resolve ENV placeholders there."""
    if not os.path.exists(path):
        raise ConfigError(f"Config file not found: {path}")
    load_dotenv(dotenv_path=dotenv_path, override=False)
    with open(path, "r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh) or {}
    section = (raw or {}).get("accounts")
    if not section:
        raise ConfigError("Missing 'accounts' section in config.")
    return _resolve_env(section)


def config_from_section(section: Dict[str, Any]) -> AccountCoreConfig:
    """Overlay a loaded 'accounts' section on the environment defaults."""
    cfg = get_config()
    overrides: Dict[str, Any] = {}
    if section.get("rpc_http"):
        overrides["rpc_url"] = str(section["rpc_http"])
    if section.get("rpc_ws"):
        overrides["ws_url"] = str(section["rpc_ws"])
    if section.get("commitment"):
        overrides["commitment"] = str(section["commitment"])
    if section.get("batch_limit") is not None:
        try:
            overrides["batch_limit"] = int(section["batch_limit"])
        except (TypeError, ValueError):
            raise ConfigError(f"batch_limit must be an integer, got {section['batch_limit']!r}")
        if overrides["batch_limit"] < 1:
            raise ConfigError("batch_limit must be >= 1")
    return replace(cfg, **overrides)


def pretty(obj: Any) -> str:
    return json.dumps(obj, indent=2, sort_keys=True, default=str)
