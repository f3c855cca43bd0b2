from pathlib import Path
import os

# resolve anchor_accounts/ from this file location (…/anchor_accounts/core/core_constants.py -> anchor_accounts/)
_PACKAGE_DIR = Path(__file__).resolve().parents[1]

BASE_DIR = _PACKAGE_DIR
CONFIG_DIR = Path(
    os.getenv("ACCOUNTS_CONFIG_DIR", str(_PACKAGE_DIR / "core" / "account_core" / "defaults"))
)
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

DEFAULT_RPC_URL = "https://api.mainnet-beta.solana.com"
LOCALNET_RPC_URL = "http://localhost:8899"

__all__ = [
    "BASE_DIR",
    "CONFIG_DIR",
    "LOG_DATE_FORMAT",
    "DEFAULT_RPC_URL",
    "LOCALNET_RPC_URL",
]
