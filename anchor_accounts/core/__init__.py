from .core_constants import (
    BASE_DIR,
    CONFIG_DIR,
    LOG_DATE_FORMAT,
    DEFAULT_RPC_URL,
    LOCALNET_RPC_URL,
)
from .logging import log, configure_console_log

__all__ = [
    "BASE_DIR",
    "CONFIG_DIR",
    "LOG_DATE_FORMAT",
    "DEFAULT_RPC_URL",
    "LOCALNET_RPC_URL",
    "log",
    "configure_console_log",
]
