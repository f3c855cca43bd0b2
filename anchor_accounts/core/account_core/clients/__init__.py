"""Transport-facing helpers for the account core."""

from .connection import SolanaConnection, ws_url_from_http
from .rpc_batch import GET_MULTIPLE_ACCOUNTS_LIMIT, chunks, get_multiple_accounts

__all__ = [
    "SolanaConnection",
    "ws_url_from_http",
    "GET_MULTIPLE_ACCOUNTS_LIMIT",
    "chunks",
    "get_multiple_accounts",
]
