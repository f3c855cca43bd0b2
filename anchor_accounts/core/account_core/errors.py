"""Custom exceptions for the account core."""

from __future__ import annotations

from typing import Any


class AccountCoreError(RuntimeError):
    """Base class for errors raised by the account core."""


class AccountDoesNotExistError(AccountCoreError):
    """Raised by a strict fetch when nothing is stored at the address."""

    def __init__(self, address: Any) -> None:
        super().__init__(f"Account does not exist {address}")
        self.address = address


class AccountTypeMismatchError(AccountCoreError):
    """Raised when stored bytes carry another account type's discriminator."""

    def __init__(self, address: Any, expected: bytes, actual: bytes) -> None:
        super().__init__(
            f"Invalid account discriminator at {address}: "
            f"expected {expected.hex()}, got {actual.hex()}"
        )
        self.address = address
        self.expected = expected
        self.actual = actual


class AccountsBatchError(AccountCoreError):
    """Raised when a getMultipleAccounts response does not line up with its request."""

    pass


class ProviderConfigError(AccountCoreError):
    """Raised when no provider can be built from the environment."""

    pass
