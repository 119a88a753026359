"""Secure storage backends."""

import os

from hmscreds.storage.base import (
    CompCredError,
    CredentialFormatError,
    NotFoundError,
    SecureStorage,
    SecureStorageError,
    VaultLockedError,
)
from hmscreds.storage.local import LocalVaultAdapter
from hmscreds.storage.mock import MemoryStorage, MockAdapter, MockLookup, MockLookupKeys, MockStore
from hmscreds.storage.vault import VaultAdapter

MASTER_PASSWORD_ENV = "HMSCREDS_MASTER_PASSWORD"

__all__ = [
    "CompCredError",
    "CredentialFormatError",
    "NotFoundError",
    "SecureStorage",
    "SecureStorageError",
    "VaultLockedError",
    "LocalVaultAdapter",
    "MemoryStorage",
    "MockAdapter",
    "MockLookup",
    "MockLookupKeys",
    "MockStore",
    "VaultAdapter",
    "open_secure_storage",
]


def open_secure_storage(config) -> SecureStorage:
    """
    Open the backend selected by config.backend.

    The local vault is initialized on first use and unlocked with the
    master password from HMSCREDS_MASTER_PASSWORD.

    Raises:
        ValueError: Unknown backend, or local backend without a master password.
        VaultLockedError: Wrong master password for the local vault.
    """
    if config.backend == "vault":
        return VaultAdapter(
            base_path=config.vault.base_path,
            addr=config.vault.addr,
            timeout=config.vault.timeout,
            verify=config.vault.verify,
        )

    if config.backend == "local":
        password = os.environ.get(MASTER_PASSWORD_ENV)
        if not password:
            raise ValueError(f"{MASTER_PASSWORD_ENV} not set, cannot open local vault")

        ss = LocalVaultAdapter(config.local.db_path)
        if not ss.is_initialized():
            ss.init_vault(password)
        elif not ss.unlock_vault(password):
            raise VaultLockedError("Invalid master password for local vault")
        return ss

    raise ValueError(f"Unknown backend '{config.backend}'")
