"""
hmscreds - Component credentials kept in secure storage.

Usage:
    from hmscreds import CompCredStore, CompCredentials, VaultAdapter

    ccs = CompCredStore("hms-creds", VaultAdapter(base_path="secret"))
    ccs.store_comp_cred(CompCredentials(xname="x0c0s21b0", url="...",
                                        username="root", password="..."))
    ccs.get_all_comp_creds()
"""

__version__ = "1.0.0"

from hmscreds.core.config import Config, get_config
from hmscreds.core.log import setup_logging
from hmscreds.creds.models import CompCredentials
from hmscreds.creds.store import CompCredStore, DEFAULT_COMP_CRED_PATH, get_comp_cred_store
from hmscreds.storage import (
    CompCredError,
    CredentialFormatError,
    LocalVaultAdapter,
    MemoryStorage,
    NotFoundError,
    SecureStorage,
    SecureStorageError,
    VaultAdapter,
    VaultLockedError,
    open_secure_storage,
)

__all__ = [
    # Version
    "__version__",
    # Config
    "Config",
    "get_config",
    "setup_logging",
    # Credentials
    "CompCredentials",
    "CompCredStore",
    "DEFAULT_COMP_CRED_PATH",
    "get_comp_cred_store",
    # Storage
    "SecureStorage",
    "VaultAdapter",
    "LocalVaultAdapter",
    "MemoryStorage",
    "open_secure_storage",
    # Errors
    "CompCredError",
    "SecureStorageError",
    "NotFoundError",
    "VaultLockedError",
    "CredentialFormatError",
]
