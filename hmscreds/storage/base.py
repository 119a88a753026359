"""
Secure storage interface.

A SecureStorage backend is a key-value service that keeps secrets
confidential. The credential store only ever talks to this interface;
adapters (Vault, local encrypted vault, in-memory) implement it.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List


class CompCredError(Exception):
    """Base class for all hmscreds errors."""


class SecureStorageError(CompCredError):
    """A backend could not look up, list or store a key."""


class NotFoundError(SecureStorageError):
    """No value is stored at the requested key."""

    def __init__(self, key: str):
        super().__init__(f"No secret stored at '{key}'")
        self.key = key


class VaultLockedError(SecureStorageError):
    """The backend needs to be unlocked before use."""


class CredentialFormatError(CompCredError, ValueError):
    """A stored value could not be decoded into component credentials."""


class SecureStorage(ABC):
    """Key-value secret storage used by CompCredStore."""

    @abstractmethod
    def lookup(self, key: str) -> Dict[str, Any]:
        """
        Fetch the value stored at key.

        Raises:
            NotFoundError: If nothing is stored at key.
            SecureStorageError: On transport or authentication failure.
        """

    @abstractmethod
    def lookup_keys(self, prefix: str) -> List[str]:
        """
        List the leaf names stored directly under prefix.

        An empty prefix yields an empty list.

        Raises:
            SecureStorageError: If the backend could not enumerate the prefix.
        """

    @abstractmethod
    def store(self, key: str, value: Dict[str, Any]) -> None:
        """
        Store value at key, replacing anything already there.

        Raises:
            SecureStorageError: If the backend rejected the write.
        """
