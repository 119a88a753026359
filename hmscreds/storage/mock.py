"""
In-memory SecureStorage implementations for tests and examples.

MemoryStorage behaves like a real backend. MockAdapter replays scripted
responses in call order and records the key each call received.

Usage:
    adapter = MockAdapter()
    adapter.lookup_data = [
        MockLookup(output={"xname": "x0c0s1b0", ...}),
        MockLookup(err=SecureStorageError("Cannot get secret data")),
    ]
    ccs = CompCredStore("secret/hms-cred", adapter)
    ccs.get_comp_creds(["x0c0s1b0", "x0c0s2b0"])
    adapter.lookup_data[1].key    # "secret/hms-cred/x0c0s2b0"
"""

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from hmscreds.storage.base import NotFoundError, SecureStorage


class MemoryStorage(SecureStorage):
    """Dict-backed secret storage. Values are copied in and out."""

    def __init__(self, data: Optional[Dict[str, Dict[str, Any]]] = None):
        self.data: Dict[str, Dict[str, Any]] = copy.deepcopy(data) if data else {}

    def lookup(self, key: str) -> Dict[str, Any]:
        if key not in self.data:
            raise NotFoundError(key)
        return copy.deepcopy(self.data[key])

    def lookup_keys(self, prefix: str) -> List[str]:
        base = prefix.rstrip("/") + "/"
        return sorted(
            k[len(base):] for k in self.data
            if k.startswith(base) and "/" not in k[len(base):]
        )

    def store(self, key: str, value: Dict[str, Any]) -> None:
        self.data[key] = copy.deepcopy(value)


@dataclass
class MockLookup:
    """Scripted response for one lookup() call."""
    output: Optional[Dict[str, Any]] = None
    err: Optional[Exception] = None
    key: Optional[str] = None


@dataclass
class MockLookupKeys:
    """Scripted response for one lookup_keys() call."""
    output: List[str] = field(default_factory=list)
    err: Optional[Exception] = None
    key: Optional[str] = None


@dataclass
class MockStore:
    """Scripted response for one store() call."""
    err: Optional[Exception] = None
    key: Optional[str] = None
    value: Optional[Dict[str, Any]] = None


class MockAdapter(SecureStorage):
    """
    SecureStorage that replays scripted responses.

    Each call consumes the next entry of the matching *_data list and fills
    in the entry's key. Reset the *_num counters to replay from the start.
    Running out of scripted entries is a test bug and raises AssertionError.
    """

    def __init__(self):
        self.lookup_data: List[MockLookup] = []
        self.lookup_keys_data: List[MockLookupKeys] = []
        self.store_data: List[MockStore] = []
        self.lookup_num = 0
        self.lookup_keys_num = 0
        self.store_num = 0

    @staticmethod
    def _next(entries: list, num: int, name: str):
        if num >= len(entries):
            raise AssertionError(f"Unexpected {name} call #{num + 1}")
        return entries[num]

    def lookup(self, key: str) -> Dict[str, Any]:
        entry = self._next(self.lookup_data, self.lookup_num, "lookup")
        self.lookup_num += 1
        entry.key = key
        if entry.err is not None:
            raise entry.err
        return copy.deepcopy(entry.output)

    def lookup_keys(self, prefix: str) -> List[str]:
        entry = self._next(self.lookup_keys_data, self.lookup_keys_num, "lookup_keys")
        self.lookup_keys_num += 1
        entry.key = prefix
        if entry.err is not None:
            raise entry.err
        return list(entry.output)

    def store(self, key: str, value: Dict[str, Any]) -> None:
        entry = self._next(self.store_data, self.store_num, "store")
        self.store_num += 1
        entry.key = key
        entry.value = copy.deepcopy(value)
        if entry.err is not None:
            raise entry.err
