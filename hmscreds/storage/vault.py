"""
Vault adapter - SecureStorage on top of HashiCorp Vault's KV (v1) API.

Usage:
    ss = VaultAdapter(base_path="secret")      # VAULT_ADDR / VAULT_TOKEN from env
    ss.store("hms-creds/x0c0s21b0", {"xname": "x0c0s21b0", ...})
    ss.lookup("hms-creds/x0c0s21b0")
    ss.lookup_keys("hms-creds")
"""

import logging
import os
from typing import Any, Dict, List, Optional

import requests

from hmscreds.storage.base import NotFoundError, SecureStorage, SecureStorageError


logger = logging.getLogger(__name__)

DEFAULT_VAULT_ADDR = "http://127.0.0.1:8200"


class VaultAdapter(SecureStorage):
    """
    Secret storage in a Vault KV v1 mount.

    Keys are relative to base_path (the mount, e.g. "secret"). Connection
    details default to the standard VAULT_ADDR / VAULT_TOKEN environment
    variables. The token is only ever sent in the X-Vault-Token header.
    """

    def __init__(
        self,
        base_path: str = "secret",
        addr: Optional[str] = None,
        token: Optional[str] = None,
        timeout: int = 30,
        verify: bool = True,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize adapter.

        Args:
            base_path: Vault mount/path prefix for every key.
            addr: Vault address. Defaults to VAULT_ADDR.
            token: Vault token. Defaults to VAULT_TOKEN.
            timeout: Request timeout in seconds.
            verify: Verify TLS certificates.
            session: Pre-built requests session (mainly for tests).
        """
        self.base_path = base_path.strip("/")
        self.addr = (addr or os.environ.get("VAULT_ADDR", DEFAULT_VAULT_ADDR)).rstrip("/")
        self.timeout = timeout
        self.verify = verify

        self.session = session or requests.Session()
        token = token or os.environ.get("VAULT_TOKEN")
        if token:
            self.session.headers["X-Vault-Token"] = token
        else:
            logger.warning("No Vault token configured, requests will be unauthenticated")

    def _url(self, key: str) -> str:
        path = "/".join(p for p in (self.base_path, key.strip("/")) if p)
        return f"{self.addr}/v1/{path}"

    def _request(self, method: str, key: str, **kwargs) -> requests.Response:
        url = self._url(key)
        try:
            return self.session.request(
                method, url, timeout=self.timeout, verify=self.verify, **kwargs
            )
        except requests.RequestException as e:
            raise SecureStorageError(f"Vault {method} {key} failed: {e}") from e

    @staticmethod
    def _error(method: str, key: str, response: requests.Response) -> SecureStorageError:
        try:
            body = response.json()
        except ValueError:
            body = None
        errors = body.get("errors") or [] if isinstance(body, dict) else []
        detail = f": {'; '.join(map(str, errors))}" if errors else ""
        return SecureStorageError(
            f"Vault {method} {key} returned {response.status_code}{detail}"
        )

    @staticmethod
    def _json(method: str, key: str, response: requests.Response) -> Dict[str, Any]:
        try:
            body = response.json()
        except ValueError as e:
            raise SecureStorageError(f"Vault {method} {key} returned invalid JSON") from e
        if not isinstance(body, dict):
            raise SecureStorageError(f"Vault {method} {key} returned unexpected body")
        return body

    def lookup(self, key: str) -> Dict[str, Any]:
        response = self._request("GET", key)
        if response.status_code == 404:
            raise NotFoundError(key)
        if not response.ok:
            raise self._error("GET", key, response)

        data = self._json("GET", key, response).get("data")
        if data is None:
            raise SecureStorageError(f"Vault GET {key} returned no data")
        return data

    def lookup_keys(self, prefix: str) -> List[str]:
        response = self._request("LIST", prefix)
        # Vault answers 404 for a path with nothing under it
        if response.status_code == 404:
            logger.debug(f"No keys under {prefix}")
            return []
        if not response.ok:
            raise self._error("LIST", prefix, response)

        data = self._json("LIST", prefix, response).get("data") or {}
        keys = data.get("keys") or []
        # Entries ending in "/" are sub-paths, not secrets
        return [k for k in keys if not k.endswith("/")]

    def store(self, key: str, value: Dict[str, Any]) -> None:
        response = self._request("POST", key, json=value)
        if not response.ok:
            raise self._error("POST", key, response)
