"""
Component credential store.

Binds a root key path to a SecureStorage backend and reads/writes
CompCredentials under {root}/{xname}.

There is very little logging in this module due to the sensitive nature
of the data it handles. Only xnames are ever logged.

Usage:
    from hmscreds.storage import VaultAdapter
    from hmscreds.creds import CompCredStore, CompCredentials

    ss = VaultAdapter(base_path="secret")
    ccs = CompCredStore("hms-creds", ss)

    ccs.store_comp_cred(CompCredentials(
        xname="x0c0s21b0",
        url="10.4.0.8/redfish/v1/UpdateService",
        username="test",
        password="123",
    ))

    cred = ccs.get_comp_cred("x0c0s21b0")
    creds = ccs.get_comp_creds(["x0c0s21b0", "x0c0s22b0"])
    all_creds = ccs.get_all_comp_creds()
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Iterable, List, Optional

from hmscreds.core.config import DEFAULT_CRED_PATH, Config, get_config
from hmscreds.creds.models import CompCredentials
from hmscreds.storage import open_secure_storage
from hmscreds.storage.base import SecureStorage


logger = logging.getLogger(__name__)

DEFAULT_COMP_CRED_PATH = DEFAULT_CRED_PATH


class CompCredStore:
    """
    Component credentials kept in secure storage.

    The store owns no state besides the root path and a shared reference
    to the backend. Every read goes to the backend; nothing is cached.
    """

    def __init__(
        self,
        key_path: str = DEFAULT_COMP_CRED_PATH,
        ss: Optional[SecureStorage] = None,
        max_workers: int = 1,
    ):
        """
        Initialize store.

        Args:
            key_path: Root path all credential keys live under.
            ss: Secure storage backend, already connected.
            max_workers: Threads used for batch lookups (1 = sequential).
        """
        self.cc_path = key_path
        self.ss = ss
        self.max_workers = max_workers

    def _key(self, xname: str) -> str:
        return f"{self.cc_path}/{xname}"

    def get_comp_cred(self, xname: str) -> CompCredentials:
        """
        Get the credentials for a component.

        Raises:
            NotFoundError: If no credentials are stored for xname.
            SecureStorageError: If the backend lookup failed.
            CredentialFormatError: If the stored value is not a credential record.
        """
        data = self.ss.lookup(self._key(xname))
        return CompCredentials.from_dict(data)

    def get_comp_creds(self, xnames: Iterable[str]) -> Dict[str, CompCredentials]:
        """
        Get the credentials for a list of components.

        Components whose credentials can't be read, for whatever reason the
        backend gives, are logged and left out of the result, so the mapping
        may hold fewer entries than requested.

        Returns:
            Dict of xname -> CompCredentials, keyed by each record's own xname.
        """
        xnames = list(xnames)

        if self.max_workers > 1 and len(xnames) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                results = list(pool.map(self._try_get_comp_cred, xnames))
        else:
            results = [self._try_get_comp_cred(xname) for xname in xnames]

        comp_creds: Dict[str, CompCredentials] = {}
        for creds in results:
            if creds is not None:
                comp_creds[creds.xname] = creds

        return comp_creds

    def _try_get_comp_cred(self, xname: str) -> Optional[CompCredentials]:
        """Get credentials for one component, or None if they can't be read."""
        try:
            return self.get_comp_cred(xname)
        except Exception as e:
            # Take what we can get
            logger.error(f"{xname}: unable to map value to CompCredentials: {e}")
            return None

    def get_all_comp_creds(self) -> Dict[str, CompCredentials]:
        """
        Get the credentials for every component under the root path.

        Raises:
            SecureStorageError: If the keys under the root path could not be listed.
        """
        key_list: List[str] = self.ss.lookup_keys(self.cc_path)
        logger.debug(f"Found {len(key_list)} keys under {self.cc_path}")
        return self.get_comp_creds(key_list)

    def store_comp_cred(self, comp_cred: CompCredentials):
        """
        Store the credentials for a component, replacing any existing record.

        Raises:
            ValueError: If comp_cred has no xname.
            SecureStorageError: If the backend rejected the write.
        """
        if not comp_cred.xname:
            raise ValueError("Cannot store component credentials without an xname")

        self.ss.store(self._key(comp_cred.xname), comp_cred.to_dict())


def get_comp_cred_store(config: Optional[Config] = None) -> CompCredStore:
    """
    Open the configured backend and return a store bound to it.

    Args:
        config: Configuration to use. If None, uses the global config.
    """
    config = config or get_config()
    ss = open_secure_storage(config)
    return CompCredStore(
        config.cred_path,
        ss,
        max_workers=config.execution.max_workers,
    )
