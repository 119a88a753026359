"""Component credentials and the store that keeps them."""

from hmscreds.creds.models import CompCredentials
from hmscreds.creds.store import CompCredStore, DEFAULT_COMP_CRED_PATH, get_comp_cred_store

__all__ = [
    "CompCredentials",
    "CompCredStore",
    "DEFAULT_COMP_CRED_PATH",
    "get_comp_cred_store",
]
