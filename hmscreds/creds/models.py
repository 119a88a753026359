"""
Component credential data model.

CompCredentials holds the Redfish/SNMP access details for one hardware
component, keyed by its xname. Because the record carries secrets, every
textual rendering goes through redacted().
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from hmscreds.storage.base import CredentialFormatError


REDACTED = "<REDACTED>"

# Stored field name -> attribute name
_FIELDS = {
    "xname": "xname",
    "url": "url",
    "username": "username",
    "password": "password",
}
_OPTIONAL_FIELDS = {
    "SNMPAuthPass": "snmp_auth_pass",
    "SNMPPrivPass": "snmp_priv_pass",
}


@dataclass(repr=False)
class CompCredentials:
    """Credentials for a single component."""

    xname: str = ""
    url: str = ""
    username: str = ""
    password: str = ""
    snmp_auth_pass: Optional[str] = None
    snmp_priv_pass: Optional[str] = None

    def __post_init__(self):
        # Empty passphrases are the same as absent ones
        if not self.snmp_auth_pass:
            self.snmp_auth_pass = None
        if not self.snmp_priv_pass:
            self.snmp_priv_pass = None

    @property
    def has_snmp(self) -> bool:
        """Check if any SNMP passphrase is set."""
        return self.snmp_auth_pass is not None or self.snmp_priv_pass is not None

    def redacted(self) -> str:
        """Render the credentials with all secrets masked."""
        return (
            f"URL: {self.url}, Username: {self.username}, "
            f"Password: {REDACTED}, SNMP Passes: {REDACTED}/{REDACTED}"
        )

    __str__ = redacted

    def __repr__(self) -> str:
        return f"CompCredentials({self.redacted()})"

    def to_dict(self) -> Dict[str, Any]:
        """
        Build the stored representation.

        SNMP passphrases are only included when set.
        """
        data = {key: getattr(self, attr) for key, attr in _FIELDS.items()}
        for key, attr in _OPTIONAL_FIELDS.items():
            value = getattr(self, attr)
            if value:
                data[key] = value
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CompCredentials":
        """
        Build credentials from a stored representation.

        Missing fields default to empty values; unknown fields are ignored.

        Raises:
            CredentialFormatError: If data is not a mapping or a field is not a string.
        """
        if not isinstance(data, Mapping):
            raise CredentialFormatError(
                f"Expected a mapping, got {type(data).__name__}"
            )

        kwargs = {}
        for key, attr in {**_FIELDS, **_OPTIONAL_FIELDS}.items():
            value = data.get(key)
            if value is None:
                continue
            if not isinstance(value, str):
                # Only the field name, the value may be a secret
                raise CredentialFormatError(
                    f"Field '{key}' must be a string, got {type(value).__name__}"
                )
            kwargs[attr] = value

        return cls(**kwargs)
