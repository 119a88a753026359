"""
Local Vault Adapter - encrypted secret storage in a SQLite file.

This module handles:
- Vault initialization with master password
- Unlocking vault for secret access
- Storing, listing and retrieving encrypted values by key

Values are JSON-encoded and encrypted with Fernet. The Fernet key is
derived from the master password via PBKDF2; only a salt and a password
hash are kept on disk.

Usage:
    ss = LocalVaultAdapter(Path("~/.hmscreds/secrets.db").expanduser())

    # Initialize new vault
    ss.init_vault(master_password="secret")

    # Unlock existing vault
    if ss.unlock_vault(password="secret"):
        ss.store("hms-creds/x0c0s21b0", {...})

    # Lock when done
    ss.lock_vault()
"""

import base64
import hashlib
import hmac
import json
import os
import sqlite3
from pathlib import Path
from typing import Any, Dict, List, Optional

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from hmscreds.storage.base import (
    NotFoundError,
    SecureStorage,
    SecureStorageError,
    VaultLockedError,
)


PBKDF2_ITERATIONS = 480_000
HASH_ITERATIONS = 100_000


class LocalVaultAdapter(SecureStorage):
    """
    SecureStorage backed by an encrypted SQLite vault.

    Keys are slash-separated paths; lookup_keys() returns the leaf names
    directly under a prefix, like a Vault LIST.
    """

    def __init__(self, db_path: Path):
        """
        Initialize adapter.

        Args:
            db_path: Path to the vault database file.
        """
        self.db_path = Path(db_path)
        self._fernet: Optional[Fernet] = None
        self._unlocked = False

    @property
    def is_unlocked(self) -> bool:
        """Check if vault is currently unlocked."""
        return self._unlocked and self._fernet is not None

    def _get_connection(self) -> sqlite3.Connection:
        """
        Get database connection, creating schema if needed.

        Raises:
            SecureStorageError: If the database can't be opened or initialized.
        """
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(self.db_path)
        except (OSError, sqlite3.Error) as e:
            raise SecureStorageError(f"Unable to open vault database {self.db_path}: {e}") from e

        conn.row_factory = sqlite3.Row
        try:
            self._ensure_schema(conn)
        except sqlite3.Error as e:
            conn.close()
            raise SecureStorageError(f"Unable to open vault database {self.db_path}: {e}") from e

        return conn

    def _ensure_schema(self, conn: sqlite3.Connection):
        """Create database schema if it doesn't exist."""
        conn.executescript("""
            CREATE TABLE IF NOT EXISTS vault_metadata (
                id INTEGER PRIMARY KEY,
                key TEXT UNIQUE NOT NULL,
                value TEXT
            );

            CREATE TABLE IF NOT EXISTS secrets (
                key TEXT PRIMARY KEY,
                value_encrypted TEXT NOT NULL,
                created_at TEXT DEFAULT CURRENT_TIMESTAMP,
                updated_at TEXT DEFAULT CURRENT_TIMESTAMP
            );
        """)
        conn.commit()

    def _derive_key(self, password: str, salt: bytes) -> bytes:
        """Derive encryption key from password using PBKDF2."""
        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=32,
            salt=salt,
            iterations=PBKDF2_ITERATIONS,
        )
        return base64.urlsafe_b64encode(kdf.derive(password.encode()))

    @staticmethod
    def _hash_password(password: str, salt: bytes) -> bytes:
        return hashlib.pbkdf2_hmac("sha256", password.encode(), salt, HASH_ITERATIONS)

    def is_initialized(self) -> bool:
        """Check if vault has been initialized."""
        conn = self._get_connection()
        try:
            row = conn.execute(
                "SELECT value FROM vault_metadata WHERE key = 'password_hash'"
            ).fetchone()
        finally:
            conn.close()

        return row is not None

    def init_vault(self, master_password: str) -> bool:
        """
        Initialize vault with master password.

        Args:
            master_password: Master password for vault encryption.

        Returns:
            True if successful.

        Raises:
            ValueError: If vault already initialized.
        """
        if self.is_initialized():
            raise ValueError("Vault already initialized")

        salt = os.urandom(16)
        password_hash = self._hash_password(master_password, salt)

        conn = self._get_connection()
        try:
            conn.execute(
                "INSERT INTO vault_metadata (key, value) VALUES (?, ?)",
                ("salt", base64.b64encode(salt).decode())
            )
            conn.execute(
                "INSERT INTO vault_metadata (key, value) VALUES (?, ?)",
                ("password_hash", base64.b64encode(password_hash).decode())
            )
            conn.commit()
        finally:
            conn.close()

        return self.unlock_vault(master_password)

    def unlock_vault(self, password: str) -> bool:
        """
        Unlock vault with master password.

        Returns:
            True if password correct and vault unlocked.
        """
        conn = self._get_connection()
        try:
            rows = {
                row["key"]: row["value"]
                for row in conn.execute(
                    "SELECT key, value FROM vault_metadata "
                    "WHERE key IN ('salt', 'password_hash')"
                )
            }
        finally:
            conn.close()

        if "salt" not in rows or "password_hash" not in rows:
            return False

        salt = base64.b64decode(rows["salt"])
        stored_hash = base64.b64decode(rows["password_hash"])

        if not hmac.compare_digest(self._hash_password(password, salt), stored_hash):
            return False

        self._fernet = Fernet(self._derive_key(password, salt))
        self._unlocked = True

        return True

    def lock_vault(self):
        """Lock vault, clearing encryption key from memory."""
        self._fernet = None
        self._unlocked = False

    def _require_unlocked(self) -> Fernet:
        if not self.is_unlocked:
            raise VaultLockedError("Vault not unlocked")
        return self._fernet

    def lookup(self, key: str) -> Dict[str, Any]:
        fernet = self._require_unlocked()

        conn = self._get_connection()
        try:
            row = conn.execute(
                "SELECT value_encrypted FROM secrets WHERE key = ?", (key,)
            ).fetchone()
        except sqlite3.Error as e:
            raise SecureStorageError(f"Unable to read '{key}': {e}") from e
        finally:
            conn.close()

        if row is None:
            raise NotFoundError(key)

        try:
            plaintext = fernet.decrypt(row["value_encrypted"].encode())
        except InvalidToken as e:
            raise SecureStorageError(f"Unable to decrypt '{key}'") from e

        try:
            return json.loads(plaintext)
        except ValueError as e:
            raise SecureStorageError(f"Stored value at '{key}' is not valid JSON") from e

    def lookup_keys(self, prefix: str) -> List[str]:
        self._require_unlocked()

        base = prefix.rstrip("/") + "/"
        conn = self._get_connection()
        try:
            rows = conn.execute(
                "SELECT key FROM secrets WHERE substr(key, 1, ?) = ? ORDER BY key",
                (len(base), base)
            ).fetchall()
        except sqlite3.Error as e:
            raise SecureStorageError(f"Unable to list '{prefix}': {e}") from e
        finally:
            conn.close()

        leaves = []
        for row in rows:
            name = row["key"][len(base):]
            # Deeper paths are not direct children
            if name and "/" not in name:
                leaves.append(name)
        return leaves

    def store(self, key: str, value: Dict[str, Any]) -> None:
        fernet = self._require_unlocked()
        token = fernet.encrypt(json.dumps(value).encode()).decode()

        conn = self._get_connection()
        try:
            conn.execute("""
                INSERT INTO secrets (key, value_encrypted) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value_encrypted = excluded.value_encrypted,
                    updated_at = CURRENT_TIMESTAMP
            """, (key, token))
            conn.commit()
        except sqlite3.Error as e:
            raise SecureStorageError(f"Unable to store '{key}': {e}") from e
        finally:
            conn.close()

    def delete(self, key: str) -> bool:
        """Remove the value at key. Returns True if something was deleted."""
        self._require_unlocked()

        conn = self._get_connection()
        try:
            cursor = conn.execute("DELETE FROM secrets WHERE key = ?", (key,))
            deleted = cursor.rowcount > 0
            conn.commit()
        except sqlite3.Error as e:
            raise SecureStorageError(f"Unable to delete '{key}': {e}") from e
        finally:
            conn.close()

        return deleted
