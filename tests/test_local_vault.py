"""Tests for the local encrypted vault adapter."""

import sqlite3

import pytest

from hmscreds.creds import CompCredentials, CompCredStore
from hmscreds.storage import (
    LocalVaultAdapter,
    NotFoundError,
    SecureStorageError,
    VaultLockedError,
)


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "vault" / "secrets.db"


@pytest.fixture
def vault(db_path):
    ss = LocalVaultAdapter(db_path)
    ss.init_vault("master")
    return ss


class TestLifecycle:

    def test_init_creates_db(self, db_path):
        ss = LocalVaultAdapter(db_path)
        assert not ss.is_initialized()

        assert ss.init_vault("master") is True

        assert db_path.exists()
        assert ss.is_initialized()
        assert ss.is_unlocked

    def test_init_twice_fails(self, vault):
        with pytest.raises(ValueError):
            vault.init_vault("other")

    def test_unlock_wrong_password(self, vault, db_path):
        ss = LocalVaultAdapter(db_path)
        assert ss.unlock_vault("wrong") is False
        assert not ss.is_unlocked

    def test_unlock_uninitialized(self, db_path):
        assert LocalVaultAdapter(db_path).unlock_vault("master") is False

    def test_locked_vault_rejects_access(self, vault):
        vault.lock_vault()

        with pytest.raises(VaultLockedError):
            vault.lookup("hms-creds/x0c0s1b0")
        with pytest.raises(VaultLockedError):
            vault.store("hms-creds/x0c0s1b0", {})
        with pytest.raises(VaultLockedError):
            vault.lookup_keys("hms-creds")
        with pytest.raises(VaultLockedError):
            vault.delete("hms-creds/x0c0s1b0")

    def test_locked_vault_keeps_secrets(self, vault, db_path):
        vault.store("hms-creds/x0c0s1b0", {"password": "123"})
        vault.lock_vault()

        with pytest.raises(VaultLockedError):
            vault.delete("hms-creds/x0c0s1b0")

        assert vault.unlock_vault("master")
        assert vault.lookup("hms-creds/x0c0s1b0") == {"password": "123"}


class TestStorage:

    def test_store_and_lookup(self, vault):
        vault.store("hms-creds/x0c0s1b0", {"xname": "x0c0s1b0", "password": "123"})

        assert vault.lookup("hms-creds/x0c0s1b0") == {"xname": "x0c0s1b0", "password": "123"}

    def test_values_encrypted_at_rest(self, vault, db_path):
        vault.store("hms-creds/x0c0s1b0", {"password": "plaintext-secret"})

        conn = sqlite3.connect(db_path)
        (stored,) = conn.execute("SELECT value_encrypted FROM secrets").fetchone()
        conn.close()

        assert "plaintext-secret" not in stored

    def test_lookup_missing(self, vault):
        with pytest.raises(NotFoundError):
            vault.lookup("hms-creds/x0c0s1b0")

    def test_store_overwrites(self, vault):
        vault.store("hms-creds/x0c0s1b0", {"password": "old", "SNMPAuthPass": "a"})
        vault.store("hms-creds/x0c0s1b0", {"password": "new"})

        assert vault.lookup("hms-creds/x0c0s1b0") == {"password": "new"}

    def test_lookup_keys_direct_children_only(self, vault):
        vault.store("hms-creds/x0c0s2b0", {})
        vault.store("hms-creds/x0c0s1b0", {})
        vault.store("hms-creds/nested/x0c0s3b0", {})
        vault.store("hms-creds-other/x0c0s4b0", {})

        assert vault.lookup_keys("hms-creds") == ["x0c0s1b0", "x0c0s2b0"]
        assert vault.lookup_keys("hms-creds/") == ["x0c0s1b0", "x0c0s2b0"]

    def test_lookup_keys_empty(self, vault):
        assert vault.lookup_keys("hms-creds") == []

    def test_reopen_with_password(self, vault, db_path):
        vault.store("hms-creds/x0c0s1b0", {"password": "123"})

        ss = LocalVaultAdapter(db_path)
        assert ss.unlock_vault("master")
        assert ss.lookup("hms-creds/x0c0s1b0") == {"password": "123"}

    def test_undecryptable_value(self, vault, db_path):
        vault.store("hms-creds/x0c0s1b0", {"password": "123"})
        conn = sqlite3.connect(db_path)
        conn.execute("UPDATE secrets SET value_encrypted = 'garbage'")
        conn.commit()
        conn.close()

        with pytest.raises(SecureStorageError):
            vault.lookup("hms-creds/x0c0s1b0")

    @pytest.mark.parametrize("call", [
        lambda ss: ss.lookup("hms-creds/x0c0s1b0"),
        lambda ss: ss.lookup_keys("hms-creds"),
        lambda ss: ss.store("hms-creds/x0c0s1b0", {}),
        lambda ss: ss.delete("hms-creds/x0c0s1b0"),
    ])
    def test_unopenable_db_raises_storage_error(self, vault, tmp_path, call):
        # A directory can't be opened as a database file
        vault.db_path = tmp_path

        with pytest.raises(SecureStorageError):
            call(vault)

    def test_unopenable_db_skipped_in_batch(self, vault, tmp_path):
        ccs = CompCredStore("hms-creds", vault)
        vault.db_path = tmp_path

        assert ccs.get_comp_creds(["x0c0s1b0"]) == {}

    def test_delete(self, vault):
        vault.store("hms-creds/x0c0s1b0", {})

        assert vault.delete("hms-creds/x0c0s1b0") is True
        assert vault.delete("hms-creds/x0c0s1b0") is False
        with pytest.raises(NotFoundError):
            vault.lookup("hms-creds/x0c0s1b0")


def test_comp_cred_store_round_trip(vault):
    ccs = CompCredStore("hms-creds", vault)
    cred = CompCredentials(
        xname="x0c0s1b0",
        url="10.4.0.21/redfish/v1/UpdateService",
        username="test1",
        password="123",
        snmp_auth_pass="auth",
    )

    ccs.store_comp_cred(cred)

    assert ccs.get_comp_cred("x0c0s1b0") == cred
    assert ccs.get_all_comp_creds() == {"x0c0s1b0": cred}
