"""Tests for configuration loading, logging setup and the store factory."""

import logging

import pytest

from hmscreds.core.config import Config, DEFAULT_CRED_PATH, LoggingConfig
from hmscreds.core.log import setup_logging
from hmscreds.creds import CompCredentials, get_comp_cred_store
from hmscreds.storage import (
    LocalVaultAdapter,
    VaultAdapter,
    VaultLockedError,
    open_secure_storage,
)


def test_defaults_when_missing(tmp_path):
    config = Config.load(tmp_path / "missing.yaml")

    assert config.cred_path == DEFAULT_CRED_PATH == "hms-creds"
    assert config.backend == "vault"
    assert config.execution.max_workers == 1


def test_load_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "cred_path: secret/hms-cred\n"
        "backend: local\n"
        "vault:\n"
        "  addr: https://vault.local:8200\n"
        "  timeout: 10\n"
        "local:\n"
        f"  db_path: {tmp_path / 'secrets.db'}\n"
        "execution:\n"
        "  max_workers: 4\n"
        "logging:\n"
        "  level: DEBUG\n"
    )

    config = Config.load(path)

    assert config.cred_path == "secret/hms-cred"
    assert config.backend == "local"
    assert config.vault.addr == "https://vault.local:8200"
    assert config.vault.timeout == 10
    assert config.vault.base_path == "secret"
    assert config.local.db_path == tmp_path / "secrets.db"
    assert config.execution.max_workers == 4
    assert config.logging.level == "DEBUG"
    assert config.logging.file is None


def test_env_config_path(tmp_path, monkeypatch):
    path = tmp_path / "env.yaml"
    path.write_text("cred_path: from-env\n")
    monkeypatch.setenv("HMSCREDS_CONFIG", str(path))

    assert Config.load().cred_path == "from-env"


def test_invalid_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("cred_path: [unclosed\n")

    with pytest.raises(ValueError):
        Config.load(path)


def test_unknown_backend(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("backend: consul\n")

    with pytest.raises(ValueError):
        Config.load(path)


def test_save_default_config_round_trip(tmp_path):
    config = Config(
        base_dir=tmp_path,
        config_file=tmp_path / "config.yaml",
    )
    config.local.db_path = tmp_path / "secrets.db"

    config.save_default_config()
    loaded = Config.load(tmp_path / "config.yaml")

    assert loaded.cred_path == config.cred_path
    assert loaded.backend == config.backend
    assert loaded.vault.verify is True
    assert loaded.local.db_path == tmp_path / "secrets.db"


def test_setup_logging(tmp_path):
    log_file = tmp_path / "logs" / "hmscreds.log"

    logger = setup_logging(LoggingConfig(level="debug", file=log_file))
    setup_logging(LoggingConfig(level="debug", file=log_file))
    logging.getLogger("hmscreds.creds.store").debug("hello from store")

    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 2
    for handler in logger.handlers:
        handler.flush()
    assert "hello from store" in log_file.read_text()

    setup_logging()
    assert len(logger.handlers) == 1


def test_open_vault_backend():
    config = Config()
    config.vault.addr = "http://vault.local:8200"

    ss = open_secure_storage(config)

    assert isinstance(ss, VaultAdapter)
    assert ss.addr == "http://vault.local:8200"


def test_open_local_backend_requires_password(tmp_path, monkeypatch):
    monkeypatch.delenv("HMSCREDS_MASTER_PASSWORD", raising=False)
    config = Config(backend="local")
    config.local.db_path = tmp_path / "secrets.db"

    with pytest.raises(ValueError):
        open_secure_storage(config)


def test_open_local_backend_wrong_password(tmp_path, monkeypatch):
    LocalVaultAdapter(tmp_path / "secrets.db").init_vault("right")
    monkeypatch.setenv("HMSCREDS_MASTER_PASSWORD", "wrong")
    config = Config(backend="local")
    config.local.db_path = tmp_path / "secrets.db"

    with pytest.raises(VaultLockedError):
        open_secure_storage(config)


def test_get_comp_cred_store_local(tmp_path, monkeypatch):
    monkeypatch.setenv("HMSCREDS_MASTER_PASSWORD", "master")
    config = Config(backend="local", cred_path="secret/hms-cred")
    config.local.db_path = tmp_path / "secrets.db"
    config.execution.max_workers = 2

    ccs = get_comp_cred_store(config)
    cred = CompCredentials(xname="x0c0s1b0", url="u", username="n", password="p")
    ccs.store_comp_cred(cred)

    assert ccs.cc_path == "secret/hms-cred"
    assert ccs.max_workers == 2
    assert isinstance(ccs.ss, LocalVaultAdapter)
    assert get_comp_cred_store(config).get_comp_cred("x0c0s1b0") == cred
