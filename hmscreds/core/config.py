"""
Configuration management for hmscreds.

Handles loading config from ~/.hmscreds/config.yaml and providing
default values for all settings. Secrets (Vault token, local vault
master password) are never read from the config file, only from the
environment.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml


# Default paths
DEFAULT_BASE_DIR = Path.home() / ".hmscreds"
DEFAULT_CONFIG_FILE = DEFAULT_BASE_DIR / "config.yaml"
DEFAULT_LOCAL_DB = DEFAULT_BASE_DIR / "secrets.db"
DEFAULT_LOG_DIR = DEFAULT_BASE_DIR / "logs"

DEFAULT_CRED_PATH = "hms-creds"
DEFAULT_VAULT_ADDR = "http://127.0.0.1:8200"

BACKENDS = ("vault", "local")


@dataclass
class VaultConfig:
    """Vault KV backend settings."""

    addr: str = field(default_factory=lambda: os.environ.get("VAULT_ADDR", DEFAULT_VAULT_ADDR))
    base_path: str = "secret"
    timeout: int = 30
    verify: bool = True


@dataclass
class LocalConfig:
    """Local encrypted vault settings."""

    db_path: Path = DEFAULT_LOCAL_DB


@dataclass
class ExecutionConfig:
    """Batch lookup settings."""

    max_workers: int = 1


@dataclass
class LoggingConfig:
    """Logging settings."""

    level: str = "INFO"
    file: Optional[Path] = None


@dataclass
class Config:
    """Main configuration container."""

    base_dir: Path = DEFAULT_BASE_DIR
    config_file: Path = DEFAULT_CONFIG_FILE

    # Root path for component credentials
    cred_path: str = DEFAULT_CRED_PATH

    # Which SecureStorage adapter to open: "vault" or "local"
    backend: str = "vault"

    vault: VaultConfig = field(default_factory=VaultConfig)
    local: LocalConfig = field(default_factory=LocalConfig)
    execution: ExecutionConfig = field(default_factory=ExecutionConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Config":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to config file. If None, uses default location.
                         Can also be set via HMSCREDS_CONFIG env var.

        Returns:
            Config instance with values from file merged with defaults.

        Raises:
            ValueError: If the file is not valid YAML or names an unknown backend.
        """
        if config_path is None:
            config_path = Path(
                os.environ.get("HMSCREDS_CONFIG", str(DEFAULT_CONFIG_FILE))
            )

        config = cls()
        config.config_file = config_path

        # If config file doesn't exist, return defaults
        if not config_path.exists():
            return config

        try:
            with open(config_path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid config YAML: {e}")

        if "cred_path" in data:
            config.cred_path = str(data["cred_path"])

        if "backend" in data:
            backend = str(data["backend"]).lower()
            if backend not in BACKENDS:
                raise ValueError(
                    f"Unknown backend '{backend}', expected one of: {', '.join(BACKENDS)}"
                )
            config.backend = backend

        if "vault" in data:
            vault_data = data["vault"] or {}
            defaults = VaultConfig()
            config.vault = VaultConfig(
                addr=vault_data.get("addr", defaults.addr),
                base_path=vault_data.get("base_path", defaults.base_path),
                timeout=vault_data.get("timeout", defaults.timeout),
                verify=vault_data.get("verify", defaults.verify),
            )

        if "local" in data:
            local_data = data["local"] or {}
            if "db_path" in local_data:
                config.local = LocalConfig(
                    db_path=Path(local_data["db_path"]).expanduser()
                )

        if "execution" in data:
            exec_data = data["execution"] or {}
            config.execution = ExecutionConfig(
                max_workers=exec_data.get("max_workers", 1),
            )

        if "logging" in data:
            log_data = data["logging"] or {}
            log_file = log_data.get("file")
            config.logging = LoggingConfig(
                level=log_data.get("level", "INFO"),
                file=Path(log_file).expanduser() if log_file else None,
            )

        return config

    def ensure_directories(self):
        """Create required directories if they don't exist."""
        self.base_dir.mkdir(parents=True, exist_ok=True)
        self.local.db_path.parent.mkdir(parents=True, exist_ok=True)

    def save_default_config(self):
        """Save a default config file if one doesn't exist."""
        if self.config_file.exists():
            return

        self.ensure_directories()
        self.config_file.parent.mkdir(parents=True, exist_ok=True)

        default_config = f"""\
# hmscreds Configuration

# Root path component credentials are stored under
cred_path: {self.cred_path}

# Secure storage backend: vault or local
backend: {self.backend}

# =============================================================================
# Vault KV backend
# =============================================================================
# The token is read from VAULT_TOKEN, never from this file.

vault:
  addr: {self.vault.addr}
  base_path: {self.vault.base_path}
  timeout: {self.vault.timeout}
  verify: {str(self.vault.verify).lower()}

# =============================================================================
# Local encrypted vault
# =============================================================================
# The master password is read from HMSCREDS_MASTER_PASSWORD.

local:
  db_path: {self.local.db_path}

# =============================================================================
# Batch lookups
# =============================================================================

execution:
  max_workers: {self.execution.max_workers}    # 1 = sequential

# =============================================================================
# Logging
# =============================================================================

logging:
  level: INFO              # DEBUG, INFO, WARNING, ERROR
  file: {DEFAULT_LOG_DIR / 'hmscreds.log'}
"""

        with open(self.config_file, "w") as f:
            f.write(default_config)


# Singleton instance
_config: Optional[Config] = None


def get_config(reload: bool = False) -> Config:
    """
    Get the global configuration instance.

    Args:
        reload: Force reload from file.

    Returns:
        Config instance.
    """
    global _config

    if _config is None or reload:
        _config = Config.load()

    return _config
