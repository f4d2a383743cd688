"""
Storage backend configuration for the CLI.

Connection settings come from Vault when --use-vault is given, otherwise
from command-line flags with environment variables as fallback.
"""

import argparse
import logging
import os
from typing import Any

from rowcheck.utils.vault_client import VaultClient

logger = logging.getLogger(__name__)

# backend -> (host key, environment variable prefix, default port, default database)
BACKEND_ENV = {
    "postgresql": ("host", "POSTGRES", 5432, "postgres"),
    "sqlserver": ("server", "SQLSERVER", 1433, "master"),
}


class ConfigurationError(Exception):
    """Raised when backend settings are incomplete or cannot be fetched."""


def _env_database_key(prefix: str) -> str:
    return "POSTGRES_DB" if prefix == "POSTGRES" else f"{prefix}_DATABASE"


def get_store_config(args: argparse.Namespace) -> dict[str, Any]:
    """
    Build the table store configuration for the selected backend

    Args:
        args: Parsed command-line arguments

    Returns:
        Configuration dictionary for rowcheck.storage.create_store

    Raises:
        ConfigurationError: If Vault fails or no password is available
    """
    backend = args.backend

    if args.use_vault:
        try:
            config = VaultClient().get_store_config(backend, args.vault_path)
        except Exception as e:
            raise ConfigurationError(f"Failed to fetch credentials from Vault: {e}") from e
        if args.schema:
            config["schema"] = args.schema
        return config

    host_key, prefix, default_port, default_database = BACKEND_ENV[backend]
    config = {
        host_key: args.host or os.getenv(f"{prefix}_HOST", "localhost"),
        "port": int(args.port or os.getenv(f"{prefix}_PORT", str(default_port))),
        "database": args.database or os.getenv(_env_database_key(prefix), default_database),
        "username": args.user or os.getenv(f"{prefix}_USER"),
        "password": args.password or os.getenv(f"{prefix}_PASSWORD"),
        "schema": args.schema,
    }

    if not config["username"]:
        raise ConfigurationError(f"{backend} username not provided (--user or {prefix}_USER)")
    if not config["password"]:
        raise ConfigurationError(f"{backend} password not provided (--password or {prefix}_PASSWORD)")

    return config
