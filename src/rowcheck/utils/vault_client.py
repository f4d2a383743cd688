"""
HashiCorp Vault client for fetching storage backend credentials

Reads connection settings for the PostgreSQL or SQL Server table store from
a Vault KV v2 secrets engine.
"""

import logging
import os
import re
from typing import Any

import requests

logger = logging.getLogger(__name__)

# Fields each backend's secret must contain
REQUIRED_FIELDS = {
    "postgresql": ["host", "database", "username", "password"],
    "sqlserver": ["server", "database", "username", "password"],
}

SECRET_PATH_PATTERN = re.compile(r"^[a-zA-Z0-9/_-]+$")


class VaultClient:
    """
    HashiCorp Vault client for secrets management

    Uses the KV v2 secrets engine over the HTTP API.
    """

    def __init__(
        self,
        vault_addr: str | None = None,
        vault_token: str | None = None,
        namespace: str | None = None,
        mount_point: str = "secret",
    ):
        """
        Initialize Vault client

        Args:
            vault_addr: Vault server address (default: VAULT_ADDR env var)
            vault_token: Vault token (default: VAULT_TOKEN env var)
            namespace: Vault namespace (Vault Enterprise only)
            mount_point: KV v2 mount point

        Raises:
            ValueError: If vault_addr or vault_token are not provided
        """
        self.vault_addr = vault_addr or os.getenv("VAULT_ADDR")
        self.vault_token = vault_token or os.getenv("VAULT_TOKEN")
        self.namespace = namespace
        self.mount_point = mount_point

        if not self.vault_addr:
            raise ValueError(
                "Vault address not provided. Set VAULT_ADDR environment variable "
                "or pass vault_addr parameter."
            )

        if not self.vault_token:
            raise ValueError(
                "Vault token not provided. Set VAULT_TOKEN environment variable "
                "or pass vault_token parameter."
            )

        self.vault_addr = self.vault_addr.rstrip("/")
        self.headers = {
            "X-Vault-Token": self.vault_token,
            "Content-Type": "application/json",
        }
        if self.namespace:
            self.headers["X-Vault-Namespace"] = self.namespace

        logger.debug(f"Initialized Vault client for {self.vault_addr}")

    def get_secret(self, path: str) -> dict[str, Any]:
        """
        Fetch a secret from the KV v2 engine

        Args:
            path: Secret path below the mount point (e.g., "database/postgresql")

        Returns:
            Dictionary containing secret data

        Raises:
            ValueError: If path is invalid or the secret is missing/empty
            requests.RequestException: If the Vault request fails
        """
        if not path or not isinstance(path, str):
            raise ValueError("Secret path must be a non-empty string")

        if ".." in path or path.startswith("/") or not SECRET_PATH_PATTERN.match(path):
            raise ValueError(
                f"Invalid secret path: {path}. "
                "Only alphanumeric characters, slashes, underscores, and hyphens are allowed."
            )

        url = f"{self.vault_addr}/v1/{self.mount_point}/data/{path}"
        logger.debug(f"Fetching secret from: {url}")

        response = requests.get(url, headers=self.headers, timeout=10)

        if response.status_code == 404:
            raise ValueError(f"Secret not found at path: {path}")

        response.raise_for_status()

        secret_data = response.json().get("data", {}).get("data", {})
        if not secret_data:
            raise ValueError(f"No data found in secret at path: {path}")

        return secret_data

    def get_store_config(self, backend: str, path: str | None = None) -> dict[str, Any]:
        """
        Fetch table store connection settings from Vault

        Args:
            backend: 'postgresql' or 'sqlserver'
            path: Secret path (default: database/<backend>)

        Returns:
            Connection configuration for rowcheck.storage.create_store

        Raises:
            ValueError: If backend is unsupported or required fields are missing
        """
        if backend not in REQUIRED_FIELDS:
            raise ValueError(
                f"Unsupported backend: {backend}. "
                f"Must be one of {', '.join(REQUIRED_FIELDS)}."
            )

        secret_data = dict(self.get_secret(path or f"database/{backend}"))

        missing_fields = [
            field for field in REQUIRED_FIELDS[backend] if field not in secret_data
        ]
        if missing_fields:
            raise ValueError(
                f"Missing required fields in secret: {', '.join(missing_fields)}"
            )

        if backend == "postgresql":
            secret_data.setdefault("port", 5432)

        logger.info(f"Fetched {backend} credentials from Vault")
        return secret_data
