"""
Pytest configuration and fixtures for rowcheck tests.
Provides in-memory table stores, a recording host and environment defaults.
"""

import os
from pathlib import Path

import pytest

from rowcheck.check.report import ExitStatus, MessageType, get_process_exit_status
from rowcheck.storage import InMemoryTableStore


class RecordingHost:
    """Host that records messages instead of logging or exiting."""

    def __init__(self, exit_status: ExitStatus | None = None):
        self.exit_status = exit_status if exit_status is not None else ExitStatus()
        self.messages: list[tuple[MessageType, str]] = []
        self.terminated = False
        self.events: list[str] = []

    def emit(self, level: MessageType, text: str) -> None:
        self.messages.append((level, text))
        self.events.append("emit")

    def raise_exit_status(self, minimum: int) -> None:
        self.exit_status.raise_floor(minimum)
        self.events.append(f"raise:{minimum}")

    def terminate_abnormally(self) -> None:
        self.terminated = True
        self.events.append("terminate")

    @property
    def texts(self) -> list[str]:
        return [text for _, text in self.messages]


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Get project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def store() -> InMemoryTableStore:
    """Store with a handful of tables used across tests."""
    return InMemoryTableStore({
        "one": 5,
        "two": 5,
        "three": 3,
        "bad_has_time": 3,
        "good_records": 10,
        "big_table": 1234567,
        "staging.orders": 1000,
        "orders": 1000,
        "empty_table": 0,
    })


@pytest.fixture
def host() -> RecordingHost:
    return RecordingHost()


@pytest.fixture(autouse=True)
def reset_process_exit_status():
    """Each test starts with a clean process-wide exit status."""
    status = get_process_exit_status()
    status.code = 0
    yield status
    status.code = 0


@pytest.fixture(autouse=True)
def set_test_env_vars() -> None:
    """Set default test environment variables if not already set."""
    defaults = {
        "POSTGRES_HOST": "localhost",
        "POSTGRES_PORT": "5432",
        "POSTGRES_DB": "warehouse",
        "POSTGRES_USER": "postgres",
        "POSTGRES_PASSWORD": "postgres_password",
        "SQLSERVER_HOST": "localhost",
        "SQLSERVER_DATABASE": "warehouse",
        "SQLSERVER_USER": "sa",
        "SQLSERVER_PASSWORD": "YourStrong!Passw0rd",
    }

    for key, value in defaults.items():
        if key not in os.environ:
            os.environ[key] = value
