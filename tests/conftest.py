"""
Centralized test configuration and fixtures for pgfixture.

This module:
1. Configures logging once for the whole test session
2. Makes the project root and scripts importable
3. Enables the pgfixture pytest fixtures
4. Provides doubles for the Docker and PostgreSQL boundaries
"""

import sys
from pathlib import Path
from typing import Optional
from unittest.mock import MagicMock, Mock

import pytest

from pgfixture.config.config_manager import ConfigManager
from pgfixture.logging_config import configure_logging

configure_logging()

pytest_plugins = ["pgfixture.testing.pytest_plugin"]

_project_root = Path(__file__).resolve().parent.parent


def _ensure_path(path: Path, position: Optional[int] = None) -> None:
    """Insert a path into sys.path at a specific position, maintaining order."""
    path_str = str(path)
    if not path.exists():
        return

    if path_str in sys.path:
        sys.path.remove(path_str)

    if position is not None and position < len(sys.path):
        sys.path.insert(position, path_str)
    else:
        sys.path.append(path_str)


_ensure_path(_project_root, 0)
_ensure_path(_project_root / "scripts")


@pytest.fixture
def fast_config(tmp_path):
    """ConfigManager with short readiness timings and no env files."""
    return ConfigManager(
        config_dir=str(tmp_path),
        overrides={
            'PGFIXTURE_READY_TIMEOUT': '0.05',
            'PGFIXTURE_READY_INTERVAL': '0.01',
            'PGFIXTURE_STOP_TIMEOUT': '1',
            'PGFIXTURE_HOST': 'localhost',
            'PGFIXTURE_ADMIN_USER': 'postgres',
        }
    )


class FakeAdminConnection:
    """Records statements; raises the exception queued for a statement prefix."""

    def __init__(self, server, params):
        self.server = server
        self.params = params
        self.closed = False

    def execute(self, query, *args):
        self.server.statements.append(query)
        for prefix, errors in self.server.failures.items():
            if query.startswith(prefix) and errors:
                raise errors.pop(0)
        return "OK"

    def fetchval(self, query, *args):
        self.execute(query, *args)
        return 1

    def close(self):
        self.closed = True


class FakeServer:
    """In-memory stand-in for a PostgreSQL server reached through a connector."""

    def __init__(self):
        self.statements = []
        self.failures = {}
        self.connections = []
        self.connect_errors = []

    def fail(self, prefix, *errors):
        self.failures.setdefault(prefix, []).extend(errors)

    def connector(self, params):
        if self.connect_errors:
            raise self.connect_errors.pop(0)
        conn = FakeAdminConnection(self, params)
        self.connections.append(conn)
        return conn

    def executed(self, prefix):
        return [s for s in self.statements if s.startswith(prefix)]


@pytest.fixture
def fake_server():
    return FakeServer()


@pytest.fixture
def fake_runtime():
    """Mock DockerRuntime whose container publishes 5432 on host port 54321."""
    runtime = Mock()
    container = MagicMock()
    container.id = "abc123"
    container.name = "pgfixture_test"
    runtime.create_server.return_value = container
    runtime.resolve_host_port.return_value = 54321
    return runtime
