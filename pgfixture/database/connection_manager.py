"""
Administrative Connection for pgfixture

Synchronous PostgreSQL access over asyncpg. Each connection owns a private
event loop, so callers never need one of their own and no loop is shared
between scopes. When the calling thread already runs a loop (an async test
body, for instance) the private loop is driven on a worker thread instead.
"""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Optional

import asyncpg

from pgfixture.models.connection import ConnectionParameters

logger = logging.getLogger(__name__)


class DatabaseConnectionError(Exception):
    """Raised when a connection to the server cannot be established."""
    pass


class AdminConnection:
    """
    A blocking connection used for administrative statements.

    CREATE DATABASE and DROP DATABASE cannot run inside a transaction block,
    so every statement is sent on its own through ``execute`` with no
    implicit transaction.

    Usage:
        with AdminConnection(params) as conn:
            conn.execute('CREATE DATABASE "x"')
    """

    def __init__(self, params: ConnectionParameters):
        """
        Initialize AdminConnection.

        Args:
            params: Where to connect and how to authenticate
        """
        self.params = params
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._connection: Optional[asyncpg.Connection] = None
        self._executor: Optional[ThreadPoolExecutor] = None

    def _run(self, coro):
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return self._loop.run_until_complete(coro)
        # run_until_complete refuses to nest inside a running loop
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="pgfixture-admin")
        return self._executor.submit(self._loop.run_until_complete, coro).result()

    def open(self) -> "AdminConnection":
        """
        Establish the connection.

        Raises:
            DatabaseConnectionError: If the server cannot be reached or
                rejects the credentials
        """
        if self._connection is not None:
            return self
        self._loop = asyncio.new_event_loop()
        try:
            self._connection = self._run(asyncpg.connect(**self.params.connect_kwargs()))
        except (asyncpg.PostgresError, asyncpg.InterfaceError) as e:
            raise DatabaseConnectionError(f"PostgreSQL connection error: {e}") from e
        except asyncio.TimeoutError as e:
            raise DatabaseConnectionError(f"Connection timeout: {e}") from e
        except OSError as e:
            raise DatabaseConnectionError(f"Cannot connect to host: {e}") from e
        finally:
            if self._connection is None:
                self._close_loop()
        logger.debug(f"Connected to {self.params.describe()}")
        return self

    @property
    def is_open(self) -> bool:
        return self._connection is not None and not self._connection.is_closed()

    def _require_open(self) -> asyncpg.Connection:
        if self._connection is None:
            raise DatabaseConnectionError("Connection is not open")
        return self._connection

    def execute(self, query: str, *args) -> str:
        """Execute a statement and return its status tag."""
        return self._run(self._require_open().execute(query, *args))

    def fetchval(self, query: str, *args) -> Any:
        """Execute a query and return the first column of the first row."""
        return self._run(self._require_open().fetchval(query, *args))

    def close(self):
        """Close the connection and its event loop. Safe to call twice."""
        if self._connection is not None:
            try:
                if not self._connection.is_closed():
                    self._run(self._connection.close(timeout=self.params.connect_timeout))
            except (asyncpg.InterfaceError, asyncio.TimeoutError, OSError) as e:
                # Server already dropped us (e.g. backend terminated)
                logger.debug(f"Graceful close failed, terminating: {e}")
                self._connection.terminate()
            finally:
                self._connection = None
                self._close_loop()
        else:
            self._close_loop()

    def _close_loop(self):
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
        if self._loop is not None:
            self._loop.close()
            self._loop = None

    def __enter__(self) -> "AdminConnection":
        return self.open()

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


def connect(params: ConnectionParameters) -> AdminConnection:
    """Open an AdminConnection; the default connector used by the scopes."""
    return AdminConnection(params).open()


def probe_connection(params: ConnectionParameters, connector=connect) -> bool:
    """
    Open a connection, run ``SELECT 1`` and close it.

    Raises:
        DatabaseConnectionError: If the connection cannot be established
    """
    conn = connector(params)
    try:
        return conn.fetchval('SELECT 1') == 1
    finally:
        conn.close()
