"""
Database package for pgfixture.

Provides the blocking administrative connection used to probe servers and to
create and drop temporary databases.
"""

from .connection_manager import (
    AdminConnection,
    DatabaseConnectionError,
    connect,
    probe_connection
)

__all__ = [
    'AdminConnection',
    'DatabaseConnectionError',
    'connect',
    'probe_connection'
]
