"""
pgfixture

Isolated, disposable PostgreSQL servers and databases for automated tests.
"""

from pgfixture.errors import (
    CallbackFailed,
    CreateFailed,
    DropFailed,
    FixtureError,
    InfrastructureError,
    NameCollision,
    NotReady,
    ProvisionFailed,
    ReadinessTimeout,
    TeardownFailed
)
from pgfixture.models import ConnectionParameters, DatabaseHandle, ScopeResult, ServerHandle, TlsMode
from pgfixture.testing import (
    DatabaseScope,
    ServerScope,
    generate_name,
    run_with_database,
    run_with_server,
    wait_until_ready
)

__version__ = "0.1.0"

__all__ = [
    'CallbackFailed',
    'ConnectionParameters',
    'CreateFailed',
    'DatabaseHandle',
    'DatabaseScope',
    'DropFailed',
    'FixtureError',
    'InfrastructureError',
    'NameCollision',
    'NotReady',
    'ProvisionFailed',
    'ReadinessTimeout',
    'ScopeResult',
    'ServerHandle',
    'ServerScope',
    'TeardownFailed',
    'TlsMode',
    'generate_name',
    'run_with_database',
    'run_with_server',
    'wait_until_ready'
]
