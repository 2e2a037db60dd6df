"""
pgfixture Testing Infrastructure

Disposable PostgreSQL servers (Docker containers) and databases for test
suites, with teardown guaranteed on every exit path.
"""

from .database_scope import DatabaseScope, run_with_database
from .docker_manager import DockerRuntime
from .name_generator import generate_name
from .readiness import ReadinessPoller, wait_until_ready
from .server_scope import ServerScope, run_with_server

__all__ = [
    'DatabaseScope',
    'DockerRuntime',
    'ReadinessPoller',
    'ServerScope',
    'generate_name',
    'run_with_database',
    'run_with_server',
    'wait_until_ready'
]
