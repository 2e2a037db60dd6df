"""Value types passed between scopes and caller code."""

from .connection import ConnectionParameters, TlsMode
from .handles import DatabaseHandle, ServerHandle
from .scope_result import ScopeResult

__all__ = [
    'ConnectionParameters',
    'TlsMode',
    'DatabaseHandle',
    'ServerHandle',
    'ScopeResult'
]
