"""
Connection parameter model shared by every scope.

ConnectionParameters is the only structured value handed to caller code.
"""

from enum import Enum
from typing import Any, Dict, Optional
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field


class TlsMode(str, Enum):
    """Transport security mode, valued as the libpq ``sslmode`` string."""
    NONE = "disable"
    REQUIRE = "require"
    VERIFY_FULL = "verify-full"


class ConnectionParameters(BaseModel):
    """
    Immutable PostgreSQL connection parameters.

    Use the ``with_*`` helpers to derive a modified copy; instances are
    frozen and never change after construction.
    """

    model_config = ConfigDict(frozen=True)

    host: str = Field(default="localhost", min_length=1)
    port: int = Field(default=5432, ge=1, le=65535)
    user: str = Field(default="postgres", min_length=1)
    password: Optional[str] = Field(default=None, repr=False)
    database: str = Field(default="postgres", min_length=1)
    tls_mode: TlsMode = TlsMode.NONE
    connect_timeout: float = Field(default=5.0, gt=0)

    def with_database(self, database: str) -> "ConnectionParameters":
        """Return a copy pointing at another database."""
        return self.model_copy(update={"database": database})

    def with_credentials(self, user: str, password: Optional[str]) -> "ConnectionParameters":
        """Return a copy authenticating as another user."""
        return self.model_copy(update={"user": user, "password": password})

    def with_tls_mode(self, tls_mode: TlsMode) -> "ConnectionParameters":
        """Return a copy using another transport security mode."""
        return self.model_copy(update={"tls_mode": TlsMode(tls_mode)})

    def to_dsn(self) -> str:
        """Render a ``postgresql://`` URL including the ``sslmode`` option."""
        credentials = quote(self.user, safe="")
        if self.password is not None:
            credentials += f":{quote(self.password, safe='')}"
        return (
            f"postgresql://{credentials}@{self.host}:{self.port}/"
            f"{quote(self.database, safe='')}?sslmode={self.tls_mode.value}"
        )

    def connect_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for ``asyncpg.connect``."""
        return {
            "host": self.host,
            "port": self.port,
            "user": self.user,
            "password": self.password,
            "database": self.database,
            "ssl": self.tls_mode.value,
            "timeout": self.connect_timeout,
        }

    def describe(self) -> str:
        """Password-free summary for log messages."""
        return f"{self.user}@{self.host}:{self.port}/{self.database} (sslmode={self.tls_mode.value})"
