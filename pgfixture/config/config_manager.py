"""
Configuration Manager for pgfixture

Handles image selection, administrative credentials, readiness timing,
environment file loading and the optional pre-existing server used by
database scopes.
"""

import os
from pathlib import Path
from typing import Dict, Optional

from pgfixture.models.connection import ConnectionParameters, TlsMode
from pgfixture.testing.name_generator import validate_prefix


class ConfigValidationError(Exception):
    """Raised when configuration validation fails."""
    pass


class ConfigManager:
    """
    Central configuration management for pgfixture.

    Provides:
    - Environment file loading with precedence (.env < .env.test < os.environ)
    - Server image and administrative credentials
    - Readiness and teardown timing
    - Connection parameters for a pre-existing server
    - Configuration validation
    """

    DEFAULTS = {
        'PGFIXTURE_IMAGE': 'postgres:11',
        'PGFIXTURE_HOST': 'localhost',
        'PGFIXTURE_ADMIN_USER': 'postgres',
        'PGFIXTURE_ADMIN_DATABASE': 'postgres',
        'PGFIXTURE_READY_TIMEOUT': '10.0',
        'PGFIXTURE_READY_INTERVAL': '0.1',
        'PGFIXTURE_CONNECT_TIMEOUT': '5.0',
        'PGFIXTURE_STOP_TIMEOUT': '5',
        'PGFIXTURE_NAME_PREFIX': 'pgfixture_',
        'PGFIXTURE_TLS_MODE': 'disable',
    }

    # Port the server listens on inside the container
    CONTAINER_PORT = 5432

    ENV_FILES = ['.env', '.env.test']

    def __init__(self, config_dir: Optional[str] = None, overrides: Optional[Dict[str, str]] = None):
        """
        Initialize ConfigManager.

        Args:
            config_dir: Directory containing environment files
            overrides: Values taking precedence over files and os.environ
        """
        self.config_dir = Path(config_dir) if config_dir else Path.cwd()
        self._overrides = dict(overrides or {})
        self._env_vars: Dict[str, str] = {}

        self._load_env_files()
        self._validate()

    def _load_env_files(self):
        """Load environment files; later files override earlier ones."""
        for env_file in self.ENV_FILES:
            env_path = self.config_dir / env_file
            if env_path.exists():
                self._load_env_file(env_path)

    def _load_env_file(self, env_path: Path):
        """Load a single environment file into our internal env_vars dict."""
        try:
            with open(env_path, 'r') as f:
                for line in f:
                    line = line.strip()
                    if line and not line.startswith('#') and '=' in line:
                        key, value = line.split('=', 1)
                        self._env_vars[key.strip()] = value.strip().strip('"').strip("'")
        except OSError as e:
            raise ConfigValidationError(f"Cannot read environment file {env_path}: {e}")

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Look up a setting: overrides, then os.environ, then env files, then defaults."""
        if key in self._overrides:
            return self._overrides[key]
        value = os.getenv(key) or self._env_vars.get(key)
        if value:
            return value
        return self.DEFAULTS.get(key, default)

    def _get_float(self, key: str) -> float:
        raw = self.get(key)
        try:
            value = float(raw)
        except (TypeError, ValueError):
            raise ConfigValidationError(f"Invalid {key}: '{raw}' - must be a number")
        if value <= 0:
            raise ConfigValidationError(f"Invalid {key}: '{raw}' - must be greater than zero")
        return value

    def _get_port(self, key: str) -> Optional[int]:
        raw = self.get(key)
        if raw is None:
            return None
        try:
            port = int(raw)
        except ValueError:
            raise ConfigValidationError(f"Invalid {key}: '{raw}' - port must be a number between 1 and 65535")
        if not (1 <= port <= 65535):
            raise ConfigValidationError(f"Invalid {key}: '{raw}' - port must be between 1 and 65535")
        return port

    def _validate(self):
        """Validate every setting eagerly so misconfiguration fails at startup."""
        self._get_float('PGFIXTURE_READY_TIMEOUT')
        self._get_float('PGFIXTURE_READY_INTERVAL')
        self._get_float('PGFIXTURE_CONNECT_TIMEOUT')
        self._get_float('PGFIXTURE_STOP_TIMEOUT')
        self._get_port('PGFIXTURE_SERVER_PORT')
        self._get_tls_mode()
        self._get_name_prefix()

    @property
    def image(self) -> str:
        """Get the server image."""
        return self.get('PGFIXTURE_IMAGE')

    @property
    def host(self) -> str:
        """Get the host where published container ports are reachable."""
        return self.get('PGFIXTURE_HOST')

    @property
    def admin_user(self) -> str:
        return self.get('PGFIXTURE_ADMIN_USER')

    @property
    def admin_password(self) -> Optional[str]:
        return self.get('PGFIXTURE_ADMIN_PASSWORD')

    @property
    def admin_database(self) -> str:
        return self.get('PGFIXTURE_ADMIN_DATABASE')

    @property
    def ready_timeout(self) -> float:
        """Seconds to wait for a server or database to accept connections."""
        return self._get_float('PGFIXTURE_READY_TIMEOUT')

    @property
    def ready_interval(self) -> float:
        """Seconds between readiness probes."""
        return self._get_float('PGFIXTURE_READY_INTERVAL')

    @property
    def connect_timeout(self) -> float:
        return self._get_float('PGFIXTURE_CONNECT_TIMEOUT')

    @property
    def stop_timeout(self) -> int:
        """Grace period in seconds before a stopped container is killed."""
        return int(self._get_float('PGFIXTURE_STOP_TIMEOUT'))

    @property
    def name_prefix(self) -> str:
        return self._get_name_prefix()

    def _get_name_prefix(self) -> str:
        raw = self.get('PGFIXTURE_NAME_PREFIX')
        try:
            return validate_prefix(raw)
        except ValueError as e:
            raise ConfigValidationError(f"Invalid PGFIXTURE_NAME_PREFIX: {e}")

    @property
    def tls_mode(self) -> TlsMode:
        """Get the TLS mode used for the pre-existing server."""
        return self._get_tls_mode()

    def _get_tls_mode(self) -> TlsMode:
        raw = self.get('PGFIXTURE_TLS_MODE')
        try:
            return TlsMode(raw)
        except ValueError:
            allowed = ', '.join(mode.value for mode in TlsMode)
            raise ConfigValidationError(f"Invalid PGFIXTURE_TLS_MODE: '{raw}' - must be one of {allowed}")

    def server_environment(self) -> Dict[str, str]:
        """Container environment configuring authentication for a new server."""
        environment = {'POSTGRES_USER': self.admin_user}
        if self.admin_password:
            environment['POSTGRES_PASSWORD'] = self.admin_password
        else:
            environment['POSTGRES_HOST_AUTH_METHOD'] = 'trust'
        return environment

    def admin_params(self, host: str, port: int) -> ConnectionParameters:
        """Administrative connection parameters for a server at host:port."""
        return ConnectionParameters(
            host=host,
            port=port,
            user=self.admin_user,
            password=self.admin_password,
            database=self.admin_database,
            tls_mode=TlsMode.NONE,
            connect_timeout=self.connect_timeout
        )

    def server_params(self) -> Optional[ConnectionParameters]:
        """
        Connection parameters for a pre-existing server.

        Returns:
            ConnectionParameters, or None when PGFIXTURE_SERVER_HOST is unset
        """
        host = self.get('PGFIXTURE_SERVER_HOST')
        if not host:
            return None
        params = self.admin_params(host, self._get_port('PGFIXTURE_SERVER_PORT') or self.CONTAINER_PORT)
        return params.with_tls_mode(self.tls_mode)
