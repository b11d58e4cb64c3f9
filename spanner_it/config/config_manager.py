"""
Configuration Manager for Spanner IT resources

Handles environment file loading, project/region settings, static instance
selection, emulator detection, retry tuning and configuration validation.
"""

import os
from pathlib import Path
from typing import Dict, Optional


class ConfigValidationError(Exception):
    """Raised when configuration validation fails."""
    pass


class ConfigManager:
    """
    Central configuration for test resource managers.

    Values come from ``os.environ`` first, then from environment files in
    ``config_dir`` loaded with precedence .env.prod > .env.staging > .env.dev > .env
    """

    DEFAULT_REGION = 'us-central1'
    DEFAULT_NODE_COUNT = 1
    DEFAULT_RETRY_MAX_ATTEMPTS = 1
    DEFAULT_RETRY_BACKOFF_BASE = 10.0
    DEFAULT_RETRY_BACKOFF_MAX = 60.0
    DEFAULT_OPERATION_TIMEOUT = 600.0

    def __init__(self, config_dir: Optional[str] = None, validate: bool = False):
        """
        Initialize ConfigManager.

        Args:
            config_dir: Directory containing environment files
            validate: Whether to validate all settings eagerly
        """
        self.config_dir = Path(config_dir) if config_dir else Path.cwd()
        self._env_vars: Dict[str, str] = {}

        self._load_env_files()

        if validate:
            self.validate()

    def _load_env_files(self):
        """Load environment files with precedence: .env.prod > .env.staging > .env.dev > .env"""
        env = os.getenv('ENV', 'dev')

        env_files = ['.env']
        if env in ['dev', 'staging', 'prod']:
            env_files.append('.env.dev')
        if env in ['staging', 'prod']:
            env_files.append('.env.staging')
        if env == 'prod':
            env_files.append('.env.prod')

        # Later files override earlier ones
        for env_file in env_files:
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
                        self._env_vars[key.strip()] = value.strip()
        except OSError as e:
            raise ConfigValidationError(f"Cannot read environment file {env_path}: {e}")

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Look up a setting, checking os.environ before file-loaded values."""
        value = os.getenv(name) or self._env_vars.get(name)
        return value if value else default

    def _get_int(self, name: str, default: int, minimum: int) -> int:
        raw = self.get(name)
        if raw is None:
            return default
        try:
            value = int(raw)
        except ValueError:
            raise ConfigValidationError(f"Invalid {name}: '{raw}' - must be an integer")
        if value < minimum:
            raise ConfigValidationError(f"Invalid {name}: '{raw}' - must be at least {minimum}")
        return value

    def _get_float(self, name: str, default: float) -> float:
        raw = self.get(name)
        if raw is None:
            return default
        try:
            value = float(raw)
        except ValueError:
            raise ConfigValidationError(f"Invalid {name}: '{raw}' - must be a number")
        if value < 0:
            raise ConfigValidationError(f"Invalid {name}: '{raw}' - must not be negative")
        return value

    @property
    def project_id(self) -> str:
        """Get the Google Cloud project that owns test resources."""
        project_id = self.get('SPANNER_PROJECT_ID') or self.get('GOOGLE_CLOUD_PROJECT')
        if not project_id:
            raise ConfigValidationError(
                "Required environment variable SPANNER_PROJECT_ID is not configured"
            )
        return project_id

    @property
    def region(self) -> str:
        """Get the region new instances are created in."""
        return self.get('SPANNER_REGION', self.DEFAULT_REGION)

    @property
    def static_instance_id(self) -> Optional[str]:
        """Get the pre-existing instance to reuse, if one is configured."""
        return self.get('SPANNER_INSTANCE_ID')

    @property
    def emulator_host(self) -> Optional[str]:
        """Get the Spanner emulator address, if tests run against the emulator."""
        return self.get('SPANNER_EMULATOR_HOST')

    @property
    def is_emulator(self) -> bool:
        return self.emulator_host is not None

    @property
    def node_count(self) -> int:
        """Get the node count for new instances."""
        return self._get_int('SPANNER_NODE_COUNT', self.DEFAULT_NODE_COUNT, minimum=1)

    @property
    def retry_max_attempts(self) -> int:
        """Get how many times provisioning is retried after a transient error."""
        return self._get_int('SPANNER_RETRY_MAX_ATTEMPTS', self.DEFAULT_RETRY_MAX_ATTEMPTS, minimum=0)

    @property
    def retry_backoff_base(self) -> float:
        return self._get_float('SPANNER_RETRY_BACKOFF_BASE', self.DEFAULT_RETRY_BACKOFF_BASE)

    @property
    def retry_backoff_max(self) -> float:
        return self._get_float('SPANNER_RETRY_BACKOFF_MAX', self.DEFAULT_RETRY_BACKOFF_MAX)

    @property
    def operation_timeout(self) -> float:
        """Get the seconds to wait on each long-running Spanner operation."""
        return self._get_float('SPANNER_OPERATION_TIMEOUT', self.DEFAULT_OPERATION_TIMEOUT)

    def retry_policy(self):
        """Build the provisioning RetryPolicy described by this configuration."""
        from spanner_it.testing.retry_policy import RetryPolicy

        return RetryPolicy(
            max_retries=self.retry_max_attempts,
            backoff_base=self.retry_backoff_base,
            backoff_max=self.retry_backoff_max
        )

    def validate(self):
        """Validate every setting, raising ConfigValidationError on the first problem."""
        _ = self.project_id
        _ = self.node_count
        _ = self.retry_max_attempts
        _ = self.operation_timeout
        if self.retry_backoff_base > self.retry_backoff_max:
            raise ConfigValidationError(
                f"SPANNER_RETRY_BACKOFF_BASE ({self.retry_backoff_base}) must not exceed "
                f"SPANNER_RETRY_BACKOFF_MAX ({self.retry_backoff_max})"
            )
