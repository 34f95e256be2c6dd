"""
User configuration management for Glowie.

Supports configuration from multiple sources (in order of priority):
1. Command-line arguments (highest priority, applied by the CLI)
2. Environment variables
3. User config file (~/.glowie/config.json)
4. Default values from config.py (lowest priority)

Example config.json:
{
    "db_path": null,
    "default_workers": 8,
    "distance_percent": 10,
    "keep_policy": "path-shallowest",
    "keep_reversed": false,
    "include_ignored": false
}
"""

import json
import os
from pathlib import Path
from typing import Any, Optional
import logging

from .config import DEFAULT_DISTANCE_PERCENT, DEFAULT_WORKERS, INDEX_DB_FILE

logger = logging.getLogger(__name__)

DEFAULT_KEEP_POLICY = 'path-shallowest'


class UserConfig:
    """
    Manages user configuration from file and environment variables.

    The file is read lazily on first access and cached until reload().
    """

    _instance: Optional['UserConfig'] = None
    _config_data: Optional[dict] = None

    def __new__(cls):
        """Singleton pattern to ensure one config instance."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @property
    def config_dir(self) -> Path:
        """Get the configuration directory path."""
        env_dir = os.getenv('GLOWIE_CONFIG_DIR')
        if env_dir:
            return Path(env_dir)
        return Path.home() / '.glowie'

    @property
    def config_file_path(self) -> Path:
        """Get the configuration file path."""
        return self.config_dir / 'config.json'

    def _load_config_file(self) -> dict:
        """Load configuration from JSON file."""
        if not self.config_file_path.exists():
            return {}

        try:
            with open(self.config_file_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
                logger.debug(f"Loaded configuration from {self.config_file_path}")
                return data
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Failed to load config file {self.config_file_path}: {e}")
            return {}

    def _get_config_data(self) -> dict:
        """Get cached config data (lazy loading)."""
        if self._config_data is None:
            self._config_data = self._load_config_file()
        return self._config_data

    def reload(self):
        """Reload configuration from file."""
        self._config_data = None

    def get(self, key: str, default: Any = None, env_var: Optional[str] = None) -> Any:
        """
        Get a configuration value with priority:
        1. Environment variable (if env_var specified)
        2. Config file
        3. Default value

        Args:
            key: Configuration key
            default: Default value if not found
            env_var: Optional environment variable name to check

        Returns:
            Configuration value
        """
        if env_var:
            env_value = os.getenv(env_var)
            if env_value is not None:
                # Try to parse as JSON for numbers/booleans
                try:
                    return json.loads(env_value)
                except (json.JSONDecodeError, TypeError):
                    return env_value

        config_data = self._get_config_data()
        if config_data.get(key) is not None:
            return config_data[key]

        return default

    @property
    def db_path(self) -> str:
        """Path to the index database file."""
        return str(self.get('db_path', default=INDEX_DB_FILE, env_var='GLOWIE_DB_PATH'))

    @property
    def default_workers(self) -> int:
        """Number of concurrent update workers."""
        return int(self.get('default_workers', default=DEFAULT_WORKERS, env_var='GLOWIE_WORKERS'))

    @property
    def distance_percent(self) -> float:
        """Near-duplicate threshold, percent of hash bits allowed to differ."""
        return self.get(
            'distance_percent',
            default=DEFAULT_DISTANCE_PERCENT,
            env_var='GLOWIE_DISTANCE_PERCENT'
        )

    @property
    def keep_policy(self) -> str:
        """Keep policy name (see KeepPolicy)."""
        return self.get('keep_policy', default=DEFAULT_KEEP_POLICY, env_var='GLOWIE_KEEP_POLICY')

    @property
    def keep_reversed(self) -> bool:
        """Reverse the keep policy ordering."""
        return bool(self.get('keep_reversed', default=False, env_var='GLOWIE_KEEP_REVERSED'))

    @property
    def include_ignored(self) -> bool:
        """Report byte-identical non-image files as exact duplicates."""
        return bool(self.get('include_ignored', default=False, env_var='GLOWIE_INCLUDE_IGNORED'))

    def create_example_config(self) -> bool:
        """Create an example configuration file."""
        self.config_dir.mkdir(parents=True, exist_ok=True)

        example_config = {
            "_comment": "Glowie User Configuration",
            "db_path": None,
            "default_workers": DEFAULT_WORKERS,
            "distance_percent": DEFAULT_DISTANCE_PERCENT,
            "keep_policy": DEFAULT_KEEP_POLICY,
            "keep_reversed": False,
            "include_ignored": False,
        }

        try:
            with open(self.config_file_path, 'w', encoding='utf-8') as f:
                json.dump(example_config, f, indent=2)
            logger.info(f"Created example config file at {self.config_file_path}")
            return True
        except OSError as e:
            logger.error(f"Failed to create example config: {e}")
            return False


# Global instance
_user_config = UserConfig()


def get_user_config() -> UserConfig:
    """Get the global UserConfig instance."""
    return _user_config
