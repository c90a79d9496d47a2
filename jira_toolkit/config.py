"""
Configuration management module.

This module builds the settings object handed to the client and helpers.
Settings come from an optional config.yaml file, overlaid with
environment variables (a .env file is loaded first if present).
"""

import copy
import logging
import os
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv

from .exceptions import ConfigError

logger = logging.getLogger('jira_toolkit.config')

# Setting path -> environment variable, in the order missing names are reported
REQUIRED_SETTINGS = [
    ('jira.host', 'JIRA_HOST'),
    ('jira.email', 'JIRA_EMAIL'),
    ('jira.api_token', 'JIRA_API_TOKEN'),
]

ENV_OVERRIDES = REQUIRED_SETTINGS + [
    ('search.page_size', 'JIRA_PAGE_SIZE'),
    ('logging.level', 'JIRA_LOG_LEVEL'),
]


class Config:
    """
    Validated settings for talking to a Jira instance.

    Validation happens in the constructor, so holding a Config means the
    credentials are present. Settings are a nested mapping with the
    sections jira, search, logging and output.
    """

    def __init__(self, settings: Optional[Dict[str, Any]] = None):
        """
        Initialize configuration from a settings mapping.

        Args:
            settings: Nested settings dictionary

        Raises:
            ConfigError: If required settings are missing or invalid
        """
        self._config: Dict[str, Any] = copy.deepcopy(settings or {})
        self._validate_config()

    def _validate_config(self) -> None:
        """
        Validate required configuration fields.

        Raises:
            ConfigError: Lists every missing credential at once
        """
        missing = [
            env_name for key, env_name in REQUIRED_SETTINGS
            if not self.get(key)
        ]

        if missing:
            raise ConfigError(
                f"Missing required configuration: {', '.join(missing)}. "
                "Set them in the environment, a .env file, or config.yaml.",
                missing=missing
            )

        page_size = self.get('search.page_size')
        if page_size is not None:
            if isinstance(page_size, bool) or not isinstance(page_size, int) \
                    or page_size <= 0:
                raise ConfigError("search.page_size must be a positive integer")

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value using dot notation.

        Args:
            key: Configuration key in dot notation (e.g., 'jira.host')
            default: Default value if key not found

        Returns:
            Configuration value or default

        Examples:
            >>> config.get('jira.host')
            'https://example.atlassian.net'
            >>> config.get('search.page_size', 100)
            100
        """
        keys = key.split('.')
        value = self._config

        for k in keys:
            if isinstance(value, dict):
                value = value.get(k)
                if value is None:
                    return default
            else:
                return default

        return value

    @property
    def jira_host(self) -> str:
        """Get Jira base URL."""
        return self.get('jira.host').rstrip('/')

    @property
    def jira_email(self) -> str:
        return self.get('jira.email')

    @property
    def jira_api_token(self) -> str:
        return self.get('jira.api_token')

    @property
    def api_path(self) -> str:
        """Get REST API prefix appended to the host."""
        return self.get('jira.api_path', '/rest/api/3').rstrip('/')

    @property
    def search_endpoint(self) -> str:
        """Get search endpoint relative to the API prefix."""
        return self.get('jira.search_endpoint', '/search')

    @property
    def request_timeout(self) -> Optional[float]:
        """Get request timeout in seconds (None waits indefinitely)."""
        return self.get('jira.request_timeout')

    @property
    def page_size(self) -> int:
        """Get page size for paginated searches."""
        return self.get('search.page_size', 100)

    @property
    def default_fields(self) -> str:
        """Get default field projection for searches."""
        fields = self.get('search.fields', '*all')
        if isinstance(fields, list):
            return ','.join(fields) if fields else '*all'
        return fields

    @property
    def log_level(self) -> str:
        """Get logging level."""
        return self.get('logging.level', 'INFO')

    @property
    def log_dir(self) -> Optional[str]:
        """Get log directory (None logs to the console only)."""
        return self.get('logging.log_dir')

    @property
    def output_dir(self) -> str:
        """Get export directory path."""
        return self.get('output.dir', 'data/exports')

    def __repr__(self) -> str:
        """String representation of config, without credentials."""
        return f"Config(host={self.jira_host!r}, page_size={self.page_size})"


def _set_dotted(settings: Dict[str, Any], key: str, value: Any) -> None:
    *parents, leaf = key.split('.')
    node = settings
    for part in parents:
        child = node.get(part)
        if not isinstance(child, dict):
            child = {}
            node[part] = child
        node = child
    node[leaf] = value


def _read_yaml(config_path: str) -> Dict[str, Any]:
    with open(config_path, 'r', encoding='utf-8') as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Error parsing config file {config_path}: {e}")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {config_path} must contain a mapping")
    return data


def _apply_env_overrides(settings: Dict[str, Any]) -> List[str]:
    applied = []

    for key, env_name in ENV_OVERRIDES:
        raw = os.environ.get(env_name)
        if not raw:
            continue

        value: Any = raw
        if key == 'search.page_size':
            try:
                value = int(raw)
            except ValueError:
                raise ConfigError(f"{env_name} must be an integer, got {raw!r}")

        _set_dotted(settings, key, value)
        applied.append(env_name)

    return applied


def load_config(
    config_path: Optional[str] = None,
    env_file: Optional[str] = None
) -> Config:
    """
    Load configuration from file and environment.

    Args:
        config_path: Path to a YAML config file. When None, config.yaml in
            the working directory is used if it exists.
        env_file: Path to a .env file (default: search upwards for .env)

    Returns:
        Config object

    Raises:
        FileNotFoundError: If an explicitly given config file doesn't exist
        ConfigError: If the file is malformed or credentials are missing
    """
    settings: Dict[str, Any] = {}

    if config_path is not None:
        if not os.path.exists(config_path):
            raise FileNotFoundError(f"Configuration file not found: {config_path}")
        settings = _read_yaml(config_path)
    elif os.path.exists('config.yaml'):
        settings = _read_yaml('config.yaml')

    load_dotenv(dotenv_path=env_file)
    applied = _apply_env_overrides(settings)
    if applied:
        logger.debug(f"Environment overrides applied: {', '.join(applied)}")

    return Config(settings)
