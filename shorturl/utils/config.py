"""Utility functions for application configuration management.

Each environment (`APP_ENV`) has a dedicated YAML configuration document in
the configuration directory (`CONFIG_DIR`, `./config` by default):

    config/
    ├── local.yaml
    ├── dev.yaml
    └── prod.yaml

The configuration document follows this structure:

    active_backend: redis           # redis | dynamodb | memory
    backends:
      redis: {host: localhost, port: 6379, db: 0}
      dynamodb: {table_name: short-urls, region_name: us-east-1}
    cache:
      backend: memory               # memory | redis
      max_entries: null
    shortener:
      short_url_prefix: http://localhost:3000/
      max_allocation_attempts: 5

Functions:
    app_env() -> str
        Return the current application environment (`APP_ENV`) value,
        defaulting to `'local'`.

    app_name() -> str | None
        Return the application name (`APP_NAME`), or None if not set.

    app_prefix() -> str | None
        Return application prefix for DAOs, or None if `APP_NAME` is not set.

    config_dir() -> Path
        Return the configuration directory, using `CONFIG_DIR` when available.

    load_yaml(path: Path) -> dict
        Safely load a YAML document, defaulting to {} for empty files.

    load_config(path: Path | None = None) -> dict
        Load and validate the configuration document for the current environment.

Example:
    >>> from shorturl.utils.config import load_config
    >>> config = load_config()
    >>> config['backends']['redis']['host']
    'localhost'
"""

import os
import copy
import logging
from pathlib import Path
from typing import Any

import yaml

from shorturl.constants import ENV, Backend, SHORT_URL_PREFIX, MAX_ALLOCATION_ATTEMPTS
from shorturl.exceptions import BadConfigurationError


logger = logging.getLogger(__name__)

DEFAULT_CACHE_CONFIG = {
    'backend': Backend.MEMORY.value,
    'max_entries': None,
}

DEFAULT_SHORTENER_CONFIG = {
    'short_url_prefix': SHORT_URL_PREFIX,
    'max_allocation_attempts': MAX_ALLOCATION_ATTEMPTS,
}


def app_env() -> str:
    """Return the current application environment by reading 'APP_ENV'

    Returns:
        str:
            Value of `APP_ENV` environment variable, `'local'` by default.

    Example:
        >>> os.environ['APP_ENV'] = 'dev'
        >>> app_env()
        'dev'
    """
    return os.environ.get(ENV.App.APP_ENV, 'local').lower()


def app_name() -> str | None:
    """Return the current application name by reading 'APP_NAME'

    Returns:
        str:
            Value of `APP_NAME` environment variable.
            None if variable is not set.
    """
    return os.environ.get(ENV.App.APP_NAME)


def app_prefix() -> str | None:
    """Return application prefix for DAOs

    Returns:
        str: app prefix as <app name>:<app env>.
             None if APP_NAME is not set.

    Example:
        >>> os.environ['APP_NAME'] = 'shorturl'
        >>> os.environ['APP_ENV'] = 'local'
        >>> app_prefix()
        'shorturl:local'
    """
    return None if app_name() is None else f'{app_name()}:{app_env()}'


def config_dir() -> Path:
    """Return the configuration directory

    Reads `CONFIG_DIR` and falls back to `./config` relative to the current
    working directory.
    """
    return Path(os.environ.get(ENV.App.CONFIG_DIR, 'config'))


def load_yaml(path: Path) -> dict[str, Any]:
    """Load a YAML file into a Python dictionary.

    Args:
        path (Path):
            Path to a YAML file.

    Returns:
        dict[str, Any]:
            Parsed YAML document. Returns {} for empty files.

    Raises:
        FileNotFoundError:
            If the file does not exist.
        BadConfigurationError:
            If the document is not a YAML mapping.
    """
    if not path.is_file():
        raise FileNotFoundError(f'YAML not found: {path}')
    with path.open('r', encoding='utf-8') as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise BadConfigurationError(f'Configuration document {path} must be a mapping (given type: {type(data)}).')
    return data


def load_config(path: Path | None = None) -> dict[str, Any]:
    """Load the configuration document for the current application environment

    Missing `cache` and `shortener` sections (or keys within them) are filled
    with defaults. The active backend and the cache backend must be known and
    the active backend must have a section under `backends` (except 'memory').

    Args:
        path (Path | None):
            Explicit configuration file. Defaults to <CONFIG_DIR>/<APP_ENV>.yaml.

    Returns:
        dict[str, Any]: The normalized configuration document.

    Raises:
        FileNotFoundError:
            If the configuration file does not exist.
        BadConfigurationError:
            If the configuration document is malformed.
    """
    path = Path(path) if path is not None else config_dir() / f'{app_env()}.yaml'
    logger.debug('Loading configuration.', extra={'configPath': str(path)})
    document = load_yaml(path)

    config = copy.deepcopy(document)
    config.setdefault('backends', {})
    config['cache'] = {**DEFAULT_CACHE_CONFIG, **(document.get('cache') or {})}
    config['shortener'] = {**DEFAULT_SHORTENER_CONFIG, **(document.get('shortener') or {})}

    valid_backends = {b.value for b in Backend}
    backend = config.get('active_backend')
    if backend not in valid_backends:
        raise BadConfigurationError(f"Unknown active_backend {backend!r} in {path} (expected one of {sorted(valid_backends)}).")
    if backend != Backend.MEMORY and not isinstance(config['backends'].get(backend), dict):
        raise BadConfigurationError(f"Missing 'backends.{backend}' section in {path}.")

    cache_backend = config['cache']['backend']
    if cache_backend not in {Backend.MEMORY.value, Backend.REDIS.value}:
        raise BadConfigurationError(f'Unknown cache backend {cache_backend!r} in {path}.')
    if cache_backend == Backend.REDIS and not isinstance(config['backends'].get(Backend.REDIS.value), dict):
        raise BadConfigurationError(f"Redis cache requires a 'backends.redis' section in {path}.")

    attempts = config['shortener']['max_allocation_attempts']
    if not isinstance(attempts, int) or isinstance(attempts, bool) or attempts < 1:
        raise BadConfigurationError(f'shortener.max_allocation_attempts must be a positive integer (given value: {attempts!r}).')

    logger.debug('Loaded configuration.', extra={'configPath': str(path), 'backend': backend})
    return config
