"""
Configuration management for Coinhash.

Loads YAML configuration from file with sensible defaults and validation.
Supports environment variable substitution using ${ENV_VAR} syntax.
"""

import os
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import yaml

from coinhash.exceptions import InvalidConfigurationError
from coinhash.logging_config import get_logger, setup_logging

logger = get_logger(__name__)


def _expand_env_vars(value: Any) -> Any:
    """
    Recursively expand environment variables in configuration values.

    Supports ${ENV_VAR} syntax with optional default values: ${ENV_VAR:default}

    Args:
        value: Configuration value (string, dict, list, or other)

    Returns:
        Value with environment variables expanded

    Examples:
        "${COINHASH_LOG_LEVEL}" -> value of COINHASH_LOG_LEVEL env var
        "${COINHASH_LOG_LEVEL:INFO}" -> value of COINHASH_LOG_LEVEL or "INFO" if not set
    """
    if isinstance(value, str):
        # Pattern matches ${VAR} or ${VAR:default}
        pattern = r'\$\{([^}:]+)(?::([^}]*))?\}'

        def replace_env_var(match):
            var_name = match.group(1)
            default_value = match.group(2) if match.group(2) is not None else ""
            return os.environ.get(var_name, default_value)

        return re.sub(pattern, replace_env_var, value)
    elif isinstance(value, dict):
        return {k: _expand_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [_expand_env_vars(item) for item in value]
    else:
        return value


def _as_bool(value: Any) -> bool:
    # Env-expanded values arrive as strings
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    file: str = ""
    json_format: bool = True


@dataclass
class MerkleConfig:
    """Merkle tree construction configuration."""

    parallel_enabled: bool = True  # Hash leaves in a thread pool for large trees
    parallel_threshold: int = 100  # Minimum leaf count before using the pool
    max_workers: int = 4
    log_digest_bytes: int = 8  # Leading root bytes shown in log events


@dataclass
class CoinhashConfig:
    """Main Coinhash configuration."""

    logging: LoggingConfig = field(default_factory=LoggingConfig)
    merkle: MerkleConfig = field(default_factory=MerkleConfig)


def get_default_config_path() -> str:
    """Get the default configuration file path."""
    return os.path.expanduser("~/.coinhash/config.yaml")


def get_default_config() -> CoinhashConfig:
    """
    Get default configuration with sensible defaults.

    Returns:
        CoinhashConfig: Default configuration object
    """
    return CoinhashConfig()


def load_config(config_path: Optional[str] = None) -> CoinhashConfig:
    """
    Load configuration from YAML file with validation.

    If config file is not found, returns default configuration.
    If config file is malformed or invalid, raises InvalidConfigurationError.

    Args:
        config_path: Path to configuration file. If None, uses default path.

    Returns:
        CoinhashConfig: Loaded and validated configuration

    Raises:
        InvalidConfigurationError: If configuration is invalid or malformed
    """
    if config_path is None:
        config_path = get_default_config_path()

    config_path = os.path.expanduser(str(config_path))

    if not os.path.exists(config_path):
        logger.info(f"Configuration file not found at {config_path}, using defaults")
        return get_default_config()

    try:
        with open(config_path, 'r') as f:
            config_data = yaml.safe_load(f)
        logger.debug(f"Loaded configuration from {config_path}")
    except yaml.YAMLError as e:
        logger.error(f"Failed to parse YAML configuration file '{config_path}': {e}")
        raise InvalidConfigurationError(
            f"Failed to parse YAML configuration file '{config_path}': {e}"
        ) from e
    except OSError as e:
        logger.error(f"Failed to read configuration file '{config_path}': {e}")
        raise InvalidConfigurationError(
            f"Failed to read configuration file '{config_path}': {e}"
        ) from e

    if config_data is None:
        logger.info(f"Configuration file {config_path} is empty, using defaults")
        return get_default_config()

    if not isinstance(config_data, dict):
        raise InvalidConfigurationError(
            f"Configuration in '{config_path}' must be a mapping, "
            f"got {type(config_data).__name__}"
        )

    config_data = _expand_env_vars(config_data)

    try:
        config = _build_config_from_dict(config_data)
        _validate_config(config)
    except InvalidConfigurationError:
        raise
    except (TypeError, ValueError, AttributeError) as e:
        logger.error(f"Invalid configuration in '{config_path}': {e}")
        raise InvalidConfigurationError(
            f"Invalid configuration in '{config_path}': {e}"
        ) from e

    logger.info(f"Successfully loaded and validated configuration from {config_path}")
    return config


def _build_config_from_dict(config_data: Dict[str, Any]) -> CoinhashConfig:
    """
    Build CoinhashConfig from dictionary loaded from YAML.

    Merges user configuration with defaults.

    Args:
        config_data: Dictionary loaded from YAML file

    Returns:
        CoinhashConfig: Configuration object
    """
    default_config = get_default_config()

    # Parse logging configuration (optional)
    logging_data = config_data.get('logging') or {}
    logging = LoggingConfig(
        level=str(logging_data.get('level', default_config.logging.level)),
        file=os.path.expanduser(
            logging_data.get('file', default_config.logging.file)
        ),
        json_format=_as_bool(
            logging_data.get('json_format', default_config.logging.json_format)
        ),
    )

    # Parse merkle configuration (optional)
    merkle_data = config_data.get('merkle') or {}
    merkle = MerkleConfig(
        parallel_enabled=_as_bool(
            merkle_data.get('parallel_enabled', default_config.merkle.parallel_enabled)
        ),
        parallel_threshold=int(
            merkle_data.get('parallel_threshold', default_config.merkle.parallel_threshold)
        ),
        max_workers=int(
            merkle_data.get('max_workers', default_config.merkle.max_workers)
        ),
        log_digest_bytes=int(
            merkle_data.get('log_digest_bytes', default_config.merkle.log_digest_bytes)
        ),
    )

    return CoinhashConfig(logging=logging, merkle=merkle)


def _validate_config(config: CoinhashConfig) -> None:
    """
    Validate configuration values.

    Args:
        config: Configuration to validate

    Raises:
        InvalidConfigurationError: If configuration is invalid
    """
    valid_log_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    if config.logging.level.upper() not in valid_log_levels:
        raise InvalidConfigurationError(
            f"logging level must be one of {valid_log_levels}, "
            f"got '{config.logging.level}'"
        )

    if config.merkle.parallel_threshold < 1:
        raise InvalidConfigurationError(
            f"parallel_threshold must be at least 1, got {config.merkle.parallel_threshold}"
        )
    if config.merkle.max_workers < 1:
        raise InvalidConfigurationError(
            f"max_workers must be at least 1, got {config.merkle.max_workers}"
        )
    if not 0 <= config.merkle.log_digest_bytes <= 32:
        raise InvalidConfigurationError(
            f"log_digest_bytes must be between 0 and 32, got {config.merkle.log_digest_bytes}"
        )


def configure_logging(config: CoinhashConfig) -> None:
    """Apply the logging section of a configuration."""
    setup_logging(
        level=config.logging.level,
        log_file=config.logging.file or None,
        json_format=config.logging.json_format,
    )
