"""
Configuration management for Coinhash.

Handles loading and validation of configuration files.
"""

from coinhash.config.settings import (
    CoinhashConfig,
    LoggingConfig,
    MerkleConfig,
    configure_logging,
    get_default_config,
    get_default_config_path,
    load_config,
)

__all__ = [
    "CoinhashConfig",
    "LoggingConfig",
    "MerkleConfig",
    "configure_logging",
    "get_default_config",
    "get_default_config_path",
    "load_config",
]
