"""
Configuration utilities

Loads the optional TOML configuration file and turns its sections into
typed settings:

    [registry]
    discard_invalid_next_id = true

    [logging]
    level = "DEBUG"
    log_file = "$HOME/reassembler.log"
"""

import os
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

import toml

from .errors import ConfigError
from .registry import RegistryConfig

logger = logging.getLogger(__name__)

LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR')
REGISTRY_KEYS = ('discard_invalid_next_id',)


@dataclass
class LoggingSettings:
    """Diagnostic logging settings for the command line tool"""
    level: str = 'INFO'
    log_file: Optional[Path] = None

    @property
    def level_number(self) -> int:
        return getattr(logging, self.level)


def load_config(config_file: Union[str, Path]) -> Dict[str, Any]:
    """
    Load a TOML configuration file

    Args:
        config_file: Path to TOML configuration file

    Returns:
        Parsed configuration dict

    Raises:
        ConfigError: file missing, unreadable, or not valid TOML
    """
    try:
        with open(config_file, 'r') as f:
            config = toml.load(f)
    except FileNotFoundError:
        raise ConfigError(f"Configuration file not found: {config_file}") from None
    except toml.TomlDecodeError as e:
        raise ConfigError(f"Error parsing configuration {config_file}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Error reading configuration {config_file}: {e}") from e

    logger.debug(f"Loaded configuration from {config_file}")
    return config


def _section(config: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = config.get(name, {})
    if not isinstance(section, dict):
        raise ConfigError(f"[{name}] must be a table")
    return section


def registry_config_from_dict(config: Dict[str, Any]) -> RegistryConfig:
    """
    Build the RegistryConfig from the [registry] section

    Unknown keys are logged and ignored.
    """
    section = _section(config, 'registry')

    for key in section:
        if key not in REGISTRY_KEYS:
            logger.warning(f"Ignoring unknown [registry] option: {key}")

    discard = section.get('discard_invalid_next_id', False)
    if not isinstance(discard, bool):
        raise ConfigError(
            f"registry.discard_invalid_next_id must be true or false, got {discard!r}")

    return RegistryConfig(discard_invalid_next_id=discard)


def logging_settings_from_dict(config: Dict[str, Any]) -> LoggingSettings:
    """Build LoggingSettings from the [logging] section"""
    section = _section(config, 'logging')

    level = str(section.get('level', 'INFO')).upper()
    if level not in LOG_LEVELS:
        raise ConfigError(
            f"logging.level must be one of {', '.join(LOG_LEVELS)}, got {level!r}")

    log_file = section.get('log_file')
    if log_file:
        # Resolve environment variables and user home
        log_file = Path(os.path.expanduser(os.path.expandvars(str(log_file))))
    else:
        log_file = None

    return LoggingSettings(level=level, log_file=log_file)
