"""
Settings schema for the hostvoice command line.

Every field can be set in the JSON file named by HOSTVOICE_CONFIG or with
an environment variable HOSTVOICE_<FIELD> (also read from .env).
"""

from dataclasses import dataclass
from typing import Optional, Union
from pathlib import Path

from hostvoice.core.backends.factory import backend_names
from hostvoice.core.config_system import ConfigManager, config_field


@dataclass
class SpeechConfig:
    """Command line settings."""

    backend: str = config_field(
        default="",
        description="Backend to use (empty = first available)",
        category="Speech",
        choices=[""] + backend_names(),
        normalize=str.lower
    )

    log_level: str = config_field(
        default="WARNING",
        description="Logging level for console and log file output",
        category="Logging",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        normalize=str.upper
    )

    log_file: str = config_field(
        default="",
        description="Log file, rotated at midnight (empty = console only)",
        category="Logging"
    )


def load_config(config_file: Optional[Union[str, Path]] = None) -> SpeechConfig:
    """Resolve SpeechConfig from defaults, config file and environment."""
    return ConfigManager(SpeechConfig, config_file=config_file).load()
