"""
Configuration System

Declarative, self-documenting configuration: settings are defined as a
dataclass whose fields carry metadata through config_field(). Values are
resolved with the hierarchy default -> JSON config file -> environment.

Design decisions:
- Flat JSON format: {"key": value}
- Environment variables named <PREFIX>_<KEY>, loaded from .env as well
- Minimal error logging with defaults on validation failure
"""

import json
import logging
import os
from dataclasses import dataclass, field, fields as dataclass_fields
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple, Type, TypeVar, Union

from dotenv import load_dotenv

logger = logging.getLogger("hostvoice.config_system")

T = TypeVar("T")


def config_field(
    default: Any,
    description: str,
    category: str = "General",
    min_value: Optional[Union[int, float]] = None,
    max_value: Optional[Union[int, float]] = None,
    choices: Optional[List[Any]] = None,
    validator: Optional[Callable[[Any], Tuple[bool, str]]] = None,
    normalize: Optional[Callable[[str], str]] = None,
) -> Any:
    """
    Helper function to define a config field with metadata.

    Args:
        default: Default value for this field
        description: Human-readable description
        category: Category shown in documentation (e.g., "Speech", "Logging")
        min_value: Minimum value (for numeric types)
        max_value: Maximum value (for numeric types)
        choices: List of valid choices (for enum-like fields)
        validator: Custom validation function (value -> (bool, error_msg))
        normalize: Applied to string values before validation (e.g., str.upper)

    Returns:
        A dataclass field with metadata attached

    Example:
        >>> @dataclass
        >>> class MyConfig:
        >>>     log_level: str = config_field(
        >>>         default="INFO",
        >>>         description="Logging level",
        >>>         category="Logging",
        >>>         choices=["DEBUG", "INFO"]
        >>>     )
    """
    metadata = {
        "description": description,
        "category": category,
        "min_value": min_value,
        "max_value": max_value,
        "choices": choices,
        "validator": validator,
        "normalize": normalize,
    }

    return field(default=default, metadata=metadata)


@dataclass
class ConfigField:
    """
    Metadata for a single configuration field.

    Attributes:
        name: Field name (e.g., "log_level")
        type: Python type (bool, int, float, str)
        default: Default value
        description: Human-readable description
        category: Documentation category
        min_value: Minimum value (for numeric types)
        max_value: Maximum value (for numeric types)
        choices: List of valid choices (for enums)
        validator: Custom validation function (value -> (bool, error_msg))
        normalize: Applied to string values before validation
    """
    name: str
    type: Type
    default: Any
    description: str
    category: str
    min_value: Optional[Union[int, float]] = None
    max_value: Optional[Union[int, float]] = None
    choices: Optional[List[Any]] = None
    validator: Optional[Callable[[Any], Tuple[bool, str]]] = None
    normalize: Optional[Callable[[str], str]] = None

    def validate(self, value: Any) -> Tuple[bool, Optional[str]]:
        """
        Validate a value against this field's constraints.

        Returns:
            (is_valid, error_message)
        """
        # Type validation
        if not isinstance(value, self.type):
            try:
                value = self.type(value)
            except (ValueError, TypeError):
                return False, f"Expected {self.type.__name__}, got {type(value).__name__}"

        # Range validation for numeric types
        if self.min_value is not None and value < self.min_value:
            return False, f"Value {value} below minimum {self.min_value}"

        if self.max_value is not None and value > self.max_value:
            return False, f"Value {value} above maximum {self.max_value}"

        # Choice validation
        if self.choices is not None and value not in self.choices:
            return False, f"Value {value} not in valid choices: {self.choices}"

        # Custom validator
        if self.validator is not None:
            is_valid, error_msg = self.validator(value)
            if not is_valid:
                return False, error_msg

        return True, None

    def parse_env(self, raw: str) -> Any:
        """Convert an environment string to this field's type."""
        if self.type == bool:
            return raw.lower() in ("true", "1", "yes", "on")
        if self.type == list:
            return [v.strip() for v in raw.split(",") if v.strip()]
        return self.type(raw)


@dataclass
class ConfigSchema:
    """
    Configuration schema extracted from a config dataclass.

    Attributes:
        name: Schema name (used in log messages)
        fields: Dictionary of field_name -> ConfigField
    """
    name: str
    fields: Dict[str, ConfigField] = field(default_factory=dict)

    @classmethod
    def from_dataclass(cls, name: str, config_class: Type) -> "ConfigSchema":
        """
        Extract schema from a config dataclass.

        Args:
            name: Schema name
            config_class: Dataclass with fields defined through config_field()

        Returns:
            ConfigSchema instance
        """
        schema = cls(name=name)

        for dc_field in dataclass_fields(config_class):
            metadata = dc_field.metadata if dc_field.metadata else {}

            schema.fields[dc_field.name] = ConfigField(
                name=dc_field.name,
                type=dc_field.type if isinstance(dc_field.type, type) else type(dc_field.default),
                default=dc_field.default,
                description=metadata.get("description", ""),
                category=metadata.get("category", "General"),
                min_value=metadata.get("min_value"),
                max_value=metadata.get("max_value"),
                choices=metadata.get("choices"),
                validator=metadata.get("validator"),
                normalize=metadata.get("normalize"),
            )

        return schema


class ConfigManager:
    """
    Resolves a config dataclass from defaults, a JSON file and the environment.

    Hierarchy: default -> JSON config file -> environment variable.
    """

    def __init__(
        self,
        config_class: Type[T],
        env_prefix: str = "HOSTVOICE",
        config_file: Optional[Union[str, Path]] = None,
        load_env_file: bool = True,
    ):
        """
        Initialize the config manager.

        Args:
            config_class: Dataclass defining the settings
            env_prefix: Prefix of environment variable names
            config_file: JSON file with overrides, defaults to $<PREFIX>_CONFIG
            load_env_file: Load a .env file into the environment first
        """
        if load_env_file:
            load_dotenv()

        self.config_class = config_class
        self.env_prefix = env_prefix
        self.schema = ConfigSchema.from_dataclass(config_class.__name__, config_class)

        if config_file is None:
            config_file = os.getenv(f"{env_prefix}_CONFIG")
        self.config_file = Path(config_file) if config_file else None

        self.file_overrides: Dict[str, Any] = {}
        self._load_config_file()

    def _load_config_file(self):
        """Load overrides from the JSON config file, if there is one."""
        if self.config_file is None:
            return

        if not self.config_file.exists():
            logger.warning(f"Config file {self.config_file} does not exist, using defaults")
            return

        try:
            with open(self.config_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"ERROR: Failed to load config file {self.config_file}: {e}")
            return

        if not isinstance(data, dict):
            logger.error(f"ERROR: Config file {self.config_file} must contain a JSON object")
            return

        for key, value in data.items():
            if key not in self.schema.fields:
                logger.warning(f"Ignoring unknown config key '{key}' in {self.config_file}")
                continue
            self.file_overrides[key] = value

        logger.info(f"Loaded {len(self.file_overrides)} settings from {self.config_file}")

    def env_var_name(self, key: str) -> str:
        return f"{self.env_prefix}_{key.upper()}"

    def get(self, key: str) -> Any:
        """
        Get config value with hierarchy: default -> file -> environment.

        Invalid values are logged and replaced by the default.
        """
        if key not in self.schema.fields:
            logger.error(f"ERROR: Invalid config '{key}' for '{self.schema.name}', using None")
            return None

        field_meta = self.schema.fields[key]
        value = field_meta.default

        if key in self.file_overrides:
            value = self.file_overrides[key]

        env_var_name = self.env_var_name(key)
        env_value = os.getenv(env_var_name)
        if env_value is not None:
            try:
                value = field_meta.parse_env(env_value)
            except (ValueError, TypeError) as e:
                logger.warning(f"Failed to parse env var {env_var_name}={env_value}: {e}")

        # null in the config file means "not set"
        if value is None:
            return field_meta.default

        if field_meta.normalize is not None and isinstance(value, str):
            value = field_meta.normalize(value)

        is_valid, error = field_meta.validate(value)
        if not is_valid:
            logger.error(f"ERROR: Invalid config '{key}': {value} ({error}), using default: {field_meta.default}")
            return field_meta.default

        return field_meta.type(value)

    def load(self) -> T:
        """Build the config dataclass with every value resolved."""
        return self.config_class(**{key: self.get(key) for key in self.schema.fields})
