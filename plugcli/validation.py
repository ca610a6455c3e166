"""Configuration validation with schema definitions.

Provides declarative schema definitions (ConfigField, ConfigItems) for
validating configuration sections: required fields, type checking, choices
and fuzzy matching of unknown keys.
"""

import difflib
import logging
from dataclasses import dataclass
from typing import Any

from .config import BOOL_STRINGS

__all__ = [
    "ConfigField",
    "ConfigItems",
    "ConfigValidator",
    "format_config_error",
]


@dataclass
class ConfigField:
    """Describes an expected configuration field.

    Attributes:
        name: The configuration key name
        field_type: Expected type or tuple of types
        required: Whether the field is required
        default: Default value if not provided
        description: Human-readable description
        choices: List of valid values for enum-like fields
    """

    name: str
    field_type: type | tuple[type, ...] = str
    required: bool = False
    default: Any = None
    description: str = ""
    choices: list | None = None

    @property
    def type_name(self) -> str:
        """Return human-readable type name (e.g. 'str', 'int or float')."""
        if isinstance(self.field_type, tuple):
            return " or ".join(typ.__name__ for typ in self.field_type)
        return self.field_type.__name__


class ConfigItems(list):
    """A list of ConfigField items with lookup by name."""

    def __init__(self, *args: ConfigField) -> None:
        super().__init__(args)

    def get(self, name: str) -> ConfigField | None:
        """Get a ConfigField by name."""
        for prop in self:
            if prop.name == name:
                return prop
        return None


def format_config_error(section: str, field: str, message: str, suggestion: str = "") -> str:
    """Format a configuration error message.

    Args:
        section: Configuration section (plugin) name
        field: Field name that has the error
        message: Error description
        suggestion: Optional suggestion for fixing the error
    """
    msg = f"[{section}] Config error for '{field}': {message}"
    if suggestion:
        msg += f" -> {suggestion}"
    return msg


class ConfigValidator:
    """Validates a configuration section against a schema."""

    def __init__(self, config: dict, section: str, logger: logging.Logger) -> None:
        self.config = config
        self.section = section
        self.log = logger

    def validate(self, schema: ConfigItems) -> list[str]:
        """Validate configuration against schema.

        Returns:
            List of error messages (empty if validation passed)
        """
        errors = []

        for field_def in schema:
            value = self.config.get(field_def.name)

            if value is None:
                if field_def.required:
                    errors.append(format_config_error(self.section, field_def.name, "Missing required field"))
                continue

            type_error = self._check_type(field_def, value)
            if type_error:
                errors.append(type_error)
                continue

            if field_def.choices is not None and value not in field_def.choices:
                choices_str = ", ".join(repr(c) for c in field_def.choices)
                errors.append(
                    format_config_error(
                        self.section,
                        field_def.name,
                        f"Invalid value {value!r}",
                        f"Valid options: {choices_str}",
                    )
                )
        return errors

    def warn_unknown_keys(self, schema: ConfigItems) -> list[str]:
        """Log a warning for every key the schema doesn't know about.

        Returns:
            The warning messages
        """
        known_keys = [f.name for f in schema]
        warnings = []
        for key in self.config:
            if key in known_keys:
                continue
            matches = difflib.get_close_matches(key, known_keys, n=1)
            suggestion = f"Did you mean '{matches[0]}'?" if matches else ""
            msg = format_config_error(self.section, key, "Unknown option", suggestion)
            self.log.warning(msg)
            warnings.append(msg)
        return warnings

    def _check_type(self, field_def: ConfigField, value: Any) -> str | None:  # noqa: ANN401
        """Check that `value` matches the declared type, returns an error message if not."""
        expected = field_def.field_type if isinstance(field_def.field_type, tuple) else (field_def.field_type,)
        if bool in expected and isinstance(value, str) and value.lower() in BOOL_STRINGS:
            return None
        if isinstance(value, bool) and bool not in expected:
            ok = False
        elif float in expected and isinstance(value, int):
            ok = True
        else:
            ok = isinstance(value, expected)
        if ok:
            return None
        return format_config_error(
            self.section,
            field_def.name,
            f"Expected {field_def.type_name}, got {type(value).__name__}",
        )
