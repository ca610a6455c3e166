"""Validators for command inputs.

A validator takes the input value (None when absent) and the input name and
returns True, or an error message.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

from ..models import InputValidationError, ValidationErrors
from .models import CommandMetadata, Validator

__all__ = ["contains", "email", "numeric", "required", "validate_inputs"]

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def required(value: str | None, key: str = "") -> bool | str:
    """Reject missing or empty values."""
    if value is None or not value.strip():
        return f"{key or 'value'} is required"
    return True


def email(value: str | None, key: str = "") -> bool | str:
    """Reject values that don't look like an email address. Missing values pass."""
    if not value:
        return True
    if _EMAIL_PATTERN.match(value):
        return True
    return f"Invalid email address for {key}: {value}" if key else f"Invalid email address: {value}"


def numeric(value: str | None, key: str = "") -> bool | str:
    """Reject non-numeric values. Missing values pass."""
    if not value:
        return True
    try:
        float(value)
    except ValueError:
        return f"{key or 'value'} must be numeric, got {value!r}"
    return True


def contains(choices: Sequence[str]) -> Validator:
    """Build a validator accepting only one of `choices`. Missing values pass."""

    def _contains(value: str | None, key: str = "") -> bool | str:
        if not value or value in choices:
            return True
        return f"{key or 'value'} must be one of: {', '.join(choices)}"

    return _contains


def validate_inputs(inputs: Sequence[str], metadata: CommandMetadata) -> None:
    """Run the validators of every declared input.

    Validators of an input run in order and stop at the first failure.
    Required inputs are checked by `required` first. Every input is checked
    and all the failures are reported together.

    Raises:
        ValidationErrors: if at least one input is rejected
    """
    errors: list[InputValidationError] = []
    for index, slot in enumerate(metadata.inputs):
        value = inputs[index] if index < len(inputs) else None
        validators = list(slot.validators)
        if slot.required and required not in validators:
            validators.insert(0, required)
        for validator in validators:
            result = validator(value, slot.name)
            if result is not True:
                errors.append(InputValidationError(slot.name, str(result) if result else f"Invalid {slot.name}"))
                break
    if errors:
        raise ValidationErrors(errors)
