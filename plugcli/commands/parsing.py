"""Argv parsing and option normalization.

Parsing happens after a command is located, against that command's
declared options. Flags the command doesn't declare are kept as parsed.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from typing import Any

from ..config import coerce_to_bool
from ..models import OptionType
from .models import CommandOption, NormalizedOptions

__all__ = ["normalize_options", "parse_argv"]

_NUMBER_PATTERN = re.compile(r"^-\d+(\.\d+)?$")

_MISSING = object()


def _is_flag(token: str) -> bool:
    """Tell whether `token` is a flag (negative numbers are inputs)."""
    return token.startswith("-") and len(token) > 1 and not _NUMBER_PATTERN.match(token)


def _option_lookup(options: Iterable[CommandOption]) -> dict[str, CommandOption]:
    """Map every option name and alias to its option."""
    lookup: dict[str, CommandOption] = {}
    for option in options:
        lookup[option.name] = option
        for alias in option.aliases:
            lookup[alias] = option
    return lookup


def parse_argv(argv: Sequence[str], options: Iterable[CommandOption] = ()) -> tuple[list[str], dict[str, Any]]:
    """Split argv tokens into positional inputs and raw options.

    Supports `--name`, `--name=value`, `--no-name`, `-n`, `-n value`,
    bundled short flags (`-abc`) and `--` to end flag parsing. A declared
    string option consumes the following token as its value; booleans and
    unknown flags never consume a token.

    Args:
        argv: The tokens following the command name
        options: The options declared by the command

    Returns:
        (inputs, raw options keyed as typed, aliases included)
    """
    lookup = _option_lookup(options)
    tokens = list(argv)
    inputs: list[str] = []
    raw: dict[str, Any] = {}

    i = 0
    while i < len(tokens):
        token = tokens[i]
        i += 1
        if token == "--":
            inputs.extend(tokens[i:])
            break
        if not _is_flag(token):
            inputs.append(token)
            continue

        body = token[2:] if token.startswith("--") else token[1:]
        if "=" in body:
            key, value = body.split("=", 1)
            option = lookup.get(key)
            raw[key] = coerce_to_bool(value) if option and option.type == OptionType.BOOLEAN else value
            continue

        if not token.startswith("--") and len(body) > 1:
            for pos, letter in enumerate(body):
                option = lookup.get(letter)
                if option is None or option.type == OptionType.BOOLEAN:
                    raw[letter] = True
                    continue
                # a string option takes the rest of the token (-p8200), or the next one (-bp 8200)
                rest = body[pos + 1 :]
                if rest:
                    raw[letter] = rest
                elif i < len(tokens) and not _is_flag(tokens[i]):
                    raw[letter] = tokens[i]
                    i += 1
                else:
                    raw[letter] = ""
                break
            continue

        option = lookup.get(body)
        if option is None and body.startswith("no-"):
            raw[body[3:]] = False
        elif option is None or option.type == OptionType.BOOLEAN:
            raw[body] = True
        elif i < len(tokens) and not _is_flag(tokens[i]):
            raw[body] = tokens[i]
            i += 1
        else:
            raw[body] = ""

    return inputs, raw


def _coerce(option: CommandOption, value: Any) -> str | bool | None:  # noqa: ANN401
    """Coerce a raw value to the option type."""
    if option.type == OptionType.BOOLEAN:
        return coerce_to_bool(value, default=False)
    if value is None or value is False:
        return None
    if value is True:
        return ""
    return str(value)


def normalize_options(options: Iterable[CommandOption], raw: dict[str, Any]) -> NormalizedOptions:
    """Resolve raw options to canonical option names.

    For every declared option, the value of the last alias present wins over
    the canonical key, aliases are removed, the default applies when neither
    is present and the value is coerced to the declared type. Unknown keys
    are passed through. Normalizing twice gives the same result.
    """
    normalized = dict(raw)
    for option in options:
        value = normalized.pop(option.name, _MISSING)
        for alias in option.aliases:
            if alias in normalized:
                value = normalized.pop(alias)
        normalized[option.name] = _coerce(option, option.default if value is _MISSING else value)
    return normalized
