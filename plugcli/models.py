"""Common types: exit codes, command enums and the error taxonomy."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum, StrEnum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .commands.namespace import Namespace

__all__ = [
    "APIFormatError",
    "APIRequestError",
    "APIResponseError",
    "CommandCategory",
    "CommandNotFound",
    "ConfigError",
    "ExitCode",
    "ExitCodeError",
    "HookListenerError",
    "InputValidationError",
    "OptionType",
    "PageFetchError",
    "PlugCliError",
    "PluginLoadError",
    "ValidationErrors",
]


class ExitCode(IntEnum):
    """Standard exit codes for the plugcli client."""

    SUCCESS = 0
    USAGE_ERROR = 1  # No command provided, unknown command
    VALIDATION_ERROR = 2  # Command inputs rejected
    CONFIG_ERROR = 3  # Unreadable configuration, plugin failed to load
    COMMAND_ERROR = 4  # Command execution failed


class OptionType(StrEnum):
    """Declared type of a command option."""

    STRING = "string"
    BOOLEAN = "boolean"


class CommandCategory(StrEnum):
    """Static command category, selects the hooks fired around `run`."""

    BUILD = "build"
    WATCH = "watch"


class PlugCliError(Exception):
    """Base class for plugcli errors."""


class ConfigError(PlugCliError):
    """The configuration can't be read."""


class PluginLoadError(PlugCliError):
    """A plugin listed in the configuration failed to load."""

    def __init__(self, name: str, message: str = "") -> None:
        self.name = name
        super().__init__(f"Error loading plugin {name}: {message}" if message else f"Error loading plugin {name}")


class CommandNotFound(PlugCliError):
    """No command matched the given tokens.

    This is a control signal: the caller shows the help of `namespace`.
    """

    def __init__(self, consumed: int, remaining: list[str], namespace: Namespace) -> None:
        self.consumed = consumed
        self.remaining = remaining
        self.namespace = namespace
        if remaining:
            msg = f'Unknown command "{remaining[0]}"'
        else:
            msg = "No command given"
        super().__init__(msg)


@dataclass(frozen=True)
class InputValidationError:
    """A single rejected command input."""

    input_name: str
    message: str


class ValidationErrors(PlugCliError):
    """One or more command inputs were rejected."""

    def __init__(self, errors: list[InputValidationError]) -> None:
        self.errors = errors
        super().__init__("; ".join(f"{e.input_name}: {e.message}" for e in errors))


class ExitCodeError(PlugCliError):
    """Raised by a command to fail with a specific exit code."""

    def __init__(self, message: str, exit_code: int = ExitCode.COMMAND_ERROR) -> None:
        self.exit_code = exit_code
        super().__init__(message)


class HookListenerError(PlugCliError):
    """A hook listener raised while the hook was fired."""

    def __init__(self, hook: str, source: str) -> None:
        self.hook = hook
        self.source = source
        super().__init__(f"Listener from {source} failed on {hook}")


class PageFetchError(PlugCliError):
    """Fetching a page failed (network or transport error)."""

    def __init__(self, page: int) -> None:
        self.page = page
        super().__init__(f"Unable to fetch page {page}")


class APIRequestError(PlugCliError):
    """The HTTP request couldn't be completed."""


class APIFormatError(PlugCliError):
    """The API answered with an unrecognized body."""

    def __init__(self, message: str, body: Any = None) -> None:  # noqa: ANN401
        self.body = body
        super().__init__(message)


class APIResponseError(PlugCliError):
    """The API answered with an error body."""

    def __init__(self, status: int, error: dict[str, Any]) -> None:
        self.status = status
        self.error = error
        super().__init__(f"API error {status}: {error.get('message', 'unknown error')}")
