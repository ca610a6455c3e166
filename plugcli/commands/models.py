"""Data models for command handling."""

from __future__ import annotations

import weakref
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from ..models import CommandCategory, OptionType

if TYPE_CHECKING:
    from .namespace import Namespace

__all__ = [
    "CommandInput",
    "CommandMetadata",
    "CommandOption",
    "CommandPreRun",
    "HydratedCommandMetadata",
    "NormalizedOptions",
    "Validator",
]

# A validator returns True or an error message
Validator = Callable[[str | None, str], bool | str]

NormalizedOptions = dict[str, Any]

_TYPE_CHECKS: dict[OptionType, type] = {
    OptionType.STRING: str,
    OptionType.BOOLEAN: bool,
}


@dataclass(frozen=True)
class CommandOption:
    """A flag accepted by a command (`--name` or one of its aliases)."""

    name: str
    description: str = ""
    type: OptionType = OptionType.STRING
    default: str | bool | None = None
    aliases: tuple[str, ...] = ()
    private: bool = False
    visible: bool = True

    def __post_init__(self) -> None:
        if self.default is not None and not isinstance(self.default, _TYPE_CHECKS[self.type]):
            msg = f"Option {self.name}: default {self.default!r} is not a valid {self.type} value"
            raise TypeError(msg)


@dataclass(frozen=True)
class CommandInput:
    """A positional argument accepted by a command."""

    name: str
    description: str = ""
    validators: tuple[Validator, ...] = ()
    required: bool = False
    private: bool = False


@dataclass(frozen=True)
class CommandMetadata:
    """Static description of a command."""

    name: str
    description: str
    long_description: str = ""
    example_commands: tuple[str, ...] = ()
    inputs: tuple[CommandInput, ...] = ()
    options: tuple[CommandOption, ...] = ()
    aliases: tuple[str, ...] = ()
    category: CommandCategory | None = None
    visible: bool = True


@dataclass
class HydratedCommandMetadata:
    """Command metadata placed in the tree, as listed by help commands."""

    metadata: CommandMetadata
    full_name: str
    aliases: list[str] = field(default_factory=list)
    _namespace: weakref.ref[Namespace] | None = field(default=None, repr=False)

    @property
    def name(self) -> str:
        """The command name."""
        return self.metadata.name

    @property
    def namespace(self) -> Namespace | None:
        """The owning namespace, if still alive."""
        return self._namespace() if self._namespace else None


@runtime_checkable
class CommandPreRun(Protocol):
    """Commands with a step running before the category hooks.

    Returning an integer from `pre_run` ends the invocation with that exit code.
    """

    async def pre_run(self, inputs: list[str], options: NormalizedOptions) -> int | None:
        """Prepare the run, or exit early."""
