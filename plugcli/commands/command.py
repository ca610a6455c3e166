"""Base class of every command."""

from __future__ import annotations

import weakref
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, ClassVar

from .models import CommandMetadata, CommandPreRun, NormalizedOptions
from .runner import CommandRunner
from .validators import validate_inputs

if TYPE_CHECKING:
    from ..manager import PlugCli
    from .namespace import Namespace

__all__ = ["Command", "CommandPreRun"]


class Command:
    """A runnable command.

    Subclasses set `metadata` and implement `run`. They may also define
    `pre_run` (see `CommandPreRun`).
    """

    metadata: ClassVar[CommandMetadata]
    env: PlugCli
    " the plugcli instance, set before the command runs "

    _namespace: weakref.ref[Namespace] | None = None

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.metadata.name!r}>"

    @property
    def namespace(self) -> Namespace | None:
        """The namespace this command was loaded from."""
        return self._namespace() if self._namespace else None

    def attach(self, namespace: Namespace) -> None:
        """Record the owning namespace (weak reference)."""
        self._namespace = weakref.ref(namespace)

    async def validate(self, inputs: Sequence[str]) -> None:
        """Check the positional inputs, raises `ValidationErrors` on failure."""
        validate_inputs(inputs, self.metadata)

    async def run(self, inputs: list[str], options: NormalizedOptions) -> Any:  # noqa: ANN401
        """Run the command, returning None or an exit code."""
        raise NotImplementedError

    async def execute(self, inputs: Sequence[str], options: NormalizedOptions) -> int:
        """Run the whole lifecycle (validation, hooks, run) with already parsed arguments."""
        return await CommandRunner(self.env).execute(self, inputs, options)
