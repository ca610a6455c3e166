"""Execution lifecycle of a located command."""

from __future__ import annotations

from collections.abc import Sequence
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from ..hooks import EnvironmentHookArgs, HookName
from ..logging_setup import get_logger, log_context
from ..models import CommandCategory
from .models import CommandPreRun, NormalizedOptions
from .parsing import normalize_options, parse_argv

if TYPE_CHECKING:
    from ..manager import PlugCli
    from .command import Command

__all__ = ["CATEGORY_HOOKS", "CommandRunner", "RunState"]

# Hooks fired before and after `run`, per command category
CATEGORY_HOOKS: dict[CommandCategory, tuple[HookName | None, HookName | None]] = {
    CommandCategory.BUILD: (HookName.BUILD_BEFORE, HookName.BUILD_AFTER),
    CommandCategory.WATCH: (HookName.WATCH_BEFORE, None),
}


class RunState(StrEnum):
    """Steps of a command invocation."""

    CREATED = "created"
    VALIDATED = "validated"
    PRE_RUN = "pre-run"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class CommandRunner:
    """Runs one command invocation: validation, pre-run, hooks and run."""

    def __init__(self, env: PlugCli) -> None:
        self.env = env
        self.state = RunState.CREATED
        self.log = get_logger("runner")

    def _set_state(self, command: Command, state: RunState) -> None:
        self.log.debug("%s: %s -> %s", command.metadata.name, self.state, state)
        self.state = state

    async def run(self, command: Command, argv: Sequence[str]) -> int:
        """Parse `argv` against the command options, then execute it."""
        inputs, raw = parse_argv(argv, command.metadata.options)
        options = normalize_options(command.metadata.options, raw)
        return await self.execute(command, inputs, options)

    async def execute(self, command: Command, inputs: Sequence[str], options: NormalizedOptions) -> int:
        """Run the whole lifecycle of `command`.

        Returns:
            The exit code: the integer returned by the command or its
            pre-run step, 0 when they return None

        Raises:
            ValidationErrors: if the inputs are rejected
            HookListenerError: if a listener of the category hooks fails
        """
        with log_context(command.metadata.name):
            return await self._execute(command, inputs, options)

    async def _execute(self, command: Command, inputs: Sequence[str], options: NormalizedOptions) -> int:
        command.env = self.env
        inputs = list(inputs)
        await command.validate(inputs)
        self._set_state(command, RunState.VALIDATED)

        before, after = CATEGORY_HOOKS.get(command.metadata.category, (None, None))  # type: ignore[arg-type]
        hook_args = EnvironmentHookArgs(self.env)
        try:
            if isinstance(command, CommandPreRun):
                self._set_state(command, RunState.PRE_RUN)
                exit_code = await command.pre_run(inputs, options)
                if isinstance(exit_code, int):
                    self.log.debug("%s: pre-run exited with %d", command.metadata.name, exit_code)
                    return exit_code

            if before:
                await self.env.hooks.fire(before, hook_args)

            self._set_state(command, RunState.RUNNING)
            result: Any = await command.run(inputs, options)
        except Exception:
            self._set_state(command, RunState.FAILED)
            if after:
                try:
                    await self.env.hooks.fire(after, hook_args)
                except Exception:  # pylint: disable=broad-exception-caught
                    self.log.exception("%s failed after a failed run of %s", after, command.metadata.name)
            raise

        if after:
            await self.env.hooks.fire(after, hook_args)
        self._set_state(command, RunState.SUCCEEDED)
        return 0 if result is None else int(result)
