"""Sample plugin demonstrating plugcli plugin development.

Measures how long builds take:
- Listens to `build:before` and `build:after`
- Reports the last duration on `info`
- Uses configuration schema with typed accessors
"""

import time

from plugcli.hooks import EnvironmentHookArgs, HookEngine, HookName, InfoHookItem
from plugcli.plugins.interface import Plugin
from plugcli.validation import ConfigField, ConfigItems


class Extension(Plugin):
    """Time the builds."""

    version = "1.0.0"

    config_schema = ConfigItems(
        ConfigField("precision", int, default=2, description="Number of decimals of the reported duration"),
    )

    started: float | None = None
    last_duration: float | None = None

    def register_hooks(self, hooks: HookEngine) -> None:
        hooks.register(self.name, HookName.BUILD_BEFORE, self.on_build_before)
        hooks.register(self.name, HookName.BUILD_AFTER, self.on_build_after)
        hooks.register(self.name, HookName.INFO, self.on_info)

    async def on_build_before(self, _args: EnvironmentHookArgs) -> None:
        """Start the timer."""
        self.started = time.monotonic()

    async def on_build_after(self, _args: EnvironmentHookArgs) -> None:
        """Stop the timer."""
        if self.started is not None:
            self.last_duration = time.monotonic() - self.started
            self.started = None
            self.log.info("Build took %.*fs", self.config.get_int("precision"), self.last_duration)

    def on_info(self, _args: EnvironmentHookArgs) -> list[InfoHookItem]:
        """Report the last build duration."""
        if self.last_duration is None:
            return []
        return [InfoHookItem("build", "last build", f"{self.last_duration:.{self.config.get_int('precision')}f}s")]
