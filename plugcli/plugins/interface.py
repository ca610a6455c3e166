"""Common plugin interface."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..config import Configuration
from ..logging_setup import get_logger
from ..validation import ConfigItems, ConfigValidator

if TYPE_CHECKING:
    from ..commands.namespace import Namespace
    from ..hooks import HookEngine
    from ..manager import PlugCli

__all__ = ["Plugin", "RootPlugin"]


class Plugin:
    """Base class for any plugcli plugin.

    A plugin module exposes an `Extension` class deriving from this one.
    """

    version: str = "0.0.0"
    " the plugin version, shown by `info` and `plugin list` "

    config_schema: ConfigItems | None = None
    " schema of the plugin configuration section, if any "

    config: Configuration
    " this plugin configuration section "

    env: PlugCli
    " the plugcli instance, set by the manager when loading "

    def __init__(self, name: str) -> None:
        "create a new plugin `name` and the matching logger"
        self.name = name
        """ the plugin name """
        self.log = get_logger(name)
        """ the logger to use for this plugin """
        self.config = Configuration({}, logger=self.log, schema=self.config_schema)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.name!r}>"

    # Functions to override

    async def init(self) -> None:
        """Called once the configuration is loaded."""

    async def exit(self) -> None:
        "empty exit function"

    def register_hooks(self, hooks: HookEngine) -> None:
        """Register the hook listeners of this plugin (none by default)."""

    # Generic implementations

    async def load_config(self, config: dict[str, Any]) -> None:
        "Loads the configuration section from the passed `config`"
        self.config = Configuration(config.get(self.name, {}), logger=self.log, schema=self.config_schema)

    def validate_config(self) -> list[str]:
        """Validate the configuration section against `config_schema`.

        Returns:
            The error messages (empty when valid or without schema)
        """
        if not self.config_schema:
            return []
        validator = ConfigValidator(self.config, self.name, self.log)
        errors = validator.validate(self.config_schema)
        validator.warn_unknown_keys(self.config_schema)
        return errors


class RootPlugin(Plugin):
    """A plugin providing the commands grafted under the root namespace.

    Only one root plugin may be loaded.
    """

    namespace: Namespace
    " the namespace whose children are grafted under the root "
