"""Configuration schema of the `[plugcli]` section.

This module is separate to allow manager.py to import the schema
without circular import issues.
"""

from ...constants import DEFAULT_API_HOST, DEFAULT_PAGE_SIZE, DEFAULT_TIMEOUT
from ...validation import ConfigField, ConfigItems

PLUGCLI_CONFIG_SCHEMA = ConfigItems(
    ConfigField("plugins", list, default=[], description="Plugins to load, module paths or names under plugcli.plugins"),
    ConfigField("plugins_paths", list, default=[], description="Additional paths to search for third-party plugins"),
    ConfigField("include", list, description="Additional config files or folders to include"),
    ConfigField("api_host", str, default=DEFAULT_API_HOST, description="Base URL of the API"),
    ConfigField("api_token", str, default="", description="Token sent as a bearer authorization"),
    ConfigField("page_size", int, default=DEFAULT_PAGE_SIZE, description="Number of items per API page"),
    ConfigField("timeout", (int, float), default=DEFAULT_TIMEOUT, description="HTTP requests timeout, in seconds"),
    ConfigField("colored_output", bool, default=True, description="Use colors in help output (terminals only)"),
)
