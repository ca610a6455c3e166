"""plugcli - a pluggable command line client."""

from __future__ import annotations

import asyncio
import sys

from .ansi import should_colorize
from .commands.help import get_namespace_help
from .logging_setup import get_logger, init_logger
from .manager import PlugCli
from .models import (
    CommandNotFound,
    ConfigError,
    ExitCode,
    ExitCodeError,
    PlugCliError,
    PluginLoadError,
    ValidationErrors,
)

__all__ = ["main", "run_client", "use_param"]


def use_param(txt: str, argv: list[str] | None = None) -> str:
    """Check if parameter `txt` is in argv (sys.argv by default).

    if found, removes it from argv & returns the argument value
    """
    if argv is None:
        argv = sys.argv
    v = ""
    if txt in argv:
        i = argv.index(txt)
        v = argv[i + 1] if i + 1 < len(argv) else ""
        del argv[i : i + 2]
    return v


async def run_client(argv: list[str], config_filename: str = "") -> int:
    """Load plugcli and run the command designated by `argv`.

    Returns:
        The exit code
    """
    log = get_logger()
    manager = PlugCli()
    if argv and argv[0] in {"--help", "-h"}:
        argv = ["help", *argv[1:]]

    try:
        await manager.initialize(config_filename)
    except (ConfigError, PluginLoadError) as e:
        log.critical("%s", e)
        await manager.exit_plugins()
        return ExitCode.CONFIG_ERROR

    try:
        return await manager.run_command(argv)
    except CommandNotFound as e:
        if e.remaining:
            log.error("%s", e)
        print(await get_namespace_help(e.namespace, colored=manager.settings.get_bool("colored_output", True) and should_colorize(sys.stdout)))
        return ExitCode.USAGE_ERROR
    except ValidationErrors as e:
        for error in e.errors:
            log.error("%s: %s", error.input_name, error.message)
        return ExitCode.VALIDATION_ERROR
    except ExitCodeError as e:
        log.error("%s", e)
        return e.exit_code
    except PlugCliError as e:
        log.error("Command failed: %s", e)
        return ExitCode.COMMAND_ERROR
    finally:
        await manager.exit_plugins()


def main() -> None:
    """Run the command."""
    debug_flag = use_param("--debug")
    if debug_flag:
        init_logger(filename=debug_flag, force_debug=True)
    else:
        init_logger()
    log = get_logger("startup")

    config_override = use_param("--config")

    try:
        exit_code = asyncio.run(run_client(sys.argv[1:], config_override))
    except KeyboardInterrupt:
        print("Interrupted")
        exit_code = ExitCode.COMMAND_ERROR
    except Exception:  # pylint: disable=W0718
        log.critical("Unhandled exception:", exc_info=True)
        exit_code = ExitCode.COMMAND_ERROR
    sys.exit(int(exit_code))


if __name__ == "__main__":
    main()
