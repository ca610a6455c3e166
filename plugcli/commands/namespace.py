"""The namespace tree: nested groups of lazily loaded commands.

A namespace owns its children through its `namespaces` and `commands` maps.
Children only keep a weak reference back to their parent namespace.
"""

from __future__ import annotations

import weakref
from collections.abc import Iterable, Mapping, Sequence
from typing import TYPE_CHECKING, Any, Union

from ..constants import ROOT_NAMESPACE
from ..logging_setup import get_logger
from ..models import CommandNotFound
from .maps import CommandMap, NamespaceMap
from .models import HydratedCommandMetadata
from .runner import CommandRunner

if TYPE_CHECKING:
    from ..manager import PlugCli
    from .command import Command

__all__ = ["Namespace", "RootNamespace", "split_colon_syntax"]

LocateResult = tuple[int, list[str], Union["Command", "Namespace"]]


def split_colon_syntax(argv: Sequence[str]) -> list[str]:
    """Expand `a:b` in the first token into `a b`.

    Eg:
        split_colon_syntax(["plugin:list", "--json"]) == ["plugin", "list", "--json"]
    """
    tokens = list(argv)
    if tokens and ":" in tokens[0] and not tokens[0].startswith("-"):
        return [part for part in tokens[0].split(":") if part] + tokens[1:]
    return tokens


class Namespace:
    """A named group of sub-namespaces and commands.

    Subclasses may set `name` and `description` as class attributes.
    """

    name: str = ""
    description: str = ""
    root: bool = False

    def __init__(
        self,
        name: str | None = None,
        description: str | None = None,
        *,
        namespaces: Mapping[str, Any] | Iterable[tuple[str, Any]] = (),
        commands: Mapping[str, Any] | Iterable[tuple[str, Any]] = (),
    ) -> None:
        if name is not None:
            self.name = name
        if description is not None:
            self.description = description
        self.namespaces = NamespaceMap(namespaces)
        self.commands = CommandMap(commands)
        self._parent: weakref.ref[Namespace] | None = None

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.name!r}>"

    @property
    def parent(self) -> Namespace | None:
        """The parent namespace, None for the root or a detached namespace."""
        return self._parent() if self._parent else None

    def attach(self, parent: Namespace) -> None:
        """Record `parent` as the (non-owning) parent of this namespace."""
        self._parent = weakref.ref(parent)

    def path(self) -> list[str]:
        """Names from the top namespace down to this one, the root excluded."""
        names: list[str] = []
        node: Namespace | None = self
        while node is not None and not node.root:
            names.insert(0, node.name)
            node = node.parent
        return names

    def add_command(self, name: str, loader: Any, aliases: Iterable[str] = ()) -> None:  # noqa: ANN401
        """Add a command loader and its aliases."""
        self.commands[name] = loader
        for alias in aliases:
            self.commands[alias] = name

    async def load_namespace(self, name: str) -> Namespace | None:
        """Load the child namespace called `name` (exact match only)."""
        cell = self.namespaces.get(name)
        if cell is None:
            return None
        namespace = await cell.get()
        namespace.attach(self)
        return namespace

    async def load_command(self, name: str) -> Command | None:
        """Load the command called `name`, following one level of alias."""
        entry = self.commands.get(name)
        cell = self.commands.resolve_aliases(name) if isinstance(entry, str) else entry
        if cell is None:
            return None
        command = await cell.get()
        command.attach(self)
        return command

    async def locate(self, argv: Sequence[str]) -> LocateResult:
        """Resolve argv tokens to a command, or to the deepest namespace reached.

        Tokens are consumed left to right. A namespace name descends into it,
        a command name (or alias) ends the lookup. The first token matching
        neither stops the lookup on the current namespace.

        Returns:
            (consumed token count, remaining tokens, command or namespace)
        """
        tokens = list(argv)
        current: Namespace = self
        depth = 0
        while depth < len(tokens):
            token = tokens[depth]
            child = await current.load_namespace(token)
            if child is not None:
                current = child
                depth += 1
                continue
            command = await current.load_command(token)
            if command is not None:
                return depth + 1, tokens[depth + 1 :], command
            break
        return depth, tokens[depth:], current

    async def get_command_metadata_list(self) -> list[HydratedCommandMetadata]:
        """Load the whole subtree and return the metadata of every command.

        Full names are the dot-joined namespace names from the top namespace
        (the root excluded) down to the command.
        """
        result: list[HydratedCommandMetadata] = []

        async def _walk(namespace: Namespace, path: list[str]) -> None:
            aliases = namespace.commands.get_aliases()
            for name, entry in list(namespace.commands.items()):
                if isinstance(entry, str):
                    continue
                command = await entry.get()
                command.attach(namespace)
                all_aliases = list(aliases.get(name, []))
                all_aliases += [a for a in command.metadata.aliases if a not in all_aliases]
                result.append(
                    HydratedCommandMetadata(
                        metadata=command.metadata,
                        full_name=".".join([*path, name]),
                        aliases=all_aliases,
                        _namespace=weakref.ref(namespace),
                    )
                )
            for name in list(namespace.namespaces):
                child = await namespace.load_namespace(name)
                assert child is not None
                await _walk(child, [*path, name])

        await _walk(self, self.path())
        return result


class RootNamespace(Namespace):
    """The top of the tree, plugins graft their namespaces under it."""

    name = ROOT_NAMESPACE
    root = True

    def __init__(
        self,
        description: str = "",
        *,
        namespaces: Mapping[str, Any] | Iterable[tuple[str, Any]] = (),
        commands: Mapping[str, Any] | Iterable[tuple[str, Any]] = (),
    ) -> None:
        super().__init__(ROOT_NAMESPACE, description, namespaces=namespaces, commands=commands)
        self.log = get_logger("namespace")

    def graft(self, namespace: Namespace) -> None:
        """Insert the children of `namespace` under the root.

        Raises:
            ValueError: if a name is already taken
        """
        for name, cell in namespace.namespaces.items():
            if name in self.namespaces:
                msg = f"Namespace {name!r} is already defined"
                raise ValueError(msg)
            self.namespaces[name] = cell
        # canonical entries first so aliases find their targets
        entries = sorted(namespace.commands.items(), key=lambda item: isinstance(item[1], str))
        for name, entry in entries:
            if name in self.commands:
                msg = f"Command {name!r} is already defined"
                raise ValueError(msg)
            self.commands[name] = entry
        if namespace.description and not self.description:
            self.description = namespace.description
        self.log.debug("Grafted %d namespace(s) and %d command(s)", len(namespace.namespaces), len(namespace.commands))

    async def run_command(self, env: PlugCli, argv: Sequence[str]) -> int:
        """Resolve `argv` and run the command it designates.

        Returns:
            The command exit code

        Raises:
            CommandNotFound: if the tokens stop on a namespace
        """
        consumed, remaining, target = await self.locate(split_colon_syntax(argv))
        if isinstance(target, Namespace):
            raise CommandNotFound(consumed, remaining, target)
        self.log.debug("Located %s after %d token(s)", target.metadata.name, consumed)
        return await CommandRunner(env).run(target, remaining)
