# Branchopt CLI Option Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines `ProgramTree`, the recursive node structure that represents a program
and its nested commands.

Each node owns:
- `child_commands`: command name → child node.
- `child_options`: alias → `Option`. Every alias of an option is its own key and
  all of them point at the same descriptor instance.
- `child_text`: tokens classified as plain arguments while the scanner was
  positioned on this node.
- `unknown_options`: descriptors synthesized for option-looking tokens that
  matched nothing, kept in order so their text can be replayed.

Option propagation:
An option declared on a node is registered, under all of its alias keys and as
the same descriptor, in every descendant that exists at declaration time, and a
command declared later receives every option visible on its parent. Help command
nodes and nodes created with `skip_options_copy` are excluded. As a consequence an
alias denotes the same option at every depth it is visible from, and declaring
a colliding alias anywhere along that path is a `DeclarationError`.

Settings (`mode`, `unknown_mode`, `require_order`, `map_keys_to_lower`,
`windows`) are read from the node if set there, otherwise from the closest
ancestor that sets them.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Iterator

from rich.tree import Tree

from branchopt.diagnostics import Diagnostics
from branchopt.exceptions import BranchoptError, DeclarationError
from branchopt.logger import logger
from branchopt.parser.option import Option
from branchopt.parser.parser_types import (
    CompletionMode,
    NodeType,
    ShortMode,
    UnknownMode,
)

if TYPE_CHECKING:
    from branchopt.getopt import CommandFn

CompletionFn = Callable[[CompletionMode, str], list[str]]

_DEFAULTS: dict[str, Any] = {
    "mode": ShortMode.NORMAL,
    "unknown_mode": UnknownMode.FAIL,
    "require_order": False,
    "map_keys_to_lower": False,
    "windows": False,
}


@dataclass
class SynopsisArg:
    """A named positional argument shown in help output."""

    arg: str
    description: str = ""


class ProgramTree:
    """
    A node of the program tree: the program itself or one of its commands.

    Args:
        name (str): Command name, or the program name for the root.
        node_type (NodeType): Kind of node.
        description (str): Help description.
        is_help_command (bool): This node is the built-in help command.
        skip_options_copy (bool): Don't inherit options from the parent.
        diagnostics (Diagnostics | None): Output/environment collaborators, root only.
    """

    def __init__(
        self,
        name: str,
        node_type: NodeType = NodeType.COMMAND,
        description: str = "",
        is_help_command: bool = False,
        skip_options_copy: bool = False,
        diagnostics: Diagnostics | None = None,
    ) -> None:
        self.name: str = name
        self.node_type: NodeType = node_type
        self.description: str = description
        self.parent: ProgramTree | None = None
        self.level: int = 0
        self.child_commands: dict[str, ProgramTree] = {}
        self.child_options: dict[str, Option] = {}
        self.child_text: list[str] = []
        self.unknown_options: list[Option] = []
        self.command_fn: CommandFn | None = None
        self.help_command_name: str = ""
        self.is_help_command: bool = is_help_command
        self.skip_options_copy: bool = skip_options_copy
        self.synopsis_args: list[SynopsisArg] = []
        self.synopsis_args_index: int = 0
        self.suggestions: list[str] = []
        self.suggestion_fns: list[CompletionFn] = []
        self._settings: dict[str, Any] = {}
        self._diagnostics: Diagnostics | None = diagnostics

    def _setting(self, key: str) -> Any:
        node: ProgramTree | None = self
        while node is not None:
            if key in node._settings:
                return node._settings[key]
            node = node.parent
        return _DEFAULTS[key]

    def overrides(self, key: str) -> bool:
        """Whether `key` is set on this node rather than inherited."""
        return key in self._settings

    @property
    def mode(self) -> ShortMode:
        return self._setting("mode")

    @mode.setter
    def mode(self, mode: ShortMode | str) -> None:
        self._settings["mode"] = ShortMode(mode)

    @property
    def unknown_mode(self) -> UnknownMode:
        return self._setting("unknown_mode")

    @unknown_mode.setter
    def unknown_mode(self, mode: UnknownMode | str) -> None:
        self._settings["unknown_mode"] = UnknownMode(mode)

    @property
    def require_order(self) -> bool:
        return self._setting("require_order")

    @require_order.setter
    def require_order(self, value: bool) -> None:
        self._settings["require_order"] = value

    @property
    def map_keys_to_lower(self) -> bool:
        return self._setting("map_keys_to_lower")

    @map_keys_to_lower.setter
    def map_keys_to_lower(self, value: bool) -> None:
        self._settings["map_keys_to_lower"] = value

    @property
    def windows(self) -> bool:
        return self._setting("windows")

    @windows.setter
    def windows(self, value: bool) -> None:
        self._settings["windows"] = value

    @property
    def root(self) -> ProgramTree:
        node = self
        while node.parent is not None:
            node = node.parent
        return node

    @property
    def diagnostics(self) -> Diagnostics:
        root = self.root
        if root._diagnostics is None:
            root._diagnostics = Diagnostics()
        return root._diagnostics

    @property
    def full_name(self) -> str:
        """Names from the root down to this node, e.g. `program log sub-log`."""
        if self.parent is not None:
            return f"{self.parent.full_name} {self.name}"
        return self.name

    def _option_targets(self) -> Iterator[ProgramTree]:
        """Descendants that inherit options declared on this node."""
        for command in self.child_commands.values():
            if command.is_help_command or command.skip_options_copy:
                continue
            yield command
            yield from command._option_targets()

    def _check_inherit(self, key: str, option: Option, nodes: list[ProgramTree]) -> None:
        for node in nodes:
            existing = node.child_options.get(key)
            if existing is not None and existing is not option:
                raise DeclarationError(
                    f"Option/Alias '{key}' is already defined in option "
                    f"'{existing.name}' in command '{node.full_name}'"
                )

    def add_child_option(self, key: str, option: Option) -> None:
        """
        Register `option` under `key` on this node and its descendants.

        Raises:
            DeclarationError: Empty key, key already defined on this node or bound
                to a different option in a descendant, or invalid min/max arity.
        """
        if not key:
            raise DeclarationError("Option/Alias name can't be empty")
        if key in self.child_options:
            existing = self.child_options[key]
            raise DeclarationError(
                f"Option/Alias '{key}' is already defined in option '{existing.name}'"
            )
        option.validate_min_max()

        targets = list(self._option_targets())
        self._check_inherit(key, option, targets)
        self.child_options[key] = option
        for node in targets:
            node.child_options[key] = option
        logger.debug(
            "Option '%s' registered as '%s' on '%s' (+%d descendants)",
            option.name,
            key,
            self.full_name,
            len(targets),
        )

    def add_child_command(self, name: str, command: ProgramTree) -> None:
        """
        Attach `command` as a child of this node and copy the visible options into it.

        Raises:
            DeclarationError: Empty or duplicate command name, or an inherited
                option collides with an alias already declared under `command`.
        """
        if not name:
            raise DeclarationError("Command name can't be empty")
        if name in self.child_commands:
            raise DeclarationError(
                f"Command '{name}' is already defined in command '{self.full_name}'"
            )

        targets: list[ProgramTree] = []
        if not (command.is_help_command or command.skip_options_copy):
            targets = [command, *command._option_targets()]
            for key, option in self.child_options.items():
                self._check_inherit(key, option, targets)

        command.parent = self
        command.level = self.level + 1
        if not command.help_command_name:
            command.help_command_name = self.help_command_name
        for key, option in self.child_options.items():
            for node in targets:
                node.child_options[key] = option
        self.child_commands[name] = command
        logger.debug("Command '%s' added to '%s'", name, self.full_name)

    def get_node(self, *path: str) -> ProgramTree:
        """
        Walk down the tree following command names.

        Raises:
            BranchoptError: If a command in the path doesn't exist.
        """
        node = self
        for name in path:
            if name not in node.child_commands:
                raise BranchoptError(f"command '{name}' not found in '{node.full_name}'")
            node = node.child_commands[name]
        return node

    def iter_nodes(self) -> Iterator[ProgramTree]:
        """This node and all of its descendants, depth first."""
        yield self
        for command in self.child_commands.values():
            yield from command.iter_nodes()

    def options(self) -> list[Option]:
        """Unique options visible on this node, in declaration order."""
        seen: dict[int, Option] = {}
        for option in self.child_options.values():
            seen.setdefault(id(option), option)
        return list(seen.values())

    def find_option(self, name: str) -> Option | None:
        return self.child_options.get(name)

    def reset(self) -> None:
        """Clear parse state on every node and option of this subtree."""
        for node in self.iter_nodes():
            node.child_text = []
            node.unknown_options = []
            node.synopsis_args_index = 0
            for option in node.options():
                option.reset()

    def describe(self) -> dict[str, Any]:
        """Plain data view of the subtree, keyed and sorted for comparisons."""
        return {
            "name": self.name,
            "parent": self.parent.name if self.parent else "",
            "type": self.node_type.value,
            "child_text": list(self.child_text),
            "child_options": {
                key: {
                    "aliases": list(option.aliases),
                    "value": option.value,
                    "used_alias": option.used_alias,
                    "called": option.called,
                }
                for key, option in sorted(self.child_options.items())
            },
            "child_commands": {
                name: command.describe()
                for name, command in sorted(self.child_commands.items())
            },
        }

    def to_rich_tree(self, tree: Tree | None = None) -> Tree:
        """Render the subtree as a rich `Tree` for debugging."""
        label = f"[help.command]{self.name}[/] [dim]({self.node_type.value})[/]"
        branch = tree.add(label) if tree is not None else Tree(label)
        for option in self.options():
            state = "[green]called[/]" if option.called else "[dim]not called[/]"
            branch.add(
                f"[help.option]{'|'.join(option.aliases)}[/] = {option.value!r} {state}"
            )
        if self.child_text:
            branch.add(f"[dim]text:[/] {self.child_text!r}")
        for command in self.child_commands.values():
            command.to_rich_tree(branch)
        return branch

    def __repr__(self) -> str:
        return (
            f"ProgramTree(name={self.name!r}, type={self.node_type.value}, "
            f"level={self.level}, commands={sorted(self.child_commands)}, "
            f"options={sorted(self.child_options)})"
        )
