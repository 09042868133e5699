# Branchopt CLI Option Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines `GetOpt`, the public builder and entry point of branchopt.

A `GetOpt` wraps one node of a `ProgramTree`. The root instance declares the
program's options and commands; `new_command()` returns a `GetOpt` for the new
child node so commands can declare their own options and subcommands.

Typical use:

    opt = GetOpt("mytool")
    opt.bool("debug", aliases=["d"], description="Debug output")
    opt.string("profile", "default", env="MYTOOL_PROFILE", valid_values=["dev", "prod"])
    log = opt.new_command("log", "Show logs", command_fn=run_log)
    log.int_slice("lines", min_args=1, max_args=2)
    opt.help_command("help", description="Show help")

    remaining = opt.parse(sys.argv[1:])
    await opt.dispatch(remaining, context)

Parse flow:
- If `COMP_LINE` is present in the environment the call runs the shell
  completion protocol: candidates are written to the completion stream and the
  exit function is called with status 124.
- Otherwise the scanner walks the tree, environment variables fill in options
  that weren't given, required options are checked when the scan ended on the
  node `parse()` was called on, and unknown options are surfaced per the
  unknown mode. The leftover text of the final node is returned.

Dispatch flow:
- The help option prints help and raises `HelpSignal`.
- Required options of the final node are checked.
- The final node's command function is awaited with a `GetOpt` for that node.
"""
from __future__ import annotations

import re
from typing import Any, Awaitable, Callable, Iterable, Sequence, Union

from branchopt import text
from branchopt.diagnostics import COMPLETION_EXIT_CODE, Diagnostics
from branchopt.exceptions import (
    BranchoptError,
    ConversionError,
    MissingRequiredArgumentError,
    ParseError,
    UnknownOptionError,
)
from branchopt.help import HelpSection, help_output, render_help
from branchopt.logger import logger
from branchopt.parser.option import Option
from branchopt.parser.parser_types import (
    CompletionMode,
    NodeType,
    OptionType,
    ShortMode,
    UnknownMode,
)
from branchopt.parser.scanner import parse_cli_args
from branchopt.parser.tree import CompletionFn, ProgramTree, SynopsisArg
from branchopt.parser.utils import coerce_bool, coerce_float, coerce_int
from branchopt.signals import HelpSignal
from branchopt.utils import ensure_async, get_program_name

CommandFn = Callable[[Any, "GetOpt", list[str]], Union[Any, Awaitable[Any]]]

_ENV_TYPES = (
    OptionType.STRING,
    OptionType.INT,
    OptionType.FLOAT,
    OptionType.STRING_OPTIONAL,
    OptionType.INT_OPTIONAL,
    OptionType.FLOAT_OPTIONAL,
)

_WHITESPACE = re.compile(r"\s+")


class GetOpt:
    """
    Builder and parser facade over one `ProgramTree` node.

    Args:
        name (str | None): Program name. Defaults to the invoked script name.
        description (str): Program description used in help.
        diagnostics (Diagnostics | None): Output, environment and exit collaborators.
        node (ProgramTree | None): Wrap an existing node instead of creating a root.
    """

    def __init__(
        self,
        name: str | None = None,
        description: str = "",
        diagnostics: Diagnostics | None = None,
        *,
        node: ProgramTree | None = None,
    ) -> None:
        if node is None:
            node = ProgramTree(
                name or get_program_name(),
                NodeType.PROGRAM,
                description,
                diagnostics=diagnostics,
            )
        self.program_tree: ProgramTree = node
        self.final_node: ProgramTree | None = None

    @property
    def diagnostics(self) -> Diagnostics:
        return self.program_tree.diagnostics

    def __repr__(self) -> str:
        return f"GetOpt(node={self.program_tree.full_name!r})"

    # Option declaration

    def _declare(
        self,
        name: str,
        opt_type: OptionType,
        default: Any,
        *,
        aliases: Iterable[str] = (),
        description: str = "",
        required: bool | str = False,
        env: str = "",
        arg_name: str = "",
        valid_values: Iterable[str] = (),
        suggested_values: Iterable[str] = (),
        min_args: int = -1,
        max_args: int = -1,
    ) -> Option:
        valid_values = list(valid_values)
        option = Option(
            name,
            opt_type,
            default=default,
            min_args=min_args,
            max_args=max_args,
            is_required=bool(required),
            required_message=required if isinstance(required, str) else "",
            env_var=env,
            description=description,
            help_arg_name=arg_name,
            valid_values=valid_values,
            suggested_values=list(suggested_values) or list(valid_values),
        )
        self.program_tree.add_child_option(name, option)
        for alias in aliases:
            option.add_aliases(alias)
            self.program_tree.add_child_option(alias, option)
        return option

    def bool(self, name: str, default: bool = False, **kwargs) -> Option:
        """Flag. Calling it sets the opposite of the default."""
        return self._declare(name, OptionType.BOOL, default, **kwargs)

    def increment(self, name: str, default: int = 0, **kwargs) -> Option:
        """Counter, incremented on every occurrence, e.g. `-vvv` in bundling mode."""
        return self._declare(name, OptionType.INCREMENT, default, **kwargs)

    def string(self, name: str, default: str = "", **kwargs) -> Option:
        return self._declare(name, OptionType.STRING, default, **kwargs)

    def string_optional(self, name: str, default: str = "", **kwargs) -> Option:
        """String whose argument may be omitted, in which case the default is kept."""
        return self._declare(name, OptionType.STRING_OPTIONAL, default, **kwargs)

    def int(self, name: str, default: int = 0, **kwargs) -> Option:
        return self._declare(name, OptionType.INT, default, **kwargs)

    def int_optional(self, name: str, default: int = 0, **kwargs) -> Option:
        return self._declare(name, OptionType.INT_OPTIONAL, default, **kwargs)

    def float(self, name: str, default: float = 0.0, **kwargs) -> Option:
        return self._declare(name, OptionType.FLOAT, default, **kwargs)

    def float_optional(self, name: str, default: float = 0.0, **kwargs) -> Option:
        return self._declare(name, OptionType.FLOAT_OPTIONAL, default, **kwargs)

    def string_slice(
        self, name: str, min_args: int = 1, max_args: int = 1, **kwargs
    ) -> Option:
        """
        Repeatable string option.

        Every occurrence consumes between `min_args` and `max_args` arguments:
        `--opt a b --opt c` with max_args=2 stores `["a", "b", "c"]`.
        """
        return self._declare(
            name, OptionType.STRING_REPEAT, [], min_args=min_args, max_args=max_args, **kwargs
        )

    def int_slice(self, name: str, min_args: int = 1, max_args: int = 1, **kwargs) -> Option:
        """Repeatable int option. Accepts ascending ranges such as `1..3`."""
        return self._declare(
            name, OptionType.INT_REPEAT, [], min_args=min_args, max_args=max_args, **kwargs
        )

    def float_slice(
        self, name: str, min_args: int = 1, max_args: int = 1, **kwargs
    ) -> Option:
        return self._declare(
            name, OptionType.FLOAT_REPEAT, [], min_args=min_args, max_args=max_args, **kwargs
        )

    def string_map(self, name: str, min_args: int = 1, max_args: int = 1, **kwargs) -> Option:
        """Repeatable `key=value` option stored as a dict."""
        return self._declare(
            name, OptionType.STRING_MAP, {}, min_args=min_args, max_args=max_args, **kwargs
        )

    # Tree configuration

    def new_command(
        self,
        name: str,
        description: str = "",
        command_fn: CommandFn | None = None,
        skip_options_copy: bool = False,
    ) -> GetOpt:
        """
        Declare a child command and return a `GetOpt` wrapping it.

        The command inherits every option visible on this node unless
        `skip_options_copy` is set. When a help command was already configured,
        the new command gets its own help subcommand.
        """
        node = ProgramTree(name, NodeType.COMMAND, description, skip_options_copy=skip_options_copy)
        self.program_tree.add_child_command(name, node)
        node.command_fn = command_fn
        if node.help_command_name:
            _add_help_command(node, node.help_command_name)
        return GetOpt(node=node)

    def set_command_fn(self, fn: CommandFn) -> GetOpt:
        self.program_tree.command_fn = fn
        return self

    def help_command(
        self,
        name: str = "help",
        description: str = "",
        aliases: Iterable[str] = (),
    ) -> Option:
        """
        Declare a help option and a help command on this node and every command below it.

        `prog --help`, `prog cmd --help` and `prog help cmd` all print the help
        of the relevant command on dispatch.
        """
        option = self.bool(name, aliases=aliases, description=description)
        for node in list(self.program_tree.iter_nodes()):
            if node.is_help_command:
                continue
            node.help_command_name = name
            _add_help_command(node, name)
        return option

    def custom_completion(self, *values: str) -> GetOpt:
        """Static completion suggestions for the text arguments of this command."""
        self.program_tree.suggestions.extend(values)
        return self

    def custom_completion_fn(self, fn: CompletionFn) -> GetOpt:
        """Dynamic completion suggestions: `fn(completion_mode, partial) -> list[str]`."""
        self.program_tree.suggestion_fns.append(fn)
        return self

    def set_mode(self, mode: ShortMode | str) -> GetOpt:
        self.program_tree.mode = ShortMode(mode)
        return self

    def set_unknown_mode(self, mode: UnknownMode | str) -> GetOpt:
        self.program_tree.unknown_mode = UnknownMode(mode)
        return self

    def set_require_order(self, value: bool = True) -> GetOpt:
        """Stop parsing at the first token that is not an option or a command."""
        self.program_tree.require_order = value
        return self

    def set_map_keys_to_lower(self, value: bool = True) -> GetOpt:
        self.program_tree.map_keys_to_lower = value
        return self

    def set_windows_mode(self, value: bool = True) -> GetOpt:
        """Also accept `/opt` and `/opt:arg`."""
        self.program_tree.windows = value
        return self

    def help_synopsis_arg(self, arg: str, description: str = "") -> GetOpt:
        self.program_tree.synopsis_args.append(SynopsisArg(arg, description))
        return self

    # Parsing

    def parse(self, args: Sequence[str]) -> list[str]:
        """
        Parse `args` (without the program name) and return the leftover text.

        Raises:
            ParseError: On invalid user input. `UnknownOptionError` is only
                raised when the unknown mode is `fail`.
        """
        comp_line = self.diagnostics.getenv("COMP_LINE")
        if comp_line:
            self._run_completion(comp_line, args)
            return []

        node, _ = parse_cli_args(
            CompletionMode.NONE, self.program_tree, args, self.program_tree.mode
        )
        self.final_node = node
        logger.debug("Parse resolved to '%s'", node.full_name)

        self._apply_env(node)

        if node is self.program_tree:
            for option in node.options():
                option.check_required()

        self._surface_unknown(node)
        return node.child_text

    def _run_completion(self, comp_line: str, args: Sequence[str]) -> None:
        diagnostics = self.diagnostics
        parts = _WHITESPACE.split(comp_line)
        if parts and parts[-1] == "" and len(args) > 2 and args[1] != "":
            parts = parts[:-1]
        parts = parts[1:]
        completion_mode = (
            CompletionMode.ZSH if diagnostics.getenv("ZSHELL") else CompletionMode.BASH
        )
        logger.debug("COMP_LINE: '%s', parts: %s, args: %s", comp_line, parts, args)
        try:
            _, completions = parse_cli_args(completion_mode, self.program_tree, parts, ShortMode.NORMAL)
        except ParseError as error:
            diagnostics.error(f"\nERROR: {error}")
        else:
            diagnostics.write_completions(completions)
        diagnostics.exit_fn(COMPLETION_EXIT_CODE)

    def _apply_env(self, node: ProgramTree) -> None:
        for option in node.options():
            if option.called or not option.env_var:
                continue
            value = self.diagnostics.getenv(option.env_var)
            if not value:
                continue
            if option.opt_type == OptionType.BOOL:
                try:
                    option.value = coerce_bool(value)
                except ValueError:
                    logger.debug("Ignoring '%s=%s': not a boolean", option.env_var, value)
                    continue
                option.mark_called(option.env_var)
            elif option.opt_type in _ENV_TYPES:
                option.mark_called(option.env_var)
                option.save(value)
            logger.debug("Option '%s' set from env '%s'", option.name, option.env_var)

    def _surface_unknown(self, node: ProgramTree) -> None:
        path: list[ProgramTree] = []
        current: ProgramTree | None = node
        while current is not None:
            path.append(current)
            if current is self.program_tree:
                break
            current = current.parent
        for current in reversed(path):
            for option in current.unknown_options:
                if current.unknown_mode == UnknownMode.FAIL:
                    raise UnknownOptionError(
                        text.MESSAGE_ON_UNKNOWN.format(option=option.name),
                        option=option.name,
                    )
                if current.unknown_mode == UnknownMode.WARN:
                    self.diagnostics.warn(text.WARNING_ON_UNKNOWN.format(option=option.name))

    # Dispatch

    async def dispatch(self, remaining: list[str], context: Any = None) -> Any:
        """
        Run the command function of the node the last `parse()` resolved to.

        Raises:
            HelpSignal: Help was printed.
            MissingRequiredOptionError: A required option of the final node wasn't called.
            BranchoptError: The final node is a command without a command function.
        """
        node = self.final_node or self.program_tree
        help_option = node.find_option(node.help_command_name) if node.help_command_name else None
        if help_option is not None and help_option.called:
            render_help(node, self.diagnostics.console)
            raise HelpSignal()

        for option in node.options():
            option.check_required()

        if node.command_fn is not None:
            logger.debug("Dispatching '%s' with %s", node.full_name, remaining)
            command = GetOpt(node=node)
            command.final_node = node
            return await ensure_async(node.command_fn)(context, command, remaining)
        if node.parent is not None:
            raise BranchoptError(text.ERROR_NO_COMMAND_FN.format(command=node.name))
        render_help(node, self.diagnostics.console)
        return None

    # Accessors

    def _option(self, name: str) -> Option | None:
        if not name:
            return None
        return self.program_tree.find_option(name)

    def called(self, name: str) -> bool:
        """Whether the option was given on the command line or through its env var."""
        option = self._option(name)
        return option.called if option else False

    def called_as(self, name: str) -> str:
        """The alias (or env var name) last used to set the option."""
        option = self._option(name)
        return option.used_alias if option else ""

    def value(self, name: str) -> Any:
        """Current value of the option, `None` if it isn't declared."""
        option = self._option(name)
        return option.value if option else None

    def values(self) -> dict[str, Any]:
        """Canonical option name → value, for every option visible on this node."""
        return {option.name: option.value for option in self.program_tree.options()}

    def option(self, name: str) -> Option:
        option = self._option(name)
        if option is None:
            raise BranchoptError(f"option '{name}' is not defined in '{self.program_tree.full_name}'")
        return option

    def help(self, *sections: HelpSection) -> str:
        return help_output(self.final_node or self.program_tree, *sections)

    def render_help(self, *sections: HelpSection) -> None:
        render_help(self.final_node or self.program_tree, self.diagnostics.console, *sections)

    def get_required_arg(
        self, args: Sequence[str], *sections: HelpSection
    ) -> tuple[str, list[str]]:
        """
        Pop the first positional argument.

        When `args` is empty an error naming the next synopsis arg (see
        `help_synopsis_arg`) and the synopsis are printed.

        Raises:
            MissingRequiredArgumentError: If `args` is empty.
        """
        node = self.program_tree
        index = node.synopsis_args_index
        node.synopsis_args_index += 1
        if args:
            return args[0], list(args[1:])

        if index < len(node.synopsis_args):
            message = text.ERROR_MISSING_REQUIRED_NAMED_ARGUMENT.format(
                name=node.synopsis_args[index].arg
            )
        else:
            message = text.ERROR_MISSING_REQUIRED_ARGUMENT
        self.diagnostics.error(message)
        self.render_help(*(sections or (HelpSection.SYNOPSIS,)))
        raise MissingRequiredArgumentError(message)

    def get_required_arg_int(
        self, args: Sequence[str], *sections: HelpSection
    ) -> tuple[int, list[str]]:
        argument, rest = self.get_required_arg(args, *sections)
        try:
            return coerce_int(argument), rest
        except ValueError:
            raise ConversionError(
                text.ERROR_CONVERT_ARGUMENT_TO_INT.format(argument=argument),
                argument=argument,
            ) from None

    def get_required_arg_float(
        self, args: Sequence[str], *sections: HelpSection
    ) -> tuple[float, list[str]]:
        argument, rest = self.get_required_arg(args, *sections)
        try:
            return coerce_float(argument), rest
        except ValueError:
            raise ConversionError(
                text.ERROR_CONVERT_ARGUMENT_TO_FLOAT.format(argument=argument),
                argument=argument,
            ) from None


def _help_topics(node: ProgramTree) -> CompletionFn:
    def topics(_mode: CompletionMode, partial: str) -> list[str]:
        parent = node.parent
        if parent is None:
            return []
        return [
            name
            for name in parent.child_commands
            if name != node.name and name.startswith(partial)
        ]

    return topics


def _add_help_command(parent: ProgramTree, name: str) -> None:
    if name in parent.child_commands:
        return
    node = ProgramTree(name, NodeType.COMMAND, is_help_command=True)
    node.help_command_name = name
    parent.add_child_command(name, node)
    node.command_fn = _run_help
    node.synopsis_args.append(SynopsisArg("<topic>"))
    node.suggestion_fns.append(_help_topics(node))


def _run_help(_context: Any, opt: GetOpt, args: list[str]) -> None:
    node = opt.program_tree
    parent = node.parent or node
    console = opt.diagnostics.console
    if args:
        topic = parent.child_commands.get(args[0])
        if topic is None or topic is node:
            raise BranchoptError(text.ERROR_NO_HELP_TOPIC.format(topic=args[0]))
        render_help(topic, console)
        raise HelpSignal()
    render_help(parent, console)
    raise HelpSignal()
