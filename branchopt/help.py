# Branchopt CLI Option Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Automated help for a `ProgramTree` node.

The help text is built as plain text, section by section, in the classic
man page layout:

    NAME:
        program log - Show logs

    SYNOPSIS:
        program log --level <string> [--debug] [--flag|-f] <command> [<args>]

    COMMANDS:
        sub-log    Sub log

    ARGUMENTS:
        <file>      File to read

    REQUIRED PARAMETERS:
        --level <string>    Log level

    OPTIONS:
        --debug             (default: false)

    Use 'program log help <command>' for extra details.

`help_output()` returns the text, `render_help()` prints it to a rich
`Console` with the section headers styled.
"""
from __future__ import annotations

from enum import Enum

from rich.console import Console
from rich.text import Text

from branchopt import text
from branchopt.parser.option import Option
from branchopt.parser.tree import ProgramTree, SynopsisArg

INDENTATION = 4
SYNOPSIS_WIDTH = 80


class HelpSection(Enum):
    """Portion of the help output to build."""

    DEFAULT_NAME = "default_name"
    NAME = "name"
    SYNOPSIS = "synopsis"
    COMMAND_LIST = "command_list"
    OPTION_LIST = "option_list"
    COMMAND_INFO = "command_info"


DEFAULT_SECTIONS = (
    HelpSection.DEFAULT_NAME,
    HelpSection.SYNOPSIS,
    HelpSection.COMMAND_LIST,
    HelpSection.OPTION_LIST,
    HelpSection.COMMAND_INFO,
)

HEADERS = {
    text.HELP_NAME_HEADER,
    text.HELP_SYNOPSIS_HEADER,
    text.HELP_COMMANDS_HEADER,
    text.HELP_ARGUMENTS_HEADER,
    text.HELP_REQUIRED_OPTIONS_HEADER,
    text.HELP_OPTIONS_HEADER,
}


def _indent(value: str) -> str:
    return " " * INDENTATION + value


def _split_required(options: list[Option]) -> tuple[list[Option], list[Option]]:
    required = sorted((o for o in options if o.is_required), key=lambda o: o.name)
    normal = sorted((o for o in options if not o.is_required), key=lambda o: o.name)
    return required, normal


def name_section(name: str, description: str) -> str:
    out = name
    if description:
        out += " - " + description.replace("\n", "\n" + " " * INDENTATION * 2)
    return f"{text.HELP_NAME_HEADER}:\n{_indent(out)}\n"


def _option_synopsis(option: Option) -> str:
    synopsis = option.synopsis.removesuffix("...")
    if option.opt_type.is_multi:
        if option.is_required:
            return f"<{synopsis}>..."
        return f"[{synopsis}]..."
    if option.is_required:
        return synopsis
    return f"[{synopsis}]"


def synopsis_section(
    name: str, args: list[SynopsisArg], options: list[Option], commands: list[str]
) -> str:
    """SYNOPSIS section, wrapped at 80 columns."""
    synopsis_name = _indent(name)
    continuation = " " * len(synopsis_name)
    required, normal = _split_required(options)

    lines: list[str] = []
    line = synopsis_name

    def add(item: str) -> None:
        nonlocal line
        if len(line) + len(item) > SYNOPSIS_WIDTH:
            lines.append(line)
            line = f"{continuation} {item}"
        else:
            line += f" {item}"

    for option in [*required, *normal]:
        add(_option_synopsis(option))

    tail = "<command> " if commands else ""
    if args:
        tail += " ".join(arg.arg for arg in args)
    else:
        tail += "[<args>]"
    add(tail)
    lines.append(line)
    return f"{text.HELP_SYNOPSIS_HEADER}:\n" + "\n".join(lines) + "\n"


def command_list_section(commands: dict[str, str]) -> str:
    if not commands:
        return ""
    width = max(len(name) for name in commands)
    out = ""
    for name in sorted(commands):
        description = commands[name].replace(
            "\n", "\n    " + _indent(" " * width)
        )
        out += _indent(f"{name:<{width}}    {description}\n")
    return f"{text.HELP_COMMANDS_HEADER}:\n{out}"


def _option_help(option: Option, width: int) -> str:
    factor = width + 4
    padding = " " * factor
    synopsis = option.synopsis
    if not option.is_required or option.description or option.env_var:
        synopsis = f"{synopsis:<{factor}}"
    out = _indent(synopsis)
    if option.description:
        out += option.description.replace("\n", "\n    " + padding)
    if not option.is_required:
        if option.description:
            out += " "
        out += f"(default: {option.default_str}"
        if option.env_var:
            out += f", env: {option.env_var}"
        out += ")"
    elif option.env_var:
        if option.description:
            out += " "
        out += f"(env: {option.env_var})"
    return out + "\n\n"


def _arg_help(arg: SynopsisArg, width: int) -> str:
    factor = width + 4
    name = f"{arg.arg:<{factor}}" if arg.description else arg.arg
    out = _indent(name)
    if arg.description:
        out += arg.description.replace("\n", "\n    " + " " * factor)
    return out + "\n\n"


def option_list_section(args: list[SynopsisArg], options: list[Option]) -> str:
    """ARGUMENTS, REQUIRED PARAMETERS and OPTIONS sections."""
    width = max((len(option.synopsis) for option in options), default=0)
    required, normal = _split_required(options)
    out = ""

    described = [arg for arg in args if arg.arg and arg.description]
    if described:
        width = max(width, *(len(arg.arg) for arg in args))
        out += f"{text.HELP_ARGUMENTS_HEADER}:\n"
        out += "".join(_arg_help(arg, width) for arg in args)
    if required:
        out += f"{text.HELP_REQUIRED_OPTIONS_HEADER}:\n"
        out += "".join(_option_help(option, width) for option in required)
    if normal:
        out += f"{text.HELP_OPTIONS_HEADER}:\n"
        out += "".join(_option_help(option, width) for option in normal)
    return out


def _visible_commands(node: ProgramTree) -> dict[str, str]:
    return {
        name: command.description
        for name, command in node.child_commands.items()
        if name != node.help_command_name
    }


def help_output(node: ProgramTree, *sections: HelpSection) -> str:
    """
    Build the help text for `node`.

    Args:
        node (ProgramTree): Node to describe, usually the final node of a parse.
        *sections (HelpSection): Sections to include, in order. Defaults to all.
    """
    sections = sections or DEFAULT_SECTIONS
    name = node.full_name
    options = node.options()
    out = ""
    for section in sections:
        if section == HelpSection.DEFAULT_NAME:
            if node.parent is not None or node.description:
                out += name_section(name, node.description) + "\n"
        elif section == HelpSection.NAME:
            out += name_section(name, node.description) + "\n"
        elif section == HelpSection.SYNOPSIS:
            out += synopsis_section(
                name, node.synopsis_args, options, sorted(_visible_commands(node))
            )
            out += "\n"
        elif section == HelpSection.COMMAND_LIST:
            commands = command_list_section(_visible_commands(node))
            if commands:
                out += commands + "\n"
        elif section == HelpSection.OPTION_LIST:
            out += option_list_section(node.synopsis_args, options)
        elif section == HelpSection.COMMAND_INFO:
            # the help command itself is always one of the children
            if node.help_command_name and len(node.child_commands) > 1:
                out += (
                    text.MESSAGE_HELP_COMMAND_INFO.format(
                        program=name, help=node.help_command_name
                    )
                    + "\n"
                )
    return out


def render_help(node: ProgramTree, console: Console, *sections: HelpSection) -> None:
    """Print the help text for `node` to `console`, styling the section headers."""
    output = Text()
    for line in help_output(node, *sections).splitlines(keepends=True):
        if line.rstrip("\n").rstrip(":") in HEADERS and line.rstrip("\n").endswith(":"):
            output.append(line, style="help.header")
        else:
            output.append(line)
    console.print(output, end="", soft_wrap=True)
