"""
Branchopt CLI Option Parser

Copyright (c) 2025 rtj.dev LLC.
Licensed under the MIT License. See LICENSE file for details.
"""

from .completion import complete
from .isoption import OptionPair, is_option
from .iterator import ArgIterator
from .option import Option
from .parser_types import CompletionMode, NodeType, OptionType, ShortMode, UnknownMode
from .scanner import parse_cli_args, resolve_option_name
from .tree import ProgramTree, SynopsisArg

__all__ = [
    "ArgIterator",
    "CompletionMode",
    "NodeType",
    "Option",
    "OptionPair",
    "OptionType",
    "ProgramTree",
    "ShortMode",
    "SynopsisArg",
    "UnknownMode",
    "complete",
    "is_option",
    "parse_cli_args",
    "resolve_option_name",
]
