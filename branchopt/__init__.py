"""
Branchopt CLI Option Parser

Copyright (c) 2025 rtj.dev LLC.
Licensed under the MIT License. See LICENSE file for details.
"""

from .diagnostics import Diagnostics
from .getopt import GetOpt
from .help import HelpSection
from .interrupt import InterruptContext
from .parser.parser_types import OptionType, ShortMode, UnknownMode

__all__ = [
    "Diagnostics",
    "GetOpt",
    "HelpSection",
    "InterruptContext",
    "OptionType",
    "ShortMode",
    "UnknownMode",
]
