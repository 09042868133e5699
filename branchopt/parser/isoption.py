# Branchopt CLI Option Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Token classification for the branchopt scanner.

`is_option()` decides whether a single command line token is an option and, if
so, decomposes it into `OptionPair`s of option name and inline argument. It has
no knowledge of which options are declared; resolving names against the tree
is the scanner's job.

Examples (mode in parentheses):
    "--opt=arg"   (any)          → [("opt", ["arg"])]
    "-opt=arg"    (normal)       → [("opt", ["arg"])]
    "-opt=arg"    (bundling)     → [("o", []), ("p", []), ("t", ["arg"])]
    "-opt=arg"    (single dash)  → [("o", ["pt=arg"])]
    "-"           (any)          → [("-", [])], option
    "--"          (any)          → [("--", [])], not an option (terminator)
    "/opt:arg"    (windows)      → [("opt", ["arg"])]
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field

from branchopt.parser.parser_types import ShortMode

# 1: leading dashes, 2: option, 3: =arg
IS_OPTION_REGEX = re.compile(r"(--?)([^=]+)(.*)", re.DOTALL)

# 1: leading dashes or /, 2: option, 3: =arg or :arg
IS_OPTION_REGEX_WINDOWS = re.compile(r"(--?|/)([^=:]+)(.*)", re.DOTALL)


@dataclass
class OptionPair:
    """An option name and the arguments that were given inline with it."""

    option: str
    args: list[str] = field(default_factory=list)


def _strip_separator(suffix: str) -> str:
    if suffix.startswith(("=", ":")):
        return suffix[1:]
    return ""


def _single_pair(name: str, suffix: str) -> list[OptionPair]:
    arg = _strip_separator(suffix)
    return [OptionPair(name, [arg] if arg else [])]


def is_option(
    token: str, mode: ShortMode = ShortMode.NORMAL, windows: bool = False
) -> tuple[list[OptionPair], bool]:
    """
    Check if the given token is an option.

    Args:
        token (str): A single raw command line argument.
        mode (ShortMode): Interpretation of single dash tokens.
        windows (bool): Also accept `/` as option prefix and `:` as argument separator.

    Returns:
        tuple[list[OptionPair], bool]: The decomposed pairs and whether the token
        is an option. The terminator `--` returns a pair but `False`; the caller
        is responsible for handling it.
    """
    if token == "--":
        return [OptionPair("--")], False
    if token == "-":
        return [OptionPair("-")], True

    regex = IS_OPTION_REGEX_WINDOWS if windows else IS_OPTION_REGEX
    match = regex.fullmatch(token)
    if not match:
        return [], False

    prefix, name, suffix = match.groups()
    if prefix in ("--", "/"):
        return _single_pair(name, suffix), True

    if mode == ShortMode.BUNDLING:
        pairs = [OptionPair(char) for char in name]
        arg = _strip_separator(suffix)
        if arg:
            pairs[-1].args = [arg]
        return pairs, True

    if mode == ShortMode.SINGLE_DASH:
        pair = OptionPair(name[0])
        if len(name) > 1 or suffix:
            pair.args = [name[1:] + suffix]
        return [pair], True

    return _single_pair(name, suffix), True
