# Branchopt CLI Option Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""
The argument scanner: a single forward pass over the raw command line that
walks a `ProgramTree`.

`parse_cli_args()` moves a cursor over the tokens, resolving options against
the node it is currently positioned on, saving their arguments into the shared
`Option` descriptors, descending into child commands and collecting everything
else as plain text on the current node. It returns the node it finished on.

In completion mode the same loop is used, but when the cursor reaches the last
token (or immediately, for an empty command line) the scan stops and the
completion candidates for that token are returned instead.

Post scan work (environment fallback, required option checks, surfacing
unknown options) belongs to the caller, because only the caller knows whether
the returned node is the final one.
"""
from __future__ import annotations

from typing import Sequence

from branchopt import text
from branchopt.exceptions import (
    AmbiguousOptionError,
    ArgumentWithDashError,
    MissingArgumentError,
)
from branchopt.logger import logger
from branchopt.parser.completion import complete
from branchopt.parser.isoption import OptionPair, is_option
from branchopt.parser.iterator import ArgIterator
from branchopt.parser.option import Option
from branchopt.parser.parser_types import CompletionMode, OptionType, ShortMode, UnknownMode
from branchopt.parser.tree import ProgramTree
from branchopt.parser.utils import is_float, is_int_or_range


def resolve_option_name(node: ProgramTree, entry: str) -> list[str]:
    """
    Resolve an option name as typed on the command line against `node`.

    An exact alias match wins. Otherwise every alias that starts with `entry`
    is returned, sorted; the caller treats zero matches as unknown and more than
    one as ambiguous.
    """
    if entry in node.child_options:
        return [entry]
    return sorted(key for key in node.child_options if key.startswith(entry))


def store_remaining_as_text(iterator: ArgIterator, node: ProgramTree) -> None:
    """Append the current token and every token after it to `node.child_text`."""
    remaining = iterator.remaining()
    node.child_text.extend(remaining)
    while iterator.next():
        pass


def _accepts_extra(option: Option, value: str) -> bool:
    if option.opt_type == OptionType.INT_REPEAT:
        return is_int_or_range(value)
    if option.opt_type == OptionType.FLOAT_REPEAT:
        return is_float(value)
    if option.opt_type == OptionType.STRING_MAP:
        return "=" in value
    return True


def _consume_arguments(
    iterator: ArgIterator,
    option: Option,
    inline: int,
    mode: ShortMode,
    windows: bool,
) -> None:
    count = inline
    while count < option.min_args:
        upcoming = iterator.peek_next()
        if upcoming is None:
            if option.is_optional:
                return
            raise MissingArgumentError(
                text.ERROR_MISSING_ARGUMENT.format(option=option.used_alias),
                option=option.used_alias,
            )
        if is_option(upcoming, mode, windows)[1]:
            if option.is_optional:
                return
            raise ArgumentWithDashError(
                text.ERROR_ARGUMENT_WITH_DASH.format(option=option.used_alias),
                option=option.used_alias,
            )
        iterator.next()
        option.save(iterator.value)
        count += 1

    while count < option.max_args:
        upcoming = iterator.peek_next()
        if upcoming is None or is_option(upcoming, mode, windows)[1]:
            return
        if not _accepts_extra(option, upcoming):
            return
        iterator.next()
        option.save(iterator.value)
        count += 1


def _handle_unknown(
    iterator: ArgIterator, node: ProgramTree, pair: OptionPair
) -> bool:
    """Record an unknown option. Returns True when scanning must stop."""
    token = iterator.value
    node.unknown_options.append(
        Option(
            pair.option,
            OptionType.STRING_REPEAT,
            default=list(pair.args),
            unknown=True,
            verbatim=token,
        )
    )
    logger.debug("Unknown option '%s' on '%s'", pair.option, node.full_name)
    if node.require_order:
        store_remaining_as_text(iterator, node)
        return True
    if node.unknown_mode in (UnknownMode.WARN, UnknownMode.PASS):
        node.child_text.append(token)
    return False


def parse_cli_args(
    completion_mode: CompletionMode,
    tree: ProgramTree,
    args: Sequence[str] | None,
    mode: ShortMode = ShortMode.NORMAL,
) -> tuple[ProgramTree, list[str]]:
    """
    Scan `args` against `tree`.

    Args:
        completion_mode (CompletionMode): NONE for a regular parse.
        tree (ProgramTree): Root of the scan, usually the program node.
        args (Sequence[str]): Raw arguments, without the program name.
        mode (ShortMode): Interpretation of single dash tokens. A command that
            sets its own mode switches to it once the scan descends into it.

    Returns:
        tuple[ProgramTree, list[str]]: The node the scan finished on and the
        completion candidates (always empty outside completion mode).

    Raises:
        AmbiguousOptionError: An abbreviated option matches several aliases.
        MissingArgumentError: An option didn't receive its minimum arguments.
        ArgumentWithDashError: The argument following an option looks like an option.
        ConversionError, KeyValueError, InvalidValueError: From `Option.save()`.
    """
    args = list(args or [])
    completing = completion_mode != CompletionMode.NONE
    node = tree
    iterator = ArgIterator(args)
    logger.debug("Scanning %s (completion=%s, mode=%s)", args, completion_mode, mode)

    while iterator.next() or (completing and not args):
        if completing and (iterator.is_last() or not args):
            return node, complete(node, iterator.value, completion_mode)

        token = iterator.value
        if token == "--":
            if iterator.next():
                store_remaining_as_text(iterator, node)
            break

        windows = node.windows
        pairs, is_opt = is_option(token, mode, windows)
        if is_opt:
            stop = False
            for pair in pairs:
                matches = resolve_option_name(node, pair.option)
                if len(matches) > 1:
                    raise AmbiguousOptionError(
                        text.ERROR_AMBIGUOUS_ARGUMENT.format(token=token, matches=matches),
                        matches=matches,
                    )
                if not matches:
                    if _handle_unknown(iterator, node, pair):
                        stop = True
                        break
                    continue

                alias = matches[0]
                option = node.child_options[alias]
                option.mark_called(alias)
                option.map_keys_to_lower = node.map_keys_to_lower
                option.save(*pair.args)
                _consume_arguments(iterator, option, len(pair.args), mode, windows)
            if stop:
                break
            continue

        if token in node.child_commands:
            node = node.child_commands[token]
            if node.overrides("mode"):
                mode = node.mode
            logger.debug("Descending into '%s'", node.full_name)
            continue

        if node.require_order:
            store_remaining_as_text(iterator, node)
            break
        node.child_text.append(token)

    return node, []
