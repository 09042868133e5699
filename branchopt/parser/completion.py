# Branchopt CLI Option Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Shell completion candidates for a partially typed token.

`complete()` is called by the scanner when it reaches the last token of a
completion request, but it only reads the node it is given so it can be used
(and tested) on its own, e.g. by the interactive prompt_toolkit completer.

Dash prefixed partials complete option names:
    "--f"          → ["--f", "--flag", "--fleg"]      (bool options, `f` alias)
    "--profile"    → ["--profile=", "--profile=dev", ...]
    "--profile=d"  → ["dev"] (bash) / ["--profile=dev"] (zsh)
    "/f"           → same as "--f" when the node is in windows mode

Anything else completes command names and node suggestions:
    "h"            → ["help "] (bash, single result gets a trailing space)
"""
from __future__ import annotations

from typing import TYPE_CHECKING

from branchopt.parser.option import Option
from branchopt.parser.parser_types import CompletionMode, OptionType

if TYPE_CHECKING:
    from branchopt.parser.tree import ProgramTree


def _complete_options(
    node: ProgramTree, partial: str, completion_mode: CompletionMode
) -> list[str]:
    completions: list[str] = []
    last_option: Option | None = None
    if partial.startswith("/"):
        partial_option = partial[1:]
        typed = f"--{partial_option}"
    else:
        partial_option = partial.removeprefix("-").removeprefix("-")
        typed = partial

    for key, option in node.child_options.items():
        if key == "-":
            if partial == "-":
                completions.append(key)
            continue
        if key.startswith(partial_option):
            last_option = option
            if option.opt_type == OptionType.BOOL:
                completions.append(f"--{key}")
            else:
                completions.append(f"--{key}=")
        if partial_option.startswith(f"{key}=") and option.suggested_values:
            last_option = option
            for value in option.suggested_values:
                candidate = f"--{key}={value}"
                if not candidate.startswith(typed):
                    continue
                if completion_mode == CompletionMode.BASH:
                    completions.append(candidate.split("=", 1)[1])
                else:
                    completions.append(candidate)

    completions.sort()
    if len(completions) == 1 and completions[0].endswith("=") and last_option:
        if last_option.suggested_values:
            completions.extend(completions[0] + value for value in last_option.suggested_values)
        else:
            completions.append(f"{completions[0]}<{last_option.help_arg_name or 'value'}>")
        completions.sort()
    return completions


def complete(
    node: ProgramTree, partial: str, completion_mode: CompletionMode = CompletionMode.BASH
) -> list[str]:
    """
    Return sorted completion candidates for `partial` on `node`.

    Args:
        node (ProgramTree): Node the scanner is positioned on.
        partial (str): The token being completed, possibly empty.
        completion_mode (CompletionMode): Shell flavour of the output.
    """
    if partial.startswith("-") or (node.windows and partial.startswith("/")):
        return _complete_options(node, partial, completion_mode)

    completions = [name for name in node.child_commands if name.startswith(partial)]
    completions.extend(value for value in node.suggestions if value.startswith(partial))
    for suggestion_fn in node.suggestion_fns:
        completions.extend(
            value for value in suggestion_fn(completion_mode, partial) if value.startswith(partial)
        )

    completions.sort()
    if len(completions) == 1 and completion_mode == CompletionMode.BASH:
        completions[0] += " "
    return completions
