# Branchopt CLI Option Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Provides `BranchoptCompleter`, a Prompt Toolkit completer backed by a `GetOpt` tree.

The completer runs the same completion pass that answers shell completion
requests, so an interactive prompt (a REPL, a `prompt_toolkit` session)
offers exactly what `<TAB>` offers in bash or zsh:

- Command and subcommand names
- Option names (`--flag`, `--profile=`) and their suggested values
- Custom completions registered with `custom_completion()` and
  `custom_completion_fn()`

    session = PromptSession(completer=BranchoptCompleter(opt))
    line = await session.prompt_async("> ")
"""

from __future__ import annotations

import os
import shlex
from typing import TYPE_CHECKING, Iterable

from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document

from branchopt.exceptions import ParseError
from branchopt.logger import logger
from branchopt.parser.parser_types import CompletionMode, ShortMode
from branchopt.parser.scanner import parse_cli_args

if TYPE_CHECKING:
    from branchopt.getopt import GetOpt


class BranchoptCompleter(Completer):
    """
    Prompt Toolkit completer for command lines described by a `GetOpt` tree.

    Args:
        getopt (GetOpt): The program (or command) whose tree drives completion.
    """

    def __init__(self, getopt: GetOpt):
        self.getopt = getopt

    def suggest(self, tokens: list[str]) -> list[str]:
        """
        Completion candidates for the last of `tokens`.

        The tree's parse state is reset before and after the pass so completing
        never leaves options marked as called.
        """
        tree = self.getopt.program_tree
        tree.reset()
        try:
            _, completions = parse_cli_args(
                CompletionMode.ZSH, tree, tokens, ShortMode.NORMAL
            )
        finally:
            tree.reset()
        return [completion for completion in completions if "=<" not in completion]

    def get_completions(self, document: Document, complete_event) -> Iterable[Completion]:
        """
        Compute completions for the text before the cursor.

        Args:
            document (Document): The current Prompt Toolkit document.
            complete_event: The triggering event, unused.

        Yields:
            Completion: One or more completions matching the current stub text.
        """
        text = document.text_before_cursor
        try:
            tokens = shlex.split(text)
        except ValueError:
            return
        cursor_at_end_of_token = not text or text.endswith((" ", "\t"))
        if cursor_at_end_of_token:
            tokens.append("")
        stub = tokens[-1]

        try:
            suggestions = self.suggest(tokens)
        except ParseError as error:
            logger.debug("No completions for '%s': %s", text, error)
            return
        yield from self._yield_lcp_completions(suggestions, stub)

    def _ensure_quote(self, text: str) -> str:
        """Quote a suggestion that contains whitespace."""
        if " " in text or "\t" in text:
            return f'"{text}"'
        return text

    def _yield_lcp_completions(self, suggestions: list[str], stub: str):
        """
        Yield completions for the current stub using longest-common-prefix logic.

        - A single match is yielded fully.
        - Several matches sharing a prefix longer than the stub yield the prefix
          first, followed by every match.
        - Otherwise every match is listed.
        """
        matches = [s for s in suggestions if s.startswith(stub)]
        if not matches:
            return

        lcp = os.path.commonprefix(matches)

        if len(matches) == 1:
            yield Completion(
                self._ensure_quote(matches[0]),
                start_position=-len(stub),
                display=matches[0],
            )
            return
        if len(lcp) > len(stub) and not lcp.startswith("-"):
            yield Completion(lcp, start_position=-len(stub), display=lcp)
        for match in matches:
            yield Completion(
                self._ensure_quote(match), start_position=-len(stub), display=match
            )
