# Branchopt CLI Option Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines `Diagnostics`, the bundle of process-facing collaborators used by `GetOpt`.

Instead of module level writers and exit hooks, every program tree carries one
`Diagnostics` object on its root node. It decides where help, warnings and
completion candidates are written, how the environment is read, and how the
completion protocol terminates the process. Tests swap any of them out.
"""
from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from typing import Any, Callable, TextIO

from rich.console import Console

from branchopt.console import console, error_console

COMPLETION_EXIT_CODE = 124


def _stdout() -> TextIO:
    return sys.stdout


@dataclass
class Diagnostics:
    """
    Output, environment and exit collaborators for one program tree.

    Attributes:
        console (Console): Help output.
        error_console (Console): Warnings and completion errors.
        completion_stream (Callable[[], TextIO]): Where completion candidates go.
        env (Callable[[str], str | None]): Environment variable lookup.
        exit_fn (Callable[[int], Any]): Called to end the completion protocol.
    """

    console: Console = field(default_factory=lambda: console)
    error_console: Console = field(default_factory=lambda: error_console)
    completion_stream: Callable[[], TextIO] = _stdout
    env: Callable[[str], str | None] = os.environ.get
    exit_fn: Callable[[int], Any] = sys.exit

    def getenv(self, name: str) -> str:
        return self.env(name) or ""

    def warn(self, message: str) -> None:
        self.error_console.print(message, style="warning", markup=False, highlight=False)

    def error(self, message: str) -> None:
        self.error_console.print(message, markup=False, highlight=False, soft_wrap=True)

    def write_completions(self, completions: list[str]) -> None:
        stream = self.completion_stream()
        stream.write("\n".join(completions) + "\n")
        stream.flush()
