#!/usr/bin/env python
"""An interactive prompt that completes mytool command lines."""
import asyncio
import shlex

from prompt_toolkit import PromptSession

from branchopt import InterruptContext
from branchopt.completer import BranchoptCompleter
from branchopt.exceptions import BranchoptError
from branchopt.signals import HelpSignal
from branchopt.utils import setup_logging

from mytool import build

setup_logging()


async def main():
    session = PromptSession(completer=BranchoptCompleter(build()))
    while True:
        try:
            line = await session.prompt_async("mytool> ")
        except (EOFError, KeyboardInterrupt):
            return
        if not line.strip():
            continue
        opt = build()
        try:
            remaining = opt.parse(shlex.split(line))
            async with InterruptContext() as interrupt:
                await opt.dispatch(remaining, interrupt)
        except HelpSignal:
            continue
        except BranchoptError as error:
            opt.diagnostics.error(f"ERROR: {error}")


asyncio.run(main())
