#!/usr/bin/env python
"""
mytool: a small program showing commands, inherited options, env fallback,
help and shell completion.

Enable completion in bash with:

    complete -o default -C ./examples/mytool.py mytool.py
"""
import asyncio
import logging
import sys

from branchopt import GetOpt, InterruptContext
from branchopt.exceptions import BranchoptError, MissingRequiredArgumentError
from branchopt.signals import HelpSignal
from branchopt.utils import setup_logging


async def run_log(interrupt, opt, args):
    lines = opt.value("lines") or [10]
    for line in range(lines[0]):
        if interrupt.cancelled.is_set():
            break
        print(f"[{opt.value('profile')}] log line {line} {' '.join(args)}")
        await asyncio.sleep(0.1)


def run_show(_interrupt, opt, args):
    target, _ = opt.get_required_arg(args)
    print(f"Showing {target} with labels {opt.value('label')}")


def build() -> GetOpt:
    opt = GetOpt("mytool", "Example program built with branchopt")
    opt.bool("debug", aliases=["d"], description="Enable debug logging")
    opt.string(
        "profile",
        "dev",
        env="MYTOOL_PROFILE",
        valid_values=["dev", "staging", "production"],
        description="Profile to use",
    )

    log = opt.new_command("log", "Show logs", command_fn=run_log)
    log.int_slice("lines", max_args=2, description="Number of lines, e.g. --lines 5")
    log.string("level", arg_name="level", suggested_values=["info", "warning", "error"])

    show = opt.new_command("show", "Show a resource", command_fn=run_show)
    show.string_map("label", aliases=["l"], description="Label filter, key=value")
    show.help_synopsis_arg("<target>", "Resource to show")
    show.custom_completion("instances", "volumes", "networks")

    opt.help_command("help", description="Show help")
    return opt


async def main() -> int:
    opt = build()
    try:
        remaining = opt.parse(sys.argv[1:])
        if opt.called("debug"):
            setup_logging(console_log_level=logging.DEBUG)
        async with InterruptContext() as interrupt:
            await opt.dispatch(remaining, interrupt)
    except HelpSignal:
        return 0
    except MissingRequiredArgumentError:
        return 1
    except BranchoptError as error:
        opt.diagnostics.error(f"ERROR: {error}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
