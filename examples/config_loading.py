"""config_loading.py"""
import asyncio
import sys

from branchopt import InterruptContext
from branchopt.config import loader
from branchopt.signals import HelpSignal

opt = loader("mytool.yaml")


async def main():
    remaining = opt.parse(sys.argv[1:])
    async with InterruptContext() as interrupt:
        try:
            await opt.dispatch(remaining, interrupt)
        except HelpSignal:
            pass


if __name__ == "__main__":
    asyncio.run(main())
