# Branchopt CLI Option Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines `InterruptContext`, a cancellation scope for long running command functions.

While the context is active SIGINT, SIGHUP and SIGTERM no longer raise
`KeyboardInterrupt` or kill the process. Instead the `cancelled` event is set
so the command function can wind down cleanly, and a message is printed.

    async def main():
        async with InterruptContext() as interrupt:
            remaining = opt.parse(sys.argv[1:])
            await opt.dispatch(remaining, interrupt)

    async def run_fetch(interrupt, opt, args):
        while not interrupt.cancelled.is_set():
            ...

Leaving the context cancels the scope, waits for the listener to finish and
restores the default signal handling.
"""
from __future__ import annotations

import asyncio
import signal

from branchopt import text
from branchopt.diagnostics import Diagnostics
from branchopt.logger import logger

DEFAULT_SIGNALS: tuple[signal.Signals, ...] = tuple(
    getattr(signal, name)
    for name in ("SIGINT", "SIGHUP", "SIGTERM")
    if hasattr(signal, name)
)


class InterruptContext:
    """
    Async context manager that turns termination signals into a cancellation event.

    Attributes:
        cancelled (asyncio.Event): Set when a signal arrives or `cancel()` is called.
        received (signal.Signals | None): The signal that cancelled the scope, if any.
    """

    def __init__(
        self,
        diagnostics: Diagnostics | None = None,
        signals: tuple[signal.Signals, ...] = DEFAULT_SIGNALS,
    ) -> None:
        self.diagnostics = diagnostics or Diagnostics()
        self.signals = signals
        self.cancelled = asyncio.Event()
        self.received: signal.Signals | None = None
        self._done = asyncio.Event()
        self._installed: list[signal.Signals] = []
        self._listener: asyncio.Task | None = None
        self._loop: asyncio.AbstractEventLoop | None = None

    def _on_signal(self, signum: signal.Signals) -> None:
        self.received = signum
        self.cancelled.set()

    async def _listen(self) -> None:
        try:
            await self.cancelled.wait()
            if self.received is not None:
                logger.debug("Received signal %s", self.received.name)
                self.diagnostics.error(f"\n{text.MESSAGE_ON_INTERRUPT}")
        finally:
            self._restore()
            self._done.set()

    def _restore(self) -> None:
        if self._loop is None:
            return
        for signum in self._installed:
            self._loop.remove_signal_handler(signum)
        self._installed.clear()

    def cancel(self) -> None:
        """Cancel the scope without a signal."""
        self.cancelled.set()

    async def wait_done(self) -> None:
        """Wait until the listener has finished and signal handling is restored."""
        await self._done.wait()

    async def __aenter__(self) -> InterruptContext:
        self._loop = asyncio.get_running_loop()
        for signum in self.signals:
            try:
                self._loop.add_signal_handler(signum, self._on_signal, signum)
            except NotImplementedError:
                logger.debug("Signal handlers not supported for %s on this loop", signum)
                continue
            self._installed.append(signum)
        self._listener = asyncio.create_task(self._listen())
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.cancel()
        await self.wait_done()
