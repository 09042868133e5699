# Branchopt CLI Option Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines flow control signals used by branchopt.

Signals inherit from `FlowSignal`, a subclass of `BaseException`, so they pass
through `except Exception` blocks in command handlers and reach the program's
entry point untouched.

Signals:
- HelpSignal: Help was printed; the program should stop without running anything else.
"""


class FlowSignal(BaseException):
    """Base class for all flow control signals in branchopt.

    These are not errors. They report that the requested work was handled in an
    alternate way, for example by printing help instead of running a command.
    """


class HelpSignal(FlowSignal):
    """Raised after help output has been written."""

    def __init__(self, message: str = "Help called."):
        super().__init__(message)
