# Branchopt CLI Option Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines all custom exception classes used by branchopt.

Errors are split in two families:

- Declaration errors describe a bug in the program that uses the library
  (duplicate option or alias, bad min/max arity, empty command name). They are
  raised immediately while the option tree is being declared and are not meant
  to be caught.
- Parse errors describe bad user input on the command line. They are raised by
  the scanner and by `GetOpt.parse()` and carry a human readable message; callers
  match on the class rather than on the message.

Exception Hierarchy:
- BranchoptError
    ├── DeclarationError
    └── ParseError
        ├── MissingArgumentError
        │   └── ArgumentWithDashError
        ├── ConversionError
        ├── KeyValueError
        ├── InvalidValueError
        ├── AmbiguousOptionError
        ├── UnknownOptionError
        ├── MissingRequiredOptionError
        └── MissingRequiredArgumentError

"Help was requested" is not an error; see `branchopt.signals.HelpSignal`.
"""


class BranchoptError(Exception):
    """Base exception for branchopt."""


class DeclarationError(BranchoptError):
    """Raised when the option/command tree is declared incorrectly."""


class ParseError(BranchoptError):
    """Raised when command line arguments can't be parsed."""


class MissingArgumentError(ParseError):
    """Raised when an option that expects an argument didn't get one."""

    def __init__(self, message: str, option: str = ""):
        super().__init__(message)
        self.option = option


class ArgumentWithDashError(MissingArgumentError):
    """Raised when the token following an option looks like another option."""


class ConversionError(ParseError):
    """Raised when an argument can't be converted to the option's type."""

    def __init__(self, message: str, option: str = "", argument: str = ""):
        super().__init__(message)
        self.option = option
        self.argument = argument


class KeyValueError(ParseError):
    """Raised when a map option argument is not of the form key=value."""


class InvalidValueError(ParseError):
    """Raised when an argument is not one of the option's valid values."""


class AmbiguousOptionError(ParseError):
    """Raised when an abbreviated option matches more than one option."""

    def __init__(self, message: str, matches: list[str] | None = None):
        super().__init__(message)
        self.matches = matches or []


class UnknownOptionError(ParseError):
    """Raised when an option is unknown and the unknown mode is `fail`."""

    def __init__(self, message: str, option: str = ""):
        super().__init__(message)
        self.option = option


class MissingRequiredOptionError(ParseError):
    """Raised when a required option was not called."""


class MissingRequiredArgumentError(ParseError):
    """Raised when a command handler didn't receive a required positional argument."""
