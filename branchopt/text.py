# Branchopt CLI Option Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""
User facing message templates.

Every message shown to an end user (errors, warnings and help headers) is
defined here so programs can patch them for localisation in one place.
Templates use `str.format` fields.
"""

ERROR_AMBIGUOUS_ARGUMENT = "Ambiguous option '{token}', matches {matches}"
ERROR_MISSING_ARGUMENT = "Missing argument for option '{option}'!"
ERROR_ARGUMENT_WITH_DASH = (
    "Missing argument for option '{option}'!\n"
    "If passing arguments that start with '-' use --option=-argument"
)
ERROR_CONVERT_TO_INT = (
    "Argument error for option '{option}': Can't convert string to int: '{argument}'"
)
ERROR_CONVERT_TO_FLOAT = (
    "Argument error for option '{option}': Can't convert string to float: '{argument}'"
)
ERROR_INVALID_INT_RANGE = (
    "Argument error for option '{option}': Invalid integer range: '{argument}'"
)
ERROR_ARGUMENT_IS_NOT_KEY_VALUE = (
    "Argument error for option '{option}': Should be of type 'key=value'!"
)
ERROR_INVALID_VALUE = (
    "wrong value for option '{option}', valid values are {valid_values}"
)
ERROR_MISSING_REQUIRED_OPTION = "Missing required parameter '{option}'"
ERROR_MISSING_REQUIRED_ARGUMENT = "ERROR: Missing required argument"
ERROR_MISSING_REQUIRED_NAMED_ARGUMENT = "ERROR: Missing required argument: {name}"
ERROR_CONVERT_ARGUMENT_TO_INT = "Argument error: Can't convert string to int: '{argument}'"
ERROR_CONVERT_ARGUMENT_TO_FLOAT = (
    "Argument error: Can't convert string to float: '{argument}'"
)
ERROR_NO_COMMAND_FN = "command '{command}' has no defined command function"
ERROR_NO_HELP_TOPIC = "no help topic for '{topic}'"

MESSAGE_ON_UNKNOWN = "Unknown option '{option}'"
WARNING_ON_UNKNOWN = "WARNING: Unknown option '{option}'"
MESSAGE_ON_INTERRUPT = "Interrupt signal received"
MESSAGE_HELP_COMMAND_INFO = "Use '{program} {help} <command>' for extra details."

HELP_NAME_HEADER = "NAME"
HELP_SYNOPSIS_HEADER = "SYNOPSIS"
HELP_COMMANDS_HEADER = "COMMANDS"
HELP_ARGUMENTS_HEADER = "ARGUMENTS"
HELP_REQUIRED_OPTIONS_HEADER = "REQUIRED PARAMETERS"
HELP_OPTIONS_HEADER = "OPTIONS"
