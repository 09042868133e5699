# Branchopt CLI Option Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines the `Option` dataclass, the descriptor for one declared command line option.

An `Option` is created by the `GetOpt` builder with its default value and is
then mutated by the scanner during a parse pass: it is marked as called,
records the alias that matched, and accumulates converted values through
`save()`.

The same `Option` instance is registered in a `ProgramTree` node once per
alias and is shared with every descendant command node, so state recorded while
the scanner is positioned on a parent is visible from the resolved child node.

Key Attributes:
- `name` / `aliases`: Canonical name and every string usable on the command line.
- `opt_type`: `OptionType` tag; drives arity defaults and conversion.
- `min_args` / `max_args`: Tokens consumed per occurrence for repeat and map types.
- `value`: Current value (scalar, list or dict depending on the type).
- `called` / `used_alias`: Parse state.
- `unknown` / `verbatim`: Markers for descriptors synthesized for unknown options.
"""
from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any

from branchopt import text
from branchopt.exceptions import (
    ConversionError,
    DeclarationError,
    InvalidValueError,
    KeyValueError,
    MissingRequiredOptionError,
)
from branchopt.logger import logger
from branchopt.parser.parser_types import OptionType
from branchopt.parser.utils import coerce_float, coerce_int, expand_int_range

_ARITY: dict[OptionType, tuple[int, int]] = {
    OptionType.BOOL: (0, 0),
    OptionType.INCREMENT: (0, 0),
    OptionType.STRING: (1, 1),
    OptionType.INT: (1, 1),
    OptionType.FLOAT: (1, 1),
    OptionType.STRING_OPTIONAL: (0, 1),
    OptionType.INT_OPTIONAL: (0, 1),
    OptionType.FLOAT_OPTIONAL: (0, 1),
    OptionType.STRING_REPEAT: (1, 1),
    OptionType.INT_REPEAT: (1, 1),
    OptionType.FLOAT_REPEAT: (1, 1),
    OptionType.STRING_MAP: (1, 1),
}

_HELP_ARG_NAME: dict[OptionType, str] = {
    OptionType.STRING: "string",
    OptionType.STRING_OPTIONAL: "string",
    OptionType.STRING_REPEAT: "string",
    OptionType.INT: "int",
    OptionType.INT_OPTIONAL: "int",
    OptionType.INT_REPEAT: "int",
    OptionType.FLOAT: "float",
    OptionType.FLOAT_OPTIONAL: "float",
    OptionType.FLOAT_REPEAT: "float",
    OptionType.STRING_MAP: "key=value",
}


def _empty_value(opt_type: OptionType) -> Any:
    if opt_type == OptionType.BOOL:
        return False
    if opt_type == OptionType.INCREMENT:
        return 0
    if opt_type in (OptionType.STRING, OptionType.STRING_OPTIONAL):
        return ""
    if opt_type in (OptionType.INT, OptionType.INT_OPTIONAL):
        return 0
    if opt_type in (OptionType.FLOAT, OptionType.FLOAT_OPTIONAL):
        return 0.0
    if opt_type == OptionType.STRING_MAP:
        return {}
    return []


@dataclass(eq=False)
class Option:
    """
    Represents a declared command line option and its parse state.

    Attributes:
        name (str): Canonical option name, without leading dashes.
        opt_type (OptionType): Type tag of the option.
        default (Any): Value the option starts with and is reset to.
        aliases (list[str]): Every name usable on the command line, canonical first.
        min_args (int): Minimum number of arguments consumed per occurrence.
        max_args (int): Maximum number of arguments consumed per occurrence.
        is_optional (bool): A missing argument falls back to the default instead of failing.
        is_required (bool): Parsing fails if the option was not called.
        required_message (str): Custom message for a missing required option.
        env_var (str): Environment variable consulted when the option is not called.
        description (str): Help text.
        help_arg_name (str): Argument placeholder used in help and completions.
        valid_values (list[str]): Arguments accepted by `save()`; empty means any.
        suggested_values (list[str]): Values offered by shell completion.
        map_keys_to_lower (bool): Lower-case keys saved into a map option.
        called (bool): The option was given on the command line (or via env var).
        used_alias (str): Alias or env var name that set the option.
        unknown (bool): Descriptor synthesized for a token that matched no option.
        verbatim (str): Original token of an unknown option.
    """

    name: str
    opt_type: OptionType
    default: Any = None
    aliases: list[str] = field(default_factory=list)
    min_args: int = -1
    max_args: int = -1
    is_optional: bool = False
    is_required: bool = False
    required_message: str = ""
    env_var: str = ""
    description: str = ""
    help_arg_name: str = ""
    valid_values: list[str] = field(default_factory=list)
    suggested_values: list[str] = field(default_factory=list)
    map_keys_to_lower: bool = False
    called: bool = False
    used_alias: str = ""
    unknown: bool = False
    verbatim: str = ""
    value: Any = field(init=False, default=None)

    def __post_init__(self) -> None:
        if not isinstance(self.opt_type, OptionType):
            self.opt_type = OptionType(self.opt_type)
        if self.name not in self.aliases:
            self.aliases.insert(0, self.name)
        default_min, default_max = _ARITY[self.opt_type]
        if self.min_args < 0:
            self.min_args = default_min
        if self.max_args < 0:
            self.max_args = default_max
        self.is_optional = self.is_optional or self.opt_type.is_optional
        if not self.help_arg_name:
            self.help_arg_name = _HELP_ARG_NAME.get(self.opt_type, "")
        if self.default is None:
            self.default = _empty_value(self.opt_type)
        self.value = deepcopy(self.default)

    def validate_min_max(self) -> None:
        """
        Validate the arity of repeat and map options.

        Raises:
            DeclarationError: If min is not positive or max is lower than min.
        """
        if not self.opt_type.is_multi:
            return
        if self.min_args <= 0:
            raise DeclarationError(f"{self.name} definition error: min should be > 0")
        if self.max_args <= 0 or self.max_args < self.min_args:
            raise DeclarationError(
                f"{self.name} definition error: max should be > 0 and >= min"
            )

    def add_aliases(self, *aliases: str) -> None:
        for alias in aliases:
            if alias not in self.aliases:
                self.aliases.append(alias)

    @property
    def synopsis(self) -> str:
        """Help synopsis, e.g. `--name|-n <string>...`."""
        names = []
        for alias in self.aliases:
            if len(alias) > 1:
                names.append(f"--{alias}")
            elif alias == "-":
                names.append(alias)
            else:
                names.append(f"-{alias}")
        synopsis = "|".join(names)
        if self.opt_type.takes_value:
            synopsis += f" <{self.help_arg_name}>"
        if self.max_args > 1:
            synopsis += "..."
        return synopsis

    @property
    def default_str(self) -> str:
        """String representation of the default value for help output."""
        if self.opt_type in (OptionType.STRING, OptionType.STRING_OPTIONAL):
            return f'"{self.default}"'
        if self.opt_type == OptionType.BOOL:
            return "true" if self.default else "false"
        if self.opt_type == OptionType.STRING_MAP:
            return "{}" if not self.default else str(self.default)
        if self.opt_type.is_multi:
            return "[]" if not self.default else str(self.default)
        return str(self.default)

    def mark_called(self, used_alias: str) -> None:
        """Mark the option as called and record the alias used to call it."""
        self.called = True
        self.used_alias = used_alias

    def reset(self) -> None:
        """Return the option to its declared state."""
        self.called = False
        self.used_alias = ""
        self.value = deepcopy(self.default)

    def check_required(self) -> None:
        """
        Raises:
            MissingRequiredOptionError: If the option is required and wasn't called.
        """
        if self.is_required and not self.called:
            if self.required_message:
                raise MissingRequiredOptionError(self.required_message)
            raise MissingRequiredOptionError(
                text.ERROR_MISSING_REQUIRED_OPTION.format(option=self.name)
            )

    def _label(self) -> str:
        return self.used_alias or self.name

    def _conversion_error(self, template: str, argument: str) -> ConversionError:
        return ConversionError(
            template.format(option=self._label(), argument=argument),
            option=self._label(),
            argument=argument,
        )

    def _to_int(self, argument: str) -> int:
        try:
            return coerce_int(argument)
        except ValueError:
            raise self._conversion_error(text.ERROR_CONVERT_TO_INT, argument) from None

    def _to_float(self, argument: str) -> float:
        try:
            return coerce_float(argument)
        except ValueError:
            raise self._conversion_error(text.ERROR_CONVERT_TO_FLOAT, argument) from None

    def _to_int_list(self, argument: str) -> list[int]:
        if ".." not in argument:
            return [self._to_int(argument)]
        try:
            return expand_int_range(argument)
        except ValueError:
            raise self._conversion_error(
                text.ERROR_INVALID_INT_RANGE, argument
            ) from None

    def save(self, *args: str) -> None:
        """
        Save the given arguments into the option's value.

        Called with no arguments for flag-like occurrences: a bool flips to the
        opposite of its default and an increment counts up. Scalar types keep the
        first argument, repeat types append every argument, map types split the
        first argument on `=`.

        Raises:
            InvalidValueError: An argument is not one of `valid_values`.
            ConversionError: An argument can't be converted to the option's type.
            KeyValueError: A map argument has no `=`.
        """
        logger.debug("save: name=%s type=%s args=%s", self.name, self.opt_type, args)
        if not args:
            if self.opt_type == OptionType.BOOL:
                self.value = not self.default
            elif self.opt_type == OptionType.INCREMENT:
                self.value += 1
            return

        if self.valid_values:
            for argument in args:
                if argument not in self.valid_values:
                    raise InvalidValueError(
                        text.ERROR_INVALID_VALUE.format(
                            option=self.name, valid_values=self.valid_values
                        )
                    )

        opt_type = self.opt_type
        if opt_type in (OptionType.STRING, OptionType.STRING_OPTIONAL):
            self.value = args[0]
        elif opt_type in (OptionType.INT, OptionType.INT_OPTIONAL):
            self.value = self._to_int(args[0])
        elif opt_type in (OptionType.FLOAT, OptionType.FLOAT_OPTIONAL):
            self.value = self._to_float(args[0])
        elif opt_type == OptionType.STRING_REPEAT:
            self.value = [*self.value, *args]
        elif opt_type == OptionType.INT_REPEAT:
            values: list[int] = []
            for argument in args:
                values.extend(self._to_int_list(argument))
            self.value = [*self.value, *values]
        elif opt_type == OptionType.FLOAT_REPEAT:
            self.value = [*self.value, *(self._to_float(argument) for argument in args)]
        elif opt_type == OptionType.STRING_MAP:
            key, separator, item = args[0].partition("=")
            if not separator:
                raise KeyValueError(
                    text.ERROR_ARGUMENT_IS_NOT_KEY_VALUE.format(option=self._label())
                )
            if self.map_keys_to_lower:
                key = key.lower()
            self.value = {**self.value, key: item}
        elif opt_type == OptionType.INCREMENT:
            self.value += 1
        elif args[0] == "true":
            self.value = True
        elif args[0] == "false":
            self.value = False
        else:
            self.value = not self.default

    def __repr__(self) -> str:
        return (
            f"Option(name={self.name!r}, type={self.opt_type}, value={self.value!r}, "
            f"called={self.called}, used_alias={self.used_alias!r})"
        )
