# Branchopt CLI Option Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Enumerations shared by the branchopt parser core.

Contents:
- `OptionType`: Value and arity semantics of a declared option.
- `ShortMode`: How single-dash tokens are decomposed (normal, bundling, single dash).
- `UnknownMode`: What happens to option-looking tokens that match nothing.
- `CompletionMode`: Which shell flavour a completion pass is producing output for.
- `NodeType`: Kind of node in the program tree.

All enums accept their string values (and a few config-friendly aliases) so they
can be loaded from YAML/TOML definitions, e.g. `ShortMode("bundling")`.
"""
from __future__ import annotations

from enum import Enum


class _AliasedEnum(Enum):
    """Enum that resolves case-insensitive string values and aliases."""

    @classmethod
    def _aliases(cls) -> dict[str, str]:
        return {}

    @classmethod
    def _missing_(cls, value: object) -> _AliasedEnum:
        if not isinstance(value, str):
            raise ValueError(f"Invalid {cls.__name__}: {value!r}")
        normalized = value.strip().lower().replace("-", "_")
        alias = cls._aliases().get(normalized, normalized)
        for member in cls:
            if member.value == alias:
                return member
        valid = ", ".join(member.value for member in cls)
        raise ValueError(f"Invalid {cls.__name__}: '{value}'. Must be one of: {valid}")

    def __str__(self) -> str:
        return self.value


class OptionType(_AliasedEnum):
    """
    Type tag of an `Option`.

    Determines how many tokens an occurrence consumes by default and how each
    token is converted when saved.

    Aliases:
        - "flag" → "bool"
        - "str" → "string"
        - "float64" → "float"
        - "counter" → "increment"
        - "map" → "string_map"
    """

    BOOL = "bool"
    INCREMENT = "increment"
    STRING = "string"
    INT = "int"
    FLOAT = "float"
    STRING_OPTIONAL = "string_optional"
    INT_OPTIONAL = "int_optional"
    FLOAT_OPTIONAL = "float_optional"
    STRING_REPEAT = "string_repeat"
    INT_REPEAT = "int_repeat"
    FLOAT_REPEAT = "float_repeat"
    STRING_MAP = "string_map"

    @classmethod
    def _aliases(cls) -> dict[str, str]:
        return {
            "flag": "bool",
            "str": "string",
            "float64": "float",
            "counter": "increment",
            "map": "string_map",
        }

    @property
    def is_multi(self) -> bool:
        """True for types whose arity is configured with min/max args."""
        return self in (
            OptionType.STRING_REPEAT,
            OptionType.INT_REPEAT,
            OptionType.FLOAT_REPEAT,
            OptionType.STRING_MAP,
        )

    @property
    def is_optional(self) -> bool:
        """True for scalar types whose argument may be omitted."""
        return self in (
            OptionType.STRING_OPTIONAL,
            OptionType.INT_OPTIONAL,
            OptionType.FLOAT_OPTIONAL,
        )

    @property
    def takes_value(self) -> bool:
        return self not in (OptionType.BOOL, OptionType.INCREMENT)


class ShortMode(_AliasedEnum):
    """
    Interpretation of tokens that start with a single dash.

    Given the token "-opt=arg":
        NORMAL:      option "opt", argument "arg"
        BUNDLING:    options "o", "p" and "t", the last one with argument "arg"
        SINGLE_DASH: option "o", argument "pt=arg"
    """

    NORMAL = "normal"
    BUNDLING = "bundling"
    SINGLE_DASH = "single_dash"

    @classmethod
    def _aliases(cls) -> dict[str, str]:
        return {"bundle": "bundling", "singledash": "single_dash"}


class UnknownMode(_AliasedEnum):
    """Action taken when an option-looking token matches no declared option."""

    FAIL = "fail"
    WARN = "warn"
    PASS = "pass"


class CompletionMode(_AliasedEnum):
    """Shell flavour of a completion pass. NONE means regular parsing."""

    NONE = "none"
    BASH = "bash"
    ZSH = "zsh"

    @classmethod
    def _aliases(cls) -> dict[str, str]:
        return {"zshell": "zsh", "": "none"}


class NodeType(Enum):
    """Kind of node in a `ProgramTree`."""

    PROGRAM = "program"
    COMMAND = "command"
    OPTION = "option"
    TEXT = "text"
