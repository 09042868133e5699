# Branchopt CLI Option Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""config.py
Declarative program definitions for branchopt.

A program tree can be described in YAML or TOML instead of code:

    name: mytool
    description: Example tool
    unknown_mode: pass
    help_command: help
    options:
      - name: debug
        type: bool
        aliases: [d]
      - name: profile
        type: string
        default: dev
        env: MYTOOL_PROFILE
        valid_values: [dev, staging, production]
    commands:
      - name: log
        description: Show logs
        command_fn: mytool.commands.run_log
        options:
          - name: lines
            type: int_repeat
            max_args: 2

`loader()` validates the file with pydantic and returns a ready `GetOpt`.
"""
from __future__ import annotations

import importlib
from pathlib import Path
from typing import Any, Callable

import toml
import yaml
from pydantic import BaseModel, Field, ValidationInfo, field_validator

from branchopt.diagnostics import Diagnostics
from branchopt.exceptions import DeclarationError
from branchopt.getopt import GetOpt
from branchopt.logger import logger
from branchopt.parser.option import Option
from branchopt.parser.parser_types import OptionType, ShortMode, UnknownMode


def import_command_fn(dotted_path: str) -> Callable[..., Any]:
    """Dynamically imports a callable from a dotted path like 'my.module.func'."""
    module_path, _, attr = dotted_path.rpartition(".")
    if not module_path:
        raise DeclarationError(f"Invalid command_fn path: '{dotted_path}'")
    try:
        module = importlib.import_module(module_path)
    except ModuleNotFoundError as error:
        logger.error("Failed to import module '%s': %s", module_path, error)
        raise DeclarationError(
            f"Could not import '{dotted_path}': {error}. Ensure the module is "
            "installed and discoverable via PYTHONPATH."
        ) from error
    try:
        command_fn = getattr(module, attr)
    except AttributeError as error:
        logger.error("Module '%s' does not have attribute '%s'", module_path, attr)
        raise DeclarationError(
            f"Module '{module_path}' has no attribute '{attr}'"
        ) from error
    if not callable(command_fn):
        raise DeclarationError(f"'{dotted_path}' is not callable")
    return command_fn


class RawOption(BaseModel):
    """Option entry of a program definition."""

    name: str
    type: OptionType = OptionType.STRING
    default: Any = None
    aliases: list[str] = Field(default_factory=list)
    description: str = ""
    required: bool | str = False
    env: str = ""
    arg_name: str = ""
    valid_values: list[str] = Field(default_factory=list)
    suggested_values: list[str] = Field(default_factory=list)
    min_args: int = 1
    max_args: int = 1

    @field_validator("type", mode="before")
    @classmethod
    def validate_type(cls, value: Any) -> OptionType:
        return OptionType(value)

    def declare(self, getopt: GetOpt) -> Option:
        kwargs: dict[str, Any] = {
            "aliases": self.aliases,
            "description": self.description,
            "required": self.required,
            "env": self.env,
            "arg_name": self.arg_name,
            "valid_values": self.valid_values,
            "suggested_values": self.suggested_values,
        }
        if self.type.is_multi:
            declare = _MULTI_DECLARATIONS[self.type]
            option = declare(
                getopt, self.name, min_args=self.min_args, max_args=self.max_args, **kwargs
            )
            if self.default is not None:
                option.default = self.default
                option.reset()
            return option
        declare = _DECLARATIONS[self.type]
        if self.default is None:
            return declare(getopt, self.name, **kwargs)
        return declare(getopt, self.name, self.default, **kwargs)


class RawSynopsisArg(BaseModel):
    arg: str
    description: str = ""


class RawCommand(BaseModel):
    """Command entry of a program definition, possibly with nested commands."""

    name: str
    description: str = ""
    command_fn: str | None = None
    skip_options_copy: bool = False
    mode: ShortMode | None = None
    unknown_mode: UnknownMode | None = None
    require_order: bool | None = None
    options: list[RawOption] = Field(default_factory=list)
    commands: list[RawCommand] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)
    synopsis_args: list[RawSynopsisArg] = Field(default_factory=list)

    @field_validator("mode", "unknown_mode", mode="before")
    @classmethod
    def validate_modes(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None:
            return None
        if info.field_name == "mode":
            return ShortMode(value)
        return UnknownMode(value)

    def build(self, parent: GetOpt) -> GetOpt:
        command_fn = import_command_fn(self.command_fn) if self.command_fn else None
        command = parent.new_command(
            self.name,
            self.description,
            command_fn=command_fn,
            skip_options_copy=self.skip_options_copy,
        )
        _configure(command, self)
        return command


class ProgramConfig(BaseModel):
    """Top level program definition."""

    name: str
    description: str = ""
    command_fn: str | None = None
    mode: ShortMode | None = None
    unknown_mode: UnknownMode | None = None
    require_order: bool | None = None
    map_keys_to_lower: bool = False
    windows: bool = False
    help_command: str | None = "help"
    help_description: str = "Show help"
    options: list[RawOption] = Field(default_factory=list)
    commands: list[RawCommand] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)
    synopsis_args: list[RawSynopsisArg] = Field(default_factory=list)

    @field_validator("mode", "unknown_mode", mode="before")
    @classmethod
    def validate_modes(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None:
            return None
        if info.field_name == "mode":
            return ShortMode(value)
        return UnknownMode(value)

    def to_getopt(self, diagnostics: Diagnostics | None = None) -> GetOpt:
        getopt = GetOpt(self.name, self.description, diagnostics)
        if self.command_fn:
            getopt.set_command_fn(import_command_fn(self.command_fn))
        getopt.set_map_keys_to_lower(self.map_keys_to_lower)
        getopt.set_windows_mode(self.windows)
        _configure(getopt, self)
        if self.help_command:
            getopt.help_command(self.help_command, description=self.help_description)
        return getopt


def _configure(getopt: GetOpt, raw: RawCommand | ProgramConfig) -> None:
    if raw.mode is not None:
        getopt.set_mode(raw.mode)
    if raw.unknown_mode is not None:
        getopt.set_unknown_mode(raw.unknown_mode)
    if raw.require_order is not None:
        getopt.set_require_order(raw.require_order)
    for option in raw.options:
        option.declare(getopt)
    for synopsis_arg in raw.synopsis_args:
        getopt.help_synopsis_arg(synopsis_arg.arg, synopsis_arg.description)
    if raw.suggestions:
        getopt.custom_completion(*raw.suggestions)
    for command in raw.commands:
        command.build(getopt)


_DECLARATIONS: dict[OptionType, Callable[..., Option]] = {
    OptionType.BOOL: GetOpt.bool,
    OptionType.INCREMENT: GetOpt.increment,
    OptionType.STRING: GetOpt.string,
    OptionType.STRING_OPTIONAL: GetOpt.string_optional,
    OptionType.INT: GetOpt.int,
    OptionType.INT_OPTIONAL: GetOpt.int_optional,
    OptionType.FLOAT: GetOpt.float,
    OptionType.FLOAT_OPTIONAL: GetOpt.float_optional,
}

_MULTI_DECLARATIONS: dict[OptionType, Callable[..., Option]] = {
    OptionType.STRING_REPEAT: GetOpt.string_slice,
    OptionType.INT_REPEAT: GetOpt.int_slice,
    OptionType.FLOAT_REPEAT: GetOpt.float_slice,
    OptionType.STRING_MAP: GetOpt.string_map,
}


def loader(file_path: Path | str, diagnostics: Diagnostics | None = None) -> GetOpt:
    """
    Load a program definition from a YAML or TOML file.

    Args:
        file_path (Path | str): Path to the definition (`.yaml`, `.yml` or `.toml`).
        diagnostics (Diagnostics | None): Collaborators for the resulting program.

    Returns:
        GetOpt: The root of the declared program.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the file format is unsupported or doesn't hold a mapping.
        pydantic.ValidationError: If the definition is invalid.
        DeclarationError: If the tree can't be declared (duplicate aliases, bad imports).
    """
    if isinstance(file_path, (str, Path)):
        path = Path(file_path)
    else:
        raise TypeError("file_path must be a string or Path object.")

    if not path.is_file():
        raise FileNotFoundError(f"No such config file: {file_path}")

    suffix = path.suffix
    with path.open("r", encoding="UTF-8") as config_file:
        if suffix in (".yaml", ".yml"):
            raw_config = yaml.safe_load(config_file)
        elif suffix == ".toml":
            raw_config = toml.load(config_file)
        else:
            raise ValueError(f"Unsupported config format: {suffix}")

    if not isinstance(raw_config, dict):
        raise ValueError(
            "Configuration file must contain a mapping describing the program.\n"
            "Example:\n"
            "name: 'mytool'\n"
            "options:\n"
            "  - name: 'debug'\n"
            "    type: 'bool'"
        )

    logger.debug("Loading program definition from '%s'", path)
    return ProgramConfig.model_validate(raw_config).to_getopt(diagnostics)
