import pytest

from branchopt.exceptions import (
    ConversionError,
    DeclarationError,
    InvalidValueError,
    KeyValueError,
    MissingRequiredOptionError,
)
from branchopt.parser.option import Option
from branchopt.parser.parser_types import OptionType


def test_defaults_by_type():
    assert Option("b", OptionType.BOOL).value is False
    assert Option("i", OptionType.INCREMENT).value == 0
    assert Option("s", OptionType.STRING).value == ""
    assert Option("f", OptionType.FLOAT).value == 0.0
    assert Option("ss", OptionType.STRING_REPEAT).value == []
    assert Option("m", OptionType.STRING_MAP).value == {}


def test_arity_defaults():
    option = Option("s", OptionType.STRING)
    assert (option.min_args, option.max_args) == (1, 1)
    option = Option("o", OptionType.STRING_OPTIONAL)
    assert (option.min_args, option.max_args) == (0, 1)
    assert option.is_optional
    option = Option("b", OptionType.BOOL)
    assert (option.min_args, option.max_args) == (0, 0)


def test_canonical_name_is_first_alias():
    option = Option("name", OptionType.STRING, aliases=["n"])
    assert option.aliases == ["name", "n"]
    option.add_aliases("nm", "n")
    assert option.aliases == ["name", "n", "nm"]


def test_bool_save_flips_default():
    option = Option("b", OptionType.BOOL, default=True)
    option.save()
    assert option.value is False
    option.save("true")
    assert option.value is True
    option.save("false")
    assert option.value is False


def test_increment_save():
    option = Option("v", OptionType.INCREMENT)
    option.save()
    option.save()
    assert option.value == 2


def test_string_save_keeps_first_arg():
    option = Option("s", OptionType.STRING)
    option.save("hello")
    assert option.value == "hello"


def test_int_save():
    option = Option("i", OptionType.INT)
    option.save("-12")
    assert option.value == -12


def test_int_conversion_error_names_option_and_text():
    option = Option("i", OptionType.INT)
    option.mark_called("int-alias")
    with pytest.raises(ConversionError) as exc_info:
        option.save("abc")
    assert exc_info.value.option == "int-alias"
    assert exc_info.value.argument == "abc"
    assert "int-alias" in str(exc_info.value)
    assert "abc" in str(exc_info.value)


def test_float_save():
    option = Option("f", OptionType.FLOAT_OPTIONAL)
    option.save("1.5")
    assert option.value == 1.5
    with pytest.raises(ConversionError):
        option.save("one")


def test_string_repeat_appends():
    option = Option("s", OptionType.STRING_REPEAT)
    option.save("a", "b")
    option.save("c")
    assert option.value == ["a", "b", "c"]


def test_int_repeat_range_expansion():
    option = Option("i", OptionType.INT_REPEAT)
    option.save("1..3")
    assert option.value == [1, 2, 3]
    option.save("7")
    assert option.value == [1, 2, 3, 7]


@pytest.mark.parametrize("argument", ["3..1", "2..2", "a..3", "1..b", "x"])
def test_int_repeat_invalid(argument):
    option = Option("i", OptionType.INT_REPEAT)
    with pytest.raises(ConversionError):
        option.save(argument)


def test_float_repeat():
    option = Option("f", OptionType.FLOAT_REPEAT)
    option.save("1", "2.5")
    assert option.value == [1.0, 2.5]


def test_string_map():
    option = Option("m", OptionType.STRING_MAP)
    option.save("key=value")
    option.save("Other=a=b")
    assert option.value == {"key": "value", "Other": "a=b"}


def test_string_map_lower_keys():
    option = Option("m", OptionType.STRING_MAP, map_keys_to_lower=True)
    option.save("KEY=Value")
    assert option.value == {"key": "Value"}


def test_string_map_missing_separator():
    option = Option("m", OptionType.STRING_MAP)
    with pytest.raises(KeyValueError):
        option.save("novalue")


def test_valid_values():
    option = Option("p", OptionType.STRING, valid_values=["dev", "prod"])
    option.save("dev")
    assert option.value == "dev"
    with pytest.raises(InvalidValueError):
        option.save("staging")


def test_default_is_not_shared_with_value():
    default = ["x"]
    option = Option("s", OptionType.STRING_REPEAT, default=default)
    option.save("y")
    assert option.value == ["x", "y"]
    assert default == ["x"]
    option.reset()
    assert option.value == ["x"]
    assert not option.called


@pytest.mark.parametrize(
    "min_args, max_args",
    [(0, 1), (2, 1), (1, 0), (-2, 3)],
)
def test_validate_min_max(min_args, max_args):
    option = Option("s", OptionType.STRING_REPEAT, min_args=min_args, max_args=max_args)
    if min_args < 0:
        option.min_args = min_args
    with pytest.raises(DeclarationError):
        option.validate_min_max()


def test_validate_min_max_ignores_scalars():
    Option("s", OptionType.STRING).validate_min_max()


def test_check_required():
    option = Option("s", OptionType.STRING, is_required=True)
    with pytest.raises(MissingRequiredOptionError) as exc_info:
        option.check_required()
    assert "'s'" in str(exc_info.value)
    option.mark_called("s")
    option.check_required()


def test_check_required_custom_message():
    option = Option("s", OptionType.STRING, is_required=True, required_message="need s")
    with pytest.raises(MissingRequiredOptionError, match="need s"):
        option.check_required()


def test_synopsis():
    assert Option("name", OptionType.STRING, aliases=["n"]).synopsis == "--name|-n <string>"
    assert Option("debug", OptionType.BOOL).synopsis == "--debug"
    option = Option("list", OptionType.INT_REPEAT, max_args=3)
    assert option.synopsis == "--list <int>..."
    option = Option("host", OptionType.STRING, help_arg_name="hostname")
    assert option.synopsis == "--host <hostname>"


def test_default_str():
    assert Option("s", OptionType.STRING, default="x").default_str == '"x"'
    assert Option("b", OptionType.BOOL).default_str == "false"
    assert Option("i", OptionType.INT, default=3).default_str == "3"
    assert Option("l", OptionType.STRING_REPEAT).default_str == "[]"
    assert Option("m", OptionType.STRING_MAP).default_str == "{}"
