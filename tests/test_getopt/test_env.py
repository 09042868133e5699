import pytest

from branchopt import GetOpt
from branchopt.exceptions import ConversionError


def test_string_from_env(fake_io):
    fake_io.env["PROGRAM_NAME"] = "from-env"
    opt = GetOpt("program", diagnostics=fake_io.diagnostics)
    opt.string("name", "default", env="PROGRAM_NAME")
    opt.parse([])
    assert opt.value("name") == "from-env"
    assert opt.called("name")
    assert opt.called_as("name") == "PROGRAM_NAME"


def test_cli_takes_precedence_over_env(fake_io):
    fake_io.env["PROGRAM_NAME"] = "from-env"
    opt = GetOpt("program", diagnostics=fake_io.diagnostics)
    opt.string("name", "default", env="PROGRAM_NAME")
    opt.parse(["--name", "cli"])
    assert opt.value("name") == "cli"
    assert opt.called_as("name") == "name"


def test_unset_env_keeps_default(fake_io):
    opt = GetOpt("program", diagnostics=fake_io.diagnostics)
    opt.string("name", "default", env="PROGRAM_NAME")
    opt.parse([])
    assert opt.value("name") == "default"
    assert not opt.called("name")


@pytest.mark.parametrize(
    "value, expected",
    [("true", True), ("TRUE", True), ("False", False)],
)
def test_bool_from_env(fake_io, value, expected):
    fake_io.env["PROGRAM_DEBUG"] = value
    opt = GetOpt("program", diagnostics=fake_io.diagnostics)
    opt.bool("debug", not expected, env="PROGRAM_DEBUG")
    opt.parse([])
    assert opt.value("debug") is expected
    assert opt.called("debug")


def test_bool_from_env_ignores_other_words(fake_io):
    fake_io.env["PROGRAM_DEBUG"] = "yes"
    opt = GetOpt("program", diagnostics=fake_io.diagnostics)
    opt.bool("debug", env="PROGRAM_DEBUG")
    opt.parse([])
    assert opt.value("debug") is False
    assert not opt.called("debug")


def test_int_and_float_from_env(fake_io):
    fake_io.env["PROGRAM_COUNT"] = "4"
    fake_io.env["PROGRAM_RATIO"] = "0.25"
    opt = GetOpt("program", diagnostics=fake_io.diagnostics)
    opt.int("count", env="PROGRAM_COUNT")
    opt.float_optional("ratio", env="PROGRAM_RATIO")
    opt.parse([])
    assert opt.value("count") == 4
    assert opt.value("ratio") == 0.25


def test_invalid_int_from_env(fake_io):
    fake_io.env["PROGRAM_COUNT"] = "four"
    opt = GetOpt("program", diagnostics=fake_io.diagnostics)
    opt.int("count", env="PROGRAM_COUNT")
    with pytest.raises(ConversionError) as exc_info:
        opt.parse([])
    assert "PROGRAM_COUNT" in str(exc_info.value)


def test_env_satisfies_required(fake_io):
    fake_io.env["PROGRAM_TOKEN"] = "secret"
    opt = GetOpt("program", diagnostics=fake_io.diagnostics)
    opt.string("token", required=True, env="PROGRAM_TOKEN")
    opt.parse([])
    assert opt.value("token") == "secret"


def test_env_is_ignored_for_slices(fake_io):
    fake_io.env["PROGRAM_NAMES"] = "a"
    opt = GetOpt("program", diagnostics=fake_io.diagnostics)
    opt.string_slice("names", env="PROGRAM_NAMES")
    opt.parse([])
    assert opt.value("names") == []
    assert not opt.called("names")


def test_env_applies_to_inherited_options_of_final_node(fake_io):
    fake_io.env["PROGRAM_PROFILE"] = "prod"
    opt = GetOpt("program", diagnostics=fake_io.diagnostics)
    opt.string("profile", env="PROGRAM_PROFILE")
    cmd = opt.new_command("cmd")
    opt.parse(["cmd"])
    assert cmd.value("profile") == "prod"
    assert opt.value("profile") == "prod"
