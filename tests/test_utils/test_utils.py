import logging

import pytest
from rich.logging import RichHandler

from branchopt.parser.parser_types import CompletionMode, OptionType, ShortMode, UnknownMode
from branchopt.parser.utils import (
    coerce_bool,
    coerce_float,
    coerce_int,
    expand_int_range,
    is_float,
    is_int_or_range,
)
from branchopt.utils import (
    ensure_async,
    get_program_name,
    running_in_container,
    setup_logging,
)


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.mark.parametrize(
    "value, expected",
    [("true", True), ("TRUE", True), (" False ", False), ("false", False)],
)
def test_coerce_bool(value, expected):
    assert coerce_bool(value) is expected


@pytest.mark.parametrize("value", ["yes", "1", "", "on"])
def test_coerce_bool_invalid(value):
    with pytest.raises(ValueError):
        coerce_bool(value)


def test_coerce_int():
    assert coerce_int("42") == 42
    assert coerce_int("-7") == -7
    for value in ("1_000", " 3", "3.0", "0x10", "", "\u0663", "\uff17"):
        with pytest.raises(ValueError):
            coerce_int(value)


def test_coerce_float():
    assert coerce_float("0.5") == 0.5
    assert coerce_float("3") == 3.0
    with pytest.raises(ValueError):
        coerce_float("1_0.0")
    with pytest.raises(ValueError):
        coerce_float("abc")
    with pytest.raises(ValueError):
        coerce_float("\u0661.\u0665")


def test_expand_int_range():
    assert expand_int_range("1..3") == [1, 2, 3]
    assert expand_int_range("-1..1") == [-1, 0, 1]
    for value in ("3..1", "2..2", "a..3", "1..", "1...3"):
        with pytest.raises(ValueError):
            expand_int_range(value)


def test_token_predicates():
    assert is_int_or_range("5")
    assert is_int_or_range("1..4")
    assert not is_int_or_range("4..1")
    assert not is_int_or_range("five")
    assert not is_int_or_range("\u0663")
    assert is_float("1e3")
    assert not is_float("one")


@pytest.mark.parametrize(
    "enum_cls, value, expected",
    [
        (OptionType, "flag", OptionType.BOOL),
        (OptionType, "Int-Repeat", OptionType.INT_REPEAT),
        (OptionType, "map", OptionType.STRING_MAP),
        (ShortMode, "bundle", ShortMode.BUNDLING),
        (ShortMode, "single-dash", ShortMode.SINGLE_DASH),
        (UnknownMode, "WARN", UnknownMode.WARN),
        (CompletionMode, "zshell", CompletionMode.ZSH),
    ],
)
def test_enum_aliases(enum_cls, value, expected):
    assert enum_cls(value) is expected


def test_enum_invalid_value():
    with pytest.raises(ValueError, match="Must be one of"):
        UnknownMode("ignore")


@pytest.mark.asyncio
async def test_ensure_async_wraps_sync_function():
    def add(a, b):
        return a + b

    wrapped = ensure_async(add)
    assert await wrapped(1, 2) == 3


@pytest.mark.asyncio
async def test_ensure_async_keeps_coroutine_function():
    async def fetch():
        return "ok"

    assert ensure_async(fetch) is fetch
    assert await fetch() == "ok"


def test_ensure_async_rejects_non_callable():
    with pytest.raises(TypeError):
        ensure_async("not callable")


def test_get_program_name(monkeypatch):
    monkeypatch.setattr("sys.argv", ["/usr/local/bin/mytool-not-on-path", "x"])
    assert get_program_name() == "mytool-not-on-path"


def test_setup_logging_cli(restore_root_logger):
    setup_logging(mode="cli")
    handlers = restore_root_logger.handlers
    assert len(handlers) == 1
    assert isinstance(handlers[0], RichHandler)
    assert handlers[0].level == logging.WARNING


def test_setup_logging_json_with_file(restore_root_logger, tmp_path):
    log_file = tmp_path / "branchopt.log"
    setup_logging(mode="json", log_filename=str(log_file), json_log_to_file=True)
    assert len(restore_root_logger.handlers) == 2
    logging.getLogger("branchopt").info("hello")
    for handler in restore_root_logger.handlers:
        handler.flush()
    assert '"message": "hello"' in log_file.read_text(encoding="UTF-8")


def test_setup_logging_mode_from_env(restore_root_logger, monkeypatch):
    monkeypatch.setenv("BRANCHOPT_LOG_MODE", "json")
    setup_logging()
    handler = restore_root_logger.handlers[0]
    assert not isinstance(handler, RichHandler)


def test_setup_logging_invalid_mode(restore_root_logger):
    with pytest.raises(ValueError, match="Invalid log mode"):
        setup_logging(mode="xml")


def test_running_in_container(tmp_path):
    cgroup = tmp_path / "cgroup"
    cgroup.write_text("0::/system.slice/docker-abc.scope\n", encoding="UTF-8")
    assert running_in_container(cgroup)
    cgroup.write_text("0::/init.scope\n", encoding="UTF-8")
    assert not running_in_container(cgroup)
    assert not running_in_container(tmp_path / "missing")
