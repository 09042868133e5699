# Branchopt CLI Option Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Runtime helpers for programs built on branchopt.

- `get_program_name()`: default name of the root node.
- `ensure_async()`: lets `dispatch()` await sync and async command functions alike.
- `setup_logging()`: console (Rich or JSON) and optional file logging.
"""
from __future__ import annotations

import functools
import inspect
import logging
import os
import shutil
import sys
from pathlib import Path
from typing import Any, Awaitable, Callable, TypeVar

import pythonjsonlogger.json
from rich.logging import RichHandler

T = TypeVar("T")

LOG_MODE_ENV = "BRANCHOPT_LOG_MODE"
JSON_LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"
TEXT_LOG_FORMAT = "%(asctime)s [%(name)s] [%(levelname)s] %(message)s"
_CONTAINER_MARKERS = ("docker", "kubepods", "containerd", "podman")


def get_program_name() -> str:
    """Name the program was invoked as, without its directory."""
    script = sys.argv[0] if sys.argv and sys.argv[0] else "program"
    resolved = shutil.which(script) or script
    return os.path.basename(resolved)


def is_coroutine(function: Callable[..., Any]) -> bool:
    return inspect.iscoroutinefunction(function)


def ensure_async(function: Callable[..., T]) -> Callable[..., Awaitable[T]]:
    """Return `function` if it is a coroutine function, else an async wrapper around it."""
    if not callable(function):
        raise TypeError(f"{function} is not callable")
    if is_coroutine(function):
        return function  # type: ignore

    @functools.wraps(function)
    async def run_sync(*args, **kwargs) -> T:
        return function(*args, **kwargs)

    return run_sync


def running_in_container(cgroup: Path = Path("/proc/1/cgroup")) -> bool:
    try:
        content = cgroup.read_text(encoding="UTF-8")
    except OSError:
        return False
    return any(marker in content for marker in _CONTAINER_MARKERS)


def _json_formatter() -> logging.Formatter:
    return pythonjsonlogger.json.JsonFormatter(JSON_LOG_FORMAT)


def _console_handler(mode: str) -> logging.Handler:
    if mode == "cli":
        return RichHandler(
            rich_tracebacks=True,
            show_path=False,
            markup=False,
            log_time_format="[%Y-%m-%d %H:%M:%S]",
        )
    if mode == "json":
        handler = logging.StreamHandler()
        handler.setFormatter(_json_formatter())
        return handler
    raise ValueError(f"Invalid log mode: {mode}")


def _file_handler(log_filename: str, as_json: bool) -> logging.Handler:
    handler = logging.FileHandler(log_filename, "a", "UTF-8")
    if as_json:
        handler.setFormatter(_json_formatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def setup_logging(
    mode: str | None = None,
    log_filename: str | None = None,
    json_log_to_file: bool = False,
    file_log_level: int = logging.DEBUG,
    console_log_level: int = logging.WARNING,
) -> None:
    """
    Install logging handlers on the root logger.

    The "branchopt" logger propagates to the root logger, so scanner and
    dispatch debug records end up next to the program's own logs.

    Args:
        mode (str | None): "cli" for Rich console output or "json" for one JSON
            object per line. Defaults to `$BRANCHOPT_LOG_MODE`, then to "json"
            inside containers and "cli" elsewhere.
        log_filename (str | None): Also log to this file.
        json_log_to_file (bool): Write the file as JSON instead of plain text.
        file_log_level (int): Level of the file handler.
        console_log_level (int): Level of the console handler.

    Raises:
        ValueError: If `mode` is neither "cli" nor "json".
    """
    mode = mode or os.getenv(LOG_MODE_ENV) or (
        "json" if running_in_container() else "cli"
    )

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    root.handlers.clear()

    console_handler = _console_handler(mode)
    console_handler.setLevel(console_log_level)
    root.addHandler(console_handler)

    if log_filename:
        file_handler = _file_handler(log_filename, json_log_to_file)
        file_handler.setLevel(file_log_level)
        root.addHandler(file_handler)

    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("branchopt").propagate = True
    logging.getLogger("branchopt").debug("Logging initialized in '%s' mode.", mode)
