import io
from types import SimpleNamespace

import pytest
from rich.console import Console

from branchopt.diagnostics import Diagnostics


@pytest.fixture
def fake_io():
    """Diagnostics with in-memory output, a fake environment and a recording exit."""
    out = io.StringIO()
    err = io.StringIO()
    completions = io.StringIO()
    env: dict[str, str] = {}
    exits: list[int] = []
    diagnostics = Diagnostics(
        console=Console(file=out, width=120, color_system=None),
        error_console=Console(file=err, width=120, color_system=None),
        completion_stream=lambda: completions,
        env=env.get,
        exit_fn=exits.append,
    )
    return SimpleNamespace(
        diagnostics=diagnostics,
        out=out,
        err=err,
        completions=completions,
        env=env,
        exits=exits,
    )
