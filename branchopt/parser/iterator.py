# Branchopt CLI Option Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""Forward-only cursor over a list of command line arguments."""
from __future__ import annotations

from typing import Sequence


class ArgIterator:
    """
    Cursor over a sequence of raw argument tokens.

    The cursor starts before the first element; `next()` advances it and
    reports whether it now points at an element.
    """

    def __init__(self, data: Sequence[str]) -> None:
        self._data = list(data)
        self._index = -1

    def __len__(self) -> int:
        return len(self._data)

    @property
    def index(self) -> int:
        return self._index

    def next(self) -> bool:
        if self._index < len(self._data):
            self._index += 1
        return self._index < len(self._data)

    def exists_next(self) -> bool:
        return self._index + 1 < len(self._data)

    @property
    def value(self) -> str:
        if 0 <= self._index < len(self._data):
            return self._data[self._index]
        return ""

    def peek_next(self) -> str | None:
        if self._index + 1 >= len(self._data):
            return None
        return self._data[self._index + 1]

    def is_last(self) -> bool:
        return self._index == len(self._data) - 1

    def remaining(self) -> list[str]:
        """Current element and everything after it."""
        if self._index >= len(self._data):
            return []
        return self._data[max(self._index, 0) :]

    def reset(self) -> None:
        self._index = -1
