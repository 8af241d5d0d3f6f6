"""Compiled statement value object and identifier quoting."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

#: Positional placeholder used for every bound value.
PLACEHOLDER = "?"


@dataclass(frozen=True)
class CompiledSQL:
    """The finished form of a statement, ready for an executor.

    Attributes:
        sql: The SQL text with ``?`` placeholders.
        params: Values for the placeholders, in left-to-right order.
        kind: The statement kind (``'select'``, ``'insert'``, ...).
    """

    sql: str
    params: tuple[Any, ...]
    kind: str

    @property
    def placeholder_count(self) -> int:
        """Number of ``?`` placeholders in :attr:`sql`.

        A ``?`` inside a quoted identifier or a string literal is text, not a
        placeholder, and is not counted.
        """
        count = 0
        quote: str | None = None
        for ch in self.sql:
            if quote is not None:
                # A doubled quote closes and reopens, so it needs no special case.
                if ch == quote:
                    quote = None
            elif ch in ('"', "'"):
                quote = ch
            elif ch == PLACEHOLDER:
                count += 1
        return count


def quote_identifier(name: str) -> str:
    """Return a double-quoted SQL identifier with embedded quotes doubled."""
    escaped = name.replace('"', '""')
    return f'"{escaped}"'
