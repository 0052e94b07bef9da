# verbtree — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines `TokenStream`, the cursor the parse engine walks over the input tokens.

Besides plain cursor movement the stream supports two in-place edits used to
split attached option values (`--opt=value`, `-oVALUE`) into their own token:
`insert()` and `replace()`.

Speculative parsing is supported through a snapshot stack:

    stream.snapshot()
    try_something(stream)       # may consume, insert or replace
    stream.rollback()           # or stream.commit() on success

After `rollback()` the cursor and the token list are exactly as they were when
the matching `snapshot()` was taken, including any edits done in between.
Every `snapshot()` must be paired with exactly one `commit()` or `rollback()`;
an unpaired call raises `SnapshotStackError`.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from verbtree.exceptions import SnapshotStackError


@dataclass(frozen=True)
class StreamState:
    """A saved copy of the cursor and token list."""

    position: int
    tokens: tuple[str, ...]


class TokenStream:
    """
    An ordered sequence of string tokens with a cursor and snapshot stack.

    The cursor always lies in `[0, len(tokens)]`. `current` is `None` once the
    cursor has reached the end.
    """

    def __init__(self, tokens: Iterable[str] | None = None) -> None:
        self._tokens: list[str] = list(tokens or [])
        self._position: int = 0
        self._saved: list[StreamState] = []

    @property
    def current(self) -> str | None:
        """The token at the cursor, or None at the end of the stream."""
        if self.is_end:
            return None
        return self._tokens[self._position]

    @property
    def is_end(self) -> bool:
        """True when there are no tokens left to consume."""
        return self._position >= len(self._tokens)

    @property
    def position(self) -> int:
        return self._position

    @property
    def tokens(self) -> list[str]:
        """A copy of the full token list, consumed tokens included."""
        return list(self._tokens)

    @property
    def remaining(self) -> list[str]:
        """A copy of the tokens from the cursor onwards."""
        return self._tokens[self._position :]

    @property
    def depth(self) -> int:
        """Number of snapshots that are still open."""
        return len(self._saved)

    def consume(self) -> str | None:
        """Advance the cursor and return the consumed token. No-op at the end."""
        if self.is_end:
            return None
        token = self._tokens[self._position]
        self._position += 1
        return token

    def insert(self, token: str) -> None:
        """Splice `token` in at the cursor so it becomes `current`."""
        self._tokens.insert(self._position, token)

    def replace(self, token: str) -> None:
        """Overwrite the token at the cursor, or append it at the end."""
        if self.is_end:
            self._tokens.append(token)
        else:
            self._tokens[self._position] = token

    def snapshot(self) -> None:
        """Save the cursor and token list on the snapshot stack."""
        self._saved.append(StreamState(self._position, tuple(self._tokens)))

    def commit(self) -> None:
        """Discard the most recent snapshot, keeping the current state."""
        if not self._saved:
            raise SnapshotStackError("commit() called without a matching snapshot()")
        self._saved.pop()

    def rollback(self) -> None:
        """Restore the most recent snapshot and discard it."""
        if not self._saved:
            raise SnapshotStackError("rollback() called without a matching snapshot()")
        state = self._saved.pop()
        self._position = state.position
        self._tokens = list(state.tokens)

    def __len__(self) -> int:
        return len(self._tokens)

    def __repr__(self) -> str:
        return (
            f"TokenStream(position={self._position}, tokens={self._tokens!r}, "
            f"depth={self.depth})"
        )
