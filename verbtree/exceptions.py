# verbtree — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines all custom exception classes used by verbtree.

Every error that crosses the package boundary belongs to one tagged family
rooted at `VerbtreeError`. Each instance carries an `ErrorKind` and a plain
human-readable `message`, so callers can branch on the kind without string
matching.

Exception Hierarchy:
- VerbtreeError
    ├── GrammarDefinitionError
    └── UserInputError
        └── TrialLimitExceeded
- SnapshotStackError (RuntimeError)

`GrammarDefinitionError` signals an authoring defect in a grammar and is
raised when the grammar is registered. `UserInputError` is raised while
parsing tokens and is meant to be shown to the end user verbatim.

`SnapshotStackError` is outside the `VerbtreeError` family: it marks a broken
token stream invariant (a programming defect) and is never absorbed by code
that handles user errors.
"""
from __future__ import annotations

from enum import Enum


class ErrorKind(Enum):
    """Tag carried by every `VerbtreeError`."""

    GRAMMAR_DEFINITION = "grammar_definition"
    USER_INPUT = "user_input"

    def __str__(self) -> str:
        return self.value


class VerbtreeError(Exception):
    """Base exception for verbtree."""

    kind: ErrorKind

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind}, message={self.message!r})"


class GrammarDefinitionError(VerbtreeError):
    """Exception raised when a grammar definition is inconsistent."""

    kind = ErrorKind.GRAMMAR_DEFINITION


class UserInputError(VerbtreeError):
    """Exception raised when the input tokens do not satisfy a grammar."""

    kind = ErrorKind.USER_INPUT


class TrialLimitExceeded(UserInputError):
    """Exception raised when unnamed subcommand trials exceed their budget."""


class SnapshotStackError(RuntimeError):
    """Raised when a token stream snapshot is committed or rolled back unpaired."""
