# verbtree — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines `ParseResult`, the record the parse engine writes its values into.

A result maps identifiers to values:
- positional and option arguments are bound under their `ArgumentDef.id`,
- options are bound under their `OptionDef.id` as an occurrence counter,
- a matched sub-verb is bound under its `VerbDef.id` as a nested `ParseResult`,
- every parsed verb binds its own id to `True` in its own record.

Example:
    result = parse_command(mv, ["mv", "-f", "a.txt", "b.txt"])
    result["src"]          # "a.txt"
    result.get("force")    # 1
    result.to_dict()       # {"src": "a.txt", "dst": "b.txt", "force": 1, "mv": True}
"""
from __future__ import annotations

from typing import Any, Hashable, Iterator


class ParseResult:
    """Mapping from grammar identifiers to parsed values."""

    def __init__(self, values: dict[Hashable, Any] | None = None) -> None:
        self._values: dict[Hashable, Any] = dict(values or {})

    def set(self, key: Hashable, value: Any) -> None:
        self._values[key] = value

    def get(self, key: Hashable, default: Any = None) -> Any:
        return self._values.get(key, default)

    def has(self, key: Hashable) -> bool:
        return key in self._values

    def delete(self, key: Hashable) -> bool:
        """Remove `key`. Returns False if it was not bound."""
        if key not in self._values:
            return False
        del self._values[key]
        return True

    def clear(self) -> None:
        self._values.clear()

    def keys(self) -> list[Hashable]:
        return list(self._values)

    def entries(self) -> list[tuple[Hashable, Any]]:
        return list(self._values.items())

    def merge(self, other: ParseResult) -> None:
        """Copy every binding of `other` into this record, last write wins."""
        self._values.update(other._values)

    def count(self, key: Hashable) -> int:
        """Increment the occurrence counter under `key` and return it."""
        current = self._values.get(key)
        if not isinstance(current, int) or isinstance(current, bool):
            current = 0
        self._values[key] = current + 1
        return current + 1

    def to_dict(self) -> dict[Hashable, Any]:
        """Return plain nested dicts, converting sub-verb records too."""
        return {
            key: value.to_dict() if isinstance(value, ParseResult) else value
            for key, value in self._values.items()
        }

    def __getitem__(self, key: Hashable) -> Any:
        return self._values[key]

    def __setitem__(self, key: Hashable, value: Any) -> None:
        self._values[key] = value

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __iter__(self) -> Iterator[tuple[Hashable, Any]]:
        return iter(self.entries())

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ParseResult):
            return self.to_dict() == other.to_dict()
        if isinstance(other, dict):
            return self.to_dict() == other
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"ParseResult({self._values!r})"
