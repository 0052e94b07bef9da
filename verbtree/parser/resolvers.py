# verbtree — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Type resolvers convert tokens from a `TokenStream` into typed values.

A resolver is any `TypeResolver` subclass: a single `parse(stream)` method that
consumes one or more tokens starting at the cursor and returns a value, or
raises `UserInputError`. A failing resolver leaves the stream in an undefined
state, so callers that may need to back out wrap the call in a snapshot.

Built-in factories:
- string(): one token verbatim.
- integer(): an optionally signed decimal integer.
- floating(): an optionally signed decimal, `inf` or `nan`.
- boolean(): the literals `true` and `false`.
- choice(*values): one of a fixed set of strings.
- variadic(inner): applies `inner` until the stream ends.
- date_time(): a timestamp parsed with `python-dateutil`.
- resolver_from_callable(func): wraps a plain `str -> value` converter.

Resolvers can also be looked up by name (`get_resolver("int")`), which is how
grammar files reference them. Host applications add their own with
`register_resolver()`.
"""
from __future__ import annotations

import re
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Callable

from dateutil import parser as date_parser

from verbtree.exceptions import GrammarDefinitionError, UserInputError
from verbtree.parser.token_stream import TokenStream

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")
_FLOAT_RE = re.compile(
    r"[+-]?(?:inf|nan|(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)"
)


def take_token(stream: TokenStream) -> str:
    """Consume the current token, failing if the stream is exhausted."""
    token = stream.consume()
    if token is None:
        raise UserInputError("insufficient arguments")
    return token


class TypeResolver(ABC):
    """Converts the token(s) at the cursor into a typed value."""

    name: str = "value"

    @abstractmethod
    def parse(self, stream: TokenStream) -> Any:
        """Consume tokens from `stream` and return the resolved value."""
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class StringResolver(TypeResolver):
    name = "string"

    def parse(self, stream: TokenStream) -> str:
        return take_token(stream)


class IntegerResolver(TypeResolver):
    name = "integer"

    def parse(self, stream: TokenStream) -> int:
        token = take_token(stream)
        if not _INTEGER_RE.fullmatch(token):
            raise UserInputError(f"invalid integer: {token}")
        return int(token)


class FloatResolver(TypeResolver):
    name = "float"

    def parse(self, stream: TokenStream) -> float:
        token = take_token(stream)
        if not _FLOAT_RE.fullmatch(token):
            raise UserInputError(f"invalid float: {token}")
        return float(token)


class BooleanResolver(TypeResolver):
    name = "boolean"

    def parse(self, stream: TokenStream) -> bool:
        token = take_token(stream)
        if token == "true":
            return True
        elif token == "false":
            return False
        raise UserInputError(f"invalid boolean: {token}")


class ChoiceResolver(TypeResolver):
    """Accepts exactly one of a fixed set of strings."""

    name = "choice"

    def __init__(self, values: list[str] | tuple[str, ...]) -> None:
        if not values:
            raise GrammarDefinitionError("choice resolver needs at least one value")
        self.values: tuple[str, ...] = tuple(values)

    def parse(self, stream: TokenStream) -> str:
        token = take_token(stream)
        if token not in self.values:
            raise UserInputError(
                f"expected one of {{{', '.join(self.values)}}}, got: {token}"
            )
        return token

    def __repr__(self) -> str:
        return f"ChoiceResolver(values={self.values!r})"


class VariadicResolver(TypeResolver):
    """Applies an inner resolver repeatedly until the stream ends."""

    name = "variadic"

    def __init__(self, inner: TypeResolver) -> None:
        self.inner = inner

    def parse(self, stream: TokenStream) -> list[Any]:
        values = []
        while not stream.is_end:
            values.append(self.inner.parse(stream))
        return values

    def __repr__(self) -> str:
        return f"VariadicResolver(inner={self.inner!r})"


class DateTimeResolver(TypeResolver):
    name = "datetime"

    def parse(self, stream: TokenStream) -> datetime:
        token = take_token(stream)
        try:
            return date_parser.parse(token)
        except (ValueError, OverflowError) as error:
            raise UserInputError(f"invalid datetime: {token}") from error


class CallableResolver(TypeResolver):
    """Adapts a plain `str -> value` converter such as `pathlib.Path`."""

    def __init__(self, func: Callable[[str], Any], name: str | None = None) -> None:
        if not callable(func):
            raise GrammarDefinitionError(f"{func!r} is not callable")
        self.func = func
        self.name = name or getattr(func, "__name__", "value")

    def parse(self, stream: TokenStream) -> Any:
        token = take_token(stream)
        try:
            return self.func(token)
        except (ValueError, TypeError) as error:
            raise UserInputError(f"invalid {self.name}: {token}") from error

    def __repr__(self) -> str:
        return f"CallableResolver(func={self.func!r})"


def string() -> TypeResolver:
    return StringResolver()


def integer() -> TypeResolver:
    return IntegerResolver()


def floating() -> TypeResolver:
    return FloatResolver()


def boolean() -> TypeResolver:
    return BooleanResolver()


def choice(*values: str) -> TypeResolver:
    return ChoiceResolver(values)


def variadic(inner: TypeResolver) -> TypeResolver:
    return VariadicResolver(inner)


def date_time() -> TypeResolver:
    return DateTimeResolver()


def resolver_from_callable(
    func: Callable[[str], Any], name: str | None = None
) -> TypeResolver:
    return CallableResolver(func, name)


ResolverFactory = Callable[..., TypeResolver]

_REGISTRY: dict[str, ResolverFactory] = {}


def register_resolver(name: str, factory: ResolverFactory, *aliases: str) -> None:
    """
    Make a resolver factory available by name to grammar files.

    Args:
        name (str): The type name used in grammar files.
        factory (ResolverFactory): Called with the argument's extra settings
            (`choices`, `of`) as keyword arguments.
        *aliases (str): Additional names for the same factory.
    """
    for key in (name, *aliases):
        if key in _REGISTRY:
            raise GrammarDefinitionError(f"Resolver '{key}' is already registered")
        _REGISTRY[key] = factory


def get_resolver(name: str, **params: Any) -> TypeResolver:
    """Build the resolver registered under `name`."""
    try:
        factory = _REGISTRY[name]
    except KeyError:
        known = ", ".join(sorted(_REGISTRY))
        raise GrammarDefinitionError(
            f"Unknown argument type '{name}'. Must be one of: {known}"
        ) from None
    return factory(**params)


def resolver_names() -> list[str]:
    return sorted(_REGISTRY)


def _choice_factory(choices: list[str] | None = None, **_: Any) -> TypeResolver:
    return ChoiceResolver(choices or [])


def _variadic_factory(of: TypeResolver | None = None, **_: Any) -> TypeResolver:
    return VariadicResolver(of or StringResolver())


register_resolver("string", lambda **_: StringResolver(), "str")
register_resolver("integer", lambda **_: IntegerResolver(), "int")
register_resolver("float", lambda **_: FloatResolver(), "number")
register_resolver("boolean", lambda **_: BooleanResolver(), "bool")
register_resolver("choice", _choice_factory, "enum")
register_resolver("variadic", _variadic_factory, "rest")
register_resolver("datetime", lambda **_: DateTimeResolver())
