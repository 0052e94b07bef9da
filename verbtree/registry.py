# verbtree — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines `GrammarRegistry`, a name-indexed collection of `CommandParser`s.

Registering a grammar validates it once. Parsing a command line then looks up
the grammar by its leading token (the command name or one of its aliases) and
hands the whole line to that grammar's parser:

    registry = GrammarRegistry()
    registry.register(mv)
    verb, result = registry.parse(["mv", "a.txt", "b.txt"])

Invoking a handler for the resolved command is left to the host application.
"""
from __future__ import annotations

from typing import Iterator, Sequence

from verbtree.exceptions import GrammarDefinitionError, UserInputError
from verbtree.logger import logger
from verbtree.parser import CommandParser, ParseResult, VerbDef
from verbtree.parser.engine import DEFAULT_MAX_TRIALS


class GrammarRegistry:
    """Maps command names and aliases to validated grammars."""

    def __init__(self, max_trials: int | None = DEFAULT_MAX_TRIALS) -> None:
        self.max_trials = max_trials
        self._parsers: list[CommandParser] = []
        self._name_map: dict[str, CommandParser] = {}

    def register(self, verb: VerbDef) -> CommandParser:
        """
        Validate `verb` and make it reachable by its name and aliases.

        Raises:
            GrammarDefinitionError: If the grammar is malformed, the root verb
                is unnamed, or a name is already registered.
        """
        if isinstance(verb, VerbDef) and not verb.is_named:
            raise GrammarDefinitionError(
                f"Top-level command '{verb.id}' must have a name"
            )
        parser = CommandParser(verb, max_trials=self.max_trials)
        for name in (verb.name, *verb.aliases):
            if name in self._name_map:
                existing = self._name_map[name].verb
                raise GrammarDefinitionError(
                    f"Command name '{name}' is already used by '{existing.id}'"
                )
        for name in (verb.name, *verb.aliases):
            self._name_map[name] = parser
        self._parsers.append(parser)
        logger.debug("Command '%s' registered as %s", verb.name, verb.aliases)
        return parser

    def get(self, name: str) -> CommandParser | None:
        return self._name_map.get(name)

    def parse(self, tokens: Sequence[str]) -> tuple[VerbDef, ParseResult]:
        """
        Parse a command line, selecting the grammar by its first token.

        Returns:
            tuple[VerbDef, ParseResult]: The matched root verb and its result.

        Raises:
            UserInputError: If the command is unknown or its tokens are invalid.
        """
        if not tokens:
            raise UserInputError("missing command name")
        parser = self._name_map.get(tokens[0])
        if parser is None:
            raise UserInputError(f"unknown command: {tokens[0]}")
        return parser.verb, parser.parse_command(tokens)

    @property
    def parsers(self) -> list[CommandParser]:
        return list(self._parsers)

    def names(self) -> list[str]:
        return sorted(self._name_map)

    def __contains__(self, name: object) -> bool:
        return name in self._name_map

    def __iter__(self) -> Iterator[CommandParser]:
        return iter(self._parsers)

    def __len__(self) -> int:
        return len(self._parsers)

    def __repr__(self) -> str:
        return f"GrammarRegistry(commands={self.names()!r})"
