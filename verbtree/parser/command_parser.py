# verbtree — (c) 2025 rtj.dev LLC — MIT Licensed
"""
This module implements `CommandParser`, the registration-time wrapper around the
parse engine.

A `CommandParser` owns one root `VerbDef`. The grammar is validated once, when
the parser is constructed, so every later call goes straight to the engine:

    parser = CommandParser(mv)          # raises GrammarDefinitionError if malformed
    result = parser.parse_command(["mv", "a.txt", "b.txt"])
    result = parser.parse(["a.txt", "b.txt"])

Parsing never mutates the grammar, so one `CommandParser` can serve any number
of parses, including concurrent ones.
"""
from __future__ import annotations

from typing import Sequence

from verbtree.exceptions import GrammarDefinitionError, UserInputError
from verbtree.logger import logger
from verbtree.parser.engine import DEFAULT_MAX_TRIALS, parse_command, parse_tokens
from verbtree.parser.grammar import VerbDef, iter_verbs, validate_grammar
from verbtree.parser.result import ParseResult


class CommandParser:
    """
    Parses token lists against one validated grammar.

    Args:
        verb (VerbDef): The root verb of the grammar.
        max_trials (int | None): Cap on unnamed subcommand trials per parse.
            None disables the cap.
    """

    def __init__(
        self, verb: VerbDef, max_trials: int | None = DEFAULT_MAX_TRIALS
    ) -> None:
        if not isinstance(verb, VerbDef):
            raise GrammarDefinitionError(
                f"Expected a VerbDef, got {type(verb).__name__}"
            )
        if max_trials is not None and max_trials < 1:
            raise GrammarDefinitionError("max_trials must be a positive integer")
        validate_grammar(verb)
        self.verb: VerbDef = verb
        self.max_trials: int | None = max_trials
        logger.debug("Registered grammar: %s", self)

    @property
    def name(self) -> str:
        return self.verb.name

    @property
    def aliases(self) -> list[str]:
        return list(self.verb.aliases)

    def parse(self, tokens: Sequence[str] | None = None) -> ParseResult:
        """
        Parse the tokens that follow the command name.

        Raises:
            UserInputError: If the tokens do not satisfy the grammar.
        """
        return parse_tokens(
            self.verb, list(tokens or []), self.max_trials, validate=False
        )

    def parse_command(self, tokens: Sequence[str]) -> ParseResult:
        """
        Parse a full command line whose first token is the command name.

        Raises:
            UserInputError: If the name does not match or the tokens do not
                satisfy the grammar.
        """
        return parse_command(self.verb, list(tokens), self.max_trials, validate=False)

    def check(self, tokens: Sequence[str]) -> UserInputError | None:
        """Return the error `parse()` would raise for `tokens`, or None."""
        try:
            self.parse(tokens)
        except UserInputError as error:
            return error
        return None

    def __str__(self) -> str:
        verbs = list(iter_verbs(self.verb))
        options = sum(len(verb.options) for verb in verbs)
        unnamed = sum(1 for verb in verbs if not verb.is_named)
        return (
            f"CommandParser(name={self.verb.name!r}, verbs={len(verbs)}, "
            f"unnamed={unnamed}, options={options}, max_trials={self.max_trials})"
        )

    def __repr__(self) -> str:
        return str(self)
