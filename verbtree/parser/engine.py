# verbtree — (c) 2025 rtj.dev LLC — MIT Licensed
"""
The recursive-descent engine that parses a `TokenStream` against a `VerbDef`.

The engine is a set of stateless functions over an explicitly passed stream
and result record. Per verb it scans options, positionals and finally one
sub-verb:

- Tokens starting with `-` are options (`--long`, `--long=value`, `-abc`,
  `-oVALUE`) until a bare `--` switches option recognition off for the rest of
  the verb's tokens.
- Other tokens fill the verb's positionals in declaration order.
- Once positionals are exhausted the next token selects a named sub-verb by
  name or alias. If none matches, the unnamed sub-verbs are trial-parsed in
  order and the first that parses the remaining tokens wins.
- When tokens run out, the remaining optional positionals get their defaults
  and, if no sub-verb was selected, the first unnamed sub-verb that needs no
  input is filled from defaults too.

Backtracking happens in exactly two places: trailing optional option
arguments and unnamed sub-verb trials. Both run as an explicit `attempt()`
under a stream snapshot and inspect the returned `Attempt` to commit or roll
back. Everywhere else a `UserInputError` aborts the parse.

Entry points:
- parse_tokens(verb, tokens): tokens after the command name.
- parse_command(verb, tokens): tokens starting with the command name.
"""
from __future__ import annotations

import re
from copy import deepcopy
from dataclasses import dataclass
from typing import Any, Callable, Collection, Hashable, Sequence

from verbtree.exceptions import (
    SnapshotStackError,
    TrialLimitExceeded,
    UserInputError,
)
from verbtree.logger import logger
from verbtree.parser.grammar import (
    ArgumentDef,
    OptionDef,
    VerbDef,
    check_argument_order,
    find_option,
    is_short_name,
    validate_grammar,
)
from verbtree.parser.result import ParseResult
from verbtree.parser.token_stream import TokenStream

DEFAULT_MAX_TRIALS = 128

_NEGATIVE_NUMBER_RE = re.compile(
    r"-(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?"
)
_NEGATIVE_SPECIAL_RE = re.compile(r"-(?:inf|nan)")


@dataclass
class Attempt:
    """Outcome of a speculative parse step."""

    value: Any = None
    error: UserInputError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class TrialBudget:
    """
    Bounds unnamed sub-verb trials for one parse invocation.

    `limit` caps the total number of trials. Re-entering the same verb at the
    same stream position while it is still being tried is refused, which stops
    cyclic unnamed sub-verbs from recursing without consuming input.
    """

    def __init__(self, limit: int | None = DEFAULT_MAX_TRIALS) -> None:
        self.limit = limit
        self.spent = 0
        self._active: set[tuple[int, int]] = set()

    def spend(self) -> None:
        self.spent += 1
        if self.limit is not None and self.spent > self.limit:
            raise TrialLimitExceeded(
                f"too many ambiguous subcommand trials (limit {self.limit})"
            )

    def enter(self, verb: VerbDef, position: int) -> bool:
        key = (id(verb), position)
        if key in self._active:
            return False
        self._active.add(key)
        return True

    def leave(self, verb: VerbDef, position: int) -> None:
        self._active.discard((id(verb), position))


def attempt(stream: TokenStream, step: Callable[..., Any], *args: Any) -> Attempt:
    """
    Run `step(*args)` under a stream snapshot.

    On success the snapshot is committed and the step's return value is kept.
    On a `UserInputError` the stream is rolled back and the error is returned
    in the `Attempt` instead of being raised. `TrialLimitExceeded` and any
    other exception roll back and propagate.
    """
    stream.snapshot()
    try:
        value = step(*args)
    except TrialLimitExceeded:
        stream.rollback()
        raise
    except UserInputError as error:
        stream.rollback()
        return Attempt(error=error)
    except Exception:
        stream.rollback()
        raise
    stream.commit()
    return Attempt(value=value)


def is_option_token(token: str, options: Sequence[OptionDef] = ()) -> bool:
    """
    True if `token` has the shape of an option.

    A bare `-` is a positional. Negative numbers such as `-5` are positionals
    unless an option in scope has a digit as its short name. `-inf` and `-nan`
    are positionals unless their first letter is a short option in scope.
    """
    if len(token) < 2 or token[0] != "-":
        return False
    if _NEGATIVE_SPECIAL_RE.fullmatch(token):
        return find_option(options, token[:2]) is not None
    if _NEGATIVE_NUMBER_RE.fullmatch(token):
        return any(
            name[1].isdigit()
            for option in options
            for name in option.names
            if is_short_name(name)
        )
    return True


def parse_argument(
    arg_def: ArgumentDef, stream: TokenStream, result: ParseResult
) -> None:
    """Resolve one argument and bind it under its id."""
    if stream.is_end and not arg_def.optional:
        raise UserInputError("insufficient arguments")
    result.set(arg_def.id, arg_def.resolver.parse(stream))


def _fill_argument_defaults(args: Sequence[ArgumentDef], result: ParseResult) -> None:
    for arg_def in args:
        result.set(arg_def.id, deepcopy(arg_def.default))


def parse_option_arguments(
    arg_defs: Sequence[ArgumentDef],
    stream: TokenStream,
    result: ParseResult,
    adjacent: bool = False,
    option_name: str = "",
    options: Sequence[OptionDef] = (),
) -> None:
    """
    Parse an option's own arguments.

    Required arguments are parsed unconditionally. Optional ones are tried in
    turn; the first that fails is rolled back and it and every argument after
    it receive their defaults. When `adjacent` is set (`--opt=val`, `-oVAL`)
    the first argument is mandatory whatever its declared optionality. An
    optional argument never takes a token that is an option in `options`.
    """
    if adjacent and not arg_defs:
        raise UserInputError(f"option {option_name} does not need any argument")

    for index, arg_def in enumerate(arg_defs):
        if not arg_def.optional or (adjacent and index == 0):
            parse_argument(arg_def, stream, result)
            continue

        token = stream.current
        if token is not None and is_option_token(token, options):
            outcome = Attempt(error=UserInputError(f"{token} is an option"))
        else:
            outcome = attempt(stream, parse_argument, arg_def, stream, result)
        if not outcome.ok:
            logger.debug(
                "Optional argument '%s' of %s not matched: %s",
                arg_def.id,
                option_name,
                outcome.error,
            )
            _fill_argument_defaults(arg_defs[index:], result)
            return


def parse_long_option(
    options: Sequence[OptionDef], stream: TokenStream, result: ParseResult
) -> None:
    """Parse `--name` or `--name=value` at the cursor."""
    token = stream.current
    assert token is not None, "parse_long_option called at end of stream"
    name, separator, value = token.partition("=")

    stream.replace(name)
    stream.consume()
    option = find_option(options, name)
    if option is None:
        raise UserInputError(f"unknown option: {name}")

    adjacent = bool(separator)
    if adjacent:
        stream.insert(value)

    result.count(option.id)
    parse_option_arguments(option.args, stream, result, adjacent, name, options)


def parse_short_option(
    options: Sequence[OptionDef], stream: TokenStream, result: ParseResult
) -> None:
    """
    Parse a cluster of short options such as `-abc` or `-oVALUE`.

    Flags without arguments only count. The first option that takes arguments
    claims the rest of the token (if any) as its adjacent value and ends the
    cluster.
    """
    token = stream.consume()
    assert token is not None, "parse_short_option called at end of stream"

    for index in range(1, len(token)):
        name = f"-{token[index]}"
        option = find_option(options, name)
        if option is None:
            raise UserInputError(f"unknown option: {name}")

        result.count(option.id)
        if not option.takes_arguments:
            continue

        remainder = token[index + 1 :]
        if remainder:
            stream.insert(remainder)
        parse_option_arguments(
            option.args, stream, result, bool(remainder), name, options
        )
        break


def _try_unnamed_subverb(
    subverb: VerbDef,
    stream: TokenStream,
    options: Sequence[OptionDef],
    budget: TrialBudget,
) -> ParseResult:
    position = stream.position
    if not budget.enter(subverb, position):
        raise UserInputError(f"unknown subcommand: {stream.current}")
    try:
        return parse_verb(subverb, stream, options, budget)
    finally:
        budget.leave(subverb, position)


def parse_subverb(
    verb: VerbDef,
    stream: TokenStream,
    result: ParseResult,
    options: Sequence[OptionDef] = (),
    budget: TrialBudget | None = None,
) -> VerbDef:
    """
    Select and parse the sub-verb starting at the cursor.

    Named sub-verbs win on an exact name or alias match. Otherwise the unnamed
    sub-verbs are trial-parsed in declaration order, inheriting `options`.
    If every trial fails, the first candidate's error is raised.

    Returns:
        VerbDef: The sub-verb whose nested result was bound.
    """
    budget = budget or TrialBudget()
    token = stream.current

    for subverb in verb.named_subverbs():
        if subverb.matches(token):
            stream.consume()
            result.set(subverb.id, parse_verb(subverb, stream, (), budget))
            return subverb

    candidates = verb.unnamed_subverbs()
    if not candidates:
        raise UserInputError(f"unknown subcommand: {token}")

    first_error: UserInputError | None = None
    for subverb in candidates:
        budget.spend()
        outcome = attempt(
            stream, _try_unnamed_subverb, subverb, stream, options, budget
        )
        if outcome.ok:
            logger.debug("Unnamed subcommand '%s' matched at %r", subverb.id, token)
            result.set(subverb.id, outcome.value)
            return subverb
        logger.debug(
            "Unnamed subcommand '%s' rejected %r: %s", subverb.id, token, outcome.error
        )
        if first_error is None:
            first_error = outcome.error

    assert first_error is not None
    raise first_error


def fill_verb_defaults(
    verb: VerbDef,
    result: ParseResult,
    arg_index: int,
    fill_subverbs: bool,
    visited: set[VerbDef],
) -> None:
    """
    Bind defaults once the tokens for `verb` have run out.

    Remaining positionals must all be optional. If `fill_subverbs` is set, the
    first unnamed sub-verb whose positionals are all optional is filled from
    defaults as well. `visited` guards against cyclic grammars.
    """
    visited.add(verb)
    check_argument_order(verb.args, f"verb '{verb.id}'")

    remaining = verb.args[arg_index:]
    if any(not arg_def.optional for arg_def in remaining):
        raise UserInputError("insufficient arguments")
    _fill_argument_defaults(remaining, result)

    if fill_subverbs:
        for subverb in verb.unnamed_subverbs():
            if not subverb.all_args_optional():
                continue
            if subverb not in visited:
                logger.debug("Filling defaults of unnamed subcommand '%s'", subverb.id)
                sub_result = ParseResult()
                fill_verb_defaults(subverb, sub_result, 0, True, visited)
                fill_option_defaults(subverb, sub_result)
                sub_result.set(subverb.id, True)
                result.set(subverb.id, sub_result)
            break


def _unnamed_record_keys(verb: VerbDef, result: ParseResult) -> set[Hashable]:
    """Keys bound in the records of unnamed sub-verbs nested under `verb`."""
    keys: set[Hashable] = set()
    for subverb in verb.unnamed_subverbs():
        record = result.get(subverb.id)
        if isinstance(record, ParseResult):
            keys.update(record.keys())
            keys |= _unnamed_record_keys(subverb, record)
    return keys


def fill_option_defaults(
    verb: VerbDef, result: ParseResult, used: Collection[Hashable] = ()
) -> None:
    """
    Bind absent options of `verb` with a zero count and argument defaults.

    Options whose id is in `used` occurred inside an unnamed sub-verb and are
    left unbound here.
    """
    for option in verb.options:
        if option.id in used:
            continue
        for arg_def in option.args:
            if not result.has(arg_def.id):
                result.set(arg_def.id, deepcopy(arg_def.default))
        if not result.has(option.id):
            result.set(option.id, 0)


def parse_verb(
    verb: VerbDef,
    stream: TokenStream,
    inherited_options: Sequence[OptionDef] = (),
    budget: TrialBudget | None = None,
) -> ParseResult:
    """
    Parse the remaining tokens of `stream` against `verb`.

    Args:
        verb (VerbDef): The verb to parse.
        stream (TokenStream): Positioned after the verb's own name, if any.
        inherited_options (Sequence[OptionDef]): Options of enclosing verbs,
            passed down to unnamed sub-verbs.
        budget (TrialBudget | None): Shared trial budget of this invocation.

    Returns:
        ParseResult: The verb's record, with `verb.id` bound to True.

    Raises:
        UserInputError: If the tokens do not satisfy the grammar.
    """
    budget = budget or TrialBudget()
    result = ParseResult()
    scope: list[OptionDef] = [*verb.options, *inherited_options]
    arg_index = 0
    matched_subverb = False
    stop_options = False

    while not stream.is_end:
        token = stream.current
        assert token is not None

        if not stop_options and is_option_token(token, scope):
            if token == "--":
                stream.consume()
                stop_options = True
            elif token.startswith("--"):
                parse_long_option(scope, stream, result)
            else:
                parse_short_option(scope, stream, result)
            continue

        if arg_index < len(verb.args):
            parse_argument(verb.args[arg_index], stream, result)
            arg_index += 1
            continue

        if verb.subverbs:
            parse_subverb(verb, stream, result, scope, budget)
            matched_subverb = True
            break

        raise UserInputError(f"too many arguments: {token}")

    fill_verb_defaults(verb, result, arg_index, not matched_subverb, set())
    fill_option_defaults(verb, result, _unnamed_record_keys(verb, result))
    result.set(verb.id, True)
    return result


def _run(
    verb: VerbDef, stream: TokenStream, max_trials: int | None
) -> ParseResult:
    result = parse_verb(verb, stream, (), TrialBudget(max_trials))
    if stream.depth:
        raise SnapshotStackError(f"unbalanced snapshot stack: {stream!r}")
    return result


def parse_tokens(
    verb: VerbDef,
    tokens: Sequence[str],
    max_trials: int | None = DEFAULT_MAX_TRIALS,
    validate: bool = True,
) -> ParseResult:
    """
    Parse tokens that follow the command name.

    The grammar is validated first unless `validate` is False (the caller
    validated it at registration), so a malformed grammar raises
    `GrammarDefinitionError` before any token is consumed.
    """
    if validate:
        validate_grammar(verb)
    return _run(verb, TokenStream(tokens), max_trials)


def parse_command(
    verb: VerbDef,
    tokens: Sequence[str],
    max_trials: int | None = DEFAULT_MAX_TRIALS,
    validate: bool = True,
) -> ParseResult:
    """
    Parse a full command line whose first token is the command name.

    For a named verb the first token must be its name or one of its aliases.
    """
    if validate:
        validate_grammar(verb)
    stream = TokenStream(tokens)
    name = stream.consume()
    if name is None:
        raise UserInputError("missing command name")
    if verb.is_named and not verb.matches(name):
        raise UserInputError(f"unknown command: {name}")
    return _run(verb, stream, max_trials)
