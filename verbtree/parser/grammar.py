# verbtree — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines the declarative grammar model consumed by the parse engine.

A grammar is a tree of `VerbDef` nodes. Each verb owns ordered positional
`ArgumentDef`s, a list of `OptionDef`s (flags, optionally carrying their own
arguments) and child verbs. A verb with an empty `name` is *unnamed*: it is
never selected by a token, only by successfully trial-parsing against it.

Example:
    mv = VerbDef(
        id="mv",
        name="mv",
        args=[
            ArgumentDef("src", string()),
            ArgumentDef("dst", string()),
        ],
        options=[OptionDef("force", names=("--force", "-f"))],
    )

Grammars are authored once by the host application and treated as immutable,
so one tree can be shared by any number of concurrent parses. `VerbDef`
compares and hashes by identity; this lets the engine track visited verbs in
a set and terminate on accidentally cyclic grammars.

`validate_grammar()` checks the consistency rules once, at registration time,
and raises `GrammarDefinitionError` on the first defect it finds.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Hashable, Iterator, Sequence

from verbtree.exceptions import GrammarDefinitionError
from verbtree.parser.resolvers import TypeResolver


@dataclass
class ArgumentDef:
    """
    A positional or option argument.

    Attributes:
        id (Hashable): Key the parsed value is bound under in the result.
        resolver (TypeResolver): Converts tokens into the value.
        optional (bool): True if the argument may be omitted.
        default (Any): Value bound when an optional argument is omitted.
        help (str): Free-form description, carried for host tooling.
    """

    id: Hashable
    resolver: TypeResolver
    optional: bool = False
    default: Any = None
    help: str = ""


@dataclass
class OptionDef:
    """
    A flag matched by one or more names (`--long` and/or `-s`).

    Attributes:
        id (Hashable): Key of the occurrence counter in the result.
        names (tuple[str, ...]): Long and short names matching this option.
        args (list[ArgumentDef]): The option's own operands, in order.
        help (str): Free-form description, carried for host tooling.
    """

    id: Hashable
    names: tuple[str, ...] = ()
    args: list[ArgumentDef] = field(default_factory=list)
    help: str = ""

    def __post_init__(self) -> None:
        self.names = tuple(self.names)

    @property
    def long_names(self) -> list[str]:
        return [name for name in self.names if name.startswith("--")]

    @property
    def short_names(self) -> list[str]:
        return [name[1] for name in self.names if is_short_name(name)]

    @property
    def takes_arguments(self) -> bool:
        return bool(self.args)


@dataclass(eq=False)
class VerbDef:
    """
    A command or sub-command.

    Attributes:
        id (Hashable): Key the verb's nested result is bound under.
        name (str): Token selecting this verb. Empty for an unnamed verb.
        aliases (list[str]): Additional tokens selecting this verb.
        args (list[ArgumentDef]): Positional arguments, in order.
        options (list[OptionDef]): Options accepted by this verb.
        subverbs (list[VerbDef]): Child verbs.
        help (str): Free-form description, carried for host tooling.
    """

    id: Hashable
    name: str = ""
    aliases: list[str] = field(default_factory=list)
    args: list[ArgumentDef] = field(default_factory=list)
    options: list[OptionDef] = field(default_factory=list)
    subverbs: list[VerbDef] = field(default_factory=list)
    help: str = ""

    @property
    def is_named(self) -> bool:
        return bool(self.name)

    def matches(self, token: str | None) -> bool:
        """True if `token` selects this named verb by name or alias."""
        if not self.is_named or token is None:
            return False
        return token == self.name or token in self.aliases

    def all_args_optional(self) -> bool:
        return all(arg.optional for arg in self.args)

    def named_subverbs(self) -> list[VerbDef]:
        return [verb for verb in self.subverbs if verb.is_named]

    def unnamed_subverbs(self) -> list[VerbDef]:
        return [verb for verb in self.subverbs if not verb.is_named]

    def __repr__(self) -> str:
        return (
            f"VerbDef(id={self.id!r}, name={self.name!r}, args={len(self.args)}, "
            f"options={len(self.options)}, subverbs={len(self.subverbs)})"
        )


def is_short_name(name: str) -> bool:
    return len(name) == 2 and name[0] == "-" and name[1] != "-"


def is_long_name(name: str) -> bool:
    return len(name) > 2 and name.startswith("--")


def find_option(options: Sequence[OptionDef], name: str) -> OptionDef | None:
    """Return the first option matching `name` exactly (`--long` or `-s`)."""
    return next((option for option in options if name in option.names), None)


def iter_verbs(root: VerbDef) -> Iterator[VerbDef]:
    """Yield every verb reachable from `root` once, tolerating cycles."""
    seen: set[VerbDef] = set()
    pending = [root]
    while pending:
        verb = pending.pop()
        if verb in seen:
            continue
        seen.add(verb)
        yield verb
        pending.extend(reversed(verb.subverbs))


def check_argument_order(args: Sequence[ArgumentDef], owner: str) -> None:
    """Raise if a required argument follows an optional one."""
    seen_optional = False
    for arg in args:
        if arg.optional:
            seen_optional = True
        elif seen_optional:
            raise GrammarDefinitionError(
                f"{owner}: required argument '{arg.id}' must not come after "
                "optional ones"
            )


def _check_id(value: Hashable, owner: str) -> None:
    if value is None or value == "":
        raise GrammarDefinitionError(f"{owner}: id must not be empty")


def _validate_arguments(args: Sequence[ArgumentDef], owner: str) -> None:
    for arg in args:
        _check_id(arg.id, owner)
        if not isinstance(arg.resolver, TypeResolver):
            raise GrammarDefinitionError(
                f"{owner}: argument '{arg.id}' needs a TypeResolver, got "
                f"{type(arg.resolver).__name__}"
            )
    check_argument_order(args, owner)


def _validate_options(verb: VerbDef, owner: str) -> None:
    seen: dict[str, OptionDef] = {}
    for option in verb.options:
        _check_id(option.id, owner)
        if not option.names:
            raise GrammarDefinitionError(f"{owner}: option '{option.id}' has no names")
        for name in option.names:
            if not isinstance(name, str) or not (
                is_long_name(name) or is_short_name(name)
            ):
                raise GrammarDefinitionError(
                    f"{owner}: option name {name!r} must be '--long' or a single "
                    "character like '-s'"
                )
            if "=" in name:
                raise GrammarDefinitionError(
                    f"{owner}: option name {name!r} must not contain '='"
                )
            if name in seen:
                raise GrammarDefinitionError(
                    f"{owner}: option name '{name}' is already used by option "
                    f"'{seen[name].id}'"
                )
            seen[name] = option
        _validate_arguments(option.args, f"{owner} option '{option.id}'")


def _validate_subverb_names(verb: VerbDef, owner: str) -> None:
    seen: dict[str, VerbDef] = {}
    for subverb in verb.named_subverbs():
        for name in (subverb.name, *subverb.aliases):
            if name in seen and seen[name] is not subverb:
                raise GrammarDefinitionError(
                    f"{owner}: subcommand name '{name}' is used by both "
                    f"'{seen[name].id}' and '{subverb.id}'"
                )
            seen[name] = subverb


def validate_grammar(root: VerbDef) -> None:
    """
    Check a grammar tree for authoring defects.

    Raises:
        GrammarDefinitionError: On an empty id, a required argument after an
            optional one, a malformed or duplicate option name, or two named
            sibling subcommands sharing a name or alias.
    """
    for verb in iter_verbs(root):
        owner = f"verb '{verb.id}'"
        _check_id(verb.id, owner)
        _validate_arguments(verb.args, owner)
        _validate_options(verb, owner)
        _validate_subverb_names(verb, owner)
