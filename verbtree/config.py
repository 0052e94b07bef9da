# verbtree — (c) 2025 rtj.dev LLC — MIT Licensed
"""config.py
Grammar loader for verbtree command definitions.

Grammars can be written in YAML or TOML. The file holds an optional
`settings` table and a list of `commands`, each a verb record:

    settings:
      max_trials: 64
    commands:
      - id: mv
        name: mv
        aliases: [move]
        args:
          - {id: src}
          - {id: dst}
        options:
          - id: force
            names: ["--force", "-f"]
      - id: calc
        name: calc
        subverbs:
          - id: add
            name: add
            args:
              - {id: values, type: variadic, of: float}
          - id: number
            args:
              - {id: value, type: float}

Argument `type` names are looked up with `verbtree.parser.resolvers.get_resolver`;
`choices` configures `choice` arguments and `of` the element type of
`variadic` ones.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any

import toml
import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from verbtree.exceptions import GrammarDefinitionError
from verbtree.logger import logger
from verbtree.parser.engine import DEFAULT_MAX_TRIALS
from verbtree.parser.grammar import ArgumentDef, OptionDef, VerbDef
from verbtree.parser.resolvers import TypeResolver, get_resolver
from verbtree.registry import GrammarRegistry


class RawArgument(BaseModel):
    """Raw positional or option argument record."""

    model_config = ConfigDict(extra="forbid")

    id: str
    type: str = "string"
    optional: bool = False
    default: Any = None
    choices: list[str] | None = None
    of: str | None = None
    help: str = ""

    @model_validator(mode="after")
    def validate_type_settings(self) -> RawArgument:
        if self.choices is not None and self.type not in ("choice", "enum"):
            raise ValueError(
                f"'choices' is only valid for choice arguments ({self.id})"
            )
        if self.type in ("choice", "enum") and not self.choices:
            raise ValueError(f"choice argument '{self.id}' needs 'choices'")
        if self.of is not None and self.type not in ("variadic", "rest"):
            raise ValueError(
                f"'of' is only valid for variadic arguments ({self.id})"
            )
        return self

    def build_resolver(self) -> TypeResolver:
        params: dict[str, Any] = {}
        if self.choices is not None:
            params["choices"] = self.choices
        if self.of is not None:
            params["of"] = get_resolver(self.of)
        return get_resolver(self.type, **params)

    def to_definition(self) -> ArgumentDef:
        return ArgumentDef(
            id=self.id,
            resolver=self.build_resolver(),
            optional=self.optional,
            default=self.default,
            help=self.help,
        )


class RawOption(BaseModel):
    """Raw option record."""

    model_config = ConfigDict(extra="forbid")

    id: str
    names: list[str] = Field(min_length=1)
    args: list[RawArgument] = Field(default_factory=list)
    help: str = ""

    def to_definition(self) -> OptionDef:
        return OptionDef(
            id=self.id,
            names=tuple(self.names),
            args=[arg.to_definition() for arg in self.args],
            help=self.help,
        )


class RawVerb(BaseModel):
    """Raw verb record. An empty `name` declares an unnamed verb."""

    model_config = ConfigDict(extra="forbid")

    id: str
    name: str = ""
    aliases: list[str] = Field(default_factory=list)
    args: list[RawArgument] = Field(default_factory=list)
    options: list[RawOption] = Field(default_factory=list)
    subverbs: list[RawVerb] = Field(default_factory=list)
    help: str = ""

    def to_definition(self) -> VerbDef:
        return VerbDef(
            id=self.id,
            name=self.name,
            aliases=list(self.aliases),
            args=[arg.to_definition() for arg in self.args],
            options=[option.to_definition() for option in self.options],
            subverbs=[subverb.to_definition() for subverb in self.subverbs],
            help=self.help,
        )


class ParserSettings(BaseModel):
    """Settings shared by every grammar in a file."""

    model_config = ConfigDict(extra="forbid")

    max_trials: int | None = Field(default=DEFAULT_MAX_TRIALS, ge=1)


class GrammarConfig(BaseModel):
    """Top-level grammar file model."""

    model_config = ConfigDict(extra="forbid")

    settings: ParserSettings = Field(default_factory=ParserSettings)
    commands: list[RawVerb] = Field(default_factory=list)

    def to_registry(self) -> GrammarRegistry:
        registry = GrammarRegistry(max_trials=self.settings.max_trials)
        for command in self.commands:
            registry.register(command.to_definition())
        return registry


def load_config(raw_config: Any) -> GrammarConfig:
    """
    Validate an already-decoded grammar mapping.

    Raises:
        GrammarDefinitionError: If the mapping does not describe a grammar.
    """
    if not isinstance(raw_config, dict):
        raise GrammarDefinitionError(
            "Grammar file must contain a mapping with a list of commands.\n"
            "Example:\n"
            "commands:\n"
            "  - id: 'echo'\n"
            "    name: 'echo'\n"
            "    args:\n"
            "      - id: 'text'"
        )
    try:
        return GrammarConfig.model_validate(raw_config)
    except ValidationError as error:
        raise GrammarDefinitionError(
            f"Invalid grammar definition:\n{error}"
        ) from error


def load_grammar(file_path: Path | str) -> GrammarRegistry:
    """
    Load grammars from a YAML or TOML file and register them.

    Args:
        file_path (Path | str): Path to the grammar file.

    Returns:
        GrammarRegistry: A registry holding every command of the file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file format is unsupported.
        GrammarDefinitionError: If the content is not a valid grammar.
    """
    if isinstance(file_path, (str, Path)):
        path = Path(file_path)
    else:
        raise TypeError("file_path must be a string or Path object.")

    if not path.is_file():
        raise FileNotFoundError(f"No such grammar file: {file_path}")

    suffix = path.suffix
    with path.open("r", encoding="UTF-8") as grammar_file:
        try:
            if suffix in (".yaml", ".yml"):
                raw_config = yaml.safe_load(grammar_file)
            elif suffix == ".toml":
                raw_config = toml.load(grammar_file)
            else:
                raise ValueError(f"Unsupported grammar format: {suffix}")
        except (yaml.YAMLError, toml.TomlDecodeError) as error:
            raise GrammarDefinitionError(
                f"Could not read grammar file {path}:\n{error}"
            ) from error

    registry = load_config(raw_config).to_registry()
    logger.debug("Loaded %d command(s) from %s", len(registry), path)
    return registry
