"""
verbtree

Copyright (c) 2025 rtj.dev LLC.
Licensed under the MIT License. See LICENSE file for details.
"""

from .exceptions import GrammarDefinitionError, UserInputError, VerbtreeError
from .parser import (
    ArgumentDef,
    CommandParser,
    OptionDef,
    ParseResult,
    VerbDef,
    parse_command,
    parse_tokens,
)
from .registry import GrammarRegistry

__all__ = [
    "ArgumentDef",
    "CommandParser",
    "GrammarDefinitionError",
    "GrammarRegistry",
    "OptionDef",
    "ParseResult",
    "UserInputError",
    "VerbDef",
    "VerbtreeError",
    "parse_command",
    "parse_tokens",
]
