"""
verbtree

Copyright (c) 2025 rtj.dev LLC.
Licensed under the MIT License. See LICENSE file for details.
"""

from .command_parser import CommandParser
from .engine import DEFAULT_MAX_TRIALS, parse_command, parse_tokens
from .grammar import ArgumentDef, OptionDef, VerbDef, validate_grammar
from .result import ParseResult
from .token_stream import TokenStream

__all__ = [
    "ArgumentDef",
    "CommandParser",
    "DEFAULT_MAX_TRIALS",
    "OptionDef",
    "ParseResult",
    "TokenStream",
    "VerbDef",
    "parse_command",
    "parse_tokens",
    "validate_grammar",
]
