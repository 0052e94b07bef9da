"""
verbtree

Copyright (c) 2025 rtj.dev LLC.
Licensed under the MIT License. See LICENSE file for details.
"""

import asyncio
import logging
import sys
from argparse import REMAINDER, ArgumentParser, Namespace
from typing import Sequence

from rich.pretty import Pretty

from verbtree.config import load_grammar
from verbtree.console import console
from verbtree.exceptions import GrammarDefinitionError, UserInputError
from verbtree.registry import GrammarRegistry
from verbtree.shell import run_shell
from verbtree.utils import setup_logging


def get_root_parser(prog: str | None = "verbtree") -> ArgumentParser:
    parser = ArgumentParser(
        prog=prog,
        description="verbtree - parse command lines against declarative grammars.",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging."
    )
    parser.add_argument(
        "--log-mode", choices=["cli", "json"], default=None, help="Log output format."
    )
    parser.add_argument("--log-file", default=None, help="Also write logs to a file.")

    subparsers = parser.add_subparsers(dest="command", required=True)

    check_parser = subparsers.add_parser(
        "check", help="Validate a grammar file and list its commands."
    )
    check_parser.add_argument("grammar", help="Path to a YAML or TOML grammar file.")

    parse_parser = subparsers.add_parser(
        "parse", help="Parse one command line against a grammar file."
    )
    parse_parser.add_argument("grammar", help="Path to a YAML or TOML grammar file.")
    parse_parser.add_argument(
        "tokens", nargs=REMAINDER, help="Command name followed by its arguments."
    )

    shell_parser = subparsers.add_parser(
        "shell", help="Interactively parse command lines against a grammar file."
    )
    shell_parser.add_argument("grammar", help="Path to a YAML or TOML grammar file.")
    return parser


def load(path: str) -> GrammarRegistry | None:
    try:
        return load_grammar(path)
    except (FileNotFoundError, ValueError, GrammarDefinitionError) as error:
        console.print(f"[red]grammar error:[/] {error}", highlight=False)
        return None


def run(args: Namespace) -> int:
    registry = load(args.grammar)
    if registry is None:
        return 2

    if args.command == "check":
        for parser in registry:
            console.print(str(parser), highlight=False)
        return 0

    if args.command == "parse":
        tokens = args.tokens
        if tokens and tokens[0] == "--":
            tokens = tokens[1:]
        try:
            _, result = registry.parse(tokens)
        except UserInputError as error:
            console.print(f"[red]error:[/] {error.message}", highlight=False)
            return 1
        console.print(Pretty(result.to_dict()))
        return 0

    asyncio.run(run_shell(registry))
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = get_root_parser().parse_args(argv)
    setup_logging(
        mode=args.log_mode,
        log_filename=args.log_file,
        console_log_level=logging.DEBUG if args.verbose else logging.WARNING,
    )
    return run(args)


if __name__ == "__main__":
    sys.exit(main())
