# verbtree — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Interactive shell for trying command lines against a loaded grammar.

Each line is split with `shlex`, parsed through a `GrammarRegistry` and the
resulting record is pretty-printed. `GrammarValidator` plugs the same parse
into Prompt Toolkit so a line that does not satisfy the grammar is rejected
with the parser's own message before it is accepted.
"""
from __future__ import annotations

import shlex

from prompt_toolkit import PromptSession
from prompt_toolkit.document import Document
from prompt_toolkit.validation import ValidationError, Validator
from rich.console import Console
from rich.pretty import Pretty

from verbtree.console import console as default_console
from verbtree.exceptions import UserInputError
from verbtree.logger import logger
from verbtree.registry import GrammarRegistry

EXIT_WORDS = {"exit", "quit"}


def split_line(text: str) -> list[str]:
    """Tokenize a console line. Raises UserInputError on unbalanced quotes."""
    try:
        return shlex.split(text)
    except ValueError as error:
        raise UserInputError(f"could not split input: {error}") from error


class GrammarValidator(Validator):
    """Rejects lines the registry cannot parse, showing the parser's message."""

    def __init__(self, registry: GrammarRegistry) -> None:
        self.registry = registry
        super().__init__()

    def validate(self, document: Document) -> None:
        text = document.text.strip()
        if not text or text in EXIT_WORDS:
            return
        try:
            self.registry.parse(split_line(text))
        except UserInputError as error:
            raise ValidationError(
                message=error.message, cursor_position=len(document.text)
            ) from error


def run_line(
    registry: GrammarRegistry, text: str, console: Console | None = None
) -> bool:
    """Parse one line and print its result. Returns False if it failed."""
    console = console or default_console
    try:
        verb, result = registry.parse(split_line(text))
    except UserInputError as error:
        console.print(f"[red]error:[/] {error.message}", highlight=False)
        return False
    logger.debug("Parsed '%s': %r", verb.id, result)
    console.print(Pretty(result.to_dict()))
    return True


async def run_shell(
    registry: GrammarRegistry,
    prompt: str = "verbtree > ",
    session: PromptSession | None = None,
    console: Console | None = None,
) -> None:
    """Read, parse and print command lines until EOF or an exit word."""
    console = console or default_console
    session = session or PromptSession(
        message=prompt,
        validator=GrammarValidator(registry),
        validate_while_typing=False,
    )
    console.print(f"Commands: {', '.join(registry.names())}. Type 'exit' to leave.")
    while True:
        try:
            text = await session.prompt_async()
        except (EOFError, KeyboardInterrupt):
            break
        text = text.strip()
        if not text:
            continue
        if text in EXIT_WORDS:
            break
        run_line(registry, text, console)
