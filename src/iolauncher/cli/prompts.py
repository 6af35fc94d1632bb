"""User prompts for iolauncher.

Prompt providers answer the resolver's questions about missing fields.
"""

from __future__ import annotations

import click

from ..errors import InputClosedError, MissingValueError


class ClickPrompter:
    """Reads answers from standard input via click.prompt."""

    def ask(self, text: str, *, flag: str) -> str:
        try:
            # default="" lets an empty answer through so the resolver can report it
            return click.prompt(text, default="", show_default=False, prompt_suffix=": ")
        except click.Abort as e:
            raise InputClosedError(f"Input closed while prompting for {flag}") from e


class NonInteractivePrompter:
    """Refuses to prompt; used with --no-input."""

    def ask(self, text: str, *, flag: str) -> str:
        raise MissingValueError(
            f"A valid value for {flag} is required (prompting is disabled with --no-input)"
        )
