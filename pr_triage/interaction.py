"""Terminal interaction for the review loop: prompts and the external editor."""

from typing import Protocol

import click
from rich.console import Console

from pr_triage.messages import action_prompt, invalid_choice_message

ACTION_APPROVE = "a"
ACTION_OPEN = "o"
ACTION_SKIP = "s"
ACTION_IGNORE = "i"
ACTION_AI = "A"

CHOICE_YES = "y"
CHOICE_NO = "n"
CHOICE_EDIT = "e"


class Editor(Protocol):
    """Lets the user rewrite a piece of text."""

    def edit(self, text: str) -> str | None:
        """Return the edited text, or None if the edit was aborted or left empty."""
        ...


class ClickEditor:
    """Editor backed by ``$VISUAL``/``$EDITOR`` through click."""

    def edit(self, text: str) -> str | None:
        """Open the text in the user's editor."""
        edited = click.edit(text)
        if edited is None or not edited.strip():
            return None
        return edited.strip()


class Prompter:
    """Asks the user what to do with each PR and each AI suggestion."""

    def __init__(self, console: Console, editor: Editor | None = None) -> None:
        """Initialize the prompter.

        Args:
            console: Console used for feedback messages
            editor: Editor used for the "edit" choice (defaults to ClickEditor)

        """
        self.console = console
        self.editor = editor or ClickEditor()

    def choose_action(self, *, ai_available: bool) -> str:
        """Ask for the action to take on a PR until a valid answer is given.

        Answers are case-sensitive: ``A`` (AI review, only when available) is
        distinct from ``a`` (approve).

        Returns:
            One of the ACTION_* constants

        """
        valid_actions = [ACTION_APPROVE, ACTION_OPEN, ACTION_SKIP, ACTION_IGNORE]
        if ai_available:
            valid_actions.append(ACTION_AI)

        while True:
            answer = click.prompt(
                action_prompt(ai_available=ai_available),
                default="",
                show_default=False,
            ).strip()
            if answer in valid_actions:
                return answer
            self.console.print(invalid_choice_message(valid_actions))

    def confirm(self, question: str) -> bool:
        """Ask a yes/no question, defaulting to no."""
        return click.confirm(question, default=False)

    def confirm_or_edit(self, question: str, text: str) -> str | None:
        """Ask whether to use ``text``, allowing it to be edited first.

        Args:
            question: Question shown to the user
            text: Proposed text

        Returns:
            The accepted (possibly edited) text, or None if declined

        """
        while True:
            choice = click.prompt(
                f"{question} (y)es / (n)o / (e)dit",
                type=click.Choice([CHOICE_YES, CHOICE_NO, CHOICE_EDIT], case_sensitive=False),
                default=CHOICE_NO,
            ).lower()
            if choice == CHOICE_YES:
                return text
            if choice == CHOICE_NO:
                return None

            edited = self.editor.edit(text)
            if edited is None:
                self.console.print("[yellow]Edit aborted, keeping the original text.[/yellow]")
            else:
                text = edited
            self.console.print(text, markup=False, highlight=False)
