"""Tests for terminal interaction."""

from unittest.mock import MagicMock, patch

from pr_triage.interaction import (
    ACTION_AI,
    ACTION_APPROVE,
    ACTION_SKIP,
    ClickEditor,
    Prompter,
)

INVALID_ANSWERS_BEFORE_VALID = 2


def _prompter(editor: MagicMock | None = None) -> Prompter:
    return Prompter(MagicMock(), editor=editor or MagicMock())


class TestChooseAction:
    """Tests for Prompter.choose_action."""

    def test_valid_answer(self) -> None:
        """A valid answer is returned as is."""
        prompter = _prompter()

        with patch("pr_triage.interaction.click.prompt", return_value="s"):
            assert prompter.choose_action(ai_available=False) == ACTION_SKIP

    def test_reprompts_until_valid(self) -> None:
        """Invalid answers print a message and ask again."""
        prompter = _prompter()

        with patch("pr_triage.interaction.click.prompt", side_effect=["x", "", "a"]):
            assert prompter.choose_action(ai_available=False) == ACTION_APPROVE

        assert prompter.console.print.call_count == INVALID_ANSWERS_BEFORE_VALID

    def test_ai_choice_only_when_available(self) -> None:
        """Uppercase A is rejected without a backend and accepted with one."""
        prompter = _prompter()

        with patch("pr_triage.interaction.click.prompt", side_effect=["A", "s"]):
            assert prompter.choose_action(ai_available=False) == ACTION_SKIP

        with patch("pr_triage.interaction.click.prompt", return_value="A") as mock_prompt:
            assert prompter.choose_action(ai_available=True) == ACTION_AI
        assert "AI Review (A)" in mock_prompt.call_args.args[0]

    def test_answers_are_case_sensitive(self) -> None:
        """Uppercase A means AI review, never approve."""
        prompter = _prompter()

        with patch("pr_triage.interaction.click.prompt", return_value="A"):
            assert prompter.choose_action(ai_available=True) != ACTION_APPROVE


class TestConfirmOrEdit:
    """Tests for Prompter.confirm_or_edit."""

    def test_yes_returns_text(self) -> None:
        """Accepting returns the proposed text."""
        with patch("pr_triage.interaction.click.prompt", return_value="y"):
            assert _prompter().confirm_or_edit("Post?", "hello") == "hello"

    def test_no_returns_none(self) -> None:
        """Declining returns None."""
        with patch("pr_triage.interaction.click.prompt", return_value="n"):
            assert _prompter().confirm_or_edit("Post?", "hello") is None

    def test_edit_then_accept(self) -> None:
        """Edited text replaces the proposal before it is accepted."""
        editor = MagicMock()
        editor.edit.return_value = "hello, edited"
        prompter = _prompter(editor)

        with patch("pr_triage.interaction.click.prompt", side_effect=["e", "y"]):
            assert prompter.confirm_or_edit("Post?", "hello") == "hello, edited"

        editor.edit.assert_called_once_with("hello")

    def test_aborted_edit_keeps_text(self) -> None:
        """An aborted edit keeps the original text."""
        editor = MagicMock()
        editor.edit.return_value = None
        prompter = _prompter(editor)

        with patch("pr_triage.interaction.click.prompt", side_effect=["e", "y"]):
            assert prompter.confirm_or_edit("Post?", "hello") == "hello"


class TestClickEditor:
    """Tests for ClickEditor."""

    def test_returns_stripped_text(self) -> None:
        """Saved text is returned without surrounding whitespace."""
        with patch("pr_triage.interaction.click.edit", return_value="  new text\n"):
            assert ClickEditor().edit("old") == "new text"

    def test_unsaved_or_empty_is_none(self) -> None:
        """Closing without saving or clearing the text aborts the edit."""
        with patch("pr_triage.interaction.click.edit", return_value=None):
            assert ClickEditor().edit("old") is None
        with patch("pr_triage.interaction.click.edit", return_value="   \n"):
            assert ClickEditor().edit("old") is None
