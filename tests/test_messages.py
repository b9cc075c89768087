"""Tests for user-facing messages."""

from pr_triage.messages import (
    action_prompt,
    criteria_message,
    general_review_comment,
    invalid_choice_message,
    invalid_repo_message,
    pr_summary,
)


class TestMessages:
    """Tests for message generators."""

    def test_pr_summary(self) -> None:
        """The summary includes the computed total."""
        summary = pr_summary(7, "Bump deps", 10, 4, 2, "dependabot")
        assert summary == (
            'PR #7: "Bump deps" - 10 additions, 4 deletions, 2 files changed '
            "(14 total lines) - Author: @dependabot"
        )

    def test_action_prompt_without_ai(self) -> None:
        """The AI option is hidden without a backend."""
        prompt = action_prompt(ai_available=False)
        assert "Approve (a), Open (o), Skip (s), Ignore (i)" in prompt
        assert "(A)" not in prompt

    def test_action_prompt_with_ai(self) -> None:
        """The AI option is listed when a backend is configured."""
        assert action_prompt(ai_available=True).endswith("AI Review (A)")

    def test_invalid_choice_message(self) -> None:
        """The valid answers are listed."""
        assert invalid_choice_message(["a", "o"]) == "❌ Invalid choice. Please enter a, o."

    def test_general_review_comment(self) -> None:
        """Fallback comments carry the location and a fenced context block."""
        body = general_review_comment("src/app.py", 12, "Typo here", "retrun x")
        assert body == "**src/app.py:12**\n\nTypo here\n\n```\nretrun x\n```"

    def test_criteria_message(self) -> None:
        """The thresholds are shown in order."""
        message = criteria_message(50, 50, 5, 100)
        assert message == (
            "📏 Review criteria: 50 additions, 50 deletions, 5 files, 100 total lines"
        )

    def test_invalid_repo_message(self) -> None:
        """The bad value is echoed back."""
        assert "'octo'" in invalid_repo_message("octo")
