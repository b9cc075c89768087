"""Tests for the AI review manager."""

from unittest.mock import MagicMock

from pr_triage.ai_review import ReviewAction, ReviewComment, ReviewVerdict, fallback_verdict
from pr_triage.config import Settings
from pr_triage.errors import GitHubCliError
from pr_triage.github import PullRequest
from pr_triage.runner_ai import AiReviewManager

COMMENT_LINE = 11
COMMENT_COUNT = 2

PR = PullRequest(
    number=42,
    title="Handle None",
    url="https://github.com/octo/repo/pull/42",
    repo_owner="octo",
    repo_name="repo",
    body="Avoids a crash",
    head_sha="abc123",
)

COMMENT = ReviewComment(
    path="app.py",
    line=COMMENT_LINE,
    content="Could items be a tuple here?",
    context="items = items or []",
)


def _manager(verdict: ReviewVerdict, *, dry_run: bool = False) -> AiReviewManager:
    github = MagicMock()
    github.get_pr_diff.return_value = "diff --git a/app.py b/app.py\n"
    reviewer = MagicMock()
    reviewer.review_pr.return_value = verdict
    return AiReviewManager(
        Settings(repo="octo/repo", dry_run=dry_run),
        github,
        reviewer,
        MagicMock(),
        MagicMock(),
    )


class TestHandle:
    """Tests for AiReviewManager.handle."""

    def test_reviews_title_body_and_diff(self) -> None:
        """The reviewer sees the PR title, description and fetched diff."""
        manager = _manager(ReviewVerdict(action=ReviewAction.COMMENT_ONLY))

        manager.handle(PR, MagicMock())

        manager.reviewer.review_pr.assert_called_once_with(
            "Handle None",
            "Avoids a crash",
            "diff --git a/app.py b/app.py\n",
        )

    def test_approve_uses_model_message(self) -> None:
        """Approval offers the model's message as the review body."""
        verdict = ReviewVerdict(action=ReviewAction.APPROVE, approval_message="Nice fix")
        manager = _manager(verdict)
        manager.prompter.confirm_or_edit.return_value = "Nice fix"
        approve = MagicMock(return_value=True)

        assert manager.handle(PR, approve)

        manager.prompter.confirm_or_edit.assert_called_once_with("Approve this PR?", "Nice fix")
        approve.assert_called_once_with(PR, "Nice fix")

    def test_approve_declined(self) -> None:
        """Declining the approval leaves the PR untouched."""
        manager = _manager(ReviewVerdict(action=ReviewAction.APPROVE))
        manager.prompter.confirm_or_edit.return_value = None
        approve = MagicMock()

        assert not manager.handle(PR, approve)
        approve.assert_not_called()

    def test_approve_default_body(self) -> None:
        """Without a model message the default approval body is proposed."""
        manager = _manager(ReviewVerdict(action=ReviewAction.APPROVE))
        manager.prompter.confirm_or_edit.return_value = None

        manager.handle(PR, MagicMock())

        assert manager.prompter.confirm_or_edit.call_args.args[1] == "LGTM! 👍"

    def test_approve_with_comments_posts_then_approves(self) -> None:
        """Comments are handled before the approval is offered."""
        verdict = ReviewVerdict(
            action=ReviewAction.APPROVE_WITH_COMMENTS,
            comments=[COMMENT],
            approval_message="Thanks!",
        )
        manager = _manager(verdict)
        manager.prompter.confirm_or_edit.side_effect = [COMMENT.content, "Thanks!"]
        approve = MagicMock(return_value=True)

        assert manager.handle(PR, approve)

        manager.github.post_line_comment.assert_called_once_with(
            PR,
            "app.py",
            COMMENT_LINE,
            COMMENT.content,
        )
        questions = [c.args[0] for c in manager.prompter.confirm_or_edit.call_args_list]
        assert questions == ["Post this comment?", "Approve this PR with comments?"]
        approve.assert_called_once_with(PR, "Thanks!")

    def test_comment_only_never_approves(self) -> None:
        """Comment-only verdicts do not offer approval."""
        verdict = ReviewVerdict(action=ReviewAction.COMMENT_ONLY, comments=[COMMENT, COMMENT])
        manager = _manager(verdict)
        manager.prompter.confirm_or_edit.return_value = None
        approve = MagicMock()

        assert not manager.handle(PR, approve)

        assert manager.prompter.confirm_or_edit.call_count == COMMENT_COUNT
        approve.assert_not_called()
        manager.github.post_comment.assert_not_called()

    def test_diff_failure_falls_back(self) -> None:
        """A failed diff fetch returns to manual review without calling the model."""
        manager = _manager(fallback_verdict())
        manager.github.get_pr_diff.side_effect = GitHubCliError("boom")

        assert not manager.handle(PR, MagicMock())
        manager.reviewer.review_pr.assert_not_called()
        manager.logger.error.assert_called_once()

    def test_fallback_verdict_posts_general_comment(self) -> None:
        """The sentinel comment has no location and goes to the PR conversation."""
        manager = _manager(fallback_verdict())
        manager.prompter.confirm_or_edit.side_effect = lambda _q, text: text

        manager.handle(PR, MagicMock())

        manager.github.post_line_comment.assert_not_called()
        body = manager.github.post_comment.call_args.args[1]
        assert body.startswith("**unknown:0**")
        assert "AI review failed, please review manually" in body


class TestPostComment:
    """Tests for posting individual comments."""

    def test_edited_content_is_posted(self) -> None:
        """The text the user accepts is what gets posted."""
        manager = _manager(fallback_verdict())
        manager.prompter.confirm_or_edit.return_value = "Rewritten comment"

        manager.show_and_post_comment(PR, COMMENT)

        manager.github.post_line_comment.assert_called_once_with(
            PR,
            "app.py",
            COMMENT_LINE,
            "Rewritten comment",
        )

    def test_line_comment_rejected_falls_back_to_general(self) -> None:
        """A rejected anchored comment is posted as a general comment."""
        manager = _manager(fallback_verdict())
        manager.github.post_line_comment.side_effect = GitHubCliError("line not in diff")

        manager.post_comment(PR, COMMENT, COMMENT.content)

        manager.logger.warning.assert_called_once()
        body = manager.github.post_comment.call_args.args[1]
        assert body == (
            "**app.py:11**\n\nCould items be a tuple here?\n\n```\nitems = items or []\n```"
        )

    def test_dry_run_posts_nothing(self) -> None:
        """Dry-run mode reports the comment instead of posting it."""
        manager = _manager(fallback_verdict(), dry_run=True)
        manager.prompter.confirm_or_edit.return_value = COMMENT.content

        manager.show_and_post_comment(PR, COMMENT)

        manager.github.post_line_comment.assert_not_called()
        manager.github.post_comment.assert_not_called()

    def test_general_comment_failure_is_logged(self) -> None:
        """A failing general comment is reported, not raised."""
        manager = _manager(fallback_verdict())
        manager.github.post_comment.side_effect = GitHubCliError("forbidden")
        sentinel = fallback_verdict().comments[0]

        manager.post_comment(PR, sentinel, sentinel.content)

        manager.logger.error.assert_called_once()
