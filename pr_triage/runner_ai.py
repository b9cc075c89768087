"""AI review handling for the pr-triage runner.

This module handles the "AI review" choice for a single PR:
- Fetching the PR diff
- Running the AI reviewer
- Walking the user through each suggested comment
- Offering the approval the model recommends
"""

import logging
from collections.abc import Callable

from pr_triage.ai_review import AiReviewer, ReviewAction, ReviewComment, ReviewVerdict
from pr_triage.config import Settings
from pr_triage.errors import GitHubCliError
from pr_triage.github import GitHubCli, PullRequest
from pr_triage.interaction import Prompter
from pr_triage.messages import DEFAULT_APPROVAL_BODY, general_review_comment


class AiReviewManager:
    """Runs an AI review for a PR and applies the decisions the user confirms."""

    def __init__(
        self,
        settings: Settings,
        github: GitHubCli,
        reviewer: AiReviewer,
        prompter: Prompter,
        logger: logging.Logger,
    ) -> None:
        """Initialize the AI review manager.

        Args:
            settings: Configuration settings
            github: GitHub CLI wrapper
            reviewer: AI reviewer
            prompter: Terminal prompts
            logger: Logger instance for output

        """
        self.settings = settings
        self.github = github
        self.reviewer = reviewer
        self.prompter = prompter
        self.logger = logger

    def handle(self, pr: PullRequest, approve_callback: Callable[[PullRequest, str], bool]) -> bool:
        """Review a PR with the model and act on the verdict.

        Args:
            pr: Pull request under review
            approve_callback: Function that approves a PR with a body (from TriageRunner)

        Returns:
            True if the PR was approved (or would have been, in dry-run mode)

        """
        self.logger.info("🤖 Running AI review...")

        try:
            diff_text = self.github.get_pr_diff(pr)
        except GitHubCliError as exc:
            self.logger.error("❌ AI review failed: %s", exc)
            self.logger.info("🔄 Falling back to manual review")
            return False

        verdict = self.reviewer.review_pr(pr.title, pr.body, diff_text)
        self.logger.info("")
        self.logger.info("🤖 AI Review Result: %s", verdict.action.value.upper())

        if verdict.action is ReviewAction.APPROVE:
            self.logger.info("✅ AI recommends approval without comments")
            self._show_approval_message(verdict)
            return self.offer_approval(pr, verdict, "Approve this PR?", approve_callback)

        if verdict.action is ReviewAction.APPROVE_WITH_COMMENTS:
            self.logger.info("✅ AI recommends approval with comments")
            self._show_approval_message(verdict)
            self.review_comments(pr, verdict)
            return self.offer_approval(
                pr,
                verdict,
                "Approve this PR with comments?",
                approve_callback,
            )

        self.logger.info("⚠️  AI recommends comments only (no approval)")
        if verdict.comments:
            self.review_comments(pr, verdict)
        else:
            self.logger.info("🤔 AI found no specific issues to comment on")
        return False

    def _show_approval_message(self, verdict: ReviewVerdict) -> None:
        if verdict.approval_message:
            self.logger.info("💬 Approval message: %s", verdict.approval_message)

    def review_comments(self, pr: PullRequest, verdict: ReviewVerdict) -> None:
        """Walk the user through each AI comment."""
        if not verdict.comments:
            return
        self.logger.info("")
        self.logger.info("📝 AI Comments:")
        for comment in verdict.comments:
            self.show_and_post_comment(pr, comment)

    def show_and_post_comment(self, pr: PullRequest, comment: ReviewComment) -> None:
        """Show one AI comment and post it if the user accepts it."""
        self.logger.info("")
        self.logger.info("📁 File: %s", comment.path)
        self.logger.info("📍 Line: %s", comment.line)
        self.logger.info("💬 Comment: %s", comment.content)
        self.logger.info("📄 Context:\n%s", comment.context)

        content = self.prompter.confirm_or_edit("Post this comment?", comment.content)
        if content is None:
            self.logger.info("⏭️  Comment skipped")
            return

        if self.settings.dry_run:
            self.logger.info("🔍 [DRY RUN] Would post comment")
            return

        self.post_comment(pr, comment, content)

    def post_comment(self, pr: PullRequest, comment: ReviewComment, content: str) -> None:
        """Post a comment on its file line, or as a general PR comment.

        Comments without a real location, and anchored posts GitHub rejects
        (e.g. a line outside the diff), go to the PR conversation instead.
        """
        if comment.has_location:
            try:
                self.github.post_line_comment(pr, comment.path, comment.line, content)
            except GitHubCliError as exc:
                self.logger.warning(
                    "⚠️  Could not attach comment to %s:%s (%s). Posting as a PR comment.",
                    comment.path,
                    comment.line,
                    exc,
                )
            else:
                self.logger.info("✅ Comment posted on %s:%s", comment.path, comment.line)
                return

        body = general_review_comment(comment.path, comment.line, content, comment.context)
        try:
            self.github.post_comment(pr, body)
        except GitHubCliError as exc:
            self.logger.error("❌ Failed to post comment: %s", exc)
            return
        self.logger.info("✅ Comment posted!")

    def offer_approval(
        self,
        pr: PullRequest,
        verdict: ReviewVerdict,
        question: str,
        approve_callback: Callable[[PullRequest, str], bool],
    ) -> bool:
        """Offer the approval body for confirmation and approve through the callback."""
        body = self.prompter.confirm_or_edit(
            question,
            verdict.approval_message or DEFAULT_APPROVAL_BODY,
        )
        if body is None:
            return False
        return approve_callback(pr, body)
