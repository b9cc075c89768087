"""AI-assisted pull request review.

The reviewer renders a prompt from the PR title, description and diff, sends
it to a completion backend, pulls the JSON verdict out of the free-form
answer and re-anchors every comment on a new-file line number. Any failure
along the way produces a "review manually" verdict instead of an exception.
"""

import json
import logging
from collections.abc import Callable
from enum import StrEnum

import pydantic as pyd

from pr_triage.diff import DiffFile, map_diff_line_to_file_line, parse_diff
from pr_triage.messages import (
    AI_FAILURE_CONTENT,
    AI_FAILURE_CONTEXT,
    AI_FAILURE_LINE,
    AI_FAILURE_PATH,
)
from pr_triage.prompts import render_prompt

MAX_COMMENT_LENGTH = 150

Completion = Callable[[str], str]


class ReviewAction(StrEnum):
    """What the reviewer recommends doing with the PR."""

    APPROVE = "approve"
    APPROVE_WITH_COMMENTS = "approve_with_comments"
    COMMENT_ONLY = "comment_only"


class ReviewComment(pyd.BaseModel):
    """A single review remark tied to a file line."""

    path: str
    line: int
    content: str
    context: str = ""

    @property
    def has_location(self) -> bool:
        """Whether the comment points at a real file line."""
        return bool(self.path) and self.path != AI_FAILURE_PATH and self.line > 0


class ReviewVerdict(pyd.BaseModel):
    """Structured result of an AI review."""

    model_config = pyd.ConfigDict(populate_by_name=True)

    action: ReviewAction
    comments: list[ReviewComment] = pyd.Field(default_factory=list)
    approval_message: str | None = pyd.Field(default=None, alias="approvalMessage")


def fallback_verdict() -> ReviewVerdict:
    """Return the verdict used when the automated review cannot be completed."""
    return ReviewVerdict(
        action=ReviewAction.COMMENT_ONLY,
        comments=[
            ReviewComment(
                path=AI_FAILURE_PATH,
                line=AI_FAILURE_LINE,
                content=AI_FAILURE_CONTENT,
                context=AI_FAILURE_CONTEXT,
            ),
        ],
    )


def extract_json_object(text: str) -> object:
    """Parse the text between the first ``{`` and the last ``}``.

    Args:
        text: Free-form model output

    Returns:
        Decoded JSON value

    Raises:
        ValueError: If there is no brace-delimited span or it is not valid JSON

    """
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end < start:
        message = "No JSON found in AI response"
        raise ValueError(message)
    return json.loads(text[start : end + 1])


def remap_comment_lines(verdict: ReviewVerdict, files: list[DiffFile]) -> ReviewVerdict:
    """Return a copy of the verdict with every comment line mapped to a new-file line."""
    comments = [
        comment.model_copy(
            update={"line": map_diff_line_to_file_line(files, comment.path, comment.line)},
        )
        for comment in verdict.comments
    ]
    return verdict.model_copy(update={"comments": comments})


class AiReviewer:
    """Runs a model-backed review of a single PR."""

    def __init__(self, completion: Completion, logger: logging.Logger) -> None:
        """Initialize the reviewer.

        Args:
            completion: Callable that sends a prompt and returns the model's text
            logger: Logger instance for output

        """
        self.completion = completion
        self.logger = logger

    def build_prompt(self, title: str, description: str, diff_text: str) -> str:
        """Render the review prompt for a PR."""
        return render_prompt(
            "ai_review.j2",
            title=title,
            description=description,
            diff=diff_text,
            max_comment_length=MAX_COMMENT_LENGTH,
        )

    def review_pr(self, title: str, description: str, diff_text: str) -> ReviewVerdict:
        """Review a PR and return a verdict with new-file line numbers.

        Never raises: completion, extraction and validation errors all yield
        ``fallback_verdict()``.

        Args:
            title: PR title
            description: PR body
            diff_text: Unified diff of the PR

        Returns:
            ReviewVerdict

        """
        files = parse_diff(diff_text)

        try:
            prompt = self.build_prompt(title, description, diff_text)
            text = self.completion(prompt)
            self.logger.info("🤖 AI response received, parsing...")
            payload = extract_json_object(text)
            verdict = ReviewVerdict.model_validate(payload)
            verdict = remap_comment_lines(verdict, files)
        except Exception as exc:
            self.logger.warning("⚠️  AI review failed, falling back to manual review: %s", exc)
            self.logger.debug("AI review failure details", exc_info=True)
            return fallback_verdict()

        self.logger.info("✅ AI review completed successfully")
        return verdict
