"""Diff-size classification of pull requests."""

from dataclasses import dataclass, fields, replace

from pr_triage.github import PullRequest
from pr_triage.messages import approval_comment, pr_summary


@dataclass(frozen=True)
class ReviewCriteria:
    """Inclusive upper bounds for a PR to count as simple."""

    max_additions: int = 50
    max_deletions: int = 50
    max_changed_files: int = 5
    max_lines_changed: int = 100

    def with_overrides(self, **overrides: int | None) -> "ReviewCriteria":
        """Return a copy with the given thresholds replaced.

        ``None`` values keep the current threshold; unknown names raise.

        Args:
            **overrides: Threshold names mapped to new values

        Returns:
            New ReviewCriteria

        Raises:
            ValueError: If a name is not a threshold or a value is negative

        """
        known = {criteria_field.name for criteria_field in fields(self)}
        changes: dict[str, int] = {}
        for name, value in overrides.items():
            if name not in known:
                message = f"Unknown review criterion: {name}"
                raise ValueError(message)
            if value is None:
                continue
            if value < 0:
                message = f"Review criterion {name} must be non-negative (got {value})"
                raise ValueError(message)
            changes[name] = value
        return replace(self, **changes)


class PrClassifier:
    """Decides whether a PR is small enough for low-friction handling."""

    def __init__(self, criteria: ReviewCriteria | None = None) -> None:
        """Initialize the classifier.

        Args:
            criteria: Thresholds to apply (defaults to ReviewCriteria())

        """
        self.criteria = criteria or ReviewCriteria()

    def is_simple_pr(self, pr: PullRequest) -> bool:
        """Return True when every count is within its threshold and the PR is not a draft."""
        return (
            pr.additions <= self.criteria.max_additions
            and pr.deletions <= self.criteria.max_deletions
            and pr.changed_files <= self.criteria.max_changed_files
            and pr.total_changes <= self.criteria.max_lines_changed
            and not pr.draft
        )

    def get_pr_summary(self, pr: PullRequest) -> str:
        """Return the one-line summary shown before the action prompt."""
        return pr_summary(
            pr.number,
            pr.title,
            pr.additions,
            pr.deletions,
            pr.changed_files,
            pr.author,
        )

    def get_approval_comment(self, pr: PullRequest) -> str:
        """Return the canned approval body for a simple PR."""
        return approval_comment(pr.additions, pr.deletions, pr.changed_files)
