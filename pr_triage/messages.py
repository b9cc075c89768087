"""Constants and message generators for user-facing messages."""

DEFAULT_APPROVAL_BODY = "LGTM! 👍"
PI_REVIEW_INSTRUCTION = (
    "Review the pull request described in the attached file and respond as it asks."
)
AI_FAILURE_PATH = "unknown"
AI_FAILURE_LINE = 0
AI_FAILURE_CONTENT = "AI review failed, please review manually"
AI_FAILURE_CONTEXT = "Error occurred during AI analysis"


def pr_summary(
    number: int,
    title: str,
    additions: int,
    deletions: int,
    changed_files: int,
    author: str,
) -> str:
    """Return the one-line description shown before each PR decision."""
    total = additions + deletions
    return (
        f'PR #{number}: "{title}" - {additions} additions, {deletions} deletions, '
        f"{changed_files} files changed ({total} total lines) - Author: @{author}"
    )


def approval_comment(additions: int, deletions: int, changed_files: int) -> str:
    """Return the canned approval body for a simple PR.

    Args:
        additions: Added line count
        deletions: Deleted line count
        changed_files: Changed file count

    Returns:
        Approval comment

    """
    return (
        f"✅ Approved! Small change: {additions} additions, {deletions} deletions "
        f"across {changed_files} files."
    )


def general_review_comment(path: str, line: int, content: str, context: str) -> str:
    """Format an AI comment for posting as a general (non-anchored) PR comment.

    Args:
        path: File path the comment refers to
        line: New-file line number
        content: Comment text
        context: Code excerpt

    Returns:
        Markdown comment body

    """
    return f"**{path}:{line}**\n\n{content}\n\n```\n{context}\n```"


def action_prompt(*, ai_available: bool) -> str:
    """Return the per-PR action question."""
    ai_option = ", AI Review (A)" if ai_available else ""
    return f"What do you want to do? Approve (a), Open (o), Skip (s), Ignore (i){ai_option}"


def invalid_choice_message(valid_actions: list[str]) -> str:
    """Return the message shown when the action answer is not recognised."""
    return f"❌ Invalid choice. Please enter {', '.join(valid_actions)}."


def criteria_message(
    max_additions: int,
    max_deletions: int,
    max_changed_files: int,
    max_lines_changed: int,
) -> str:
    """Return the startup description of the simple-PR thresholds."""
    return (
        f"📏 Review criteria: {max_additions} additions, {max_deletions} deletions, "
        f"{max_changed_files} files, {max_lines_changed} total lines"
    )


def invalid_repo_message(repo: str) -> str:
    """Return the error for a repository argument that is not owner/repo."""
    return f"Repository must be in format owner/repo (got '{repo}')"


def gh_not_installed_message() -> str:
    """Return the error shown when the GitHub CLI is missing."""
    return "GitHub CLI (gh) is not installed. Please install it from https://cli.github.com/"


def gh_not_authenticated_message() -> str:
    """Return the error shown when the current GitHub user cannot be resolved."""
    return "Failed to get current user. Make sure you are authenticated with GitHub CLI."
