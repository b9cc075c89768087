"""GitHub operations for pr-triage, performed through the ``gh`` CLI.

This module handles:
- Resolving the authenticated user
- Searching open PRs waiting for a user's or a team's review
- Checking team membership
- Fetching PR diffs
- Approving PRs and posting general or line-anchored comments
"""

import json
import logging
import shlex
from dataclasses import dataclass
from pathlib import Path

from pr_triage.errors import GitHubCliError
from pr_triage.messages import (
    DEFAULT_APPROVAL_BODY,
    gh_not_authenticated_message,
    gh_not_installed_message,
)
from pr_triage.utils import run_command

PR_LIST_FIELDS = (
    "number,title,body,url,author,additions,deletions,changedFiles,"
    "isDraft,headRefName,baseRefName,headRefOid"
)


@dataclass(frozen=True)
class PullRequest:
    """PR metadata needed for triage."""

    number: int
    title: str
    url: str
    repo_owner: str
    repo_name: str
    body: str = ""
    author: str = "unknown"
    additions: int = 0
    deletions: int = 0
    changed_files: int = 0
    draft: bool = False
    head_ref: str = ""
    base_ref: str = ""
    head_sha: str = ""

    @property
    def total_changes(self) -> int:
        """Additions plus deletions."""
        return self.additions + self.deletions

    @classmethod
    def from_gh_payload(cls, payload: dict, repo_owner: str, repo_name: str) -> "PullRequest":
        """Build a PullRequest from one ``gh pr list --json`` entry.

        Args:
            payload: Parsed JSON object for a single PR
            repo_owner: Owner of the repository that was queried
            repo_name: Name of the repository that was queried

        Returns:
            PullRequest with missing counts defaulted to zero

        """
        author = payload.get("author")
        login = author.get("login") if isinstance(author, dict) else None
        return cls(
            number=int(payload["number"]),
            title=str(payload.get("title") or ""),
            url=str(payload.get("url") or ""),
            repo_owner=repo_owner,
            repo_name=repo_name,
            body=str(payload.get("body") or ""),
            author=str(login or "unknown"),
            additions=int(payload.get("additions") or 0),
            deletions=int(payload.get("deletions") or 0),
            changed_files=int(payload.get("changedFiles") or 0),
            draft=bool(payload.get("isDraft") or False),
            head_ref=str(payload.get("headRefName") or ""),
            base_ref=str(payload.get("baseRefName") or ""),
            head_sha=str(payload.get("headRefOid") or ""),
        )


class GitHubCli:
    """Thin wrapper around the ``gh`` executable.

    Read operations degrade to empty results and log a warning. Write
    operations and the operations a run cannot continue without raise
    GitHubCliError.
    """

    def __init__(self, logger: logging.Logger, cwd: Path | None = None) -> None:
        """Initialize the wrapper.

        Args:
            logger: Logger instance for output
            cwd: Working directory for gh invocations

        """
        self.logger = logger
        self.cwd = cwd
        self._username: str | None = None

    def _gh(self, *args: str) -> tuple[int, str, str]:
        cmd_args = ["gh", *args]
        returncode, stdout, stderr = run_command(cmd_args, cwd=self.cwd)
        self.logger.debug("%s exited with %s", shlex.join(cmd_args), returncode)
        return (returncode, stdout, stderr)

    def _gh_json(self, *args: str) -> object | None:
        """Run gh and parse its stdout as JSON, returning None on any failure."""
        returncode, stdout, stderr = self._gh(*args)
        if returncode != 0:
            self.logger.warning("Command failed: gh %s: %s", shlex.join(args), stderr.strip())
            return None
        try:
            return json.loads(stdout)
        except json.JSONDecodeError:
            self.logger.warning("Could not parse output of gh %s", shlex.join(args))
            return None

    def ensure_installed(self) -> None:
        """Verify the gh executable is available.

        Raises:
            GitHubCliError: If gh cannot be run

        """
        returncode, _, _ = self._gh("--version")
        if returncode != 0:
            raise GitHubCliError(gh_not_installed_message())

    def get_current_user(self) -> str:
        """Return the login of the authenticated user.

        Raises:
            GitHubCliError: If gh is not authenticated

        """
        if self._username is None:
            user = self._gh_json("api", "user")
            login = user.get("login") if isinstance(user, dict) else None
            if not isinstance(login, str) or not login:
                raise GitHubCliError(gh_not_authenticated_message())
            self._username = login
        return self._username

    def list_prs_for_review(self, owner: str, repo: str, search: str) -> list[PullRequest]:
        """List open PRs of owner/repo matching a search qualifier.

        Args:
            owner: Repository owner
            repo: Repository name
            search: Search qualifier, e.g. ``review-requested:octocat``

        Returns:
            Matching PRs (empty on failure)

        """
        payload = self._gh_json(
            "pr",
            "list",
            "--repo",
            f"{owner}/{repo}",
            "--state",
            "open",
            "--search",
            f"is:open is:pr {search}",
            "--json",
            PR_LIST_FIELDS,
        )
        if not isinstance(payload, list):
            return []

        prs = []
        for entry in payload:
            if not isinstance(entry, dict) or not isinstance(entry.get("number"), int):
                self.logger.warning("Skipping malformed PR entry from gh: %r", entry)
                continue
            prs.append(PullRequest.from_gh_payload(entry, owner, repo))
        return prs

    def prs_review_requested(self, owner: str, repo: str, username: str) -> list[PullRequest]:
        """List open PRs waiting for a user's review."""
        return self.list_prs_for_review(owner, repo, f"review-requested:{username}")

    def prs_team_review_requested(self, owner: str, repo: str, team: str) -> list[PullRequest]:
        """List open PRs waiting for a team's review."""
        return self.list_prs_for_review(owner, repo, f"team-review-requested:{owner}/{team}")

    def get_team_members(self, org: str, team_slug: str) -> list[str]:
        """Return the logins of a team's members (empty on failure)."""
        returncode, stdout, stderr = self._gh(
            "api",
            "--paginate",
            f"orgs/{org}/teams/{team_slug}/members",
            "--jq",
            ".[].login",
        )
        if returncode != 0:
            self.logger.warning(
                "Could not list members of team %s/%s: %s",
                org,
                team_slug,
                stderr.strip(),
            )
            return []
        return [login.strip() for login in stdout.splitlines() if login.strip()]

    def is_user_in_team(self, org: str, team_slug: str, username: str) -> bool:
        """Return True if username is a member of org/team_slug."""
        return username in self.get_team_members(org, team_slug)

    def get_pr_diff(self, pr: PullRequest) -> str:
        """Return the unified diff of a PR.

        Raises:
            GitHubCliError: If the diff cannot be fetched

        """
        try:
            returncode, stdout, stderr = self._gh(
                "pr",
                "diff",
                str(pr.number),
                "--repo",
                f"{pr.repo_owner}/{pr.repo_name}",
            )
        except (OSError, UnicodeError) as exc:
            message = f"Failed to fetch diff for PR #{pr.number}: {exc}"
            raise GitHubCliError(message) from exc
        if returncode != 0:
            message = f"Failed to fetch diff for PR #{pr.number}: {stderr.strip()}"
            raise GitHubCliError(message)
        return stdout

    def approve_pr(self, pr: PullRequest, body: str | None = None) -> None:
        """Submit an approving review.

        Raises:
            GitHubCliError: If the review cannot be submitted

        """
        returncode, _, stderr = self._gh(
            "pr",
            "review",
            str(pr.number),
            "--repo",
            f"{pr.repo_owner}/{pr.repo_name}",
            "--approve",
            "--body",
            body or DEFAULT_APPROVAL_BODY,
        )
        if returncode != 0:
            message = f"Failed to approve PR #{pr.number}: {stderr.strip()}"
            raise GitHubCliError(message)

    def post_comment(self, pr: PullRequest, body: str) -> None:
        """Post a general conversation comment.

        Raises:
            GitHubCliError: If the comment cannot be posted

        """
        returncode, _, stderr = self._gh(
            "pr",
            "comment",
            str(pr.number),
            "--repo",
            f"{pr.repo_owner}/{pr.repo_name}",
            "--body",
            body,
        )
        if returncode != 0:
            message = f"Failed to comment on PR #{pr.number}: {stderr.strip()}"
            raise GitHubCliError(message)

    def post_line_comment(self, pr: PullRequest, path: str, line: int, body: str) -> None:
        """Post a review comment anchored to a new-file line.

        Raises:
            GitHubCliError: If the PR head commit is unknown or GitHub rejects the comment

        """
        if not pr.head_sha:
            message = f"Head commit of PR #{pr.number} is unknown"
            raise GitHubCliError(message)

        returncode, _, stderr = self._gh(
            "api",
            "--method",
            "POST",
            f"repos/{pr.repo_owner}/{pr.repo_name}/pulls/{pr.number}/comments",
            "-f",
            f"body={body}",
            "-f",
            f"commit_id={pr.head_sha}",
            "-f",
            f"path={path}",
            "-F",
            f"line={line}",
            "-f",
            "side=RIGHT",
        )
        if returncode != 0:
            message = f"Failed to comment on {path}:{line} of PR #{pr.number}: {stderr.strip()}"
            raise GitHubCliError(message)
