"""Main runner for pr-triage."""

import logging
from dataclasses import dataclass

import click

from pr_triage.ai_review import AiReviewer, Completion
from pr_triage.classifier import PrClassifier
from pr_triage.config import Paths, Settings
from pr_triage.errors import GitHubCliError
from pr_triage.github import GitHubCli, PullRequest
from pr_triage.ignore_store import IgnoreStore, JsonIgnoreStore
from pr_triage.interaction import (
    ACTION_AI,
    ACTION_APPROVE,
    ACTION_IGNORE,
    ACTION_OPEN,
    ACTION_SKIP,
    Prompter,
)
from pr_triage.llm import build_completion
from pr_triage.messages import criteria_message
from pr_triage.runner_ai import AiReviewManager
from pr_triage.utils import configure_logger, console


@dataclass(frozen=True)
class Collaborators:
    """Optional pre-built dependencies of TriageRunner.

    Groups the injectable collaborators so the runner constructor stays
    small; anything left as None is created from the settings.
    """

    github: GitHubCli | None = None
    ignore_store: IgnoreStore | None = None
    prompter: Prompter | None = None
    completion: Completion | None = None
    logger: logging.Logger | None = None


@dataclass
class TriageStats:
    """Counts of the decisions taken during a run."""

    approved: int = 0
    opened: int = 0
    skipped: int = 0
    ignored: int = 0
    ai_reviewed: int = 0


class TriageRunner:
    """Runner that walks the user through the PRs waiting for their review."""

    def __init__(
        self,
        settings: Settings,
        paths: Paths,
        collaborators: Collaborators | None = None,
    ) -> None:
        """Initialize the runner.

        Args:
            settings: Configuration settings
            paths: Path management
            collaborators: Pre-built collaborators; missing ones are built from settings

        """
        collaborators = collaborators or Collaborators()
        self.settings = settings
        self.paths = paths
        self.logger = collaborators.logger or configure_logger(
            paths.log_file if settings.debug else None,
            debug=settings.debug,
        )
        self.owner, self.repo = settings.repo_parts()
        self.github = collaborators.github or GitHubCli(self.logger, cwd=paths.invocation_dir)
        self.ignore_store = collaborators.ignore_store or JsonIgnoreStore(
            paths.ignore_file,
            self.logger,
        )
        self.prompter = collaborators.prompter or Prompter(console)
        self.classifier = PrClassifier(settings.criteria)
        self.username = ""
        self.ignored_prs: set[int] = set()
        self.stats = TriageStats()

        completion = collaborators.completion or build_completion(settings, paths, self.logger)
        self.ai_manager: AiReviewManager | None = None
        if completion is not None:
            self.ai_manager = AiReviewManager(
                settings,
                self.github,
                AiReviewer(completion, self.logger),
                self.prompter,
                self.logger,
            )

    @property
    def ai_available(self) -> bool:
        """Whether a completion backend is configured."""
        return self.ai_manager is not None

    def initialize(self) -> None:
        """Resolve the current user and load the ignore list.

        Raises:
            GitHubCliError: If gh is missing or not authenticated

        """
        self.github.ensure_installed()
        self.username = self.github.get_current_user()
        self.ignored_prs = self.ignore_store.load()
        self.logger.info("Initialized for user: %s", self.username)

    def log_startup(self) -> None:
        """Log the repository, mode and filters of the run."""
        criteria = self.settings.criteria
        self.logger.info("🚀 Starting PR review process...")
        if self.settings.dry_run:
            self.logger.info("🔍 Running in DRY RUN mode - no changes will be made")
        self.logger.info("📦 Repository: %s/%s", self.owner, self.repo)
        self.logger.info(
            criteria_message(
                criteria.max_additions,
                criteria.max_deletions,
                criteria.max_changed_files,
                criteria.max_lines_changed,
            ),
        )
        teams = ", ".join(self.settings.team_list) or "none"
        users = ", ".join(self.settings.user_list) or "none"
        self.logger.info("👥 Teams to filter by: %s", teams)
        self.logger.info("👤 Users to filter by: %s", users)

    def collect_prs(self) -> list[PullRequest]:
        """Gather the PRs waiting for review, without duplicates or ignored PRs.

        Order: the current user's own review requests (when no users are
        configured or the current user is one of them), then each team's
        requests if the current user belongs to the team, then each other
        configured user's requests.

        Returns:
            PRs to triage

        """
        prs: list[PullRequest] = []
        seen: set[int] = set()

        def include(candidates: list[PullRequest], reason: str) -> None:
            for pr in candidates:
                if pr.number in seen:
                    continue
                prs.append(pr)
                seen.add(pr.number)
                self.logger.info("✅ PR #%s included: %s", pr.number, reason)

        users = self.settings.user_list
        if not users or self.username in users:
            self.logger.info("🔍 Searching for PRs assigned to %s...", self.username)
            include(
                self.github.prs_review_requested(self.owner, self.repo, self.username),
                "directly assigned as reviewer",
            )

        for team in self.settings.team_list:
            self.logger.info("🔍 Searching for PRs assigned to team %s...", team)
            team_prs = self.github.prs_team_review_requested(self.owner, self.repo, team)
            if not team_prs:
                continue
            if not self.github.is_user_in_team(self.owner, team, self.username):
                self.logger.info("Skipping team %s: %s is not a member", team, self.username)
                continue
            include(team_prs, f"assigned via team {team}")

        for user in users:
            if user == self.username:
                continue
            self.logger.info("🔍 Searching for PRs assigned to user %s...", user)
            include(
                self.github.prs_review_requested(self.owner, self.repo, user),
                f"user {user} is assigned as reviewer",
            )

        filtered = [pr for pr in prs if pr.number not in self.ignored_prs]
        if len(filtered) < len(prs):
            self.logger.info(
                "🚫 Filtered out %s ignored PRs from previous sessions",
                len(prs) - len(filtered),
            )
        return filtered

    def approve(self, pr: PullRequest, body: str) -> bool:
        """Approve a PR, or report what would happen in dry-run mode.

        Returns:
            True unless the approval failed

        """
        if self.settings.dry_run:
            self.logger.info("🔍 [DRY RUN] Would approve this PR")
            return True
        try:
            self.github.approve_pr(pr, body)
        except GitHubCliError as exc:
            self.logger.error("❌ Failed to approve PR: %s", exc)
            return False
        self.logger.info("✅ Approved!")
        return True

    def open_pr(self, pr: PullRequest) -> None:
        """Open a PR in the browser, or report it in dry-run mode."""
        self.logger.info("🔗 Opening %s in browser...", pr.url)
        if self.settings.dry_run:
            self.logger.info("🔍 [DRY RUN] Would open browser")
            return
        click.launch(pr.url)

    def ignore_pr(self, pr: PullRequest) -> None:
        """Add a PR to the ignore list and save it."""
        self.ignored_prs.add(pr.number)
        self.ignore_store.save(self.ignored_prs)
        self.logger.info("🚫 Ignored (will not be shown again)")

    def process_pr(self, pr: PullRequest) -> None:
        """Show one PR and carry out the action the user picks."""
        self.logger.info("")
        self.logger.info("📋 %s", self.classifier.get_pr_summary(pr))
        self.logger.info("🔗 %s", pr.url)
        if self.classifier.is_simple_pr(pr):
            self.logger.info("✅ This PR looks simple")
        else:
            self.logger.info("⚠️  This PR is large or complex")

        action = self.prompter.choose_action(ai_available=self.ai_available)

        if action == ACTION_AI and self.ai_manager is not None:
            self.stats.ai_reviewed += 1
            if self.ai_manager.handle(pr, self.approve):
                self.stats.approved += 1
        elif action == ACTION_APPROVE:
            if self.approve(pr, self.classifier.get_approval_comment(pr)):
                self.stats.approved += 1
        elif action == ACTION_OPEN:
            self.open_pr(pr)
            self.stats.opened += 1
        elif action == ACTION_SKIP:
            self.logger.info("⏭️  Skipped")
            self.stats.skipped += 1
        elif action == ACTION_IGNORE:
            self.ignore_pr(pr)
            self.stats.ignored += 1

    def log_summary(self) -> None:
        """Log the per-action counts of the run."""
        self.logger.info("")
        self.logger.info("📊 Summary:")
        self.logger.info("✅ Approved: %s", self.stats.approved)
        self.logger.info("🔗 Opened: %s", self.stats.opened)
        self.logger.info("⏭️  Skipped: %s", self.stats.skipped)
        self.logger.info("🚫 Ignored: %s", self.stats.ignored)
        if self.ai_available:
            self.logger.info("🤖 AI reviewed: %s", self.stats.ai_reviewed)

    def run(self) -> int:
        """Run the triage loop over every matching PR.

        Returns:
            Exit code (0 for success)

        """
        self.log_startup()
        self.initialize()

        self.logger.info("🔍 Fetching PRs from repository...")
        prs = self.collect_prs()
        self.logger.info("🔍 Found %s PRs matching your criteria", len(prs))

        if not prs:
            self.logger.info("🎉 No PRs match your filter criteria!")
            return 0

        for pr in prs:
            self.process_pr(pr)

        self.log_summary()
        return 0
