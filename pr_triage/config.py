"""Configuration management for pr-triage."""

from dataclasses import dataclass
from pathlib import Path
from typing import Literal

import pydantic as pyd
from pydantic_settings import BaseSettings, SettingsConfigDict

from pr_triage.classifier import ReviewCriteria
from pr_triage.messages import invalid_repo_message

AiBackend = Literal["gemini", "pi", "none"]

DEFAULT_IGNORE_FILE = ".ignored-prs.json"
DEFAULT_LOG_FILE = ".pr-triage.log"
DEFAULT_PROMPT_FILE = ".pr-triage-prompt.md"


class Settings(BaseSettings):
    """Configuration settings for pr-triage."""

    # Repository selection
    repo: str | None = pyd.Field(
        default=None,
        alias="PRT_REPO",
        description="Repository to triage (owner/repo)",
    )

    teams: str = pyd.Field(
        default="",
        alias="PRT_TEAMS",
        description="Comma-separated team slugs whose review requests are included",
    )

    users: str = pyd.Field(
        default="",
        alias="PRT_USERS",
        description="Comma-separated users whose review requests are included",
    )

    dry_run: bool = pyd.Field(
        default=False,
        alias="PRT_DRY_RUN",
        description="Show what would be done without making changes",
    )

    # Simple-PR thresholds
    max_additions: int = pyd.Field(
        default=50,
        alias="PRT_MAX_ADDITIONS",
        description="Maximum additions for a simple PR",
    )

    max_deletions: int = pyd.Field(
        default=50,
        alias="PRT_MAX_DELETIONS",
        description="Maximum deletions for a simple PR",
    )

    max_changed_files: int = pyd.Field(
        default=5,
        alias="PRT_MAX_FILES",
        description="Maximum changed files for a simple PR",
    )

    max_lines_changed: int = pyd.Field(
        default=100,
        alias="PRT_MAX_LINES",
        description="Maximum total changed lines for a simple PR",
    )

    # AI review
    ai_backend: AiBackend = pyd.Field(
        default="gemini",
        alias="PRT_AI_BACKEND",
        description="Completion backend used for AI review",
    )

    model: str | None = pyd.Field(
        default=None,
        alias="PRT_MODEL",
        description="Override model selection",
    )

    gemini_api_key: str | None = pyd.Field(
        default=None,
        alias="GEMINI_API_KEY",
        description="API key for the Gemini backend",
    )

    # Persistence
    ignore_file: str = pyd.Field(
        default=DEFAULT_IGNORE_FILE,
        alias="PRT_IGNORE_FILE",
        description="File holding the ignored PR numbers",
    )

    debug: bool = pyd.Field(
        default=False,
        alias="PRT_DEBUG",
        description="Enable debug logging",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="PRT_",
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def team_list(self) -> list[str]:
        """Configured team slugs as a list."""
        return _split_csv(self.teams)

    @property
    def user_list(self) -> list[str]:
        """Configured users as a list."""
        return _split_csv(self.users)

    @property
    def criteria(self) -> ReviewCriteria:
        """Simple-PR thresholds as ReviewCriteria."""
        return ReviewCriteria().with_overrides(
            max_additions=self.max_additions,
            max_deletions=self.max_deletions,
            max_changed_files=self.max_changed_files,
            max_lines_changed=self.max_lines_changed,
        )

    def repo_parts(self) -> tuple[str, str]:
        """Split ``repo`` into owner and name.

        Raises:
            ValueError: If repo is missing or not in owner/repo form

        """
        owner, _, name = (self.repo or "").partition("/")
        if not owner or not name or "/" in name:
            raise ValueError(invalid_repo_message(self.repo or ""))
        return (owner, name)

    def validate_thresholds(self) -> None:
        """Validate every simple-PR threshold is non-negative."""
        for name in ("max_additions", "max_deletions", "max_changed_files", "max_lines_changed"):
            value = getattr(self, name)
            if value < 0:
                message = (
                    f"Invalid configuration: {name} must be a non-negative integer (got '{value}')"
                )
                raise ValueError(message)


def _split_csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass(frozen=True)
class CliOptions:
    """CLI override options for Settings."""

    repo: str | None = None
    dry_run: bool = False
    teams: str | None = None
    users: str | None = None
    max_additions: int | None = None
    max_deletions: int | None = None
    max_changed_files: int | None = None
    max_lines_changed: int | None = None
    ai_backend: AiBackend | None = None
    model: str | None = None
    ignore_file: str | None = None
    debug: bool = False


def get_settings(options: CliOptions | None = None) -> Settings:
    """Create Settings instance from command line args and environment.

    Args:
        options: CLI override options grouped into a dataclass

    Returns:
        Settings instance

    """
    settings = Settings()

    if options is not None:
        _apply_cli_options(settings, options)

    settings.validate_thresholds()
    settings.repo_parts()

    return settings


def _apply_cli_options(settings: Settings, options: CliOptions) -> None:
    """Apply CLI options to Settings instance.

    Args:
        settings: Settings instance to modify
        options: CLI options to apply

    """
    _apply_value_options(settings, options)
    _apply_boolean_flags(settings, options)


def _apply_value_options(settings: Settings, options: CliOptions) -> None:
    for name in (
        "repo",
        "teams",
        "users",
        "max_additions",
        "max_deletions",
        "max_changed_files",
        "max_lines_changed",
        "ai_backend",
        "model",
        "ignore_file",
    ):
        value = getattr(options, name)
        if value is not None:
            setattr(settings, name, value)


def _apply_boolean_flags(settings: Settings, options: CliOptions) -> None:
    if options.dry_run:
        settings.dry_run = True
    if options.debug:
        settings.debug = True


class Paths:
    """Path management for pr-triage."""

    def __init__(
        self,
        invocation_dir: Path | None = None,
        ignore_file: str = DEFAULT_IGNORE_FILE,
    ) -> None:
        """Initialize paths.

        Args:
            invocation_dir: Directory the tool was started from (defaults to cwd)
            ignore_file: Ignore-list file, relative to invocation_dir unless absolute

        """
        self.invocation_dir = invocation_dir or Path.cwd()
        self.ignore_file = self.invocation_dir / ignore_file
        self.log_file = self.invocation_dir / DEFAULT_LOG_FILE
        self.prompt_file = self.invocation_dir / DEFAULT_PROMPT_FILE
