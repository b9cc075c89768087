"""Tests for CLI module."""

from unittest.mock import patch

from click.testing import CliRunner

from pr_triage.cli import _build_cli_options, main
from pr_triage.errors import GitHubCliError

# Constants for CLI test values
TEST_MAX_ADDITIONS = 20
TEST_MAX_FILES = 3
KEYBOARD_INTERRUPT_EXIT_CODE = 130

type CliKwargs = dict[str, str | int | bool | None]


class TestCliMain:
    """Tests for CLI main command."""

    def test_cli_help(self) -> None:
        """Test that CLI help works."""
        runner = CliRunner()
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "Automatically review GitHub pull requests" in result.output
        assert "--repo" in result.output
        assert "--dry" in result.output
        assert "--teams" in result.output
        assert "--max-lines" in result.output
        assert "--ai-backend" in result.output

    def test_cli_version(self) -> None:
        """Test that CLI version works."""
        runner = CliRunner()
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0

    def test_missing_repo_is_an_error(self) -> None:
        """Running without a repository exits with status 1."""
        runner = CliRunner()
        result = runner.invoke(main, [])
        assert result.exit_code == 1
        assert "owner/repo" in result.output

    def test_invalid_repo_is_an_error(self) -> None:
        """A repository without an owner is rejected."""
        runner = CliRunner()
        result = runner.invoke(main, ["--repo", "just-a-name"])
        assert result.exit_code == 1
        assert "just-a-name" in result.output

    def test_negative_threshold_rejected_by_click(self) -> None:
        """Thresholds must be non-negative integers."""
        runner = CliRunner()
        result = runner.invoke(main, ["--repo", "octo/repo", "--max-additions", "-1"])
        assert result.exit_code != 0

    def test_run_exit_code_is_propagated(self) -> None:
        """The runner's exit code becomes the process exit code."""
        runner = CliRunner()
        with patch("pr_triage.cli.TriageRunner") as mock_runner:
            mock_runner.return_value.run.return_value = 0
            result = runner.invoke(main, ["--repo", "octo/repo", "--ai-backend", "none"])

        assert result.exit_code == 0
        settings = mock_runner.call_args.args[0]
        assert settings.repo == "octo/repo"
        assert settings.ai_backend == "none"

    def test_github_errors_exit_1(self) -> None:
        """Missing or unauthenticated gh is reported without a traceback."""
        runner = CliRunner()
        with patch("pr_triage.cli.TriageRunner") as mock_runner:
            mock_runner.return_value.run.side_effect = GitHubCliError("gh is not installed")
            result = runner.invoke(main, ["--repo", "octo/repo"])

        assert result.exit_code == 1
        assert "gh is not installed" in result.output

    def test_keyboard_interrupt(self) -> None:
        """Ctrl-C exits with 130."""
        runner = CliRunner()
        with patch("pr_triage.cli.TriageRunner") as mock_runner:
            mock_runner.return_value.run.side_effect = KeyboardInterrupt
            result = runner.invoke(main, ["--repo", "octo/repo"])

        assert result.exit_code == KEYBOARD_INTERRUPT_EXIT_CODE
        assert "Interrupted by user" in result.output

    def test_repo_from_environment(self) -> None:
        """PRT_REPO supplies the repository."""
        runner = CliRunner()
        with patch("pr_triage.cli.TriageRunner") as mock_runner:
            mock_runner.return_value.run.return_value = 0
            result = runner.invoke(main, [], env={"PRT_REPO": "env-org/env-repo"})

        assert result.exit_code == 0
        assert mock_runner.call_args.args[0].repo == "env-org/env-repo"


class TestBuildCliOptions:
    """Tests for _build_cli_options."""

    def test_all_options(self) -> None:
        """Every Click keyword maps onto CliOptions."""
        kwargs: CliKwargs = {
            "repo": "octo/repo",
            "dry_run": True,
            "teams": "backend",
            "users": "alice",
            "max_additions": TEST_MAX_ADDITIONS,
            "max_deletions": None,
            "max_changed_files": TEST_MAX_FILES,
            "max_lines_changed": None,
            "ai_backend": "pi",
            "model": "some/model",
            "ignore_file": "ignored.json",
            "debug": True,
        }
        options = _build_cli_options(kwargs)

        assert options.repo == "octo/repo"
        assert options.dry_run
        assert options.teams == "backend"
        assert options.users == "alice"
        assert options.max_additions == TEST_MAX_ADDITIONS
        assert options.max_deletions is None
        assert options.max_changed_files == TEST_MAX_FILES
        assert options.ai_backend == "pi"
        assert options.model == "some/model"
        assert options.ignore_file == "ignored.json"
        assert options.debug

    def test_partial_options(self) -> None:
        """Missing keywords become None or False."""
        options = _build_cli_options({"repo": "octo/repo"})

        assert options.repo == "octo/repo"
        assert not options.dry_run
        assert options.teams is None
        assert options.ai_backend is None
        assert not options.debug
