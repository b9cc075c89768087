"""Utility functions for pr-triage."""

import importlib.metadata
import json
import logging
import shlex
import subprocess
import sys
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

console = Console()
LOG_FORMAT = "[%(asctime)s] [prt] [%(levelname)s] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOGGER_NAME = "pr_triage"


def is_running_in_dev_mode() -> bool:
    """Check if pr-triage is running from an editable install.

    Returns:
        True if running from an editable install, False otherwise

    """
    try:
        dist = importlib.metadata.distribution("pr-triage")
    except importlib.metadata.PackageNotFoundError:
        return False
    except (OSError, ValueError):
        return False

    # Editable installs record {"dir_info": {"editable": true}} in direct_url.json
    try:
        dist_path = getattr(dist, "_path", None)
        if dist_path:
            direct_url_file = Path(dist_path) / "direct_url.json"
            if direct_url_file.exists():
                data = json.loads(direct_url_file.read_text())
                if data.get("dir_info", {}).get("editable") is True:
                    return True
    except (AttributeError, FileNotFoundError, json.JSONDecodeError, OSError):
        pass

    try:
        module = sys.modules.get("pr_triage")
        if module and getattr(module, "__file__", None):
            package_path_str = str(Path(module.__file__).resolve())
            if "site-packages" not in package_path_str and "dist-packages" not in package_path_str:
                return True
    except (AttributeError, OSError):
        pass

    return False


def configure_logger(
    log_file: Path | None = None,
    *,
    debug: bool = False,
) -> logging.Logger:
    """Configure and return the project logger.

    Args:
        log_file: Optional path of a log file that mirrors console output
        debug: Enable debug output

    Returns:
        Configured logger instance

    """
    level = logging.DEBUG if debug else logging.INFO
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    rich_handler = RichHandler(
        console=console,
        show_time=False,
        show_level=False,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    rich_handler.setLevel(level)
    rich_handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(rich_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
        logger.addHandler(file_handler)

    return logger


def run_command(
    command: str | list[str],
    cwd: Path | None = None,
    *,
    capture_output: bool = True,
    check: bool = False,
) -> tuple[int, str, str]:
    """Run a command without invoking a shell.

    String commands are tokenized with ``shlex.split``. Output is decoded as
    UTF-8; undecodable bytes are replaced rather than raising.

    Args:
        command: Command to run as a string or argv list
        cwd: Working directory
        capture_output: Capture stdout and stderr
        check: Raise exception on non-zero exit code

    Returns:
        Tuple of (exit_code, stdout, stderr)

    """
    try:
        args = shlex.split(command) if isinstance(command, str) else command
    except ValueError as exc:
        return (2, "", f"Invalid command syntax: {exc}")

    if not args:
        return (2, "", "No command provided")

    try:
        result = subprocess.run(  # noqa: S603  # args are tokenized argv with shell disabled.
            args,
            cwd=cwd,
            capture_output=capture_output,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=check,
        )
    except FileNotFoundError:
        return (127, "", f"Command not found: {args[0]}")
    else:
        return (result.returncode, result.stdout or "", result.stderr or "")
