"""Persistence of PR numbers the user chose to ignore permanently."""

import json
import logging
from pathlib import Path
from typing import Protocol


class IgnoreStore(Protocol):
    """Load and save the set of ignored PR numbers."""

    def load(self) -> set[int]:
        """Return the stored PR numbers."""
        ...

    def save(self, numbers: set[int]) -> None:
        """Replace the stored PR numbers."""
        ...


class JsonIgnoreStore:
    """Ignore list kept as a JSON array of integers.

    A missing file is an empty list. Read and write failures are logged as
    warnings; the run carries on with whatever is in memory.
    """

    def __init__(self, path: Path, logger: logging.Logger) -> None:
        """Initialize the store.

        Args:
            path: JSON file holding the ignore list
            logger: Logger instance for output

        """
        self.path = path
        self.logger = logger

    def load(self) -> set[int]:
        """Read the stored numbers; missing or unreadable files are empty."""
        if not self.path.exists():
            return set()

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            self.logger.warning("⚠️  Could not load ignored PRs list: %s", exc)
            return set()

        if not isinstance(data, list):
            self.logger.warning("⚠️  Ignored PRs list in %s is not a JSON array", self.path)
            return set()

        numbers = {item for item in data if isinstance(item, int) and not isinstance(item, bool)}
        self.logger.info("📝 Loaded %s ignored PRs from previous sessions", len(numbers))
        return numbers

    def save(self, numbers: set[int]) -> None:
        """Write the numbers, logging a warning on failure."""
        try:
            self.path.write_text(json.dumps(sorted(numbers), indent=2) + "\n", encoding="utf-8")
        except OSError as exc:
            self.logger.warning("⚠️  Could not save ignored PRs list: %s", exc)
