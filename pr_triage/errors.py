"""Exception types raised by pr-triage."""


class PrTriageError(Exception):
    """Base class for errors reported to the user."""


class GitHubCliError(PrTriageError):
    """A ``gh`` invocation failed in a way the caller must handle."""


class CompletionError(PrTriageError):
    """A language-model completion backend failed."""
