"""Interactive pull request triage with optional AI review."""
