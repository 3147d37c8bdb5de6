"""Text adapters for the Puppet agent's state and lock files.

The run summary is scanned line by line for a handful of fixed labels; the
disabled lockfile is stripped of its JSON markers. Neither file is parsed
as YAML or JSON.
"""

import os
from pathlib import Path

RUN_RECORD_LABELS = {
    "last_run": "last_run:",
    "config": "config:",
    "puppet": "puppet:",
    "failed": "failed:",
    "failure": "failure:",
    "failed_to_restart": "failed_to_restart:",
}

_DISABLED_PREFIX = '{"disabled_message":"'
_DISABLED_SUFFIX = '"}'


def extract_token(text: str, label: str) -> str:
    """Return the second whitespace-separated token of the first line containing label."""
    for line in text.splitlines():
        if label in line:
            parts = line.split()
            return parts[1] if len(parts) > 1 else ""
    return ""


def extract_run_record(text: str) -> dict[str, str]:
    """Extract every run-record field from a run summary. Missing fields are empty."""
    return {field: extract_token(text, label) for field, label in RUN_RECORD_LABELS.items()}


def parse_disabled_reason(text: str) -> str:
    """Pull the human-readable reason out of a disabled lockfile's content."""
    return text.replace(_DISABLED_PREFIX, "").replace(_DISABLED_SUFFIX, "").strip()


def is_readable_state_file(path: str) -> bool:
    """True when path is a non-empty regular file this process can read."""
    state = Path(path)
    try:
        return state.is_file() and state.stat().st_size > 0 and os.access(state, os.R_OK)
    except OSError:
        return False


def path_exists(path: str) -> bool:
    """Existence test that treats an unreachable path as absent."""
    try:
        return Path(path).exists()
    except OSError:
        return False
