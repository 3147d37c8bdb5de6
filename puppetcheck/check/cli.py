"""Command-line parsing for the Puppet agent check.

Usage:
    check_puppet_agent [-c critical] [-d 0|1] [-h] [-l lockfile] [-s statefile] [-w warn]
"""

import argparse
import logging
import os
import re
from dataclasses import dataclass
from typing import Any

from puppetcheck.shared.config import load_check_config

USAGE_EXIT_CODE = 3
CONFIG_ENV = "PUPPETCHECK_CONFIG"
LOG_LEVEL_ENV = "PUPPETCHECK_LOG_LEVEL"

USAGE = """Usage: check_puppet_agent [-c critical] [-d daemonized] [-l agent_disabled_lockfile] [-s statefile] [-w warn]
Check the Puppet agent's last run and, optionally, its daemon process.

  -c  Critical threshold in seconds since the last run (default 7200)
  -d  0 if the agent runs from cron, 1 if it runs as a daemon (default 1)
  -h  Show this help
  -l  Agent disabled lockfile (default: puppet config print agent_disabled_lockfile)
  -s  Last run summary file (default: puppet config print lastrunfile)
  -w  Warning threshold in seconds since the last run (default 3600)"""

DEFAULTS: dict[str, Any] = {
    "critical": 7200,
    "warning": 3600,
    "daemon": 1,
    "lockfile": None,
    "statefile": None,
    "log_file": None,
    "log_level": "WARNING",
}

_ALPHA_RE = re.compile(r"[a-zA-Z]")


class UsageError(Exception):
    """Raised for malformed, unrecognised or help flags."""


@dataclass(frozen=True)
class Configuration:
    critical_threshold_seconds: int | None = 7200
    warning_threshold_seconds: int | None = 3600
    daemon_mode: bool = True
    disabled_lockfile_path: str | None = None
    state_file_path: str | None = None


class _Parser(argparse.ArgumentParser):
    def error(self, message):
        raise UsageError(message)


def _build_parser() -> _Parser:
    parser = _Parser(prog="check_puppet_agent", add_help=False, allow_abbrev=False)
    parser.add_argument("-c", dest="critical")
    parser.add_argument("-d", dest="daemon")
    parser.add_argument("-h", dest="help", action="store_true")
    parser.add_argument("-l", dest="lockfile")
    parser.add_argument("-s", dest="statefile")
    parser.add_argument("-w", dest="warning")
    return parser


def parse_threshold(flag: str, value: Any) -> int:
    """Validate a threshold in seconds. Raises UsageError when it is not a positive integer."""
    text = str(value).strip()
    if not text or _ALPHA_RE.search(text):
        raise UsageError(f"{flag} expects a number of seconds, got {value!r}")
    try:
        seconds = int(text)
    except ValueError:
        raise UsageError(f"{flag} expects a number of seconds, got {value!r}")
    if seconds <= 0:
        raise UsageError(f"{flag} must be positive, got {seconds}")
    return seconds


def _threshold(flag: str, flag_value: str | None, default: Any) -> int | None:
    if flag_value is not None:
        return parse_threshold(flag, flag_value)
    if default is None:
        return None
    return parse_threshold(flag, default)


def parse_daemon_mode(value: Any) -> bool:
    text = str(int(value)) if isinstance(value, bool) else str(value).strip()
    if text not in ("0", "1"):
        raise UsageError(f"-d expects 0 or 1, got {value!r}")
    return text == "1"


def load_defaults(environ: dict[str, str] | None = None) -> dict[str, Any]:
    """Merge the optional defaults file and environment over built-in defaults."""
    environ = os.environ if environ is None else environ
    settings = dict(DEFAULTS)
    config_path = environ.get(CONFIG_ENV)
    if config_path:
        try:
            settings = load_check_config(config_path, defaults=settings)
        except (OSError, ValueError) as e:
            raise UsageError(f"Cannot load {CONFIG_ENV}={config_path}: {e}")
    if environ.get(LOG_LEVEL_ENV):
        settings["log_level"] = environ[LOG_LEVEL_ENV]
    settings["log_level"] = str(settings["log_level"]).upper()
    if not isinstance(logging.getLevelName(settings["log_level"]), int):
        raise UsageError(f"Unknown log level {settings['log_level']!r}")
    return settings


def parse_args(argv: list[str], defaults: dict[str, Any] | None = None) -> Configuration:
    """Build a Configuration from command-line flags layered over defaults.

    Flag values are validated strictly. A threshold nulled out in the
    defaults file is kept as None so evaluation can report it.
    """
    settings = dict(DEFAULTS) if defaults is None else defaults
    args = _build_parser().parse_args(argv)
    if args.help:
        raise UsageError("help requested")

    daemon = args.daemon if args.daemon is not None else settings.get("daemon", 1)

    return Configuration(
        critical_threshold_seconds=_threshold("-c", args.critical, settings.get("critical")),
        warning_threshold_seconds=_threshold("-w", args.warning, settings.get("warning")),
        daemon_mode=parse_daemon_mode(daemon),
        disabled_lockfile_path=args.lockfile if args.lockfile is not None else settings.get("lockfile"),
        state_file_path=args.statefile if args.statefile is not None else settings.get("statefile"),
    )
