"""Puppet daemon liveness verification.

A pidfile alone can be stale, so the process table, the pidfile and (on
Linux) the process command line are cross-checked before the daemon is
considered alive.
"""

import os
import re
from pathlib import Path

import psutil

from puppetcheck.check.locator import ConfigQuery
from puppetcheck.check.platforms import GenericPlatform
from puppetcheck.check.statefile import path_exists
from puppetcheck.shared.logger import get_check_logger

AGENT_PROCESS_PATTERNS = [re.compile(r"(?:^|[\s/])puppet\s+agent\b"), re.compile(r"(?:^|[\s/])puppetd\b")]
MAX_PID = 2**31 - 1
AGENT_NAME = "puppet"

logger = get_check_logger("liveness")


def find_agent_process() -> bool:
    """True if any other process command line matches a known agent pattern."""
    own_pid = os.getpid()
    for proc in psutil.process_iter(["name", "pid", "cmdline"]):
        if proc.info.get("pid") == own_pid:
            continue
        cmdline = " ".join(proc.info.get("cmdline") or []) or (proc.info.get("name") or "")
        if any(p.search(cmdline) for p in AGENT_PROCESS_PATTERNS):
            return True
    return False


def locate_pidfile(adapter: GenericPlatform, config_query: ConfigQuery) -> str | None:
    """Prefer the platform default pidfile, falling back to the agent's setting."""
    default = adapter.default_pidfile_path()
    if path_exists(default):
        return default
    return config_query.lookup("pidfile")


def read_pid(pidfile: str) -> int | None:
    """Return the pid stored in pidfile, or None if missing or unreadable."""
    try:
        content = Path(pidfile).read_text().strip()
    except OSError:
        return None
    try:
        pid = int(content.split()[0]) if content else None
    except ValueError:
        return None
    if pid is not None and not 1 <= pid <= MAX_PID:
        return None
    return pid


def daemon_is_running(adapter: GenericPlatform, config_query: ConfigQuery) -> bool:
    """Run the liveness sub-checks in order, stopping at the first failure."""
    if not find_agent_process():
        logger.debug("No agent process in process table")
        return False

    pidfile = locate_pidfile(adapter, config_query)
    if not pidfile:
        logger.debug("No pidfile could be located")
        return False

    pid = read_pid(pidfile)
    if pid is None:
        logger.debug(f"Pidfile {pidfile} missing or without a pid")
        return False

    try:
        running = psutil.pid_exists(pid)
    except (OverflowError, psutil.Error):
        running = False
    if not running:
        logger.debug(f"Pid {pid} from {pidfile} is not running")
        return False

    cmdline = adapter.process_command_line(pid)
    if cmdline is not None and AGENT_NAME not in cmdline:
        logger.debug(f"Pid {pid} is not a {AGENT_NAME} process: {cmdline!r}")
        return False

    return True
