"""Locate the Puppet executable and query its configuration.

Puppet 3 and later answer ``puppet config print <key>``; older releases
only understand ``puppet agent --configprint <key>``. The strategy is
chosen once from the executable's major version.
"""

import os
import re
import shutil
import subprocess
from dataclasses import dataclass, field
from typing import Callable

EXECUTABLE_NAME = "puppet"
EXTRA_SEARCH_DIRS = ["/opt/puppetlabs/bin", "/usr/local/bin"]
MODERN_MAJOR_VERSION = 3

_VERSION_RE = re.compile(r"^\s*(\d+)\.")


@dataclass
class CommandResult:
    success: bool
    output: str
    command: str

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "output": self.output,
            "command": self.command,
        }


def run_command(*args: str) -> CommandResult:
    """Run a command and capture its stripped stdout."""
    try:
        proc = subprocess.run(list(args), capture_output=True, text=True)
    except OSError as e:
        return CommandResult(success=False, output=str(e), command=" ".join(args))
    return CommandResult(
        success=proc.returncode == 0,
        output=proc.stdout.strip(),
        command=" ".join(args),
    )


def find_executable(name: str = EXECUTABLE_NAME) -> str | None:
    """Search $PATH plus the package install prefixes for the executable."""
    search = os.environ.get("PATH", "").split(os.pathsep) + EXTRA_SEARCH_DIRS
    return shutil.which(name, path=os.pathsep.join(d for d in search if d))


def parse_major_version(text: str) -> int | None:
    """Return the major version from ``puppet --version`` output, if any."""
    match = _VERSION_RE.match(text)
    if match is None:
        return None
    return int(match.group(1))


@dataclass
class ConfigQuery:
    """Base config-lookup strategy. Results are cached per key."""

    executable: str
    runner: Callable[..., CommandResult] = run_command
    _cache: dict[str, str | None] = field(default_factory=dict, init=False, repr=False)

    def command_for(self, key: str) -> list[str]:
        raise NotImplementedError

    def lookup(self, key: str) -> str | None:
        """Return the configured value for key, or None when the lookup fails."""
        if key not in self._cache:
            result = self.runner(*self.command_for(key))
            value = result.output.splitlines()[0].strip() if result.output else ""
            self._cache[key] = value if result.success and value else None
        return self._cache[key]


@dataclass
class ModernConfigQuery(ConfigQuery):
    """``puppet config print`` with elevated privileges."""

    def command_for(self, key: str) -> list[str]:
        command = [self.executable, "config", "print", key]
        if os.geteuid() != 0:
            command = ["sudo", "-n"] + command
        return command


@dataclass
class LegacyConfigQuery(ConfigQuery):
    """``puppet agent --configprint`` for releases before 3.x."""

    def command_for(self, key: str) -> list[str]:
        return [self.executable, "agent", "--configprint", key]


def select_config_query(
    executable: str,
    runner: Callable[..., CommandResult] = run_command,
) -> ConfigQuery:
    """Pick the config-lookup syntax matching the installed agent version."""
    result = runner(executable, "--version")
    major = parse_major_version(result.output) if result.success else None
    if major is not None and major >= MODERN_MAJOR_VERSION:
        return ModernConfigQuery(executable, runner)
    return LegacyConfigQuery(executable, runner)
