"""Terminal verdicts of a Puppet agent check and their plugin rendering."""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class Severity(Enum):
    OK = 0
    WARNING = 1
    CRITICAL = 2
    UNKNOWN = 3


@dataclass(frozen=True)
class Verdict:
    """Base class. Each subclass is one terminal outcome of an evaluation."""

    severity = Severity.UNKNOWN

    def describe(self) -> str:
        raise NotImplementedError


@dataclass(frozen=True)
class Healthy(Verdict):
    agent_version: str
    catalog_version: str
    last_run_human: str

    severity = Severity.OK

    def describe(self) -> str:
        return (
            f"OK: Puppet agent {self.agent_version} running catalogversion "
            f"{self.catalog_version}, and executed at {self.last_run_human} for last time"
        )


@dataclass(frozen=True)
class StateFileUnavailable(Verdict):
    severity = Severity.UNKNOWN

    def describe(self) -> str:
        return "UNKNOWN: last_run_summary.yaml not found, not readable or incomplete"


@dataclass(frozen=True)
class RunOverdue(Verdict):
    elapsed: int
    warning_threshold: int

    severity = Severity.WARNING

    def describe(self) -> str:
        return f"WARNING: Last run was {self.elapsed} seconds ago. warn is {self.warning_threshold}"


@dataclass(frozen=True)
class RunStale(Verdict):
    elapsed: int
    critical_threshold: int

    severity = Severity.CRITICAL

    def describe(self) -> str:
        return f"CRITICAL: Last run was {self.elapsed} seconds ago. crit is {self.critical_threshold}"


@dataclass(frozen=True)
class DaemonNotRunning(Verdict):
    severity = Severity.CRITICAL

    def describe(self) -> str:
        return "CRITICAL: Puppet daemon not running or something wrong with process"


@dataclass(frozen=True)
class ThresholdsMissing(Verdict):
    severity = Severity.UNKNOWN

    def describe(self) -> str:
        return "UNKNOWN: no WARN or CRIT parameters were sent to this check"


@dataclass(frozen=True)
class RunHadErrors(Verdict):
    severity = Severity.CRITICAL

    def describe(self) -> str:
        return "CRITICAL: Last run had 1 or more errors. Check the logs"


@dataclass(frozen=True)
class AgentDisabled(Verdict):
    reason: str

    severity = Severity.UNKNOWN

    def describe(self) -> str:
        return f"DISABLED: Reason: {self.reason}"


@dataclass(frozen=True)
class ExecutableNotFound(Verdict):
    severity = Severity.UNKNOWN

    def describe(self) -> str:
        return "UNKNOWN: No Puppet executable found"


@dataclass
class Report:
    status: str
    message: str
    exit_code: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "message": self.message,
            "exit_code": self.exit_code,
        }


def render(verdict: Verdict) -> Report:
    """Map a verdict to the single plugin output line and exit code."""
    return Report(
        status=verdict.severity.name,
        message=verdict.describe(),
        exit_code=verdict.severity.value,
    )
