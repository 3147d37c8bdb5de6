"""Status evaluation for the Puppet agent check.

Evaluation walks a fixed chain of steps. Each step either returns a
terminal verdict or None to fall through to the next one; the first
verdict wins and no later step runs.
"""

import time
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable

from puppetcheck.check.cli import Configuration
from puppetcheck.check.liveness import daemon_is_running
from puppetcheck.check.locator import (
    CommandResult,
    ConfigQuery,
    find_executable,
    run_command,
    select_config_query,
)
from puppetcheck.check.platforms import GenericPlatform, detect_platform
from puppetcheck.check.statefile import (
    extract_run_record,
    is_readable_state_file,
    parse_disabled_reason,
    path_exists,
)
from puppetcheck.check.verdicts import (
    AgentDisabled,
    DaemonNotRunning,
    ExecutableNotFound,
    Healthy,
    RunHadErrors,
    RunOverdue,
    RunStale,
    StateFileUnavailable,
    ThresholdsMissing,
    Verdict,
)
from puppetcheck.shared.logger import get_check_logger

ERROR_COUNTERS = ("failed", "failure", "failed_to_restart")
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

logger = get_check_logger("evaluator")


@dataclass
class Environment:
    """Host capabilities the evaluation reads from. Swapped out in tests."""

    find_executable: Callable[[], str | None] = find_executable
    runner: Callable[..., CommandResult] = run_command
    platform: GenericPlatform = field(default_factory=detect_platform)
    clock: Callable[[], float] = time.time
    daemon_check: Callable[[GenericPlatform, ConfigQuery], bool] = daemon_is_running


@dataclass
class EvaluationContext:
    """Values discovered by earlier steps and consumed by later ones."""

    config_query: ConfigQuery | None = None
    lockfile: str | None = None
    statefile: str | None = None
    record: dict[str, str] = field(default_factory=dict)
    last_run: int | None = None


def _as_int(value: str) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def check_thresholds(config: Configuration, env: Environment, ctx: EvaluationContext) -> Verdict | None:
    crit = config.critical_threshold_seconds
    warn = config.warning_threshold_seconds
    if crit is None or warn is None:
        return ThresholdsMissing()
    if warn >= crit:
        logger.warning(f"Warning threshold {warn}s is not below critical threshold {crit}s")
    return None


def locate_agent(config: Configuration, env: Environment, ctx: EvaluationContext) -> Verdict | None:
    executable = env.find_executable()
    if executable is None:
        return ExecutableNotFound()
    ctx.config_query = select_config_query(executable, env.runner)
    logger.debug(f"Using {type(ctx.config_query).__name__} for {executable}")
    return None


def check_disabled(config: Configuration, env: Environment, ctx: EvaluationContext) -> Verdict | None:
    ctx.lockfile = config.disabled_lockfile_path or ctx.config_query.lookup("agent_disabled_lockfile")
    if not ctx.lockfile or not path_exists(ctx.lockfile):
        return None
    try:
        content = Path(ctx.lockfile).read_text()
    except OSError as e:
        logger.debug(f"Cannot read lockfile {ctx.lockfile}: {e}")
        content = ""
    return AgentDisabled(reason=parse_disabled_reason(content))


def check_state_file(config: Configuration, env: Environment, ctx: EvaluationContext) -> Verdict | None:
    ctx.statefile = config.state_file_path or ctx.config_query.lookup("lastrunfile")
    if not ctx.statefile or not is_readable_state_file(ctx.statefile):
        logger.debug(f"State file {ctx.statefile!r} missing, empty or unreadable")
        return StateFileUnavailable()
    return None


def check_daemon(config: Configuration, env: Environment, ctx: EvaluationContext) -> Verdict | None:
    if not config.daemon_mode:
        return None
    if not env.daemon_check(env.platform, ctx.config_query):
        return DaemonNotRunning()
    return None


def extract_fields(config: Configuration, env: Environment, ctx: EvaluationContext) -> Verdict | None:
    try:
        text = Path(ctx.statefile).read_text()
    except OSError as e:
        logger.debug(f"Cannot read state file {ctx.statefile}: {e}")
        return StateFileUnavailable()
    ctx.record = extract_run_record(text)
    ctx.last_run = _as_int(ctx.record["last_run"])
    logger.debug("Extracted run record", extra={"check_data": ctx.record})
    return None


def check_staleness(config: Configuration, env: Environment, ctx: EvaluationContext) -> Verdict | None:
    if ctx.last_run is None:
        return None
    elapsed = int(env.clock()) - ctx.last_run
    if elapsed >= config.critical_threshold_seconds:
        return RunStale(elapsed=elapsed, critical_threshold=config.critical_threshold_seconds)
    if elapsed >= config.warning_threshold_seconds:
        return RunOverdue(elapsed=elapsed, warning_threshold=config.warning_threshold_seconds)
    return None


def check_completeness(config: Configuration, env: Environment, ctx: EvaluationContext) -> Verdict | None:
    if any(not value for value in ctx.record.values()):
        return StateFileUnavailable()
    if ctx.last_run is None or any(_as_int(ctx.record[name]) is None for name in ERROR_COUNTERS):
        return StateFileUnavailable()
    return None


def check_error_counters(config: Configuration, env: Environment, ctx: EvaluationContext) -> Verdict | None:
    if any(int(ctx.record[name]) > 0 for name in ERROR_COUNTERS):
        return RunHadErrors()
    return None


def report_success(config: Configuration, env: Environment, ctx: EvaluationContext) -> Verdict | None:
    try:
        last_run_human = datetime.fromtimestamp(ctx.last_run).strftime(TIMESTAMP_FORMAT)
    except (OverflowError, OSError, ValueError):
        last_run_human = str(ctx.last_run)
    return Healthy(
        agent_version=ctx.record["puppet"],
        catalog_version=ctx.record["config"],
        last_run_human=last_run_human,
    )


STEPS = [
    locate_agent,
    check_disabled,
    check_thresholds,
    check_state_file,
    check_daemon,
    extract_fields,
    check_staleness,
    check_completeness,
    check_error_counters,
    report_success,
]


def evaluate(config: Configuration, env: Environment | None = None) -> Verdict:
    """Run every step in order and return the first verdict produced."""
    env = env or Environment()
    ctx = EvaluationContext()
    for step in STEPS:
        verdict = step(config, env, ctx)
        if verdict is not None:
            logger.debug(f"{step.__name__} returned {type(verdict).__name__}")
            return verdict
    raise RuntimeError("evaluation finished without a verdict")
