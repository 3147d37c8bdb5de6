"""Run the Puppet agent check: python -m puppetcheck.check [-c crit] [-w warn] ..."""

import sys

from puppetcheck.check.cli import USAGE, USAGE_EXIT_CODE, UsageError, load_defaults, parse_args
from puppetcheck.check.evaluator import Environment, evaluate
from puppetcheck.check.verdicts import render
from puppetcheck.shared.logger import configure_check_loggers, get_check_logger

logger = get_check_logger("cli")


def main(argv: list[str] | None = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    try:
        defaults = load_defaults()
        configure_check_loggers(defaults["log_level"], defaults.get("log_file"))
        config = parse_args(argv, defaults)
    except UsageError as e:
        logger.warning(f"Usage error: {e}")
        print(USAGE)
        return USAGE_EXIT_CODE

    report = render(evaluate(config, Environment()))
    print(report.message)
    logger.info(f"Check finished: {report.status}", extra={"check_data": report.to_dict()})
    return report.exit_code


if __name__ == "__main__":
    sys.exit(main())
