import argparse
import sys

import structlog

from .config import load_settings
from .errors import ConfigError
from .logging import setup_logging
from .pipeline.orchestrator import run_daily_email, run_pages

log = structlog.get_logger()


def _daily(settings):
    settings.require_smtp()
    result = run_daily_email(settings)
    print(f"✓ Email sent ({result.classification}).")


def _pages(settings):
    run_pages(settings)
    print(f"Built {settings.pages_out_dir}/index.html and {settings.pages_out_dir}/latest.json")


JOBS = {"daily": _daily, "pages": _pages}


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(prog="piewatch", description="Trading 212 pie digest")
    parser.add_argument("job", choices=sorted(JOBS), help="daily: email digest; pages: static dashboard")
    parser.add_argument("--log-level", default=None)
    args = parser.parse_args(argv)

    setup_logging(level=args.log_level, job=args.job)
    try:
        settings = load_settings()
        JOBS[args.job](settings)
    except ConfigError as exc:
        log.error("config_error", err=str(exc))
        return 1
    except Exception as exc:
        log.error("fatal", err=str(exc), error_type=type(exc).__name__)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
