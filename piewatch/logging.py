import logging
import os
import structlog
import sys
from pathlib import Path
from dotenv import load_dotenv

# Third-party loggers that are chatty at INFO (httpx logs every request URL).
_QUIET_LOGGERS = ("httpx", "httpcore")

def _resolve_level(level: str | None) -> int:
    name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    return getattr(logging, name, logging.INFO)

def _handlers(log_level: int) -> list[logging.Handler]:
    formatter = logging.Formatter("%(message)s")
    console = logging.StreamHandler(sys.stdout)
    console.setLevel(log_level)
    handlers: list[logging.Handler] = [console]

    # Scheduled runs keep a separate error trail next to the state files.
    error_log_path = os.getenv("LOG_ERROR_FILE", "").strip()
    if error_log_path:
        Path(error_log_path).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(error_log_path))
        handlers[-1].setLevel(logging.ERROR)

    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers

def setup_logging(level: str | None = None, job: str | None = None):
    """Route structlog JSON events through the stdlib root logger.

    Every event carries the job name (daily/pages); the orchestrator adds
    run_id once a run starts.
    """
    load_dotenv(dotenv_path=Path(__file__).resolve().parents[1] / ".env")
    log_level = _resolve_level(level)

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(log_level)
    for handler in _handlers(log_level):
        root.addHandler(handler)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        cache_logger_on_first_use=False,
    )
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(service="piewatch", job=job or "adhoc")
