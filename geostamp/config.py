import logging
import os
import sys
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Callable

from dotenv import load_dotenv
from rich.logging import RichHandler

# Load environment variables from the working directory .env (if present)
load_dotenv(Path.cwd() / ".env")


# --- Logging Configuration ---
# runtime modules should use logging.getLogger(...) and env LOG_LEVEL
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FILE_NAME = "geostamp.log"
_logging_configured = False


def _parse_level(value: str | None, default: int = logging.INFO) -> int:
    if not value:
        return default
    name = value.strip().upper()
    level = getattr(logging, name, default)
    return level if isinstance(level, int) else default


def _build_console_handler(level: int, isatty: Callable[[], bool] | None = None) -> logging.Handler:
    """Return a console handler. Use Rich in TTY, plain stream otherwise."""
    is_tty = (isatty or sys.stderr.isatty)()
    if is_tty:
        handler: logging.Handler = RichHandler(
            show_time=False,
            show_path=False,
            rich_tracebacks=True,
            show_level=True,
            log_time_format="[%X]",
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
    else:
        handler = logging.StreamHandler(stream=sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.setLevel(level)
    return handler


def _parse_backup_count(raw: str | None, default: int = 5) -> int:
    try:
        return max(0, int(str(raw).strip()))
    except (TypeError, ValueError):
        logging.warning("Invalid APP_LOG_BACKUP_COUNT=%r. Defaulting to %d.", raw, default)
        return default


def setup_logging(level: int | None = None, force: bool = False) -> None:
    """Configure the root logger once with console and optional file handler.

    With ``force`` the existing root handlers are replaced, so each CLI
    invocation picks up the current stderr and its own verbosity.
    """
    global _logging_configured
    if _logging_configured and not force:
        return

    if level is None:
        level = _parse_level(os.getenv("LOG_LEVEL", "INFO"))

    root = logging.getLogger()
    if force:
        for existing in list(root.handlers):
            root.removeHandler(existing)
    root.setLevel(level)
    root.addHandler(_build_console_handler(level))

    # Optional file logging only when APP_LOG_DIR is set
    app_log_dir = os.getenv("APP_LOG_DIR")
    if app_log_dir:
        log_dir = Path(app_log_dir)
        try:
            log_dir.mkdir(parents=True, exist_ok=True)
            file_handler = TimedRotatingFileHandler(
                filename=log_dir / LOG_FILE_NAME,
                when="midnight",
                backupCount=_parse_backup_count(os.getenv("APP_LOG_BACKUP_COUNT", "5")),
                encoding="utf-8",
                utc=True,
            )
            file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
            file_handler.setLevel(level)
            root.addHandler(file_handler)
        except (PermissionError, OSError) as e:
            logging.warning("Failed to configure file logging to '%s'. Error: %s", app_log_dir, e)

    # Forward warnings module messages to logging
    logging.captureWarnings(True)

    _logging_configured = True


# --- End Logging Configuration ---
