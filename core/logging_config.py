"""
Logging for the analytics API and report script.

Console output stays human-readable; the rotating files carry one JSON
object per line so section failures can be grepped by section and user.
"""

import json
import logging
import logging.handlers
from datetime import datetime, timezone
from pathlib import Path

from core.config import settings

CONSOLE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5

# Third-party loggers that drown out report timings at INFO
QUIET_LOGGERS = ("aiohttp", "asyncio", "sqlalchemy", "alembic")


class JSONFormatter(logging.Formatter):
    """One JSON object per record, with analytics context from ``extra``."""

    EXTRA_FIELDS = ("user_id", "section", "duration", "batch")

    def format(self, record):
        entry = {
            "timestamp": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "where": f"{record.module}.{record.funcName}:{record.lineno}",
        }
        entry.update({
            name: getattr(record, name)
            for name in self.EXTRA_FIELDS
            if hasattr(record, name)
        })
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, ensure_ascii=False, default=str)


def _rotating_json_handler(path: Path, level: int) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        path,
        maxBytes=MAX_LOG_BYTES,
        backupCount=LOG_BACKUPS,
        encoding='utf-8',
    )
    handler.setLevel(level)
    handler.setFormatter(JSONFormatter())
    return handler


def setup_logging(log_dir: str | Path | None = None):
    """
    Configure the root logger.

    Args:
        log_dir: Where ``studio_analytics.log`` and ``errors.log`` rotate;
            defaults to ``settings.log_dir``
    """
    log_dir = Path(log_dir or settings.log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(settings.log_level.upper())
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console = logging.StreamHandler()
    console.setLevel(logging.DEBUG if settings.debug else logging.INFO)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
    root_logger.addHandler(console)

    root_logger.addHandler(_rotating_json_handler(log_dir / "studio_analytics.log", logging.DEBUG))
    root_logger.addHandler(_rotating_json_handler(log_dir / "errors.log", logging.ERROR))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).info(
        f"Logging configured: level={settings.log_level}, dir={log_dir.absolute()}"
    )
