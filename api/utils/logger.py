from __future__ import annotations

import copy
import logging
import os
import sys
import time
import uuid
from contextvars import ContextVar
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Iterable, Optional

REQUEST_ID: ContextVar[str] = ContextVar("request_id", default="-")

# Server, engine core and store adapters all write to the same handlers.
APP_LOGGERS = ("uvicorn", "progress_engine", "infra")

LOG_FORMAT = (
    "%(asctime)s %(levelname)-8s %(name)s "
    "pid=%(process)d request_id=%(request_id)s src=%(filename)s:%(lineno)d "
    "%(message)s"
)
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003
        record.request_id = REQUEST_ID.get("-")
        return True


class LevelColorFormatter(logging.Formatter):
    """Console formatter that colors the level name. Off for NO_COLOR or non-TTY output."""

    _RESET = "\x1b[0m"
    _COLORS = {
        logging.DEBUG: "\x1b[36m",
        logging.INFO: "\x1b[32m",
        logging.WARNING: "\x1b[33m",
        logging.ERROR: "\x1b[31m",
        logging.CRITICAL: "\x1b[35m",
    }

    def __init__(self, *args, stream=sys.stdout, **kwargs):
        super().__init__(*args, **kwargs)
        isatty = getattr(stream, "isatty", None)
        self.enable_color = not os.getenv("NO_COLOR") and callable(isatty) and bool(isatty())

    def format(self, record: logging.LogRecord) -> str:
        if not self.enable_color:
            return super().format(record)
        r = copy.copy(record)
        r.levelname = f"{self._COLORS.get(r.levelno, '')}{r.levelname}{self._RESET}"
        return super().format(r)


def configure_logging(
    *,
    log_dir: str | Path | None = None,
    log_file: str = "campus-progress.log",
    level: str | None = None,
    console: bool | None = None,
    loggers: Iterable[str] = APP_LOGGERS,
) -> logging.Logger:
    """
    Attach a rotating file handler (plus a console handler when LOG_CONSOLE is
    set) to every app logger. Defaults come from Settings.

    Idempotent; returns the "uvicorn" logger used by the API layer.
    """
    from api.config import settings

    logger = logging.getLogger("uvicorn")
    if getattr(logger, "_configured", False):
        return logger

    log_dir = Path(log_dir if log_dir is not None else settings.log_dir)
    level = (level or settings.log_level).upper()
    console = settings.log_console if console is None else console
    numeric_level = logging.getLevelNamesMapping().get(level, logging.INFO)

    log_dir.mkdir(parents=True, exist_ok=True)
    file_path = log_dir / log_file

    fh = RotatingFileHandler(
        filename=str(file_path),
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=10,
        encoding="utf-8",
    )
    fh.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    handlers: list[logging.Handler] = [fh]
    if console:
        ch = logging.StreamHandler(sys.stdout)
        ch.setFormatter(LevelColorFormatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT, stream=sys.stdout))
        handlers.append(ch)

    request_filter = RequestIdFilter()
    for h in handlers:
        h.setLevel(numeric_level)
        h.addFilter(request_filter)

    for name in loggers:
        lg = logging.getLogger(name)
        lg.setLevel(numeric_level)
        lg.propagate = False
        for h in handlers:
            lg.addHandler(h)

    logger._configured = True  # type: ignore[attr-defined]
    logger.debug("logging configured file=%s level=%s console=%s", file_path, level, console)
    return logger


def set_request_id(request_id: Optional[str] = None) -> str:
    rid = request_id or str(uuid.uuid4())
    REQUEST_ID.set(rid)
    return rid


def clear_request_id() -> None:
    REQUEST_ID.set("-")


class log_request:
    """
    Times a block and logs the outcome:
      with log_request(logger, "leaderboard user=42"):
          ...
    """

    def __init__(self, logger: logging.Logger, name: str):
        self.logger = logger
        self.name = name
        self.start = 0.0

    def __enter__(self):
        self.start = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc, tb):
        dur_ms = int((time.perf_counter() - self.start) * 1000)
        if exc is None:
            self.logger.info("%s ok duration_ms=%s", self.name, dur_ms)
        else:
            self.logger.warning("%s failed duration_ms=%s error=%s", self.name, dur_ms, exc)
        return False
