# src/nelproxy/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep the console readable:
    - allow all nelproxy logs
    - allow uvicorn startup/access lines (INFO+)
    - suppress Python warnings (captured as 'py.warnings') unless ERROR+
    - suppress other third-party noise (httpx, httpcore, ...) unless WARNING+
    """

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name

        if name == "nelproxy" or name.startswith("nelproxy."):
            return True

        if name.startswith("uvicorn"):
            return record.levelno >= logging.INFO

        if name == "py.warnings":
            return record.levelno >= logging.ERROR

        return record.levelno >= logging.WARNING


def setup_logging(
    *,
    log_file: str | Path | None = None,
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> None:
    """
    Configure logging with:
    - Console handler: filtered, on stderr so stdout stays free for emitted commands
    - File handler (optional): full logs, including the HTTP access log

    Call this ONCE, very early (before first logger.info).
    """
    root = logging.getLogger()
    root.setLevel(min(console_level, file_level) if log_file else console_level)

    # Remove any pre-existing handlers to avoid duplicates.
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(console_level)
    ch.setFormatter(fmt)
    ch.addFilter(_ConsoleNoiseFilter())
    root.addHandler(ch)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(path), encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(fmt)
        root.addHandler(fh)

    # Route warnings.warn(...) into logging as 'py.warnings'
    logging.captureWarnings(True)

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
