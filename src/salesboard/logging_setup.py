# src/salesboard/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

# Loggers whose INFO/DEBUG output only goes to the log file. Console commands already
# print the outcome of every store mutation, so repeating it on stderr is noise.
FILE_ONLY_BELOW_WARNING = ("salesboard.tasks.task_store",)

# Third-party loggers allowed on the console at WARNING+ (everything else: ERROR+).
CHATTY_LIBRARIES = ("httpx", "httpcore", "asyncio")


class _ConsoleNoiseFilter(logging.Filter):
    """
    Console filter for the interactive REPL:
    - salesboard logs pass, except store mutation chatter (file only unless WARNING+)
    - httpx/httpcore/asyncio only WARNING+
    - Python warnings (captured as 'py.warnings') and other libraries only ERROR+
    """

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name

        if name == "salesboard" or name.startswith("salesboard."):
            if name.startswith(FILE_ONLY_BELOW_WARNING):
                return record.levelno >= logging.WARNING
            return True

        if name.split(".", 1)[0] in CHATTY_LIBRARIES:
            return record.levelno >= logging.WARNING

        return record.levelno >= logging.ERROR


def parse_level(name: str | None, default: int = logging.INFO) -> int:
    """'debug' / 'WARNING' / '10' -> logging level; unknown names fall back to default."""
    raw = str(name or "").strip()
    if raw.isdigit():
        return int(raw)
    level = logging.getLevelName(raw.upper())
    return level if isinstance(level, int) else default


def setup_logging(
    *,
    log_dir: str | Path = ".local/salesboard",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Configure root logging for the app:
    - stderr handler at console_level with _ConsoleNoiseFilter
    - <log_dir>/salesboard.log at file_level with every record

    Call once from the entrypoint, before the store is created. Returns the log file path.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "salesboard.log"

    root = logging.getLogger()
    root.setLevel(min(console_level, file_level))

    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(fmt)
    console.addFilter(_ConsoleNoiseFilter())
    root.addHandler(console)

    file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
    file_handler.setLevel(file_level)
    file_handler.setFormatter(fmt)
    root.addHandler(file_handler)

    logging.captureWarnings(True)

    # httpx logs every request at INFO; the loader logs its own summary instead.
    for lib in ("httpx", "httpcore"):
        logging.getLogger(lib).setLevel(logging.WARNING)

    return log_file
