# src/study_planner/logging_setup.py

from __future__ import annotations

import logging
import sys
from collections.abc import Iterable
from pathlib import Path

# Logger-name prefix -> minimum level shown on the console. Longest prefix wins.
_CONSOLE_THRESHOLDS: dict[str, int] = {
    "study_planner.": logging.DEBUG,
    # One line per store mutation; the file log keeps them.
    "study_planner.tasks.task_store": logging.WARNING,
    "py.warnings": logging.ERROR,
}
_THIRD_PARTY_THRESHOLD = logging.ERROR

NOISY_LIBRARIES = ("httpx", "httpcore", "openai")


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep the interactive console readable.

    Our own loggers pass (the store only at WARNING+), anything else
    (httpx, openai, captured warnings) needs ERROR+.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        threshold = _THIRD_PARTY_THRESHOLD
        matched = ""
        for prefix, level in _CONSOLE_THRESHOLDS.items():
            if record.name.startswith(prefix) and len(prefix) > len(matched):
                matched, threshold = prefix, level
        return record.levelno >= threshold


def setup_logging(
    *,
    log_dir: str | Path = ".local/study",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
    quiet: Iterable[str] = NOISY_LIBRARIES,
) -> Path:
    """
    Console handler (filtered) + study.log file handler (everything at
    file_level). Replaces handlers installed earlier, so calling it twice
    does not duplicate output. Returns the log file path.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "study.log"

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
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

    # Request/response chatter from the HTTP and SDK layers stays out of both handlers.
    for name in quiet:
        logging.getLogger(name).setLevel(logging.WARNING)

    return log_file
