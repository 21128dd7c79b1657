"""Logging setup for the tracker: console plus one file per day."""
from __future__ import annotations

import logging
import os
import sys
from datetime import datetime
from pathlib import Path

_DEFAULT_LOG_DIR = Path(__file__).resolve().parent.parent / "logs"
_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s"
_DATE_FMT = "%Y-%m-%d %H:%M:%S"

# The LLM transport logs every HTTP request at INFO.
_CHATTY_LOGGERS: tuple[str, ...] = ("httpx", "httpcore", "openai")

_configured = False


def get_logger(name: str) -> logging.Logger:
    """Return a named logger; configures root handlers on first call."""
    global _configured
    if not _configured:
        _configure()
        _configured = True
    return logging.getLogger(name)


def log_dir() -> Path:
    override = os.environ.get("LOG_DIR", "").strip()
    return Path(override) if override else _DEFAULT_LOG_DIR


def _configure() -> None:
    level_name = os.environ.get("LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)

    root = logging.getLogger()
    root.setLevel(level)
    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    # Streamlit reruns the script on every interaction; attach handlers once.
    if root.handlers:
        return

    formatter = logging.Formatter(_FORMAT, datefmt=_DATE_FMT)
    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)
    console.setFormatter(formatter)
    root.addHandler(console)

    target = log_dir()
    try:
        target.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(
            target / f"tracker_{datetime.now().strftime('%Y-%m-%d')}.log",
            encoding="utf-8",
        )
    except OSError as exc:
        root.warning("File logging disabled (%s)", exc)
        return
    fh.setLevel(logging.DEBUG)
    fh.setFormatter(formatter)
    root.addHandler(fh)
