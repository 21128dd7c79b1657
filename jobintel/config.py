"""Environment, paths and candidate profile configuration."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from jobintel.log import get_logger

log = get_logger(__name__)

ROOT: Path = Path(__file__).resolve().parent.parent

load_dotenv(ROOT / ".env")

CONFIG_DIR: Path = ROOT / "config"
PROFILE_PATH: Path = CONFIG_DIR / "profile.yaml"
REPORTS_DIR: Path = ROOT / "reports"

DEFAULT_MODEL = "llama-3.3-70b-versatile"
DEFAULT_BASE_URL = "https://api.groq.com/openai/v1"

# Fixed key the job list is stored under.
JOBS_KEY = "job_tracker_jobs"


def get_env(key: str, default: str = "") -> str:
    return os.environ.get(key, default).strip()


def data_dir() -> Path:
    """Directory backing the local key-value store (``JOB_STORE_DIR`` overrides)."""
    override = get_env("JOB_STORE_DIR")
    return Path(override) if override else ROOT / "data"


def llm_settings() -> dict[str, Any]:
    attempts = get_env("LLM_MAX_ATTEMPTS", "1")
    try:
        max_attempts = max(1, int(attempts))
    except ValueError:
        log.warning("Ignoring invalid LLM_MAX_ATTEMPTS=%r", attempts)
        max_attempts = 1
    return {
        "api_key": get_env("GROQ_API_KEY"),
        "model": get_env("GROQ_LLM_MODEL") or DEFAULT_MODEL,
        "base_url": get_env("LLM_BASE_URL") or DEFAULT_BASE_URL,
        "max_attempts": max_attempts,
    }


def ensure_dirs() -> None:
    for d in (REPORTS_DIR, data_dir()):
        d.mkdir(parents=True, exist_ok=True)


def load_profile(path: Path | None = None) -> dict[str, Any]:
    """Candidate profile used to ground the analysis prompts.

    Returns an empty dict when no profile has been written yet.
    """
    path = path or PROFILE_PATH
    if not path.exists():
        return {}
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        log.warning("Ignoring %s: expected a mapping, got %s", path, type(data).__name__)
        return {}

    # Accept a flat file as well as the nested ``profile:`` layout.
    if "profile" not in data:
        data = {"profile": dict(data)}
    if not isinstance(data["profile"], dict):
        data["profile"] = {}
    data.setdefault("locations", data["profile"].pop("locations", []))
    return data
