"""Shared fixtures: in-memory store, sample jobs and a fake LLM client."""
from __future__ import annotations

import os
import sys
from pathlib import Path
from types import SimpleNamespace
from typing import Any

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))
os.environ.setdefault("LOG_LEVEL", "WARNING")

from jobintel.models import Artefacts, Job, JobAnalysis, JobStatus, MarketIntel
from jobintel.storage import MemoryStore, RecordStore
from jobintel.tracker import Tracker


def make_job(
    job_id: str = "job-1",
    *,
    status: JobStatus = JobStatus.APPLIED,
    required: list[str] | None = None,
    missing: list[str] | None = None,
    analysed: bool = True,
    title: str = "Senior Product Manager",
    company: str = "Acme Health",
) -> Job:
    return Job(
        id=job_id,
        title=title,
        company=company,
        description=f"Title: {title}\nCompany: {company}\nBuild wearables.",
        status=status,
        date_added="2026-10-01T09:30:00+00:00",
        clarification_answers="Q: Visa?\nA: N/A" if analysed else None,
        analysis=JobAnalysis(
            skills_required=required or [],
            skills_missing=missing or [],
            competency_match_score=72,
            salary_range="£90k-£110k",
            rice_score=48,
            moscow_priority="Should",
            summary_bullets=["Strong AI focus"],
            red_flags=["Vague remit"],
        ) if analysed else None,
        market_intel=MarketIntel(
            funding_news=["Series B £40m"],
            competitors=["Oura"],
            office_locations=["London"],
            hiring_trends_context="Steady demand.",
        ) if analysed else None,
        artefacts=Artefacts(
            cv_bullets=["Led wearables launch"],
            cover_letter_draft="Dear team,",
            linkedin_outreach="Hi there",
            interview_prep=["Why us?"],
            star_stories=["S/T/A/R"],
        ) if analysed else None,
    )


@pytest.fixture
def kv() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def tracker(kv: MemoryStore) -> Tracker:
    t = Tracker(RecordStore(kv))
    t.initialize()
    return t


class FakeLLM:
    """Mimics ``client.chat.completions.create`` with scripted replies.

    Each reply is a string (returned as message content) or an exception
    instance (raised).
    """

    def __init__(self, *replies: Any) -> None:
        self.replies = list(replies)
        self.calls: list[dict[str, Any]] = []
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self._create))

    def _create(self, **kwargs: Any) -> Any:
        self.calls.append(kwargs)
        reply = self.replies.pop(0) if self.replies else ""
        if isinstance(reply, BaseException):
            raise reply
        message = SimpleNamespace(content=reply)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])

    @property
    def last_prompt(self) -> str:
        return self.calls[-1]["messages"][-1]["content"]


class ReadOnlyStore(MemoryStore):
    """Key-value store whose writes fail, like a full or read-only disk."""

    def set(self, key: str, value: str) -> None:
        raise OSError("No space left on device")
