"""Skill frequency and gap statistics across tracked jobs."""
from __future__ import annotations

from typing import Iterable

from jobintel.models import HeatmapData, Job, JobStatus

TOP_GAPS = 8


def _label(key: str) -> str:
    return key[:1].upper() + key[1:]


def aggregate(jobs: Iterable[Job]) -> list[HeatmapData]:
    """Count, per lower-cased skill, how often it is required and how often missing.

    Rejected jobs and jobs without an analysis are skipped. Repeated mentions
    inside one job each count.
    """
    counts: dict[str, list[int]] = {}

    for job in jobs:
        if job.status is JobStatus.REJECTED or job.analysis is None:
            continue
        for skill in job.analysis.skills_required:
            counts.setdefault(skill.lower(), [0, 0])[0] += 1
        for skill in job.analysis.skills_missing:
            counts.setdefault(skill.lower(), [0, 0])[1] += 1

    return [
        HeatmapData(skill=_label(key), frequency=freq, gap_frequency=gap)
        for key, (freq, gap) in counts.items()
    ]


def top_gaps(heatmap: Iterable[HeatmapData], limit: int = TOP_GAPS) -> list[HeatmapData]:
    return sorted(heatmap, key=lambda h: h.gap_frequency, reverse=True)[:limit]


def gap_percent(item: HeatmapData) -> float:
    """Gap count relative to how often the skill is required; can exceed 100."""
    return item.gap_frequency / max(item.frequency, 1) * 100
