"""Render a tracked job (analysis, market intel, artefacts) as Markdown."""
from __future__ import annotations

import re
from datetime import datetime
from pathlib import Path

from jobintel.config import REPORTS_DIR
from jobintel.log import get_logger
from jobintel.models import Job

log = get_logger(__name__)


def _format_date(iso: str) -> str:
    try:
        return datetime.fromisoformat(iso).strftime("%d/%m/%Y")
    except ValueError:
        return iso or "—"


def _bullets(items: list[str], empty: str = "_None_") -> list[str]:
    return [f"- {item}" for item in items] if items else [empty]


def build_job_report(job: Job) -> str:
    lines: list[str] = [
        f"# {job.title} @ {job.company}",
        "",
        f"**Status:** {job.status.value} | **Added:** {_format_date(job.date_added)}",
        "",
    ]

    a = job.analysis
    if a is not None:
        lines += [
            "## Analysis",
            "",
            "| Match | Salary | RICE | MoSCoW |",
            "|------:|--------|-----:|--------|",
            f"| {a.competency_match_score:.0f}% | {a.salary_range or '—'} "
            f"| {a.rice_score:g} | {a.moscow_priority or 'N/A'} |",
            "",
            "### Summary",
            "",
            *_bullets(a.summary_bullets),
            "",
            "### Red Flags",
            "",
            *_bullets(a.red_flags),
            "",
            f"**Required skills:** {', '.join(a.skills_required) or '—'}",
            "",
            f"**Missing skills:** {', '.join(a.skills_missing) or '—'}",
            "",
        ]

    m = job.market_intel
    if m is not None:
        lines += [
            "## Market Intel",
            "",
            "### Funding & News",
            "",
            *_bullets(m.funding_news),
            "",
            f"**Competitors:** {', '.join(m.competitors) or '—'}",
            "",
            f"**Offices:** {', '.join(m.office_locations) or '—'}",
            "",
            "### Hiring Trends",
            "",
            m.hiring_trends_context or "_None_",
            "",
        ]

    art = job.artefacts
    if art is not None:
        lines += [
            "## Artefacts",
            "",
            "### CV Bullets",
            "",
            *_bullets(art.cv_bullets),
            "",
            "### Cover Letter",
            "",
            art.cover_letter_draft or "_None_",
            "",
            "### LinkedIn Outreach",
            "",
            art.linkedin_outreach or "_None_",
            "",
            "### Interview Prep",
            "",
            *_bullets(art.interview_prep),
            "",
            "### STAR Stories",
            "",
            *_bullets(art.star_stories),
            "",
        ]

    if job.clarification_answers:
        lines += ["## Clarifications", "", job.clarification_answers, ""]

    return "\n".join(lines)


def report_filename(job: Job) -> str:
    safe = re.sub(r"[^A-Za-z0-9]+", "_", f"{job.company}_{job.title}").strip("_")[:60]
    return f"job_{safe or job.id}.md"


def write_job_report(job: Job, directory: Path | None = None) -> Path:
    directory = directory or REPORTS_DIR
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / report_filename(job)
    path.write_text(build_job_report(job), encoding="utf-8")
    log.info("Report written → %s", path)
    return path
