"""Streamlit UI for the Job Intelligence Tracker."""
from __future__ import annotations

import html
import sys
from datetime import datetime
from pathlib import Path

import pandas as pd
import streamlit as st

ROOT = Path(__file__).resolve().parent
sys.path.insert(0, str(ROOT))

from jobintel.analysis import AnalysisClient
from jobintel.config import PROFILE_PATH, ensure_dirs
from jobintel.intake import IntakeWizard
from jobintel.log import get_logger
from jobintel.models import Job, JobStatus
from jobintel.report import build_job_report, report_filename, write_job_report
from jobintel.skills import gap_percent, top_gaps
from jobintel.storage import FileStore, RecordStore
from jobintel.tracker import Tracker, View

log = get_logger(__name__)

# ── Constants ────────────────────────────────────────────────────────────

STATUS_OPTIONS: list[str] = [s.value for s in JobStatus]

_MOSCOW_BADGE: dict[str, str] = {"Must": "🔴", "Should": "🟠", "Could": "⚪", "Won't": "⚫"}
_STATUS_BADGE: dict[str, str] = {
    "Draft": "📝", "Applied": "📨", "Interview": "🗣️", "Offer": "🎉", "Rejected": "✖️",
}

_CSS = """
<style>
[data-testid="stAppViewContainer"] {
    background: #f8fafc;
}
.block-container {
    padding-top: 2rem;
    max-width: 1200px;
}
[data-testid="stMetric"] {
    background: #ffffff;
    padding: 0.75rem 1rem;
    border-radius: 8px;
    border: 1px solid #e2e8f0;
}
.briefing {
    white-space: pre-wrap;
    font-family: ui-monospace, monospace;
    font-size: 0.85rem;
    background: #f1f5f9;
    padding: 1rem;
    border-radius: 6px;
    border: 1px solid #e2e8f0;
}
.section-label {
    font-size: 0.7rem;
    font-weight: 700;
    color: #94a3b8;
    text-transform: uppercase;
    letter-spacing: 0.08em;
}
h1, h2, h3 {
    color: #0f172a;
}
</style>
"""

# ── Session objects ──────────────────────────────────────────────────────


def _tracker() -> Tracker:
    if "tracker" not in st.session_state:
        ensure_dirs()
        tracker = Tracker(RecordStore(FileStore()))
        tracker.initialize()
        st.session_state["tracker"] = tracker
    return st.session_state["tracker"]


def _client() -> AnalysisClient:
    if "client" not in st.session_state:
        st.session_state["client"] = AnalysisClient()
    return st.session_state["client"]


def _wizard() -> IntakeWizard:
    if "wizard" not in st.session_state:
        st.session_state["wizard"] = IntakeWizard(_client())
    return st.session_state["wizard"]


def _briefing() -> str:
    # One briefing per session; the dashboard is re-rendered on every click.
    if "briefing" not in st.session_state:
        with st.spinner("Analysing market trends…"):
            st.session_state["briefing"] = _client().fetch_daily_briefing()
    return st.session_state["briefing"]


def _label(text: str) -> None:
    st.markdown(f'<div class="section-label">{text}</div>', unsafe_allow_html=True)


def _format_date(iso: str) -> str:
    try:
        return datetime.fromisoformat(iso).strftime("%d/%m/%Y")
    except ValueError:
        return iso


# ── View: Dashboard ──────────────────────────────────────────────────────


def view_dashboard(tracker: Tracker) -> None:
    c1, c2 = st.columns([4, 1])
    with c1:
        st.header("Intelligence Dashboard")
        st.caption("Market signals and application pipeline.")
    with c2:
        if st.button("＋ Analyse New Role", type="primary", use_container_width=True):
            _wizard().reset()
            tracker.navigate(View.ADD_JOB)
            st.rerun()

    _label("Daily Market Signal")
    st.markdown(f'<div class="briefing">{html.escape(_briefing())}</div>', unsafe_allow_html=True)
    st.divider()

    queue_col, heat_col = st.columns([2, 1])

    with queue_col:
        _label("Active Priority Queue")
        active = tracker.active_jobs()
        if not active:
            st.info("No active applications tracking. Start a new analysis.")
        for job in active:
            _queue_row(tracker, job)

    with heat_col:
        _label("Market Gap Heatmap")
        gaps = top_gaps(tracker.state.heatmap)
        if not gaps:
            st.caption("_Add jobs to generate skill gap data._")
        for item in gaps:
            pct = gap_percent(item)
            st.progress(
                min(pct, 100.0) / 100,
                text=f"**{item.skill}** — missing in {item.gap_frequency} JDs",
            )
        if gaps:
            df = pd.DataFrame(
                [{"Skill": h.skill, "Required": h.frequency, "Missing": h.gap_frequency} for h in gaps]
            )
            with st.expander("Gap table"):
                st.dataframe(df, use_container_width=True, hide_index=True)
        st.caption(
            "Bars show how often a skill is missing relative to how often it is required."
        )


def _queue_row(tracker: Tracker, job: Job) -> None:
    a = job.analysis
    priority = a.moscow_priority if a and a.moscow_priority else "N/A"
    rice = f"{a.rice_score:g}" if a else "-"
    with st.container(border=True):
        c1, c2, c3 = st.columns([3, 2, 1])
        with c1:
            st.markdown(f"**{job.title}**  \n{job.company}")
            st.caption(f"{_MOSCOW_BADGE.get(priority, '⚪')} {priority} · RICE: {rice}")
        with c2:
            st.markdown(f"{_STATUS_BADGE.get(job.status.value, '')} {job.status.value}")
            st.caption(_format_date(job.date_added))
        with c3:
            if st.button("Open", key=f"open_{job.id}", use_container_width=True):
                tracker.select_job(job)
                st.rerun()


# ── View: Add Job ────────────────────────────────────────────────────────


def view_add_job(tracker: Tracker) -> None:
    wizard = _wizard()

    c1, c2 = st.columns([4, 1])
    with c1:
        st.header("New Role Analysis")
    with c2:
        if st.button("Cancel", use_container_width=True):
            wizard.reset()
            tracker.navigate(View.DASHBOARD)
            st.rerun()

    if wizard.step == 1:
        wizard.jd_text = st.text_area(
            "Job Description / Link Content",
            value=wizard.jd_text,
            height=320,
            placeholder="Paste the full job description here…",
        )
        clicked = st.button(
            "Start Ingestion & Clarification",
            type="primary",
            use_container_width=True,
            disabled=wizard.loading or not wizard.jd_text.strip(),
        )
        if clicked:
            with st.spinner("Scanning…"):
                ok = wizard.start_clarification()
            if ok:
                st.rerun()

    elif wizard.step == 2:
        st.subheader("Clarifying Context")
        st.caption("Specific details calibrate the RICE score and artefacts.")
        for i, question in enumerate(wizard.questions):
            answer = st.text_input(
                question,
                value=wizard.answers.get(i, ""),
                key=f"answer_{i}",
                placeholder="Your concise answer…",
            )
            wizard.set_answer(i, answer)

        clicked = st.button(
            "Run Full Analysis",
            type="primary",
            use_container_width=True,
            disabled=wizard.loading,
        )
        if clicked:
            with st.spinner("Processing market intel & artefacts…"):
                job = wizard.run_analysis(tracker)
            if job is not None:
                st.rerun()

    if wizard.error:
        st.error(wizard.error)


# ── View: Job Detail ─────────────────────────────────────────────────────


def view_job_detail(tracker: Tracker) -> None:
    job = tracker.state.selected
    if job is None:
        tracker.navigate(View.DASHBOARD)
        st.rerun()
        return

    if st.button("← Back to Dashboard"):
        tracker.navigate(View.DASHBOARD)
        st.rerun()

    c1, c2, c3 = st.columns([3, 1, 1])
    with c1:
        st.header(job.title)
        st.caption(f"{job.company} · added {_format_date(job.date_added)}")
    with c2:
        status = st.selectbox(
            "Status",
            STATUS_OPTIONS,
            index=STATUS_OPTIONS.index(job.status.value),
            key=f"status_{job.id}",
        )
        if status != job.status.value:
            tracker.update_status(job.id, status)
            st.rerun()
    with c3:
        confirm = st.checkbox("Confirm delete", key=f"confirm_{job.id}")
        if st.button("Delete", disabled=not confirm, use_container_width=True):
            tracker.delete_job(job.id)
            st.rerun()

    tab_analysis, tab_intel, tab_artefacts = st.tabs(["Analysis", "Market Intel", "Artefacts"])
    with tab_analysis:
        _render_analysis(job)
    with tab_intel:
        _render_intel(job)
    with tab_artefacts:
        _render_artefacts(job)

    st.divider()
    d1, d2 = st.columns(2)
    with d1:
        st.download_button(
            "Download as Markdown",
            data=build_job_report(job),
            file_name=report_filename(job),
            mime="text/markdown",
            use_container_width=True,
        )
    with d2:
        if st.button("Save to reports/", use_container_width=True):
            path = write_job_report(job)
            st.success(f"Saved → `{path.name}`")


def _render_analysis(job: Job) -> None:
    a = job.analysis
    if a is None:
        st.info("No analysis available.")
        return
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Match", f"{a.competency_match_score:.0f}%")
    c2.metric("Salary", a.salary_range or "—")
    c3.metric("RICE", f"{a.rice_score:g}")
    c4.metric("MoSCoW", a.moscow_priority or "N/A")

    st.subheader("Summary")
    for bullet in a.summary_bullets:
        st.markdown(f"- {bullet}")

    if a.red_flags:
        st.subheader("Red Flags")
        for flag in a.red_flags:
            st.warning(flag)

    s1, s2 = st.columns(2)
    with s1:
        st.markdown("**Required skills**")
        st.markdown(", ".join(a.skills_required) or "—")
    with s2:
        st.markdown("**Missing skills**")
        st.markdown(", ".join(a.skills_missing) or "—")


def _render_intel(job: Job) -> None:
    m = job.market_intel
    if m is None:
        st.info("No market intel available.")
        return
    st.subheader("Funding & News")
    for item in m.funding_news:
        st.markdown(f"- {item}")
    c1, c2 = st.columns(2)
    with c1:
        st.markdown("**Competitors**")
        st.markdown(", ".join(m.competitors) or "—")
    with c2:
        st.markdown("**Offices**")
        st.markdown(", ".join(m.office_locations) or "—")
    st.subheader("Hiring Trends")
    st.write(m.hiring_trends_context or "—")


def _render_artefacts(job: Job) -> None:
    art = job.artefacts
    if art is None:
        st.info("No artefacts available.")
        return
    with st.expander("CV Bullets", expanded=True):
        for bullet in art.cv_bullets:
            st.markdown(f"- {bullet}")
    with st.expander("Cover Letter"):
        st.code(art.cover_letter_draft, language=None, wrap_lines=True)
    with st.expander("LinkedIn Outreach"):
        st.code(art.linkedin_outreach, language=None, wrap_lines=True)
    with st.expander("Interview Prep"):
        for q in art.interview_prep:
            st.markdown(f"- {q}")
    with st.expander("STAR Stories"):
        for story in art.star_stories:
            st.markdown(story)
            st.markdown("---")


# ── Main ─────────────────────────────────────────────────────────────────


def _sidebar_status(tracker: Tracker) -> None:
    with st.sidebar:
        st.markdown("**Status**")
        has_key = _client().configured
        st.markdown(("✅" if has_key else "⬜") + "  Groq API key")
        st.markdown(("✅" if PROFILE_PATH.exists() else "⬜") + "  Candidate profile")
        if not has_key:
            st.caption("Set `GROQ_API_KEY` in `.env`. Without it the briefing and "
                       "questions fall back to defaults and analysis fails.")
        st.divider()
        jobs = tracker.state.jobs
        st.metric("Tracked jobs", len(jobs))
        st.metric("Active", len(tracker.active_jobs()))


def main() -> None:
    st.set_page_config(page_title="Job Intelligence Tracker", page_icon="🧭", layout="wide")
    st.markdown(_CSS, unsafe_allow_html=True)

    tracker = _tracker()
    _sidebar_status(tracker)

    view = tracker.state.view
    if view is View.ADD_JOB:
        view_add_job(tracker)
    elif view is View.JOB_DETAIL:
        view_job_detail(tracker)
    else:
        view_dashboard(tracker)


main()
