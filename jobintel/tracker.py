"""Application state: the job list, current view and selected job.

All mutations go through :class:`Tracker`, which re-saves the whole list and
recomputes the skill heatmap after every change.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum

from jobintel.log import get_logger
from jobintel.models import HeatmapData, Job, JobStatus
from jobintel.skills import aggregate
from jobintel.storage import RecordStore

log = get_logger(__name__)


class View(str, Enum):
    DASHBOARD = "DASHBOARD"
    ADD_JOB = "ADD_JOB"
    JOB_DETAIL = "JOB_DETAIL"


@dataclass
class TrackerState:
    jobs: list[Job] = field(default_factory=list)
    view: View = View.DASHBOARD
    selected: Job | None = None
    heatmap: list[HeatmapData] = field(default_factory=list)


class Tracker:
    def __init__(self, store: RecordStore) -> None:
        self.store = store
        self.state = TrackerState()

    # ── Startup ──────────────────────────────────────────────────────────

    def initialize(self) -> None:
        """Load the saved job list; unreadable data starts an empty list."""
        try:
            jobs = self.store.load_jobs()
        except (OSError, ValueError, KeyError, TypeError) as exc:
            log.warning("Failed to load jobs, starting empty: %s", exc)
            jobs = None
        self.state.jobs = jobs or []
        self.state.heatmap = aggregate(self.state.jobs)
        log.info("Loaded %d jobs", len(self.state.jobs))

    # ── Mutations ────────────────────────────────────────────────────────

    def _commit(self, jobs: list[Job]) -> None:
        self.store.save_jobs(jobs)
        self.state.jobs = jobs
        self.state.heatmap = aggregate(jobs)

    def add_job(self, job: Job) -> None:
        self._commit([job] + self.state.jobs)
        self.state.selected = job
        self.state.view = View.JOB_DETAIL
        log.info("Added job %s: %s @ %s", job.id, job.title, job.company)

    def update_status(self, job_id: str, status: JobStatus | str) -> bool:
        """Set a job's status. Returns False (and changes nothing) for unknown ids."""
        status = JobStatus(status)
        updated: Job | None = None
        jobs: list[Job] = []
        for job in self.state.jobs:
            if job.id == job_id:
                job = updated = replace(job, status=status)
            jobs.append(job)
        if updated is None:
            log.debug("update_status: no job %s", job_id)
            return False

        self._commit(jobs)
        if self.state.selected is not None and self.state.selected.id == job_id:
            self.state.selected = updated
        log.info("Job %s → %s", job_id, status.value)
        return True

    def delete_job(self, job_id: str) -> bool:
        jobs = [j for j in self.state.jobs if j.id != job_id]
        removed = len(jobs) != len(self.state.jobs)
        self._commit(jobs)
        if self.state.selected is not None and self.state.selected.id == job_id:
            self.state.selected = None
            self.state.view = View.DASHBOARD
        if removed:
            log.info("Deleted job %s", job_id)
        return removed

    # ── Navigation ───────────────────────────────────────────────────────

    def select_job(self, job: Job) -> None:
        self.state.selected = job
        self.state.view = View.JOB_DETAIL

    def navigate(self, view: View | str) -> None:
        view = View(view)
        if view is View.JOB_DETAIL and self.state.selected is None:
            view = View.DASHBOARD
        self.state.view = view

    # ── Queries ──────────────────────────────────────────────────────────

    def active_jobs(self) -> list[Job]:
        """Priority queue: everything not rejected, newest first."""
        return [j for j in self.state.jobs if j.status is not JobStatus.REJECTED]

    def get_job(self, job_id: str) -> Job | None:
        return next((j for j in self.state.jobs if j.id == job_id), None)
