"""Two-step intake flow: paste a job description, answer questions, analyse."""
from __future__ import annotations

import re
import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from jobintel.analysis import ANALYSIS_FAILED, AnalysisClient
from jobintel.log import get_logger
from jobintel.models import Job, JobStatus

if TYPE_CHECKING:
    from jobintel.tracker import Tracker

log = get_logger(__name__)

QUESTIONS_FAILED = "Failed to generate questions. Please try again."
SAVE_FAILED = "Could not save the job. Please try again."
NO_ANSWER = "N/A"
UNKNOWN_COMPANY = "Unknown Company"
UNTITLED_ROLE = "Untitled Role"
_MAX_LABEL_LEN = 50

_TITLE_RE = re.compile(r"^[ \t]*title:[ \t]*(.*)$", re.IGNORECASE | re.MULTILINE)
_COMPANY_RE = re.compile(r"^[ \t]*company:[ \t]*(.*)$", re.IGNORECASE | re.MULTILINE)


def extract_title_company(text: str) -> tuple[str, str]:
    """Best-effort title and company from pasted JD text."""
    title_match = _TITLE_RE.search(text)
    company_match = _COMPANY_RE.search(text)

    if title_match and title_match.group(1).strip():
        title = title_match.group(1).strip()[:_MAX_LABEL_LEN]
    else:
        lines = text.strip().splitlines()
        title = lines[0].strip()[:_MAX_LABEL_LEN] if lines else ""
    if company_match and company_match.group(1).strip():
        company = company_match.group(1).strip()[:_MAX_LABEL_LEN]
    else:
        company = UNKNOWN_COMPANY
    return title or UNTITLED_ROLE, company


class IntakeWizard:
    """Local state of the Add Job flow. Step 1 is text entry, step 2 clarification."""

    def __init__(self, client: AnalysisClient) -> None:
        self.client = client
        self.reset()

    def reset(self) -> None:
        self.step = 1
        self.jd_text = ""
        self.questions: list[str] = []
        self.answers: dict[int, str] = {}
        self.loading = False
        self.error: str | None = None

    def start_clarification(self) -> bool:
        if not self.jd_text.strip():
            return False
        self.loading = True
        self.error = None
        try:
            questions = self.client.fetch_clarifying_questions(self.jd_text)
        except Exception as exc:
            log.error("Clarifying questions failed: %s", exc)
            self.error = QUESTIONS_FAILED
            return False
        finally:
            self.loading = False
        self.questions = list(questions)
        self.answers = {}
        self.step = 2
        return True

    def set_answer(self, index: int, text: str) -> None:
        self.answers[index] = text

    def format_clarifications(self) -> str:
        return "\n\n".join(
            f"Q: {q}\nA: {self.answers.get(i) or NO_ANSWER}"
            for i, q in enumerate(self.questions)
        )

    def run_analysis(self, tracker: Tracker) -> Job | None:
        """Analyse the JD and hand the new job to *tracker*; None on failure."""
        self.loading = True
        self.error = None
        clarifications = self.format_clarifications()
        try:
            try:
                result = self.client.fetch_full_analysis(self.jd_text, clarifications)
            except Exception as exc:
                log.error("Full analysis failed: %s", exc)
                self.error = ANALYSIS_FAILED
                return None

            title, company = extract_title_company(self.jd_text)
            job = Job(
                id=uuid.uuid4().hex,
                title=title,
                company=company,
                description=self.jd_text,
                status=JobStatus.DRAFT,
                date_added=datetime.now(timezone.utc).isoformat(),
                clarification_answers=clarifications,
                analysis=result.analysis,
                market_intel=result.market_intel,
                artefacts=result.artefacts,
            )
            try:
                tracker.add_job(job)
            except OSError as exc:
                log.error("Saving job %s failed: %s", job.id, exc)
                self.error = SAVE_FAILED
                return None
        finally:
            self.loading = False
        self.reset()
        return job
