"""Data models for tracked jobs and their AI analysis."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class JobStatus(str, Enum):
    DRAFT = "Draft"
    APPLIED = "Applied"
    INTERVIEW = "Interview"
    OFFER = "Offer"
    REJECTED = "Rejected"


MoscowPriority = Literal["Must", "Should", "Could", "Won't"]


# Every field has an empty default so records saved under an older shape
# still load. Present values are type-checked.


class JobAnalysis(BaseModel):
    model_config = ConfigDict(extra="ignore")

    skills_required: list[str] = []
    skills_missing: list[str] = []
    competency_match_score: float = Field(default=0, ge=0, le=100)
    salary_range: str = ""
    rice_score: float = 0
    moscow_priority: Optional[MoscowPriority] = None
    summary_bullets: list[str] = []
    red_flags: list[str] = []


class MarketIntel(BaseModel):
    model_config = ConfigDict(extra="ignore")

    funding_news: list[str] = []
    competitors: list[str] = []
    office_locations: list[str] = []
    hiring_trends_context: str = ""


class Artefacts(BaseModel):
    model_config = ConfigDict(extra="ignore")

    cv_bullets: list[str] = []
    cover_letter_draft: str = ""
    linkedin_outreach: str = ""
    interview_prep: list[str] = []
    star_stories: list[str] = []


class AnalysisResult(BaseModel):
    """The full-analysis response: all three sections are required."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    analysis: JobAnalysis
    market_intel: MarketIntel = Field(alias="marketIntel")
    artefacts: Artefacts


@dataclass
class Job:
    id: str
    title: str
    company: str
    description: str
    status: JobStatus
    date_added: str
    clarification_answers: str | None = None
    analysis: JobAnalysis | None = None
    market_intel: MarketIntel | None = None
    artefacts: Artefacts | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize with the persisted (camelCase) key names."""
        data: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "company": self.company,
            "description": self.description,
            "status": self.status.value,
            "dateAdded": self.date_added,
        }
        if self.clarification_answers is not None:
            data["clarificationAnswers"] = self.clarification_answers
        if self.analysis is not None:
            data["analysis"] = self.analysis.model_dump()
        if self.market_intel is not None:
            data["marketIntel"] = self.market_intel.model_dump()
        if self.artefacts is not None:
            data["artefacts"] = self.artefacts.model_dump()
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Job:
        """Inverse of :meth:`to_dict`.

        Raises ``KeyError``/``ValueError`` (pydantic's ``ValidationError`` is a
        ``ValueError``) when a record cannot be read.
        """
        analysis = data.get("analysis")
        intel = data.get("marketIntel")
        artefacts = data.get("artefacts")
        return cls(
            id=str(data["id"]),
            title=data.get("title", ""),
            company=data.get("company", ""),
            description=data.get("description", ""),
            status=JobStatus(data.get("status", JobStatus.DRAFT.value)),
            date_added=data.get("dateAdded", ""),
            clarification_answers=data.get("clarificationAnswers"),
            analysis=JobAnalysis.model_validate(analysis) if analysis is not None else None,
            market_intel=MarketIntel.model_validate(intel) if intel is not None else None,
            artefacts=Artefacts.model_validate(artefacts) if artefacts is not None else None,
        )


@dataclass
class HeatmapData:
    skill: str
    frequency: int
    gap_frequency: int
