from __future__ import annotations

import pytest
from conftest import make_job
from pydantic import ValidationError

from jobintel.models import AnalysisResult, Job, JobAnalysis, JobStatus


def test_job_dict_roundtrip():
    job = make_job(required=["SQL"], missing=["Go"])
    assert Job.from_dict(job.to_dict()) == job


def test_from_dict_fills_defaults_for_old_records():
    job = Job.from_dict({"id": 7, "title": "PM"})
    assert job.id == "7"
    assert job.status is JobStatus.DRAFT
    assert job.analysis is None and job.artefacts is None


def test_analysis_result_accepts_wire_key():
    result = AnalysisResult.model_validate(
        {"analysis": {}, "marketIntel": {"competitors": ["X"]}, "artefacts": {}}
    )
    assert result.market_intel.competitors == ["X"]
    assert result.analysis.moscow_priority is None


def test_analysis_result_requires_every_section():
    with pytest.raises(ValidationError):
        AnalysisResult.model_validate({"analysis": {}, "artefacts": {}})


@pytest.mark.parametrize("bad", [
    {"moscow_priority": "Maybe"},
    {"competency_match_score": -1},
    {"red_flags": "none"},
])
def test_job_analysis_rejects_bad_values(bad):
    with pytest.raises(ValidationError):
        JobAnalysis.model_validate(bad)


def test_status_values():
    assert [s.value for s in JobStatus] == ["Draft", "Applied", "Interview", "Offer", "Rejected"]
