from __future__ import annotations

from conftest import make_job

from jobintel.models import HeatmapData, JobStatus
from jobintel.skills import aggregate, gap_percent, top_gaps


def _by_skill(rows: list[HeatmapData]) -> dict[str, tuple[int, int]]:
    return {r.skill: (r.frequency, r.gap_frequency) for r in rows}


def test_empty_list_yields_nothing():
    assert aggregate([]) == []


def test_single_applied_job_scenario():
    job = make_job(required=["SQL", "Python"], missing=["Python"])
    assert aggregate([job]) == [
        HeatmapData(skill="Sql", frequency=1, gap_frequency=0),
        HeatmapData(skill="Python", frequency=1, gap_frequency=1),
    ]


def test_case_variants_merge_into_one_capitalized_entry():
    jobs = [
        make_job("a", required=["Python"]),
        make_job("b", required=["python"], missing=["PYTHON"]),
    ]
    assert _by_skill(aggregate(jobs)) == {"Python": (2, 1)}


def test_rejected_jobs_contribute_nothing():
    jobs = [
        make_job("a", status=JobStatus.REJECTED, required=["Go"], missing=["Rust"]),
        make_job("b", required=["SQL"]),
    ]
    assert _by_skill(aggregate(jobs)) == {"Sql": (1, 0)}


def test_jobs_without_analysis_are_skipped():
    assert aggregate([make_job(analysed=False)]) == []


def test_missing_only_skill_has_zero_frequency():
    rows = aggregate([make_job(required=["SQL"], missing=["Kubernetes"])])
    assert _by_skill(rows)["Kubernetes"] == (0, 1)


def test_duplicate_mentions_within_one_job_each_count():
    rows = aggregate([make_job(required=["SQL", "sql"], missing=["Go", "go"])])
    assert _by_skill(rows) == {"Sql": (2, 0), "Go": (0, 2)}


def test_one_entry_per_distinct_skill():
    jobs = [
        make_job("a", required=["A/B testing", "SQL"], missing=["Figma"]),
        make_job("b", status=JobStatus.OFFER, required=["sql", "Roadmapping"], missing=["figma"]),
        make_job("c", status=JobStatus.REJECTED, required=["Ignored"]),
    ]
    skills = [r.skill for r in aggregate(jobs)]
    assert sorted(skills) == ["A/b testing", "Figma", "Roadmapping", "Sql"]


def test_top_gaps_sorts_descending_and_limits():
    rows = [HeatmapData(f"S{i}", 1, i) for i in range(10)]
    top = top_gaps(rows)
    assert len(top) == 8
    assert [r.gap_frequency for r in top] == [9, 8, 7, 6, 5, 4, 3, 2]


def test_gap_percent_is_not_clamped():
    assert gap_percent(HeatmapData("Go", 2, 1)) == 50
    assert gap_percent(HeatmapData("Go", 0, 3)) == 300
