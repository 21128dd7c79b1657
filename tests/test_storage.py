from __future__ import annotations

import json

import pytest
from conftest import make_job

from jobintel.config import JOBS_KEY
from jobintel.storage import FileStore, MemoryStore, RecordStore


def test_file_store_roundtrip(tmp_path):
    store = FileStore(tmp_path / "kv")
    assert store.get("anything") is None
    store.set("anything", "[1, 2]")
    assert store.get("anything") == "[1, 2]"
    assert (tmp_path / "kv" / "anything.json").exists()
    assert not list((tmp_path / "kv").glob("*.tmp"))


def test_file_store_overwrites(tmp_path):
    store = FileStore(tmp_path)
    store.set("k", "first")
    store.set("k", "second")
    assert store.get("k") == "second"


def test_file_store_rejects_path_like_keys(tmp_path):
    with pytest.raises(ValueError):
        FileStore(tmp_path).get("../escape")


def test_record_store_serializes_original_key_names():
    kv = MemoryStore()
    RecordStore(kv).save_jobs([make_job("a", required=["SQL"])])
    payload = json.loads(kv.get(JOBS_KEY))
    assert isinstance(payload, list)
    record = payload[0]
    assert record["dateAdded"] == "2026-10-01T09:30:00+00:00"
    assert record["status"] == "Applied"
    assert record["marketIntel"]["competitors"] == ["Oura"]
    assert record["analysis"]["moscow_priority"] == "Should"
    assert "clarificationAnswers" in record


def test_record_store_omits_absent_optionals():
    kv = MemoryStore()
    RecordStore(kv).save_jobs([make_job("a", analysed=False)])
    record = json.loads(kv.get(JOBS_KEY))[0]
    assert "analysis" not in record
    assert "clarificationAnswers" not in record


def test_record_store_roundtrip_on_disk(tmp_path):
    jobs = [make_job("a", required=["SQL"]), make_job("b", analysed=False)]
    RecordStore(FileStore(tmp_path)).save_jobs(jobs)
    assert RecordStore(FileStore(tmp_path)).load_jobs() == jobs


def test_record_store_absent_key():
    assert RecordStore(MemoryStore()).load_jobs() is None


def test_record_store_rejects_non_array():
    with pytest.raises(ValueError):
        RecordStore(MemoryStore({JOBS_KEY: '{"jobs": []}'})).load_jobs()


@pytest.mark.parametrize("raw", ["[null]", "[1]", '["x"]'])
def test_record_store_rejects_non_object_items(raw):
    with pytest.raises(ValueError):
        RecordStore(MemoryStore({JOBS_KEY: raw})).load_jobs()
