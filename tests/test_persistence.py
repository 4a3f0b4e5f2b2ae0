import io
import json
import zipfile
from datetime import datetime

import pytest

from monetize_ai.model import simulate_revenue
from monetize_ai.persistence import IdeaStore, apply_session_bundle, collect_session_bundle
from monetize_ai.types import SimulationParams


def test_idea_store_save_newest_first():
    store = IdeaStore()
    first = store.save("Habit tracker", "## Plan A", now=datetime(2024, 3, 1, 9, 0))
    second = store.save("   ", "## Plan B", now=datetime(2024, 3, 2, 9, 0))
    assert [i.id for i in store.ideas] == [second.id, first.id]
    assert second.title == "Untitled Strategy"
    assert first.date == "2024-03-01"
    assert len(store) == 2


def test_idea_store_ids_unique_within_same_millisecond():
    store = IdeaStore()
    now = datetime(2024, 3, 1, 9, 0)
    a = store.save("a", "x", now=now)
    b = store.save("b", "y", now=now)
    assert a.id != b.id


def test_idea_store_delete_by_id():
    store = IdeaStore()
    keep = store.save("keep", "1", now=datetime(2024, 1, 1))
    drop = store.save("drop", "2", now=datetime(2024, 1, 2))
    assert store.delete(drop.id) is True
    assert store.delete(drop.id) is False
    assert store.ideas == (keep,)
    assert store.get(keep.id) == keep
    assert store.get(drop.id) is None


def test_collect_and_apply_session_bundle_roundtrip():
    params = SimulationParams(acquisition_rate=750, churn_rate=4, months=12)
    store = IdeaStore()
    store.save("Fitness app", "Freemium with coaching upsell", now=datetime(2024, 5, 1))

    bundle = collect_session_bundle(params, store.ideas, simulate_revenue(params))
    assert isinstance(bundle, (bytes, bytearray)) and len(bundle) > 0
    with zipfile.ZipFile(io.BytesIO(bundle)) as zf:
        assert {"metadata.json", "params.json", "ideas.json", "simulation.csv"} <= set(zf.namelist())

    loaded_params, ideas = apply_session_bundle(io.BytesIO(bundle))
    assert loaded_params == params
    assert ideas == list(store.ideas)


def test_apply_rejects_unknown_schema_version():
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, mode="w") as zf:
        zf.writestr("metadata.json", json.dumps({"schema_version": 99}))
    buf.seek(0)
    with pytest.raises(ValueError):
        apply_session_bundle(buf)


def test_apply_tolerates_missing_members():
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, mode="w") as zf:
        zf.writestr("metadata.json", json.dumps({"schema_version": 1}))
    buf.seek(0)
    params, ideas = apply_session_bundle(buf)
    assert params is None
    assert ideas == []
