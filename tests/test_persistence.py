"""
Tests for debounced session snapshots.
"""

from __future__ import annotations

import json
import tempfile
from pathlib import Path

from conftest import TimerRecorder, make_item

from request_composer.application.dto.composition_actions import AddSelection, SetClientProfile
from request_composer.application.use_cases.selection_reducer import INITIAL_STATE, reduce_composition
from request_composer.application.use_cases.session_persistence import SessionPersistenceGateway
from request_composer.application.utils.state_codec import dump_state, load_state
from request_composer.domain.entities.selection import Instance, SelectionEntry
from request_composer.infrastructure.store.json_snapshot_store import JsonSnapshotStore
from request_composer.infrastructure.store.memory_store import MemorySnapshotStore


def _sample_state():
    state = reduce_composition(INITIAL_STATE, SetClientProfile({"name": "A", "nameProject": "Torre"}))
    entry = SelectionEntry(
        id="s1",
        item=make_item(),
        quantity=2,
        instances=(Instance(id="a", additional_info={"areaPredio": 120}), Instance(id="b")),
        category="Estudios de suelos",
    )
    return reduce_composition(state, AddSelection(entry))


def test_snapshot_round_trip_keeps_all_fields():
    state = _sample_state()
    restored = load_state(dump_state(state))
    assert restored == state


def test_snapshot_uses_camel_case_catalog_keys():
    data = json.loads(dump_state(_sample_state()))
    assert set(data) == {"client_profile", "selections", "loading", "error", "form_is_valid"}
    assert "additionalInfo" in data["selections"][0]["item"]
    assert data["selections"][0]["instances"][0]["additional_info"] == {"areaPredio": 120}


def test_restore_returns_none_for_missing_or_corrupt_snapshot():
    store = MemorySnapshotStore()
    gateway = SessionPersistenceGateway(store=store, key="k", timer_factory=TimerRecorder())
    assert gateway.restore() is None

    store.write("k", "{not json")
    assert gateway.restore() is None

    store.write("k", json.dumps({"selections": [{"id": "s1"}]}))
    assert gateway.restore() is None


def test_restore_fills_missing_keys_with_defaults():
    store = MemorySnapshotStore()
    store.write("k", json.dumps({"client_profile": {"nameProject": "P"}}))
    gateway = SessionPersistenceGateway(store=store, key="k", timer_factory=TimerRecorder())

    state = gateway.restore()
    assert state.client_profile.name_project == "P"
    assert state.client_profile.status == "pendiente"
    assert state.selections == ()
    assert state.form_is_valid is False


def test_burst_of_changes_writes_once_with_latest_state():
    timers = TimerRecorder()
    store = MemorySnapshotStore()
    gateway = SessionPersistenceGateway(store=store, key="k", debounce_seconds=0.5, timer_factory=timers)

    first = reduce_composition(INITIAL_STATE, SetClientProfile({"name": "one"}))
    second = reduce_composition(INITIAL_STATE, SetClientProfile({"name": "two"}))
    gateway.schedule_persist(first)
    gateway.schedule_persist(second)

    assert store.read("k") is None
    assert gateway.has_pending
    assert timers.timers[0].cancelled
    assert timers.timers[1].interval == 0.5

    timers.fire_all()
    assert load_state(store.read("k")).client_profile.name == "two"
    assert not gateway.has_pending


def test_stale_timer_does_not_write():
    timers = TimerRecorder()
    store = MemorySnapshotStore()
    gateway = SessionPersistenceGateway(store=store, key="k", timer_factory=timers)

    gateway.schedule_persist(INITIAL_STATE)
    stale = timers.timers[0]
    gateway.schedule_persist(_sample_state())

    # a cancelled timer that still runs must not write the older state
    stale.function(*stale.args)
    assert store.read("k") is None


def test_flush_writes_pending_immediately():
    timers = TimerRecorder()
    store = MemorySnapshotStore()
    gateway = SessionPersistenceGateway(store=store, key="k", timer_factory=timers)

    gateway.schedule_persist(_sample_state())
    gateway.flush()
    assert load_state(store.read("k")) == _sample_state()

    # the superseded timer is now a no-op
    store.delete("k")
    timers.timers[0].function(*timers.timers[0].args)
    assert store.read("k") is None


def test_clear_cancels_pending_write_and_deletes_snapshot():
    timers = TimerRecorder()
    store = MemorySnapshotStore()
    store.write("k", dump_state(_sample_state()))
    gateway = SessionPersistenceGateway(store=store, key="k", timer_factory=timers)

    gateway.schedule_persist(_sample_state())
    gateway.clear()
    timers.fire_all()

    assert store.read("k") is None
    assert not gateway.has_pending


def test_write_failure_is_logged_not_raised():
    class BrokenStore(MemorySnapshotStore):
        def write(self, key, blob):
            raise OSError("disk full")

    timers = TimerRecorder()
    gateway = SessionPersistenceGateway(store=BrokenStore(), key="k", timer_factory=timers)
    gateway.schedule_persist(INITIAL_STATE)
    timers.fire_all()
    gateway.schedule_persist(INITIAL_STATE)
    gateway.flush()


def test_json_snapshot_store_persistence():
    """Snapshots survive a new store instance over the same directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonSnapshotStore(data_dir=tmpdir)
        store.write("serviceRequestState", dump_state(_sample_state()))

        reopened = JsonSnapshotStore(data_dir=tmpdir)
        assert load_state(reopened.read("serviceRequestState")) == _sample_state()
        assert not list(Path(tmpdir).glob("*.tmp"))

        reopened.delete("serviceRequestState")
        assert reopened.read("serviceRequestState") is None
        # deleting twice is fine
        reopened.delete("serviceRequestState")


def test_json_snapshot_store_sanitizes_key():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonSnapshotStore(data_dir=tmpdir)
        store.write("../escape/key", "{}")
        assert store.read("../escape/key") == "{}"
        assert [p.name for p in Path(tmpdir).iterdir()] == [".._escape_key.json"]
