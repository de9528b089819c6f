# tests/services/test_local_mirror.py
from __future__ import annotations

import pytest

from orangeslice.common.status_log import StatusLog
from orangeslice.domain.enums import EntityKind
from orangeslice.domain.errors import GatewayError
from orangeslice.domain.policies.enricher import RelationshipEnricher
from orangeslice.services.mirror.local_mirror import LocalMirror


class FakeClock:
    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def status():
    return StatusLog()


@pytest.fixture()
def mirror(gateway, status, clock):
    m = LocalMirror(gateway, RelationshipEnricher(), status, resubscribe_interval=5.0, clock=clock)
    yield m
    m.stop()


def test_not_loaded_until_started(mirror):
    assert mirror.loaded is False
    snap = mirror.snapshot()
    assert snap.loaded is False
    assert snap.entries == []


def test_start_loads_current_state(gateway, make_tags, mirror):
    tags = make_tags("ML")
    e = gateway.entries.create(name="Juicer")
    gateway.entry_tags.create(entry_id=e.id, tag_id=tags["ML"].id)

    mirror.start()
    snap = mirror.snapshot()
    assert snap.loaded
    assert [x.name for x in snap.entries] == ["Juicer"]
    assert [t.name for t in snap.tags] == ["ML"]
    assert [(a.entry_id, a.tag_name) for a in snap.associations] == [(e.id, "ML")]
    assert mirror.dead_channels() == []


def test_pushes_replace_collections(gateway, make_tags, mirror):
    mirror.start()
    assert mirror.loaded
    a = gateway.entries.create(name="A")
    gateway.entries.create(name="B")
    assert [x.name for x in mirror.snapshot().entries] == ["A", "B"]

    gateway.entries.delete(a.id)
    assert [x.name for x in mirror.snapshot().entries] == ["B"]


def test_tag_rename_re_enriches_existing_links(gateway, make_tags, mirror):
    tags = make_tags("ML")
    e = gateway.entries.create(name="A")
    gateway.entry_tags.create(entry_id=e.id, tag_id=tags["ML"].id)
    mirror.start()

    gateway.tags.update(tags["ML"].id, name="Machine Learning")
    assert [a.tag_name for a in mirror.snapshot().associations] == ["Machine Learning"]


def test_stop_detaches_from_the_feed(gateway, mirror):
    mirror.start()
    mirror.stop()
    gateway.entries.create(name="late")
    assert mirror.snapshot().entries == []
    assert set(mirror.dead_channels()) == set(EntityKind)
    # a stopped mirror never resubscribes
    assert mirror.ensure_subscribed() == 0


def _kill_entry_channel(gateway):
    """Fail every live entry query the way a broken stream would."""
    for sub in gateway.hub.subscribers(EntityKind.entry):
        sub.fail(GatewayError("connection reset"))


def test_stream_error_is_reported_and_ends_loading(gateway, status, mirror):
    mirror.start()
    _kill_entry_channel(gateway)

    assert mirror.loaded
    assert mirror.dead_channels() == [EntityKind.entry]
    assert "Error in entry subscription" in mirror.last_error
    assert status.latest().level == "ERROR"
    assert "connection reset" in status.latest().message

    # the dead channel receives nothing more
    gateway.entries.create(name="unseen")
    assert mirror.snapshot().entries == []


def test_error_before_first_push_still_sets_loaded(gateway, status, clock):
    class BrokenEntries:
        def __getattr__(self, name):
            return getattr(gateway.entries, name)

        def observe_query(self, on_next, on_error=None, filters=None):
            raise GatewayError("unauthorized")

    class Gw:
        entries = BrokenEntries()
        tags = gateway.tags
        entry_tags = gateway.entry_tags

    m = LocalMirror(Gw(), RelationshipEnricher(), status, clock=clock)
    m.start()
    assert m.loaded
    assert m.snapshot().entries == []
    assert EntityKind.entry in m.dead_channels()
    m.stop()


def test_resubscribe_is_throttled(gateway, clock, mirror):
    mirror.start()
    _kill_entry_channel(gateway)
    gateway.entries.create(name="while down")

    # too soon: the last attempt was at start()
    clock.now += 1.0
    assert mirror.ensure_subscribed() == 0

    clock.now += 5.0
    assert mirror.ensure_subscribed() == 1
    assert mirror.dead_channels() == []
    assert [e.name for e in mirror.snapshot().entries] == ["while down"]
    assert mirror.last_error is None

    # nothing dead, nothing to do
    clock.now += 10.0
    assert mirror.ensure_subscribed() == 0
