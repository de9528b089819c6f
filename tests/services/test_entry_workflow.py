# tests/services/test_entry_workflow.py
from __future__ import annotations

import uuid

import pytest

from orangeslice.common.status_log import StatusLog
from orangeslice.domain.entities.entry import EntryFields
from orangeslice.domain.errors import EditorBusy, GatewayError
from orangeslice.domain.policies.editor import EditorRegistry
from orangeslice.services.admin.workflow import EntryWorkflow


def _fields(name="Juicer"):
    return EntryFields(name=name, github_link="https://github.com/o/j", project_link="https://j.test")


class Flaky:
    """Wraps a model gateway and fails the named methods."""

    def __init__(self, inner, *failing: str) -> None:
        self._inner = inner
        self._failing = set(failing)

    def __getattr__(self, name):
        if name in self._failing:
            def _fail(*a, **kw):
                raise GatewayError(f"{name} rejected")
            return _fail
        return getattr(self._inner, name)


class GatewayView:
    def __init__(self, gateway, entries=None, tags=None, entry_tags=None) -> None:
        self.entries = entries or gateway.entries
        self.tags = tags or gateway.tags
        self.entry_tags = entry_tags or gateway.entry_tags


@pytest.fixture()
def status():
    return StatusLog()


@pytest.fixture()
def editors():
    return EditorRegistry()


@pytest.fixture()
def workflow(gateway, editors, status):
    return EntryWorkflow(gateway, editors, status)


def _tag_ids_of(gateway, entry_id):
    return {l.tag_id for l in gateway.entry_tags.list({"entry_id": entry_id})}


def test_create_with_tags_round_trips(gateway, make_tags, workflow, status, editors):
    tags = make_tags("A", "B")
    report = workflow.create(_fields(), [tags["A"].id, tags["B"].id, tags["A"].id])

    assert report.ok, report.error_details
    assert report.steps == ["create_entry", "create_links"]
    assert report.links_created == 2
    assert gateway.entries.get(report.entry_id).name == "Juicer"
    assert _tag_ids_of(gateway, report.entry_id) == {tags["A"].id, tags["B"].id}
    assert status.latest().level == "INFO"
    assert editors.active() == []


def test_create_without_tags(gateway, workflow):
    report = workflow.create(_fields())
    assert report.ok
    assert report.links_created == 0
    assert _tag_ids_of(gateway, report.entry_id) == set()


def test_create_validation_stops_before_any_write(gateway, make_tags, workflow, status):
    make_tags("A")
    report = workflow.create(EntryFields(name=" ", github_link="", project_link=None), [uuid.uuid4()])

    assert report.is_validation_failure
    assert set(report.validation_errors) == {"name", "github_link", "project_link", "tag_ids"}
    assert gateway.entries.list() == []
    assert status.latest().level == "ERROR"


def test_edit_replaces_tag_set(gateway, make_tags, workflow):
    tags = make_tags("A", "B", "C")
    created = workflow.create(_fields(), [tags["A"].id, tags["B"].id])

    report = workflow.edit(created.entry_id, _fields("Juicer 2"), [tags["B"].id, tags["C"].id])

    assert report.ok, report.error_details
    assert report.links_deleted == 2
    assert report.links_created == 2
    assert gateway.entries.get(created.entry_id).name == "Juicer 2"
    assert _tag_ids_of(gateway, created.entry_id) == {tags["B"].id, tags["C"].id}


def test_edit_missing_entry(workflow):
    report = workflow.edit(uuid.uuid4(), _fields(), [])
    assert report.not_found
    assert not report.ok


def test_edit_link_failure_restores_previous_links(gateway, make_tags, editors, status):
    tags = make_tags("A", "B", "C")
    created = EntryWorkflow(gateway, editors, status).create(_fields(), [tags["A"].id, tags["B"].id])

    # only the batch that adds C is rejected
    class Links:
        def __getattr__(self, name):
            return getattr(gateway.entry_tags, name)

        def create_many(self, specs):
            if any(s["tag_id"] == tags["C"].id for s in specs):
                raise GatewayError("create_many rejected")
            return gateway.entry_tags.create_many(specs)

    wf = EntryWorkflow(GatewayView(gateway, entry_tags=Links()), editors, status)
    report = wf.edit(created.entry_id, _fields("renamed"), [tags["C"].id])

    assert not report.ok
    assert report.compensated
    assert _tag_ids_of(gateway, created.entry_id) == {tags["A"].id, tags["B"].id}
    assert "compensated" in status.latest().message


def test_create_link_failure_removes_the_new_entry(gateway, make_tags, editors, status):
    tags = make_tags("A")
    wf = EntryWorkflow(GatewayView(gateway, entry_tags=Flaky(gateway.entry_tags, "create_many")), editors, status)

    report = wf.create(_fields(), [tags["A"].id])

    assert not report.ok
    assert report.compensated
    assert gateway.entries.list() == []
    assert editors.active() == []


def test_delete_requires_confirmation(gateway, workflow):
    created = workflow.create(_fields())
    report = workflow.delete(created.entry_id, confirmed=False)
    assert "confirm" in report.validation_errors
    assert gateway.entries.get(created.entry_id) is not None


def test_delete_removes_entry_and_links(gateway, make_tags, workflow):
    tags = make_tags("A", "B")
    created = workflow.create(_fields(), [tags["A"].id, tags["B"].id])

    report = workflow.delete(created.entry_id, confirmed=True)

    assert report.ok, report.error_details
    assert report.links_deleted == 2
    assert gateway.entries.get(created.entry_id) is None
    assert gateway.entry_tags.list() == []
    # the tags themselves survive
    assert len(gateway.tags.list()) == 2


def test_delete_failure_restores_links(gateway, make_tags, editors, status):
    tags = make_tags("A")
    created = EntryWorkflow(gateway, editors, status).create(_fields(), [tags["A"].id])

    wf = EntryWorkflow(GatewayView(gateway, entries=Flaky(gateway.entries, "delete")), editors, status)
    report = wf.delete(created.entry_id, confirmed=True)

    assert not report.ok
    assert report.compensated
    assert gateway.entries.get(created.entry_id) is not None
    assert _tag_ids_of(gateway, created.entry_id) == {tags["A"].id}


def test_delete_missing_entry(workflow):
    report = workflow.delete(uuid.uuid4(), confirmed=True)
    assert report.not_found


def test_second_save_of_same_entry_is_busy(gateway, workflow, editors):
    created = workflow.create(_fields())
    editor = editors.open_edit(created.entry_id)
    editor.begin_submit()
    try:
        with pytest.raises(EditorBusy):
            workflow.edit(created.entry_id, _fields("x"), [])
        with pytest.raises(EditorBusy):
            workflow.delete(created.entry_id, confirmed=True)
    finally:
        editors.release(editor)
    assert gateway.entries.get(created.entry_id).name == "Juicer"


def test_edit_arriving_while_another_edit_validates_is_busy(gateway, make_tags, editors, status):
    tags = make_tags("A", "B")
    created = EntryWorkflow(gateway, editors, status).create(_fields(), [tags["A"].id])
    interrupted = []

    class Interrupting:
        """Fires a second edit of the same entry from inside tag validation."""

        def __init__(self, inner) -> None:
            self._inner = inner

        def __getattr__(self, name):
            return getattr(self._inner, name)

        def list(self, *a, **kw):
            if not interrupted:
                try:
                    wf.edit(created.entry_id, _fields("Second"), [tags["B"].id])
                except EditorBusy as e:
                    interrupted.append(e)
                else:
                    interrupted.append(None)
            return self._inner.list(*a, **kw)

    wf = EntryWorkflow(GatewayView(gateway, tags=Interrupting(gateway.tags)), editors, status)
    report = wf.edit(created.entry_id, _fields("First"), [tags["A"].id, tags["B"].id])

    assert len(interrupted) == 1 and isinstance(interrupted[0], EditorBusy)
    assert report.ok
    assert gateway.entries.get(created.entry_id).name == "First"
    assert _tag_ids_of(gateway, created.entry_id) == {tags["A"].id, tags["B"].id}
    assert editors.active() == []
