# tests/database/test_record_repo.py
from __future__ import annotations

import uuid

import pytest

from orangeslice.database.models import Entry, EntryTag, Tag
from orangeslice.database.repos.record_repo import RecordRepo


def test_repo_crud(db):
    repo = RecordRepo(db, Entry)

    # create
    e = repo.create(name="Orange Juicer", github_link="https://github.com/o/j", project_link="https://o.j")
    db.flush()
    assert e.id is not None
    assert e.date_created is not None

    # get & list
    assert repo.get(e.id).name == "Orange Juicer"
    assert [r.id for r in repo.list()] == [e.id]
    assert repo.list({"name": "nope"}) == []

    # update
    repo.update(e.id, name="Orange Press")
    db.flush()
    assert repo.get(e.id).name == "Orange Press"
    assert repo.update(uuid.uuid4(), name="x") is None

    # delete
    assert repo.delete(e.id) is True
    db.flush()
    assert repo.get(e.id) is None
    assert repo.delete(e.id) is False


def test_repo_filters_accept_string_ids(db):
    tags = RecordRepo(db, Tag)
    links = RecordRepo(db, EntryTag)
    entry = RecordRepo(db, Entry).create(name="A")
    ml = tags.create(name="ML", color="#4caf50")
    db.flush()
    links.create(entry_id=entry.id, tag_id=ml.id)
    db.flush()

    assert len(links.list({"entry_id": str(entry.id)})) == 1
    assert len(links.list({"tag_id": ml.id})) == 1


def test_repo_rejects_unknown_and_readonly_fields(db):
    repo = RecordRepo(db, Entry)
    with pytest.raises(ValueError):
        repo.list({"colour": "x"})
    with pytest.raises(ValueError):
        repo.create(name="A", id=uuid.uuid4())


def test_repo_batch_create_and_delete(db):
    repo = RecordRepo(db, Tag)
    created = repo.create_many([{"name": n, "color": "#111111"} for n in ("A", "B", "C")])
    db.flush()
    assert len(repo.list()) == 3

    assert repo.delete_many([created[0].id, created[2].id]) == 2
    db.expire_all()
    assert [t.name for t in repo.list()] == ["B"]
    assert repo.delete_many([]) == 0
