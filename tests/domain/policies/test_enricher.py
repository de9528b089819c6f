# tests/domain/policies/test_enricher.py
from __future__ import annotations

import logging
import uuid

from orangeslice.domain.entities.links.entry_tag_link import EntryTag
from orangeslice.domain.entities.tag import Tag
from orangeslice.domain.policies.enricher import RelationshipEnricher


def _tag(name, color="#fff"):
    return Tag(id=uuid.uuid4(), name=name, color=color)


def _link(entry_id, tag):
    return EntryTag(id=uuid.uuid4(), entry_id=entry_id, tag_id=tag.id if isinstance(tag, Tag) else tag)


def test_enrich_resolves_names_in_input_order():
    ml, games = _tag("ML", "#4caf50"), _tag("Games", "#f89520")
    e1, e2 = uuid.uuid4(), uuid.uuid4()
    links = [_link(e1, games), _link(e2, ml), _link(e1, ml)]

    out = RelationshipEnricher([ml, games]).enrich(links)

    assert [(a.entry_id, a.tag_name) for a in out] == [(e1, "Games"), (e2, "ML"), (e1, "ML")]
    assert out[0].tag_color == "#f89520"
    assert [a.id for a in out] == [l.id for l in links]


def test_unknown_tags_are_dropped_and_logged(caplog):
    ml = _tag("ML")
    links = [_link(uuid.uuid4(), ml), _link(uuid.uuid4(), uuid.uuid4())]
    with caplog.at_level(logging.WARNING):
        out = RelationshipEnricher([ml]).enrich(links)
    assert len(out) == 1
    assert any("not known" in r.getMessage() for r in caplog.records)


def test_refresh_replaces_the_index():
    old = _tag("Old")
    enricher = RelationshipEnricher([old])
    assert enricher.tag(old.id) == old

    renamed = Tag(id=old.id, name="New", color=old.color)
    enricher.refresh_tags([renamed])
    assert enricher.known_tag_ids == {old.id}
    assert enricher.enrich([_link(uuid.uuid4(), old)])[0].tag_name == "New"

    enricher.refresh_tags([])
    assert enricher.enrich([_link(uuid.uuid4(), old)]) == []


def test_empty_enricher_knows_nothing():
    enricher = RelationshipEnricher()
    assert enricher.known_tag_ids == set()
    assert enricher.tag(uuid.uuid4()) is None
