# tests/services/test_catalog_api.py
from __future__ import annotations

import uuid


def _seed(ctx):
    gw = ctx.gateway
    ml = gw.tags.create(name="ML", color="#4caf50")
    games = gw.tags.create(name="Games", color="#f89520")
    juicer = gw.entries.create(name="Orange Juicer", github_link="g", project_link="p")
    chess = gw.entries.create(name="Chess Bot", github_link="g", project_link="p")
    gw.entry_tags.create_many([
        {"entry_id": juicer.id, "tag_id": ml.id},
        {"entry_id": juicer.id, "tag_id": games.id},
        {"entry_id": chess.id, "tag_id": games.id},
    ])
    return {"ml": ml, "games": games, "juicer": juicer, "chess": chess}


def test_healthz(api_client):
    r = api_client.get("/healthz")
    assert r.status_code == 200
    body = r.json()
    assert body["ok"] is True
    assert body["mirror_loaded"] is True
    assert body["dead_channels"] == []


def test_empty_catalog(api_client):
    r = api_client.get("/")
    assert r.status_code == 200, r.text
    page = r.json()
    assert page["status"] == "ready"
    assert page["entries"] == []
    assert page["empty_state"]["kind"] == "no_entries"
    assert page["empty_state"]["message"] == "No demos available yet. Check back soon!"


def test_catalog_lists_entries_with_tags(api_client, ctx):
    data = _seed(ctx)
    page = api_client.get("/demos").json()
    assert page["count_label"] == "2 Projects"
    by_name = {c["name"]: c for c in page["entries"]}
    assert set(by_name["Orange Juicer"]["tag_names"]) == {"ML", "Games"}
    assert by_name["Chess Bot"]["image_url"] == ctx.settings.catalog.placeholder_image_url
    assert {t["name"] for t in page["available_tags"]} == {"ML", "Games"}
    assert str(data["juicer"].id) in {c["id"] for c in page["entries"]}


def test_catalog_filters(api_client, ctx):
    data = _seed(ctx)
    page = api_client.get("/", params={"tag": [str(data["games"].id), str(data["ml"].id)]}).json()
    assert [c["name"] for c in page["entries"]] == ["Orange Juicer"]
    assert page["active_filters"]["tag_count"] == 2

    page = api_client.get("/", params={"q": "chess"}).json()
    assert [c["name"] for c in page["entries"]] == ["Chess Bot"]
    assert page["count_label"] == "1 Project"


def test_no_match_is_not_the_empty_catalog(api_client, ctx):
    _seed(ctx)
    page = api_client.get("/", params={"q": "Banana"}).json()
    assert page["entries"] == []
    assert page["empty_state"]["kind"] == "no_matches"
    assert page["empty_state"]["message"] == "No projects match your current filters."
    assert page["empty_state"]["detail"] == 'Search: "Banana"'


def test_catalog_rejects_malformed_tag_id(api_client):
    r = api_client.get("/", params={"tag": "not-a-uuid"})
    assert r.status_code == 422


def test_entries_api(api_client, ctx):
    data = _seed(ctx)
    r = api_client.get("/api/entries")
    assert r.status_code == 200
    rows = {row["name"]: row for row in r.json()}
    assert set(rows["Orange Juicer"]["tag_names"]) == {"ML", "Games"}
    assert rows["Chess Bot"]["tag_ids"] == [str(data["games"].id)]

    r = api_client.get(f"/api/entries/{data['chess'].id}")
    assert r.status_code == 200
    assert r.json()["tag_names"] == ["Games"]

    r = api_client.get(f"/api/entries/{uuid.uuid4()}")
    assert r.status_code == 404


def test_tags_api(api_client, ctx):
    _seed(ctx)
    r = api_client.get("/api/tags")
    assert r.status_code == 200
    assert [t["name"] for t in r.json()] == ["ML", "Games"]
