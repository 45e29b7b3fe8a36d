import os
from pathlib import Path

from src.api.store import NoteStore


def test_health(client):
    assert client.get("/api/health").json() == {"message": "Healthy"}


def test_index_page_lists_newest_first(client, store: NoteStore):
    store.create("Shopping List", "milk, eggs")
    store.create("Todo", "finish report")

    resp = client.get("/")

    assert resp.status_code == 200
    assert "text/html" in resp.headers["content-type"]
    assert resp.text.index("Todo") < resp.text.index("Shopping List")


def test_create_form_redirects_and_persists(client, store: NoteStore):
    resp = client.post("/create", data={"title": "Todo", "text": "finish report"}, follow_redirects=False)

    assert resp.status_code == 303
    assert resp.headers["location"] == "/"
    note = store.read(0)
    assert (note.title, note.text) == ("Todo", "finish report")
    assert Path(note.path).exists()


def test_create_form_requires_title(client, store: NoteStore):
    resp = client.post("/create", data={"title": "", "text": "x"}, follow_redirects=False)
    assert resp.status_code == 422
    assert store.list() == []


def test_show_and_edit_pages(client, store: NoteStore):
    store.create("Shopping List", "milk, eggs")

    show = client.get("/notes/0")
    edit = client.get("/notes/0/edit")

    assert show.status_code == 200
    assert "milk, eggs" in show.text
    assert "Created " in show.text
    assert edit.status_code == 200
    assert 'action="/notes/0/edit"' in edit.text


def test_missing_note_page_is_404(client):
    resp = client.get("/notes/5")
    assert resp.status_code == 404
    assert "Note not found" in resp.text


def test_update_via_post_and_put(client, store: NoteStore):
    original = store.create("Todo", "finish report")

    resp = client.post("/notes/0/edit", data={"title": "Todo", "text": "v2"}, follow_redirects=False)
    assert resp.status_code == 303
    assert store.read(0).text == "v2"

    resp = client.put("/notes/0/edit", data={"title": "Done", "text": "v3"}, follow_redirects=False)
    assert resp.status_code == 303
    note = store.read(0)
    assert (note.title, note.text, note.path) == ("Done", "v3", original.path)


def test_delete_via_form_renumbers(client, store: NoteStore):
    first = store.create("Shopping List", "milk, eggs")
    store.create("Todo", "finish report")

    resp = client.post("/notes/0/delete", follow_redirects=False)

    assert resp.status_code == 303
    notes = store.list()
    assert [(n.id, n.title) for n in notes] == [(0, "Todo")]
    assert not os.path.exists(first.path)


def test_delete_verb_on_missing_note_is_404(client):
    assert client.delete("/notes/0/delete").status_code == 404


def test_api_crud(client):
    created = client.post("/api/notes", json={"title": "Shopping List", "text": "milk"})
    assert created.status_code == 201
    assert created.json()["id"] == 0

    client.post("/api/notes", json={"title": "Todo"})
    listed = client.get("/api/notes").json()["list"]
    assert [n["id"] for n in listed] == [0, 1]
    assert listed[1]["text"] == ""

    updated = client.put("/api/notes/1", json={"text": "finish report"})
    assert updated.status_code == 200
    assert updated.json()["title"] == "Todo"
    assert updated.json()["text"] == "finish report"

    assert client.delete("/api/notes/0").status_code == 204
    remaining = client.get("/api/notes/0").json()
    assert (remaining["id"], remaining["title"]) == (0, "Todo")
    assert client.get("/api/notes/1").status_code == 404


def test_api_missing_note_returns_json_404(client):
    resp = client.get("/api/notes/3")
    assert resp.status_code == 404
    assert resp.json() == {"detail": "Note not found"}


def test_corrupt_index_returns_500(client, store: NoteStore):
    Path(store.index_path).write_text("not json", encoding="utf-8")

    assert client.get("/").status_code == 500
    resp = client.get("/api/notes")
    assert resp.status_code == 500
    assert resp.json() == {"detail": "Note storage failed"}


def test_titles_with_path_separators_return_422(client, store: NoteStore, tmp_path: Path):
    resp = client.post("/create", data={"title": "../escaped", "text": "x"}, follow_redirects=False)
    assert resp.status_code == 422
    assert client.post("/api/notes", json={"title": "a/b"}).status_code == 422
    assert store.list() == []
    assert list(tmp_path.glob("escaped*")) == []

    store.create("Safe", "x")
    resp = client.post("/notes/0/edit", data={"title": "..\\up", "text": "x"}, follow_redirects=False)
    assert resp.status_code == 422
    assert client.put("/api/notes/0", json={"title": "../up"}).status_code == 422
    assert store.read(0).title == "Safe"


def test_api_does_not_expose_file_path(client, store: NoteStore):
    store.create("Todo", "finish report")
    assert "path" not in client.get("/api/notes/0").json()
    assert "path" not in client.get("/api/notes").json()["list"][0]


def test_cors_allows_only_the_frontend_origin(client):
    allowed = client.get("/api/health", headers={"Origin": "http://localhost:3000"})
    assert allowed.headers["access-control-allow-origin"] == "http://localhost:3000"

    other = client.get("/api/health", headers={"Origin": "http://evil.example"})
    assert "access-control-allow-origin" not in other.headers
