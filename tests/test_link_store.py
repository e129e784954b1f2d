from __future__ import annotations

import json
from pathlib import Path

import pytest

import link_store
from models import LinkRecord

SAMPLE_STORE = {
    "links": [
        {"id": "1", "title": "GitHub", "url": "https://github.com", "categoryId": "dev", "icon": "https://github.com/favicon.ico"},
        {"id": "2", "title": "Hacker News", "url": "https://news.ycombinator.com", "categoryId": "news", "description": "Tech news."},
    ],
    "categories": [{"id": "dev", "name": "Development"}, {"id": "news", "name": "News"}],
}


@pytest.fixture(autouse=True)
def patch_store_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point LINKS_STORE_PATH at a temp file for every test."""
    path = tmp_path / "links.json"
    monkeypatch.setenv("LINKS_STORE_PATH", str(path))
    return path


def _write(path: Path, data: object) -> None:
    path.write_text(json.dumps(data), encoding="utf-8")


def test_load_store_missing_file_is_empty() -> None:
    assert link_store.load_store() == ([], [])


def test_load_store_parses_links_and_categories(patch_store_path: Path) -> None:
    _write(patch_store_path, SAMPLE_STORE)

    links, categories = link_store.load_store()

    assert [link.id for link in links] == ["1", "2"]
    assert links[0].category_id == "dev"
    assert links[0].description is None
    assert links[0].icon == "https://github.com/favicon.ico"
    assert links[1].description == "Tech news."
    assert [c.name for c in categories] == ["Development", "News"]


def test_commit_collection_replaces_links_and_keeps_categories(patch_store_path: Path) -> None:
    _write(patch_store_path, SAMPLE_STORE)
    links = link_store.load_links()

    link_store.commit_collection([links[1], links[0]])

    data = json.loads(patch_store_path.read_text(encoding="utf-8"))
    assert [item["id"] for item in data["links"]] == ["2", "1"]
    assert data["categories"] == SAMPLE_STORE["categories"]
    assert data["links"][1]["categoryId"] == "dev"
    assert "description" not in data["links"][1]
    assert not (patch_store_path.parent / "links.json.tmp").exists()


def test_commit_collection_creates_file(patch_store_path: Path) -> None:
    link_store.commit_collection([LinkRecord(id="a", title="A", url="https://a.example.com", description="Site A.")])

    links = link_store.load_links()
    assert links == [LinkRecord(id="a", title="A", url="https://a.example.com", description="Site A.")]


def test_commit_collection_rejects_duplicate_ids(patch_store_path: Path) -> None:
    link = LinkRecord(id="a", title="A", url="https://a.example.com")

    with pytest.raises(link_store.StoreError, match="duplicate"):
        link_store.commit_collection([link, link])

    assert not patch_store_path.exists()


def test_load_store_malformed_json_raises_store_error(patch_store_path: Path) -> None:
    patch_store_path.write_text("{not json", encoding="utf-8")

    with pytest.raises(link_store.StoreError, match="Could not read"):
        link_store.load_store()


def test_load_store_record_without_id_raises_store_error(patch_store_path: Path) -> None:
    _write(patch_store_path, {"links": [{"title": "No id"}]})

    with pytest.raises(link_store.StoreError, match="Malformed record"):
        link_store.load_store()


def test_explicit_path_overrides_default(tmp_path: Path) -> None:
    other = tmp_path / "other.json"
    link_store.commit_collection([LinkRecord(id="x", title="X", url="https://x.example.com")], path=str(other))

    assert link_store.load_links(str(other))[0].id == "x"
    assert link_store.load_links() == []


def test_commit_collection_keeps_fields_it_does_not_model(patch_store_path: Path) -> None:
    _write(patch_store_path, {
        "links": [
            {"id": "1", "title": "GitHub", "url": "https://github.com", "categoryId": "dev",
             "createdAt": 1700000000000, "pinned": True},
            {"id": "2", "title": "Hacker News", "url": "https://news.ycombinator.com", "categoryId": "news",
             "createdAt": 1700000000001},
        ],
    })
    links = link_store.load_links()

    link_store.commit_collection([links[1], links[0]])

    data = json.loads(patch_store_path.read_text(encoding="utf-8"))
    assert data["links"][0] == {
        "id": "2", "title": "Hacker News", "url": "https://news.ycombinator.com", "categoryId": "news",
        "createdAt": 1700000000001,
    }
    assert data["links"][1]["createdAt"] == 1700000000000
    assert data["links"][1]["pinned"] is True
