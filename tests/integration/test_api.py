from __future__ import annotations

import csv
import io
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from trackdash_api.main import app


@pytest.fixture()
def client(tracks_csv: Path):
    previous = app.state.data_source
    app.state.data_source = tracks_csv
    with TestClient(app) as c:
        yield c
    app.state.data_source = previous


def test_meta_genres(client: TestClient):
    resp = client.get("/meta/genres")
    assert resp.status_code == 200
    assert resp.json() == {"genres": ["acoustic", "folk", "indie", "pop"]}


def test_meta_columns(client: TestClient):
    resp = client.get("/meta/columns")
    assert resp.status_code == 200
    headers = [c["header"] for c in resp.json()["columns"]]
    assert headers == ["Track", "Artist", "Genre", "Popularity"]


def test_tracks_default_sort_and_page(client: TestClient):
    resp = client.post("/tracks", json={}, params={"page_size": 5})
    assert resp.status_code == 200
    body = resp.json()
    assert body["visible_count"] == 6
    assert body["total_count"] == 6
    assert body["page_count"] == 2
    assert [r["popularity"] for r in body["rows"]] == [100.0, 87.0, 80.0, 71.0, 60.0]
    assert body["rows"][0]["id"] == 4


def test_tracks_filtered(client: TestClient):
    resp = client.post("/tracks", json={"search": "love", "genre": "acoustic"})
    body = resp.json()
    assert resp.status_code == 200
    assert [r["track_name"] for r in body["rows"]] == ["Can't Help Falling In Love"]
    assert body["filters"]["genre"] == "acoustic"


def test_tracks_inclusive_bounds(client: TestClient):
    body = client.post("/tracks", json={"popularity_min": 0, "popularity_max": 60}, params={"descending": False}).json()
    assert [r["popularity"] for r in body["rows"]] == [0.0, 60.0]


def test_tracks_rejects_unknown_page_size(client: TestClient):
    resp = client.post("/tracks", json={}, params={"page_size": 7})
    assert resp.status_code == 422


def test_summary(client: TestClient):
    resp = client.post("/summary", json={"genre": "pop"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["kpis"]["visible_tracks"] == 2
    assert body["kpis"]["avg_popularity"] == pytest.approx(73.5)
    assert "popularity_histogram" in body["charts"]


def test_export_returns_csv_attachment(client: TestClient):
    resp = client.post("/export", json={"genre": "acoustic"})
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/csv")
    assert "attachment; filename=spotify_filtered_data.csv" in resp.headers["content-disposition"]
    parsed = list(csv.reader(io.StringIO(resp.text)))
    assert "id" not in parsed[0]
    assert parsed[0][0] == "track_id"
    assert len(parsed) == 3


def test_export_empty_selection(client: TestClient):
    resp = client.post("/export", json={"search": "no such song"})
    assert resp.status_code == 404
    notes = resp.json()["notifications"]
    assert [n["severity"] for n in notes] == ["warning"]


def test_export_unexpected_failure_is_500(client: TestClient, monkeypatch):
    def boom(_filters, _data_ctx):
        raise RuntimeError("filter blew up")

    monkeypatch.setattr("trackdash_api.main.prepare_context", boom)
    resp = client.post("/export", json={})
    assert resp.status_code == 500
    assert resp.json() == {"error": "filter blew up", "type": "RuntimeError"}


def test_dataset_errors_are_503(write_csv, client: TestClient):
    app.state.data_source = write_csv("track_name,artists,track_genre,popularity\nA,B,pop,high\n", name="bad.csv")
    resp = client.get("/meta/genres")
    assert resp.status_code == 503
    assert resp.json()["type"] == "InvalidDataError"

    resp = client.post("/export", json={})
    assert resp.status_code == 503


def test_missing_dataset_is_503(tmp_path: Path, client: TestClient):
    app.state.data_source = tmp_path / "gone.csv"
    resp = client.post("/tracks", json={})
    assert resp.status_code == 503
    assert resp.json()["type"] == "ResourceLoadError"
