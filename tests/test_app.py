"""Chart preview service."""

import pytest
from fastapi.testclient import TestClient
from pytest import approx

from productivity.errors import EmptySeriesError
from ui.app import create_app


@pytest.fixture
def client(dataset, small_options):
    dataset = {**dataset, "solo": [{"x": 5, "y": 3}]}
    return TestClient(create_app(dataset, options=small_options))


def test_contributors_in_plot_order(client) -> None:
    resp = client.get("/api/contributors")

    assert resp.status_code == 200
    assert resp.json() == [
        {"key": "all", "heading": "All Productivity"},
        {"key": "alice", "heading": "alice"},
        {"key": "bob", "heading": "bob"},
        {"key": "solo", "heading": "solo"},
    ]


def test_chart_png(client) -> None:
    resp = client.get("/api/charts/alice.png")

    assert resp.status_code == 200
    assert resp.headers["content-type"] == "image/png"
    assert resp.content.startswith(b"\x89PNG")


def test_png_cache_keeps_latest_snapshot_per_contributor(client) -> None:
    snapshots = client.app.state.snapshots
    first = client.get("/api/charts/alice.png").content
    assert client.get("/api/charts/alice.png").content == first
    assert len(snapshots) == 1

    client.put("/api/charts/alice/window", json={"x": 0, "dx": 50})
    moved = client.get("/api/charts/alice.png").content
    client.get("/api/charts/bob.png")

    assert moved != first
    assert len(snapshots) == 2


def test_apps_do_not_share_snapshots(small_options) -> None:
    rising = TestClient(create_app({"all": [(0, 1), (10, 2)]}, options=small_options))
    falling = TestClient(create_app({"all": [(0, 9), (10, 0)]}, options=small_options))

    assert rising.get("/api/charts/all.png").content != falling.get("/api/charts/all.png").content


def test_aggregate_view_built_when_missing(small_options) -> None:
    data = {"alice": [(0, 1), (10, 2)], "bob": [(0, 3), (10, 4)]}
    client = TestClient(create_app(data, options=small_options))

    keys = [c["key"] for c in client.get("/api/contributors").json()]

    assert keys == ["all", "alice", "bob"]
    assert client.get("/api/charts/all/window").status_code == 200


def test_put_window_sets_focus_domain(client) -> None:
    resp = client.put("/api/charts/all/window", json={"x": 0, "dx": 50})

    assert resp.status_code == 200
    assert resp.json() == {"x": 0.0, "dx": 50.0, "domain": [0.0, 10.0]}
    assert client.get("/api/charts/all/window").json()["domain"] == [0.0, 10.0]


def test_put_window_is_clamped(client) -> None:
    body = client.put("/api/charts/all/window", json={"x": 90, "dx": -20}).json()

    assert (body["x"], body["dx"]) == (90.0, 0.0)


def test_pointer_select_gesture(client) -> None:
    client.put("/api/charts/bob/window", json={"x": 0, "dx": 50})

    client.post("/api/charts/bob/pointer", json={"kind": "down", "x": 80})
    client.post("/api/charts/bob/pointer", json={"kind": "move", "x": 60})
    body = client.post("/api/charts/bob/pointer", json={"kind": "up", "x": 60}).json()

    assert (body["x"], body["dx"]) == (60.0, 20.0)
    assert body["domain"] == approx([12.0, 16.0])


def test_pointer_rejects_unknown_kind(client) -> None:
    resp = client.post("/api/charts/bob/pointer", json={"kind": "hover", "x": 1})

    assert resp.status_code == 422


def test_unknown_contributor_is_404(client) -> None:
    assert client.get("/api/charts/carol.png").status_code == 404
    assert client.get("/api/charts/carol/window").status_code == 404


def test_single_point_series_is_422(client) -> None:
    resp = client.get("/api/charts/solo/window")

    assert resp.status_code == 422
    assert "single x value" in resp.json()["detail"]


def test_empty_series_rejected_up_front(small_options) -> None:
    with pytest.raises(EmptySeriesError):
        create_app({"all": []}, options=small_options)
