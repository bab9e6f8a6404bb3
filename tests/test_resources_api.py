from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from app.main import app, get_catalog_store
from tests.catalog_fixtures import UnavailableStore, sample_store

client = TestClient(app)


@pytest.fixture(autouse=True)
def catalog_store():
    store = sample_store()
    app.dependency_overrides[get_catalog_store] = lambda: store
    yield store
    app.dependency_overrides.clear()


def test_resources_endpoint_contract():
    resp = client.get("/resources", params={"sort": "downloads", "pageSize": 2})
    assert resp.status_code == 200

    data = resp.json()
    assert data["totalMatched"] == 5
    assert data["page"] == 1
    assert data["pageSize"] == 2
    assert [r["id"] for r in data["items"]] == ["b", "c"]

    item = data["items"][0]
    # The browse UI reads these camelCase fields.
    for key in ("title", "description", "tags", "categoryId", "platform",
                "downloadCount", "likeCount", "createdAt"):
        assert key in item

    assert {"categories", "platforms", "tags"} <= set(data["facets"])
    assert "X-Request-ID" in resp.headers
    assert "X-Process-Time" in resp.headers


def test_versioned_path_serves_the_same_results():
    params = {"search": "sky", "tags": "productivity"}
    plain = client.get("/resources", params=params).json()
    versioned = client.get("/api/v1/resources", params=params).json()

    assert plain == versioned
    assert [r["id"] for r in plain["items"]] == ["c"]


def test_category_and_platform_filters():
    resp = client.get("/api/v1/resources", params={"category": "games", "platform": "mobile"})
    assert resp.status_code == 200
    assert [r["id"] for r in resp.json()["items"]] == ["d"]


def test_page_past_the_end_returns_empty_items():
    resp = client.get("/resources", params={"page": 10, "pageSize": 5})
    assert resp.status_code == 200
    data = resp.json()
    assert data["items"] == []
    assert data["totalMatched"] == 5


@pytest.mark.parametrize(
    "params, field",
    [
        ({"category": "nope"}, "category"),
        ({"platform": "xbox"}, "platform"),
        ({"sort": "relevance"}, "sort"),
        ({"page": 0}, "page"),
        ({"pageSize": 1000}, "pageSize"),
        ({"page": "first"}, "page"),
    ],
)
def test_invalid_filters_return_400(params, field):
    resp = client.get("/resources", params=params)
    assert resp.status_code == 400

    body = resp.json()
    assert body["error"] == "InvalidFilter"
    assert body["field"] == field
    assert body["message"]


def test_storage_outage_returns_503():
    app.dependency_overrides[get_catalog_store] = lambda: UnavailableStore()

    resp = client.get("/resources")
    assert resp.status_code == 503
    assert resp.json()["error"] == "StorageUnavailable"


def test_meta_filters_lists_categories_by_name():
    resp = client.get("/api/v1/meta/filters")
    assert resp.status_code == 200

    data = resp.json()
    assert [c["slug"] for c in data["categories"]] == ["apps", "games"]
    assert data["platforms"] == ["pc", "android", "ios", "mobile", "other"]
    assert data["sortKeys"] == ["recency", "downloads", "likes", "alphabetical"]


def test_health_probes():
    assert client.get("/health").json() == {"status": "ok"}
    assert client.get("/health/live").json() == {"status": "ok"}

    ready = client.get("/health/ready")
    assert ready.status_code == 200
    data = ready.json()
    assert data["status"] == "ready"
    assert data["dependencies"]["catalog"]["status"] == "ok"


def test_health_ready_reports_storage_outage():
    app.dependency_overrides[get_catalog_store] = lambda: UnavailableStore(fail_categories=True)

    data = client.get("/health/ready").json()
    assert data["status"] == "not_ready"
    assert data["dependencies"]["catalog"]["status"] == "error"


def test_huge_page_number_returns_empty_items():
    resp = client.get("/resources", params={"page": 10**18, "pageSize": 100})
    assert resp.status_code == 200
    data = resp.json()
    assert data["items"] == []
    assert data["totalMatched"] == 5
    assert data["page"] == 10**18
