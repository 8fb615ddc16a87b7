from datetime import datetime

import pytest

from agridirect.services import catalog
from agridirect.services.catalog import CatalogCriteria, SortOrder


def _names(products):
    return sorted(p.name for p in products)


@pytest.fixture
def tagged(make_product):
    make_product(name="A", preferences=["organic"])
    make_product(name="B", preferences=["organic", "local"])
    make_product(name="C", preferences=["local"])


def test_preferences_match_any_tag(db, tagged):
    assert _names(catalog.search(db, CatalogCriteria(preferences=["organic"]))) == ["A", "B"]
    assert _names(catalog.search(db, CatalogCriteria(preferences=["organic", "local"]))) == ["A", "B", "C"]
    assert _names(catalog.search(db, CatalogCriteria())) == ["A", "B", "C"]


def test_matching_several_tags_does_not_duplicate(db, tagged):
    results = catalog.search(db, CatalogCriteria(preferences="organic,local"))
    assert len(results) == len({p.id for p in results}) == 3


def test_price_bounds_are_inclusive(db, make_product):
    for price in (99, 100, 150, 200, 201):
        make_product(name=f"p{price}", price=price)

    found = catalog.search(db, CatalogCriteria(min_price=100, max_price=200))
    assert sorted(p.price for p in found) == [100, 150, 200]

    assert len(catalog.search(db, CatalogCriteria(min_price=200))) == 2
    assert len(catalog.search(db, CatalogCriteria(max_price=99))) == 1
    assert catalog.search(db, CatalogCriteria(min_price=300, max_price=100)) == []


def test_filters_combine_with_and(db, make_product):
    make_product(name="match", category="fruit", price=80, location="Ratnagiri", preferences=["organic"])
    make_product(name="wrong-category", category="grain", price=80, location="Ratnagiri", preferences=["organic"])
    make_product(name="wrong-place", category="fruit", price=80, location="Pune", preferences=["organic"])
    make_product(name="wrong-tag", category="fruit", price=80, location="Ratnagiri", preferences=["local"])
    make_product(name="too-dear", category="fruit", price=800, location="Ratnagiri", preferences=["organic"])

    criteria = CatalogCriteria(
        category="fruit", max_price=100, location="ratna", preferences=["organic"]
    )
    assert _names(catalog.search(db, criteria)) == ["match"]


def test_location_is_case_insensitive_substring(db, make_product):
    make_product(name="x", location="Nashik, Maharashtra")
    make_product(name="y", location="Pune")

    assert _names(catalog.search(db, CatalogCriteria(location="MAHA"))) == ["x"]
    # LIKE wildcards are matched literally
    assert catalog.search(db, CatalogCriteria(location="P_ne")) == []


def test_sorting(db, make_product):
    make_product(name="old", price=30, created_at=datetime(2024, 1, 1))
    make_product(name="new", price=10, created_at=datetime(2024, 6, 1))
    make_product(name="mid", price=20, created_at=datetime(2024, 3, 1))

    by = lambda s: [p.name for p in catalog.search(db, CatalogCriteria(sort_by=s))]
    assert by("price_asc") == ["new", "mid", "old"]
    assert by("price_desc") == ["old", "mid", "new"]
    assert by("newest") == ["new", "mid", "old"]


def test_criteria_normalisation():
    blank = CatalogCriteria(category="", min_price="", max_price="  ", location="", preferences="", sort_by="")
    assert blank == CatalogCriteria()

    assert CatalogCriteria(sort_by="cheapest_first").sort_by is None
    assert CatalogCriteria(sort_by="newest").sort_by is SortOrder.NEWEST
    assert CatalogCriteria(preferences=["organic, local", "organic", " "]).preferences == ["organic", "local"]
    assert CatalogCriteria(min_price="12.5").min_price == 12.5


def test_applied_filters_lists_only_constraints():
    assert catalog.applied_filters(CatalogCriteria()) == {}
    applied = catalog.applied_filters(
        CatalogCriteria(category="fruit", min_price="10", preferences="organic", sort_by="bogus")
    )
    assert applied == {"category": "fruit", "min_price": 10.0, "preferences": ["organic"]}


# --------------------------------------------------------------------
# GET /products/
# --------------------------------------------------------------------
def test_search_endpoint_joins_public_farmer_fields(client, farmer, tagged):
    resp = client.get("/products/", params={"preferences": "organic"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["count"] == 2
    assert body["applied_filters"] == {"preferences": ["organic"]}
    for item in body["products"]:
        assert item["farmer"] == {"id": farmer.id, "name": farmer.name, "location": farmer.location}
        assert "hashed_password" not in item["farmer"]
        assert "email" not in item["farmer"]


def test_search_endpoint_repeated_preferences(client, tagged):
    resp = client.get("/products/", params=[("preferences", "organic"), ("preferences", "local")])
    assert resp.json()["count"] == 3


def test_search_endpoint_blank_params_mean_no_constraint(client, tagged):
    resp = client.get(
        "/products/",
        params={"category": "", "min_price": "", "max_price": "", "location": "", "preferences": "", "sort_by": ""},
    )
    assert resp.status_code == 200
    assert resp.json()["count"] == 3
    assert resp.json()["applied_filters"] == {}


def test_search_endpoint_empty_result_is_success(client, make_product):
    make_product(price=100)
    resp = client.get("/products/", params={"min_price": 100000})
    assert resp.status_code == 200
    assert resp.json()["count"] == 0
    assert resp.json()["products"] == []


def test_search_endpoint_ignores_unknown_sort(client, make_product):
    make_product()
    resp = client.get("/products/", params={"sort_by": "popularity"})
    assert resp.status_code == 200
    assert resp.json()["count"] == 1


def test_search_endpoint_rejects_non_numeric_price(client):
    resp = client.get("/products/", params={"min_price": "cheap"})
    assert resp.status_code == 400
    assert resp.json()["code"] == "validation_error"
