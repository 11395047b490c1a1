import pytest
from fastapi.testclient import TestClient

from ordning_api.utils.errors import InvalidSearchParameters, ViolationKind
from ordning_api.utils.item import create_item
from ordning_api.utils.location import create_location
from ordning_api.utils.search import search_items, search_locations


@pytest.fixture
def shelf(db):
    return create_location(db, "shelf-1", "Workshop shelf")


def _names(rows):
    return [r.name for r in rows]


def test_empty_term_lists_everything_by_name(db, shelf):
    for i in range(25):
        create_item(db, f"Item {i:02d}", shelf.id)

    results, total = search_items(db, "", 0, 10)
    assert total == 25
    assert _names(results) == [f"Item {i:02d}" for i in range(10)]


@pytest.mark.parametrize("term", [None, "   ", "&&&", "( | )"])
def test_blank_or_operator_only_term_matches_everything(db, shelf, term):
    create_item(db, "Bravo", shelf.id)
    create_item(db, "Alpha", shelf.id)

    results, total = search_items(db, term, 0, 10)
    assert total == 2
    assert _names(results) == ["Alpha", "Bravo"]


def test_phrase_in_name_ranks_first(db, shelf):
    create_item(db, "Hammer", shelf.id, description="Drill attachment")
    create_item(db, "Hammer Drill", shelf.id)

    results, total = search_items(db, "hammer drill", 0, 10)
    assert total == 2
    assert _names(results) == ["Hammer Drill", "Hammer"]


def test_non_matching_rows_are_excluded_from_page_and_count(db, shelf):
    create_item(db, "Hammer", shelf.id)
    create_item(db, "Hammock", shelf.id)
    create_item(db, "Tape measure", shelf.id)

    results, total = search_items(db, "hammer", 0, 10)
    assert total == 1
    assert _names(results) == ["Hammer"]


def test_search_matches_description_and_properties(db, shelf):
    create_item(db, "Box A", shelf.id, description="Christmas lights")
    create_item(db, "Box B", shelf.id, properties={"contents": "lights", "color": "red"})
    create_item(db, "Box C", shelf.id, properties={"contents": "cables"})

    results, total = search_items(db, "lights", 0, 10)
    assert total == 2
    # description weight is higher than properties weight
    assert _names(results) == ["Box A", "Box B"]


def test_search_is_case_insensitive(db, shelf):
    create_item(db, "USB Cable", shelf.id)
    results, total = search_items(db, "usb CABLE", 0, 10)
    assert total == 1
    assert _names(results) == ["USB Cable"]


def test_equal_scores_are_ordered_by_name(db, shelf):
    for name in ["Screw C", "Screw A", "Screw B"]:
        create_item(db, name, shelf.id)

    results, _ = search_items(db, "screw", 0, 10)
    assert _names(results) == ["Screw A", "Screw B", "Screw C"]


def test_like_wildcards_in_term_are_literal(db, shelf):
    create_item(db, "wire_nut assortment", shelf.id)
    create_item(db, "wirexnut", shelf.id)

    results, total = search_items(db, "wire_nut", 0, 10)
    assert total == 1
    assert _names(results) == ["wire_nut assortment"]


@pytest.mark.parametrize("term, expected", [
    ("o'ring", ["O'Ring kit"]),
    ("ring", ["O'Ring kit"]),
    ("R&D", ["R&D notes"]),
])
def test_names_with_reserved_characters_are_searchable(db, shelf, term, expected):
    create_item(db, "O'Ring kit", shelf.id)
    create_item(db, "R&D notes", shelf.id)

    results, total = search_items(db, term, 0, 10)
    assert total == len(expected)
    assert _names(results) == expected


@pytest.mark.parametrize("offset", range(0, 10))
def test_page_length_matches_remaining_rows(db, shelf, offset):
    for i in range(7):
        create_item(db, f"Widget {i}", shelf.id)

    limit = 3
    results, total = search_items(db, "widget", offset, limit)
    assert total == 7
    assert len(results) == min(limit, max(0, total - offset))


def test_pages_do_not_overlap(db, shelf):
    for i in range(5):
        create_item(db, f"Cable {i}", shelf.id)

    first, _ = search_items(db, "cable", 0, 2)
    second, _ = search_items(db, "cable", 2, 2)
    third, _ = search_items(db, "cable", 4, 2)
    ids = [r.id for r in first + second + third]
    assert len(ids) == len(set(ids)) == 5


@pytest.mark.parametrize("offset, limit", [(-1, 10), (0, 0), (0, -5), (0, 101)])
def test_invalid_pagination_is_rejected_before_io(offset, limit):
    # No session at all: validation has to fail before anything touches storage.
    with pytest.raises(InvalidSearchParameters) as exc_info:
        search_items(None, "hammer", offset, limit)
    assert exc_info.value.kind is ViolationKind.INVALID_PAGINATION


def test_limit_of_one_hundred_is_allowed(db, shelf):
    create_item(db, "Only", shelf.id)
    results, total = search_items(db, "", 0, 100)
    assert total == 1
    assert len(results) == 1


def test_location_search_uses_same_ranking(db):
    create_location(db, "garage", "Garage", description="Car tools and garden stuff")
    create_location(db, "garden-shed", "Garden shed")
    create_location(db, "attic", "Attic")

    results, total = search_locations(db, "garden", 0, 10)
    assert total == 2
    assert _names(results) == ["Garden shed", "Garage"]

    everything, total_all = search_locations(db, "", 0, 10)
    assert total_all == 3
    assert _names(everything) == ["Attic", "Garage", "Garden shed"]


def test_search_items_endpoint(client: TestClient):
    client.post("/locations/", json={"id": "bin", "name": "Bin"})
    for i in range(25):
        resp = client.post("/items/", json={"name": f"Thing {i:02d}", "location_id": "bin"})
        assert resp.status_code == 201

    resp = client.get("/search/items", params={"q": "", "offset": 0, "limit": 10})
    assert resp.status_code == 200
    body = resp.json()
    assert body["total_count"] == 25
    assert [r["name"] for r in body["results"]] == [f"Thing {i:02d}" for i in range(10)]


def test_search_endpoint_rejects_large_limit(client: TestClient):
    resp = client.get("/search/items", params={"q": "x", "limit": 101})
    assert resp.status_code == 400
    assert resp.json()["kind"] == "invalid-pagination"


def test_search_locations_endpoint(client: TestClient):
    client.post("/locations/", json={"id": "kitchen", "name": "Kitchen"})
    client.post("/locations/", json={"id": "kitchen-drawer", "name": "Kitchen drawer", "parent_location_id": "kitchen"})

    resp = client.get("/search/locations", params={"q": "drawer"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["total_count"] == 1
    assert body["results"][0]["id"] == "kitchen-drawer"
