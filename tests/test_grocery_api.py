"""Grocery list API tests."""

import pytest

MONDAY = "2026-03-02"
TUESDAY = "2026-03-03"


@pytest.fixture
def planned(client, auth_headers, create_recipe):
    """Plan a two-ingredient recipe for Monday dinner."""
    recipe = create_recipe(
        "Garlic Pasta",
        [
            {"name": "Pasta", "amount": 200, "unit": "g", "category": "grain"},
            {"name": "Garlic", "amount": 3, "unit": "cloves", "category": "spice"},
        ],
    )
    response = client.put(
        f"/api/v1/planner/slots/{MONDAY}/dinner",
        headers=auth_headers,
        json={"recipe_id": recipe["id"]},
    )
    assert response.status_code == 200
    return recipe


def get_list(client, headers):
    response = client.get("/api/v1/grocery-list", headers=headers)
    assert response.status_code == 200
    return response.json()


def item_named(grocery, name):
    return next(item for item in grocery["items"] if item["name"] == name)


def test_empty_list(client, auth_headers):
    """Test the list with nothing planned."""
    grocery = get_list(client, auth_headers)
    assert grocery["items"] == []
    assert grocery["total_count"] == 0
    assert grocery["progress"] == 0.0
    assert grocery["planned_recipe_count"] == 0


def test_list_follows_plan(client, auth_headers, planned):
    """Test that planned ingredients appear grouped by category."""
    grocery = get_list(client, auth_headers)
    assert grocery["total_count"] == 2
    assert grocery["checked_count"] == 0
    assert grocery["planned_recipe_count"] == 1
    assert [g["category"] for g in grocery["groups"]] == ["grain", "spice"]
    assert item_named(grocery, "Pasta")["amount"] == 200


def test_toggle_item(client, auth_headers, planned):
    """Test checking off an item updates progress."""
    garlic = item_named(get_list(client, auth_headers), "Garlic")

    response = client.post(
        f"/api/v1/grocery-list/items/{garlic['id']}/toggle", headers=auth_headers
    )
    assert response.status_code == 200
    assert response.json()["item"]["checked"] is True
    assert response.json()["outcome"]["status"] == "saved"

    grocery = get_list(client, auth_headers)
    assert grocery["checked_count"] == 1
    assert grocery["progress"] == 50.0

    response = client.post(
        f"/api/v1/grocery-list/items/{garlic['id']}/toggle", headers=auth_headers
    )
    assert response.json()["item"]["checked"] is False


def test_checked_state_survives_plan_change(client, auth_headers, planned):
    """Test that re-planning keeps checked items checked and updates amounts."""
    garlic = item_named(get_list(client, auth_headers), "Garlic")
    client.post(f"/api/v1/grocery-list/items/{garlic['id']}/toggle", headers=auth_headers)

    client.put(
        f"/api/v1/planner/slots/{TUESDAY}/lunch",
        headers=auth_headers,
        json={"recipe_id": planned["id"]},
    )

    grocery = get_list(client, auth_headers)
    garlic_after = item_named(grocery, "Garlic")
    assert garlic_after["id"] == garlic["id"]
    assert garlic_after["checked"] is True
    assert garlic_after["amount"] == 6
    assert item_named(grocery, "Pasta")["amount"] == 400


def test_checklist_survives_reload(client, auth_headers, planned):
    """Test that the saved checklist is merged back after a reload."""
    garlic = item_named(get_list(client, auth_headers), "Garlic")
    client.post(f"/api/v1/grocery-list/items/{garlic['id']}/toggle", headers=auth_headers)
    client.post(
        "/api/v1/grocery-list/items",
        headers=auth_headers,
        json={"name": "Paper towels", "amount": 2},
    )

    response = client.post("/api/v1/planner/reload", headers=auth_headers)
    assert response.status_code == 200

    grocery = get_list(client, auth_headers)
    assert item_named(grocery, "Garlic")["checked"] is True
    towels = item_named(grocery, "Paper towels")
    assert towels["is_custom"] is True
    assert towels["amount"] == 2


def test_add_custom_item(client, auth_headers):
    """Test adding an item by hand with defaults."""
    response = client.post("/api/v1/grocery-list/items", headers=auth_headers, json={})
    assert response.status_code == 201
    item = response.json()["item"]
    assert item["name"] == "Custom Item"
    assert item["amount"] == 1
    assert item["unit"] == "piece"
    assert item["category"] == "other"
    assert item["is_custom"] is True
    assert item["checked"] is False


def test_add_duplicate_custom_item(client, auth_headers, planned):
    """Test that an item with the same name and unit cannot be added twice."""
    response = client.post(
        "/api/v1/grocery-list/items",
        headers=auth_headers,
        json={"name": "garlic", "unit": "cloves"},
    )
    assert response.status_code == 409

    response = client.post(
        "/api/v1/grocery-list/items",
        headers=auth_headers,
        json={"name": "garlic", "unit": "g"},
    )
    assert response.status_code == 201


def test_remove_item(client, auth_headers, planned):
    """Test removing an item from the list."""
    pasta = item_named(get_list(client, auth_headers), "Pasta")

    response = client.delete(f"/api/v1/grocery-list/items/{pasta['id']}", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["outcome"]["status"] == "saved"
    assert [i["name"] for i in get_list(client, auth_headers)["items"]] == ["Garlic"]


def test_unknown_item(client, auth_headers):
    """Test that toggling or removing a missing item is a 404."""
    assert (
        client.post("/api/v1/grocery-list/items/nope/toggle", headers=auth_headers).status_code
        == 404
    )
    assert client.delete("/api/v1/grocery-list/items/nope", headers=auth_headers).status_code == 404


def test_clear_list(client, auth_headers, planned):
    """Test clearing the list; a reload derives it again from the plan."""
    garlic = item_named(get_list(client, auth_headers), "Garlic")
    client.post(f"/api/v1/grocery-list/items/{garlic['id']}/toggle", headers=auth_headers)

    response = client.delete("/api/v1/grocery-list", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["outcome"] == {"action": "clear_list", "status": "saved", "detail": None}
    assert get_list(client, auth_headers)["items"] == []

    client.post("/api/v1/planner/reload", headers=auth_headers)
    grocery = get_list(client, auth_headers)
    assert grocery["total_count"] == 2
    assert grocery["checked_count"] == 0


def test_grocery_requires_auth(client):
    """Test that the grocery list needs a token on the database backend."""
    assert client.get("/api/v1/grocery-list").status_code == 401
