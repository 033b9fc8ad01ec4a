"""Tests for the local fallback store and running without a database."""

import base64

import pytest

from meal_planner.schemas.ingredient import CatalogItem
from meal_planner.schemas.recipe import RecipeCreate
from meal_planner.services.data_backend import BackendNotConfiguredError, StorageQuotaExceededError
from meal_planner.services.local_store import (
    RECIPES_KEY,
    LocalBackend,
    LocalKeyValueStore,
)

from conftest import recipe_payload


def make_recipe(name="Toast", image="", **overrides) -> RecipeCreate:
    return RecipeCreate(
        **recipe_payload(name, [{"name": "Bread", "amount": 2, "unit": "slice"}], image=image, **overrides)
    )


def big_data_url(size: int) -> str:
    return "data:image/jpeg;base64," + base64.b64encode(b"x" * size).decode()


class TestLocalKeyValueStore:
    def test_set_and_get(self, tmp_path):
        store = LocalKeyValueStore(tmp_path, quota_bytes=100)
        assert store.get_item("k") is None
        store.set_item("k", "hello")
        assert store.get_item("k") == "hello"
        assert store.used_bytes() == 5

    def test_replacing_a_key_does_not_count_twice(self, tmp_path):
        store = LocalKeyValueStore(tmp_path, quota_bytes=10)
        store.set_item("k", "x" * 8)
        store.set_item("k", "y" * 9)
        assert store.get_item("k") == "y" * 9

    def test_quota_enforced(self, tmp_path):
        store = LocalKeyValueStore(tmp_path, quota_bytes=10)
        store.set_item("a", "x" * 6)
        with pytest.raises(StorageQuotaExceededError):
            store.set_item("b", "x" * 6)
        assert store.get_item("b") is None

    def test_remove_item(self, tmp_path):
        store = LocalKeyValueStore(tmp_path, quota_bytes=10)
        store.set_item("a", "x")
        store.remove_item("a")
        store.remove_item("a")
        assert store.get_item("a") is None


class TestLocalBackendRecipes:
    def test_samples_listed_with_stored_recipes(self, local_backend):
        local_backend.create_recipe(make_recipe("Avocado Toast"), None)

        names = [r.name for r in local_backend.list_recipes()]
        assert names == [
            "Avocado Toast",
            "Chicken Stir-Fry",
            "Grilled Salmon with Roasted Vegetables",
            "Pasta Primavera",
        ]

    def test_replace_stored_recipe(self, local_backend):
        created = local_backend.create_recipe(make_recipe("Toast"), None)

        replaced = local_backend.replace_recipe(created.id, make_recipe("French Toast"), None)

        assert replaced.id == created.id
        assert [r.name for r in local_backend.get_stored_recipes()] == ["French Toast"]

    def test_samples_are_read_only(self, local_backend):
        assert local_backend.replace_recipe("1", make_recipe("Not Salmon"), None) is None
        assert local_backend.get_recipe("1").name == "Grilled Salmon with Roasted Vegetables"

    def test_corrupt_blob_reads_as_empty(self, local_backend):
        local_backend.store.set_item(RECIPES_KEY, "{not json")
        assert local_backend.get_stored_recipes() == []
        assert len(local_backend.list_recipes()) == 3

    def test_quota_retry_drops_embedded_image(self, tmp_path):
        backend = LocalBackend(LocalKeyValueStore(tmp_path, quota_bytes=4000))

        saved = backend.create_recipe(make_recipe(image=big_data_url(6000)), None)

        assert saved.image == ""
        assert backend.get_stored_recipes()[0].image == ""

    def test_quota_retry_keeps_linked_image(self, tmp_path):
        backend = LocalBackend(LocalKeyValueStore(tmp_path, quota_bytes=4000))

        saved = backend.create_recipe(make_recipe(image="https://example.com/toast.jpg"), None)

        assert saved.image == "https://example.com/toast.jpg"

    def test_quota_error_when_retry_also_fails(self, tmp_path):
        backend = LocalBackend(LocalKeyValueStore(tmp_path, quota_bytes=50))

        with pytest.raises(StorageQuotaExceededError):
            backend.create_recipe(make_recipe(image=big_data_url(6000)), None)
        assert backend.get_stored_recipes() == []

    def test_quota_error_without_image(self, tmp_path):
        backend = LocalBackend(LocalKeyValueStore(tmp_path, quota_bytes=50))

        with pytest.raises(StorageQuotaExceededError):
            backend.create_recipe(make_recipe(), None)


class TestLocalBackendCatalog:
    def test_upsert_matches_lowercased_name(self, local_backend):
        local_backend.upsert_catalog_items([CatalogItem(name="Garlic", default_unit="cloves")])
        local_backend.upsert_catalog_items(
            [CatalogItem(name="GARLIC", default_unit="g", category="spice")]
        )

        catalog = local_backend.list_catalog()
        assert len(catalog) == 1
        assert catalog[0].default_unit == "g"
        assert catalog[0].category == "spice"


class TestLocalBackendUserData:
    def test_user_scoped_data_not_configured(self, local_backend):
        assert local_backend.is_configured is False
        with pytest.raises(BackendNotConfiguredError):
            local_backend.fetch_meal_plans(0)
        with pytest.raises(BackendNotConfiguredError):
            local_backend.fetch_grocery_list(0)
        with pytest.raises(BackendNotConfiguredError):
            local_backend.upsert_packaging_options([])
        assert local_backend.list_packaging("Pasta") == []


class TestLocalMode:
    """Running the API without a configured database."""

    def test_sample_recipes_browsable(self, local_client):
        response = local_client.get("/api/v1/recipes")
        assert response.status_code == 200
        assert [r["id"] for r in response.json()] == ["3", "1", "2"]

    def test_create_recipe_anonymously(self, local_client):
        response = local_client.post(
            "/api/v1/recipes",
            json=recipe_payload("Avocado Toast", [{"name": "Avocado", "amount": 1, "unit": "piece"}]),
        )
        assert response.status_code == 201
        recipe = response.json()
        assert recipe["user_id"] is None

        assert local_client.get(f"/api/v1/recipes/{recipe['id']}").json()["name"] == "Avocado Toast"
        assert local_client.get("/api/v1/ingredients").json()[0]["name"] == "Avocado"

    def test_sample_recipe_cannot_be_replaced(self, local_client):
        response = local_client.put(
            "/api/v1/recipes/1",
            json=recipe_payload("Not Salmon", [{"name": "Tofu"}]),
        )
        assert response.status_code == 404
        assert local_client.get("/api/v1/ingredients").json() == []

    def test_planner_works_in_memory(self, local_client):
        response = local_client.put(
            "/api/v1/planner/slots/2026-03-02/dinner", json={"recipe_id": "1"}
        )
        assert response.status_code == 200
        assert response.json()["outcome"]["status"] == "skipped"

        grocery = local_client.get("/api/v1/grocery-list").json()
        assert grocery["total_count"] == 7

        broccoli = next(i for i in grocery["items"] if i["name"] == "Broccoli")
        response = local_client.post(f"/api/v1/grocery-list/items/{broccoli['id']}/toggle")
        assert response.json()["item"]["checked"] is True
        assert response.json()["outcome"]["status"] == "skipped"

        # Reloading keeps the in-memory plan
        local_client.post("/api/v1/planner/reload")
        slot = local_client.get("/api/v1/planner/slots/2026-03-02/dinner").json()
        assert slot["recipe"]["id"] == "1"

    def test_packaging_writes_unavailable(self, local_client):
        response = local_client.post(
            "/api/v1/ingredients/packaging",
            json=[{"ingredient_name": "Pasta", "unit": "g", "pack_amount": 500}],
        )
        assert response.status_code == 503

    def test_quota_exceeded_reported(self, tmp_path, local_client, local_backend):
        local_backend.store.quota_bytes = 10
        response = local_client.post(
            "/api/v1/recipes",
            json=recipe_payload("Avocado Toast", [{"name": "Avocado", "amount": 1}]),
        )
        assert response.status_code == 507
