"""Tests for the per-user planner session."""

import threading
from datetime import date
from unittest.mock import MagicMock

import pytest

from meal_planner.models.enums import MealType
from meal_planner.schemas.grocery import CustomItemCreate, PersistedGroceryRow
from meal_planner.schemas.planner import MealSlot, PersistStatus
from meal_planner.services.data_backend import BackendError, DataBackend
from meal_planner.services.planner import (
    DuplicateGroceryItemError,
    PlannerRegistry,
    PlannerSession,
)
from meal_planner.services.sample_recipes import SAMPLE_RECIPES

SALMON, PASTA, STIR_FRY = SAMPLE_RECIPES
MONDAY = date(2026, 3, 2)
TUESDAY = date(2026, 3, 3)


@pytest.fixture
def backend():
    """Database-like backend with no stored data."""
    mock = MagicMock(spec=DataBackend)
    mock.is_configured = True
    mock.fetch_meal_plans.return_value = []
    mock.fetch_grocery_list.return_value = []
    return mock


@pytest.fixture
def session(backend):
    planner = PlannerSession(user_id=7)
    planner.load(backend)
    return planner


def item_named(session: PlannerSession, name: str):
    return next(item for item in session.grocery_items if item.name == name)


class TestSlots:
    """Tests for slot assignment."""

    def test_assign_then_remove_leaves_slot_empty(self, session, backend):
        session.assign(backend, MONDAY, MealType.DINNER, SALMON)
        assert session.slot(MONDAY, MealType.DINNER).recipe == SALMON

        session.remove(backend, MONDAY, MealType.DINNER)

        assert session.slot(MONDAY, MealType.DINNER).recipe is None
        assert session.planned_recipes() == []
        assert session.grocery_items == []

    def test_reassign_overwrites(self, session, backend):
        session.assign(backend, MONDAY, MealType.DINNER, SALMON)
        session.assign(backend, MONDAY, MealType.DINNER, PASTA)

        assert session.planned_recipes() == [PASTA]
        assert len(session.slots) == 1

    def test_remove_empty_slot_is_noop(self, session, backend):
        outcome = session.remove(backend, MONDAY, MealType.LUNCH)
        assert outcome.status == PersistStatus.SAVED
        assert session.slots == {}

    def test_assign_persists_and_reports_saved(self, session, backend):
        outcome = session.assign(backend, MONDAY, MealType.LUNCH, PASTA)

        assert outcome.ok
        backend.upsert_meal_plan.assert_called_once_with(7, MONDAY, MealType.LUNCH, PASTA.id)

    def test_failed_write_keeps_local_state(self, session, backend):
        backend.upsert_meal_plan.side_effect = BackendError("connection reset")

        outcome = session.assign(backend, MONDAY, MealType.LUNCH, PASTA)

        assert outcome.status == PersistStatus.FAILED
        assert "connection reset" in outcome.detail
        assert session.slot(MONDAY, MealType.LUNCH).recipe == PASTA

    def test_planned_recipes_ordered_by_date_then_meal(self, session, backend):
        session.assign(backend, TUESDAY, MealType.BREAKFAST, STIR_FRY)
        session.assign(backend, MONDAY, MealType.DINNER, SALMON)
        session.assign(backend, MONDAY, MealType.BREAKFAST, PASTA)

        assert session.planned_recipes() == [PASTA, SALMON, STIR_FRY]

    def test_week_has_seven_days_of_three_meals(self, session, backend):
        session.assign(backend, TUESDAY, MealType.LUNCH, PASTA)

        days = session.week(MONDAY, today=TUESDAY)

        assert len(days) == 7
        assert [slot.meal for slot in days[0].slots] == list(MealType)
        assert days[0].weekday == "Mon"
        assert days[1].is_today is True
        assert days[1].slots[1].recipe == PASTA

    def test_load_restores_slots(self, backend):
        backend.fetch_meal_plans.return_value = [
            MealSlot(date=MONDAY, meal=MealType.DINNER, recipe=SALMON),
            MealSlot(date=TUESDAY, meal=MealType.LUNCH, recipe=None),
        ]
        planner = PlannerSession(user_id=7)
        planner.load(backend)

        assert planner.planned_recipes() == [SALMON]
        assert item_named(planner, "Salmon fillet").amount == 2

    def test_load_failure_starts_empty(self, backend):
        backend.fetch_meal_plans.side_effect = BackendError("timeout")
        planner = PlannerSession(user_id=7)
        planner.load(backend)

        assert planner.loaded is True
        assert planner.slots == {}


class TestGroceryList:
    """Tests for the grocery list kept by the session."""

    def test_recomputed_on_plan_change(self, session, backend):
        session.assign(backend, MONDAY, MealType.DINNER, SALMON)
        session.assign(backend, TUESDAY, MealType.DINNER, PASTA)

        garlic = item_named(session, "Garlic")
        assert garlic.amount == 5
        assert garlic.unit == "cloves"

    def test_checked_state_survives_recompute(self, session, backend):
        backend.fetch_grocery_list.return_value = [
            PersistedGroceryRow(
                id="row-1", user_id=7, ingredient_name="Salmon fillet", unit="pieces",
                amount=2, category="protein", checked=True,
            )
        ]
        session.assign(backend, MONDAY, MealType.DINNER, SALMON)
        session.assign(backend, TUESDAY, MealType.DINNER, SALMON)

        salmon = item_named(session, "Salmon fillet")
        assert salmon.amount == 4
        assert salmon.checked is True
        assert salmon.id == "row-1"

    def test_fetch_failure_falls_back_to_derived(self, session, backend):
        backend.fetch_grocery_list.side_effect = BackendError("offline")

        session.assign(backend, MONDAY, MealType.DINNER, SALMON)

        assert len(session.grocery_items) == len(SALMON.ingredients)
        assert not any(item.checked for item in session.grocery_items)

    def test_toggle_flips_and_persists(self, session, backend):
        session.assign(backend, MONDAY, MealType.DINNER, SALMON)
        lemon = item_named(session, "Lemon")

        item, outcome = session.toggle_item(backend, lemon.id)

        assert item.checked is True
        assert item_named(session, "Lemon").checked is True
        assert outcome.ok
        saved_row = backend.upsert_grocery_item.call_args.args[0]
        assert saved_row.ingredient_name == "Lemon"
        assert saved_row.checked is True
        assert saved_row.is_custom is False

    def test_toggle_keeps_custom_flag(self, session, backend):
        item, _ = session.add_custom_item(backend, CustomItemCreate(name="Paper towels"))

        session.toggle_item(backend, item.id)

        saved_row = backend.upsert_grocery_item.call_args.args[0]
        assert saved_row.is_custom is True
        assert saved_row.checked is True

    def test_toggle_unknown_item(self, session, backend):
        assert session.toggle_item(backend, "missing") is None

    def test_add_custom_item_defaults(self, session, backend):
        item, outcome = session.add_custom_item(backend, CustomItemCreate())

        assert (item.name, item.amount, item.unit, item.category) == (
            "Custom Item", 1, "piece", "other",
        )
        assert item.is_custom is True
        assert outcome.ok
        assert backend.upsert_grocery_item.call_args.args[0].is_custom is True

    def test_add_duplicate_custom_item_rejected(self, session, backend):
        session.assign(backend, MONDAY, MealType.DINNER, SALMON)

        with pytest.raises(DuplicateGroceryItemError):
            session.add_custom_item(
                backend, CustomItemCreate(name="lemon", amount=3, unit="piece")
            )

    def test_remove_item_deletes_row(self, session, backend):
        session.assign(backend, MONDAY, MealType.DINNER, SALMON)
        broccoli = item_named(session, "Broccoli")

        outcome = session.remove_item(backend, broccoli.id)

        assert outcome.ok
        assert all(item.name != "Broccoli" for item in session.grocery_items)
        backend.delete_grocery_item.assert_called_once_with(7, "Broccoli", "g")

    def test_clear_list(self, session, backend):
        session.assign(backend, MONDAY, MealType.DINNER, SALMON)

        outcome = session.clear_grocery(backend)

        assert outcome.ok
        assert session.grocery_items == []
        backend.clear_grocery_list.assert_called_once_with(7)


class TestLocalSession:
    """Session behaviour on the local fallback store."""

    def test_changes_are_kept_in_memory_only(self, local_backend):
        planner = PlannerSession(user_id=0)
        planner.load(local_backend)

        outcome = planner.assign(local_backend, MONDAY, MealType.DINNER, STIR_FRY)

        assert outcome.status == PersistStatus.SKIPPED
        assert planner.planned_recipes() == [STIR_FRY]
        assert len(planner.grocery_items) == len(STIR_FRY.ingredients)

    def test_reload_keeps_in_memory_plan(self, local_backend):
        planner = PlannerSession(user_id=0)
        planner.assign(local_backend, MONDAY, MealType.DINNER, STIR_FRY)

        planner.load(local_backend)

        assert planner.planned_recipes() == [STIR_FRY]


def test_registry_reuses_and_discards_sessions():
    registry = PlannerRegistry()
    first = registry.get(1)

    assert registry.get(1) is first
    assert registry.get(2) is not first

    registry.discard(1)
    assert registry.get(1) is not first


def test_registry_drops_least_recently_used_session():
    registry = PlannerRegistry(max_sessions=2)
    first = registry.get(1)
    registry.get(2)
    registry.get(1)

    registry.get(3)

    assert len(registry) == 2
    assert registry.get(1) is first
    assert len(registry) == 2


class TestSessionLocking:
    """Changes to one session are serialized."""

    def test_changes_hold_the_session_lock(self, session, backend):
        acquired = []

        def try_lock_from_other_thread(*args):
            other = threading.Thread(
                target=lambda: acquired.append(session.lock.acquire(blocking=False))
            )
            other.start()
            other.join()

        backend.upsert_grocery_item.side_effect = try_lock_from_other_thread

        session.add_custom_item(backend, CustomItemCreate())

        assert acquired == [False]

    def test_concurrent_changes_are_all_applied(self, session, backend):
        session.assign(backend, MONDAY, MealType.DINNER, SALMON)
        items = list(session.grocery_items)

        def toggle(item_id):
            session.toggle_item(backend, item_id)

        threads = [threading.Thread(target=toggle, args=(item.id,)) for item in items]
        threads += [
            threading.Thread(
                target=session.add_custom_item, args=(backend, CustomItemCreate(name=f"Extra {n}"))
            )
            for n in range(10)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert all(session.find_item(item.id).checked for item in items)
        assert len(session.grocery_items) == len(items) + 10
