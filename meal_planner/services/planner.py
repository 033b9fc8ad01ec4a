"""Per-user planner state: meal slots and the grocery list derived from them.

Every change is applied to the in-memory session first and then written to the
data backend on a best-effort basis. The write result is returned as a
PersistOutcome instead of being raised, so a failing backend never rolls back
or blocks what the user just did.
"""

import logging
import threading
from collections import OrderedDict
from collections.abc import Callable
from datetime import date, timedelta
from functools import wraps

from meal_planner.models.enums import MealType
from meal_planner.schemas.grocery import CustomItemCreate, GroceryItem, PersistedGroceryRow
from meal_planner.schemas.planner import MealSlot, PersistOutcome, PersistStatus, PlannerDay
from meal_planner.schemas.recipe import Ingredient, Recipe
from meal_planner.services.aggregation import (
    aggregate,
    derive_grocery_items,
    grocery_key,
    merge_grocery_state,
    new_item_id,
)
from meal_planner.services.data_backend import (
    BackendError,
    BackendNotConfiguredError,
    DataBackend,
)
from meal_planner.services.realtime import PlannerEventType, publish_user_event

logger = logging.getLogger(__name__)

# Owner of the planner when running on the local store (no accounts)
LOCAL_USER_ID = 0

PLANNER_DAYS = 7


class DuplicateGroceryItemError(ValueError):
    """An item with the same name and unit is already on the list."""


def _locked(method):
    """Run a session method while holding the session's lock."""

    @wraps(method)
    def wrapper(self, *args, **kwargs):
        with self.lock:
            return method(self, *args, **kwargs)

    return wrapper


class PlannerSession:
    """Meal slots and grocery items of one user."""

    def __init__(self, user_id: int):
        self.user_id = user_id
        self.slots: dict[tuple[date, MealType], Recipe] = {}
        self.grocery_items: list[GroceryItem] = []
        self.loaded = False
        self.lock = threading.RLock()

    # --- Persistence helpers ---

    def _persist(
        self,
        action: str,
        write: Callable[[], None],
        event: PlannerEventType | None = None,
    ) -> PersistOutcome:
        try:
            write()
        except BackendNotConfiguredError as e:
            logger.debug(f"{action} kept in memory only: {e}")
            return PersistOutcome(action=action, status=PersistStatus.SKIPPED, detail=str(e))
        except BackendError as e:
            logger.warning(f"{action} failed for user {self.user_id}: {e}")
            return PersistOutcome(action=action, status=PersistStatus.FAILED, detail=str(e))

        if event is not None:
            publish_user_event(self.user_id, event, {"action": action})
        return PersistOutcome(action=action, status=PersistStatus.SAVED)

    # --- Loading ---

    @_locked
    def load(self, backend: DataBackend) -> None:
        """(Re)read the user's meal plan and rebuild the grocery list."""
        try:
            rows = backend.fetch_meal_plans(self.user_id)
        except BackendNotConfiguredError:
            rows = None
        except BackendError as e:
            logger.warning(f"Could not load meal plan for user {self.user_id}: {e}")
            rows = None

        if rows is not None:
            self.slots = {(row.date, row.meal): row.recipe for row in rows if row.recipe}
        self.loaded = True
        self.refresh_grocery(backend)

    @_locked
    def ensure_loaded(self, backend: DataBackend) -> None:
        if not self.loaded:
            self.load(backend)

    # --- Meal slots ---

    def slot(self, day: date, meal: MealType) -> MealSlot:
        return MealSlot(date=day, meal=meal, recipe=self.slots.get((day, meal)))

    @_locked
    def assign(self, backend: DataBackend, day: date, meal: MealType, recipe: Recipe) -> PersistOutcome:
        """Put a recipe into a slot, replacing whatever was there."""
        self.slots[(day, meal)] = recipe
        outcome = self._persist(
            "assign_meal",
            lambda: backend.upsert_meal_plan(self.user_id, day, meal, recipe.id),
            PlannerEventType.MEAL_PLAN_UPDATED,
        )
        self.refresh_grocery(backend)
        return outcome

    @_locked
    def remove(self, backend: DataBackend, day: date, meal: MealType) -> PersistOutcome:
        """Empty a slot. Removing from an empty slot is a no-op."""
        removed = self.slots.pop((day, meal), None)
        outcome = self._persist(
            "remove_meal",
            lambda: backend.delete_meal_plan(self.user_id, day, meal),
            PlannerEventType.MEAL_PLAN_UPDATED,
        )
        if removed is not None:
            self.refresh_grocery(backend)
        return outcome

    def planned_recipes(self) -> list[Recipe]:
        """Recipes of all filled slots, by date then meal."""
        keys = sorted(self.slots, key=lambda key: (key[0], key[1].sort_index))
        return [self.slots[key] for key in keys]

    def total_ingredients(self) -> list[Ingredient]:
        return aggregate(self.planned_recipes())

    def week(self, start: date, today: date | None = None) -> list[PlannerDay]:
        today = today or date.today()
        days = []
        for offset in range(PLANNER_DAYS):
            day = start + timedelta(days=offset)
            days.append(
                PlannerDay(
                    date=day,
                    weekday=day.strftime("%a"),
                    day_num=day.day,
                    is_today=day == today,
                    slots=[self.slot(day, meal) for meal in MealType],
                )
            )
        return days

    # --- Grocery list ---

    @_locked
    def refresh_grocery(self, backend: DataBackend) -> None:
        """Recompute items from the planned recipes and overlay the saved checklist."""
        derived = derive_grocery_items(self.total_ingredients())
        try:
            persisted = backend.fetch_grocery_list(self.user_id)
        except BackendNotConfiguredError:
            self.grocery_items = derived
            return
        except BackendError as e:
            logger.warning(f"Using unmerged grocery list for user {self.user_id}: {e}")
            self.grocery_items = derived
            return
        self.grocery_items = merge_grocery_state(derived, persisted)

    def find_item(self, item_id: str) -> GroceryItem | None:
        for item in self.grocery_items:
            if item.id == item_id:
                return item
        return None

    def _replace_item(self, updated: GroceryItem) -> None:
        self.grocery_items = [
            updated if item.id == updated.id else item for item in self.grocery_items
        ]

    def _row(self, item: GroceryItem) -> PersistedGroceryRow:
        return PersistedGroceryRow(
            id=item.id,
            user_id=self.user_id,
            ingredient_name=item.name,
            amount=item.amount,
            unit=item.unit,
            category=item.category,
            checked=item.checked,
            is_custom=item.is_custom,
        )

    @_locked
    def toggle_item(
        self, backend: DataBackend, item_id: str
    ) -> tuple[GroceryItem, PersistOutcome] | None:
        """Flip an item's checked state. Returns None when the item is unknown."""
        item = self.find_item(item_id)
        if item is None:
            return None
        updated = item.model_copy(update={"checked": not item.checked})
        self._replace_item(updated)
        outcome = self._persist(
            "toggle_item",
            lambda: backend.upsert_grocery_item(self._row(updated)),
            PlannerEventType.GROCERY_LIST_UPDATED,
        )
        return updated, outcome

    @_locked
    def add_custom_item(
        self, backend: DataBackend, data: CustomItemCreate
    ) -> tuple[GroceryItem, PersistOutcome]:
        """Add an item that is not tied to any recipe.

        Raises:
            DuplicateGroceryItemError: if an item with the same name and unit exists
        """
        key = grocery_key(data.name, data.unit)
        if any(grocery_key(item.name, item.unit) == key for item in self.grocery_items):
            raise DuplicateGroceryItemError(f"{data.name} ({data.unit}) is already on the list")

        item = GroceryItem(id=new_item_id(), is_custom=True, **data.model_dump())
        self.grocery_items = [*self.grocery_items, item]
        outcome = self._persist(
            "add_custom_item",
            lambda: backend.upsert_grocery_item(self._row(item)),
            PlannerEventType.GROCERY_LIST_UPDATED,
        )
        return item, outcome

    @_locked
    def remove_item(self, backend: DataBackend, item_id: str) -> PersistOutcome | None:
        """Drop an item from the list. Returns None when the item is unknown."""
        item = self.find_item(item_id)
        if item is None:
            return None
        self.grocery_items = [i for i in self.grocery_items if i.id != item_id]
        return self._persist(
            "remove_item",
            lambda: backend.delete_grocery_item(self.user_id, item.name, item.unit),
            PlannerEventType.GROCERY_LIST_UPDATED,
        )

    @_locked
    def clear_grocery(self, backend: DataBackend) -> PersistOutcome:
        self.grocery_items = []
        return self._persist(
            "clear_list",
            lambda: backend.clear_grocery_list(self.user_id),
            PlannerEventType.GROCERY_LIST_UPDATED,
        )


class PlannerRegistry:
    """Owns one PlannerSession per user.

    Holds at most max_sessions sessions; the least recently used one is dropped
    first and simply re-fetched from the backend on its next access.
    """

    def __init__(self, max_sessions: int = 1000) -> None:
        self.max_sessions = max_sessions
        self._sessions: OrderedDict[int, PlannerSession] = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._sessions)

    def get(self, user_id: int) -> PlannerSession:
        with self._lock:
            session = self._sessions.get(user_id)
            if session is None:
                session = PlannerSession(user_id)
                self._sessions[user_id] = session
                while len(self._sessions) > self.max_sessions:
                    evicted, _ = self._sessions.popitem(last=False)
                    logger.debug(f"Evicted idle planner session of user {evicted}")
            else:
                self._sessions.move_to_end(user_id)
            return session

    def discard(self, user_id: int) -> None:
        """Forget a user's session so the next access re-fetches from the backend."""
        with self._lock:
            self._sessions.pop(user_id, None)
