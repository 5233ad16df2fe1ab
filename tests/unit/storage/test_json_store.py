"""Unit tests for JsonRecipeStore."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import orjson
import pytest

from recipe_catalog.schemas import RecipeCreate, RecipeUpdate
from recipe_catalog.storage import JsonRecipeStore, RecipeStorageError
from recipe_catalog.storage import json_store as json_store_module


if TYPE_CHECKING:
    from pathlib import Path


pytestmark = pytest.mark.unit


class _Clock:
    """Deterministic millisecond clock."""

    def __init__(self, start: int = 1_700_000_000_000) -> None:
        self.now = start

    def __call__(self) -> int:
        return self.now


def _read(path: Path) -> dict:
    return orjson.loads(path.read_bytes())


@pytest.fixture
def clock() -> _Clock:
    return _Clock()


@pytest.fixture
def clocked_store(data_file: Path, clock: _Clock) -> JsonRecipeStore:
    return JsonRecipeStore(data_file, app_name="Test Catalog", version="9.9.9", clock=clock)


class TestReads:
    """Tests for list, get and status."""

    async def test_missing_file_is_empty(self, store: JsonRecipeStore) -> None:
        """Should treat a missing file as an empty catalog."""
        assert await store.list() == []
        assert await store.get(1) is None
        assert await store.status() == "empty"

    async def test_list_newest_first(self, data_file: Path, store: JsonRecipeStore) -> None:
        """Should order by createdAt descending, keeping file order on ties."""
        data_file.parent.mkdir(parents=True)
        data_file.write_bytes(
            orjson.dumps(
                {
                    "recipes": [
                        {"id": 1, "title": "Old", "createdAt": 100},
                        {"id": 2, "title": "New", "createdAt": 300},
                        {"id": 3, "title": "Tie A", "createdAt": 200},
                        {"id": 4, "title": "Tie B", "createdAt": 200},
                    ]
                }
            )
        )

        recipes = await store.list()

        assert [r.title for r in recipes] == ["New", "Tie A", "Tie B", "Old"]
        assert await store.status() == "ok"

    async def test_reads_edits_made_outside_the_store(
        self, data_file: Path, store: JsonRecipeStore
    ) -> None:
        """Should re-read the file on every call."""
        await store.create(RecipeCreate(title="Soup"))
        document = _read(data_file)
        document["recipes"][0]["title"] = "Edited by hand"
        data_file.write_bytes(orjson.dumps(document))

        recipes = await store.list()

        assert recipes[0].title == "Edited by hand"

    @pytest.mark.parametrize("content", [b"not json", b'{"recipes": "nope"}', b"[]"])
    async def test_unreadable_file_reads_as_empty(
        self, data_file: Path, store: JsonRecipeStore, content: bytes
    ) -> None:
        """Should log and return nothing for corrupt documents."""
        data_file.parent.mkdir(parents=True)
        data_file.write_bytes(content)

        assert await store.list() == []
        assert await store.status() == "unreadable"

    async def test_off_type_fields_are_coerced(
        self, data_file: Path, store: JsonRecipeStore
    ) -> None:
        """Should keep every recipe when stored values have the wrong type."""
        data_file.parent.mkdir(parents=True)
        data_file.write_bytes(
            orjson.dumps(
                {
                    "recipes": [
                        {"id": 1, "title": "Soup", "createdAt": 100},
                        {
                            "id": 2,
                            "title": "Curry",
                            "createdAt": 200,
                            "caloriesPerServing": "350kcal",
                            "cookingTime": "30分",
                            "ingredients": "2 eggs",
                        },
                    ]
                }
            )
        )

        recipes = await store.list()

        assert [r.title for r in recipes] == ["Curry", "Soup"]
        assert recipes[0].calories_per_serving == 350.0
        assert recipes[0].cooking_time == 30
        assert recipes[0].ingredients == ["2 eggs"]
        assert await store.status() == "ok"

    async def test_invalid_records_are_kept_on_write(
        self, data_file: Path, clocked_store: JsonRecipeStore, clock: _Clock
    ) -> None:
        """Should hide records it cannot read but never drop them from the file."""
        no_created_at = {"id": clock.now + 50, "title": "No timestamp"}
        data_file.parent.mkdir(parents=True)
        data_file.write_bytes(
            orjson.dumps(
                {
                    "recipes": [
                        {"id": 1, "title": "Soup", "createdAt": 100},
                        no_created_at,
                        "not a recipe",
                    ]
                }
            )
        )

        assert [r.title for r in await clocked_store.list()] == ["Soup"]

        created = await clocked_store.create(RecipeCreate(title="New"))

        assert created.id == clock.now + 51
        stored = _read(data_file)["recipes"]
        assert no_created_at in stored
        assert "not a recipe" in stored
        assert [r.title for r in await clocked_store.list()] == ["New", "Soup"]
        assert list(data_file.parent.glob("*.unreadable-*")) == []


class TestCreate:
    """Tests for create."""

    async def test_assigns_id_and_created_at(
        self, clocked_store: JsonRecipeStore, data_file: Path, clock: _Clock
    ) -> None:
        """Should stamp the recipe with the clock and persist it."""
        recipe = await clocked_store.create(
            RecipeCreate.model_validate({"title": "Curry", "yield": "4 servings"})
        )

        assert recipe.id == clock.now
        assert recipe.created_at == clock.now
        stored = _read(data_file)["recipes"]
        assert len(stored) == 1
        assert stored[0]["title"] == "Curry"
        assert stored[0]["yield"] == "4 servings"
        assert await clocked_store.get(recipe.id) == recipe

    async def test_ids_unique_within_same_millisecond(
        self, clocked_store: JsonRecipeStore
    ) -> None:
        """Should bump past the highest id when the clock has not moved."""
        first = await clocked_store.create(RecipeCreate(title="A"))
        second = await clocked_store.create(RecipeCreate(title="B"))

        assert second.id == first.id + 1

    async def test_concurrent_creates_are_not_lost(
        self, clocked_store: JsonRecipeStore
    ) -> None:
        """Should serialize writers so every recipe is saved with a distinct id."""
        created = await asyncio.gather(
            *(clocked_store.create(RecipeCreate(title=f"Recipe {i}")) for i in range(10))
        )

        stored = await clocked_store.list()
        assert len(stored) == 10
        assert len({r.id for r in stored}) == 10
        assert {r.id for r in created} == {r.id for r in stored}

    async def test_pretty_printed_by_default(
        self, store: JsonRecipeStore, data_file: Path
    ) -> None:
        """Should write 2-space indented JSON."""
        await store.create(RecipeCreate(title="Soup"))

        assert data_file.read_text(encoding="utf-8").startswith('{\n  "recipes"')

    async def test_compact_output(self, data_file: Path) -> None:
        """Should write compact JSON when indent is 0."""
        store = JsonRecipeStore(data_file, indent=0)

        await store.create(RecipeCreate(title="Soup"))

        assert "\n" not in data_file.read_text(encoding="utf-8")

    async def test_non_ascii_written_verbatim(
        self, store: JsonRecipeStore, data_file: Path
    ) -> None:
        """Should keep UTF-8 text unescaped."""
        await store.create(RecipeCreate(title="肉じゃが"))

        assert "肉じゃが" in data_file.read_text(encoding="utf-8")

    async def test_unreadable_file_moved_aside(
        self, clocked_store: JsonRecipeStore, data_file: Path, clock: _Clock
    ) -> None:
        """Should keep a copy of a corrupt file before replacing it."""
        data_file.parent.mkdir(parents=True)
        data_file.write_bytes(b"{broken")

        await clocked_store.create(RecipeCreate(title="Soup"))

        backup = data_file.with_name(f"recipes.json.unreadable-{clock.now}")
        assert backup.read_bytes() == b"{broken"
        assert [r["title"] for r in _read(data_file)["recipes"]] == ["Soup"]


class TestUpdate:
    """Tests for update."""

    async def test_merges_supplied_fields(self, clocked_store: JsonRecipeStore) -> None:
        """Should replace only the fields sent."""
        recipe = await clocked_store.create(
            RecipeCreate(title="Soup", ingredients=["1 onion"], notes="old")
        )

        updated = await clocked_store.update(
            recipe.id, RecipeUpdate.model_validate({"notes": "new", "seasons": ["冬"]})
        )

        assert updated is not None
        assert updated.title == "Soup"
        assert updated.ingredients == ["1 onion"]
        assert updated.notes == "new"
        assert updated.seasons == ["冬"]
        assert await clocked_store.get(recipe.id) == updated

    async def test_lists_replaced_not_merged(self, clocked_store: JsonRecipeStore) -> None:
        """Should overwrite list fields wholesale."""
        recipe = await clocked_store.create(RecipeCreate(title="Soup", categories=["和食"]))

        updated = await clocked_store.update(recipe.id, RecipeUpdate(categories=[]))

        assert updated is not None
        assert updated.categories == []

    async def test_id_and_created_at_immutable(self, clocked_store: JsonRecipeStore) -> None:
        """Should ignore attempts to change the identity fields."""
        recipe = await clocked_store.create(RecipeCreate(title="Soup"))

        updated = await clocked_store.update(
            recipe.id, RecipeUpdate.model_validate({"id": 1, "createdAt": 1, "title": "Stew"})
        )

        assert updated is not None
        assert updated.id == recipe.id
        assert updated.created_at == recipe.created_at
        assert updated.title == "Stew"

    async def test_missing_recipe(self, store: JsonRecipeStore, data_file: Path) -> None:
        """Should return None and not create the file."""
        assert await store.update(42, RecipeUpdate(title="x")) is None
        assert not data_file.exists()

    async def test_unknown_fields_survive(self, data_file: Path, store: JsonRecipeStore) -> None:
        """Should keep fields and top-level keys it does not know about."""
        data_file.parent.mkdir(parents=True)
        data_file.write_bytes(
            orjson.dumps(
                {
                    "recipes": [{"id": 1, "title": "Soup", "createdAt": 1, "rating": 5}],
                    "appName": "Recipe Catalog",
                    "owner": "me",
                }
            )
        )

        await store.update(1, RecipeUpdate(title="Stew"))

        document = _read(data_file)
        assert document["recipes"][0] == {
            "id": 1,
            "title": "Stew",
            "createdAt": 1,
            "rating": 5,
        }
        assert document["owner"] == "me"
        assert document["appName"] == "Recipe Catalog"


class TestDelete:
    """Tests for delete."""

    async def test_removes_recipe(self, clocked_store: JsonRecipeStore) -> None:
        """Should drop the recipe from the file."""
        keep = await clocked_store.create(RecipeCreate(title="Keep"))
        drop = await clocked_store.create(RecipeCreate(title="Drop"))

        assert await clocked_store.delete(drop.id) is True
        assert [r.id for r in await clocked_store.list()] == [keep.id]

    async def test_missing_recipe(self, store: JsonRecipeStore) -> None:
        """Should report False when nothing was removed."""
        await store.create(RecipeCreate(title="Soup"))

        assert await store.delete(12345) is False


class TestExport:
    """Tests for export."""

    async def test_stamps_metadata(self, clocked_store: JsonRecipeStore) -> None:
        """Should add exportDate, version and appName."""
        await clocked_store.create(RecipeCreate(title="Soup"))

        database = await clocked_store.export()
        document = database.to_document()

        assert len(document["recipes"]) == 1
        assert document["version"] == "9.9.9"
        assert document["appName"] == "Test Catalog"
        assert document["exportDate"].endswith("Z")
        assert len(document["exportDate"]) == len("2024-01-01T00:00:00.000Z")


class TestWriteFailures:
    """Tests for atomic writes."""

    async def test_failed_write_leaves_previous_file(
        self,
        store: JsonRecipeStore,
        data_file: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Should raise and keep the old document and no temp files."""
        await store.create(RecipeCreate(title="Soup"))
        before = data_file.read_bytes()

        def _fail(*args: object, **kwargs: object) -> None:
            raise OSError("disk full")

        monkeypatch.setattr(json_store_module.os, "replace", _fail)

        with pytest.raises(RecipeStorageError, match="disk full"):
            await store.create(RecipeCreate(title="Stew"))

        monkeypatch.undo()
        assert data_file.read_bytes() == before
        assert sorted(p.name for p in data_file.parent.iterdir()) == ["recipes.json"]
