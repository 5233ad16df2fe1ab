"""JSON file recipe store.

The whole collection lives in one JSON document that is read in full at the
start of every operation and rewritten in full after every mutation. No data
is cached between calls, so edits made to the file by hand are picked up by
the next request.
"""

from __future__ import annotations

import asyncio
import os
import tempfile
import time
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any, NamedTuple

import orjson
from pydantic import ValidationError

from recipe_catalog.core.logging import get_logger
from recipe_catalog.schemas.recipe import Recipe, RecipeDatabase
from recipe_catalog.storage.exceptions import RecipeStorageError


if TYPE_CHECKING:
    from collections.abc import Callable

    from recipe_catalog.schemas.importing import ImportedRecipe
    from recipe_catalog.schemas.recipe import RecipeCreate, RecipeUpdate


logger = get_logger(__name__)

_IMMUTABLE_KEYS = ("id", "createdAt")


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


class _Snapshot(NamedTuple):
    database: RecipeDatabase
    unreadable: bool
    # Raw records that failed validation, written back unchanged
    invalid: tuple[Any, ...] = ()


def _split_records(records: list[Any]) -> tuple[list[Recipe], tuple[Any, ...]]:
    valid: list[Recipe] = []
    invalid: list[Any] = []
    for record in records:
        try:
            valid.append(Recipe.model_validate(record))
        except ValidationError:
            invalid.append(record)
    return valid, tuple(invalid)


def _raw_id(record: Any) -> int:
    value = record.get("id") if isinstance(record, dict) else None
    return value if isinstance(value, int) and not isinstance(value, bool) else 0


class JsonRecipeStore:
    """Recipe CRUD over a single JSON data file.

    Mutations are serialized through one ``asyncio.Lock`` per store, so
    concurrent requests in this process never lose each other's writes.
    Reads take no lock. Writes are atomic: the document is written to a
    temporary file next to the target and moved into place.

    Example:
        ```python
        store = JsonRecipeStore(Path("data/recipes.json"))
        recipe = await store.create(RecipeCreate(title="Miso soup"))
        await store.update(recipe.id, RecipeUpdate(notes="Use red miso"))
        ```
    """

    def __init__(
        self,
        data_file: Path | str,
        *,
        indent: int = 2,
        app_name: str = "Recipe Catalog",
        version: str = "1.0.0",
        clock: Callable[[], int] = _now_ms,
    ) -> None:
        """Initialize the store.

        Args:
            data_file: Path of the JSON document. Created on first write.
            indent: 2 for pretty-printed output, 0 for compact.
            app_name: Written into exports as ``appName``.
            version: Written into exports as ``version``.
            clock: Returns the current time in epoch milliseconds.
        """
        self.data_file = Path(data_file)
        self._dump_options = orjson.OPT_INDENT_2 if indent else 0
        self._app_name = app_name
        self._version = version
        self._clock = clock
        self._write_lock = asyncio.Lock()

    # =========================================================================
    # File I/O (runs in a worker thread)
    # =========================================================================

    def _read(self) -> _Snapshot:
        if not self.data_file.exists():
            return _Snapshot(RecipeDatabase(recipes=[]), unreadable=False)
        try:
            document = orjson.loads(self.data_file.read_bytes())
            records = document.get("recipes", []) if isinstance(document, dict) else None
            if not isinstance(records, list):
                msg = "expected an object with a recipes list"
                raise ValueError(msg)
            recipes, invalid = _split_records(records)
            database = RecipeDatabase.model_validate({**document, "recipes": recipes})
        except (OSError, ValueError) as e:
            logger.warning(
                "Data file unreadable, treating as empty",
                path=str(self.data_file),
                error=str(e)[:200],
            )
            return _Snapshot(RecipeDatabase(recipes=[]), unreadable=True)
        if invalid:
            logger.warning(
                "Skipping recipes that do not validate",
                path=str(self.data_file),
                count=len(invalid),
            )
        return _Snapshot(database, unreadable=False, invalid=invalid)

    def _write(
        self,
        database: RecipeDatabase,
        *,
        invalid: tuple[Any, ...],
        replace_unreadable: bool,
    ) -> None:
        document = database.to_document()
        document["recipes"].extend(invalid)
        payload = orjson.dumps(document, option=self._dump_options)
        directory = self.data_file.parent
        tmp_name: str | None = None
        try:
            directory.mkdir(parents=True, exist_ok=True)
            if replace_unreadable and self.data_file.exists():
                backup = self.data_file.with_name(
                    f"{self.data_file.name}.unreadable-{self._clock()}"
                )
                os.replace(self.data_file, backup)
                logger.warning("Moved unreadable data file aside", backup=str(backup))
            with tempfile.NamedTemporaryFile(
                "wb",
                dir=directory,
                prefix=f".{self.data_file.name}.",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(payload)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.replace(tmp_name, self.data_file)
        except OSError as e:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)
            logger.error("Failed to write data file", path=str(self.data_file), error=str(e))
            msg = f"Failed to write {self.data_file}: {e}"
            raise RecipeStorageError(msg) from e

    async def _load(self) -> _Snapshot:
        return await asyncio.to_thread(self._read)

    async def _save(self, snapshot: _Snapshot) -> None:
        await asyncio.to_thread(
            self._write,
            snapshot.database,
            invalid=snapshot.invalid,
            replace_unreadable=snapshot.unreadable,
        )

    # =========================================================================
    # Queries
    # =========================================================================

    async def list(self) -> list[Recipe]:
        """Return all recipes, newest first.

        Recipes sharing a creation time keep their file order.
        """
        snapshot = await self._load()
        return sorted(snapshot.database.recipes, key=lambda r: r.created_at, reverse=True)

    async def get(self, recipe_id: int) -> Recipe | None:
        """Return the recipe with ``recipe_id``, or None."""
        snapshot = await self._load()
        return next((r for r in snapshot.database.recipes if r.id == recipe_id), None)

    async def export(self) -> RecipeDatabase:
        """Return the whole database stamped with export metadata."""
        snapshot = await self._load()
        export_date = datetime.now(UTC).isoformat(timespec="milliseconds")
        return RecipeDatabase.model_validate(
            {
                **snapshot.database.to_document(),
                "exportDate": export_date.replace("+00:00", "Z"),
                "version": self._version,
                "appName": self._app_name,
            }
        )

    async def status(self) -> str:
        """Describe the data file for health checks: ok, empty or unreadable."""
        if not self.data_file.exists():
            return "empty"
        snapshot = await self._load()
        return "unreadable" if snapshot.unreadable else "ok"

    # =========================================================================
    # Mutations
    # =========================================================================

    async def create(self, fields: RecipeCreate | ImportedRecipe) -> Recipe:
        """Add a new recipe with a fresh id and creation time.

        Raises:
            RecipeStorageError: If the data file cannot be written.
        """
        async with self._write_lock:
            snapshot = await self._load()
            recipes = snapshot.database.recipes
            now = self._clock()
            # Epoch ms, bumped past the highest existing id
            taken = [r.id for r in recipes] + [_raw_id(record) for record in snapshot.invalid]
            new_id = max(now, max(taken, default=0) + 1)
            recipe = Recipe.model_validate(
                {**fields.model_dump(by_alias=True), "id": new_id, "createdAt": now}
            )
            recipes.append(recipe)
            await self._save(snapshot)

        logger.info("Recipe created", recipe_id=recipe.id, title=recipe.title)
        return recipe

    async def update(self, recipe_id: int, changes: RecipeUpdate) -> Recipe | None:
        """Replace the supplied fields of a recipe.

        Lists are replaced wholesale. ``id`` and ``createdAt`` never change.

        Returns:
            The updated recipe, or None if no recipe has ``recipe_id``.

        Raises:
            RecipeStorageError: If the data file cannot be written.
        """
        supplied = changes.changes()
        for key in _IMMUTABLE_KEYS:
            supplied.pop(key, None)

        async with self._write_lock:
            snapshot = await self._load()
            recipes = snapshot.database.recipes
            index = next((i for i, r in enumerate(recipes) if r.id == recipe_id), None)
            if index is None:
                return None
            updated = Recipe.model_validate({**recipes[index].to_document(), **supplied})
            recipes[index] = updated
            await self._save(snapshot)

        logger.info("Recipe updated", recipe_id=recipe_id, fields=sorted(supplied))
        return updated

    async def delete(self, recipe_id: int) -> bool:
        """Remove a recipe.

        Returns:
            True if a recipe was removed. The file is only rewritten then.

        Raises:
            RecipeStorageError: If the data file cannot be written.
        """
        async with self._write_lock:
            snapshot = await self._load()
            remaining = [r for r in snapshot.database.recipes if r.id != recipe_id]
            if len(remaining) == len(snapshot.database.recipes):
                return False
            snapshot.database.recipes = remaining
            await self._save(snapshot)

        logger.info("Recipe deleted", recipe_id=recipe_id)
        return True
