"""
Catalog backing sources.

Each source fetches exercises from one kind of backend and normalizes the
backend's shape into the common raw record dict
(id, name, description, base_weight_factor, muscle_involvement).
Validation happens afterwards, in the resolver, so it is shared by all
sources.

Sources:
  RpcCatalogSource         stored procedure returning denormalized rows
  RelationalCatalogSource  exercises table + involvement join table, merged here
  ManifestCatalogSource    manifest.json pointing at split static JSON files
"""

from __future__ import annotations

import asyncio
import warnings
from collections.abc import Mapping
from typing import Any, Protocol

from .errors import CatalogIntegrityError, ManifestError
from .validation import coerce_number, parse_muscle_involvement

RawRecord = dict[str, Any]

META_FILE_KEY = "exercises_meta"
TRAINING_FILE_KEY = "exercises_training_data"


class PostgrestClient(Protocol):
    """Subset of a PostgREST client the catalog sources need."""

    async def rpc(self, function: str, params: Mapping[str, Any] | None = None) -> list[Any]: ...

    async def select(self, table: str, columns: str) -> list[Any]: ...


class JsonFetcher(Protocol):
    """Fetches a JSON document by path relative to some base location."""

    async def get_json(self, path: str) -> Any: ...


class CatalogSource(Protocol):
    """One backend able to produce raw exercise records."""

    name: str

    async def fetch(self) -> list[RawRecord]: ...


def _as_rows(data: Any) -> list[Any]:
    return data if isinstance(data, list) else []


def _record(row: Mapping[str, Any], involvement: Any) -> RawRecord:
    return {
        "id": row.get("id"),
        "name": row.get("name"),
        "description": row.get("description"),
        "base_weight_factor": coerce_number(row.get("base_weight_factor"), finite_only=False),
        "muscle_involvement": involvement,
    }


# =============================================================================
# RPC
# =============================================================================


class RpcCatalogSource:
    """
    Catalog from a secured stored procedure.

    Rows: {id, name, description, base_weight_factor, muscle_involvement}
    where muscle_involvement is a JSON object of muscle -> score.
    """

    name = "rpc"

    def __init__(self, client: PostgrestClient, function_name: str):
        self.client = client
        self.function_name = function_name

    async def fetch(self) -> list[RawRecord]:
        rows = _as_rows(await self.client.rpc(self.function_name))
        return [
            _record(row, parse_muscle_involvement(row.get("muscle_involvement")))
            for row in rows
            if isinstance(row, Mapping)
        ]


# =============================================================================
# RELATIONAL JOIN
# =============================================================================


def _muscle_name(row: Mapping[str, Any]) -> str | None:
    """Name from an embedded muscle relation (object or one-element list)."""
    embedded = row.get("muscle", row.get("muscles"))
    if isinstance(embedded, list):
        embedded = embedded[0] if embedded else None
    if isinstance(embedded, Mapping):
        name = embedded.get("name")
        return name if isinstance(name, str) and name else None
    return None


class RelationalCatalogSource:
    """
    Catalog merged from two table reads.

    The exercises table and the exercise<->muscle involvement table are read
    concurrently and joined on exercise_id.  If the involvement read returns
    no rows the source fails closed and returns nothing: an empty relation
    cannot be told apart from a read that row-level security filtered out.
    """

    name = "relational"

    EXERCISE_COLUMNS = "id,name,description,base_weight_factor"
    INVOLVEMENT_COLUMNS = "exercise_id,involvement,muscle:muscles(name)"

    def __init__(
        self,
        client: PostgrestClient,
        exercises_table: str = "exercises",
        involvement_table: str = "exercise_muscles",
    ):
        self.client = client
        self.exercises_table = exercises_table
        self.involvement_table = involvement_table

    async def fetch(self) -> list[RawRecord]:
        exercise_rows, involvement_rows = await asyncio.gather(
            self.client.select(self.exercises_table, self.EXERCISE_COLUMNS),
            self.client.select(self.involvement_table, self.INVOLVEMENT_COLUMNS),
        )
        exercise_rows = _as_rows(exercise_rows)
        involvement_rows = _as_rows(involvement_rows)

        if not involvement_rows:
            warnings.warn(
                f"ideal-weight: '{self.involvement_table}' returned no rows "
                "(no data or restricted access); refusing to build a catalog "
                "without muscle involvement.",
                stacklevel=2,
            )
            return []

        by_exercise: dict[str, dict[str, float]] = {}
        for row in involvement_rows:
            if not isinstance(row, Mapping):
                continue
            muscle = _muscle_name(row)
            score = coerce_number(row.get("involvement"))
            exercise_id = row.get("exercise_id")
            if muscle is None or score is None or not isinstance(exercise_id, str):
                continue
            by_exercise.setdefault(exercise_id, {})[muscle] = score

        records: list[RawRecord] = []
        for row in exercise_rows:
            if not isinstance(row, Mapping):
                continue
            row_id = row.get("id")
            involvement = by_exercise.get(row_id, {}) if isinstance(row_id, str) else {}
            records.append(_record(row, dict(involvement)))
        return records


# =============================================================================
# MANIFEST + STATIC FILES
# =============================================================================


def _exercise_list(document: Any, label: str) -> list[Any]:
    """Accept either {"exercises": [...]} or a bare list."""
    if isinstance(document, list):
        return document
    if isinstance(document, Mapping) and isinstance(document.get("exercises"), list):
        return document["exercises"]
    raise ManifestError(f"{label} must be a list or an object with an 'exercises' list")


class ManifestCatalogSource:
    """
    Catalog from versioned static files listed in a manifest.

    manifest.json maps logical dataset names to file paths:
        {"files": {"exercises_meta": "...", "exercises_training_data": "..."}}

    Metadata (id, name, description) and training data (id,
    baseWeightFactor, muscleInvolvement) are fetched concurrently and
    inner-joined by id.  A metadata entry without training data fails the
    whole load; metadata entries without a string id are skipped.
    """

    name = "manifest"

    def __init__(self, fetcher: JsonFetcher, manifest_path: str = "manifest.json"):
        self.fetcher = fetcher
        self.manifest_path = manifest_path

    async def resolve_files(self) -> tuple[str, str]:
        """Return (meta_path, training_path) from the manifest."""
        manifest = await self.fetcher.get_json(self.manifest_path)
        files = manifest.get("files") if isinstance(manifest, Mapping) else None
        if not isinstance(files, Mapping):
            raise ManifestError(f"{self.manifest_path} has no 'files' mapping")

        meta_path = files.get(META_FILE_KEY)
        training_path = files.get(TRAINING_FILE_KEY)
        if not isinstance(meta_path, str) or not isinstance(training_path, str):
            raise ManifestError(
                f"Manifest is missing required exercise files "
                f"({META_FILE_KEY} or {TRAINING_FILE_KEY})"
            )
        return meta_path, training_path

    async def fetch(self) -> list[RawRecord]:
        meta_path, training_path = await self.resolve_files()
        meta_doc, training_doc = await asyncio.gather(
            self.fetcher.get_json(meta_path),
            self.fetcher.get_json(training_path),
        )
        meta_list = _exercise_list(meta_doc, meta_path)
        training_list = _exercise_list(training_doc, training_path)

        training_by_id = {
            t["id"]: t
            for t in training_list
            if isinstance(t, Mapping) and isinstance(t.get("id"), str)
        }

        records: list[RawRecord] = []
        for meta in meta_list:
            # Entries without a string id are dropped
            if not isinstance(meta, Mapping) or not isinstance(meta.get("id"), str):
                continue
            training = training_by_id.get(meta.get("id"))
            if training is None:
                raise CatalogIntegrityError(
                    f"Missing training data for exercise id: {meta.get('id')}"
                )
            records.append(
                {
                    "id": meta.get("id"),
                    "name": meta.get("name"),
                    "description": meta.get("description"),
                    "base_weight_factor": training.get("baseWeightFactor"),
                    "muscle_involvement": parse_muscle_involvement(
                        training.get("muscleInvolvement")
                    ),
                }
            )
        return records
