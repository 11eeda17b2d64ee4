"""
Tests for catalog validation, the three catalog sources and the resolver.

Backends are replaced with in-memory fakes; async code is driven with
asyncio.run so no async test plugin is needed.
"""

import asyncio
import math
import warnings

import pytest

from ideal_weight.catalog.errors import (
    CatalogError,
    CatalogIntegrityError,
    ManifestError,
    NoExercisesAvailableError,
    TransportError,
    UnknownExerciseError,
)
from ideal_weight.catalog.resolver import (
    CatalogResolver,
    build_resolver,
    find_exercise,
    resolve_exercise_catalog,
)
from ideal_weight.catalog.sources import (
    ManifestCatalogSource,
    RelationalCatalogSource,
    RpcCatalogSource,
)
from ideal_weight.catalog.validation import (
    coerce_number,
    parse_muscle_involvement,
    validate_exercise_data,
)

# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------


class FakePostgrest:
    """In-memory stand-in for SupabaseRestClient."""

    def __init__(self, rpc_rows=None, tables=None, error=None):
        self.rpc_rows = rpc_rows if rpc_rows is not None else []
        self.tables = tables or {}
        self.error = error
        self.calls: list[tuple[str, str]] = []

    async def rpc(self, function, params=None):
        self.calls.append(("rpc", function))
        if self.error is not None:
            raise self.error
        return self.rpc_rows

    async def select(self, table, columns):
        self.calls.append(("select", table))
        if self.error is not None:
            raise self.error
        return self.tables.get(table, [])


class FakeFetcher:
    """In-memory stand-in for the JSON fetchers: path → document."""

    def __init__(self, documents):
        self.documents = documents
        self.requested: list[str] = []

    async def get_json(self, path):
        self.requested.append(path)
        if path not in self.documents:
            raise FileNotFoundError(path)
        return self.documents[path]


class StaticSource:
    """Source returning fixed records (or raising)."""

    def __init__(self, name, records=None, error=None):
        self.name = name
        self.records = records or []
        self.error = error
        self.fetched = 0

    async def fetch(self):
        self.fetched += 1
        if self.error is not None:
            raise self.error
        return self.records


def _raw(id_="bench-press", **overrides):
    record = {
        "id": id_,
        "name": "Bench Press",
        "description": "Flat bench",
        "base_weight_factor": 1.0,
        "muscle_involvement": {"Chest": 70},
    }
    record.update(overrides)
    return record


def _rpc_row(id_="bench-press", involvement=None, **overrides):
    row = {
        "id": id_,
        "name": id_.replace("-", " ").title(),
        "description": "",
        "base_weight_factor": 1.0,
        "muscle_involvement": involvement if involvement is not None else {"Chest": 70},
    }
    row.update(overrides)
    return row


def _manifest_docs(meta, training, files=None):
    return {
        "manifest.json": {
            "version": 1,
            "files": files
            or {
                "exercises_meta": "v1/meta.json",
                "exercises_training_data": "v1/training.json",
            },
        },
        "v1/meta.json": meta,
        "v1/training.json": training,
    }


# ===========================================================================
# validation.py
# ===========================================================================

class TestValidateExerciseData:

    def test_keeps_valid_subset_in_order(self):
        records = [
            _raw("a"),
            _raw("b", name=None),
            _raw("c", base_weight_factor="1.2"),
            _raw("d"),
            _raw("e", muscle_involvement=None),
            "not a record",
            None,
            _raw("f", description=3),
            _raw("g", base_weight_factor=True),
            _raw("h", muscle_involvement=[1, 2]),
            _raw("i", base_weight_factor=2),
        ]
        result = validate_exercise_data(records)
        assert [e.id for e in result] == ["a", "d", "i"]
        assert result[2].base_weight_factor == 2.0

    def test_missing_keys_dropped(self):
        record = _raw()
        del record["description"]
        assert validate_exercise_data([record]) == []

    def test_empty_involvement_map_is_valid(self):
        result = validate_exercise_data([_raw(muscle_involvement={})])
        assert len(result) == 1
        assert dict(result[0].muscle_involvement) == {}

    def test_empty_input(self):
        assert validate_exercise_data([]) == []


class TestInvolvementParsing:

    def test_drops_non_numeric_and_non_finite(self):
        doc = {
            "Chest": 70,
            "Triceps": "45",
            "Shoulders": "lots",
            "Core": None,
            "Lats": math.nan,
            "Traps": math.inf,
            "Calves": True,
            "Abs": [1],
            "Forearms": 12.5,
        }
        assert parse_muscle_involvement(doc) == {"Chest": 70.0, "Triceps": 45.0, "Forearms": 12.5}

    def test_json_text_is_decoded(self):
        assert parse_muscle_involvement('{"Chest": 70}') == {"Chest": 70.0}

    @pytest.mark.parametrize("raw", [None, "not json", "[1, 2]", 42, [("Chest", 1)]])
    def test_unusable_document_is_none(self, raw):
        assert parse_muscle_involvement(raw) is None

    def test_coerce_number(self):
        assert coerce_number(" 1.5 ") == 1.5
        assert coerce_number("nan") is None
        assert coerce_number("nan", finite_only=False) is not None
        assert coerce_number(False) is None
        assert coerce_number({}) is None


# ===========================================================================
# sources.py: RPC
# ===========================================================================

class TestRpcSource:

    def test_normalizes_rows(self):
        client = FakePostgrest(rpc_rows=[
            _rpc_row("squat", {"Quads": "80", "Glutes": 65, "bad": "x"}, base_weight_factor="1.35"),
        ])
        records = asyncio.run(RpcCatalogSource(client, "get_exercise_catalog").fetch())
        assert client.calls == [("rpc", "get_exercise_catalog")]
        assert records == [{
            "id": "squat",
            "name": "Squat",
            "description": "",
            "base_weight_factor": 1.35,
            "muscle_involvement": {"Quads": 80.0, "Glutes": 65.0},
        }]

    def test_non_list_payload_gives_no_records(self):
        client = FakePostgrest(rpc_rows={"message": "unexpected"})
        assert asyncio.run(RpcCatalogSource(client, "fn").fetch()) == []

    def test_row_with_unusable_involvement_fails_validation(self):
        client = FakePostgrest(rpc_rows=[_rpc_row("a"), _rpc_row("b", involvement="oops")])
        records = asyncio.run(RpcCatalogSource(client, "fn").fetch())
        assert [e.id for e in validate_exercise_data(records)] == ["a"]


# ===========================================================================
# sources.py: relational join
# ===========================================================================

class TestRelationalSource:

    TABLES = {
        "exercises": [
            {"id": "bench", "name": "Bench", "description": "", "base_weight_factor": 1.0},
            {"id": "curl", "name": "Curl", "description": "", "base_weight_factor": 0.35},
        ],
        "exercise_muscles": [
            {"exercise_id": "bench", "involvement": 70, "muscle": {"name": "Chest"}},
            {"exercise_id": "bench", "involvement": 45, "muscle": {"name": "Triceps"}},
            {"exercise_id": "curl", "involvement": "85", "muscles": [{"name": "Biceps"}]},
            {"exercise_id": "curl", "involvement": 10, "muscle": None},
            {"exercise_id": "ghost", "involvement": 50, "muscle": {"name": "Calves"}},
        ],
    }

    def test_merges_involvement_by_exercise_id(self):
        client = FakePostgrest(tables=self.TABLES)
        records = asyncio.run(RelationalCatalogSource(client).fetch())
        by_id = {r["id"]: r for r in records}
        assert list(by_id) == ["bench", "curl"]
        assert by_id["bench"]["muscle_involvement"] == {"Chest": 70.0, "Triceps": 45.0}
        assert by_id["curl"]["muscle_involvement"] == {"Biceps": 85.0}

    def test_reads_both_tables(self):
        client = FakePostgrest(tables=self.TABLES)
        asyncio.run(RelationalCatalogSource(client).fetch())
        assert sorted(client.calls) == [("select", "exercise_muscles"), ("select", "exercises")]

    def test_fails_closed_on_empty_involvement(self):
        tables = {"exercises": self.TABLES["exercises"], "exercise_muscles": []}
        client = FakePostgrest(tables=tables)
        with pytest.warns(UserWarning, match="exercise_muscles"):
            records = asyncio.run(RelationalCatalogSource(client).fetch())
        assert records == []

    def test_unhashable_exercise_id_dropped(self):
        exercises = [{"id": {"bad": 1}, "name": "Bad", "description": "", "base_weight_factor": 1.0}]
        tables = {
            "exercises": exercises + self.TABLES["exercises"],
            "exercise_muscles": self.TABLES["exercise_muscles"],
        }
        client = FakePostgrest(tables=tables)
        records = asyncio.run(RelationalCatalogSource(client).fetch())
        assert [e.id for e in validate_exercise_data(records)] == ["bench", "curl"]

    def test_sub_fetch_failure_fails_path(self):
        client = FakePostgrest(error=TransportError("boom", status=503))
        with pytest.raises(TransportError):
            asyncio.run(RelationalCatalogSource(client).fetch())


# ===========================================================================
# sources.py: manifest
# ===========================================================================

class TestManifestSource:

    META = {"exercises": [
        {"id": "bench", "name": "Bench", "description": "Flat"},
        {"id": "row", "name": "Row", "description": "Bent over"},
    ]}
    TRAINING = {"exercises": [
        {"id": "row", "baseWeightFactor": 0.85, "muscleInvolvement": {"Lats": 70}},
        {"id": "bench", "baseWeightFactor": 1.0, "muscleInvolvement": {"Chest": 70}},
        {"id": "unused", "baseWeightFactor": 2.0, "muscleInvolvement": {}},
    ]}

    def test_inner_join_in_metadata_order(self):
        fetcher = FakeFetcher(_manifest_docs(self.META, self.TRAINING))
        records = asyncio.run(ManifestCatalogSource(fetcher).fetch())
        exercises = validate_exercise_data(records)
        assert [e.id for e in exercises] == ["bench", "row"]
        assert exercises[1].base_weight_factor == 0.85
        assert dict(exercises[1].muscle_involvement) == {"Lats": 70.0}
        assert fetcher.requested[0] == "manifest.json"

    def test_bare_arrays_accepted(self):
        fetcher = FakeFetcher(_manifest_docs(self.META["exercises"], self.TRAINING["exercises"]))
        records = asyncio.run(ManifestCatalogSource(fetcher).fetch())
        assert [r["id"] for r in records] == ["bench", "row"]

    def test_missing_training_entry_fails_whole_load(self):
        training = {"exercises": self.TRAINING["exercises"][:1]}  # row only
        fetcher = FakeFetcher(_manifest_docs(self.META, training))
        with pytest.raises(CatalogIntegrityError, match="bench"):
            asyncio.run(ManifestCatalogSource(fetcher).fetch())

    def test_training_entry_with_unhashable_id_ignored(self):
        training = {"exercises": [
            {"id": ["bad"], "baseWeightFactor": 1.0, "muscleInvolvement": {}},
            *self.TRAINING["exercises"],
        ]}
        fetcher = FakeFetcher(_manifest_docs(self.META, training))
        records = asyncio.run(ManifestCatalogSource(fetcher).fetch())
        assert [r["id"] for r in records] == ["bench", "row"]

    def test_metadata_entry_without_string_id_skipped(self):
        meta = {"exercises": [
            {"id": {"bad": 1}, "name": "Bad", "description": ""},
            {"id": 7, "name": "Seven", "description": ""},
            *self.META["exercises"],
        ]}
        fetcher = FakeFetcher(_manifest_docs(meta, self.TRAINING))
        records = asyncio.run(ManifestCatalogSource(fetcher).fetch())
        assert [r["id"] for r in records] == ["bench", "row"]

    def test_manifest_missing_required_file(self):
        fetcher = FakeFetcher(_manifest_docs(self.META, self.TRAINING, files={"exercises_meta": "v1/meta.json"}))
        with pytest.raises(ManifestError, match="exercises_training_data"):
            asyncio.run(ManifestCatalogSource(fetcher).fetch())

    def test_manifest_without_files_mapping(self):
        fetcher = FakeFetcher({"manifest.json": {"version": 1}})
        with pytest.raises(ManifestError):
            asyncio.run(ManifestCatalogSource(fetcher).fetch())

    def test_malformed_data_file(self):
        fetcher = FakeFetcher(_manifest_docs({"items": []}, self.TRAINING))
        with pytest.raises(ManifestError):
            asyncio.run(ManifestCatalogSource(fetcher).fetch())

    def test_missing_file_propagates(self):
        docs = _manifest_docs(self.META, self.TRAINING)
        del docs["v1/training.json"]
        with pytest.raises(FileNotFoundError):
            asyncio.run(ManifestCatalogSource(FakeFetcher(docs)).fetch())


# ===========================================================================
# resolver.py
# ===========================================================================

class TestResolveExerciseCatalog:

    def test_returns_validated_rows(self):
        client = FakePostgrest(rpc_rows=[_rpc_row("a"), {"id": "broken"}, _rpc_row("b")])
        catalog = asyncio.run(resolve_exercise_catalog(client))
        assert [e.id for e in catalog] == ["a", "b"]

    def test_zero_rows_is_fatal(self):
        client = FakePostgrest(rpc_rows=[])
        with pytest.raises(NoExercisesAvailableError):
            asyncio.run(resolve_exercise_catalog(client))

    def test_zero_valid_rows_is_fatal(self):
        client = FakePostgrest(rpc_rows=[{"id": 1}, {"name": "x"}])
        with pytest.raises(NoExercisesAvailableError):
            asyncio.run(resolve_exercise_catalog(client))

    def test_transport_error_propagates_unchanged(self):
        error = TransportError("gateway", status=502)
        client = FakePostgrest(error=error)
        with pytest.raises(TransportError) as info:
            asyncio.run(resolve_exercise_catalog(client))
        assert info.value is error

    def test_custom_function_name(self):
        client = FakePostgrest(rpc_rows=[_rpc_row()])
        asyncio.run(resolve_exercise_catalog(client, "exercises_for_calculator"))
        assert client.calls == [("rpc", "exercises_for_calculator")]


class TestCatalogResolver:

    def test_first_successful_source_wins(self):
        first = StaticSource("one", [_raw("a")])
        second = StaticSource("two", [_raw("b")])
        catalog = asyncio.run(CatalogResolver([first, second]).resolve())
        assert [e.id for e in catalog] == ["a"]
        assert second.fetched == 0

    def test_failed_source_skipped_with_warning(self):
        first = StaticSource("one", error=RuntimeError("down"))
        second = StaticSource("two", [_raw("b")])
        with pytest.warns(UserWarning, match="one"):
            catalog = asyncio.run(CatalogResolver([first, second]).resolve())
        assert [e.id for e in catalog] == ["b"]

    def test_empty_source_skipped(self):
        first = StaticSource("one", [{"id": None}])
        second = StaticSource("two", [_raw("b")])
        with pytest.warns(UserWarning, match="no valid exercises"):
            catalog = asyncio.run(CatalogResolver([first, second]).resolve())
        assert [e.id for e in catalog] == ["b"]

    def test_last_source_error_propagates(self):
        first = StaticSource("one", [])
        last = StaticSource("two", error=CatalogIntegrityError("partial"))
        with warnings.catch_warnings():
            warnings.simplefilter("ignore")
            with pytest.raises(CatalogIntegrityError):
                asyncio.run(CatalogResolver([first, last]).resolve())

    def test_all_empty_is_fatal(self):
        with warnings.catch_warnings():
            warnings.simplefilter("ignore")
            with pytest.raises(NoExercisesAvailableError, match="one, two"):
                asyncio.run(CatalogResolver([StaticSource("one"), StaticSource("two")]).resolve())

    def test_needs_a_source(self):
        with pytest.raises(ValueError):
            CatalogResolver([])

    def test_relational_fail_closed_falls_through_to_manifest(self):
        client = FakePostgrest(
            rpc_rows=[],
            tables={"exercises": TestRelationalSource.TABLES["exercises"], "exercise_muscles": []},
        )
        fetcher = FakeFetcher(_manifest_docs(TestManifestSource.META, TestManifestSource.TRAINING))
        resolver = build_resolver("auto", client=client, fetcher=fetcher, manifest_name="manifest.json")
        with warnings.catch_warnings():
            warnings.simplefilter("ignore")
            catalog = asyncio.run(resolver.resolve())
        assert [e.id for e in catalog] == ["bench", "row"]


class TestBuildResolver:

    def test_auto_orders_sources(self):
        resolver = build_resolver("auto", client=FakePostgrest(), fetcher=FakeFetcher({}))
        assert resolver.source_names == ["rpc", "relational", "manifest"]

    def test_auto_without_client_uses_manifest_only(self):
        resolver = build_resolver("auto", fetcher=FakeFetcher({}))
        assert resolver.source_names == ["manifest"]

    def test_named_source(self):
        resolver = build_resolver("relational", client=FakePostgrest(), fetcher=FakeFetcher({}))
        assert resolver.source_names == ["relational"]

    def test_named_source_without_backend(self):
        with pytest.raises(CatalogError, match="Supabase"):
            build_resolver("rpc", fetcher=FakeFetcher({}))

    def test_unknown_source(self):
        with pytest.raises(CatalogError, match="Unknown catalog source"):
            build_resolver("ftp", client=FakePostgrest())


class TestFindExercise:

    def test_found(self):
        catalog = validate_exercise_data([_raw("a"), _raw("b")])
        assert find_exercise(catalog, "b").id == "b"

    def test_unknown_lists_valid_ids(self):
        catalog = validate_exercise_data([_raw("a"), _raw("b")])
        with pytest.raises(UnknownExerciseError, match="Valid IDs: a, b"):
            find_exercise(catalog, "zzz")

    def test_is_a_key_error(self):
        with pytest.raises(KeyError):
            find_exercise([], "zzz")
