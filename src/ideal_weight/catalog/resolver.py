"""
Exercise catalog resolver.

Tries catalog sources in a fixed precedence order and returns the first
non-empty validated catalog:

    1. RPC (stored procedure)       authoritative for the calculator
    2. Relational join              exercises + involvement tables
    3. Manifest + static files      versioned JSON exports

Each call is a stateless fetch-validate-return; there is no cache and no
retry.  resolve_exercise_catalog() is the entry point for the estimator's
consumer and only consults the RPC source.
"""

from __future__ import annotations

import warnings
from collections.abc import Sequence

from ..core.models import Exercise
from .errors import CatalogError, NoExercisesAvailableError, UnknownExerciseError
from .sources import (
    CatalogSource,
    JsonFetcher,
    ManifestCatalogSource,
    PostgrestClient,
    RelationalCatalogSource,
    RpcCatalogSource,
)
from .validation import validate_exercise_data

DEFAULT_RPC_FUNCTION = "get_exercise_catalog"

SOURCE_CHOICES: tuple[str, ...] = ("auto", "rpc", "relational", "manifest")


class CatalogResolver:
    """
    Orchestrates catalog sources in order.

    A source that raises while later sources remain is skipped with a
    warning; the last source's exception propagates unchanged.  A source
    that yields no valid exercise is skipped.  If nothing yields a catalog,
    NoExercisesAvailableError is raised: no placeholder catalog is ever
    synthesized.
    """

    def __init__(self, sources: Sequence[CatalogSource]):
        if not sources:
            raise ValueError("CatalogResolver needs at least one source")
        self.sources = list(sources)

    @property
    def source_names(self) -> list[str]:
        return [source.name for source in self.sources]

    async def resolve(self) -> list[Exercise]:
        """Return the first non-empty validated catalog."""
        last = len(self.sources) - 1
        for index, source in enumerate(self.sources):
            try:
                records = await source.fetch()
            except Exception as exc:
                if index == last:
                    raise
                warnings.warn(
                    f"ideal-weight: catalog source '{source.name}' failed ({exc}); "
                    "trying the next source.",
                    stacklevel=2,
                )
                continue

            exercises = validate_exercise_data(records)
            if exercises:
                return exercises
            if index < last:
                warnings.warn(
                    f"ideal-weight: catalog source '{source.name}' returned no valid "
                    "exercises; trying the next source.",
                    stacklevel=2,
                )

        raise NoExercisesAvailableError(
            "No exercises available from catalog source(s): "
            + ", ".join(self.source_names)
        )


async def resolve_exercise_catalog(
    client: PostgrestClient,
    function_name: str = DEFAULT_RPC_FUNCTION,
) -> list[Exercise]:
    """
    Resolve the calculator's catalog from the RPC source only.

    Raises:
        NoExercisesAvailableError: If the procedure yields zero valid rows
        TransportError / aiohttp.ClientError: Propagated from the client
    """
    resolver = CatalogResolver([RpcCatalogSource(client, function_name)])
    return await resolver.resolve()


def build_resolver(
    source: str = "auto",
    client: PostgrestClient | None = None,
    fetcher: JsonFetcher | None = None,
    rpc_function: str = DEFAULT_RPC_FUNCTION,
    exercises_table: str = "exercises",
    involvement_table: str = "exercise_muscles",
    manifest_name: str = "manifest.json",
) -> CatalogResolver:
    """
    Assemble a resolver for the requested source.

    "auto" chains every configured backend in precedence order.  A named
    source whose backend is not configured raises CatalogError.
    """
    if source not in SOURCE_CHOICES:
        raise CatalogError(
            f"Unknown catalog source '{source}'. Valid sources: {', '.join(SOURCE_CHOICES)}"
        )

    sources: list[CatalogSource] = []
    if client is not None:
        if source in ("auto", "rpc"):
            sources.append(RpcCatalogSource(client, rpc_function))
        if source in ("auto", "relational"):
            sources.append(RelationalCatalogSource(client, exercises_table, involvement_table))
    if fetcher is not None and source in ("auto", "manifest"):
        sources.append(ManifestCatalogSource(fetcher, manifest_name))

    if not sources:
        backend = "a static data location" if source == "manifest" else "Supabase credentials"
        raise CatalogError(f"Catalog source '{source}' requires {backend}")
    return CatalogResolver(sources)


def find_exercise(catalog: Sequence[Exercise], exercise_id: str) -> Exercise:
    """
    Return the exercise with the given id.

    Raises:
        UnknownExerciseError: If exercise_id is not in the catalog
    """
    for exercise in catalog:
        if exercise.id == exercise_id:
            return exercise
    valid = ", ".join(e.id for e in catalog)
    raise UnknownExerciseError(f"Unknown exercise '{exercise_id}'. Valid IDs: {valid}")
