"""Shared Typer app object, shared option types, and catalog loading."""

import asyncio
from dataclasses import replace
from pathlib import Path
from typing import Annotated, Optional

import aiohttp
import typer

from ..catalog import CatalogError, build_resolver
from ..core.models import Exercise, PersonalInputs
from ..io.config_loader import Settings, load_settings
from ..io.serializers import ValidationError, validate_personal_inputs
from ..io.static_files import HttpJsonFetcher, LocalJsonFetcher, get_bundled_data_dir
from ..io.supabase_client import SupabaseRestClient
from . import views

# Shared catalog options used across all commands
SourceOption = Annotated[
    Optional[str],
    typer.Option(
        "--source",
        "-s",
        help="Catalog source: auto (default), rpc, relational, manifest",
    ),
]
DataDirOption = Annotated[
    Optional[Path],
    typer.Option("--data-dir", help="Directory holding manifest.json and the exercise files"),
]

# Person options shared by estimate and weights
BodyWeightOption = Annotated[float, typer.Option("--body-weight", "-w", help="Body weight in kg")]
HeightOption = Annotated[float, typer.Option("--height", help="Height in cm")]
AgeOption = Annotated[float, typer.Option("--age", help="Age in years")]
GenderOption = Annotated[str, typer.Option("--gender", "-g", help="male or female")]
ExperienceOption = Annotated[
    str,
    typer.Option("--experience", "-x", help="Experience tier: cat1 (beginner) .. cat5 (elite)"),
]
MuscleMassOption = Annotated[
    float, typer.Option("--smm", help="Skeletal muscle mass in kg")
]
FatMassOption = Annotated[float, typer.Option("--fat-mass", help="Body fat mass in kg")]

app = typer.Typer(
    name="ideal-weight",
    help="Estimate an ideal working weight per exercise from body composition.",
    no_args_is_help=True,
)


def build_inputs(
    body_weight: float,
    height: float,
    age: float,
    gender: str,
    experience: str,
    skeletal_muscle_mass: float,
    body_fat_mass: float,
) -> PersonalInputs:
    """Build and validate PersonalInputs from CLI options; exit 1 on bad input."""
    inputs = PersonalInputs(
        body_weight=body_weight,
        height=height,
        age=age,
        gender=gender.lower(),  # type: ignore[arg-type]
        experience=experience.lower(),  # type: ignore[arg-type]
        skeletal_muscle_mass=skeletal_muscle_mass,
        body_fat_mass=body_fat_mass,
    )
    try:
        return validate_personal_inputs(inputs)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)


async def resolve_catalog(settings: Settings, source: str) -> list[Exercise]:
    """Open the configured backends and resolve the catalog once."""
    timeout = aiohttp.ClientTimeout(total=settings.request_timeout)
    async with aiohttp.ClientSession(timeout=timeout) as session:
        client = None
        if settings.has_supabase:
            client = SupabaseRestClient(session, settings.supabase_url, settings.supabase_key)

        if settings.manifest_url:
            fetcher = HttpJsonFetcher(session, settings.manifest_url)
        else:
            fetcher = LocalJsonFetcher(settings.data_dir or get_bundled_data_dir())

        resolver = build_resolver(
            source,
            client=client,
            fetcher=fetcher,
            rpc_function=settings.rpc_function,
            exercises_table=settings.exercises_table,
            involvement_table=settings.involvement_table,
            manifest_name=settings.manifest_name,
        )
        return await resolver.resolve()


def load_catalog(source: str | None = None, data_dir: Path | None = None) -> list[Exercise]:
    """
    Load settings and resolve the exercise catalog for a command.

    --data-dir replaces any configured manifest URL.  Any catalog failure
    is printed and ends the command with exit code 1.
    """
    try:
        settings = load_settings()
        if data_dir is not None:
            settings = replace(settings, data_dir=data_dir, manifest_url=None)
        return asyncio.run(resolve_catalog(settings, source or settings.source))
    except (
        CatalogError,
        ValidationError,
        aiohttp.ClientError,
        asyncio.TimeoutError,
        OSError,
        ValueError,
    ) as e:
        views.print_error(str(e) or type(e).__name__)
        raise typer.Exit(1)
