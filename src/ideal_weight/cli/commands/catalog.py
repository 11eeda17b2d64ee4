"""Catalog commands: exercises, show, levels."""

import json
from typing import Annotated, Optional

import typer

from ...catalog import UnknownExerciseError, find_exercise
from ...core.breakdown import muscle_breakdown
from ...io.serializers import exercise_to_dict, muscle_share_to_dict
from .. import views
from ..app import DataDirOption, SourceOption, app, load_catalog


@app.command()
def exercises(
    json_out: Annotated[
        bool,
        typer.Option("--json", "-j", help="Output as JSON for machine processing"),
    ] = False,
    source: SourceOption = None,
    data_dir: DataDirOption = None,
) -> None:
    """
    List the resolved exercise catalog.
    """
    catalog = load_catalog(source, data_dir)

    if json_out:
        print(json.dumps({"exercises": [exercise_to_dict(e) for e in catalog]}, indent=2))
        return

    views.console.print(views.format_catalog_table(catalog))


@app.command()
def show(
    exercise_id: Annotated[str, typer.Argument(help="Exercise ID")],
    weight_kg: Annotated[
        Optional[float],
        typer.Option("--weight-kg", help="Split this working weight across the muscles"),
    ] = None,
    json_out: Annotated[
        bool,
        typer.Option("--json", "-j", help="Output as JSON for machine processing"),
    ] = False,
    source: SourceOption = None,
    data_dir: DataDirOption = None,
) -> None:
    """
    Show one exercise and its muscle involvement breakdown.
    """
    catalog = load_catalog(source, data_dir)
    try:
        exercise = find_exercise(catalog, exercise_id)
    except UnknownExerciseError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    shares = muscle_breakdown(exercise, weight_kg)

    if json_out:
        print(json.dumps({
            **exercise_to_dict(exercise),
            "muscles": [muscle_share_to_dict(s) for s in shares],
        }, indent=2))
        return

    views.print_muscle_breakdown(exercise, shares)


@app.command()
def levels() -> None:
    """
    List the training-experience tiers and their multipliers.
    """
    views.print_levels()
