"""Estimate commands: estimate, weights."""

import json
from typing import Annotated

import typer

from ...catalog import UnknownExerciseError, find_exercise
from ...core.breakdown import muscle_breakdown
from ...core.estimator import compute_ideal_weight, explain_ideal_weight
from ...io.serializers import (
    breakdown_to_dict,
    exercise_to_dict,
    muscle_share_to_dict,
    personal_inputs_to_dict,
)
from .. import views
from ..app import (
    AgeOption,
    BodyWeightOption,
    DataDirOption,
    ExperienceOption,
    FatMassOption,
    GenderOption,
    HeightOption,
    MuscleMassOption,
    SourceOption,
    app,
    build_inputs,
    load_catalog,
)


@app.command()
def estimate(
    exercise_id: Annotated[str, typer.Option("--exercise", "-e", help="Exercise ID (see 'exercises')")],
    body_weight: BodyWeightOption,
    height: HeightOption,
    age: AgeOption,
    skeletal_muscle_mass: MuscleMassOption,
    body_fat_mass: FatMassOption,
    gender: GenderOption = "male",
    experience: ExperienceOption = "cat3",
    explain: Annotated[
        bool,
        typer.Option("--explain", help="Show every factor behind the estimate"),
    ] = False,
    json_out: Annotated[
        bool,
        typer.Option("--json", "-j", help="Output as JSON for machine processing"),
    ] = False,
    source: SourceOption = None,
    data_dir: DataDirOption = None,
) -> None:
    """
    Recommend a working weight for one exercise.
    """
    inputs = build_inputs(
        body_weight, height, age, gender, experience, skeletal_muscle_mass, body_fat_mass
    )
    catalog = load_catalog(source, data_dir)

    try:
        exercise = find_exercise(catalog, exercise_id)
    except UnknownExerciseError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    breakdown = explain_ideal_weight(inputs, exercise.base_weight_factor)

    if json_out:
        shares = muscle_breakdown(exercise, breakdown.recommended_kg)
        print(json.dumps({
            "inputs": personal_inputs_to_dict(inputs),
            "exercise": exercise_to_dict(exercise),
            **breakdown_to_dict(breakdown),
            "muscles": [muscle_share_to_dict(s) for s in shares],
        }, indent=2))
        return

    views.print_estimate(exercise, breakdown, explain=explain)


@app.command()
def weights(
    body_weight: BodyWeightOption,
    height: HeightOption,
    age: AgeOption,
    skeletal_muscle_mass: MuscleMassOption,
    body_fat_mass: FatMassOption,
    gender: GenderOption = "male",
    experience: ExperienceOption = "cat3",
    json_out: Annotated[
        bool,
        typer.Option("--json", "-j", help="Output as JSON for machine processing"),
    ] = False,
    source: SourceOption = None,
    data_dir: DataDirOption = None,
) -> None:
    """
    Recommend a working weight for every exercise in the catalog.
    """
    inputs = build_inputs(
        body_weight, height, age, gender, experience, skeletal_muscle_mass, body_fat_mass
    )
    catalog = load_catalog(source, data_dir)

    rows = [(e, compute_ideal_weight(inputs, e.base_weight_factor)) for e in catalog]
    rows.sort(key=lambda row: (-row[1], row[0].name))

    if json_out:
        print(json.dumps({
            "inputs": personal_inputs_to_dict(inputs),
            "weights": [
                {"id": e.id, "name": e.name, "recommended_kg": round(w, 1)}
                for e, w in rows
            ],
        }, indent=2))
        return

    views.console.print(views.format_weights_table(rows))
