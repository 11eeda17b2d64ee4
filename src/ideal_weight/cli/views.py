"""
CLI view formatters using Rich for pretty console output.

Handles table formatting and display of estimates and catalog data.
"""

from rich.console import Console
from rich.table import Table

from ..core.breakdown import primary_muscles
from ..core.config import EXPERIENCE_LEVELS
from ..core.models import Exercise, MuscleShare, WeightBreakdown

BAR_WIDTH = 30

console = Console()


def format_estimate_table(exercise: Exercise, breakdown: WeightBreakdown) -> Table:
    """
    Create a Rich table listing every factor behind one estimate.

    Args:
        exercise: Exercise the estimate is for
        breakdown: Result of explain_ideal_weight()

    Returns:
        Rich Table object
    """
    table = Table(title=f"{exercise.name}: factor breakdown")

    table.add_column("Factor", style="cyan")
    table.add_column("Value", justify="right")

    table.add_row("Skeletal muscle mass (kg)", f"{breakdown.skeletal_muscle_mass:.1f}")
    table.add_row("Gender", f"{breakdown.gender_factor:.3f}")
    table.add_row("Age", f"{breakdown.age_factor:.3f}")
    table.add_row("Experience", f"{breakdown.experience_factor:.3f}")
    table.add_row("Height", f"{breakdown.height_factor:.3f}")
    table.add_row("Body fat", f"{breakdown.fat_factor:.3f}")
    table.add_row("Exercise", f"{breakdown.exercise_factor:.3f}")
    table.add_row("[bold]Recommended (kg)[/bold]", f"[bold]{breakdown.recommended_kg:.1f}[/bold]")

    return table


def print_estimate(exercise: Exercise, breakdown: WeightBreakdown, explain: bool = False) -> None:
    console.print(
        f"[bold cyan]{exercise.name}[/bold cyan]: recommended working weight "
        f"[bold]{breakdown.recommended_kg:.1f} kg[/bold]"
    )
    if explain:
        console.print(format_estimate_table(exercise, breakdown))


def format_weights_table(rows: list[tuple[Exercise, float]]) -> Table:
    """
    Create a Rich table of recommendations for many exercises.

    Args:
        rows: (exercise, recommended_kg) pairs in display order

    Returns:
        Rich Table object
    """
    table = Table(title="Exercise weights")

    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Exercise", style="cyan")
    table.add_column("Factor", justify="right")
    table.add_column("Weight (kg)", justify="right", style="bold")

    for exercise, weight in rows:
        table.add_row(
            exercise.id,
            exercise.name,
            f"{exercise.base_weight_factor:.2f}",
            f"{weight:.1f}",
        )

    return table


def format_catalog_table(exercises: list[Exercise]) -> Table:
    """Create a Rich table listing the catalog with top muscles."""
    table = Table(title=f"Exercise catalog ({len(exercises)})")

    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Name", style="cyan")
    table.add_column("Factor", justify="right")
    table.add_column("Primary muscles", style="green")

    for exercise in exercises:
        table.add_row(
            exercise.id,
            exercise.name,
            f"{exercise.base_weight_factor:.2f}",
            ", ".join(primary_muscles(exercise)) or "-",
        )

    return table


def _bar(share: float) -> str:
    filled = round(share * BAR_WIDTH)
    return "█" * filled + "·" * (BAR_WIDTH - filled)


def print_muscle_breakdown(exercise: Exercise, shares: list[MuscleShare]) -> None:
    """Print description and one bar per involved muscle."""
    console.print(f"[bold cyan]{exercise.name}[/bold cyan] ({exercise.id})")
    if exercise.description:
        console.print(exercise.description)
    console.print()

    if not shares:
        print_info("No muscle involvement recorded for this exercise.")
        return

    table = Table(title="Muscle involvement")
    table.add_column("Muscle", style="cyan")
    table.add_column("Score", justify="right")
    table.add_column("Share", justify="right")
    table.add_column("")
    with_load = any(s.load_kg is not None for s in shares)
    if with_load:
        table.add_column("Load (kg)", justify="right")

    for s in shares:
        row = [s.muscle, f"{s.involvement:g}", f"{s.share:.0%}", _bar(s.share)]
        if with_load:
            row.append(f"{s.load_kg:.1f}" if s.load_kg is not None else "-")
        table.add_row(*row)

    console.print(table)


def print_levels() -> None:
    """Print the experience tiers and their multipliers."""
    table = Table(title="Experience tiers")
    table.add_column("Tier", style="cyan")
    table.add_column("Label")
    table.add_column("Factor", justify="right")
    for tier, level in EXPERIENCE_LEVELS.items():
        table.add_row(tier, level.label, f"{level.factor:.1f}")
    console.print(table)


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]Error: {message}[/red]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]{message}[/blue]")
