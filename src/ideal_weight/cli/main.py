"""
CLI entry point using Typer.

Provides commands for the ideal exercise weight calculator:
- estimate: Recommended weight for one exercise
- weights: Recommended weights for the whole catalog
- exercises: List the resolved catalog
- show: Muscle involvement breakdown for one exercise
- levels: Experience tiers
"""

from .app import app
from .commands import catalog, estimate  # noqa: F401  (registers commands)

if __name__ == "__main__":
    app()
