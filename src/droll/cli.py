from __future__ import annotations

import logging

import typer

from .config import get_settings
from .dice import roll
from .errors import DiceError


app = typer.Typer(
    name="droll",
    help="Parse dice notation and print the result",
    add_completion=False,
)


@app.command()
def main(
    dice_notation: str = typer.Argument(..., help="Dice notation, e.g. 3d6+10"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log parsing details"),
) -> None:
    """Roll DICE_NOTATION and print the total."""
    level = "DEBUG" if verbose else get_settings().log_level
    logging.basicConfig(level=level.upper(), format="%(levelname)s %(name)s: %(message)s")

    try:
        total = roll(dice_notation)
    except DiceError as e:
        typer.echo(str(e))
        raise typer.Exit(1) from None

    typer.echo(total)


def run() -> None:
    app()


if __name__ == "__main__":
    run()
