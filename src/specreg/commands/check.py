"""Command: load projects and report the ones that fail."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from specreg.commands._base import SpecCommand

if TYPE_CHECKING:
    from specreg.commands._context import AppContext


@click.command(
    cls=SpecCommand,
    examples="""\
  specreg check
  specreg check demo base
  specreg -I ./models check
  specreg --json check""",
)
@click.argument("names", nargs=-1)
@click.pass_obj
def check(app: AppContext, names: tuple[str, ...]) -> None:
    """Load every project (or only NAMES) and report load failures."""
    from specreg.services.check import CheckService

    svc = CheckService(app.workspace)
    app.emit(svc.check(list(names) if names else None))
