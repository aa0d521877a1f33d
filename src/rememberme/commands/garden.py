"""Command group: relationship garden (layout, health, stats, rings)."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

import click

from rememberme.commands._base import RmGroup

if TYPE_CHECKING:
    from rememberme.commands._context import AppContext

_DATE_FORMATS = ["%Y-%m-%d", "%Y-%m-%dT%H:%M:%S"]

_GARDEN_EXAMPLES = """\
  rememberme garden layout
  rememberme garden layout --radius 300 --center 400,400
  rememberme --json garden layout --as-of 2024-06-01
  rememberme garden health
  rememberme garden stats
  rememberme garden rings --radius 300"""


def _parse_center(
    _ctx: click.Context, _param: click.Parameter, value: str | None
) -> tuple[float, float]:
    if not value:
        return (0.0, 0.0)
    parts = value.split(",")
    try:
        if len(parts) != 2:
            raise ValueError
        return (float(parts[0]), float(parts[1]))
    except ValueError:
        raise click.BadParameter(f"expected X,Y, got {value!r}") from None


_as_of_option = click.option(
    "--as-of",
    "as_of",
    type=click.DateTime(formats=_DATE_FORMATS),
    default=None,
    help="Reference date for recency (UTC, default: now).",
)
_radius_option = click.option(
    "--radius",
    type=click.FloatRange(min=0.0),
    default=None,
    help="Canvas radius (default: [layout] canvas_radius).",
)


@click.group(cls=RmGroup, examples=_GARDEN_EXAMPLES)
def garden() -> None:
    """Visualize relationship health as a radial garden."""


@garden.command(
    examples="""\
  rememberme garden layout
  rememberme garden layout --radius 300 --center 400,400
  rememberme --json garden layout --as-of 2024-06-01"""
)
@_radius_option
@_as_of_option
@click.option("--center", callback=_parse_center, default=None, help="Canvas centre as X,Y.")
@click.pass_obj
def layout(
    app: AppContext,
    radius: float | None,
    as_of: datetime | None,
    center: tuple[float, float],
) -> None:
    """Place every contact on the three rings."""
    from rememberme.services.garden import GardenService

    app.emit(
        GardenService(app.store, app.settings).layout(
            canvas_radius=radius, as_of=as_of, center=center
        )
    )


@garden.command(
    examples="""\
  rememberme garden health
  rememberme garden health --as-of 2024-06-01
  rememberme -q garden health"""
)
@_as_of_option
@click.pass_obj
def health(app: AppContext, as_of: datetime | None) -> None:
    """List contacts by health, most neglected first."""
    from rememberme.services.garden import GardenService

    app.emit(GardenService(app.store, app.settings).health(as_of=as_of))


@garden.command(
    examples="""\
  rememberme garden stats
  rememberme --json garden stats --as-of 2024-06-01"""
)
@_as_of_option
@click.pass_obj
def stats(app: AppContext, as_of: datetime | None) -> None:
    """Show bucket counts and the garden health score."""
    from rememberme.services.garden import GardenService

    app.emit(GardenService(app.store, app.settings).stats(as_of=as_of))


@garden.command(
    examples="""\
  rememberme garden rings
  rememberme garden rings --radius 300"""
)
@_radius_option
@click.pass_obj
def rings(app: AppContext, radius: float | None) -> None:
    """Show the radius band of each ring."""
    from rememberme.services.garden import GardenService

    app.emit(GardenService(app.store, app.settings).rings(canvas_radius=radius))
