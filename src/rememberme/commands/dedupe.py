"""Command group: duplicate detection and merge planning."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from rememberme.commands._base import RmGroup

if TYPE_CHECKING:
    from rememberme.commands._context import AppContext

_DEDUPE_EXAMPLES = """\
  rememberme dedupe scan
  rememberme --json dedupe scan
  rememberme dedupe plan c-101 c-207
  rememberme dedupe plan c-101 c-207 --swap"""


@click.group(cls=RmGroup, examples=_DEDUPE_EXAMPLES)
def dedupe() -> None:
    """Find duplicate contacts and preview merges."""


@dedupe.command(
    examples="""\
  rememberme dedupe scan
  rememberme -q dedupe scan
  rememberme --contacts export.csv dedupe scan"""
)
@click.pass_obj
def scan(app: AppContext) -> None:
    """Group contacts that look like the same person."""
    from rememberme.services.dedupe import DedupeService

    app.emit(DedupeService(app.store, app.settings).scan())


@dedupe.command(
    examples="""\
  rememberme dedupe plan c-101 c-207
  rememberme dedupe plan c-101 c-207 --swap
  rememberme -v dedupe plan c-101 c-207"""
)
@click.argument("keeper_id")
@click.argument("duplicate_id")
@click.option("--swap", is_flag=True, help="Keep DUPLICATE_ID and fold KEEPER_ID into it.")
@click.pass_obj
def plan(app: AppContext, keeper_id: str, duplicate_id: str, swap: bool) -> None:
    """Preview how DUPLICATE_ID would merge into KEEPER_ID. Writes nothing."""
    from rememberme.services.dedupe import DedupeService

    app.emit(DedupeService(app.store, app.settings).plan(keeper_id, duplicate_id, swap=swap))
