"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console backed by StringIO; the caller
extracts the text via ``get_output(console)``. Renderers are dispatched by
``result.op`` in :func:`render_result`; unknown ops fall through to a
generic key-value renderer.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from rememberme.output.console import (
    create_console,
    get_output,
    style_for_action,
    style_for_bucket,
)

if TYPE_CHECKING:
    from rich.console import Console

    from rememberme.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich."""
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
        if verbose:
            _render_meta(console, result)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode: one id per line."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    if result.op == "plan_merge":
        return "\n".join(result.data.get("changes", []))

    items = result.data.get("items")
    if items and isinstance(items, list):
        return "\n".join(i for i in (_extract_id(item) for item in items) if i)

    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _extract_id(item: Any) -> str:
    if isinstance(item, dict):
        for key in ("id", "group_id", "ring"):
            val = item.get(key)
            if val is not None:
                return str(val)
    return ""


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="rm.ok"), Text(f"  {result.op}", style="rm.op"), sep="")


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="rm.key")
    if key == "id" or key.endswith("_id"):
        v = Text(str(value), style="rm.id")
    elif key == "name" or key.endswith("_name"):
        v = Text(str(value), style="rm.name")
    else:
        v = Text(str(value))
    console.print(k, v, end="")
    console.print()


def _short(value: Any, width: int = 40) -> str:
    if value is None:
        return ""
    if isinstance(value, list):
        value = ", ".join(str(v) for v in value)
    text = str(value).replace("\n", " ")
    return text if len(text) <= width else text[: width - 1] + "…"


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print meta block including the telemetry span tree (verbose only)."""
    if not result.meta:
        return

    console.print()
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        if k == "telemetry":
            _render_telemetry_tree(console, v, indent=4)
        else:
            console.print(f"    {k}: {v}")


def _render_telemetry_tree(console: Console, span_data: dict[str, Any], indent: int = 4) -> None:
    prefix = " " * indent
    duration = span_data.get("duration_ms", 0.0)
    style = "yellow" if duration > 100 else "dim"
    line = f"{prefix}[{style}]{duration:>8.2f}ms[/{style}]  {span_data.get('name', '?')}"
    annotations = span_data.get("annotations") or {}
    if annotations:
        line += "  (" + ", ".join(f"{k}={v}" for k, v in annotations.items()) + ")"
    console.print(line)

    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    console.print(
        Text("ERROR", style="rm.error"),
        Text(f"  {result.op}", style="rm.op"),
        Text(f" — {msg}"),
        sep="",
    )

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Garden renderers ──────────────────────────────────────────────────


def _bucket_text(bucket: str, label: str | None = None) -> Text:
    return Text(label or bucket, style=style_for_bucket(bucket))


def _render_layout(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render leaf positions as a table, grouped ring by ring."""
    d = result.data
    items = d.get("items", [])
    table = Table(show_header=True, pad_edge=False, expand=False)
    table.add_column("ID", style="rm.id", no_wrap=True)
    table.add_column("Name", style="rm.name")
    table.add_column("Ring")
    table.add_column("Health")
    table.add_column("X", justify="right")
    table.add_column("Y", justify="right")
    table.add_column("Rotation", justify="right")
    if verbose:
        table.add_column("Radius", justify="right")
        table.add_column("Scale", justify="right")

    for item in items:
        row: list[Any] = [
            str(item["id"]),
            Text(str(item["name"])),
            str(item["ring"]),
            _bucket_text(str(item["bucket"])),
            f"{item['x']:.1f}",
            f"{item['y']:.1f}",
            f"{item['rotation_degrees']:.1f}°",
        ]
        if verbose:
            row.extend([f"{item['radius']:.1f}", f"{item['scale']:.2f}"])
        table.add_row(*row)

    console.print(table)
    rings = d.get("rings", {})
    summary = ", ".join(f"{ring} {n}" for ring, n in rings.items())
    console.print(f"\n{d.get('count', len(items))} leaves ({summary}) on radius {d.get('canvas_radius')}")


def _render_health(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render per-contact health, most neglected first."""
    items = result.data.get("items", [])
    table = Table(show_header=True, pad_edge=False, expand=False)
    table.add_column("ID", style="rm.id", no_wrap=True)
    table.add_column("Name", style="rm.name")
    table.add_column("Last contact")
    table.add_column("Health")
    table.add_column("Cadence")
    table.add_column("Ring")
    if verbose:
        table.add_column("Days", justify="right")

    for item in items:
        row: list[Any] = [
            str(item["id"]),
            Text(str(item["name"])),
            str(item["last_contact"]),
            _bucket_text(str(item["bucket"]), str(item["label"])),
            str(item["cadence"]),
            str(item["ring"]),
        ]
        if verbose:
            days = item.get("days_since_contact")
            row.append("" if days is None else str(days))
        table.add_row(*row)

    console.print(table)
    console.print(f"\n{result.data.get('count', len(items))} contacts")


def _render_stats(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render the garden score as a panel."""
    d = result.data
    lines = [
        f"[rm.score]{d.get('health_score', 0)}[/rm.score]/100  {escape(d.get('message', ''))}",
        "",
    ]
    for bucket in ("healthy", "warning", "dying", "dormant"):
        style = style_for_bucket(bucket)
        lines.append(f"[{style}]{bucket:<8}[/{style}] {d.get(bucket, 0)}")
    lines.append(f"{'total':<8} {d.get('total', 0)}")
    console.print(Panel("\n".join(lines), title="Garden health", border_style="dim", expand=False))


def _render_rings(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    table = Table(show_header=True, pad_edge=False, expand=False)
    table.add_column("Ring")
    table.add_column("Inner", justify="right")
    table.add_column("Mid", justify="right")
    table.add_column("Outer", justify="right")
    for guide in result.data.get("items", []):
        table.add_row(
            str(guide["ring"]),
            f"{guide['inner_radius']:.1f}",
            f"{guide['mid_radius']:.1f}",
            f"{guide['outer_radius']:.1f}",
        )
    console.print(table)
    console.print(f"\nCanvas radius {result.data.get('canvas_radius')}")


# ── Dedupe renderers ──────────────────────────────────────────────────


def _render_duplicates(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render each duplicate group with its suggested keeper first."""
    groups = result.data.get("items", [])
    if not groups:
        console.print(f"No duplicates among {result.data.get('records_scanned', 0)} contacts.")
        return

    for group in groups:
        score = f"[rm.score]{group['score'] * 100:.0f}%[/rm.score]"
        reasons = ", ".join(group.get("reasons", []))
        console.print(f"[bold]{escape(group['group_id'])}[/bold]  {score}  ({reasons})")
        keeper = group["keeper"]
        console.print(
            f"  [rm.ok]keep[/rm.ok]  [rm.id]{escape(keeper['id'])}[/rm.id]  {escape(keeper['name'])}"
            + (f"  <{escape(keeper['email'])}>" if verbose and keeper.get("email") else "")
        )
        for dup in group.get("duplicates", []):
            console.print(
                f"  [dim]dup [/dim]  [rm.id]{escape(dup['id'])}[/rm.id]  {escape(dup['name'])}"
                + (f"  <{escape(dup['email'])}>" if verbose and dup.get("email") else "")
            )
        console.print()

    console.print(f"{result.data.get('count', len(groups))} groups")


def _render_merge_plan(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render the field-by-field merge decisions."""
    d = result.data
    _status_line(console, result)
    _field(console, "keeper_id", d.get("keeper_id"))
    _field(console, "keeper_name", d.get("keeper_name"))
    _field(console, "duplicate_id", d.get("duplicate_id"))
    _field(console, "duplicate_name", d.get("duplicate_name"))
    console.print()

    table = Table(show_header=True, pad_edge=False, expand=False)
    table.add_column("Field")
    table.add_column("Action")
    table.add_column("Keeper")
    table.add_column("Duplicate")
    table.add_column("Result")
    for decision in d.get("decisions", []):
        action = str(decision["action"])
        if action == "keep" and not verbose and decision.get("duplicate_value") in (None, "", []):
            continue
        table.add_row(
            decision["field"],
            Text(action, style=style_for_action(action)),
            Text(_short(decision.get("keeper_value"))),
            Text(_short(decision.get("duplicate_value"))),
            Text(_short(decision.get("result"))),
        )
    console.print(table)

    changes = d.get("changes", [])
    console.print(f"\n{len(changes)} fields change: {', '.join(changes) or 'none'}")


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    # Garden
    "garden_layout": _render_layout,
    "garden_health": _render_health,
    "garden_stats": _render_stats,
    "ring_guides": _render_rings,
    # Dedupe
    "find_duplicates": _render_duplicates,
    "plan_merge": _render_merge_plan,
}
