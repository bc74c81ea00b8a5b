"""Operation-specific Rich renderers for ServiceResult.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from flightlog.output.console import create_console, get_output, style_for_state

if TYPE_CHECKING:
    from rich.console import Console

    from flightlog.services.result import ServiceResult

_STATE_LABELS: dict[str, str] = {
    "completed": "Completed",
    "in_progress": "In Progress",
    "arrived_only": "Arrived",
}


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich."""
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode: one line per session."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    items = result.data.get("items")
    if isinstance(items, list):
        return "\n".join(_quiet_line(item) for item in items)
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _quiet_line(item: dict[str, Any]) -> str:
    parts = [item.get("date", ""), item.get("tail_number", ""), item.get("state", "")]
    if "total_cost" in item:
        parts.append(str(item["total_cost"]))
    return "\t".join(str(p) for p in parts)


def _time(value: str | None) -> str:
    """``HH:MM`` from an ISO timestamp, or an em dash."""
    if not value:
        return "—"
    return value[11:16]


def _status_line(console: Console, result: ServiceResult) -> None:
    label = Text("OK", style="fl.ok")
    op = Text(f"  {result.op}", style="fl.op")
    console.print(label, op)


def _field(console: Console, key: str, value: Any) -> None:
    k = Text(f"  {key}: ", style="fl.key")
    v = Text(str(value), style="fl.tail" if key == "tail_number" else "")
    console.print(k, v)


def _session_table(items: list[dict[str, Any]], *, priced: bool) -> Table:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Date", no_wrap=True)
    table.add_column("Tail", style="fl.tail", no_wrap=True)
    table.add_column("Out (UTC)")
    table.add_column("In (UTC)")
    table.add_column("Duration", justify="right")
    if priced:
        table.add_column("Hours", justify="right")
        table.add_column("Discount", justify="right")
        table.add_column("Cost", style="fl.cost", justify="right")
    table.add_column("Status")

    for item in items:
        state = str(item.get("state", ""))
        row: list[str | Text] = [
            str(item.get("date", "")),
            str(item.get("tail_number", "")),
            _time(item.get("outbound")),
            _time(item.get("inbound")),
            str(item.get("duration", "—")),
        ]
        if priced:
            row.extend(
                [
                    f"{item.get('flight_hours', 0):.1f}",
                    f"{item.get('discount_pct', 0):.0%}",
                    f"{item.get('total_cost', 0):,}",
                ]
            )
        row.append(Text(_STATE_LABELS.get(state, state), style=style_for_state(state)))
        table.add_row(*row)
    return table


def _render_diagnostics(console: Console, data: dict[str, Any]) -> None:
    diagnostics = data.get("diagnostics") or {}
    rejected = diagnostics.get("rejected", 0)
    negative = diagnostics.get("negative_durations", 0)
    if rejected or negative:
        console.print(
            Text(
                f"  {rejected} record(s) rejected, {negative} pairing(s) refused",
                style="fl.warning",
            )
        )


# ── Renderers ─────────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="fl.error")
    op = Text(f"  {result.op}", style="fl.op")
    console.print(label, op, Text(" — "), msg)
    if verbose and err is not None:
        console.print(Text(f"  code: {err.code}", style="fl.key"))
        for key, value in err.detail.items():
            console.print(Text(f"  {key}: {value}", style="fl.key"))


def _render_sessions(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    data = result.data
    _status_line(console, result)
    console.print(Text(f"  {data.get('count', 0)} of {data.get('total', 0)} sessions"))
    items = data.get("items") or []
    if items:
        console.print(_session_table(items, priced=False))
    _render_diagnostics(console, data)


def _render_costs(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    data = result.data
    _status_line(console, result)
    console.print(Text(f"  {data.get('count', 0)} of {data.get('total', 0)} sessions"))
    items = data.get("items") or []
    if items:
        console.print(_session_table(items, priced=True))
    _field(console, "total_hours", f"{data.get('total_hours', 0):.1f}")
    _field(console, "total_cost", f"{data.get('total_cost', 0):,}")
    if verbose:
        for tail, hours in (data.get("cumulative_hours") or {}).items():
            _field(console, f"cumulative[{tail}]", f"{hours:.2f} h")
    _render_diagnostics(console, data)


def _render_policy(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    data = result.data
    _status_line(console, result)
    _field(console, "base_rate_per_hour", data["base_rate_per_hour"])
    _field(
        console,
        "tier1",
        f"{data['tier1_discount_pct']:.0%} off above {data['tier1_lower_hours']:g} h "
        f"up to {data['tier1_upper_hours']:g} h",
    )
    _field(
        console,
        "tier2",
        f"{data['tier2_discount_pct']:.0%} off above {data['tier2_lower_hours']:g} h",
    )
    _field(console, "escalation", f"{data['escalation_pct']:.0%}")


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
    "list_sessions": _render_sessions,
    "price_sessions": _render_costs,
    "show_policy": _render_policy,
    "configure_policy": _render_policy,
    "record_event": _render_generic,
    "ingest": _render_generic,
}
