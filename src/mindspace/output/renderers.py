"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console backed by StringIO; the caller
extracts the text via ``get_output(console)``. Renderers are dispatched by
``result.op`` in :func:`render_result`, and unknown ops fall through to a
generic key-value renderer.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from mindspace.output.console import create_console, get_output, style_for_mode

if TYPE_CHECKING:
    from rich.console import Console

    from mindspace.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Plain text comes back when Rich detects no terminal, which is the case
    inside Click's CliRunner and piped output.
    """
    console = create_console()
    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)
    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op}: {msg}"

    items = result.data.get("items")
    if items and isinstance(items, list):
        return "\n".join(str(item["id"]) for item in items if isinstance(item, dict) and "id" in item)
    if result.op in ("add_node", "remove_node") and "id" in result.data:
        return str(result.data["id"])
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="ms.ok"), Text(f"  {result.op}", style="ms.op"))


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="ms.key")
    if key == "id" or key.endswith("_id"):
        v = Text(str(value), style="ms.id")
    elif key == "title":
        v = Text(str(value), style="ms.title")
    elif key == "mode":
        v = Text(str(value), style=style_for_mode(str(value)))
    elif isinstance(value, (dict, list)):
        v = Text(json.dumps(value, separators=(",", ":")))
    else:
        v = Text(str(value))
    console.print(k, v)


def _point(value: dict[str, float] | None) -> str:
    if not value:
        return "-"
    return f"({value['x']:.2f}, {value['y']:.2f}, {value['z']:.2f})"


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    console.print(
        Text("ERROR", style="ms.error"),
        Text(f"  {result.op}", style="ms.op"),
        f": {escape(msg)}",
        sep="",
    )
    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Node renderers ────────────────────────────────────────────────────


def _render_node_table(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render list_nodes as a table, marking the active node."""
    d = result.data
    items = d.get("items", [])
    active = d.get("active_node_id")

    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("", no_wrap=True)
    table.add_column("ID", style="ms.id", no_wrap=True)
    table.add_column("Title", style="ms.title")
    table.add_column("Links", justify="right")
    table.add_column("Orbit", justify="right")
    if verbose:
        table.add_column("Seed", style="ms.seed")

    for item in items:
        orbit = item.get("orbit_radius")
        row = [
            "*" if item.get("id") == active else "",
            str(item.get("id", "")),
            str(item.get("title", "")),
            str(item.get("connections", 0)),
            f"{orbit:g}" if isinstance(orbit, (int, float)) else "-",
        ]
        if verbose:
            row.append("seed" if item.get("seed") else "")
        table.add_row(*row)

    console.print(table)
    mode = str(d.get("mode", ""))
    console.print(
        f"\n{d.get('count', len(items))} nodes, mode ",
        Text(mode, style=style_for_mode(mode)),
        sep="",
    )
    if d.get("linking_from_id"):
        console.print(f"linking from {d['linking_from_id']}")


def _render_node(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render show_node as a panel."""
    d = result.data
    lines = [
        f"position: {_point(d.get('position'))}",
        f"galaxy position: {_point(d.get('galaxy_position'))}",
        f"texture: {d.get('texture_ref', '')}",
    ]
    if d.get("orbit_radius") is not None:
        lines.append(f"orbit radius: {d['orbit_radius']:g}")
    connections = d.get("connections", [])
    if connections:
        lines.append(f"links: {', '.join(connections)}")
    if verbose:
        lines.append(f"created: {d.get('created_at')}")
        lines.append(f"updated: {d.get('updated_at')}")
        if d.get("is_seed_node"):
            lines.append("seed node")
    content = "\n".join(lines)
    if d.get("body"):
        content += f"\n\n{d['body'].strip()}"

    title = f"{d.get('id', '?')}: {d.get('title', '')}"
    if d.get("active"):
        title += " (active)"
    console.print(Panel(Text(content), title=Text(title), border_style="dim", expand=False))


def _render_mutation(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render add/remove/edit/move/select results."""
    _status_line(console, result)
    for key, value in result.data.items():
        if key in ("position", "galaxy_position"):
            _field(console, key, _point(value))
        elif value is not None or verbose:
            _field(console, key, value)


# ── Graph renderers ───────────────────────────────────────────────────


def _render_stats(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _status_line(console, result)
    for key in ("node_count", "edge_count", "components", "mode", "can_undo"):
        if key in d:
            _field(console, key, d[key])
    hub = d.get("hub")
    if hub:
        _field(console, "hub", f"{hub['title']} [{hub['id']}] degree {hub['degree']}")
    isolated = d.get("isolated", [])
    _field(console, "isolated", len(isolated))
    if verbose:
        for node_id in isolated:
            console.print(f"    {node_id}", style="ms.id")


def _render_check(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render check results with issues grouped by category."""
    issues = result.data.get("issues", [])
    fixed = result.data.get("fixed", 0)

    if not issues:
        console.print("[ms.ok]OK[/ms.ok]  No issues found.")
        return

    severity_styles = {"error": "ms.error", "warning": "ms.warning"}
    by_category: dict[str, list[dict[str, Any]]] = {}
    for issue in issues:
        by_category.setdefault(str(issue.get("category", "unknown")), []).append(issue)

    for category, category_issues in by_category.items():
        console.print(f"\n[bold]{category}[/bold]")
        for issue in category_issues:
            sev = str(issue.get("severity", "warning"))
            style = severity_styles.get(sev, "")
            prefix = f"[{style}]{sev}[/{style}]" if style else sev
            node = escape(f"[{issue.get('node_id')}]")
            console.print(f"  {prefix} {node}: {escape(str(issue.get('message', '')))}")

    errors = result.data.get("error_count", 0)
    warnings = result.data.get("warning_count", 0)
    console.print(f"\n{errors} error(s), {warnings} warning(s)")
    if fixed:
        console.print(f"[ms.ok]fixed[/ms.ok] {fixed} connection issue(s)")


def _render_mode(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    mode = str(d.get("mode", ""))
    _status_line(console, result)
    console.print(Text("  mode: ", style="ms.key"), Text(mode, style=style_for_mode(mode)))
    if d.get("primary_id"):
        _field(console, "primary_id", d["primary_id"])
    _field(console, "node_count", d.get("node_count", 0))


# ── Generic ───────────────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line plus all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    # Nodes
    "list_nodes": _render_node_table,
    "show_node": _render_node,
    "add_node": _render_mutation,
    "remove_node": _render_mutation,
    "edit_node": _render_mutation,
    "move_node": _render_mutation,
    "select_node": _render_mutation,
    "link": _render_mutation,
    "unlink": _render_mutation,
    "undo": _render_mutation,
    # Graph
    "stats": _render_stats,
    "check": _render_check,
    "set_mode": _render_mode,
}
