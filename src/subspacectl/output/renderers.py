"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from subspacectl.output.console import create_console, get_output, style_for_status

if TYPE_CHECKING:
    from rich.console import Console

    from subspacectl.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode: one line per subspace."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    subspaces = result.data.get("subspaces") or []
    if not subspaces:
        return f"OK: {result.op}"
    return "\n".join(
        f"{item['name']}\t{item['status']}" if "status" in item else str(item["name"])
        for item in subspaces
    )


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    label = Text("OK", style="ssc.ok")
    op = Text(f"  {result.op}", style="ssc.op")
    console.print(label, op, sep="", end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    k = Text(f"  {key}: ", style="ssc.key")
    v = Text(str(value), style="ssc.path" if key in ("path", "workspace") else "")
    console.print(k, v, sep="", end="")
    console.print()


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print meta block including telemetry span tree (verbose only)."""
    if not result.meta:
        return

    console.print()
    console.print(Text("  meta:", style="dim"))

    for k, v in result.meta.items():
        if k == "telemetry":
            _render_telemetry_tree(console, v, indent=4)
        else:
            console.print(f"    {k}: {v}")


def _render_telemetry_tree(
    console: Console,
    span_data: dict[str, Any],
    indent: int = 4,
) -> None:
    """Render a hierarchical span tree with color-coded timing."""
    prefix = " " * indent
    name = span_data.get("name", "?")
    duration = span_data.get("duration_ms", 0.0)

    if duration > 10_000:
        style = "bold red"
    elif duration > 1000:
        style = "yellow"
    else:
        style = "dim"

    line = f"{prefix}[{style}]{duration:>10.2f}ms[/{style}]  {name}"
    annotations = span_data.get("annotations") or {}
    if annotations:
        line += f"  ({', '.join(f'{k}={v}' for k, v in annotations.items())})"
    console.print(line)

    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


def _subspace_table(items: list[dict[str, Any]], *, verbose: bool = False) -> Table:
    """One row per subspace: name, members, status (when present)."""
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Subspace", style="ssc.name", no_wrap=True)
    table.add_column("Projects", justify="right")
    has_status = any("status" in item for item in items)
    if has_status:
        table.add_column("Status")
        table.add_column("Lockfile")
    if verbose:
        table.add_column("Members")
        table.add_column("Workspace", style="ssc.path")

    for item in items:
        row: list[Any] = [str(item["name"]), str(len(item.get("members", [])))]
        if has_status:
            status = str(item.get("status", ""))
            row.append(Text(status, style=style_for_status(status)))
            row.append("updated" if item.get("lockfile_updated") else "-")
        if verbose:
            row.append(", ".join(item.get("members", [])))
            row.append(str(item.get("workspace", "")))
        table.add_row(*row)
    return table


def _render_subspace_errors(console: Console, items: list[dict[str, Any]]) -> None:
    for item in items:
        if item.get("error"):
            status = str(item.get("status", ""))
            style = style_for_status(status)
            console.print(
                Text(f"  {item['name']}", style=style),
                Text(f": {item['error']}"),
                sep="",
            )


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="ssc.error")
    op = Text(f"  {result.op}", style="ssc.op")
    sep = Text(" — ")
    console.print(label, op, sep, Text(msg))

    items = result.data.get("subspaces") or []
    if items:
        console.print(_subspace_table(items, verbose=verbose))
        _render_subspace_errors(console, items)

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Operation renderers ───────────────────────────────────────────────


def _render_partition(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render the subspace partition with each member's workspace path."""
    if not result.data.get("enabled", True):
        _status_line(console, result)
        _field(console, "enabled", False)
        return

    items = result.data.get("subspaces", [])
    for item in items:
        console.print(
            Text(item["name"], style="ssc.name"),
            Text(f"  {item['workspace']}", style="ssc.path"),
            sep="",
        )
        for member, path in zip(item["members"], item["packages"], strict=True):
            console.print(Text(f"  {member}  "), Text(path, style="ssc.path"), sep="")
    count = result.data.get("count", len(items))
    projects = result.data.get("project_count", 0)
    console.print(f"\n{count} subspaces, {projects} projects")
    if verbose:
        _render_meta(console, result)


def _render_pipeline(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render generate/install results as a status table."""
    _status_line(console, result)
    if not result.data.get("enabled", True):
        _field(console, "enabled", False)
        return

    items = result.data.get("subspaces", [])
    if items:
        console.print(_subspace_table(items, verbose=verbose))
        _render_subspace_errors(console, items)
    if verbose:
        _render_meta(console, result)


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "partition": _render_partition,
    "generate": _render_pipeline,
    "install": _render_pipeline,
}
