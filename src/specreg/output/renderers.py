"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from specreg.output.console import create_console, get_output, style_for_direction

if TYPE_CHECKING:
    from rich.console import Console

    from specreg.services.result import ServiceResult


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
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    if result.op == "check":
        return "\n".join(result.data.get("checked", []))

    name = result.data.get("name")
    if name is not None:
        return str(name)
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK status line."""
    label = Text("OK", style="specreg.ok")
    op = Text(f"  {result.op}", style="specreg.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    if isinstance(value, (list, tuple)):
        value = ", ".join(str(v) for v in value) if value else "-"
    elif value is None:
        value = "-"
    k = Text(f"  {key}: ", style="specreg.key")
    if key == "name":
        v = Text(str(value), style="specreg.name")
    elif key in ("source_path", "path"):
        v = Text(str(value), style="specreg.path")
    else:
        v = Text(str(value))
    console.print(k, v, end="")
    console.print()


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print the meta block (verbose only)."""
    if not result.meta:
        return

    console.print()
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        console.print(f"    {k}: {v}", markup=False)


def _port_table(ports: list[dict[str, Any]]) -> Table:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Port", style="specreg.name", no_wrap=True)
    table.add_column("Direction")
    table.add_column("Type", style="specreg.type")
    for port in ports:
        direction = str(port.get("direction", ""))
        table.add_row(
            str(port.get("name", "")),
            Text(direction, style=style_for_direction(direction)),
            str(port.get("type", "")),
        )
    return table


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="specreg.error")
    op = Text(f"  {result.op}", style="specreg.op")
    sep = Text(" — ")
    console.print(label, op, sep, Text(msg))

    if result.op == "check":
        _render_issues(console, result.data.get("issues", []), verbose=verbose)
        return

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}", markup=False)


# ── Show renderers ────────────────────────────────────────────────────


def _render_project(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key in (
        "name",
        "source_path",
        "typekit",
        "used_task_libraries",
        "imported_typekits",
        "tasks",
        "deployments",
    ):
        if key in result.data:
            _field(console, key, result.data[key])
    if verbose:
        _render_meta(console, result)


def _render_typekit(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _status_line(console, result)
    _field(console, "name", d.get("name"))

    exported = set(d.get("interface_types", []))
    opaques: dict[str, str] = d.get("opaques", {})
    m_types = set(d.get("m_types", []))

    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Type", style="specreg.type", no_wrap=True)
    table.add_column("Interface")
    table.add_column("Intermediate")
    for type_name in d.get("types", []):
        intermediate = opaques.get(type_name, "")
        if type_name in m_types:
            intermediate = "(generated)"
        table.add_row(type_name, "yes" if type_name in exported else "no", intermediate)
    console.print(table)
    console.print(f"\n{len(d.get('types', []))} types")


def _render_type(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _status_line(console, result)
    for key in ("name", "category", "size", "element", "length", "container", "symbols"):
        if key in d:
            _field(console, key, d[key])
    _field(console, "interface", "yes" if d.get("interface") else "no")
    _field(console, "declared_by", d.get("declared_by", []))
    if "opaque" in d and d["opaque"] != d.get("name"):
        _field(console, "opaque", d["opaque"])
    if "intermediate" in d and d["intermediate"] != d.get("name"):
        _field(console, "intermediate", d["intermediate"])

    fields = d.get("fields", [])
    if fields:
        table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
        table.add_column("Field", style="specreg.name", no_wrap=True)
        table.add_column("Type", style="specreg.type")
        for f in fields:
            table.add_row(str(f.get("name", "")), str(f.get("type", "")))
        console.print(table)

    if verbose:
        _field(console, "dependencies", d.get("dependencies", []))
        _render_meta(console, result)


def _render_task(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _status_line(console, result)
    for key in ("name", "project", "superclass"):
        _field(console, key, d.get(key))
    ports = d.get("ports", [])
    if ports:
        console.print(_port_table(ports))
    else:
        console.print("  no ports")


def _render_deployment(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _status_line(console, result)
    _field(console, "name", d.get("name"))
    _field(console, "project", d.get("project"))

    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Task", style="specreg.name", no_wrap=True)
    table.add_column("Model")
    for task in d.get("tasks", []):
        table.add_row(str(task.get("name", "")), str(task.get("model", "")))
    console.print(table)


def _render_deployed_task(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    d = result.data
    _status_line(console, result)
    for key in ("name", "deployment", "model"):
        _field(console, key, d.get(key))
    ports = d.get("task_model", {}).get("ports", [])
    if ports:
        console.print(_port_table(ports))


# ── Check renderer ────────────────────────────────────────────────────


def _render_issues(console: Console, issues: list[dict[str, Any]], *, verbose: bool) -> None:
    for issue in issues:
        code = str(issue.get("code", ""))
        project = issue.get("project", "?")
        console.print(
            Text("  "),
            Text(code, style="specreg.error"),
            Text(f" {project}: ", style="specreg.name"),
            Text(str(issue.get("message", ""))),
            sep="",
        )
        if verbose:
            for k, v in issue.get("detail", {}).items():
                console.print(f"    {k}: {v}", markup=False)


def _render_check(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render a check with no failures."""
    checked = result.data.get("checked", [])
    console.print(f"[specreg.ok]OK[/specreg.ok]  {len(checked)} projects loaded, no issues found.")
    if verbose:
        for name in checked:
            console.print(f"  {name}", markup=False)


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, dict):
            _field(console, key, _json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "show_project": _render_project,
    "show_typekit": _render_typekit,
    "show_type": _render_type,
    "show_task": _render_task,
    "show_deployment": _render_deployment,
    "show_deployed_task": _render_deployed_task,
    "check": _render_check,
}
