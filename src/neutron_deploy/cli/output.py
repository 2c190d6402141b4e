"""Rendering helpers for plans, attributes, and diagnostics."""

from typing import Any, Dict, Iterable, List, Tuple

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.panel import Panel

from ..provisioners.base import ChangeType, ProvisionPlan
from ..utils.errors import Diagnostic, ErrorSeverity

console = Console()

CHANGE_STYLES = {
    ChangeType.CREATE: ("+", "green"),
    ChangeType.UPDATE: ("~", "yellow"),
    ChangeType.REPLACE: ("-/+", "magenta"),
    ChangeType.DELETE: ("-", "red"),
    ChangeType.NO_CHANGE: ("=", "dim"),
}

SEVERITY_STYLES = {
    ErrorSeverity.CRITICAL: "bold red",
    ErrorSeverity.ERROR: "red",
    ErrorSeverity.WARNING: "yellow",
    ErrorSeverity.INFO: "cyan",
}


def print_diagnostics(diagnostics: Iterable[Diagnostic]) -> None:
    """Print diagnostics with their suggestions."""
    for diagnostic in diagnostics:
        style = SEVERITY_STYLES.get(diagnostic.severity, "white")
        prefix = f"{diagnostic.address}: " if diagnostic.address else ""
        console.print(
            f"[{style}]{diagnostic.severity.value.upper()}:[/{style}] {escape(prefix + diagnostic.summary)}"
        )
        if diagnostic.detail and diagnostic.detail not in diagnostic.summary:
            console.print(f"  [dim]{escape(diagnostic.detail)}[/dim]")
        for suggestion in diagnostic.suggestions:
            console.print(f"  [dim]- {escape(suggestion)}[/dim]")


def print_plan(plans: List[Tuple[str, ProvisionPlan]]) -> None:
    """Print a plan table and a change summary."""
    table = Table(show_header=True, header_style="bold")
    table.add_column("", width=3)
    table.add_column("Address", style="cyan")
    table.add_column("Action")
    table.add_column("Changed attributes", style="dim")

    counts = {change_type: 0 for change_type in ChangeType}
    for address, plan in plans:
        symbol, style = CHANGE_STYLES[plan.change_type]
        counts[plan.change_type] += 1
        table.add_row(
            f"[{style}]{symbol}[/{style}]",
            address,
            f"[{style}]{plan.change_type.value}[/{style}]",
            ", ".join(plan.changed_attributes),
        )

    console.print(table)
    console.print(
        f"Plan: {counts[ChangeType.CREATE]} to create, "
        f"{counts[ChangeType.UPDATE]} to update, "
        f"{counts[ChangeType.REPLACE]} to replace, "
        f"{counts[ChangeType.DELETE]} to delete."
    )


def print_attributes(address: str, attributes: Dict[str, Any], format: str = "table") -> None:
    """Print the attributes of one data source or resource."""
    if format == "json":
        console.print_json(data={address: attributes})
        return

    console.print(Panel(address, style="bold blue"))

    table = Table(show_header=True, header_style="bold")
    table.add_column("Attribute", style="cyan")
    table.add_column("Value", style="white")

    for name, value in sorted(attributes.items()):
        table.add_row(name, _format_value(value))

    console.print(table)


def _format_value(value: Any) -> str:
    if value is None or value == [] or value == {}:
        return "[dim]-[/dim]"
    if isinstance(value, list):
        return "\n".join(_format_value(v) for v in value)
    if isinstance(value, dict):
        return escape(", ".join(f"{k}={v}" for k, v in value.items()))
    return escape(str(value))
