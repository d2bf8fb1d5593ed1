"""Rich output helpers for the CLI."""

from __future__ import annotations

from typing import Any

from rich.console import Console
from rich.table import Table

console = Console()


def fmt_amount(amount: Any) -> str:
    value = float(amount)
    return "free" if value == 0 else f"$ {value:,.2f}"


def plans_table(items: list[dict[str, Any]]) -> Table:
    table = Table(
        title=f"Plans ({len(items)})",
        show_header=True,
        header_style="bold cyan",
        border_style="dim",
        show_lines=False,
    )
    table.add_column("Name", style="bold", no_wrap=True)
    table.add_column("Monthly (UYU)", justify="right")
    table.add_column("Features")
    table.add_column("ID", style="dim", no_wrap=True)

    for p in items:
        table.add_row(
            p["name"],
            fmt_amount(p["amount"]),
            "\n".join(p.get("features", [])),
            p["id"],
        )
    return table
