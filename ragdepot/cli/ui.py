# ragdepot/cli/ui.py
"""
Shared UI helpers for CLI commands.

Usage:
    from ragdepot.cli.ui import ui, console

    ui.header("ragdepot index")
    ui.success("Done!")
    name = ui.prompt_text("Collection", default="default")
"""

from __future__ import annotations

from typing import Iterable, Sequence, Tuple

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.prompt import Confirm, Prompt
from rich.table import Table

console = Console()


def format_bytes(size: int) -> str:
    value = float(size)
    for unit in ("B", "KB", "MB", "GB"):
        if value < 1024 or unit == "GB":
            return f"{value:.0f} {unit}" if unit == "B" else f"{value:.1f} {unit}"
        value /= 1024
    return f"{size} B"


class UI:
    """Consistent styling for every command."""

    # -------------------------------------------------------------------------
    # Output Methods
    # -------------------------------------------------------------------------

    def print(self, msg: str = "", style: str = "") -> None:
        if style:
            console.print(f"[{style}]{msg}[/{style}]")
        else:
            console.print(msg)

    def header(self, title: str, subtitle: str = "") -> None:
        """Fitted box around the title, used at the top of every command."""
        content = f"[bold]{title}[/bold]"
        if subtitle:
            content += f"\n[dim]{subtitle}[/dim]"
        console.print(Panel.fit(content, border_style="blue"))

    def section(self, title: str) -> None:
        console.print(f"\n[bold cyan]{title}[/bold cyan]")

    def success(self, msg: str) -> None:
        console.print(f"[green]✓[/green] {msg}")

    def error(self, msg: str) -> None:
        console.print(f"[red]✗[/red] {escape(msg)}")

    def warning(self, msg: str, detail: str = "") -> None:
        detail_str = f" [dim]({detail})[/dim]" if detail else ""
        console.print(f"[yellow]⚠[/yellow] {msg}{detail_str}")

    def info(self, msg: str) -> None:
        console.print(f"[dim]{msg}[/dim]")

    def status(self, name: str, ok: bool, detail: str = "") -> None:
        """Check/cross line with optional detail."""
        icon, color = ("✓", "green") if ok else ("✗", "red")
        detail_str = f" [dim]({detail})[/dim]" if detail else ""
        console.print(f"  [{color}]{icon}[/{color}] {name}{detail_str}")

    def panel(self, content: str, title: str = "", style: str = "blue") -> None:
        console.print(Panel(content, title=title, border_style=style))

    def key_values(self, rows: Iterable[Tuple[str, str]], title: str = "") -> None:
        """Two-column key/value table without borders."""
        table = Table(show_header=False, box=None, padding=(0, 2))
        table.add_column("Key", style="bold")
        table.add_column("Value", style="cyan")
        for key, value in rows:
            table.add_row(key, value)

        if title:
            console.print(Panel(table, title=f"[bold]{title}[/bold]", border_style="blue"))
        else:
            console.print(table)

    def table(self, columns: Sequence[str], rows: Iterable[Sequence[str]]) -> None:
        table = Table(show_header=True, header_style="bold")
        for i, column in enumerate(columns):
            table.add_column(column, style="cyan" if i == 0 else "")
        for row in rows:
            table.add_row(*row)
        console.print(table)

    def progress(self) -> Progress:
        """Progress bar for long-running loops (use as a context manager)."""
        return Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            TimeElapsedColumn(),
            console=console,
            transient=True,
        )

    # -------------------------------------------------------------------------
    # Prompt Methods
    # -------------------------------------------------------------------------

    def prompt_text(self, prompt: str, default: str = "") -> str:
        if default:
            return Prompt.ask(prompt, default=default, console=console)
        return Prompt.ask(prompt, console=console)

    def prompt_confirm(self, prompt: str, default: bool = True) -> bool:
        return Confirm.ask(prompt, default=default, console=console)


ui = UI()

__all__ = ["ui", "console", "UI", "format_bytes"]
