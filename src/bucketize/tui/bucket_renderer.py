"""
TUI Bucket Renderer

Renders a Bucketizer as a Rich table so configured bucket sets can be
inspected in the terminal.
"""

from typing import Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from bucketize.bucketizer import Bucket, Bucketizer

HEADER_STYLE = "bold blue"
INERT_STYLE = "bold yellow"
OUTPUT_STYLE = "bold white"


def _fmt_bound(value: float) -> str:
    return f"{value:g}"


def format_range(bucket: Bucket) -> str:
    """Formats a bucket's bounds in interval notation, e.g. `[5, 10)`."""
    lower = "(-inf" if bucket.lower is None else f"[{_fmt_bound(bucket.lower)}"
    upper = "+inf)" if bucket.upper is None else f"{_fmt_bound(bucket.upper)})"
    return f"{lower}, {upper}"


class BucketRenderer:
    """Renders bucket sets in match-priority order."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def build_table(self, bucketizer: Bucketizer, title: Optional[str] = None) -> Table:
        table = Table(
            title=title,
            box=box.ROUNDED,
            header_style=HEADER_STYLE,
            border_style="dim",
            padding=(0, 1),
            expand=False,
        )
        table.add_column("#", justify="right", width=3)
        table.add_column("Range", style="cyan")
        table.add_column("Output", justify="right")

        if not bucketizer.buckets:
            table.add_row("", "[dim]no buckets[/]", "")
            return table

        for index, bucket in enumerate(bucketizer.buckets, start=1):
            range_str = escape(format_range(bucket))
            if bucket.is_inert:
                range_str = f"[{INERT_STYLE}]{range_str} (inert)[/]"
            table.add_row(str(index), range_str, f"[{OUTPUT_STYLE}]{bucket.output:g}[/]")

        return table

    def render(self, bucketizer: Bucketizer, title: Optional[str] = None) -> None:
        """Prints the bucket table to the console."""
        self.console.print(self.build_table(bucketizer, title=title))
