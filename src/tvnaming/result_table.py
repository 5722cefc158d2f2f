from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Sequence

from rich.console import Console
from rich.table import Table

if TYPE_CHECKING:  # pragma: no cover
    from .catalog import PatternCatalog
    from .models import ParseResult


SUCCESS_COLOR = "green"
WARNING_COLOR = "yellow"
ERROR_COLOR = "red"
DIM_COLOR = "dim"

SUCCESS_SYMBOL = "✓"
ERROR_SYMBOL = "✗"


def _episodes(values: Sequence[int]) -> str:
    return ", ".join(str(value) for value in values)


def _dim_if_empty(value: object) -> str:
    if value in ("", 0, (), None):
        return f"[{DIM_COLOR}]-[/{DIM_COLOR}]"
    return str(value)


class ResultTableRenderer:
    """Renders parse results and catalog summaries as Rich tables."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console()

    @staticmethod
    def _status(result: ParseResult) -> str:
        if result.regex_used:
            return f"[{SUCCESS_COLOR}]{SUCCESS_SYMBOL}[/{SUCCESS_COLOR}]"
        return f"[{ERROR_COLOR}]{ERROR_SYMBOL}[/{ERROR_COLOR}]"

    def render_results_table(self, results: Sequence[ParseResult], *, title: str = "Parse Results") -> Table:
        """Build a table with one row per parsed name.

        Args:
            results: Parse results, matched or empty
            title: Table title

        Returns:
            Rich Table instance ready to print
        """
        table = Table(title=title, show_header=True, header_style="bold")
        table.add_column("", no_wrap=True)
        table.add_column("Name", style="cyan", overflow="fold")
        table.add_column("Series")
        table.add_column("Season", justify="right")
        table.add_column("Episodes", justify="right")
        table.add_column("Absolute", justify="right")
        table.add_column("Air Date")
        table.add_column("Group")
        table.add_column("Quality")
        table.add_column("Rule", style=DIM_COLOR)

        for result in results:
            table.add_row(
                self._status(result),
                result.original_name,
                _dim_if_empty(result.series_name),
                _dim_if_empty(result.season_number),
                _dim_if_empty(_episodes(result.episode_numbers)),
                _dim_if_empty(_episodes(result.absolute_episode_numbers)),
                _dim_if_empty(result.air_date.isoformat() if result.air_date else None),
                _dim_if_empty(result.release_group),
                str(result.quality),
                _dim_if_empty(result.regex_used),
            )
        return table

    def render_catalog_table(self, catalog: PatternCatalog) -> Table:
        """Build a table listing every rule of ``catalog`` in priority order."""
        table = Table(title=f"Pattern Catalog: {catalog.name}", show_header=True, header_style="bold")
        table.add_column("#", justify="right", style=DIM_COLOR)
        table.add_column("Rule", style="cyan", no_wrap=True)
        table.add_column("Self-tests", justify="right")

        for index, rule in enumerate(catalog):
            count = len(rule.tests)
            color = SUCCESS_COLOR if count else WARNING_COLOR
            table.add_row(str(index), rule.name, f"[{color}]{count}[/{color}]")
        return table

    def print_results(self, results: Sequence[ParseResult], *, title: str = "Parse Results") -> None:
        self.console.print(self.render_results_table(results, title=title))

    def print_catalog(self, catalog: PatternCatalog) -> None:
        self.console.print(self.render_catalog_table(catalog))
