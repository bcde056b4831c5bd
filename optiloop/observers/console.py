"""
Console observers for human-readable progress output.

ConsoleObserver renders with the rich library; LoggingObserver writes
structured records to an explicitly supplied logging.Logger.
"""

from typing import TYPE_CHECKING, Optional
import logging

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..kv import KV, KVValue
from .base import Observer

if TYPE_CHECKING:
    from ..executor.result import OptimizationResult

# Standard fields shown first, in this order
_HEADLINE = ("iter", "cost", "best_cost", "time")


def _format_value(value: KVValue) -> str:
    if isinstance(value, float):
        return f"{value:.6g}"
    return str(value)


class ConsoleObserver(Observer):
    """
    One line per fired iteration on a rich console.

    Example:
        >>> executor.add_observer("console", ConsoleObserver(), ObserverMode.every(10))
    """

    def __init__(self, console: Optional[Console] = None, show_extra: bool = True):
        """
        Args:
            console: Console to write to (a new one is created if omitted)
            show_extra: Also print solver diagnostics and counters
        """
        self.console = console or Console()
        self.show_extra = show_extra

    def notify(self, record: KV) -> None:
        parts = []
        if "iter" in record:
            parts.append(f"[bold cyan]iter {record['iter']:>5}[/bold cyan]")
        for key in _HEADLINE[1:]:
            if key in record:
                parts.append(f"{key} [green]{_format_value(record[key])}[/green]")

        if self.show_extra:
            extra = [
                f"[dim]{key}={_format_value(value)}[/dim]"
                for key, value in record.items()
                if key not in _HEADLINE
            ]
            parts.extend(extra)

        self.console.print("  ".join(parts))

    def finish(self, result: "OptimizationResult") -> None:
        table = Table(show_header=False, box=None)
        table.add_column("Field", style="bold")
        table.add_column("Value")
        table.add_row("Best cost", _format_value(float(result.best_cost)))
        table.add_row("Best iteration", str(result.state.last_best_iteration))
        table.add_row("Iterations", str(result.iterations))
        table.add_row("Termination", str(result.termination_reason))
        table.add_row("Time", f"{result.state.elapsed:.3f}s")

        style = "green" if result.success else "red"
        self.console.print(
            Panel(table, title=f"[bold]{result.solver_name}[/bold]", border_style=style)
        )


class LoggingObserver(Observer):
    """
    Structured records through a caller-owned logger.

    The logger is required so sinks never write to ambient global state.

    Example:
        >>> log = logging.getLogger("my_app.optimization")
        >>> executor.add_observer("log", LoggingObserver(log), ObserverMode.always())
    """

    def __init__(self, logger: logging.Logger, level: int = logging.INFO):
        if not isinstance(logger, logging.Logger):
            raise TypeError(f"logger must be a logging.Logger, got {type(logger)}")
        self.logger = logger
        self.level = level

    def notify(self, record: KV) -> None:
        fields = " ".join(f"{k}={_format_value(v)}" for k, v in record.items())
        self.logger.log(self.level, fields, extra={"kv": record.to_dict()})

    def finish(self, result: "OptimizationResult") -> None:
        self.logger.log(
            self.level,
            f"finished: reason={result.termination_reason} "
            f"best_cost={_format_value(float(result.best_cost))} "
            f"iters={result.iterations}",
        )
