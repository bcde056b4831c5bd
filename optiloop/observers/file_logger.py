"""
File observer writing progress records as JSON lines.

Useful for post-analysis and for comparing runs. The first line of the
file is a header written once at registration; every fired iteration
then appends one record.
"""

from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
import json
import logging
import math

from ..kv import KV
from .base import Observer

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1


class JsonLinesObserver(Observer):
    """
    Append-only JSONL writer.

    Example file:
        {"type": "header", "run": "rosenbrock", "format_version": 1, "created_at": "..."}
        {"type": "record", "iter": 0, "cost": 24.2, "best_cost": 24.2, ...}
        {"type": "record", "iter": 10, "cost": 3.1, "best_cost": 3.1, ...}

    Non-finite costs (e.g. the inf of an unevaluated start) are written
    as null so every line is strict JSON.

    Example:
        >>> sink = JsonLinesObserver("runs/rosenbrock.jsonl", run_name="rosenbrock")
        >>> executor.add_observer("file", sink, ObserverMode.every(5))
    """

    def __init__(
        self,
        path: Union[str, Path],
        run_name: Optional[str] = None,
        mode: str = "w",
    ):
        """
        Args:
            path: Output file
            run_name: Label stored in the header line
            mode: 'w' to start a fresh file, 'a' to append to an existing one
        """
        if mode not in ("w", "a"):
            raise ValueError(f"mode must be 'w' or 'a', got {mode!r}")
        self.path = Path(path)
        self.run_name = run_name
        self.mode = mode
        self.n_records = 0

    def setup(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        if self.mode == "w":
            self.path.write_text("")

        header = {
            "type": "header",
            "run": self.run_name,
            "format_version": FORMAT_VERSION,
            "created_at": datetime.now().isoformat(),
        }
        self._append(header)
        logger.info(f"JsonLinesObserver initialized: {self.path}")

    def notify(self, record: KV) -> None:
        entry: Dict[str, Any] = {"type": "record"}
        for key, value in record.items():
            # Strict JSON has no inf/nan
            if isinstance(value, float) and not math.isfinite(value):
                value = None
            entry[key] = value
        self._append(entry)
        self.n_records += 1

    def _append(self, entry: Dict[str, Any]) -> None:
        with open(self.path, "a") as f:
            f.write(json.dumps(entry, allow_nan=False) + "\n")
            f.flush()


def load_records(path: Union[str, Path], include_header: bool = False) -> List[Dict[str, Any]]:
    """
    Read records written by JsonLinesObserver.

    Args:
        path: JSONL file
        include_header: Also return header lines

    Returns:
        Entries in file order, without the "type" field.
    """
    log_path = Path(path)
    if not log_path.exists():
        raise FileNotFoundError(f"Record file not found: {path}")

    entries = []
    with open(log_path, "r") as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            try:
                entry = json.loads(line)
            except json.JSONDecodeError as e:
                logger.warning(f"Failed to parse record line: {e}")
                continue
            kind = entry.pop("type", "record")
            if kind == "header" and not include_header:
                continue
            entries.append(entry)
    return entries
