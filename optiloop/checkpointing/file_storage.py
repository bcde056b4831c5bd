"""File-based checkpoint stores using pickle payloads and JSON metadata."""

from dataclasses import asdict, dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple
import json
import os
import pickle
import tempfile

from ..errors import CheckpointError
from ..solver import Solver
from ..state import State
from .base import CheckpointStore, validate_key


@dataclass
class CheckpointInfo:
    """Human-readable metadata stored next to each checkpoint."""
    key: str
    iteration: int
    best_cost: float
    solver: str
    state_type: str
    saved_at: str  # ISO format

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CheckpointInfo":
        """Deserialize from dictionary."""
        return cls(**data)

    @classmethod
    def describe(cls, key: str, solver: Solver, state: State) -> "CheckpointInfo":
        return cls(
            key=key,
            iteration=state.iteration,
            best_cost=float(state.best_cost),
            solver=solver.display_name,
            state_type=type(state).__name__,
            saved_at=datetime.now().isoformat(),
        )


def _check_pair(key: str, payload: Any) -> Tuple[Solver, State]:
    if (
        not isinstance(payload, tuple)
        or len(payload) != 2
        or not isinstance(payload[0], Solver)
        or not isinstance(payload[1], State)
    ):
        raise CheckpointError(key, "payload is not a (solver, state) pair")
    return payload


class MemoryCheckpointStore(CheckpointStore):
    """
    In-process store.

    Snapshots are pickled on save so that later mutation of the live
    solver or state cannot leak into a stored checkpoint.
    """

    def __init__(self):
        self._snapshots: Dict[str, bytes] = {}

    def save(self, key: str, solver: Solver, state: State) -> None:
        validate_key(key)
        try:
            self._snapshots[key] = pickle.dumps((solver, state))
        except (pickle.PicklingError, TypeError, AttributeError) as e:
            raise CheckpointError(key, f"cannot serialize snapshot: {e}") from e

    def load(self, key: str) -> Tuple[Solver, State]:
        if key not in self._snapshots:
            raise CheckpointError(key, "no checkpoint stored")
        return _check_pair(key, pickle.loads(self._snapshots[key]))

    def exists(self, key: str) -> bool:
        return key in self._snapshots

    def delete(self, key: str) -> None:
        self._snapshots.pop(key, None)

    def list_keys(self) -> List[str]:
        return sorted(self._snapshots)


class FileCheckpointStore(CheckpointStore):
    """
    One pickle file per key, written atomically.

    Layout:
        base_dir/<key>.ckpt   pickled (solver, state)
        base_dir/<key>.json   CheckpointInfo metadata
    """

    def __init__(self, base_dir: str = ".optiloop_checkpoints"):
        self.base_dir = Path(base_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def _payload_path(self, key: str) -> Path:
        return self.base_dir / f"{validate_key(key)}.ckpt"

    def _info_path(self, key: str) -> Path:
        return self.base_dir / f"{validate_key(key)}.json"

    def save(self, key: str, solver: Solver, state: State) -> None:
        """Write snapshot to a temp file, then rename over the old one."""
        try:
            data = pickle.dumps((solver, state))
        except (pickle.PicklingError, TypeError, AttributeError) as e:
            raise CheckpointError(key, f"cannot serialize snapshot: {e}") from e

        info = CheckpointInfo.describe(key, solver, state)
        try:
            self._write_atomic(self._payload_path(key), data)
            self._write_atomic(
                self._info_path(key),
                json.dumps(info.to_dict(), indent=2).encode("utf-8"),
            )
        except OSError as e:
            raise CheckpointError(key, f"cannot write to {self.base_dir}: {e}") from e

    def load(self, key: str) -> Tuple[Solver, State]:
        path = self._payload_path(key)
        if not path.exists():
            raise CheckpointError(key, f"no checkpoint at {path}")
        try:
            with open(path, "rb") as f:
                payload = pickle.load(f)
        except Exception as e:
            raise CheckpointError(key, f"cannot read {path}: {e}") from e
        return _check_pair(key, payload)

    def info(self, key: str) -> Optional[CheckpointInfo]:
        """Metadata of a stored checkpoint, or None if absent."""
        path = self._info_path(key)
        if not path.exists():
            return None
        with open(path, "r") as f:
            return CheckpointInfo.from_dict(json.load(f))

    def exists(self, key: str) -> bool:
        return self._payload_path(key).exists()

    def delete(self, key: str) -> None:
        for path in (self._payload_path(key), self._info_path(key)):
            if path.exists():
                path.unlink()

    def list_keys(self) -> List[str]:
        return sorted(p.stem for p in self.base_dir.glob("*.ckpt"))

    def _write_atomic(self, path: Path, data: bytes) -> None:
        fd, tmp_name = tempfile.mkstemp(dir=self.base_dir, prefix=f".{path.name}.")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
