"""
Checkpointing: periodic persistence of (solver, state) for resumable runs.

The store interface is format-agnostic; serialization is the store's
responsibility.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple
import logging
import re

from ..errors import CheckpointError, InvalidConfiguration
from ..solver import Solver
from ..state import State

logger = logging.getLogger(__name__)

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.\-]+$")


def validate_key(key: str) -> str:
    """
    Check that a checkpoint key is a plain identifier.

    Raises:
        InvalidConfiguration: For empty keys or keys with path separators.
    """
    if not isinstance(key, str) or not _KEY_PATTERN.match(key) or key in (".", ".."):
        raise InvalidConfiguration(
            f"Checkpoint key must match [A-Za-z0-9_.-]+, got {key!r}"
        )
    return key


class FrequencyKind(str, Enum):
    NEVER = "never"
    ALWAYS = "always"
    EVERY = "every"


@dataclass(frozen=True)
class CheckpointingFrequency:
    """
    How often checkpoints are written.

    Example:
        >>> CheckpointingFrequency.every(20).due(40)
        True
    """

    kind: FrequencyKind
    n: Optional[int] = None

    def __post_init__(self):
        if self.kind == FrequencyKind.EVERY:
            if not isinstance(self.n, int) or isinstance(self.n, bool) or self.n <= 0:
                raise InvalidConfiguration(
                    f"CheckpointingFrequency.every requires a positive integer, got {self.n!r}"
                )

    @classmethod
    def never(cls) -> "CheckpointingFrequency":
        return cls(FrequencyKind.NEVER)

    @classmethod
    def always(cls) -> "CheckpointingFrequency":
        return cls(FrequencyKind.ALWAYS)

    @classmethod
    def every(cls, n: int) -> "CheckpointingFrequency":
        return cls(FrequencyKind.EVERY, n)

    def due(self, iteration: int) -> bool:
        """Whether a periodic checkpoint is due at this iteration."""
        if self.kind == FrequencyKind.ALWAYS:
            return True
        if self.kind == FrequencyKind.EVERY:
            return iteration % self.n == 0
        return False


class CheckpointStore(ABC):
    """Abstract storage for (solver, state) snapshots keyed by run."""

    @abstractmethod
    def save(self, key: str, solver: Solver, state: State) -> None:
        """Persist a snapshot, replacing any previous one for the key."""
        pass

    @abstractmethod
    def load(self, key: str) -> Tuple[Solver, State]:
        """
        Load a snapshot.

        Raises:
            CheckpointError: If no snapshot exists or it cannot be read.
        """
        pass

    @abstractmethod
    def exists(self, key: str) -> bool:
        """Whether a snapshot exists for the key."""
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove a snapshot if present."""
        pass

    @abstractmethod
    def list_keys(self) -> List[str]:
        """All stored keys, sorted."""
        pass


class Checkpointing:
    """
    Checkpoint policy for one run.

    Writes when the frequency is due, and unconditionally when the run
    ends. Failures are recoverable unless fatal=True.
    """

    def __init__(
        self,
        store: CheckpointStore,
        key: str = "default",
        frequency: Optional[CheckpointingFrequency] = None,
        fatal: bool = False,
        resume: bool = True,
    ):
        if not isinstance(store, CheckpointStore):
            raise InvalidConfiguration(
                f"store must be a CheckpointStore, got {type(store).__name__}"
            )
        self.store = store
        self.key = validate_key(key)
        self.frequency = frequency or CheckpointingFrequency.always()
        self.fatal = fatal
        self.resume = resume
        self._last_attempted: Optional[int] = None

    def maybe_save(self, solver: Solver, state: State, final: bool = False) -> Optional[CheckpointError]:
        """
        Save when due, or when final unless this iteration was already attempted.

        Returns:
            The error for a failed, non-fatal save; None otherwise.

        Raises:
            CheckpointError: If the save failed and the policy is fatal.
        """
        if final:
            if self._last_attempted == state.iteration:
                return None
        elif not self.frequency.due(state.iteration):
            return None

        self._last_attempted = state.iteration
        try:
            self.store.save(self.key, solver, state)
        except Exception as e:
            error = e if isinstance(e, CheckpointError) else CheckpointError(
                self.key, f"save failed at iteration {state.iteration}: {e}"
            )
            if error is not e:
                error.__cause__ = e
            if self.fatal:
                raise error
            logger.error(str(error), exc_info=True)
            return error

        logger.debug(f"Checkpoint '{self.key}' saved at iteration {state.iteration}")
        return None

    def load(self) -> Optional[Tuple[Solver, State]]:
        """
        Load the persisted pair when resuming is enabled and one exists.

        Raises:
            CheckpointError: If a checkpoint exists but cannot be read.
        """
        if not self.resume or not self.store.exists(self.key):
            return None
        solver, state = self.store.load(self.key)
        self._last_attempted = state.iteration
        logger.info(f"Resuming from checkpoint '{self.key}' at iteration {state.iteration}")
        return solver, state
