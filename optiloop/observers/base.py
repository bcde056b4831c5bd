"""
Core observer system for per-iteration progress records.

Defines observer modes, the observer interface and the registry that
dispatches records to observers with error isolation.
"""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple
import logging

from ..errors import InvalidConfiguration, ObserverError
from ..kv import KV

if TYPE_CHECKING:
    from ..executor.result import OptimizationResult

logger = logging.getLogger(__name__)


class ModeKind(str, Enum):
    ALWAYS = "always"
    NEVER = "never"
    EVERY = "every"
    NEW_BEST = "new_best"


@dataclass(frozen=True)
class ObserverMode:
    """
    When an observer fires.

    Example:
        >>> ObserverMode.every(10).fires(iteration=20, improved=False)
        True
        >>> ObserverMode.new_best().fires(iteration=3, improved=False)
        False
    """

    kind: ModeKind
    n: Optional[int] = None

    def __post_init__(self):
        if self.kind == ModeKind.EVERY:
            if not isinstance(self.n, int) or isinstance(self.n, bool) or self.n <= 0:
                raise InvalidConfiguration(
                    f"ObserverMode.every requires a positive integer, got {self.n!r}"
                )

    @classmethod
    def always(cls) -> "ObserverMode":
        return cls(ModeKind.ALWAYS)

    @classmethod
    def never(cls) -> "ObserverMode":
        return cls(ModeKind.NEVER)

    @classmethod
    def every(cls, n: int) -> "ObserverMode":
        return cls(ModeKind.EVERY, n)

    @classmethod
    def new_best(cls) -> "ObserverMode":
        return cls(ModeKind.NEW_BEST)

    def fires(self, iteration: int, improved: bool) -> bool:
        """Whether an observer in this mode fires for the given iteration."""
        if self.kind == ModeKind.ALWAYS:
            return True
        if self.kind == ModeKind.EVERY:
            return iteration % self.n == 0
        if self.kind == ModeKind.NEW_BEST:
            return improved
        return False

    def __str__(self) -> str:
        if self.kind == ModeKind.EVERY:
            return f"Every({self.n})"
        return {
            ModeKind.ALWAYS: "Always",
            ModeKind.NEVER: "Never",
            ModeKind.NEW_BEST: "NewBest",
        }[self.kind]


class Observer:
    """
    Base class for progress sinks.

    Subclasses implement notify(); setup() and finish() are optional hooks.
    """

    def setup(self) -> None:
        """Called once when the observer is registered."""

    def notify(self, record: KV) -> None:
        """Receive the record of a fired iteration."""
        raise NotImplementedError

    def finish(self, result: "OptimizationResult") -> None:
        """Called once after the run terminated."""


class Observers:
    """
    Named registry of observers.

    Observers run synchronously in registration order. If one fails, the
    others still receive the record (error isolation); failures are
    logged and returned to the caller.

    Example:
        >>> observers = Observers()
        >>> observers.add("console", ConsoleObserver(), ObserverMode.every(10))
        >>> errors = observers.dispatch(record, iteration=10, improved=False)
    """

    def __init__(self):
        self._entries: Dict[str, Tuple[Observer, ObserverMode]] = {}

    def add(
        self,
        name: str,
        observer: Observer,
        mode: Optional[ObserverMode] = None,
    ) -> None:
        """
        Register an observer and run its setup().

        Raises:
            InvalidConfiguration: If the name is already registered.
            ObserverError: If setup() fails; the observer is not registered.
        """
        if name in self._entries:
            raise InvalidConfiguration(f"Observer '{name}' is already registered")
        if not callable(getattr(observer, "notify", None)):
            raise TypeError(f"Observer must define notify(), got {type(observer)}")
        mode = mode or ObserverMode.always()

        setup = getattr(observer, "setup", None)
        try:
            if setup is not None:
                setup()
        except Exception as e:
            raise ObserverError(name, f"setup failed: {e}") from e

        self._entries[name] = (observer, mode)
        logger.debug(f"Registered observer '{name}' ({mode})")

    def remove(self, name: str) -> None:
        if self._entries.pop(name, None) is not None:
            logger.debug(f"Unregistered observer '{name}'")

    def get(self, name: str) -> Optional[Observer]:
        entry = self._entries.get(name)
        return entry[0] if entry else None

    @property
    def names(self) -> List[str]:
        return list(self._entries)

    def dispatch(self, record: KV, iteration: int, improved: bool) -> List[ObserverError]:
        """
        Send the record to every observer whose mode fires.

        Each observer gets its own copy, so a sink editing its record
        cannot change what later sinks or the state see.

        Returns:
            Errors raised by failing observers, in registration order.
        """
        errors: List[ObserverError] = []
        for name, (observer, mode) in self._entries.items():
            if not mode.fires(iteration, improved):
                continue
            try:
                observer.notify(record.copy())
            except Exception as e:
                error = ObserverError(name, f"notify failed at iteration {iteration}: {e}")
                error.__cause__ = e
                logger.error(str(error), exc_info=True)
                errors.append(error)
        return errors

    def finish(self, result: "OptimizationResult") -> List[ObserverError]:
        """Run finish() on all observers, isolating failures."""
        errors: List[ObserverError] = []
        for name, (observer, _) in self._entries.items():
            hook = getattr(observer, "finish", None)
            if hook is None:
                continue
            try:
                hook(result)
            except Exception as e:
                error = ObserverError(name, f"finish failed: {e}")
                error.__cause__ = e
                logger.error(str(error), exc_info=True)
                errors.append(error)
        return errors

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)
