"""
optiloop - iterative optimization execution engine

Runs any solver implementing the Solver contract against a user problem,
with evaluation counting, best-solution tracking, termination checks,
observers and resumable checkpoints:

    import optiloop

    result = (
        optiloop.Executor(problem, solver, optiloop.IterState(param=x0))
        .configure(max_iters=500, target_cost=1e-8)
        .add_observer("console", optiloop.ConsoleObserver(), optiloop.ObserverMode.every(50))
        .checkpointing(optiloop.FileCheckpointStore("checkpoints"), key="run1",
                       frequency=optiloop.CheckpointingFrequency.every(100))
        .run()
    )
    print(result)
"""

__version__ = "0.1.0"

from .checkpointing import (
    CheckpointInfo,
    CheckpointStore,
    Checkpointing,
    CheckpointingFrequency,
    FileCheckpointStore,
    MemoryCheckpointStore,
)
from .errors import (
    CapabilityNotImplemented,
    CheckpointError,
    ExecutorStateError,
    InvalidConfiguration,
    ObserverError,
    OptiloopError,
    SolverError,
)
from .executor import (
    Executor,
    ExecutorConfig,
    OptimizationResult,
    RunPhase,
    run_concurrently,
)
from .kv import KV, make_kv
from .observers import (
    ConsoleObserver,
    JsonLinesObserver,
    LoggingObserver,
    Observer,
    ObserverMode,
    Observers,
    RecordCapture,
    load_records,
)
from .problem import Capability, FunctionProblem, Problem
from .solver import Solver
from .state import Individual, IterState, LinearProgramState, PopulationState, State
from .termination import (
    AbortSignal,
    ReasonKind,
    TerminationCriteria,
    TerminationReason,
    TerminationStatus,
    check_termination,
)

__all__ = [
    # Executor
    "Executor",
    "ExecutorConfig",
    "OptimizationResult",
    "RunPhase",
    "run_concurrently",
    # Problem and solver
    "Capability",
    "FunctionProblem",
    "Problem",
    "Solver",
    # State
    "State",
    "IterState",
    "PopulationState",
    "Individual",
    "LinearProgramState",
    "KV",
    "make_kv",
    # Termination
    "AbortSignal",
    "ReasonKind",
    "TerminationCriteria",
    "TerminationReason",
    "TerminationStatus",
    "check_termination",
    # Observers
    "Observer",
    "ObserverMode",
    "Observers",
    "ConsoleObserver",
    "LoggingObserver",
    "JsonLinesObserver",
    "RecordCapture",
    "load_records",
    # Checkpointing
    "CheckpointStore",
    "Checkpointing",
    "CheckpointingFrequency",
    "CheckpointInfo",
    "FileCheckpointStore",
    "MemoryCheckpointStore",
    # Errors
    "OptiloopError",
    "CapabilityNotImplemented",
    "SolverError",
    "ObserverError",
    "CheckpointError",
    "InvalidConfiguration",
    "ExecutorStateError",
]
