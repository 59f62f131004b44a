"""
Execution side of the waypoint pipeline.

The driver feeds generated waypoints to the collaborator interfaces:
- PathInterpolator: Cartesian interpolation, reports the achieved fraction
- TrajectoryExecutor: blocking execution
- VisualizationSink: display only
- OperatorPrompt: confirmation before planning and before execution

Offline implementations of each are provided for running without a
motion-planning middleware.
"""

from weldpath.execution.driver import CycleResult, PathExecutionDriver
from weldpath.execution.interfaces import (
    CartesianPlan,
    ExecutionResult,
    ExecutionStatusCode,
    OperatorPrompt,
    PathInterpolator,
    TrajectoryExecutor,
    VisualizationSink,
)
from weldpath.execution.offline import (
    AutoConfirm,
    CartesianTrajectory,
    ConsolePrompt,
    OfflineCartesianInterpolator,
    OfflineExecutor,
    RecordingVisualizer,
)

__all__ = [
    # Driver
    "PathExecutionDriver",
    "CycleResult",
    # Interfaces
    "CartesianPlan",
    "ExecutionResult",
    "ExecutionStatusCode",
    "PathInterpolator",
    "TrajectoryExecutor",
    "VisualizationSink",
    "OperatorPrompt",
    # Offline collaborators
    "CartesianTrajectory",
    "OfflineCartesianInterpolator",
    "OfflineExecutor",
    "RecordingVisualizer",
    "ConsolePrompt",
    "AutoConfirm",
]
