"""
Collaborator interfaces for planning, executing and displaying a waypoint path.

The waypoint generator never calls these; the PathExecutionDriver does.
Implementations may wrap a real motion-planning middleware or the offline
stand-ins in ``weldpath.execution.offline``.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Protocol

from weldpath.motion.pose import Pose3D
from weldpath.utils.errors import InvalidArgument


class ExecutionStatusCode(Enum):
    """Outcome of a blocking trajectory execution."""

    SUCCEEDED = auto()
    FAILED = auto()
    ABORTED = auto()


@dataclass
class ExecutionResult:
    """
    Status returned by a TrajectoryExecutor.
    """

    code: ExecutionStatusCode
    message: str
    executed_samples: int = 0
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.code is ExecutionStatusCode.SUCCEEDED

    @classmethod
    def succeeded(
        cls, message: str = "Succeeded", executed_samples: int = 0
    ) -> ExecutionResult:
        return cls(ExecutionStatusCode.SUCCEEDED, message, executed_samples)

    @classmethod
    def failed(
        cls,
        message: str,
        executed_samples: int = 0,
        error: Exception | None = None,
    ) -> ExecutionResult:
        return cls(ExecutionStatusCode.FAILED, message, executed_samples, error)

    @classmethod
    def aborted(
        cls, message: str = "Aborted", executed_samples: int = 0
    ) -> ExecutionResult:
        return cls(ExecutionStatusCode.ABORTED, message, executed_samples)


@dataclass(frozen=True)
class CartesianPlan:
    """Interpolated trajectory and the share of waypoints it covers.

    ``trajectory`` is opaque to the driver; it is only handed back to the
    executor and the visualization sink.
    """

    trajectory: Any
    fraction: float

    def __post_init__(self) -> None:
        if not 0.0 <= self.fraction <= 1.0:
            raise InvalidArgument(f"fraction must be in [0, 1], got {self.fraction}")

    @property
    def complete(self) -> bool:
        return self.fraction >= 1.0


class PathInterpolator(Protocol):
    def compute_cartesian_path(
        self,
        waypoints: Sequence[Pose3D],
        max_step: float,
        jump_threshold: float,
    ) -> CartesianPlan:
        """Interpolate waypoints at ``max_step`` meters; 0.0 disables the jump check."""
        ...


class TrajectoryExecutor(Protocol):
    def execute(self, trajectory: Any) -> ExecutionResult:
        """Block until the trajectory finishes or fails."""
        ...


class VisualizationSink(Protocol):
    """Display-only sink. Nothing it does may influence planning."""

    def delete_all_markers(self) -> None: ...

    def publish_text(self, text: str) -> None: ...

    def publish_path(self, waypoints: Sequence[Pose3D]) -> None: ...

    def publish_axis_labeled(self, pose: Pose3D, label: str) -> None: ...

    def publish_trajectory(self, trajectory: Any) -> None: ...

    def trigger(self) -> None:
        """Flush batched markers."""
        ...


class OperatorPrompt(Protocol):
    def confirm(self, message: str) -> bool:
        """Block until the operator answers; False stops the run."""
        ...
