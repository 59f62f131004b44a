"""
In-process stand-ins for the motion-planning collaborators.

These let the demo loop run end-to-end without a middleware session:

- OfflineCartesianInterpolator: straight-line position / slerp orientation
  interpolation between waypoints with a reach limit and a relative jump
  threshold, reporting the achieved fraction.
- OfflineExecutor: walks a CartesianTrajectory sample by sample.
- RecordingVisualizer: records and logs markers instead of rendering them.
- ConsolePrompt / AutoConfirm: operator confirmation from stdin or scripted.
"""

from __future__ import annotations

import logging
import math
import threading
import time
from collections import deque
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

import numpy as np
from numpy.typing import NDArray
from scipy.spatial.transform import Rotation, Slerp

from weldpath.config import EEF_STEP_M, REACH_M, TRACE
from weldpath.execution.interfaces import CartesianPlan, ExecutionResult
from weldpath.motion.pose import Pose3D, quaternion_angle
from weldpath.protocol.messages import poses_from_array, poses_to_array
from weldpath.utils.errors import InvalidArgument, PlanningError

logger = logging.getLogger(__name__)


@dataclass
class CartesianTrajectory:
    """
    Densely interpolated Cartesian path.

    Attributes:
        samples: (N, 7) array of [x, y, z, qx, qy, qz, qw]
        waypoint_index: (N,) index of the waypoint each sample belongs to;
            -1 marks the start pose
        max_step: Interpolation resolution used (m)
    """

    samples: NDArray[np.float64]
    waypoint_index: NDArray[np.int64]
    max_step: float = EEF_STEP_M

    def __len__(self) -> int:
        return len(self.samples)

    def __getitem__(self, idx: int) -> NDArray[np.float64]:
        return self.samples[idx]

    @property
    def positions(self) -> NDArray[np.float64]:
        return self.samples[:, :3]

    def poses(self) -> list[Pose3D]:
        return poses_from_array(self.samples)

    def truncated(self, n: int) -> CartesianTrajectory:
        return CartesianTrajectory(
            self.samples[:n].copy(), self.waypoint_index[:n].copy(), self.max_step
        )


def _step_distances(samples: NDArray[np.float64]) -> NDArray[np.float64]:
    """Translation plus rotation angle between consecutive samples."""
    if len(samples) < 2:
        return np.empty(0, dtype=np.float64)
    trans = np.linalg.norm(np.diff(samples[:, :3], axis=0), axis=1)
    dots = np.abs(np.sum(samples[:-1, 3:] * samples[1:, 3:], axis=1))
    rot = 2.0 * np.arccos(np.clip(dots, 0.0, 1.0))
    return trans + rot


def jump_cutoff(samples: NDArray[np.float64], jump_threshold: float) -> int:
    """Number of leading samples to keep under a relative jump threshold.

    A step longer than ``jump_threshold`` times the mean step is a jump; the
    trajectory is cut just before it. A threshold of 0.0 disables the check.
    """
    if jump_threshold <= 0.0 or len(samples) < 2:
        return len(samples)
    dists = _step_distances(samples)
    mean = float(np.mean(dists))
    if mean <= 0.0:
        return len(samples)
    over = np.nonzero(dists > jump_threshold * mean)[0]
    if len(over) == 0:
        return len(samples)
    return int(over[0]) + 1


class OfflineCartesianInterpolator:
    """Interpolate a waypoint path without inverse kinematics.

    Waypoints farther than ``reach`` from the planning frame origin are
    treated as unreachable; interpolation stops at the first one and the
    achieved fraction reflects how many waypoints were covered.
    """

    def __init__(self, reach: float = REACH_M, start: Pose3D | None = None):
        if reach <= 0.0:
            raise InvalidArgument(f"reach must be > 0, got {reach}")
        self.reach = reach
        self.start = start

    def _reachable(self, pose: Pose3D) -> bool:
        return float(np.linalg.norm(pose.position_array)) <= self.reach

    def _segment(
        self, a: NDArray[np.float64], b: NDArray[np.float64], max_step: float
    ) -> NDArray[np.float64]:
        """Samples from a (exclusive) to b (inclusive)."""
        dist = float(np.linalg.norm(b[:3] - a[:3]))
        angle = quaternion_angle(a[3:], b[3:])
        n = max(1, math.ceil(max(dist, angle) / max_step))
        t = np.arange(1, n + 1, dtype=np.float64) / n

        out = np.empty((n, 7), dtype=np.float64)
        out[:, :3] = a[:3] + np.outer(t, b[:3] - a[:3])
        key_rots = Rotation.from_quat(np.stack([a[3:], b[3:]]))
        out[:, 3:] = Slerp(np.array([0.0, 1.0]), key_rots)(t).as_quat()
        return out

    def compute_cartesian_path(
        self,
        waypoints: Sequence[Pose3D],
        max_step: float = EEF_STEP_M,
        jump_threshold: float = 0.0,
    ) -> CartesianPlan:
        if not waypoints:
            raise PlanningError("No waypoints to interpolate")
        if max_step <= 0.0:
            raise InvalidArgument(f"max_step must be > 0, got {max_step}")
        if jump_threshold < 0.0:
            raise InvalidArgument(f"jump_threshold must be >= 0, got {jump_threshold}")

        targets = poses_to_array(waypoints)
        chunks: list[NDArray[np.float64]] = []
        owners: list[NDArray[np.int64]] = []

        if self.start is not None:
            prev = poses_to_array([self.start])[0]
            chunks.append(prev[None, :])
            owners.append(np.array([-1], dtype=np.int64))
        else:
            prev = None

        reached = 0
        for i, wp in enumerate(waypoints):
            if not self._reachable(wp):
                logger.warning(
                    "Waypoint %d at %.3f m is beyond reach %.3f m",
                    i,
                    float(np.linalg.norm(wp.position_array)),
                    self.reach,
                )
                break
            if prev is None:
                seg = targets[i][None, :]
            else:
                seg = self._segment(prev, targets[i], max_step)
            chunks.append(seg)
            owners.append(np.full(len(seg), i, dtype=np.int64))
            prev = targets[i]
            reached += 1

        if chunks:
            samples = np.concatenate(chunks)
            index = np.concatenate(owners)
        else:
            samples = np.empty((0, 7), dtype=np.float64)
            index = np.empty(0, dtype=np.int64)

        fraction = reached / len(waypoints)
        keep = jump_cutoff(samples, jump_threshold)
        if keep < len(samples):
            logger.warning(
                "Jump detected after sample %d of %d, truncating", keep, len(samples)
            )
            fraction *= keep / len(samples)
            samples = samples[:keep]
            index = index[:keep]

        trajectory = CartesianTrajectory(samples, index, max_step)
        logger.debug(
            "Interpolated %d waypoints into %d samples (%.1f%%)",
            len(waypoints),
            len(trajectory),
            fraction * 100.0,
        )
        return CartesianPlan(trajectory=trajectory, fraction=fraction)


class OfflineExecutor:
    """Replay a CartesianTrajectory, one sample per ``sample_period_s``.

    ``on_sample`` receives each sample row as it is "reached", e.g. to feed
    a display or a state estimate. ``stop()`` from another thread aborts.
    """

    def __init__(
        self,
        sample_period_s: float = 0.0,
        on_sample: Callable[[NDArray[np.float64]], None] | None = None,
    ):
        self.sample_period_s = max(0.0, sample_period_s)
        self.on_sample = on_sample
        self._stop = threading.Event()

    def stop(self) -> None:
        self._stop.set()

    def execute(self, trajectory: Any) -> ExecutionResult:
        if not isinstance(trajectory, CartesianTrajectory):
            return ExecutionResult.failed(
                f"Unsupported trajectory type {type(trajectory).__name__}"
            )
        if len(trajectory) == 0:
            return ExecutionResult.failed("Empty trajectory")

        self._stop.clear()
        executed = 0
        for i in range(len(trajectory)):
            if self._stop.is_set():
                logger.info("Execution aborted after %d samples", executed)
                return ExecutionResult.aborted(executed_samples=executed)
            sample = trajectory[i]
            if self.on_sample is not None:
                self.on_sample(sample)
            if logger.isEnabledFor(TRACE):
                logger.log(TRACE, "sample %d: %s", i, np.array2string(sample, precision=4))
            if self.sample_period_s > 0.0:
                time.sleep(self.sample_period_s)
            executed += 1

        logger.info("Executed %d trajectory samples", executed)
        return ExecutionResult.succeeded(executed_samples=executed)


@dataclass
class Marker:
    kind: str
    payload: Any
    label: str = ""


@dataclass
class RecordingVisualizer:
    """Visualization sink that keeps published markers in memory.

    ``frames`` holds a snapshot of the visible markers after every trigger,
    keeping only the latest ``max_frames``.
    """

    max_frames: int = 8
    pending: list[Marker] = field(default_factory=list)
    published: list[Marker] = field(default_factory=list)
    frames: deque[list[Marker]] = field(init=False)

    def __post_init__(self) -> None:
        if self.max_frames < 1:
            raise InvalidArgument(f"max_frames must be >= 1, got {self.max_frames}")
        self.frames = deque(maxlen=self.max_frames)

    def delete_all_markers(self) -> None:
        self.pending.clear()
        self.published.clear()

    def publish_text(self, text: str) -> None:
        self.pending.append(Marker("text", text, text))

    def publish_path(self, waypoints: Sequence[Pose3D]) -> None:
        self.pending.append(Marker("path", list(waypoints)))

    def publish_axis_labeled(self, pose: Pose3D, label: str) -> None:
        self.pending.append(Marker("axis", pose, label))

    def publish_trajectory(self, trajectory: Any) -> None:
        self.pending.append(Marker("trajectory", trajectory))

    def trigger(self) -> None:
        self.published.extend(self.pending)
        logger.debug(
            "Published %d markers (%d visible)", len(self.pending), len(self.published)
        )
        self.pending.clear()
        self.frames.append(list(self.published))

    def labels(self, frame: int = -1) -> list[str]:
        """Axis labels visible in a triggered frame (latest by default)."""
        if not self.frames:
            return []
        return [m.label for m in self.frames[frame] if m.kind == "axis"]


class ConsolePrompt:
    """Ask the operator on the terminal; 'q', 'n' or end-of-input declines."""

    def __init__(self, input_fn: Callable[[str], str] = input):
        self._input = input_fn

    def confirm(self, message: str) -> bool:
        try:
            answer = self._input(f"{message} [Enter=next, q=quit] ")
        except EOFError:
            return False
        return answer.strip().lower() not in ("q", "quit", "n", "no")


class AutoConfirm:
    """Scripted operator: confirms ``limit`` times (forever when None)."""

    def __init__(self, limit: int | None = None):
        self.limit = limit
        self.prompts: list[str] = []

    def confirm(self, message: str) -> bool:
        if self.limit is not None and len(self.prompts) >= self.limit:
            return False
        self.prompts.append(message)
        logger.debug("Auto-confirmed: %s", message)
        return True
