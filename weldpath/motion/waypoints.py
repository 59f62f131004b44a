"""
Circular Cartesian waypoint generation.

The generator is stateless: it produces a fresh list of poses for every call
and never touches the robot, the planner or the clock. Repeated calls with
equal inputs return bit-identical sequences.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from weldpath.config import (
    DEFAULT_ANGULAR_STEP_RAD,
    DEFAULT_CENTER,
    DEFAULT_FACING_AXIS,
    DEFAULT_FORWARD_AXIS,
    DEFAULT_RADIUS_M,
    TRACE,
    TWO_PI,
)
from weldpath.motion.normals import AnalyticCircularNormals, NormalSource
from weldpath.motion.pose import (
    Pose3D,
    Z_AXIS,
    as_unit_vector,
    as_vector3,
    facing_quaternion,
    rotate_about_z,
)
from weldpath.utils.errors import InvalidArgument

logger = logging.getLogger(__name__)

Vector3 = tuple[float, float, float]

# Relative tolerance for treating 2*pi / step as a whole number of steps
_STEP_MULTIPLE_RTOL = 1e-9


def waypoint_count(angular_step: float) -> int:
    """Number of waypoints a full sweep produces at ``angular_step``.

    ``ceil(2*pi / step)``. When 2*pi is a whole multiple of the step the
    closing point at theta = 2*pi would repeat theta = 0 and is not counted.
    """
    ratio = TWO_PI / angular_step
    nearest = round(ratio)
    if nearest >= 1 and abs(ratio - nearest) <= _STEP_MULTIPLE_RTOL * ratio:
        return int(nearest)
    return math.ceil(ratio)


@dataclass(frozen=True, slots=True)
class CircularPathSpec:
    """Input configuration for a circular sweep.

    Attributes:
        center: Circle center in the planning frame (m).
        radius: Circle size (m), > 0.
        angular_step: Point density, radians between waypoints, in (0, 2*pi].
        forward_axis: Direction the circle starts from at theta = 0. Normalized.
        local_facing_axis: End-effector body axis aligned with each normal.
            Normalized.
    """

    center: Vector3 = DEFAULT_CENTER
    radius: float = DEFAULT_RADIUS_M
    angular_step: float = DEFAULT_ANGULAR_STEP_RAD
    forward_axis: Vector3 = DEFAULT_FORWARD_AXIS
    local_facing_axis: Vector3 = DEFAULT_FACING_AXIS

    def __post_init__(self) -> None:
        center = as_vector3(self.center, "center")
        radius = _as_float(self.radius, "radius")
        step = _as_float(self.angular_step, "angular_step")
        if radius <= 0.0:
            raise InvalidArgument(f"radius must be > 0, got {radius}")
        if step <= 0.0:
            raise InvalidArgument(f"angular_step must be > 0, got {step}")
        if step > TWO_PI:
            raise InvalidArgument(f"angular_step must be <= 2*pi, got {step}")
        forward = as_unit_vector(self.forward_axis, "forward_axis")
        facing = as_unit_vector(self.local_facing_axis, "local_facing_axis")

        object.__setattr__(self, "center", tuple(float(v) for v in center))
        object.__setattr__(self, "radius", radius)
        object.__setattr__(self, "angular_step", step)
        object.__setattr__(self, "forward_axis", tuple(float(v) for v in forward))
        object.__setattr__(
            self, "local_facing_axis", tuple(float(v) for v in facing)
        )

    @property
    def waypoint_count(self) -> int:
        return waypoint_count(self.angular_step)

    def angles(self) -> NDArray[np.float64]:
        """Sweep angles theta_k = k * step (no accumulated rounding)."""
        return np.arange(self.waypoint_count, dtype=np.float64) * self.angular_step


def _as_float(value, name: str) -> float:
    try:
        out = float(value)
    except (TypeError, ValueError) as e:
        raise InvalidArgument(f"{name} must be a number, got {value!r}") from e
    if not math.isfinite(out):
        raise InvalidArgument(f"{name} must be finite, got {out}")
    return out


class WaypointPathGenerator:
    """Generate a circle of poses whose facing axis follows a normal source.

    Positions are ``center + Rz(theta) * (forward * radius)``. Orientations
    are the shortest-arc rotation from ``local_facing_axis`` onto the normal
    the source reports for that waypoint. When the two are anti-parallel the
    rotation is a half-turn about the vertical sweep axis.
    """

    def __init__(self, normals: NormalSource | None = None):
        self.normals = normals if normals is not None else AnalyticCircularNormals()

    def generate(self, spec: CircularPathSpec) -> list[Pose3D]:
        """Produce the waypoint sequence for ``spec``.

        Raises:
            InvalidArgument: if ``spec`` is not a CircularPathSpec or the normal
                source cannot cover every waypoint.
        """
        if not isinstance(spec, CircularPathSpec):
            raise InvalidArgument(
                f"Expected CircularPathSpec, got {type(spec).__name__}"
            )
        count = spec.waypoint_count
        self.normals.validate(spec, count)

        thetas = spec.angles()
        offset = np.asarray(spec.forward_axis) * spec.radius
        positions = np.asarray(spec.center) + np.atleast_2d(
            rotate_about_z(offset, thetas)
        )
        normals = self.normals.normals_for(thetas, spec)
        facing = np.asarray(spec.local_facing_axis)

        waypoints: list[Pose3D] = []
        for k in range(count):
            quat = facing_quaternion(facing, normals[k], Z_AXIS)
            waypoints.append(Pose3D.from_arrays(positions[k], quat))
            if logger.isEnabledFor(TRACE):
                logger.log(
                    TRACE,
                    "waypoint %d theta=%.3f q=[%f %f %f %f]",
                    k,
                    thetas[k],
                    *waypoints[-1].orientation,
                )

        logger.debug(
            "Generated %d waypoints (r=%.3f m, step=%.3f rad, %r)",
            count,
            spec.radius,
            spec.angular_step,
            self.normals,
        )
        return waypoints


def generate(
    spec: CircularPathSpec, normals: NormalSource | None = None
) -> list[Pose3D]:
    """Generate circular waypoints for ``spec``; see WaypointPathGenerator."""
    return WaypointPathGenerator(normals).generate(spec)


def radial_distances(
    waypoints: Sequence[Pose3D], center: Sequence[float]
) -> NDArray[np.float64]:
    """In-plane (XY) distance of each waypoint from ``center``."""
    if not waypoints:
        return np.empty(0, dtype=np.float64)
    pts = np.array([wp.position for wp in waypoints], dtype=np.float64)
    delta = pts[:, :2] - np.asarray(center, dtype=np.float64)[:2]
    return np.linalg.norm(delta, axis=1)
