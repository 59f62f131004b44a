"""
Pose representation and orientation helpers.

Quaternions are scalar-last ``(x, y, z, w)`` throughout, matching
``scipy.spatial.transform.Rotation`` and ROS ``geometry_msgs/Quaternion``.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
from numpy.typing import ArrayLike, NDArray
from scipy.spatial.transform import Rotation

from weldpath.config import PARALLEL_TOL, QUAT_NORM_TOL
from weldpath.utils.errors import InvalidArgument, SingularOrientation

logger = logging.getLogger(__name__)

IDENTITY_QUAT: tuple[float, float, float, float] = (0.0, 0.0, 0.0, 1.0)
Z_AXIS: NDArray[np.float64] = np.array([0.0, 0.0, 1.0])


def as_vector3(value: ArrayLike, name: str = "vector") -> NDArray[np.float64]:
    """Coerce to a finite float64 3-vector or raise InvalidArgument."""
    try:
        arr = np.asarray(value, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise InvalidArgument(f"{name} must be a 3-vector, got {value!r}") from e
    if arr.shape != (3,):
        raise InvalidArgument(f"{name} must be a 3-vector, got shape {arr.shape}")
    if not np.all(np.isfinite(arr)):
        raise InvalidArgument(f"{name} must be finite, got {arr.tolist()}")
    return arr


def as_unit_vector(value: ArrayLike, name: str = "axis") -> NDArray[np.float64]:
    """Normalize a 3-vector, rejecting zero-length input."""
    arr = as_vector3(value, name)
    norm = float(np.linalg.norm(arr))
    if norm < PARALLEL_TOL:
        raise InvalidArgument(f"{name} must be non-zero, got {arr.tolist()}")
    return arr / norm


def normalize_quaternion(value: ArrayLike) -> NDArray[np.float64]:
    """Return the unit quaternion in the direction of ``value``."""
    try:
        q = np.asarray(value, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise InvalidArgument(f"Quaternion must have 4 components, got {value!r}") from e
    if q.shape != (4,):
        raise InvalidArgument(f"Quaternion must have 4 components, got shape {q.shape}")
    if not np.all(np.isfinite(q)):
        raise InvalidArgument(f"Quaternion must be finite, got {q.tolist()}")
    norm = float(np.linalg.norm(q))
    if norm < QUAT_NORM_TOL:
        raise InvalidArgument("Cannot normalize a zero quaternion")
    return q / norm


def check_unit_quaternion(
    value: ArrayLike, tol: float = QUAT_NORM_TOL
) -> NDArray[np.float64]:
    """Validate that ``value`` is a unit quaternion and return it as an array."""
    try:
        q = np.asarray(value, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise InvalidArgument(f"Quaternion must have 4 components, got {value!r}") from e
    if q.shape != (4,):
        raise InvalidArgument(f"Quaternion must have 4 components, got shape {q.shape}")
    if not np.all(np.isfinite(q)):
        raise InvalidArgument(f"Quaternion must be finite, got {q.tolist()}")
    norm = float(np.linalg.norm(q))
    if abs(norm - 1.0) > tol:
        raise InvalidArgument(f"Quaternion norm must be 1 +/- {tol:g}, got {norm:.9f}")
    return q


@dataclass(frozen=True, slots=True)
class Pose3D:
    """Rigid-body placement: position in meters plus unit quaternion (x, y, z, w).

    Components are stored as plain float tuples, so two poses compare equal
    only when every component is bit-identical.
    """

    position: tuple[float, float, float]
    orientation: tuple[float, float, float, float] = IDENTITY_QUAT

    def __post_init__(self) -> None:
        pos = as_vector3(self.position, "position")
        quat = check_unit_quaternion(self.orientation)
        object.__setattr__(self, "position", tuple(float(v) for v in pos))
        object.__setattr__(self, "orientation", tuple(float(v) for v in quat))

    @classmethod
    def from_arrays(
        cls, position: ArrayLike, orientation: ArrayLike, normalize: bool = True
    ) -> Pose3D:
        """Build a pose, normalizing the quaternion first unless told not to."""
        quat = normalize_quaternion(orientation) if normalize else orientation
        return cls(tuple(np.asarray(position, dtype=np.float64)), tuple(quat))  # type: ignore[arg-type]

    @property
    def position_array(self) -> NDArray[np.float64]:
        return np.array(self.position, dtype=np.float64)

    @property
    def orientation_array(self) -> NDArray[np.float64]:
        return np.array(self.orientation, dtype=np.float64)

    def rotation(self) -> Rotation:
        return Rotation.from_quat(self.orientation_array)

    def rotate(self, vector: ArrayLike) -> NDArray[np.float64]:
        """Express a body-frame direction in the planning frame."""
        return self.rotation().apply(as_vector3(vector))


def rotate_about_z(
    vector: ArrayLike, angles: float | Sequence[float] | NDArray
) -> NDArray[np.float64]:
    """Rotate ``vector`` about the vertical axis by one angle or a batch of angles.

    Returns a (3,) array for a scalar angle, (N, 3) for N angles.
    """
    vec = np.asarray(vector, dtype=np.float64)
    if np.ndim(angles) == 0:
        return Rotation.from_euler("z", float(angles)).apply(vec)
    # (N, 1): one single-axis rotation per angle
    column = np.asarray(angles, dtype=np.float64).reshape(-1, 1)
    return Rotation.from_euler("z", column).apply(vec)


def _perpendicular_axis(v: NDArray[np.float64]) -> NDArray[np.float64]:
    """Find a unit vector perpendicular to the given unit vector."""
    if abs(v[0]) < 0.9:
        cross = np.cross(v, [1.0, 0.0, 0.0])
    else:
        cross = np.cross(v, [0.0, 1.0, 0.0])
    return cross / np.linalg.norm(cross)


def fallback_axis(
    facing: NDArray[np.float64], preferred: NDArray[np.float64] = Z_AXIS
) -> NDArray[np.float64]:
    """Axis for a half-turn that maps ``facing`` onto its opposite.

    ``preferred`` is projected onto the plane orthogonal to ``facing``; when it
    is (anti-)parallel to ``facing`` the projection vanishes and a
    perpendicular from the X or Y axis is used instead.
    """
    projected = preferred - np.dot(preferred, facing) * facing
    norm = float(np.linalg.norm(projected))
    if norm < 1e-6:
        return _perpendicular_axis(facing)
    return projected / norm


def shortest_arc_quaternion(src: ArrayLike, dst: ArrayLike) -> NDArray[np.float64]:
    """Minimal rotation taking direction ``src`` onto direction ``dst``.

    Raises:
        SingularOrientation: when the directions are parallel or anti-parallel
            and the rotation axis is undefined.
    """
    a = as_unit_vector(src, "src")
    b = as_unit_vector(dst, "dst")
    cross = np.cross(a, b)
    dot = float(np.dot(a, b))
    if float(np.linalg.norm(cross)) < PARALLEL_TOL:
        raise SingularOrientation(tuple(a.tolist()), tuple(b.tolist()), dot < 0.0)
    q = np.array([cross[0], cross[1], cross[2], 1.0 + dot], dtype=np.float64)
    return q / np.linalg.norm(q)


def facing_quaternion(
    facing: ArrayLike,
    normal: ArrayLike,
    preferred_axis: NDArray[np.float64] = Z_AXIS,
) -> NDArray[np.float64]:
    """Orientation that turns the body ``facing`` axis onto ``normal``.

    Parallel inputs yield the identity. Anti-parallel inputs yield a half-turn
    about ``preferred_axis`` (projected orthogonal to ``facing``), which for the
    circle generator is the vertical axis the circle is swept around.
    """
    try:
        return shortest_arc_quaternion(facing, normal)
    except SingularOrientation as e:
        if not e.antiparallel:
            return np.array(IDENTITY_QUAT, dtype=np.float64)
        axis = fallback_axis(as_unit_vector(facing, "facing"), preferred_axis)
        logger.debug(
            "Anti-parallel facing/normal, half-turn about [%.3f %.3f %.3f]",
            axis[0],
            axis[1],
            axis[2],
        )
        # sin(pi/2) = 1, cos(pi/2) = 0
        return np.array([axis[0], axis[1], axis[2], 0.0], dtype=np.float64)


def quaternion_angle(q1: ArrayLike, q2: ArrayLike) -> float:
    """Angular distance between two orientations, in radians."""
    dot = abs(float(np.dot(normalize_quaternion(q1), normalize_quaternion(q2))))
    return 2.0 * math.acos(min(1.0, dot))
