"""
Normal sources for waypoint orientation.

The generator aligns the end-effector's facing axis with a per-waypoint
normal direction. Where that normal comes from is a strategy:

- AnalyticCircularNormals: computed from the circle itself. The default
  "mirrored" mode reproduces the demo formula Rz(pi - theta) * forward,
  a placeholder for sampled surface data that only points at the center
  for theta = 0 and theta = pi. "radial" points every waypoint at the center.
- ExternallySuppliedNormals: one normal per waypoint, provided by the caller
  (e.g. estimated from a point cloud of the workpiece).
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import TYPE_CHECKING, Literal

import numpy as np
from numpy.typing import ArrayLike, NDArray

from weldpath.motion.pose import as_unit_vector, rotate_about_z
from weldpath.utils.errors import InvalidArgument

if TYPE_CHECKING:
    from weldpath.motion.waypoints import CircularPathSpec

NormalMode = Literal["mirrored", "radial"]
NORMAL_MODES: tuple[str, ...] = ("mirrored", "radial")


class NormalSource(ABC):
    """Supplies the direction each waypoint's facing axis is turned onto."""

    def validate(self, spec: CircularPathSpec, count: int) -> None:
        """Reject configurations this source cannot serve, before any output."""

    @abstractmethod
    def normal_at(
        self, index: int, theta: float, spec: CircularPathSpec
    ) -> NDArray[np.float64]:
        """Normal direction for waypoint ``index`` at sweep angle ``theta``."""

    def normals_for(
        self, thetas: NDArray[np.float64], spec: CircularPathSpec
    ) -> NDArray[np.float64]:
        """(N, 3) normals for a batch of sweep angles."""
        out = np.empty((len(thetas), 3), dtype=np.float64)
        for i, theta in enumerate(thetas):
            out[i] = self.normal_at(i, float(theta), spec)
        return out


class AnalyticCircularNormals(NormalSource):
    """Normals derived from the circle geometry."""

    def __init__(self, mode: NormalMode = "mirrored"):
        if mode not in NORMAL_MODES:
            raise InvalidArgument(
                f"Unknown normal mode {mode!r}, expected one of {NORMAL_MODES}"
            )
        self.mode = mode

    def _angles(self, thetas):
        if self.mode == "mirrored":
            return math.pi - thetas
        return thetas + math.pi

    def normal_at(
        self, index: int, theta: float, spec: CircularPathSpec
    ) -> NDArray[np.float64]:
        return rotate_about_z(spec.forward_axis, self._angles(theta))

    def normals_for(
        self, thetas: NDArray[np.float64], spec: CircularPathSpec
    ) -> NDArray[np.float64]:
        return np.atleast_2d(rotate_about_z(spec.forward_axis, self._angles(thetas)))

    def __repr__(self) -> str:
        return f"AnalyticCircularNormals(mode={self.mode!r})"


class ExternallySuppliedNormals(NormalSource):
    """Caller-provided normals, one per waypoint in sweep order."""

    def __init__(self, normals: Sequence[ArrayLike] | NDArray):
        self._normals = tuple(
            as_unit_vector(n, f"normal[{i}]") for i, n in enumerate(normals)
        )

    def __len__(self) -> int:
        return len(self._normals)

    def validate(self, spec: CircularPathSpec, count: int) -> None:
        if len(self._normals) < count:
            raise InvalidArgument(
                f"{count} waypoints need {count} normals, only {len(self._normals)} supplied"
            )

    def normal_at(
        self, index: int, theta: float, spec: CircularPathSpec
    ) -> NDArray[np.float64]:
        return self._normals[index]
