"""
weldpath Python Package

Circular Cartesian waypoint generation for robot arm end-effectors, plus a
caller-driven driver that plans, visualizes and executes the path through
motion-planning collaborators.

Key components:
- CircularPathSpec: circle configuration (center, radius, step, axes)
- WaypointPathGenerator / generate: pure pose sequence generation
- AnalyticCircularNormals / ExternallySuppliedNormals: normal sources
- Pose3D: position plus unit quaternion
- PathExecutionDriver: plan / visualize / confirm / execute cycle
"""

from ._version import __version__
from .execution.driver import CycleResult, PathExecutionDriver
from .motion import (
    AnalyticCircularNormals,
    CircularPathSpec,
    ExternallySuppliedNormals,
    NormalSource,
    Pose3D,
    WaypointPathGenerator,
    generate,
)
from .utils.errors import InvalidArgument, PlanningError, WeldPathError

__all__ = [
    "__version__",
    "CircularPathSpec",
    "WaypointPathGenerator",
    "generate",
    "Pose3D",
    "NormalSource",
    "AnalyticCircularNormals",
    "ExternallySuppliedNormals",
    "PathExecutionDriver",
    "CycleResult",
    "WeldPathError",
    "InvalidArgument",
    "PlanningError",
]
