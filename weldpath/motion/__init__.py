"""
Waypoint geometry for Cartesian paths.

Pure generators that produce Pose3D sequences without depending on a robot,
a planner or any execution state. The execution package feeds these poses
to the motion-planning collaborators.
"""

from weldpath.motion.normals import (
    AnalyticCircularNormals,
    ExternallySuppliedNormals,
    NormalSource,
)
from weldpath.motion.pose import Pose3D, facing_quaternion, shortest_arc_quaternion
from weldpath.motion.waypoints import (
    CircularPathSpec,
    WaypointPathGenerator,
    generate,
    waypoint_count,
)

__all__ = [
    # Poses
    "Pose3D",
    "shortest_arc_quaternion",
    "facing_quaternion",
    # Circle generation
    "CircularPathSpec",
    "WaypointPathGenerator",
    "generate",
    "waypoint_count",
    # Normal sources
    "NormalSource",
    "AnalyticCircularNormals",
    "ExternallySuppliedNormals",
]
