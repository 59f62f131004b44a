"""SE3 conversions for Pose3D using sophuspy.

Lets waypoints be composed with tool and frame transforms, or handed to
controllers that take [x, y, z, rx, ry, rz] targets.
"""

import numpy as np
import sophuspy as sp
from scipy.spatial.transform import Rotation

from weldpath.motion.pose import Pose3D

__all__ = [
    "se3_from_rpy",
    "se3_rpy",
    "pose_to_se3",
    "pose_from_se3",
    "pose_to_matrix",
    "pose_to_xyzrpy",
]


def se3_from_rpy(
    x: float,
    y: float,
    z: float,
    roll: float,
    pitch: float,
    yaw: float,
    degrees: bool = False,
) -> sp.SE3:
    """Create SE3 from position and RPY angles.

    Args:
        x, y, z: Translation components
        roll, pitch, yaw: Rotation angles (xyz order)
        degrees: If True, angles are in degrees
    """
    if degrees:
        roll, pitch, yaw = np.radians([roll, pitch, yaw])
    R = Rotation.from_euler("XYZ", [roll, pitch, yaw]).as_matrix()
    return sp.SE3(R, [x, y, z])


def se3_rpy(se3: sp.SE3, degrees: bool = False) -> np.ndarray:
    """Extract RPY angles from SE3.

    Args:
        se3: SE3 transformation
        degrees: If True, return angles in degrees

    Returns:
        Array of [roll, pitch, yaw] in xyz order
    """
    R = se3.rotationMatrix()
    rpy = Rotation.from_matrix(R).as_euler("XYZ")
    return np.degrees(rpy) if degrees else rpy


def pose_to_se3(pose: Pose3D) -> sp.SE3:
    """Convert a Pose3D to an SE3 transform (meters)."""
    R = pose.rotation().as_matrix()
    return sp.SE3(R, list(pose.position))


def pose_from_se3(se3: sp.SE3) -> Pose3D:
    """Convert an SE3 transform to a Pose3D (meters, unit quaternion)."""
    quat = Rotation.from_matrix(se3.rotationMatrix()).as_quat()
    return Pose3D.from_arrays(se3.translation(), quat)


def pose_to_matrix(pose: Pose3D) -> np.ndarray:
    """4x4 homogeneous transformation matrix of a pose."""
    return np.asarray(pose_to_se3(pose).matrix())


def pose_to_xyzrpy(pose: Pose3D, mm_deg: bool = False) -> np.ndarray:
    """Pose as [x, y, z, rx, ry, rz].

    Args:
        pose: Pose to convert
        mm_deg: If True, position in mm and angles in degrees; otherwise
            meters and radians

    Returns:
        Array of 6 values, angles in xyz order
    """
    se3 = pose_to_se3(pose)
    xyz = np.asarray(se3.translation(), dtype=np.float64)
    if mm_deg:
        xyz = xyz * 1000.0
    return np.concatenate([xyz, se3_rpy(se3, degrees=mm_deg)])
