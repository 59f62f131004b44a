"""Shared helpers: error types and SE3 conversions."""

from weldpath.utils.errors import (
    InvalidArgument,
    PlanningError,
    SingularOrientation,
    WeldPathError,
)

__all__ = [
    "WeldPathError",
    "InvalidArgument",
    "SingularOrientation",
    "PlanningError",
]
