"""Exception types raised by weldpath."""


class WeldPathError(Exception):
    """Base class for all weldpath errors."""


class InvalidArgument(WeldPathError, ValueError):
    """Malformed path configuration or pose input.

    Raised before any computation proceeds, so nothing is ever partially
    applied.
    """


class SingularOrientation(WeldPathError):
    """Facing axis and normal are (anti-)parallel.

    Only used internally by the orientation helpers; the waypoint generator
    resolves it with a fallback rotation axis and never lets it reach callers.
    """

    def __init__(self, facing, normal, antiparallel: bool):
        self.facing = facing
        self.normal = normal
        self.antiparallel = antiparallel
        kind = "anti-parallel" if antiparallel else "parallel"
        super().__init__(f"Facing axis {facing} is {kind} to normal {normal}")


class PlanningError(WeldPathError):
    """The interpolation service could not plan even the first segment."""
