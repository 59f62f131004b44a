"""
Central configuration for weldpath tunables and shared constants.

Every value here may be overridden through a ``WELDPATH_*`` environment
variable; the CLI layers its own arguments on top of these defaults.
"""

from __future__ import annotations

import logging
import math
import os

TRACE: int = 5
logging.addLevelName(TRACE, "TRACE")
# Add Logger.trace if missing
if not hasattr(logging.Logger, "trace"):

    def _trace(self, msg, *args, **kwargs):
        if self.isEnabledFor(TRACE):
            self._log(TRACE, msg, args, **kwargs)

    logging.Logger.trace = _trace  # type: ignore[attr-defined]
    logging.TRACE = TRACE  # type: ignore[attr-defined]

TRACE_ENABLED = str(os.getenv("WELDPATH_TRACE", "0")).lower() in (
    "1",
    "true",
    "yes",
    "on",
)

logger = logging.getLogger(__name__)


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Ignoring {name}={raw!r}: not a number")
        return default


def _env_vec3(
    name: str, default: tuple[float, float, float]
) -> tuple[float, float, float]:
    """Parse a comma or whitespace separated 3-vector from the environment."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    parts = raw.replace(",", " ").split()
    try:
        values = tuple(float(p) for p in parts)
    except ValueError:
        logger.warning(f"Ignoring {name}={raw!r}: not a vector")
        return default
    if len(values) != 3:
        logger.warning(f"Ignoring {name}={raw!r}: expected 3 components")
        return default
    return values  # type: ignore[return-value]


def _env_bool_optional(name: str) -> bool | None:
    raw = os.getenv(name)
    if raw is None:
        return None
    s = raw.strip().lower()
    if s in ("1", "true", "yes", "on"):
        return True
    if s in ("0", "false", "no", "off"):
        return False
    return None


# Middleware naming (used for logging and as the frame_id of pose messages)
PLANNING_FRAME: str = os.getenv("WELDPATH_PLANNING_FRAME", "base_link")
PLANNING_GROUP: str = os.getenv("WELDPATH_PLANNING_GROUP", "ur_manipulator")

# Circle defaults (meters / radians)
DEFAULT_CENTER: tuple[float, float, float] = _env_vec3(
    "WELDPATH_CENTER", (0.2, 0.0, 0.8)
)
DEFAULT_RADIUS_M: float = _env_float("WELDPATH_RADIUS", 0.2)
DEFAULT_ANGULAR_STEP_RAD: float = _env_float("WELDPATH_ANGULAR_STEP", 0.5)
DEFAULT_FORWARD_AXIS: tuple[float, float, float] = _env_vec3(
    "WELDPATH_FORWARD_AXIS", (1.0, 0.0, 0.0)
)
DEFAULT_FACING_AXIS: tuple[float, float, float] = _env_vec3(
    "WELDPATH_FACING_AXIS", (1.0, 0.0, 0.0)
)

# Cartesian interpolation at 1 cm resolution; a jump threshold of 0.0 disables
# the check. Disabling it on real hardware can produce large motions of
# redundant joints.
EEF_STEP_M: float = _env_float("WELDPATH_EEF_STEP", 0.01)
JUMP_THRESHOLD: float = _env_float("WELDPATH_JUMP_THRESHOLD", 0.0)

# Reach of the offline interpolator, measured from the planning frame origin
REACH_M: float = _env_float("WELDPATH_REACH", 1.3)

# Numeric tolerances
QUAT_NORM_TOL: float = 1e-6
PARALLEL_TOL: float = 1e-9
TWO_PI: float = 2.0 * math.pi

# Operator interaction
ASSUME_YES: bool = bool(_env_bool_optional("WELDPATH_ASSUME_YES"))

LOG_LEVEL_DEFAULT: str = os.getenv("WELDPATH_LOG_LEVEL", "INFO").strip().upper()
LOG_FORMAT: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_DATEFMT: str = "%H:%M:%S"

# Visualization text markers
TITLE_TEXT: str = "Cartesian_Path"
WAYPOINT_LABEL_PREFIX: str = "pt"
