"""
Pose message types and conversions.

Message structs mirror ``geometry_msgs/Point``, ``Quaternion``, ``Pose`` and
``PoseArray`` so waypoints can be handed to a motion-planning middleware or a
visualization tool without further reshaping. Bytes on the wire are msgpack
(default) or JSON:

- PoseArrayMsg: {"header": {"frame_id": str}, "poses": [PoseMsg, ...]}
- PoseMsg:      {"position": {"x","y","z"}, "orientation": {"x","y","z","w"}}
"""

import logging
from collections.abc import Sequence
from typing import Literal

import msgspec
import numpy as np
from numpy.typing import ArrayLike, NDArray

from weldpath.config import PLANNING_FRAME
from weldpath.motion.pose import Pose3D, check_unit_quaternion
from weldpath.utils.errors import InvalidArgument

logger = logging.getLogger(__name__)

WireFormat = Literal["msgpack", "json"]


# =============================================================================
# Numpy encoding hook
# =============================================================================


def _enc_hook(obj: object) -> object:
    """Custom encoder hook for numpy types."""
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    if isinstance(obj, (np.integer, np.floating)):
        return obj.item()
    raise NotImplementedError(f"Cannot encode {type(obj)}")


# =============================================================================
# Message Structs
# =============================================================================


class PointMsg(msgspec.Struct, frozen=True):
    x: float
    y: float
    z: float


class QuaternionMsg(msgspec.Struct, frozen=True):
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    w: float = 1.0


class PoseMsg(msgspec.Struct, frozen=True):
    position: PointMsg
    orientation: QuaternionMsg = msgspec.field(default_factory=QuaternionMsg)


class HeaderMsg(msgspec.Struct, frozen=True):
    frame_id: str = PLANNING_FRAME


class PoseArrayMsg(msgspec.Struct, frozen=True):
    header: HeaderMsg
    poses: list[PoseMsg]


_encoders = {
    "msgpack": msgspec.msgpack.Encoder(enc_hook=_enc_hook),
    "json": msgspec.json.Encoder(enc_hook=_enc_hook),
}
_decoders = {
    "msgpack": msgspec.msgpack.Decoder(PoseArrayMsg),
    "json": msgspec.json.Decoder(PoseArrayMsg),
}


# =============================================================================
# Pose3D <-> message
# =============================================================================


def pose_to_msg(pose: Pose3D) -> PoseMsg:
    """Convert a Pose3D to a PoseMsg."""
    x, y, z = pose.position
    qx, qy, qz, qw = pose.orientation
    return PoseMsg(
        position=PointMsg(x, y, z),
        orientation=QuaternionMsg(qx, qy, qz, qw),
    )


def pose_from_msg(msg: PoseMsg) -> Pose3D:
    """Convert a PoseMsg to a Pose3D.

    Raises:
        InvalidArgument: if the orientation is a zero or non-unit quaternion.
    """
    q = msg.orientation
    quat = check_unit_quaternion([q.x, q.y, q.z, q.w])
    p = msg.position
    return Pose3D((p.x, p.y, p.z), tuple(quat.tolist()))


def poses_to_msg(
    poses: Sequence[Pose3D], frame_id: str = PLANNING_FRAME
) -> PoseArrayMsg:
    return PoseArrayMsg(
        header=HeaderMsg(frame_id=frame_id),
        poses=[pose_to_msg(p) for p in poses],
    )


def poses_from_msg(msg: PoseArrayMsg) -> list[Pose3D]:
    return [pose_from_msg(p) for p in msg.poses]


# =============================================================================
# Pose3D <-> array
# =============================================================================


def poses_to_array(poses: Sequence[Pose3D]) -> NDArray[np.float64]:
    """(N, 7) array of [x, y, z, qx, qy, qz, qw] rows."""
    out = np.empty((len(poses), 7), dtype=np.float64)
    for i, pose in enumerate(poses):
        out[i, :3] = pose.position
        out[i, 3:] = pose.orientation
    return out


def poses_from_array(arr: ArrayLike) -> list[Pose3D]:
    """Inverse of poses_to_array; quaternions must already be unit length."""
    data = np.asarray(arr, dtype=np.float64)
    if data.ndim != 2 or data.shape[1] != 7:
        raise InvalidArgument(f"Expected (N, 7) pose array, got shape {data.shape}")
    return [Pose3D(tuple(row[:3]), tuple(row[3:])) for row in data]


# =============================================================================
# Encoding
# =============================================================================


def encode_poses(
    poses: Sequence[Pose3D],
    fmt: WireFormat = "msgpack",
    frame_id: str = PLANNING_FRAME,
) -> bytes:
    """Encode waypoints as a PoseArrayMsg in msgpack or JSON."""
    try:
        encoder = _encoders[fmt]
    except KeyError:
        raise InvalidArgument(f"Unknown wire format {fmt!r}") from None
    return encoder.encode(poses_to_msg(poses, frame_id))


def decode_poses(
    data: bytes, fmt: WireFormat = "msgpack"
) -> tuple[str, list[Pose3D]]:
    """Decode a PoseArrayMsg into (frame_id, poses).

    Raises:
        InvalidArgument: on malformed bytes or a non-unit quaternion.
    """
    try:
        decoder = _decoders[fmt]
    except KeyError:
        raise InvalidArgument(f"Unknown wire format {fmt!r}") from None
    try:
        msg = decoder.decode(data)
    except msgspec.DecodeError as e:
        raise InvalidArgument(f"Malformed pose array: {e}") from e
    return msg.header.frame_id, poses_from_msg(msg)
