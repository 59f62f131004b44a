"""Pose message types and wire encoding."""

from weldpath.protocol.messages import (
    HeaderMsg,
    PointMsg,
    PoseArrayMsg,
    PoseMsg,
    QuaternionMsg,
    decode_poses,
    encode_poses,
    pose_from_msg,
    pose_to_msg,
    poses_from_array,
    poses_to_array,
)

__all__ = [
    "PointMsg",
    "QuaternionMsg",
    "PoseMsg",
    "HeaderMsg",
    "PoseArrayMsg",
    "pose_to_msg",
    "pose_from_msg",
    "poses_to_array",
    "poses_from_array",
    "encode_poses",
    "decode_poses",
]
