"""Frame encoding helpers shared by the capture adapter and operator tools."""

from .frames import DEFAULT_JPEG_QUALITY, DEFAULT_MAX_EDGE, EncodedFrame, encode_frame

__all__ = [
    "DEFAULT_JPEG_QUALITY",
    "DEFAULT_MAX_EDGE",
    "EncodedFrame",
    "encode_frame",
]
