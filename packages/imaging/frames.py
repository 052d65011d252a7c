from __future__ import annotations

import base64
from dataclasses import dataclass
from io import BytesIO

from PIL import Image

DEFAULT_MAX_EDGE = 1200
DEFAULT_JPEG_QUALITY = 85


@dataclass(slots=True)
class EncodedFrame:
    data: bytes
    width: int
    height: int
    format: str = "JPEG"
    quality: int = DEFAULT_JPEG_QUALITY

    @property
    def media_type(self) -> str:
        return f"image/{self.format.lower()}"

    @property
    def base64(self) -> str:
        return base64.b64encode(self.data).decode("ascii")

    @classmethod
    def from_base64(cls, text: str) -> "EncodedFrame":
        """Rebuild a frame from the text served by the debug frame endpoint."""
        data = base64.b64decode(text)
        with Image.open(BytesIO(data)) as image:
            width, height = image.size
            fmt = image.format or "JPEG"
        return cls(data=data, width=width, height=height, format=fmt)

    def to_image(self) -> Image.Image:
        return Image.open(BytesIO(self.data)).convert("RGB")


def encode_frame(
    image: Image.Image,
    max_edge: int = DEFAULT_MAX_EDGE,
    quality: int = DEFAULT_JPEG_QUALITY,
) -> EncodedFrame:
    """Shrink ``image`` to fit inside ``max_edge`` x ``max_edge`` and JPEG-encode it.

    Aspect ratio is kept and smaller images are never enlarged.
    """
    if max_edge < 1:
        raise ValueError("max_edge must be positive")
    frame = image.convert("RGB")
    frame.thumbnail((max_edge, max_edge), Image.Resampling.LANCZOS)
    buf = BytesIO()
    frame.save(buf, format="JPEG", quality=quality)
    width, height = frame.size
    return EncodedFrame(data=buf.getvalue(), width=width, height=height, quality=quality)
