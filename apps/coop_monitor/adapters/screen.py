from __future__ import annotations

import logging
from dataclasses import dataclass

from PIL import ImageGrab

from packages.contracts.errors import CaptureError
from packages.contracts.models import CaptureRegion
from packages.imaging import DEFAULT_JPEG_QUALITY, DEFAULT_MAX_EDGE, EncodedFrame, encode_frame

logger = logging.getLogger("coop_monitor.capture")


@dataclass(slots=True)
class ScreenCapture:
    region: CaptureRegion | None = None
    max_edge: int = DEFAULT_MAX_EDGE
    quality: int = DEFAULT_JPEG_QUALITY

    def capture(self) -> EncodedFrame:
        bbox = self.region.bbox if self.region else None
        try:
            image = ImageGrab.grab(bbox=bbox)
        except OSError as exc:
            raise CaptureError(f"screen capture failed: {exc}") from exc
        frame = encode_frame(image, max_edge=self.max_edge, quality=self.quality)
        logger.debug("captured %sx%s frame (%d bytes)", frame.width, frame.height, len(frame.data))
        return frame
