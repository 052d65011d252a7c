from __future__ import annotations

from typing import Protocol

from packages.imaging import EncodedFrame


class VisionProvider(Protocol):
    async def complete(self, frame: EncodedFrame, prompt: str) -> str:
        """Send one image + instruction request and return the reply text."""
        ...
