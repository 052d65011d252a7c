from __future__ import annotations

import logging

from packages.contracts.models import AnalysisResult
from packages.contracts.parsing import extract_json_object
from packages.imaging import EncodedFrame

from .providers import ANALYSIS_PROMPT, VisionProvider

logger = logging.getLogger("coop_monitor.analyzer")


def _summary_label(result: AnalysisResult) -> str:
    behaviors = result.get("behaviors")
    if isinstance(behaviors, list) and behaviors and isinstance(behaviors[0], dict):
        return str(behaviors[0].get("label") or "success")
    return "success"


class VisionAnalyzer:
    def __init__(self, provider: VisionProvider, prompt: str = ANALYSIS_PROMPT) -> None:
        self.provider = provider
        self.prompt = prompt

    async def analyze(self, frame: EncodedFrame) -> AnalysisResult:
        logger.info("sending %sx%s frame to vision provider", frame.width, frame.height)
        text = await self.provider.complete(frame, self.prompt)
        result = extract_json_object(text)
        logger.info("analysis complete: %s", _summary_label(result))
        return result
