from .anthropic_vision import AnthropicVisionProvider
from .base import VisionProvider
from .prompt import ANALYSIS_PROMPT

__all__ = ["ANALYSIS_PROMPT", "AnthropicVisionProvider", "VisionProvider"]
