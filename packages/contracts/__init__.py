"""Shared contracts for the coop monitor server and operator tools."""

from .errors import AnalysisError, CaptureError, CoopMonitorError, ParseError
from .models import (
    CHICKEN_NAMES,
    CHICKEN_STATES,
    AnalysisResult,
    AnalyzeResponse,
    CaptureRegion,
    ErrorResponse,
    FrameResponse,
    HealthResponse,
)
from .parsing import extract_json_object
from .utils import new_cycle_id

__all__ = [
    "CHICKEN_NAMES",
    "CHICKEN_STATES",
    "AnalysisError",
    "AnalysisResult",
    "AnalyzeResponse",
    "CaptureError",
    "CaptureRegion",
    "CoopMonitorError",
    "ErrorResponse",
    "FrameResponse",
    "HealthResponse",
    "ParseError",
    "extract_json_object",
    "new_cycle_id",
]
