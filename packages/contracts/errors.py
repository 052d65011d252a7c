from __future__ import annotations


class CoopMonitorError(Exception):
    """Base class for failures that abort a single analysis cycle."""


class CaptureError(CoopMonitorError):
    """The OS-level screen grab failed (no display, permission denied, ...)."""


class AnalysisError(CoopMonitorError):
    """The vision provider could not be reached or rejected the request."""


class ParseError(CoopMonitorError):
    """The provider reply did not contain a decodable JSON object."""
