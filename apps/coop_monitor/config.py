from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from packages.contracts.models import CaptureRegion
from packages.imaging import DEFAULT_JPEG_QUALITY, DEFAULT_MAX_EDGE

DEFAULT_API_URL = "https://api.anthropic.com"
DEFAULT_MODEL = "claude-sonnet-4-20250514"
DEFAULT_MAX_TOKENS = 1500
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 3000
DEFAULT_INTERVAL_SECONDS = 30.0
DEFAULT_INITIAL_DELAY_SECONDS = 5.0
DEFAULT_STATIC_DIR = Path(__file__).resolve().parent / "static"


def _env(name: str, default: object) -> str:
    return os.getenv(name, "").strip() or str(default)


@dataclass(frozen=True, slots=True)
class Settings:
    """Process-wide configuration, read once at startup."""

    api_key: str = ""
    api_url: str = DEFAULT_API_URL
    model: str = DEFAULT_MODEL
    max_tokens: int = DEFAULT_MAX_TOKENS
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    interval_seconds: float = DEFAULT_INTERVAL_SECONDS
    initial_delay_seconds: float = DEFAULT_INITIAL_DELAY_SECONDS
    capture_region: CaptureRegion | None = None
    max_edge: int = DEFAULT_MAX_EDGE
    jpeg_quality: int = DEFAULT_JPEG_QUALITY
    static_dir: Path = field(default=DEFAULT_STATIC_DIR)

    def __post_init__(self) -> None:
        if self.interval_seconds <= 0:
            raise ValueError("analysis interval must be positive")
        if self.initial_delay_seconds < 0:
            raise ValueError("initial delay must not be negative")
        if not 1 <= self.jpeg_quality <= 100:
            raise ValueError("jpeg quality must be between 1 and 100")
        if self.max_edge < 1:
            raise ValueError("max edge must be positive")

    @property
    def interval_ms(self) -> int:
        return int(self.interval_seconds * 1000)

    @classmethod
    def from_env(cls) -> "Settings":
        region_raw = os.getenv("COOP_MONITOR_CAPTURE_REGION", "").strip()
        return cls(
            api_key=os.getenv("ANTHROPIC_API_KEY", "").strip(),
            api_url=_env("COOP_MONITOR_API_URL", DEFAULT_API_URL),
            model=_env("COOP_MONITOR_MODEL", DEFAULT_MODEL),
            max_tokens=int(_env("COOP_MONITOR_MAX_TOKENS", DEFAULT_MAX_TOKENS)),
            host=_env("COOP_MONITOR_HOST", DEFAULT_HOST),
            port=int(_env("PORT", DEFAULT_PORT)),
            interval_seconds=float(_env("COOP_MONITOR_INTERVAL_SECONDS", DEFAULT_INTERVAL_SECONDS)),
            initial_delay_seconds=float(
                _env("COOP_MONITOR_INITIAL_DELAY_SECONDS", DEFAULT_INITIAL_DELAY_SECONDS)
            ),
            capture_region=CaptureRegion.parse(region_raw) if region_raw else None,
            max_edge=int(_env("COOP_MONITOR_MAX_EDGE", DEFAULT_MAX_EDGE)),
            jpeg_quality=int(_env("COOP_MONITOR_JPEG_QUALITY", DEFAULT_JPEG_QUALITY)),
            static_dir=Path(_env("COOP_MONITOR_STATIC_DIR", DEFAULT_STATIC_DIR)),
        )
