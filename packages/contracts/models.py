from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

# Passed through to viewers exactly as decoded from the model reply.
AnalysisResult = dict[str, Any]

CHICKEN_NAMES = [
    "Henrietta",
    "Nugget",
    "Colonel",
    "Goldie",
    "Pepper",
    "Maple",
    "Cinnamon",
    "Biscuit",
]
CHICKEN_STATES: list[str] = ["active", "resting", "alert"]


class CaptureRegion(BaseModel):
    model_config = ConfigDict(frozen=True)

    x: int
    y: int
    width: int = Field(gt=0)
    height: int = Field(gt=0)

    @property
    def bbox(self) -> tuple[int, int, int, int]:
        return (self.x, self.y, self.x + self.width, self.y + self.height)

    @classmethod
    def parse(cls, raw: str) -> "CaptureRegion":
        parts = [p.strip() for p in raw.split(",")]
        if len(parts) != 4:
            raise ValueError(f"capture region must be 'x,y,width,height', got {raw!r}")
        x, y, width, height = (int(p) for p in parts)
        return cls(x=x, y=y, width=width, height=height)


class HealthResponse(BaseModel):
    status: Literal["ok"] = "ok"
    clients: int
    interval: int


class AnalyzeResponse(BaseModel):
    success: bool = True
    result: AnalysisResult


class FrameResponse(BaseModel):
    image: str


class ErrorResponse(BaseModel):
    error: str
