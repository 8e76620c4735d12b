"""
PaletteForge API Schemas
Pydantic models for palette extraction request/response validation.
"""
from typing import List
from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Health check response."""
    ok: bool = Field(True, description="Service health status")
    version: str = Field(..., description="Service version")
    service: str = Field("paletteforge", description="Service name")


class ErrorResponse(BaseModel):
    """Error response."""
    detail: str = Field(..., description="Error message")


class PaletteColor(BaseModel):
    """Single palette entry."""
    hex: str = Field(
        ...,
        pattern=r"^#[0-9A-Fa-f]{6}$",
        description="Hex color code in format #RRGGBB"
    )
    rgb: List[int] = Field(
        ...,
        min_length=3,
        max_length=3,
        description="RGB triple, each channel 0-255"
    )


class StageInfo(BaseModel):
    """Working-set summary after one pipeline stage."""
    stage: str = Field(..., description="Pipeline stage name")
    sample_count: int = Field(..., ge=0, description="Distinct colors after the stage")
    total_mass: float = Field(..., ge=0.0, description="Summed pixel mass after the stage")
    duration_ms: float = Field(..., ge=0.0, description="Stage duration in milliseconds")


class PaletteResponse(BaseModel):
    """Palette extraction response."""
    request_id: str = Field(..., description="Request identifier for log correlation")
    width: int = Field(..., description="Width of the downscaled image analysed")
    height: int = Field(..., description="Height of the downscaled image analysed")
    source_width: int = Field(..., description="Width of the uploaded image")
    source_height: int = Field(..., description="Height of the uploaded image")
    sampled_pixels: int = Field(..., description="Pixels fed into the histogram")
    speed: str = Field(..., description="Bundling speed profile used")
    colors: List[PaletteColor] = Field(..., description="Palette ordered by descending score")
    stages: List[StageInfo] = Field(default_factory=list, description="Per-stage trace")
