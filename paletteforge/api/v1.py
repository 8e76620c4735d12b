"""
PaletteForge v1 API Routes
Implements /v1/palette and supporting routes.
"""
from typing import Optional

from fastapi import APIRouter, File, HTTPException, Query, UploadFile

from paletteforge.config import config
from paletteforge.schemas import ErrorResponse, PaletteResponse
from paletteforge.services.colors.extract_api import handle_palette
from paletteforge.utils.metrics import get_metrics

router = APIRouter(prefix="/v1", tags=["Palette"])


@router.post("/palette",
             response_model=PaletteResponse,
             responses={400: {"model": ErrorResponse}, 415: {"model": ErrorResponse},
                        422: {"model": ErrorResponse}},
             summary="Extract Dominant Palette")
async def extract_palette_endpoint(
    file: UploadFile = File(..., description="Image file (JPEG, PNG, GIF, WEBP, BMP)"),
    colors: Optional[int] = Query(None, description="Palette size (1-16777216)"),
    speed: Optional[str] = Query(None, description="Bundling speed: fast, medium or slow"),
    min_coverage: Optional[float] = Query(None, description="Minimum coverage fraction (0-1)"),
    min_white_distance: Optional[float] = Query(None, description="Minimum distance from white (0-1)"),
    min_black_distance: Optional[float] = Query(None, description="Minimum distance from black (0-1)")
):
    """
    Extract the dominant colors of an uploaded image.

    Options left out fall back to the service defaults. Out-of-range options
    are rejected with 400 before the image is decoded.
    """
    params = {
        'colors': colors,
        'speed': speed,
        'min_coverage': min_coverage,
        'min_white_distance': min_white_distance,
        'min_black_distance': min_black_distance
    }
    return await handle_palette(file=file, params=params)


@router.get("/metrics")
def palette_metrics():
    """Get in-process palette service metrics."""
    if not config.METRICS_ENABLED:
        raise HTTPException(status_code=404, detail="Metrics are disabled")
    return get_metrics().get_summary()
