"""
Palette Extraction API Orchestrator

Decodes an uploaded image, downscales it for the requested speed profile and
runs the palette pipeline, translating pipeline errors into HTTP errors.
"""

import time
from typing import Any, Dict

from fastapi import HTTPException, UploadFile
from fastapi.concurrency import run_in_threadpool

from paletteforge.config import config
from paletteforge.schemas import PaletteColor, PaletteResponse, StageInfo
from paletteforge.services.colors.errors import (
    ImageDecodeError, InsufficientDataError, InvalidConfigError, InvalidSampleError, PaletteError
)
from paletteforge.services.colors.extraction import PaletteOptions, run_pipeline
from paletteforge.services.colors.samples import rgb_to_hex
from paletteforge.services.imaging import load_pixels, validate_file_upload
from paletteforge.services.observability import performance_monitor
from paletteforge.utils.ids import generate_request_id
from paletteforge.utils.logging import get_logger
from paletteforge.utils.metrics import get_metrics

logger = get_logger()

ERROR_STATUS = {
    InvalidConfigError: 400,
    ImageDecodeError: 400,
    InsufficientDataError: 422,
    InvalidSampleError: 422,
}


def status_for(error: PaletteError) -> int:
    for error_type, status in ERROR_STATUS.items():
        if isinstance(error, error_type):
            return status
    return 500


async def handle_palette(file: UploadFile, params: Dict[str, Any]) -> PaletteResponse:
    """
    Extract a palette from an uploaded image.

    Args:
        file: Uploaded image file
        params: Query parameters (colors, speed, min_coverage,
            min_white_distance, min_black_distance); None means service default

    Returns:
        PaletteResponse with the ordered palette and stage trace

    Raises:
        HTTPException: 400 for bad options or images, 415 for unsupported
            media, 422 when the image has too little color data
    """
    request_id = generate_request_id("pal")
    start_time = time.time()
    metrics = get_metrics()
    metrics.increment_request_count()

    logger.info("Starting palette extraction", extra={"request_id": request_id})

    try:
        # Options are checked before the upload is decoded
        options = PaletteOptions.from_config(
            config,
            colors_to_pick=params.get('colors'),
            bundling_speed=params.get('speed'),
            min_coverage=params.get('min_coverage'),
            min_white_distance=params.get('min_white_distance'),
            min_black_distance=params.get('min_black_distance'),
        ).validate()

        validate_file_upload(file)
        file_bytes = await file.read()
        stream = load_pixels(file_bytes, options.speed_profile.scale)

        with performance_monitor("palette_pipeline", pixel_count=stream.pixel_count):
            result = await run_in_threadpool(run_pipeline, stream.pixels, options)

    except PaletteError as e:
        status = status_for(e)
        metrics.increment_failure_count(type(e).__name__.lower())
        logger.error(f"Palette extraction failed: {str(e)}",
                     extra={
                         "request_id": request_id,
                         "ms_total": (time.time() - start_time) * 1000,
                         "result": "error",
                         "error_type": type(e).__name__
                     })
        raise HTTPException(status_code=status, detail=str(e)) from e
    except HTTPException as e:
        metrics.increment_failure_count(f"http_{e.status_code}")
        logger.warning(f"Upload rejected: {e.detail}",
                       extra={
                           "request_id": request_id,
                           "status_code": e.status_code,
                           "result": "rejected"
                       })
        raise

    total_ms = (time.time() - start_time) * 1000
    metrics.increment_speed_count(options.bundling_speed)
    metrics.record_palette_size(len(result.palette))
    metrics.record_timing("palette_request", total_ms)

    logger.info("Palette extraction completed successfully",
                extra={
                    "request_id": request_id,
                    "dims": f"{stream.width}x{stream.height}",
                    "colors": len(result.palette),
                    "speed": options.bundling_speed,
                    "ms_total": total_ms,
                    "result": "ok"
                })

    return PaletteResponse(
        request_id=request_id,
        width=stream.width,
        height=stream.height,
        source_width=stream.source_width,
        source_height=stream.source_height,
        sampled_pixels=stream.pixel_count,
        speed=options.bundling_speed,
        colors=[PaletteColor(hex=rgb_to_hex(rgb), rgb=list(rgb)) for rgb in result.palette],
        stages=[StageInfo(**event.to_dict()) for event in result.stages]
    )
