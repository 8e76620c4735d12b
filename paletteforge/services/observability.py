"""
PaletteForge Observability
Per-stage tracing hook and performance monitoring for the palette pipeline.
"""
import time
from contextlib import contextmanager
from dataclasses import asdict, dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence

import psutil
from loguru import logger

from paletteforge.utils.metrics import get_metrics


@dataclass
class StageEvent:
    """Summary of the working set after a pipeline stage."""
    stage: str
    sample_count: int
    total_mass: float
    duration_ms: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class StageTracer:
    """
    Collects StageEvents emitted between pipeline stages.

    An optional callback receives every event as it is recorded. A tracer
    belongs to a single pipeline run.
    """

    def __init__(self, callback: Optional[Callable[[StageEvent], None]] = None):
        self.callback = callback
        self.events: List[StageEvent] = []

    def record(self, stage: str, samples: Sequence[Any], duration_ms: float) -> StageEvent:
        mass = float(sum(getattr(s, "amount", 0) for s in samples))
        event = StageEvent(
            stage=stage,
            sample_count=len(samples),
            total_mass=mass,
            duration_ms=duration_ms
        )
        self.events.append(event)

        logger.debug(f"Stage {stage} completed in {duration_ms:.1f}ms "
                     f"({event.sample_count} colors, mass {mass:.1f})")

        if self.callback is not None:
            self.callback(event)
        return event

    def summary(self) -> List[Dict[str, Any]]:
        return [event.to_dict() for event in self.events]


@contextmanager
def performance_monitor(operation_name: str, pixel_count: int = 0):
    """Context manager measuring duration and memory of an operation."""
    start_time = time.time()
    start_memory = psutil.Process().memory_info().rss / 1024 / 1024  # MB

    error_msg = None

    try:
        yield
    except Exception as e:
        error_msg = str(e)
        raise
    finally:
        duration_ms = (time.time() - start_time) * 1000
        end_memory = psutil.Process().memory_info().rss / 1024 / 1024  # MB
        get_metrics().record_timing(operation_name, duration_ms)

        if error_msg:
            logger.error(f"Operation {operation_name} failed after {duration_ms:.1f}ms: {error_msg}")
        else:
            logger.info(f"Operation {operation_name} completed in {duration_ms:.1f}ms "
                        f"(pixels: {pixel_count}, memory: {max(start_memory, end_memory):.1f}MB)")
