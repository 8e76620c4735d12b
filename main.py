from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

# Load environment variables before configuration is read
load_dotenv()

from paletteforge import __version__
from paletteforge.api.v1 import router as v1_router
from paletteforge.config import config
from paletteforge.schemas import HealthResponse
from paletteforge.utils.logging import get_logger

logger = get_logger()

app = FastAPI(
    title="PaletteForge",
    description="Dominant color palette extraction API",
    version=__version__
)

allowed_origins = [origin for origin in config.ALLOWED_ORIGINS.split(",") if origin]
if allowed_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"]
    )

app.include_router(v1_router)


@app.get("/healthz", response_model=HealthResponse)
def health_check():
    """Service health check."""
    return HealthResponse(ok=True, version=__version__, service="paletteforge")


@app.get("/")
def root():
    """Root endpoint"""
    return {
        "message": "PaletteForge API",
        "version": __version__,
        "docs": "/docs"
    }


logger.info("PaletteForge API initialised", extra={"version": __version__})
