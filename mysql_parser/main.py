"""
FastAPI application entry point.
"""

from fastapi import FastAPI

from mysql_parser import __version__
from mysql_parser.api import parse
from mysql_parser.config import settings
from mysql_parser.utils.logging import setup_logging, get_logger

# Configure structured logging
setup_logging(settings.log_level)

logger = get_logger(__name__)

# Create FastAPI application
app = FastAPI(
    title="MySQL Parser",
    description="Parses MySQL text into uniform, serializable syntax trees",
    version=__version__
)


@app.get("/health")
async def health_check():
    """Health check endpoint for container orchestration."""
    return {"status": "healthy", "version": __version__}


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "MySQL Parser API",
        "version": __version__,
        "docs": "/docs"
    }


# Include API routers
app.include_router(parse.router)


@app.on_event("startup")
async def startup_event():
    """Load the dialect plugins on application startup."""
    logger.info("Starting MySQL Parser API")

    from mysql_parser.plugins.manager import get_plugin_manager
    manager = get_plugin_manager()
    logger.info(f"Dialect plugins loaded: {manager.list_supported_dialects()}")


def run() -> None:
    """Serve the API with uvicorn."""
    import uvicorn
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)


if __name__ == "__main__":
    run()
