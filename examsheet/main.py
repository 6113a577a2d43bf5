"""
Main application entry point for the exam sheet service.

Usage:
    - Direct: python -m examsheet.main
    - ASGI server: uvicorn examsheet.main:app
"""

import os

from examsheet import create_app
from examsheet.common.logger import app_logger
from examsheet.config import settings

# Setup module logger
logger = app_logger.getChild("main")

app = create_app(app_name=settings.PROJECT_NAME)


@app.get("/")
async def root():
    """Root endpoint."""
    return {"message": f"Welcome to the {settings.PROJECT_NAME} API"}


# Entry point for running the application directly
if __name__ == "__main__":
    import uvicorn

    host = os.environ.get("HOST", "0.0.0.0")
    port = int(os.environ.get("PORT", 8000))
    reload_enabled = os.environ.get("RELOAD", "false").lower() == "true"

    logger.info(f"Starting server on {host}:{port} (reload: {reload_enabled})")

    uvicorn.run(
        "examsheet.main:app",
        host=host,
        port=port,
        reload=reload_enabled,
        log_level="info"
    )
