# ========================
# crash_dashboard/server.py
# ========================

"""
Static Feed Server

Serves the incident report CSV files to the dashboard as plain static
resources. No processing happens server-side.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
import uvicorn

from .utils.config import Config

logger = logging.getLogger(__name__)

def create_app(data_dir: Optional[str] = None, config: Optional[Config] = None) -> FastAPI:
    """
    Build the FastAPI app serving ``data_dir`` at the server root.

    Args:
        data_dir (str): Directory holding the feed CSV files
        config (Config): Configuration object, used when ``data_dir`` is omitted

    Returns:
        FastAPI: Application instance
    """
    config = config or Config()
    feed_path = Path(data_dir or config.DATA_DIR)
    feed_path.mkdir(parents=True, exist_ok=True)

    app = FastAPI(
        title="Crash Incident Feed Server",
        description="Static CSV feeds for the crash analysis dashboard",
        version="1.0.0"
    )

    # Allow the dashboard to fetch feeds from another origin
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "timestamp": datetime.now().isoformat(),
            "feeds": sorted(p.name for p in feed_path.glob("*.csv"))
        }

    app.mount("/", StaticFiles(directory=str(feed_path)), name="feeds")
    logger.info(f"Serving feeds from {feed_path.resolve()}")
    return app

def start_server(host: Optional[str] = None, port: Optional[int] = None, config: Optional[Config] = None):
    """Start the feed server."""
    config = config or Config()
    host = host or config.SERVER_HOST
    port = port or config.SERVER_PORT
    logger.info(f"Starting feed server on {host}:{port}")
    uvicorn.run(
        create_app(config=config),
        host=host,
        port=port,
        log_level="info"
    )

if __name__ == "__main__":
    from .utils.logging_setup import setup_logging_from_config
    config = Config()
    setup_logging_from_config(config)
    start_server(config=config)
