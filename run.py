"""Entry point for the Exam Simulator API.

Starts the FastAPI application with Uvicorn.  Host, port and log
level come from the environment (``HOST``, ``PORT``, ``LOG_LEVEL``),
optionally through a ``.env`` file in the working directory.

Usage:
    python run.py
"""
import logging

from uvicorn import Config, Server

from exam_simulator_api.app.core.config import settings
from exam_simulator_api.app.main import app


def main() -> None:
    """Serve the API until interrupted."""
    config = Config(
        app=app,
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
    server = Server(config)
    logging.getLogger(__name__).info("Starting %s on %s:%s", settings.project_name, settings.host, settings.port)
    server.run()


if __name__ == "__main__":
    try:
        main()
    except (KeyboardInterrupt, SystemExit):
        pass
