"""
Main entrypoint: FastAPI reputation server under uvicorn.

Env: API_HOST, API_PORT, DATABASE_URL / REPUTUL_DB_PATH, REPUTUL_* scoring settings, LOG_LEVEL.

Equivalent: uvicorn backend_reputul.api_server.app:app --host 0.0.0.0 --port 8000
"""

import os

# Configure structured JSON logging before other imports that may log
from backend_reputul.reputul_logging import get_logger

logger = get_logger("main")


def main() -> None:
    """Validate scoring config, then run the API server in the main thread."""
    from backend_reputul.config.env import get_api_host, get_api_port
    from backend_reputul.config.settings import get_scoring_config
    from backend_reputul.core.exceptions import ConfigurationError

    try:
        config = get_scoring_config()
    except ConfigurationError as e:
        logger.error("main_config_error", setting=e.setting, message=e.message)
        raise SystemExit(1) from e

    api_host = get_api_host()
    api_port = get_api_port()

    from backend_reputul.api_server.app import app
    import uvicorn

    logger.info("main_server_starting", host=api_host, port=api_port, goal_cap=config.goal_cap)
    uvicorn.run(app, host=api_host, port=api_port, log_level=os.getenv("LOG_LEVEL", "info").lower())


if __name__ == "__main__":
    main()
