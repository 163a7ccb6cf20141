"""
daily-write API server.

Usage:
    python main.py

Configuration comes from environment variables (see core/config.py).
"""

import logging

import uvicorn

from api.routes import create_app
from core.config import get_config

logger = logging.getLogger(__name__)


def main() -> None:
    config = get_config()
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logger.info(f"Starting daily-write on {config.host}:{config.port} (data: {config.data_file})")
    uvicorn.run(create_app(), host=config.host, port=config.port, log_level=config.log_level.lower())


if __name__ == "__main__":
    main()
