#!/usr/bin/env python3
"""
Entry point for the Kingsman storefront backend
Serves the payment, order and failed-order API with uvicorn
"""

import logging
import sys

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from src.api.app import create_app
from src.infrastructure.configuration.config import ConfigValidator, get_config
from src.infrastructure.database.operations import init_db
from src.infrastructure.logging.logging_config import ProductionLogger
from src.infrastructure.utilities.exceptions import DatabaseError

logger = logging.getLogger(__name__)


def setup_app():
    """Setup logging, validate configuration, create tables and build the app"""
    ProductionLogger.setup_logging()

    config = get_config()
    logger.info("Configuration loaded successfully")

    validator = ConfigValidator(config)
    if not validator.validate_all():
        logger.critical("Configuration validation failed - stopping startup: %s", validator.errors)
        raise RuntimeError("Configuration is invalid")

    logger.info("Initializing database...")
    try:
        init_db()
        logger.info("Database initialization completed")
    except DatabaseError as e:
        logger.error("Database initialization failed: %s", e)
        raise

    return create_app(config=config)


def main():
    import uvicorn

    try:
        app = setup_app()
    except (RuntimeError, DatabaseError) as e:
        logger.critical("Startup failed: %s", e)
        sys.exit(1)

    config = get_config()
    logger.info("Starting Kingsman storefront backend on %s:%s", config.host, config.port)
    uvicorn.run(app, host=config.host, port=config.port, log_config=None)


if __name__ == "__main__":
    main()
