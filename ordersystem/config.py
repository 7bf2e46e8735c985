"""
Application configuration — loaded once at startup.
"""

import logging
import os

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./orders.db")
SQL_ECHO = os.getenv("SQL_ECHO", "0") == "1"

DEBUG = os.getenv("DEBUG", "1") == "1"
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG" if DEBUG else "INFO").upper()
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# schema and demo data come from the versioned migrations
MIGRATE_ON_STARTUP = os.getenv("MIGRATE_ON_STARTUP", "1") == "1"

API_TITLE = "Order System API"
API_VERSION = "0.1.0"


def configure_logging(level: str = LOG_LEVEL):
    """Install the root handler. Only entry points call this."""
    logging.basicConfig(level=level, format=LOG_FORMAT)
