"""
Dev entry point — migrate the database to the latest revision and report table sizes.
"""

import logging

from ordersystem.config import DEBUG, configure_logging
from ordersystem.database import engine, migrate, query, session_scope
from ordersystem.models import Base

logger = logging.getLogger("ordersystem")


def main():
    configure_logging()
    if DEBUG:
        logger.info("=== ordersystem dev mode (%s) ===", engine.url)
    migrate()

    with session_scope() as session:
        for table in Base.metadata.tables:
            row = query(session, f"SELECT COUNT(*) AS n FROM {table}", one=True)
            logger.info("%-16s %d rows", table, row["n"])


if __name__ == "__main__":
    main()
