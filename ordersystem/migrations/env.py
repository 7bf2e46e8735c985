"""
Alembic environment.

``database.migrate`` hands over an open connection through
``config.attributes``. The ``alembic`` command line has no connection, so
an engine is built from ``sqlalchemy.url`` (or ``DATABASE_URL``).
"""

import logging

from alembic import context

from ordersystem.config import DATABASE_URL, configure_logging
from ordersystem.database import create_db_engine
from ordersystem.models import Base

config = context.config
target_metadata = Base.metadata

logger = logging.getLogger("ordersystem.migrations")

if config.config_file_name is not None:
    # started from the alembic command line
    configure_logging()


def _url() -> str:
    return config.get_main_option("sqlalchemy.url") or DATABASE_URL


def run_migrations_offline():
    context.configure(
        url=_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        render_as_batch=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def _run(connection):
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        render_as_batch=connection.dialect.name == "sqlite",
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    connection = config.attributes.get("connection")
    if connection is not None:
        _run(connection)
        return

    engine = create_db_engine(_url())
    logger.info("Migrating %s", engine.url)
    try:
        with engine.connect() as conn:
            _run(conn)
    finally:
        engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
