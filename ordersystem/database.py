"""
Database helpers — engine, sessions, schema creation, migrations and raw SQL access.
"""

import logging
from contextlib import contextmanager
from typing import Optional

from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from ordersystem.config import DATABASE_URL, SQL_ECHO
from ordersystem.models import Base

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_conn, _record):
    # SQLite ignores ON DELETE CASCADE unless asked per connection
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_db_engine(url: str = DATABASE_URL, echo: bool = SQL_ECHO) -> Engine:
    """Build an engine; SQLite gets foreign key enforcement switched on."""
    kwargs = {"echo": echo}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if ":memory:" in url or url in ("sqlite://", "sqlite+pysqlite://"):
            # one shared connection, otherwise every checkout is a new empty db
            kwargs["poolclass"] = StaticPool
    eng = create_engine(url, **kwargs)
    if eng.dialect.name == "sqlite":
        event.listen(eng, "connect", _enable_sqlite_foreign_keys)
    return eng


engine = create_db_engine()
SessionLocal = sessionmaker(bind=engine, expire_on_commit=False)


def init_db(bind: Engine = engine):
    """Create tables straight from the models, without migration history.

    Meant for tests and scratch databases; real databases go through
    :func:`migrate`.
    """
    Base.metadata.create_all(bind)
    logger.info("Schema ready: %s", ", ".join(Base.metadata.tables))


def drop_db(bind: Engine = engine):
    Base.metadata.drop_all(bind)
    logger.info("Schema dropped")


# --------------- Migrations -----------------------------------------------

def alembic_config(url: str = DATABASE_URL) -> Config:
    cfg = Config()
    cfg.set_main_option("script_location", "ordersystem:migrations")
    # "%" is special to ConfigParser
    cfg.set_main_option("sqlalchemy.url", url.replace("%", "%%"))
    return cfg


def migrate(bind: Engine = engine, revision: str = "head"):
    """Apply the versioned migrations (schema, then demo data) up to *revision*."""
    cfg = alembic_config(bind.url.render_as_string(hide_password=False))
    with bind.begin() as connection:
        cfg.attributes["connection"] = connection
        command.upgrade(cfg, revision)
    logger.info("Schema at revision %s", schema_revision(bind))


def schema_revision(bind: Engine = engine) -> Optional[str]:
    """Current migration revision, ``None`` for a database never migrated."""
    with bind.connect() as connection:
        return MigrationContext.configure(connection).get_current_revision()


@contextmanager
def session_scope(factory=SessionLocal):
    """Unit of work: commit on success, roll back and re-raise on failure."""
    session = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def get_session():
    """FastAPI dependency — one session per request."""
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def query(session: Session, sql, params=None, one=False):
    """Execute a SELECT and return rows as dicts."""
    result = session.execute(text(sql), params or {})
    rows = [dict(r) for r in result.mappings().all()]
    if one:
        return rows[0] if rows else None
    return rows


def execute(session: Session, sql, params=None) -> int:
    """Execute an INSERT / UPDATE / DELETE and return the affected row count."""
    result = session.execute(text(sql), params or {})
    return result.rowcount
