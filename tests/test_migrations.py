from datetime import datetime

import pytest
from alembic import command
from sqlalchemy import inspect
from sqlalchemy.orm import Session

from ordersystem import seed
from ordersystem.database import alembic_config, create_db_engine, init_db, migrate, query, schema_revision
from ordersystem.models import Base
from ordersystem.repositories import OrderRepository, UserRepository


@pytest.fixture
def blank_engine():
    eng = create_db_engine("sqlite://", echo=False)
    yield eng
    eng.dispose()


def describe(eng):
    """Reflected shape of every mapped table, independent of declaration order."""
    inspector = inspect(eng)
    shape = {}
    for table in Base.metadata.tables:
        columns = {
            c["name"]: (str(c["type"]), c["nullable"], c["default"])
            for c in inspector.get_columns(table)
        }
        fks = sorted(
            (tuple(fk["constrained_columns"]), fk["referred_table"],
             tuple(fk["referred_columns"]), tuple(sorted(fk["options"].items())))
            for fk in inspector.get_foreign_keys(table)
        )
        indexes = sorted(
            (ix["name"], tuple(ix["column_names"]), bool(ix["unique"]))
            for ix in inspector.get_indexes(table)
        )
        uniques = sorted(tuple(uc["column_names"]) for uc in inspector.get_unique_constraints(table))
        pk = tuple(inspector.get_pk_constraint(table)["constrained_columns"])
        shape[table] = (columns, pk, fks, indexes, uniques)
    return shape


def count(eng, table):
    with Session(eng) as s:
        return query(s, f"SELECT COUNT(*) AS n FROM {table}", one=True)["n"]


def test_fresh_database_has_no_revision(blank_engine):
    assert schema_revision(blank_engine) is None


def test_schema_revision_matches_models(blank_engine):
    from_models = create_db_engine("sqlite://", echo=False)
    try:
        init_db(from_models)
        migrate(blank_engine, "v1")
        assert describe(blank_engine) == describe(from_models)
    finally:
        from_models.dispose()


def test_schema_revision_creates_no_rows(blank_engine):
    migrate(blank_engine, "v1")
    assert schema_revision(blank_engine) == "v1"
    assert count(blank_engine, "users") == 0


def test_upgrade_head_loads_demo_data(blank_engine):
    migrate(blank_engine)

    assert schema_revision(blank_engine) == "v6"
    for table, _, rows in seed.TABLES:
        assert count(blank_engine, table) == len(rows)


def test_upgrade_is_repeatable(blank_engine):
    migrate(blank_engine)
    migrate(blank_engine)

    assert schema_revision(blank_engine) == "v6"
    assert count(blank_engine, "orders") == len(seed.ORDERS)


def test_seed_revisions_stack_in_key_order(blank_engine):
    migrate(blank_engine, "v3")
    assert count(blank_engine, "products") == len(seed.PRODUCTS)
    assert count(blank_engine, "orders") == 0

    migrate(blank_engine)
    assert count(blank_engine, "product_reviews") == len(seed.PRODUCT_REVIEWS)


def test_downgrade_to_schema_removes_demo_data(blank_engine):
    migrate(blank_engine)

    cfg = alembic_config()
    with blank_engine.begin() as connection:
        cfg.attributes["connection"] = connection
        command.downgrade(cfg, "v1")

    assert schema_revision(blank_engine) == "v1"
    for table, _, _ in seed.TABLES:
        assert count(blank_engine, table) == 0


def test_migrated_data_is_queryable(blank_engine):
    migrate(blank_engine)
    with Session(blank_engine) as s:
        assert [u.id for u in UserRepository(s).find_users_created_after(datetime(2024, 3, 1))] == [7, 8]
        stats = OrderRepository(s).get_sales_statistics(datetime(2024, 2, 5, 10), datetime(2024, 2, 10, 15, 30))
        assert stats.count == 2
