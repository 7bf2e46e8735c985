"""seed orders

Revision ID: v4
Revises: v3
Create Date: 2024-02-05 10:00:00
"""

from alembic import op
import sqlalchemy as sa

from ordersystem import seed

revision = "v4"
down_revision = "v3"
branch_labels = None
depends_on = None

orders = sa.table(
    "orders",
    sa.column("id", sa.Integer),
    sa.column("total", sa.Numeric(10, 2)),
    sa.column("status", sa.String),
    sa.column("user_id", sa.Integer),
    sa.column("created_at", sa.String),
)


def upgrade():
    op.bulk_insert(orders, seed.as_dicts(seed.ORDER_COLUMNS, seed.ORDERS))


def downgrade():
    ids = [row[0] for row in seed.ORDERS]
    op.execute(orders.delete().where(orders.c.id.in_(ids)))
