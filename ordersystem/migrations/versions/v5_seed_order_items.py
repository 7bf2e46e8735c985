"""seed order items

Revision ID: v5
Revises: v4
Create Date: 2024-02-05 10:00:00
"""

from alembic import op
import sqlalchemy as sa

from ordersystem import seed

revision = "v5"
down_revision = "v4"
branch_labels = None
depends_on = None

order_items = sa.table(
    "order_items",
    sa.column("id", sa.Integer),
    sa.column("quantity", sa.Integer),
    sa.column("subtotal", sa.Numeric(10, 2)),
    sa.column("product_id", sa.Integer),
    sa.column("order_id", sa.Integer),
    sa.column("created_at", sa.String),
)


def upgrade():
    op.bulk_insert(order_items, seed.as_dicts(seed.ORDER_ITEM_COLUMNS, seed.ORDER_ITEMS))


def downgrade():
    ids = [row[0] for row in seed.ORDER_ITEMS]
    op.execute(order_items.delete().where(order_items.c.id.in_(ids)))
