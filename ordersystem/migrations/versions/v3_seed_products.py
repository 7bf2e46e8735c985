"""seed products

Revision ID: v3
Revises: v2
Create Date: 2024-01-10 08:00:00
"""

from alembic import op
import sqlalchemy as sa

from ordersystem import seed

revision = "v3"
down_revision = "v2"
branch_labels = None
depends_on = None

products = sa.table(
    "products",
    sa.column("id", sa.Integer),
    sa.column("name", sa.String),
    sa.column("price", sa.Numeric(10, 2)),
    sa.column("stock", sa.Integer),
    sa.column("created_at", sa.String),
)


def upgrade():
    op.bulk_insert(products, seed.as_dicts(seed.PRODUCT_COLUMNS, seed.PRODUCTS))


def downgrade():
    ids = [row[0] for row in seed.PRODUCTS]
    op.execute(products.delete().where(products.c.id.in_(ids)))
