"""seed product reviews

Revision ID: v6
Revises: v5
Create Date: 2024-02-08 09:00:00
"""

from alembic import op
import sqlalchemy as sa

from ordersystem import seed

revision = "v6"
down_revision = "v5"
branch_labels = None
depends_on = None

product_reviews = sa.table(
    "product_reviews",
    sa.column("user_id", sa.Integer),
    sa.column("product_id", sa.Integer),
    sa.column("rating", sa.Integer),
    sa.column("comment", sa.String),
    sa.column("created_at", sa.String),
)


def upgrade():
    op.bulk_insert(product_reviews, seed.as_dicts(seed.PRODUCT_REVIEW_COLUMNS, seed.PRODUCT_REVIEWS))


def downgrade():
    keys = [(row[0], row[1]) for row in seed.PRODUCT_REVIEWS]
    op.execute(
        product_reviews.delete().where(
            sa.tuple_(product_reviews.c.user_id, product_reviews.c.product_id).in_(keys)
        )
    )
