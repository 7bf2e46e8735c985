"""seed users

Revision ID: v2
Revises: v1
Create Date: 2024-01-15 10:30:00
"""

from alembic import op
import sqlalchemy as sa

from ordersystem import seed

revision = "v2"
down_revision = "v1"
branch_labels = None
depends_on = None

users = sa.table(
    "users",
    sa.column("id", sa.Integer),
    sa.column("name", sa.String),
    sa.column("email", sa.String),
    sa.column("created_at", sa.String),
)


def upgrade():
    op.bulk_insert(users, seed.as_dicts(seed.USER_COLUMNS, seed.USERS))


def downgrade():
    ids = [row[0] for row in seed.USERS]
    op.execute(users.delete().where(users.c.id.in_(ids)))
