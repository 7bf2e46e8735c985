"""create tables

Revision ID: v1
Revises:
Create Date: 2024-01-10 08:00:00
"""

from alembic import op
import sqlalchemy as sa

revision = "v1"
down_revision = None
branch_labels = None
depends_on = None

# frozen copies of the column types; later model changes get their own revision
id_type = sa.BigInteger().with_variant(sa.Integer(), "sqlite")
money = sa.Numeric(10, 2)


def created_at():
    return sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now())


def cascade_fk(column, target):
    return sa.ForeignKeyConstraint([column], [target], ondelete="CASCADE", onupdate="CASCADE")


def upgrade():
    op.create_table(
        "users",
        sa.Column("id", id_type, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(150), nullable=False),
        created_at(),
        sa.UniqueConstraint("email"),
    )
    op.create_table(
        "products",
        sa.Column("id", id_type, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("price", money, nullable=False),
        sa.Column("stock", sa.Integer(), nullable=False, server_default="0"),
        created_at(),
    )
    op.create_table(
        "orders",
        sa.Column("id", id_type, primary_key=True, autoincrement=True),
        sa.Column("total", money, nullable=False),
        sa.Column("status", sa.String(50), nullable=False, server_default="CREATED"),
        sa.Column("user_id", id_type, nullable=False),
        created_at(),
        cascade_fk("user_id", "users.id"),
    )
    op.create_index(op.f("ix_orders_user_id"), "orders", ["user_id"])

    op.create_table(
        "order_items",
        sa.Column("id", id_type, primary_key=True, autoincrement=True),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("subtotal", money, nullable=False),
        sa.Column("product_id", id_type, nullable=False),
        sa.Column("order_id", id_type, nullable=False),
        created_at(),
        cascade_fk("product_id", "products.id"),
        cascade_fk("order_id", "orders.id"),
    )
    op.create_index(op.f("ix_order_items_product_id"), "order_items", ["product_id"])
    op.create_index(op.f("ix_order_items_order_id"), "order_items", ["order_id"])

    op.create_table(
        "product_reviews",
        sa.Column("user_id", id_type, primary_key=True, autoincrement=False),
        sa.Column("product_id", id_type, primary_key=True, autoincrement=False),
        sa.Column("rating", sa.Integer(), nullable=False),
        sa.Column("comment", sa.String(500), nullable=True),
        created_at(),
        cascade_fk("user_id", "users.id"),
        cascade_fk("product_id", "products.id"),
    )
    op.create_index(op.f("ix_product_reviews_product_id"), "product_reviews", ["product_id"])


def downgrade():
    op.drop_table("product_reviews")
    op.drop_table("order_items")
    op.drop_table("orders")
    op.drop_table("products")
    op.drop_table("users")
