"""initial schema

Revision ID: 3f2a9c1d7e10
Revises:
Create Date: 2026-10-19 09:12:44.318204

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "3f2a9c1d7e10"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("firstname", sa.String(100), nullable=False),
        sa.Column("lastname", sa.String(100), nullable=False),
        sa.Column("role", sa.Enum("admin", "manager", "user", name="user_role"), nullable=False),
        sa.Column("qr_token", sa.String(64), nullable=False, unique=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    op.create_table(
        "menus",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("name", sa.String(128), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    op.create_table(
        "menu_days",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("menu_id", sa.Integer, sa.ForeignKey("menus.id", ondelete="CASCADE"), nullable=False),
        sa.Column("available_date", sa.Date, nullable=False),
        sa.Column("max_quantity", sa.Integer, nullable=True),
        sa.UniqueConstraint("menu_id", "available_date", name="uq_menu_days_menu_id_available_date"),
    )
    op.create_index("ix_menu_days_available_date", "menu_days", ["available_date"])

    op.create_table(
        "orders",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id"), nullable=True),
        sa.Column("customer_name", sa.String(200), nullable=False),
        sa.Column("order_date", sa.Date, nullable=False),
        sa.Column("total", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        # уникальность заказа пользователя на день на уровне БД
        sa.UniqueConstraint("user_id", "order_date", name="uq_orders_user_id_order_date"),
    )
    op.create_index("ix_orders_user_id", "orders", ["user_id"])
    op.create_index("ix_orders_order_date", "orders", ["order_date"])

    op.create_table(
        "order_items",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("order_id", sa.Integer, sa.ForeignKey("orders.id", ondelete="CASCADE"), nullable=False),
        sa.Column("menu_id", sa.Integer, sa.ForeignKey("menus.id"), nullable=False),
        sa.Column("quantity", sa.Integer, nullable=False, server_default="1"),
        sa.Column("price_at_order", sa.Numeric(10, 2), nullable=False),
        sa.CheckConstraint("quantity > 0", name="ck_order_items_quantity_positive"),
    )
    op.create_index("ix_order_items_order_id", "order_items", ["order_id"])
    op.create_index("ix_order_items_menu_id", "order_items", ["menu_id"])

    op.create_table(
        "locked_dates",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("locked_date", sa.Date, nullable=False, unique=True),
        sa.Column("locked_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("locked_by", sa.Integer, sa.ForeignKey("users.id"), nullable=True),
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table("locked_dates")
    op.drop_table("order_items")
    op.drop_table("orders")
    op.drop_table("menu_days")
    op.drop_table("menus")
    op.drop_table("users")
    sa.Enum(name="user_role").drop(op.get_bind(), checkfirst=True)
