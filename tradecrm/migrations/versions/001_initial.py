"""Initial trades CRM schema.

Revision ID: 001_initial
Revises:
Create Date: 2026-10-19

"""
from alembic import op
import sqlalchemy as sa

revision = "001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Accounts (every role)
    op.create_table(
        "app_user",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("role", sa.String(20), nullable=False),
        sa.Column("phone", sa.String(50)),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_app_user_email", "app_user", ["email"], unique=True)
    op.create_index("ix_app_user_created_at", "app_user", ["created_at"])

    # Trade payload, one row per trade account
    op.create_table(
        "trade_profile",
        sa.Column(
            "user_id", sa.Uuid,
            sa.ForeignKey("app_user.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("trade_type", sa.String(100), nullable=False),
        sa.Column("location", sa.String(200)),
        sa.Column("rating", sa.Float, nullable=False),
        sa.Column("availability", sa.String(50), nullable=False),
    )
    op.create_index("ix_trade_profile_trade_type", "trade_profile", ["trade_type"])

    op.create_table(
        "lead",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("phone", sa.String(50), nullable=False),
        sa.Column("email", sa.String(255)),
        sa.Column("address", sa.String(255)),
        sa.Column("town", sa.String(100)),
        sa.Column("trade_type", sa.String(100), nullable=False),
        sa.Column("job_description", sa.Text, nullable=False),
        sa.Column("urgency", sa.String(20), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("priority", sa.String(20), nullable=False),
        sa.Column(
            "assigned_trade_id", sa.Uuid,
            sa.ForeignKey("app_user.id", ondelete="SET NULL"),
        ),
        sa.Column("preferred_date", sa.String(50)),
        sa.Column("notes", sa.Text),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_lead_trade_type", "lead", ["trade_type"])
    op.create_index("ix_lead_status", "lead", ["status"])
    op.create_index("ix_lead_assigned_trade_id", "lead", ["assigned_trade_id"])
    op.create_index("ix_lead_created_at", "lead", ["created_at"])

    op.create_table(
        "payment",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column(
            "lead_id", sa.Uuid,
            sa.ForeignKey("lead.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("amount", sa.Float, nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("invoice_number", sa.String(100)),
        sa.Column("payment_date", sa.DateTime(timezone=True)),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_payment_lead_id", "payment", ["lead_id"])
    op.create_index("ix_payment_created_at", "payment", ["created_at"])

    # Audit trail
    op.create_table(
        "activity_log",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column(
            "lead_id", sa.Uuid,
            sa.ForeignKey("lead.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "user_id", sa.Uuid,
            sa.ForeignKey("app_user.id", ondelete="SET NULL"),
        ),
        sa.Column("action", sa.String(50), nullable=False),
        sa.Column("details", sa.Text),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_activity_log_lead_id", "activity_log", ["lead_id"])
    op.create_index("ix_activity_log_created_at", "activity_log", ["created_at"])


def downgrade() -> None:
    op.drop_table("activity_log")
    op.drop_table("payment")
    op.drop_table("lead")
    op.drop_table("trade_profile")
    op.drop_table("app_user")
