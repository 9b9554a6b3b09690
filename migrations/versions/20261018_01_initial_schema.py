"""initial schema: accounts, wishlists, claims, goals, wallets and payments

Revision ID: 5e1f0c2a9b70
Revises:
Create Date: 2026-10-18 09:00:00.000000
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "5e1f0c2a9b70"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
    ]


def upgrade() -> None:
    op.create_table(
        "accounts",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("username", sa.String(length=50), nullable=False),
        sa.Column("full_name", sa.String(length=150), nullable=False, server_default=""),
        sa.Column("email", sa.String(length=255)),
        sa.Column("phone", sa.String(length=30)),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("role", sa.String(length=20), nullable=False, server_default="user"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("email_verified_at", sa.DateTime(timezone=True)),
        *_timestamps(),
        sa.Column("last_login_at", sa.DateTime(timezone=True)),
    )
    op.create_index("ix_accounts_username", "accounts", ["username"], unique=True)
    op.create_index("ix_accounts_email", "accounts", ["email"], unique=True)

    op.create_table(
        "wishlists",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("owner_id", sa.String(length=36), sa.ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("slug", sa.String(length=220), nullable=False),
        sa.Column("occasion", sa.String(length=20), nullable=False, server_default="other"),
        sa.Column("wishlist_date", sa.Date()),
        sa.Column("story", sa.Text()),
        sa.Column("cover_image_url", sa.String(length=500)),
        sa.Column("visibility", sa.String(length=20), nullable=False, server_default="unlisted"),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="active"),
        *_timestamps(),
    )
    op.create_index("ix_wishlists_owner_id", "wishlists", ["owner_id"])
    op.create_index("ix_wishlists_slug", "wishlists", ["slug"], unique=True)

    op.create_table(
        "wishlist_items",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "wishlist_id", sa.String(length=36), sa.ForeignKey("wishlists.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("unit_price_kobo", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("qty_total", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("qty_claimed", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("product_url", sa.String(length=1000)),
        sa.Column("image_url", sa.String(length=500)),
        sa.Column("allow_group_gift", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.CheckConstraint("qty_claimed >= 0 AND qty_claimed <= qty_total", name="ck_wishlist_items_qty_claimed"),
    )
    op.create_index("ix_wishlist_items_wishlist_id", "wishlist_items", ["wishlist_id"])

    op.create_table(
        "goals",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "wishlist_id", sa.String(length=36), sa.ForeignKey("wishlists.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("target_amount_kobo", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("amount_raised_kobo", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("deadline", sa.Date()),
        *_timestamps(),
    )
    op.create_index("ix_goals_wishlist_id", "goals", ["wishlist_id"])

    op.create_table(
        "claims",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "wishlist_item_id",
            sa.String(length=36),
            sa.ForeignKey("wishlist_items.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("supporter_user_id", sa.String(length=36), sa.ForeignKey("accounts.id", ondelete="SET NULL")),
        sa.Column("supporter_contact", sa.String(length=255), nullable=False),
        sa.Column("note", sa.Text()),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="pending"),
        sa.Column("amount_paid_kobo", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("expire_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("scheduled_purchase_date", sa.Date()),
        sa.Column("reminder_channel", sa.String(length=20)),
        *_timestamps(),
    )
    op.create_index("ix_claims_wishlist_item_id", "claims", ["wishlist_item_id"])
    op.create_index("ix_claims_supporter_user_id", "claims", ["supporter_user_id"])

    op.create_table(
        "contributions",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("goal_id", sa.String(length=36), sa.ForeignKey("goals.id", ondelete="CASCADE"), nullable=False),
        sa.Column("supporter_user_id", sa.String(length=36), sa.ForeignKey("accounts.id", ondelete="SET NULL")),
        sa.Column("display_name", sa.String(length=150)),
        sa.Column("is_anonymous", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("amount_kobo", sa.Integer(), nullable=False),
        sa.Column("currency", sa.String(length=10), nullable=False, server_default="NGN"),
        sa.Column("payment_provider", sa.String(length=50)),
        sa.Column("payment_ref", sa.String(length=100)),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="pending"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_contributions_goal_id", "contributions", ["goal_id"])
    op.create_index("ix_contributions_supporter_user_id", "contributions", ["supporter_user_id"])
    op.create_index("ix_contributions_payment_ref", "contributions", ["payment_ref"], unique=True)

    op.create_table(
        "wallets",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "account_id",
            sa.String(length=36),
            sa.ForeignKey("accounts.id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        sa.Column("balance_kobo", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("currency", sa.String(length=10), nullable=False, server_default="NGN"),
        *_timestamps(),
    )

    op.create_table(
        "payouts",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("wallet_id", sa.String(length=36), sa.ForeignKey("wallets.id", ondelete="CASCADE"), nullable=False),
        sa.Column("amount_kobo", sa.Integer(), nullable=False),
        sa.Column("destination_bank_code", sa.String(length=20)),
        sa.Column("destination_account", sa.String(length=20)),
        sa.Column("destination_account_name", sa.String(length=150)),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="requested"),
        sa.Column("debited", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("provider", sa.String(length=50)),
        sa.Column("provider_ref", sa.String(length=100)),
        sa.Column("failure_reason", sa.String(length=255)),
        *_timestamps(),
    )
    op.create_index("ix_payouts_wallet_id", "payouts", ["wallet_id"])

    op.create_table(
        "wallet_transactions",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("wallet_id", sa.String(length=36), sa.ForeignKey("wallets.id", ondelete="CASCADE"), nullable=False),
        sa.Column("type", sa.String(length=10), nullable=False),
        sa.Column("source", sa.String(length=50)),
        sa.Column("category", sa.String(length=30)),
        sa.Column("amount_kobo", sa.Integer(), nullable=False),
        sa.Column("description", sa.String(length=500)),
        sa.Column("reference", sa.String(length=100)),
        sa.Column("claim_id", sa.String(length=36), sa.ForeignKey("claims.id", ondelete="SET NULL")),
        sa.Column("payout_id", sa.String(length=36), sa.ForeignKey("payouts.id", ondelete="SET NULL")),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_wallet_transactions_wallet_id", "wallet_transactions", ["wallet_id"])
    op.create_index("ix_wallet_transactions_reference", "wallet_transactions", ["reference"])

    op.create_table(
        "payment_intents",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("reference", sa.String(length=100), nullable=False),
        sa.Column("kind", sa.String(length=30), nullable=False),
        sa.Column("amount_kobo", sa.Integer(), nullable=False),
        sa.Column("currency", sa.String(length=10), nullable=False, server_default="NGN"),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("payer_id", sa.String(length=36), sa.ForeignKey("accounts.id", ondelete="SET NULL")),
        sa.Column("recipient_id", sa.String(length=36), sa.ForeignKey("accounts.id", ondelete="SET NULL")),
        sa.Column("claim_id", sa.String(length=36), sa.ForeignKey("claims.id", ondelete="SET NULL")),
        sa.Column("contribution_id", sa.String(length=36), sa.ForeignKey("contributions.id", ondelete="SET NULL")),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="pending"),
        sa.Column("authorization_url", sa.String(length=500)),
        sa.Column("gateway_ref", sa.String(length=100)),
        sa.Column("meta", sa.Text()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("settled_at", sa.DateTime(timezone=True)),
    )
    op.create_index("ix_payment_intents_reference", "payment_intents", ["reference"], unique=True)

    op.create_table(
        "reminders",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("claim_id", sa.String(length=36), sa.ForeignKey("claims.id", ondelete="CASCADE"), nullable=False),
        sa.Column("contact", sa.String(length=255), nullable=False),
        sa.Column("channel", sa.String(length=20), nullable=False, server_default="email"),
        sa.Column("schedule_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="queued"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("sent_at", sa.DateTime(timezone=True)),
    )
    op.create_index("ix_reminders_claim_id", "reminders", ["claim_id"])

    op.create_table(
        "notifications",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("user_id", sa.String(length=36), sa.ForeignKey("accounts.id", ondelete="CASCADE")),
        sa.Column("type", sa.String(length=50), nullable=False),
        sa.Column("title", sa.String(length=200)),
        sa.Column("message", sa.Text()),
        sa.Column("payload", sa.Text()),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="unread"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_notifications_user_id", "notifications", ["user_id"])

    op.create_table(
        "audit_logs",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("actor_user_id", sa.String(length=36), sa.ForeignKey("accounts.id", ondelete="SET NULL")),
        sa.Column("action", sa.String(length=100), nullable=False),
        sa.Column("target_table", sa.String(length=50)),
        sa.Column("target_id", sa.String(length=36)),
        sa.Column("diff", sa.Text()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_audit_logs_actor_user_id", "audit_logs", ["actor_user_id"])


def downgrade() -> None:
    for table in (
        "audit_logs",
        "notifications",
        "reminders",
        "payment_intents",
        "wallet_transactions",
        "payouts",
        "wallets",
        "contributions",
        "claims",
        "goals",
        "wishlist_items",
        "wishlists",
        "accounts",
    ):
        op.drop_table(table)
