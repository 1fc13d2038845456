"""Initial database schema.

Revision ID: 001_initial
Revises: None
Create Date: 2026-09-14

Creates all initial tables for the Rentline platform:
- Users
- Properties
- Bookings
- Booking payments (append-only ledger)
- Booking messages
"""

from typing import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers
revision: str = "001_initial"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create all database tables."""

    # ==================== USERS ====================
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("email", sa.String(255), unique=True, nullable=False, index=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("phone", sa.String(20)),
        sa.Column("role", sa.String(20), nullable=False, default="renter"),
        sa.Column("is_active", sa.Boolean, default=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), onupdate=sa.func.now()),
    )

    # ==================== PROPERTIES ====================
    op.create_table(
        "properties",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("owner_id", sa.Uuid, sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column("title", sa.String(100), nullable=False),
        sa.Column("rent_price", sa.Integer, nullable=False),
        sa.Column("security_deposit", sa.Integer, nullable=False, default=0),
        sa.Column("is_available", sa.Boolean, nullable=False, default=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), onupdate=sa.func.now()),
        sa.CheckConstraint("rent_price >= 0", name="ck_properties_rent_price_non_negative"),
        sa.CheckConstraint("security_deposit >= 0", name="ck_properties_deposit_non_negative"),
    )

    # ==================== BOOKINGS ====================
    op.create_table(
        "bookings",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("booking_number", sa.String(20), unique=True, nullable=False, index=True),
        sa.Column("property_id", sa.Uuid, sa.ForeignKey("properties.id"), nullable=False, index=True),
        sa.Column("renter_id", sa.Uuid, sa.ForeignKey("users.id"), nullable=False, index=True),
        sa.Column("owner_id", sa.Uuid, sa.ForeignKey("users.id"), nullable=False, index=True),
        sa.Column("start_date", sa.Date, nullable=False),
        sa.Column("end_date", sa.Date, nullable=False),
        sa.Column("move_in_date", sa.Date),
        sa.Column("move_out_date", sa.Date),
        sa.Column("monthly_rent", sa.Integer, nullable=False),
        sa.Column("security_deposit", sa.Integer, nullable=False),
        sa.Column("total_amount", sa.Integer, nullable=False),
        sa.Column("status", sa.String(20), nullable=False, default="pending", index=True),
        sa.Column("payment_status", sa.String(20), nullable=False, default="pending"),
        sa.Column("special_requests", sa.String(500)),
        sa.Column("cancelled_by", sa.Uuid, sa.ForeignKey("users.id")),
        sa.Column("cancellation_reason", sa.Text),
        sa.Column("cancelled_at", sa.DateTime(timezone=True)),
        sa.Column("approved_at", sa.DateTime(timezone=True)),
        sa.Column("completed_at", sa.DateTime(timezone=True)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), onupdate=sa.func.now()),
        sa.CheckConstraint("start_date < end_date", name="ck_bookings_date_order"),
        sa.CheckConstraint("monthly_rent >= 0", name="ck_bookings_rent_non_negative"),
        sa.CheckConstraint("security_deposit >= 0", name="ck_bookings_deposit_non_negative"),
        sa.CheckConstraint("total_amount >= 0", name="ck_bookings_total_non_negative"),
    )
    op.create_index("ix_bookings_property_dates", "bookings", ["property_id", "start_date", "end_date"])

    # ==================== LEDGER ====================
    op.create_table(
        "booking_payments",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("booking_id", sa.Uuid, sa.ForeignKey("bookings.id"), nullable=False, index=True),
        sa.Column("recorded_by", sa.Uuid, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("sequence", sa.Integer, nullable=False),
        sa.Column("amount", sa.Integer, nullable=False),
        sa.Column("payment_method", sa.String(20), nullable=False),
        sa.Column("description", sa.Text),
        sa.Column("transaction_id", sa.String(100)),
        sa.Column("paid_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("amount > 0", name="ck_booking_payments_amount_positive"),
        sa.UniqueConstraint("booking_id", "sequence", name="uq_booking_payments_sequence"),
    )

    # ==================== MESSAGES ====================
    op.create_table(
        "booking_messages",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("booking_id", sa.Uuid, sa.ForeignKey("bookings.id"), nullable=False, index=True),
        sa.Column("sender_id", sa.Uuid, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("message", sa.Text, nullable=False),
        sa.Column("is_read", sa.Boolean, default=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )


def downgrade() -> None:
    """Drop all database tables in reverse order."""
    op.drop_table("booking_messages")
    op.drop_table("booking_payments")
    op.drop_index("ix_bookings_property_dates", table_name="bookings")
    op.drop_table("bookings")
    op.drop_table("properties")
    op.drop_table("users")
