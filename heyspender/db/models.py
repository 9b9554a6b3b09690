"""SQLAlchemy ORM models."""
import uuid

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from heyspender.core.clock import utcnow
from heyspender.infrastructure.database.base import Base


def generate_uuid() -> str:
    return str(uuid.uuid4())


class Account(Base):
    __tablename__ = "accounts"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    username = Column(String(50), unique=True, nullable=False, index=True)
    full_name = Column(String(150), nullable=False, default="")
    email = Column(String(255), unique=True, index=True)
    phone = Column(String(30))
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default="user")
    is_active = Column(Boolean, nullable=False, default=True)
    email_verified_at = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), onupdate=utcnow)
    last_login_at = Column(DateTime(timezone=True))


class Wishlist(Base):
    __tablename__ = "wishlists"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    owner_id = Column(String(36), ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    slug = Column(String(220), unique=True, nullable=False, index=True)
    occasion = Column(String(20), nullable=False, default="other")
    wishlist_date = Column(Date)
    story = Column(Text)
    cover_image_url = Column(String(500))
    visibility = Column(String(20), nullable=False, default="unlisted")
    status = Column(String(20), nullable=False, default="active")
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), onupdate=utcnow)

    owner = relationship("Account")
    items = relationship("WishlistItem", back_populates="wishlist", cascade="all, delete-orphan")
    goals = relationship("Goal", back_populates="wishlist", cascade="all, delete-orphan")


class WishlistItem(Base):
    __tablename__ = "wishlist_items"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    wishlist_id = Column(String(36), ForeignKey("wishlists.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    description = Column(Text)
    unit_price_kobo = Column(Integer, nullable=False, default=0)
    qty_total = Column(Integer, nullable=False, default=1)
    qty_claimed = Column(Integer, nullable=False, default=0)
    product_url = Column(String(1000))
    image_url = Column(String(500))
    allow_group_gift = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), onupdate=utcnow)

    wishlist = relationship("Wishlist", back_populates="items")
    claims = relationship("Claim", back_populates="item", cascade="all, delete-orphan")


class Goal(Base):
    __tablename__ = "goals"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    wishlist_id = Column(String(36), ForeignKey("wishlists.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    target_amount_kobo = Column(Integer, nullable=False, default=0)
    amount_raised_kobo = Column(Integer, nullable=False, default=0)
    deadline = Column(Date)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), onupdate=utcnow)

    wishlist = relationship("Wishlist", back_populates="goals")
    contributions = relationship("Contribution", back_populates="goal", cascade="all, delete-orphan")


class Claim(Base):
    __tablename__ = "claims"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    wishlist_item_id = Column(
        String(36), ForeignKey("wishlist_items.id", ondelete="CASCADE"), nullable=False, index=True
    )
    supporter_user_id = Column(String(36), ForeignKey("accounts.id", ondelete="SET NULL"), index=True)
    supporter_contact = Column(String(255), nullable=False)
    note = Column(Text)
    status = Column(String(20), nullable=False, default="pending")
    amount_paid_kobo = Column(Integer, nullable=False, default=0)
    expire_at = Column(DateTime(timezone=True), nullable=False)
    scheduled_purchase_date = Column(Date)
    reminder_channel = Column(String(20))
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), onupdate=utcnow)

    item = relationship("WishlistItem", back_populates="claims")
    supporter = relationship("Account")


class Contribution(Base):
    __tablename__ = "contributions"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    goal_id = Column(String(36), ForeignKey("goals.id", ondelete="CASCADE"), nullable=False, index=True)
    supporter_user_id = Column(String(36), ForeignKey("accounts.id", ondelete="SET NULL"), index=True)
    display_name = Column(String(150))
    is_anonymous = Column(Boolean, nullable=False, default=False)
    amount_kobo = Column(Integer, nullable=False)
    currency = Column(String(10), nullable=False, default="NGN")
    payment_provider = Column(String(50))
    payment_ref = Column(String(100), unique=True, index=True)
    status = Column(String(20), nullable=False, default="pending")
    created_at = Column(DateTime(timezone=True), default=utcnow)

    goal = relationship("Goal", back_populates="contributions")


class Wallet(Base):
    __tablename__ = "wallets"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    account_id = Column(String(36), ForeignKey("accounts.id", ondelete="CASCADE"), unique=True, nullable=False)
    balance_kobo = Column(Integer, nullable=False, default=0)
    currency = Column(String(10), nullable=False, default="NGN")
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), onupdate=utcnow)

    account = relationship("Account")
    transactions = relationship("WalletTransaction", back_populates="wallet", cascade="all, delete-orphan")
    payouts = relationship("Payout", back_populates="wallet", cascade="all, delete-orphan")


class WalletTransaction(Base):
    __tablename__ = "wallet_transactions"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    wallet_id = Column(String(36), ForeignKey("wallets.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(String(10), nullable=False)  # credit, debit
    source = Column(String(50))
    category = Column(String(30))
    amount_kobo = Column(Integer, nullable=False)
    description = Column(String(500))
    reference = Column(String(100), index=True)
    claim_id = Column(String(36), ForeignKey("claims.id", ondelete="SET NULL"))
    payout_id = Column(String(36), ForeignKey("payouts.id", ondelete="SET NULL"))
    created_at = Column(DateTime(timezone=True), default=utcnow)

    wallet = relationship("Wallet", back_populates="transactions")


class Payout(Base):
    __tablename__ = "payouts"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    wallet_id = Column(String(36), ForeignKey("wallets.id", ondelete="CASCADE"), nullable=False, index=True)
    amount_kobo = Column(Integer, nullable=False)
    destination_bank_code = Column(String(20))
    destination_account = Column(String(20))
    destination_account_name = Column(String(150))
    status = Column(String(20), nullable=False, default="requested")
    debited = Column(Boolean, nullable=False, default=False)
    provider = Column(String(50))
    provider_ref = Column(String(100))
    failure_reason = Column(String(255))
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), onupdate=utcnow)

    wallet = relationship("Wallet", back_populates="payouts")


class PaymentIntent(Base):
    __tablename__ = "payment_intents"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    reference = Column(String(100), unique=True, nullable=False, index=True)
    kind = Column(String(30), nullable=False)  # cash_payment, contribution
    amount_kobo = Column(Integer, nullable=False)
    currency = Column(String(10), nullable=False, default="NGN")
    email = Column(String(255), nullable=False)
    payer_id = Column(String(36), ForeignKey("accounts.id", ondelete="SET NULL"))
    recipient_id = Column(String(36), ForeignKey("accounts.id", ondelete="SET NULL"))
    claim_id = Column(String(36), ForeignKey("claims.id", ondelete="SET NULL"))
    contribution_id = Column(String(36), ForeignKey("contributions.id", ondelete="SET NULL"))
    status = Column(String(20), nullable=False, default="pending")
    authorization_url = Column(String(500))
    gateway_ref = Column(String(100))
    meta = Column(Text)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    settled_at = Column(DateTime(timezone=True))


class Reminder(Base):
    __tablename__ = "reminders"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    claim_id = Column(String(36), ForeignKey("claims.id", ondelete="CASCADE"), nullable=False, index=True)
    contact = Column(String(255), nullable=False)
    channel = Column(String(20), nullable=False, default="email")
    schedule_at = Column(DateTime(timezone=True), nullable=False)
    status = Column(String(20), nullable=False, default="queued")
    created_at = Column(DateTime(timezone=True), default=utcnow)
    sent_at = Column(DateTime(timezone=True))


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("accounts.id", ondelete="CASCADE"), index=True)
    type = Column(String(50), nullable=False)
    title = Column(String(200))
    message = Column(Text)
    payload = Column(Text)
    status = Column(String(20), nullable=False, default="unread")
    created_at = Column(DateTime(timezone=True), default=utcnow)


class AuditLog(Base):
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    actor_user_id = Column(String(36), ForeignKey("accounts.id", ondelete="SET NULL"), index=True)
    action = Column(String(100), nullable=False)
    target_table = Column(String(50))
    target_id = Column(String(36))
    diff = Column(Text)
    created_at = Column(DateTime(timezone=True), default=utcnow)
