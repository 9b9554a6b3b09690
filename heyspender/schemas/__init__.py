"""Pydantic schemas used across the project."""
from datetime import date, datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class ORMModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# Auth and accounts

class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=3, max_length=50, pattern=r"^[A-Za-z0-9_.-]+$")
    password: str = Field(..., min_length=6)
    email: EmailStr
    full_name: str = Field("", max_length=150)
    phone: Optional[str] = Field(None, max_length=30)


class LoginRequest(BaseModel):
    login: str = Field(..., min_length=3, description="Username or email")
    password: str = Field(..., min_length=6)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    account_id: str
    username: str
    role: str


class TokenData(BaseModel):
    account_id: str
    username: str
    role: str


class VerifyEmailRequest(BaseModel):
    token: str


class VerificationTokenResponse(BaseModel):
    verification_token: Optional[str] = None
    sent: bool = True


class AccountResponse(ORMModel):
    id: str
    username: str
    full_name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    role: str
    is_active: bool
    is_verified: bool
    created_at: Optional[datetime] = None
    last_login_at: Optional[datetime] = None


class RegisterResponse(BaseModel):
    account: AccountResponse
    access_token: str
    token_type: str = "bearer"
    verification_token: Optional[str] = None


class AccountStatusUpdate(BaseModel):
    is_active: bool


# Wishlists

Occasion = Literal["birthday", "wedding", "graduation", "burial", "other"]
Visibility = Literal["public", "unlisted", "private"]


class ItemCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    unit_price_kobo: int = Field(0, ge=0)
    qty_total: int = Field(1, ge=1)
    product_url: Optional[str] = Field(None, max_length=1000)
    image_url: Optional[str] = Field(None, max_length=500)
    allow_group_gift: bool = False


class ItemUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    unit_price_kobo: Optional[int] = Field(None, ge=0)
    qty_total: Optional[int] = Field(None, ge=1)
    product_url: Optional[str] = None
    image_url: Optional[str] = None
    allow_group_gift: Optional[bool] = None


class GoalCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    target_amount_kobo: int = Field(..., gt=0)
    deadline: Optional[date] = None


class GoalUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    target_amount_kobo: Optional[int] = Field(None, gt=0)
    deadline: Optional[date] = None


class WishlistCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    occasion: Occasion = "other"
    wishlist_date: Optional[date] = None
    story: Optional[str] = None
    cover_image_url: Optional[str] = Field(None, max_length=500)
    visibility: Visibility = "unlisted"
    items: list[ItemCreate] = Field(default_factory=list)
    goals: list[GoalCreate] = Field(default_factory=list)


class WishlistUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    occasion: Optional[Occasion] = None
    wishlist_date: Optional[date] = None
    story: Optional[str] = None
    cover_image_url: Optional[str] = None
    visibility: Optional[Visibility] = None


class WishlistStatusUpdate(BaseModel):
    status: Literal["active", "archived", "flagged"]


class ItemResponse(ORMModel):
    id: str
    wishlist_id: str
    name: str
    description: Optional[str] = None
    unit_price_kobo: int
    qty_total: int
    qty_claimed: int
    qty_available: int
    product_url: Optional[str] = None
    image_url: Optional[str] = None
    allow_group_gift: bool
    created_at: Optional[datetime] = None


class GoalResponse(ORMModel):
    id: str
    wishlist_id: str
    title: str
    target_amount_kobo: int
    amount_raised_kobo: int
    deadline: Optional[date] = None
    progress: float = 0.0
    contributors: list[str] = Field(default_factory=list)


class WishlistResponse(ORMModel):
    id: str
    owner_id: str
    owner_username: Optional[str] = None
    title: str
    slug: str
    occasion: str
    wishlist_date: Optional[date] = None
    story: Optional[str] = None
    cover_image_url: Optional[str] = None
    visibility: str
    status: str
    state: str = "live"
    share_url: Optional[str] = None
    created_at: Optional[datetime] = None
    items: list[ItemResponse] = Field(default_factory=list)
    goals: list[GoalResponse] = Field(default_factory=list)


class WishlistListResponse(BaseModel):
    wishlists: list[WishlistResponse] = Field(default_factory=list)


class OccasionListResponse(BaseModel):
    occasions: list[str] = Field(default_factory=list)


class WishlistAnalyticsResponse(ORMModel):
    total_wishlists: int
    live_wishlists: int
    completed_wishlists: int
    total_goals: int
    amount_raised_kobo: int
    target_amount_kobo: int
    completion_rate: float
    average_items: int
    most_popular_occasion: Optional[str] = None


# Claims

class ClaimCreate(BaseModel):
    note: Optional[str] = Field(None, max_length=1000)
    contact: Optional[str] = Field(None, max_length=255)


class GuestClaimCreate(BaseModel):
    email: EmailStr
    username: str = Field(..., min_length=3, max_length=50, pattern=r"^[A-Za-z0-9_.-]+$")
    password: str = Field(..., min_length=6)
    full_name: str = Field("", max_length=150)
    note: Optional[str] = Field(None, max_length=1000)


class ClaimStatusUpdate(BaseModel):
    status: Literal["pending", "confirmed", "fulfilled", "cancelled", "expired"]


class ReminderCreate(BaseModel):
    schedule_at: datetime
    channel: Literal["email", "sms", "whatsapp"] = "email"
    contact: Optional[str] = Field(None, max_length=255)


class ReminderResponse(ORMModel):
    id: str
    claim_id: str
    contact: str
    channel: str
    schedule_at: datetime
    status: str
    sent_at: Optional[datetime] = None


class ClaimResponse(ORMModel):
    id: str
    wishlist_item_id: str
    supporter_user_id: Optional[str] = None
    supporter_contact: str
    note: Optional[str] = None
    status: str
    amount_paid_kobo: int
    amount_remaining_kobo: int
    expire_at: datetime
    scheduled_purchase_date: Optional[date] = None
    reminder_channel: Optional[str] = None
    created_at: Optional[datetime] = None
    item_name: Optional[str] = None
    unit_price_kobo: int = 0
    wishlist_id: Optional[str] = None
    wishlist_title: Optional[str] = None
    wishlist_slug: Optional[str] = None
    owner_username: Optional[str] = None


class GuestClaimResponse(BaseModel):
    claim: ClaimResponse
    account: AccountResponse
    access_token: str
    token_type: str = "bearer"


class ClaimListResponse(BaseModel):
    claims: list[ClaimResponse] = Field(default_factory=list)


class ClaimStatsResponse(ORMModel):
    total: int
    value_kobo: int
    paid_kobo: int
    by_status: dict[str, int] = Field(default_factory=dict)


class CalendarLinkResponse(BaseModel):
    google_calendar_url: str
    share_url: str


# Wallet and payouts

class WalletTransactionResponse(ORMModel):
    id: str
    type: str
    source: Optional[str] = None
    category: Optional[str] = None
    amount_kobo: int
    description: Optional[str] = None
    reference: Optional[str] = None
    claim_id: Optional[str] = None
    payout_id: Optional[str] = None
    created_at: Optional[datetime] = None


class WalletSummaryResponse(BaseModel):
    wallet_id: str
    currency: str
    balance_kobo: int
    received_kobo: int
    withdrawn_kobo: int
    reserved_kobo: int
    available_kobo: int
    stored_balance_kobo: int


class WalletResponse(BaseModel):
    summary: WalletSummaryResponse
    transactions: list[WalletTransactionResponse] = Field(default_factory=list)


class PayoutRequest(BaseModel):
    amount_kobo: int = Field(..., gt=0)
    bank_code: str = Field(..., min_length=1, max_length=20)
    account_number: str = Field(..., min_length=10, max_length=10)
    account_name: Optional[str] = Field(None, max_length=150)


class PayoutResponse(ORMModel):
    id: str
    wallet_id: str
    amount_kobo: int
    status: str
    debited: bool
    destination_bank_code: Optional[str] = None
    destination_account: Optional[str] = None
    destination_account_name: Optional[str] = None
    provider: Optional[str] = None
    provider_ref: Optional[str] = None
    failure_reason: Optional[str] = None
    created_at: Optional[datetime] = None
    account_id: Optional[str] = None
    account_username: Optional[str] = None


class PayoutListResponse(BaseModel):
    payouts: list[PayoutResponse] = Field(default_factory=list)


class PayoutStatusUpdate(BaseModel):
    status: Literal["processing", "paid", "failed"]
    reason: Optional[str] = Field(None, max_length=255)


# Payments

class CashPaymentRequest(BaseModel):
    claim_id: str
    amount_kobo: int = Field(..., gt=0)
    email: Optional[EmailStr] = None


class ContributionRequest(BaseModel):
    goal_id: str
    amount_kobo: int = Field(..., gt=0)
    email: EmailStr
    display_name: Optional[str] = Field(None, max_length=150)
    is_anonymous: bool = False


class PaymentIntentResponse(ORMModel):
    id: str
    reference: str
    kind: str
    amount_kobo: int
    currency: str
    status: str
    authorization_url: Optional[str] = None
    claim_id: Optional[str] = None
    contribution_id: Optional[str] = None
    created_at: Optional[datetime] = None
    settled_at: Optional[datetime] = None


class CheckoutResponse(BaseModel):
    mode: Literal["gateway", "manual"]
    reference: str
    amount_kobo: int
    currency: str
    authorization_url: Optional[str] = None
    public_key: Optional[str] = None
    instructions: Optional[str] = None


class ContributionResponse(ORMModel):
    id: str
    goal_id: str
    goal_title: Optional[str] = None
    public_name: str
    is_anonymous: bool
    amount_kobo: int
    currency: str
    payment_ref: Optional[str] = None
    status: str
    created_at: Optional[datetime] = None


class ContributionListResponse(BaseModel):
    contributions: list[ContributionResponse] = Field(default_factory=list)


# Notifications

class NotificationResponse(ORMModel):
    id: str
    type: str
    title: Optional[str] = None
    message: Optional[str] = None
    status: str
    payload: dict[str, Any] = Field(default_factory=dict)
    created_at: Optional[datetime] = None


class NotificationListResponse(BaseModel):
    notifications: list[NotificationResponse] = Field(default_factory=list)


# Admin

class AdminStatsResponse(BaseModel):
    total_users: int
    total_wishlists: int
    pending_payouts: int


class ReconciliationResponse(BaseModel):
    wallet_id: str
    account_id: str
    stored_balance_kobo: int
    ledger_received_kobo: int
    ledger_withdrawn_kobo: int
    payouts_withdrawn_kobo: int
    withdrawn_divergence_kobo: int
    balance_divergence_kobo: int
    is_consistent: bool


class ManualSettleRequest(BaseModel):
    gateway_ref: Optional[str] = Field(None, max_length=100)


class AuditEntryResponse(ORMModel):
    id: int
    actor_user_id: Optional[str] = None
    action: str
    target_table: Optional[str] = None
    target_id: Optional[str] = None
    diff: dict[str, Any] = Field(default_factory=dict)
    created_at: Optional[datetime] = None


class AuditListResponse(BaseModel):
    entries: list[AuditEntryResponse] = Field(default_factory=list)


class MaintenanceResponse(BaseModel):
    expired_claims: int = 0
    reminders_sent: int = 0
