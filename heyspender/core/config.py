"""Application configuration using pydantic settings with structured sections."""

from functools import lru_cache
from typing import Literal, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ServerSettings(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False


class DatabaseSettings(BaseModel):
    url: str = Field(default="sqlite+aiosqlite:///./heyspender.db", alias="url")
    echo: bool = False
    pool_size: Optional[int] = None
    max_overflow: Optional[int] = None


class SecuritySettings(BaseModel):
    secret_key: str = Field(default="change-me", min_length=8)
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24 * 7
    verification_token_expire_minutes: int = 60 * 24 * 3


class PaymentSettings(BaseModel):
    provider: str = "paystack"
    public_key: str = ""
    secret_key: str = ""
    base_url: str = "https://api.paystack.co"
    callback_url: Optional[str] = None
    currency: str = "NGN"
    timeout_seconds: float = 10.0


class WalletSettings(BaseModel):
    currency: str = "NGN"
    # Amounts are kobo (1 NGN = 100 kobo).
    auto_approve_limit_kobo: int = 5_000 * 100
    minimum_payout_kobo: int = 100 * 100


class ClaimSettings(BaseModel):
    expiry_days: int = 30


class SiteSettings(BaseModel):
    name: str = "HeySpender"
    base_url: str = "https://heyspender.com"
    support_email: str = "support@heyspender.com"


class Settings(BaseSettings):
    """Top-level application settings with nested sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_nested_delimiter="__",
        extra="ignore",
        case_sensitive=False,
    )

    environment: Literal["development", "staging", "production", "test"] = "development"
    debug: bool = False
    log_level: str = "INFO"
    project_name: str = "HeySpender API"
    api_prefix: str = "/api"

    server: ServerSettings = ServerSettings()
    database: DatabaseSettings = DatabaseSettings()
    security: SecuritySettings = SecuritySettings()
    payments: PaymentSettings = PaymentSettings()
    wallet: WalletSettings = WalletSettings()
    claims: ClaimSettings = ClaimSettings()
    site: SiteSettings = SiteSettings()

    @property
    def database_url(self) -> str:
        return self.database.url

    @property
    def host(self) -> str:
        return self.server.host

    @property
    def port(self) -> int:
        return self.server.port

    @property
    def secret_key(self) -> str:
        return self.security.secret_key

    @property
    def algorithm(self) -> str:
        return self.security.algorithm

    @property
    def access_token_expire_minutes(self) -> int:
        return self.security.access_token_expire_minutes

    @property
    def payments_enabled(self) -> bool:
        return bool(self.payments.secret_key) and self.environment != "development"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
