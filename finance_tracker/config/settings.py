"""
Configuration Management for Finance Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The signing literal, cookie lifetimes and report formatting all live in
one place, so nothing downstream hardcodes them.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AuthSettings(BaseSettings):
    """
    Mock authentication configuration.

    WARNING: The secret key is a fixed literal shared by encode and decode.
    This is a placeholder, not a security boundary.
    """

    model_config = SettingsConfigDict(
        env_prefix="AUTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    secret_key: str = Field(
        default="seu_secret_key_super_secreto_2024",
        min_length=1,
        description="Literal used to sign session tokens"
    )
    algorithm: str = Field(
        default="HS256",
        description="JWT signing algorithm"
    )
    token_ttl_hours: int = Field(
        default=24,
        ge=1,
        le=24 * 30,
        description="How long a session token stays valid"
    )

    # Demo account seeded into the in-memory registry on startup
    seed_demo_user: bool = Field(
        default=True,
        description="Register the demo account at startup"
    )
    demo_email: str = Field(default="teste@teste.com")
    demo_password: str = Field(default="123456")
    demo_name: str = Field(default="Test User")

    @property
    def token_ttl_ms(self) -> int:
        """Token lifetime in milliseconds."""
        return self.token_ttl_hours * 60 * 60 * 1000


class StorageSettings(BaseSettings):
    """Key-value ("cookie jar") storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    backend: str = Field(
        default="file",
        pattern="^(memory|file)$",
        description="Which key-value backend to use"
    )
    state_dir: Path = Field(
        default=Path(".finance_tracker"),
        description="Directory holding the persisted cookie jar"
    )
    cookie_expiry_days: int = Field(
        default=7,
        ge=1,
        le=365,
        description="Lifetime of the persisted user and transactions entries"
    )

    # Key names
    token_key: str = Field(default="auth_token")
    user_key: str = Field(default="user")
    transactions_key: str = Field(default="transactions")

    @field_validator("state_dir")
    @classmethod
    def expand_state_dir(cls, v: Path) -> Path:
        """Allow ~ in the configured path."""
        return v.expanduser()

    @property
    def cookie_expiry_seconds(self) -> int:
        """Cookie lifetime in seconds."""
        return self.cookie_expiry_days * 24 * 60 * 60


class ReportSettings(BaseSettings):
    """Formatting and file naming for views and exports."""

    model_config = SettingsConfigDict(
        env_prefix="REPORT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    currency_symbol: str = Field(
        default="R$",
        description="Prefix shown before every amount"
    )
    date_format: str = Field(
        default="%d/%m/%Y",
        description="strftime format for transaction dates"
    )
    pdf_filename: str = Field(default="transactions.pdf")
    excel_filename: str = Field(default="transactions.xlsx")
    recent_limit: int = Field(
        default=10,
        ge=1,
        le=500,
        description="How many entries the dashboard feed shows"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )

    low_balance_threshold: float = Field(
        default=1000.0,
        description="Balance below which the dashboard shows an alert"
    )


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def auth(self) -> AuthSettings:
        return AuthSettings()

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def report(self) -> ReportSettings:
        return ReportSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    for name in ("auth", "storage", "report", "app"):
        try:
            _ = getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
