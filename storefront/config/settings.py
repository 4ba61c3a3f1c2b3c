"""
Storefront API
Centralized Configuration Management

This module provides configuration management using Pydantic settings with
environment variable support, validation, and type safety.
"""

from functools import lru_cache
from typing import Optional, List
from pydantic import AliasChoices, Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Nested sections are built by default_factory, so each reads .env itself
SECTION_CONFIG = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

DEFAULT_SECRETS = {
    "JWT_SECRET_KEY": "jwt-secret-change-me",
    "STRIPE_SECRET_KEY": "sk_test_change_me",
    "SENDGRID_API_KEY": "SG.change-me",
}


class DatabaseSettings(BaseSettings):
    """Relational Database Configuration"""

    model_config = SettingsConfigDict(env_prefix="POSTGRES_", **SECTION_CONFIG)

    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    db: str = Field(
        default="storefront",
        validation_alias=AliasChoices("POSTGRES_DB", "database"),
        description="Database name",
    )
    user: str = Field(default="storefront", description="Database user")
    password: SecretStr = Field(default="secure_password", description="Database password")
    echo: bool = Field(default=False, description="Echo SQL queries")
    url: Optional[str] = Field(default=None, alias="DATABASE_URL", description="Database URL (overrides host/port)")

    @property
    def async_url(self) -> str:
        """Async database URL - uses DATABASE_URL if set, otherwise builds one for asyncpg"""
        if self.url:
            return self.url
        return f"postgresql+asyncpg://{self.user}:{self.password.get_secret_value()}@{self.host}:{self.port}/{self.db}"


class SecuritySettings(BaseSettings):
    """Security and Authentication Configuration"""

    model_config = SettingsConfigDict(env_prefix="", **SECTION_CONFIG)

    jwt_secret_key: SecretStr = Field(
        default=DEFAULT_SECRETS["JWT_SECRET_KEY"],
        validation_alias=AliasChoices("JWT_SECRET_KEY", "JWT_KEY"),
        description="Token signing secret",
    )
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM", description="JWT algorithm")
    jwt_expiration_hours: int = Field(default=24, alias="JWT_EXPIRATION_HOURS", description="Session token lifetime in hours")
    password_hash_rounds: int = Field(default=12, alias="PASSWORD_HASH_ROUNDS", description="bcrypt cost factor")

    # CORS
    cors_origins: List[str] = Field(
        default=["http://localhost:3000"],
        alias="CORS_ORIGINS",
        description="Allowed CORS origins"
    )


class PaymentSettings(BaseSettings):
    """Payment Gateway Configuration"""

    model_config = SettingsConfigDict(env_prefix="STRIPE_", **SECTION_CONFIG)

    secret_key: SecretStr = Field(default=DEFAULT_SECRETS["STRIPE_SECRET_KEY"], description="Stripe secret key")
    currency: str = Field(default="usd", description="Charge currency")


class MailSettings(BaseSettings):
    """Transactional Email Configuration"""

    model_config = SettingsConfigDict(env_prefix="", **SECTION_CONFIG)

    sendgrid_api_key: SecretStr = Field(default=DEFAULT_SECRETS["SENDGRID_API_KEY"], alias="SENDGRID_API_KEY", description="SendGrid API key")
    sender: str = Field(default="orders@storefront.example", alias="MAIL_SENDER", description="From address")
    subject: str = Field(
        default="Order Confirmation [ACTION REQUIRED]",
        alias="MAIL_SUBJECT",
        description="Order confirmation subject line",
    )


class MonitoringSettings(BaseSettings):
    """Logging Configuration"""

    model_config = SettingsConfigDict(env_prefix="", **SECTION_CONFIG)

    log_level: str = Field(default="INFO", alias="LOG_LEVEL", description="Logging level")
    log_format: str = Field(default="json", alias="LOG_FORMAT", description="Log format: json or text")


class Settings(BaseSettings):
    """
    Main Application Settings

    Aggregates all configuration sections and provides a single entry point
    for accessing application configuration.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="storefront-api", alias="APP_NAME", description="Application name")
    app_env: str = Field(default="development", alias="APP_ENV", description="Environment")
    debug: bool = Field(default=False, alias="DEBUG", description="Debug mode")

    # API Server
    api_host: str = Field(default="0.0.0.0", alias="API_HOST", description="API host")
    api_port: int = Field(default=8000, alias="API_PORT", description="API port")
    api_prefix: str = Field(default="", alias="API_PREFIX", description="Path prefix for all routes")
    public_base_url: str = Field(
        default="http://localhost:8000",
        alias="PUBLIC_BASE_URL",
        description="Base URL used in order confirmation links",
    )

    # Version
    version: str = Field(default="1.0.0", description="Application version")

    # Subsystem configurations
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    security: SecuritySettings = Field(default_factory=SecuritySettings)
    payments: PaymentSettings = Field(default_factory=PaymentSettings)
    mail: MailSettings = Field(default_factory=MailSettings)
    monitoring: MonitoringSettings = Field(default_factory=MonitoringSettings)

    @field_validator("app_env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        """Validate environment value"""
        allowed = ["development", "staging", "production", "testing"]
        if v.lower() not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v.lower()

    @model_validator(mode="after")
    def require_secrets_in_production(self) -> "Settings":
        """Refuse to run production with the shipped placeholder secrets"""
        if not self.is_production:
            return self

        configured = {
            "JWT_SECRET_KEY": self.security.jwt_secret_key,
            "STRIPE_SECRET_KEY": self.payments.secret_key,
            "SENDGRID_API_KEY": self.mail.sendgrid_api_key,
        }
        unset = [
            name for name, value in configured.items()
            if value.get_secret_value() == DEFAULT_SECRETS[name]
        ]
        if unset:
            raise ValueError(f"Production requires real values for: {', '.join(unset)}")
        return self

    @property
    def is_production(self) -> bool:
        """Check if running in production"""
        return self.app_env == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development"""
        return self.app_env == "development"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses LRU cache to ensure settings are only loaded once.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
