"""
Unit Tests - Settings
"""
import pytest
from pydantic import ValidationError

from storefront.config import Settings
from storefront.config.settings import DatabaseSettings

SECRET_VARS = ("JWT_SECRET_KEY", "JWT_KEY", "STRIPE_SECRET_KEY", "SENDGRID_API_KEY", "DATABASE_URL")


@pytest.fixture
def clean_env(tmp_path, monkeypatch):
    """Run from an empty directory without secrets in the environment"""
    monkeypatch.chdir(tmp_path)
    for name in SECRET_VARS:
        monkeypatch.delenv(name, raising=False)
    return tmp_path


class TestDotenv:
    """Every settings section reads .env"""

    def test_nested_sections_read_dotenv(self, clean_env):
        (clean_env / ".env").write_text(
            "APP_NAME=dotenv-app\n"
            "JWT_SECRET_KEY=from-dotenv-secret\n"
            "STRIPE_SECRET_KEY=sk_live_dotenv\n"
            "SENDGRID_API_KEY=SG.dotenv\n"
            "DATABASE_URL=sqlite+aiosqlite:///dotenv.db\n"
        )

        settings = Settings()

        assert settings.app_name == "dotenv-app"
        assert settings.security.jwt_secret_key.get_secret_value() == "from-dotenv-secret"
        assert settings.payments.secret_key.get_secret_value() == "sk_live_dotenv"
        assert settings.mail.sendgrid_api_key.get_secret_value() == "SG.dotenv"
        assert settings.database.async_url == "sqlite+aiosqlite:///dotenv.db"

    def test_environment_wins_over_dotenv(self, clean_env, monkeypatch):
        (clean_env / ".env").write_text("JWT_SECRET_KEY=from-dotenv-secret\n")
        monkeypatch.setenv("JWT_SECRET_KEY", "from-environment-secret")

        assert Settings().security.jwt_secret_key.get_secret_value() == "from-environment-secret"


class TestDatabaseSettings:
    """POSTGRES_* variables"""

    def test_postgres_db_is_read(self, clean_env, monkeypatch):
        monkeypatch.setenv("POSTGRES_DB", "shop")
        monkeypatch.setenv("POSTGRES_HOST", "db.internal")
        monkeypatch.delenv("POSTGRES_PORT", raising=False)

        database = DatabaseSettings()

        assert database.db == "shop"
        assert database.async_url.endswith("@db.internal:5432/shop")


class TestProductionSecrets:
    """Production refuses placeholder secrets"""

    def test_placeholder_secrets_rejected(self, clean_env, monkeypatch):
        monkeypatch.setenv("APP_ENV", "production")

        with pytest.raises(ValidationError, match="JWT_SECRET_KEY"):
            Settings()

    def test_partially_configured_rejected(self, clean_env, monkeypatch):
        monkeypatch.setenv("APP_ENV", "production")
        monkeypatch.setenv("JWT_SECRET_KEY", "a-real-production-secret-value-123")

        with pytest.raises(ValidationError, match="STRIPE_SECRET_KEY"):
            Settings()

    def test_configured_production_starts(self, clean_env, monkeypatch):
        monkeypatch.setenv("APP_ENV", "production")
        monkeypatch.setenv("JWT_SECRET_KEY", "a-real-production-secret-value-123")
        monkeypatch.setenv("STRIPE_SECRET_KEY", "sk_live_real")
        monkeypatch.setenv("SENDGRID_API_KEY", "SG.real")

        assert Settings().is_production

    def test_placeholders_allowed_outside_production(self, clean_env):
        assert Settings().app_env == "testing"
