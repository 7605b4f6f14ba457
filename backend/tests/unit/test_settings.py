"""
Unit tests for application settings.
"""

import pytest

from infrastructure.config.settings import DEFAULT_MODEL_PRICING, Settings
from services.content_generation import GenerationContext


class TestSettings:
    def test_postgres_url_converted_to_asyncpg(self):
        settings = Settings(database_url="postgres://u:p@db:5432/app")
        assert settings.database_url == "postgresql+asyncpg://u:p@db:5432/app"

    def test_empty_jwt_secret_gets_random_value(self):
        settings = Settings(jwt_secret_key="")
        assert len(settings.jwt_secret_key) >= 32

    def test_cors_origins_list(self):
        settings = Settings(cors_origins="https://a.example/, https://b.example")
        assert settings.cors_origins_list == ["https://a.example", "https://b.example"]

    def test_default_price_table(self):
        settings = Settings()
        assert settings.openai_pricing == DEFAULT_MODEL_PRICING
        assert settings.pricing_default_model in settings.openai_pricing

    def test_production_requires_openai_key(self):
        settings = Settings(
            environment="production",
            jwt_secret_key="x" * 40,
            openai_api_key=None,
        )
        with pytest.raises(ValueError, match="OPENAI_API_KEY"):
            settings.validate_production_secrets()

    def test_production_rejects_short_jwt_secret(self):
        settings = Settings(environment="production", jwt_secret_key="short", openai_api_key="sk-x")
        with pytest.raises(ValueError, match="JWT_SECRET_KEY"):
            settings.validate_production_secrets()

    def test_development_skips_checks(self):
        Settings(environment="development", openai_api_key=None).validate_production_secrets()

    def test_generation_context_from_settings(self):
        context = GenerationContext.from_settings(
            Settings(
                generation_timeout_seconds=30,
                bulk_delay_ms=250,
                max_bulk_topics=4,
                slug_max_attempts=2,
            )
        )

        assert context.timeout_seconds == 30
        assert context.bulk_delay_seconds == 0.25
        assert context.max_bulk_topics == 4
        assert context.slug_max_attempts == 2
