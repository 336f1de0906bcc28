"""Application settings and configuration.

This module defines all configuration options for the UniTea functions service.
Settings are loaded from environment variables with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="UniTea Functions", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")

    # Database configuration
    database_url: str = Field(default="sqlite:///./unitea.db", alias="DATABASE_URL")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # Backend platform (auth + object storage)
    supabase_url: str = Field(default="http://localhost:54321", alias="SUPABASE_URL")
    supabase_anon_key: str = Field(default="", alias="SUPABASE_ANON_KEY")

    # Identity verification: "remote" asks the auth service, "jwt" verifies locally
    auth_mode: str = Field(default="remote", alias="AUTH_MODE")
    supabase_jwt_secret: str | None = Field(default=None, alias="SUPABASE_JWT_SECRET")
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    jwt_audience: str = Field(default="authenticated", alias="JWT_AUDIENCE")

    # Classifiers
    openai_api_key: str | None = Field(default=None, alias="OPENAI_API_KEY")
    openai_base_url: str | None = Field(default=None, alias="OPENAI_BASE_URL")
    moderation_model: str = Field(default="omni-moderation-latest", alias="MODERATION_MODEL")
    classifier_model: str = Field(default="gpt-4o-mini", alias="CLASSIFIER_MODEL")
    classifier_max_tokens: int = Field(default=10, alias="CLASSIFIER_MAX_TOKENS")
    abuse_check_max_chars: int = Field(default=2000, alias="ABUSE_CHECK_MAX_CHARS")

    # Object storage
    post_images_bucket: str = Field(default="post-images", alias="POST_IMAGES_BUCKET")
    signed_url_ttl_seconds: int = Field(default=300, alias="SIGNED_URL_TTL_SECONDS")
    http_timeout_seconds: float = Field(default=10.0, alias="HTTP_TIMEOUT_SECONDS")

    # CORS configuration for web frontend access
    cors_allowed_origins: list[str] = Field(
        default=["https://unitea.app", "https://www.unitea.app"],
        alias="CORS_ALLOWED_ORIGINS",
    )
    cors_admin_extra_origins: list[str] = Field(
        default=["http://localhost:3000"],
        alias="CORS_ADMIN_EXTRA_ORIGINS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def admin_cors_origins(self) -> list[str]:
        """Return the allow-list used by the admin-only functions.

        Returns:
            Production origins followed by the extra admin dashboard origins
        """
        return [*self.cors_allowed_origins, *self.cors_admin_extra_origins]


settings = Settings()
