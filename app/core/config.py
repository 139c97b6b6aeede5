"""Application configuration via pydantic-settings.

Loads all settings from environment variables with sensible defaults.
A global `settings` singleton is available for import; request handlers
receive it through the ``get_settings`` dependency.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Supabase
    SUPABASE_URL: str
    SUPABASE_ANON_KEY: str
    SUPABASE_SERVICE_ROLE_KEY: str = ""

    # Runtime
    ENVIRONMENT: str = "development"
    PORT: int = 5000

    # CORS
    CLIENT_URL: str = "http://localhost:3000"

    # Avatars
    AVATAR_BUCKET: str = "profile-images"
    AVATAR_MAX_BYTES: int = 5 * 1024 * 1024

    # Auth
    AUTH_COOKIE_NAME: str = "access_token"

    # Logging
    LOG_LEVEL: str = "INFO"

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT.lower() == "development"

    @property
    def admin_key(self) -> str:
        """Service-role key, or the anon key when none is configured."""
        return self.SUPABASE_SERVICE_ROLE_KEY or self.SUPABASE_ANON_KEY


settings = Settings()  # type: ignore[call-arg]


def get_settings() -> Settings:
    """FastAPI dependency returning the process-wide settings."""
    return settings
