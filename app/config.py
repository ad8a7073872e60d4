"""Application configuration"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    PROJECT_NAME: str = "FiguraCollect"
    VERSION: str = "1.0.0"
    DEBUG: bool = False

    # database
    DATABASE_URL: str

    # auth
    SECRET_KEY: str = "default-secret-change-me"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7  # 7日
    AUTH_COOKIE_NAME: str = "auth-token"

    # Frontend
    FRONTEND_URL: str = "http://localhost:3000"
    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://frontend:3000",
    ]

    # Email
    RESEND_API_KEY: str = ""
    RESEND_FROM_EMAIL: str = "FiguraCollect <onboarding@resend.dev>"
    EMAIL_ENABLED: bool = False

    # バッチ・レート制限
    SCHEDULER_ENABLED: bool = True
    RATE_LIMIT_ENABLED: bool = True

    # カタログキャッシュ
    CACHE_TTL_SECONDS: int = 10 * 60
    CACHE_MAX_SIZE: int = 256

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=True, extra="ignore"
    )


settings = Settings()
