from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    # Database
    DB_USER: str = Field("videocall_admin")
    DB_PASSWORD: str = Field("VideoCallPass2024")
    DB_NAME: str = Field("workspace_calls")
    DB_HOST: str = Field("postgres")
    DB_PORT: int = Field(5432)

    # Redis (notification pub/sub)
    REDIS_HOST: str = Field("redis")
    REDIS_PORT: int = Field(6379)
    REDIS_PASSWORD: str | None = Field(None)

    # Daily.co room provider
    DAILY_API_KEY: str | None = Field(None)
    DAILY_API_URL: str = Field("https://api.daily.co/v1")
    DAILY_TIMEOUT_SEC: float = Field(10.0)

    # App
    API_HOST: str = Field("0.0.0.0")
    API_PORT: int = Field(8000)
    DEBUG: bool = Field(False)
    JWT_SECRET_KEY: str = Field("supersecret")
    JWT_ALGORITHM: str = Field("HS256")
    JWT_EXP_DAYS: int = Field(7)

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        env_file_encoding="utf-8"
    )


settings = Settings()
