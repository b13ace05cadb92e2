from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Server settings, read from the environment and ``.env``."""

    # Postgres
    POSTGRES_USER: str
    POSTGRES_PASSWORD: str
    POSTGRES_DB: str
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    DB_POOL_RECYCLE: int = 300
    DB_ECHO: bool = False

    # Redis fan-out between the outbox worker and API instances
    REDIS_URL: str = "redis://localhost:6379/0"
    REDIS_PUBSUB_CHANNEL: str = "travel.fanout"
    REDIS_RESUBSCRIBE_SECONDS: float = 2.0

    # Bearer tokens issued by the auth service
    JWT_SECRET: str = ""
    JWT_ALGORITHM: str = "HS256"
    JWT_LEEWAY_SECONDS: int = 30

    CORS_ORIGINS: list[str] = ["*"]
    LOG_LEVEL: str = "INFO"
    READINESS_TIMEOUT_SECONDS: float = 2.0

    OUTBOX_POLL_INTERVAL: float = 1.0
    OUTBOX_BATCH_SIZE: int = 50
    OUTBOX_MAX_ATTEMPTS: int = 5

    # /ws push endpoint
    WS_HEARTBEAT_SECONDS: int = 30
    WS_AUTH_TIMEOUT_SECONDS: float = 10.0

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def database_url(self) -> str:
        return (
            f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.POSTGRES_DB}"
        )


settings = Settings()  # type: ignore[call-arg]
