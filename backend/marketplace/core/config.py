from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Names understood by both logging and uvicorn
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_name: str = "Freelance Marketplace"
    debug: bool = False
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of: {', '.join(LOG_LEVELS)}")
        return level

    # Server
    host: str = "0.0.0.0"
    port: int = 3000

    # Rate limiting
    rate_limit_api: str = "100/minute"

    # MongoDB
    mongo_uri: str
    db_name: str = "siam-db"
    mongo_server_selection_timeout_ms: int = 5000
    startup_connect_attempts: int = 3

    @field_validator("mongo_uri")
    @classmethod
    def validate_mongo_uri(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("MONGO_URI must not be empty")
        return v

    # CORS
    client_origin: str | None = None
    cors_origins: list[str] = ["http://localhost:5173"]

    @property
    def allowed_origins(self) -> list[str]:
        origins = list(self.cors_origins)
        if self.client_origin and self.client_origin not in origins:
            origins.insert(0, self.client_origin)
        return origins


@lru_cache
def get_settings() -> Settings:
    return Settings()
