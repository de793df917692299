from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str = Field("sqlite+aiosqlite:///./timetable.db", alias="DATABASE_URL")
    sql_echo: bool = Field(False, alias="SQL_ECHO")
    auto_create_tables: bool = Field(True, alias="AUTO_CREATE_TABLES")

    jwt_secret_key: str = Field(..., alias="JWT_SECRET_KEY")
    jwt_algorithm: str = Field("HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(15, alias="ACCESS_TOKEN_EXPIRE_MINUTES")
    # Local development only; every data route requires a bearer token otherwise
    auth_enabled: bool = Field(True, alias="AUTH_ENABLED")

    api_prefix: str = Field("/api/v1", alias="API_PREFIX")
    cors_origins: List[str] = Field(default_factory=lambda: ["*"], alias="CORS_ORIGINS")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    # False keeps the lenient coerce-with-defaults fallback on PUT /school-settings
    settings_strict_validation: bool = Field(False, alias="SETTINGS_STRICT_VALIDATION")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


APP_VERSION = "0.1.0"

settings = Settings()
