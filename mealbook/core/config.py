from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List

class Settings(BaseSettings):
    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = True

    # API Settings
    PROJECT_NAME: str = "Mealbook API"
    API_PREFIX: str = "/api"
    PROJECT_VERSION: str = "0.1.0"
    DESCRIPTION: str = "Shared household meal and expense tracking API"

    # MongoDB
    MONGODB_URI: str = "mongodb://localhost:27017"
    MONGODB_DB: str = "mealbook"

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:8000"]

    # JWT
    SECRET_KEY: str = "change-this-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7

    # Session cookie
    AUTH_COOKIE_NAME: str = "auth-token"
    AUTH_COOKIE_SECURE: bool = False

    # Accounts
    MIN_PASSWORD_LENGTH: int = 6

    # Logging
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=".env"
    )

settings = Settings()
