from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List

class Settings(BaseSettings):
    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "text"  # text | json

    # API Settings
    PROJECT_NAME: str = "PokerSplit API"
    API_V1_STR: str = "/api/v1"
    PROJECT_VERSION: str = "0.1.0"
    DESCRIPTION: str = "Poker night buy-ins, chip counts and settlements"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Database
    STORE_BACKEND: str = "mongo"  # mongo | memory
    MONGODB_URL: str = "mongodb://localhost:27017"
    DATABASE_NAME: str = "pokersplit"
    RUN_MIGRATIONS_ON_STARTUP: bool = True

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:5173"]

    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=".env"
    )

settings = Settings()
