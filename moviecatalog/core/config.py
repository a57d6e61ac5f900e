# moviecatalog/core/config.py
from functools import lru_cache
from typing import List

from fastapi import Request
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # must come from the environment
    SECRET_KEY: str
    DATABASE_URL: str = "sqlite:///./movies.db"

    # JWT
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7  # 1 week

    BCRYPT_ROUNDS: int = 10

    # connection pool
    DB_ECHO: bool = False
    DB_POOL_SIZE: int = 10
    DB_POOL_TIMEOUT: int = 30

    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["http://localhost:5173"]

    # load from project-root .env and ignore everything else in it
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

@lru_cache
def get_settings() -> Settings:
    return Settings()

def get_app_settings(request: Request) -> Settings:
    """
    Settings the running app was built with.
    """
    return request.app.state.settings
