from pydantic_settings import BaseSettings
from typing import List, Optional

class Settings(BaseSettings):
    PROJECT_NAME: str = "MedSync"
    API_V1_STR: str = "/api/v1"
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "password"
    POSTGRES_DB: str = "medsync"
    DATABASE_URL: Optional[str] = None
    SQL_ECHO: bool = False
    AUTO_CREATE_TABLES: bool = True

    SECRET_KEY: str = "change-me"
    ALGORITHM: str = "HS256"

    REDIS_URL: str = "redis://localhost:6379/0"
    CHECK_TOKEN_SESSION: bool = True

    LOG_LEVEL: str = "INFO"
    BACKEND_CORS_ORIGINS: List[str] = ["*"]

    class Config:
        case_sensitive = True
        env_file = ".env"

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        if not self.DATABASE_URL:
            self.DATABASE_URL = f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}/{self.POSTGRES_DB}"

settings = Settings()
