from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import Optional


class Settings(BaseSettings):
    PROJECT_NAME: str = "UniYelp Catalog API"
    VERSION: str = "1.0.0"
    API_V1_STR: str = "/api/v1"

    # CORS Configuration
    CORS_ORIGINS: list = ["*"]

    # MySQL Database Configuration
    DB_HOST: str = "localhost"
    DB_PORT: int = 3306
    DB_NAME: str = "uniyelp"
    DB_USER: str = "root"
    DB_PASSWORD: str = ""

    # Full URL override (sqlite / postgresql deployments, tests)
    SQLALCHEMY_DATABASE_URI: Optional[str] = None

    # Credentials
    SESSION_COOKIE_NAME: str = "uniyelp.session_token"
    API_KEY_HEADER: str = "X-API-Key"
    API_KEY_PREFIX: str = "uy_"

    # Junction removal policy per hierarchy edge: "hard" or "soft"
    DEPARTMENT_LINK_REMOVAL: str = "soft"
    PROGRAM_LINK_REMOVAL: str = "hard"
    COURSE_LINK_REMOVAL: str = "soft"

    LOG_LEVEL: str = "INFO"

    @property
    def DATABASE_URL(self) -> str:
        if self.SQLALCHEMY_DATABASE_URI:
            return self.SQLALCHEMY_DATABASE_URI
        return f"mysql+pymysql://{self.DB_USER}:{self.DB_PASSWORD}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}?charset=utf8mb4"

    class Config:
        env_file = ".env"


@lru_cache()
def get_settings():
    return Settings()
