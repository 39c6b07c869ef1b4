from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str = Field(..., alias="DATABASE_URL")
    database_echo: bool = Field(False, alias="DATABASE_ECHO")

    frontend_origin: str = Field("http://localhost:3000", alias="FRONTEND_ORIGIN")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    init_db_on_startup: bool = Field(True, alias="INIT_DB_ON_STARTUP")

    port: int = Field(4000, alias="PORT")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


settings = Settings()
