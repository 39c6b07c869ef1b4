from pydantic import Field
from pydantic_settings import BaseSettings


class ClientSettings(BaseSettings):
    """Workspace client configuration. Separate from the server settings so no DATABASE_URL is needed."""

    api_url: str = Field("http://localhost:4000", alias="API_URL")
    http_timeout_seconds: float = Field(30.0, alias="HTTP_TIMEOUT_SECONDS")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


client_settings = ClientSettings()
