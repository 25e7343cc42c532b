"""Server infrastructure settings."""

from typing import Annotated, List

from pydantic import Field, field_validator
from pydantic_settings import NoDecode

from infrastructure.configuration.base import InfrastructureSettings


class ServerSettings(InfrastructureSettings):
    """Server and application runtime configuration.

    Environment Variables:
        CORS_ALLOW_ORIGINS: Comma separated origins allowed outside production
        RATE_LIMIT_SEND: slowapi limit applied to the send endpoint

    Example:
        ```python
        from infrastructure.services import get_settings

        origins = get_settings().server.CORS_ALLOW_ORIGINS
        ```
    """

    CORS_ALLOW_ORIGINS: Annotated[List[str], NoDecode] = Field(
        default=["http://localhost:8000", "http://127.0.0.1:8000"],
        alias="CORS_ALLOW_ORIGINS",
    )
    RATE_LIMIT_SEND: str = Field(default="30/minute", alias="RATE_LIMIT_SEND")

    @field_validator("CORS_ALLOW_ORIGINS", mode="before")
    @classmethod
    def split_origins(cls, v):
        """Split the comma separated environment value."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v
