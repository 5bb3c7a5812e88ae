"""
Configuration for the DocDB SDK.

Uses pydantic-settings for environment variable loading.
"""

from typing import Optional, Tuple

from pydantic import Field
from pydantic_settings import BaseSettings


class ConnectionSettings(BaseSettings):
    """Client connection settings loaded from environment (``DOCDB_*``)."""

    # Servers, in failover order
    endpoints: list[str] = Field(
        default=["http://localhost:8529"],
        description="Server URLs, tried in this order on failover",
    )
    default_timeout: float = Field(
        default=60.0,
        gt=0,
        description="Request budget in seconds when the caller sets none",
    )

    # Authentication
    username: Optional[str] = Field(default=None, description="Basic auth user")
    password: str = Field(default="", description="Basic auth password")

    # Connection pool
    max_connections: int = Field(default=10, description="Max connections per endpoint")

    model_config = {"env_prefix": "DOCDB_"}

    @property
    def auth(self) -> Optional[Tuple[str, str]]:
        """Basic auth tuple, or None when no user is configured."""
        if self.username is None:
            return None
        return (self.username, self.password)
