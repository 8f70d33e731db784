"""Base transport abstraction for Redfish endpoints."""
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional

from ..constants import DEFAULT_POLL_INTERVAL, DEFAULT_TIMEOUT


@dataclass
class EndpointConfig:
    """Connection settings for one managed controller."""
    host: str
    username: str
    name: str = ""
    password: Optional[str] = None
    password_env: str = "REDFISH_PASSWORD"
    verify_ssl: bool = True
    timeout: int = 30
    job_poll_interval: float = DEFAULT_POLL_INTERVAL
    job_timeout: float = DEFAULT_TIMEOUT
    # Attempts per read; 1 means reads are never retried
    read_retries: int = 1
    retry_wait: float = 1

    def get_password(self) -> str:
        """Get password from config or environment variable."""
        if self.password:
            return self.password
        return os.environ.get(self.password_env, "")

    @property
    def base_url(self) -> str:
        if "://" in self.host:
            return self.host.rstrip("/")
        return f"https://{self.host}"


class Transport(ABC):
    """HTTP operations the core needs from a Redfish service.

    Implementations raise TransportError for network-level failures and
    report HTTP status codes to the caller instead of raising on them.
    """

    @abstractmethod
    async def get(self, uri: str) -> tuple[bytes, int]:
        """GET a resource.

        Returns:
            Tuple of (body, status_code)
        """
        pass

    @abstractmethod
    async def patch(self, uri: str, payload: Any) -> tuple[bytes, int, Optional[str]]:
        """PATCH a resource with a JSON payload.

        Returns:
            Tuple of (body, status_code, location header or None)
        """
        pass

    @abstractmethod
    async def delete(self, uri: str) -> int:
        """DELETE a resource and return the status code."""
        pass

    async def close(self) -> None:
        pass

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
        return False
