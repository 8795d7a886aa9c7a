"""
Shared base class for provider implementations.

Contents:
    - BaseProvider: client storage and initialization guard
"""

from typing import Optional
from stack_deployer.logger import logger


class BaseProvider:
    """
    Base class for cloud provider implementations.

    Holds the SDK clients and refuses access to them until the subclass
    has initialized them.
    """

    def __init__(self):
        """Initialize base provider state."""
        self._region: Optional[str] = None
        self._clients: dict = {}
        self._initialized: bool = False

    @property
    def region(self) -> str:
        if not self._region:
            raise RuntimeError(
                "Provider not initialized. Call initialize_clients() first."
            )
        return self._region

    @property
    def clients(self) -> dict:
        """Return initialized SDK clients."""
        if not self._initialized:
            raise RuntimeError(
                "Provider not initialized. Call initialize_clients() first."
            )
        return self._clients

    def _log_initialized(self, provider_name: str) -> None:
        logger.debug(f"{provider_name} clients initialized for region {self._region}")
