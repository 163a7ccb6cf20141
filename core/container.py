"""
Dependency Injection Container for daily-write.

Provides a centralized container for managing dependencies, enabling
testability through mock injection and decoupling components.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from storage.data_store import DataStore

if TYPE_CHECKING:
    from gdocs.gateway import DocumentGateway

logger = logging.getLogger(__name__)

# Builds a DocumentGateway for one request's access token
GatewayFactory = Callable[[str], "DocumentGateway"]


def default_gateway_factory(access_token: str) -> "DocumentGateway":
    """Build a gateway backed by real Google service objects."""
    from auth.credentials import build_docs_service, build_drive_service, credentials_from_access_token
    from gdocs.gateway import DocumentGateway

    credentials = credentials_from_access_token(access_token)
    return DocumentGateway(build_docs_service(credentials), build_drive_service(credentials))


@dataclass
class Container:
    """
    Dependency injection container.

    Holds the data store and the factory that turns an access token into a
    DocumentGateway. If not provided, defaults to the standard implementations.
    """

    data_store: DataStore | None = None
    gateway_factory: GatewayFactory | None = None

    def __post_init__(self) -> None:
        """Initialize with defaults if not provided."""
        if self.data_store is None:
            from core.config import get_config
            from storage.data_store import JsonFileDataStore

            self.data_store = JsonFileDataStore(get_config().data_file)

        if self.gateway_factory is None:
            self.gateway_factory = default_gateway_factory


# Global container instance
_container: Container | None = None


def get_container() -> Container:
    """
    Get the global container instance.

    Creates a new container with default implementations if none exists.

    Returns:
        The global Container instance.
    """
    global _container
    if _container is None:
        _container = Container()
        logger.debug("Initialized default dependency container")
    return _container


def set_container(container: Container) -> None:
    """
    Set the global container instance.

    Use this for testing to inject mock implementations.

    Args:
        container: The container to use as the global instance.
    """
    global _container
    _container = container
    logger.debug("Set custom dependency container")


def reset_container() -> None:
    """
    Reset the global container.

    Use this between tests to ensure a clean state.
    """
    global _container
    _container = None
    logger.debug("Reset dependency container")
