"""hal_client package exports."""

from .client import (
    HalClient,
    HalHTTPError,
    HalParseError,
    HalTransportError,
    RetryConfig,
)
from .config import ClientConfig, create_client_from_env, load_env_config
from .core import (
    HAL_CONTENT_TYPE,
    Curie,
    HalClientError,
    InvalidRepresentationError,
    Link,
    MissingTransportError,
    NamespaceResolver,
    NotFoundError,
    Representation,
    RepresentationSet,
    setup_logging,
)

__all__ = [
    # Client
    "HalClient",
    "RetryConfig",
    # Model
    "Representation",
    "RepresentationSet",
    "NamespaceResolver",
    "Link",
    "Curie",
    "HAL_CONTENT_TYPE",
    # Exceptions
    "HalClientError",
    "NotFoundError",
    "InvalidRepresentationError",
    "MissingTransportError",
    "HalTransportError",
    "HalHTTPError",
    "HalParseError",
    # Config helpers
    "ClientConfig",
    "load_env_config",
    "create_client_from_env",
    "setup_logging",
]
