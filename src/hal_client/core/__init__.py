"""Core HAL document model (transport-agnostic)."""

from .errors import (
    HalClientError,
    InvalidRepresentationError,
    MissingTransportError,
    NotFoundError,
)
from .logging import LogfmtFormatter, setup_logging
from .models import Curie, Link
from .namespaces import NamespaceResolver
from .observability import log_event
from .representation import HAL_CONTENT_TYPE, Representation
from .representation_set import RepresentationSet

__all__ = [
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
    # Logging
    "setup_logging",
    "LogfmtFormatter",
    "log_event",
]
