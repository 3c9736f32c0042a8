"""
Preferred-Id Service

Standalone service implementing the FHIR $preferred-id operation: given a
known identifier of a NamingSystem, return its identifier of another type
(uri, oid or uuid).

Usage:
    # As a service
    python -m src.services.preferred_id --port 8085

    # Programmatic
    from src.services.preferred_id import IdentificationService, InMemorySearchProvider
"""

__version__ = "0.1.0"

from .adapters.decoder import FhirNamingSystemDecoder
from .adapters.memory import InMemorySearchProvider
from .config import PreferredIdServiceConfig
from .core.models import IdentifierEntry, IdentifierKind, NamedResource
from .core.service import IdentificationService

__all__ = [
    "FhirNamingSystemDecoder",
    "IdentificationService",
    "IdentifierEntry",
    "IdentifierKind",
    "InMemorySearchProvider",
    "NamedResource",
    "PreferredIdServiceConfig",
]
