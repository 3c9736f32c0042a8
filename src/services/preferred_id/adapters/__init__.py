"""
Storage and decoding adapters for the preferred-id service.
"""

from .database import PostgresSearchProvider, check_db_health, create_db_pool
from .decoder import FhirNamingSystemDecoder
from .memory import InMemorySearchProvider

__all__ = [
    "FhirNamingSystemDecoder",
    "InMemorySearchProvider",
    "PostgresSearchProvider",
    "check_db_health",
    "create_db_pool",
]
