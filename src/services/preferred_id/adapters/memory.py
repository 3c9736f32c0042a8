"""
In-memory search provider.

Holds a fixed set of FHIR resources. Used by tests and for running the
service without a database, optionally seeded from a Bundle JSON file.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any

from ..core.exceptions import SearchProviderError
from ..core.protocols import SearchOptions, SearchQuery

logger = logging.getLogger(__name__)


class InMemorySearchProvider:
    """
    Search provider backed by a list of resource records.

    Records are matched on ``resourceType`` only. Calls are recorded so tests
    can assert whether the repository was touched.
    """

    def __init__(self, records: Iterable[dict[str, Any]] | None = None):
        self._records: list[dict[str, Any]] = list(records or [])
        self.calls: list[tuple[SearchQuery, SearchOptions]] = []

    @classmethod
    def from_file(cls, path: str | Path) -> InMemorySearchProvider:
        """
        Load resources from a JSON file.

        Accepts a FHIR Bundle, a JSON list of resources, or a single resource.

        Raises:
            SearchProviderError: If the file cannot be read or parsed
        """
        path = Path(path)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise SearchProviderError("memory", f"cannot load {path}: {e}") from e

        if isinstance(data, list):
            records = data
        elif not isinstance(data, dict):
            raise SearchProviderError(
                "memory", f"cannot load {path}: expected a resource, a list or a Bundle"
            )
        elif data.get("resourceType") == "Bundle":
            records = [entry["resource"] for entry in data.get("entry", []) if "resource" in entry]
        else:
            records = [data]

        logger.info(f"Loaded {len(records)} resources from {path}")
        return cls(records)

    @property
    def call_count(self) -> int:
        return len(self.calls)

    async def search(
        self,
        query: SearchQuery,
        options: SearchOptions,
    ) -> Sequence[dict[str, Any]]:
        self.calls.append((query, options))
        return [r for r in self._records if r.get("resourceType") == query.resource_type]

    async def check_health(self) -> dict:
        return {"connected": True, "backend": "memory", "resources": len(self._records)}
