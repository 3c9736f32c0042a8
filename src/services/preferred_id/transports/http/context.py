"""
Request context and response sink for the HTTP transport.
"""

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from ...core.responses import FHIR_JSON_CONTENT_TYPE

TYPE_CUSTOM_INTERACTION = "type_custom"


@dataclass
class HttpRequestContext:
    """
    Arguments of one $preferred-id HTTP call.

    The resource type comes from the path; ``id`` and ``type`` from the query.
    """

    resource_type: str | None
    query: Mapping[str, str]
    server_base: str
    information_model: str
    interaction: str = TYPE_CUSTOM_INTERACTION
    handled: bool = False

    @classmethod
    def from_request(
        cls,
        request: Any,
        resource_type: str,
        information_model: str,
    ) -> "HttpRequestContext":
        return cls(
            resource_type=resource_type,
            query=dict(request.query_params),
            server_base=str(request.base_url),
            information_model=information_model,
        )

    def get_argument(self, name: str) -> str | None:
        if name == "_type":
            return self.resource_type
        return self.query.get(name)

    def mark_handled(self) -> None:
        self.handled = True


@dataclass
class HttpResponseSink:
    """Collects the operation result and renders it as a JSON body."""

    pretty: bool = True
    status_code: int | None = None
    payload: dict[str, Any] = field(default_factory=dict)
    content_type: str = FHIR_JSON_CONTENT_TYPE

    def respond(self, status_code: int, payload: dict[str, Any], content_type: str) -> None:
        self.status_code = status_code
        self.payload = payload
        self.content_type = content_type

    def body(self) -> str:
        return json.dumps(self.payload, indent=2 if self.pretty else None)
