"""Type definitions for InstantDB client."""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from .exceptions import DecodeError


@dataclass
class QueryResult:
    """Result of a query operation.

    Maps namespace names to lists of records. The service does not guarantee
    record order within a namespace; use ``sorted`` when order matters.
    """

    data: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_response(cls, response: Any) -> "QueryResult":
        """Create QueryResult from the query endpoint response."""
        if not isinstance(response, dict):
            raise DecodeError(f"Expected a JSON object, got {type(response).__name__}")
        return cls(data=response)

    @property
    def namespaces(self) -> list[str]:
        return list(self.data)

    def __getitem__(self, namespace: str) -> Any:
        return self.data[namespace]

    def __contains__(self, namespace: object) -> bool:
        return namespace in self.data

    def get(self, namespace: str) -> list[dict[str, Any]]:
        """Records of ``namespace``, or an empty list if it is absent."""
        return self.data.get(namespace) or []

    def sorted(
        self,
        namespace: str,
        key: Callable[[dict[str, Any]], Any] = lambda record: record.get("id", ""),
    ) -> list[dict[str, Any]]:
        """Records of ``namespace`` in a deterministic order (by id by default)."""
        return sorted(self.get(namespace), key=key)


@dataclass
class User:
    """An app user as returned by the auth endpoints."""

    id: str
    app_id: str
    email: str
    created_at: str
    refresh_token: str

    @classmethod
    def from_response(cls, response: Any) -> "User":
        """Create User from a ``{"user": {...}}`` response."""
        if not isinstance(response, dict) or not isinstance(response.get("user"), dict):
            raise DecodeError("Expected a response with a 'user' object")
        data = response["user"]
        return cls(
            id=data.get("id", ""),
            app_id=data.get("app_id", ""),
            email=data.get("email", ""),
            created_at=data.get("created_at", ""),
            refresh_token=data.get("refresh_token", ""),
        )
