"""InstantDB admin HTTP client."""

import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any, TypeVar

import httpx

from .config import DEFAULT_BASE_URL, ClientConfig
from .exceptions import APIError, DecodeError, TransportError
from .steps import Step, encode_steps
from .types import QueryResult, User

logger = logging.getLogger(__name__)

T = TypeVar("T")

UNKNOWN_ERROR = "Unknown error"

IDENTITY_HEADERS = ("as-email", "as-token", "as-guest")

QUERY_PATH = "/admin/query"
TRANSACT_PATH = "/admin/transact"
REFRESH_TOKENS_PATH = "/admin/refresh_tokens"
VERIFY_REFRESH_TOKEN_PATH = "/runtime/auth/verify_refresh_token"


def extract_error_message(response: httpx.Response) -> str:
    """Pull a human-readable message out of an error response body.

    Looks for a string ``message`` field, then ``error``; anything else,
    including a body that is not JSON, yields "Unknown error".
    """
    try:
        data = response.json()
    except ValueError:
        return UNKNOWN_ERROR
    if isinstance(data, dict):
        for key in ("message", "error"):
            if isinstance(data.get(key), str):
                return data[key]
    return UNKNOWN_ERROR


def api_error_from_response(response: httpx.Response) -> APIError | None:
    """Map a completed exchange to an APIError, or None on success."""
    if response.is_success:
        return None
    status = str(response.status_code)
    if response.reason_phrase:
        status = f"{status} {response.reason_phrase}"
    return APIError(
        status=status,
        body=response.text,
        message=extract_error_message(response),
        status_code=response.status_code,
    )


def _check(response: httpx.Response) -> httpx.Response:
    logger.debug("%s %s -> %s", response.request.method, response.request.url.path, response.status_code)
    error = api_error_from_response(response)
    if error is not None:
        raise error
    return response


def _decode_json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError as e:
        raise DecodeError(f"Failed to parse response: {e}") from e


def _decode_into(data: Any, into: Callable[[Any], T]) -> T:
    try:
        return into(data)
    except DecodeError:
        raise
    except (KeyError, TypeError, ValueError) as e:
        raise DecodeError(f"Response does not match expected shape: {e}") from e


class _BaseClient:
    """Shared configuration and identity-override state."""

    _client: httpx.Client | httpx.AsyncClient

    def __init__(self, app_id: str, secret: str, base_url: str) -> None:
        self.app_id = app_id
        self.base_url = base_url.rstrip("/")
        self._headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {secret}",
            "App-Id": app_id,
        }

    def as_email(self, email: str) -> None:
        """Evaluate permissions of all later requests as the user with ``email``."""
        self._set_identity("as-email", email)

    def as_token(self, token: str) -> None:
        """Evaluate permissions of all later requests as the holder of ``token``."""
        self._set_identity("as-token", token)

    def as_guest(self) -> None:
        """Evaluate permissions of all later requests as an unauthenticated guest."""
        self._set_identity("as-guest", "true")

    def as_admin(self) -> None:
        """Drop any identity override."""
        self._set_identity(None, None)

    def _set_identity(self, header: str | None, value: str | None) -> None:
        # Not synchronized: use one client per identity.
        for name in IDENTITY_HEADERS:
            self._client.headers.pop(name, None)
        if header is not None:
            self._client.headers[header] = value

    @staticmethod
    def _query_body(query: Mapping[str, Any]) -> dict[str, Any]:
        return {"query": query}

    @staticmethod
    def _transact_body(steps: Iterable[Step]) -> dict[str, Any]:
        return {"steps": encode_steps(steps)}

    def _verify_body(self, refresh_token: str) -> dict[str, str]:
        return {"app-id": self.app_id, "refresh-token": refresh_token}


class InstantClient(_BaseClient):
    """HTTP client for the InstantDB admin API.

    Args:
        app_id: InstantDB application id.
        secret: Admin token.
        base_url: API root (default "https://api.instantdb.com").
        timeout: Transport timeout in seconds. None (the default) means no
            timeout is enforced by the client.
        transport: Optional httpx transport, e.g. ``httpx.MockTransport``.

    Identity overrides (``as_email``, ``as_token``, ``as_guest``) apply to
    every later request of the instance. Use one client per identity.

    Example:
        >>> with InstantClient(app_id, secret) as client:
        ...     result = client.query({"todos": {}})
        ...     print(len(result["todos"]))
    """

    def __init__(
        self,
        app_id: str,
        secret: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        super().__init__(app_id, secret, base_url)
        self._client = httpx.Client(
            base_url=self.base_url,
            headers=self._headers,
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_config(cls, config: ClientConfig, **kwargs: Any) -> "InstantClient":
        return cls(config.app_id, config.secret, base_url=config.base_url, timeout=config.timeout, **kwargs)

    @classmethod
    def from_env(cls, **kwargs: Any) -> "InstantClient":
        """Create a client from INSTANT_APP_ID / INSTANT_ADMIN_TOKEN."""
        return cls.from_config(ClientConfig.from_env(), **kwargs)

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> "InstantClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def query(
        self,
        query: Mapping[str, Any],
        *,
        into: Callable[[Any], T] | None = None,
        timeout: Any = httpx.USE_CLIENT_DEFAULT,
    ) -> QueryResult | T:
        """Execute an InstaQL query.

        Args:
            query: Nested mapping of namespaces to sub-selections.
            into: Optional callable building the caller's result shape from
                the decoded JSON object.
            timeout: Per-call timeout passed through to httpx.

        Returns:
            QueryResult, or whatever ``into`` returns.

        Example:
            >>> result = client.query({"lists": {"todos": {}}, "todos": {}})
            >>> lists = result.sorted("lists", key=lambda r: r["title"])
        """
        response = self._post(QUERY_PATH, self._query_body(query), timeout)
        data = _decode_json(response)
        return _decode_into(data, into or QueryResult.from_response)

    def transact(self, steps: Iterable[Step], *, timeout: Any = httpx.USE_CLIENT_DEFAULT) -> None:
        """Submit steps as one transaction, in the given order.

        The service applies the steps atomically. On error, assume none
        were applied.

        Example:
            >>> client.transact([
            ...     Update("todos", new_id(), {"title": "Buy milk"}),
            ...     Delete("todos", old_id),
            ... ])
        """
        self._post(TRANSACT_PATH, self._transact_body(steps), timeout)

    def create_token(self, email: str, *, timeout: Any = httpx.USE_CLIENT_DEFAULT) -> User:
        """Create a refresh token for ``email``, creating the user if needed."""
        response = self._post(REFRESH_TOKENS_PATH, {"email": email}, timeout)
        return User.from_response(_decode_json(response))

    def verify_token(self, refresh_token: str, *, timeout: Any = httpx.USE_CLIENT_DEFAULT) -> User:
        """Verify a refresh token and return its user."""
        response = self._post(VERIFY_REFRESH_TOKEN_PATH, self._verify_body(refresh_token), timeout)
        return User.from_response(_decode_json(response))

    def _post(self, path: str, payload: dict[str, Any], timeout: Any) -> httpx.Response:
        logger.debug("POST %s", path)
        try:
            response = self._client.post(path, json=payload, timeout=timeout)
        except httpx.TransportError as e:
            raise TransportError(f"Request to {path} failed: {e}") from e
        return _check(response)


class AsyncInstantClient(_BaseClient):
    """Async HTTP client for the InstantDB admin API.

    Same interface as InstantClient but uses async/await. Cancelling the
    awaiting task aborts the in-flight request.
    """

    def __init__(
        self,
        app_id: str,
        secret: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(app_id, secret, base_url)
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=self._headers,
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_config(cls, config: ClientConfig, **kwargs: Any) -> "AsyncInstantClient":
        return cls(config.app_id, config.secret, base_url=config.base_url, timeout=config.timeout, **kwargs)

    @classmethod
    def from_env(cls, **kwargs: Any) -> "AsyncInstantClient":
        return cls.from_config(ClientConfig.from_env(), **kwargs)

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "AsyncInstantClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def query(
        self,
        query: Mapping[str, Any],
        *,
        into: Callable[[Any], T] | None = None,
        timeout: Any = httpx.USE_CLIENT_DEFAULT,
    ) -> QueryResult | T:
        """Execute an InstaQL query asynchronously."""
        response = await self._post(QUERY_PATH, self._query_body(query), timeout)
        data = _decode_json(response)
        return _decode_into(data, into or QueryResult.from_response)

    async def transact(self, steps: Iterable[Step], *, timeout: Any = httpx.USE_CLIENT_DEFAULT) -> None:
        """Submit steps as one transaction asynchronously."""
        await self._post(TRANSACT_PATH, self._transact_body(steps), timeout)

    async def create_token(self, email: str, *, timeout: Any = httpx.USE_CLIENT_DEFAULT) -> User:
        response = await self._post(REFRESH_TOKENS_PATH, {"email": email}, timeout)
        return User.from_response(_decode_json(response))

    async def verify_token(self, refresh_token: str, *, timeout: Any = httpx.USE_CLIENT_DEFAULT) -> User:
        response = await self._post(VERIFY_REFRESH_TOKEN_PATH, self._verify_body(refresh_token), timeout)
        return User.from_response(_decode_json(response))

    async def _post(self, path: str, payload: dict[str, Any], timeout: Any) -> httpx.Response:
        logger.debug("POST %s", path)
        try:
            response = await self._client.post(path, json=payload, timeout=timeout)
        except httpx.TransportError as e:
            raise TransportError(f"Request to {path} failed: {e}") from e
        return _check(response)
