"""InstantDB Python Admin Client.

A Python client for the InstantDB admin HTTP API.

Usage:
    from instantdb import InstantClient, Update, Delete, Link, Ref, new_id

    client = InstantClient(app_id, admin_token)

    # Query namespaces, expanding linked todos
    result = client.query({"lists": {"todos": {}}})

    # Submit a transaction
    todo_id = new_id()
    client.transact([
        Update("todos", todo_id, {"title": "Buy milk", "done": False}),
        Link(Ref("lists", list_id), Ref("todos", todo_id)),
    ])

    # Act as a specific user
    client.as_email("alyssa@example.com")
"""

import logging

from .client import AsyncInstantClient, InstantClient, api_error_from_response, extract_error_message
from .config import ClientConfig
from .exceptions import APIError, ConfigError, DecodeError, InstantError, TransportError
from .steps import Delete, Link, Ref, Step, Unlink, Update, encode_step, encode_steps, lookup, new_id
from .types import QueryResult, User

__version__ = "0.1.0"
__all__ = [
    "InstantClient",
    "AsyncInstantClient",
    "ClientConfig",
    "InstantError",
    "TransportError",
    "APIError",
    "DecodeError",
    "ConfigError",
    "QueryResult",
    "User",
    "Step",
    "Update",
    "Delete",
    "Link",
    "Unlink",
    "Ref",
    "encode_step",
    "encode_steps",
    "lookup",
    "new_id",
    "api_error_from_response",
    "extract_error_message",
    "set_debug",
]

logging.getLogger(__name__).addHandler(logging.NullHandler())

_debug_handler: logging.Handler | None = None


def set_debug(enabled: bool = True) -> None:
    """Log every request and response of the package to stderr.

    ``set_debug(False)`` detaches the stderr handler again.
    """
    global _debug_handler
    logger = logging.getLogger(__name__)
    if enabled:
        if _debug_handler is None:
            _debug_handler = logging.StreamHandler()
            _debug_handler.setFormatter(logging.Formatter("%(asctime)s %(name)s %(levelname)s %(message)s"))
            logger.addHandler(_debug_handler)
        logger.setLevel(logging.DEBUG)
    else:
        if _debug_handler is not None:
            logger.removeHandler(_debug_handler)
            _debug_handler = None
        logger.setLevel(logging.NOTSET)
