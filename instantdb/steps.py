"""Transaction steps and their wire encoding.

A transaction is an ordered list of steps. Each step encodes to the
positional array the admin API expects:

    Update  -> ["update", namespace, id, payload]
    Delete  -> ["delete", namespace, id]
    Link    -> ["link", source namespace, source id, {target namespace: target id}]
    Unlink  -> ["unlink", source namespace, source id, {target namespace: target id}]
"""

import copy
import uuid
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, NamedTuple, Union


def new_id() -> str:
    """Generate a new entity id (random UUID4 string)."""
    return str(uuid.uuid4())


def lookup(prop: str, value: Any) -> str:
    """Build a lookup reference addressing an entity by a unique attribute.

    The result can be used anywhere an entity id is expected. ``value`` is
    rendered the way it appears in JSON: booleans as ``true``/``false`` and
    integral floats without a fractional part. ``None`` is rejected since no
    attribute can be looked up by a missing value.

    Example:
        >>> lookup("title", "todo 1")
        'lookup__title__"todo 1"'
        >>> lookup("rank", 1.0)
        'lookup__rank__"1"'
    """
    if value is None:
        raise TypeError("lookup value must not be None")
    if isinstance(value, bool):
        value = "true" if value else "false"
    elif isinstance(value, float) and value.is_integer():
        value = int(value)
    return f'lookup__{prop}__"{value}"'


class Ref(NamedTuple):
    """One end of a link: a namespace and an entity id (or lookup reference)."""

    namespace: str
    id: str


@dataclass(frozen=True)
class Update:
    """Create or update the attributes of an entity."""

    namespace: str
    id: str
    payload: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "payload", copy.deepcopy(dict(self.payload)))

    def encode(self) -> list[Any]:
        return ["update", self.namespace, self.id, copy.deepcopy(self.payload)]


@dataclass(frozen=True)
class Delete:
    """Delete an entity."""

    namespace: str
    id: str

    def encode(self) -> list[Any]:
        return ["delete", self.namespace, self.id]


@dataclass(frozen=True)
class Link:
    """Link ``source`` to ``target``.

    Example:
        >>> Link(Ref("lists", list_id), Ref("todos", todo_id))
    """

    source: Ref
    target: Ref

    def __post_init__(self) -> None:
        object.__setattr__(self, "source", Ref(*self.source))
        object.__setattr__(self, "target", Ref(*self.target))

    def encode(self) -> list[Any]:
        return ["link", self.source.namespace, self.source.id, {self.target.namespace: self.target.id}]


@dataclass(frozen=True)
class Unlink:
    """Remove the link between ``source`` and ``target``."""

    source: Ref
    target: Ref

    def __post_init__(self) -> None:
        object.__setattr__(self, "source", Ref(*self.source))
        object.__setattr__(self, "target", Ref(*self.target))

    def encode(self) -> list[Any]:
        return ["unlink", self.source.namespace, self.source.id, {self.target.namespace: self.target.id}]


Step = Union[Update, Delete, Link, Unlink]


def encode_step(step: Step) -> list[Any]:
    """Encode a single step into its wire array."""
    if not isinstance(step, (Update, Delete, Link, Unlink)):
        raise TypeError(f"Not a transaction step: {step!r}")
    return step.encode()


def encode_steps(steps: Iterable[Step]) -> list[list[Any]]:
    """Encode steps in submitted order."""
    return [encode_step(step) for step in steps]
