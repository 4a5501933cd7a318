"""Schema-less key/value lookups with explicit membership semantics.

Request data arrives in several shapes: parsed JSON bodies, form data,
path parameters, query strings and headers. ``FieldMap`` puts one interface
over all of them. Presence is decided by key membership in the wrapped
mapping only; attributes or methods of the container type never count,
so ``FieldMap({}).contains("items")`` is False even though ``dict`` has an
``items`` attribute.
"""

from collections.abc import Mapping
from typing import Any


class FieldMap:
    """Read-only view over a mapping of request fields.

    Args:
        data: Source mapping. Anything that is not a ``Mapping`` (a JSON
            array body, a scalar, None) is treated as holding no fields.
    """

    __slots__ = ("_data",)

    def __init__(self, data: object = None) -> None:
        self._data: Mapping[str, Any] = data if isinstance(data, Mapping) else {}

    def contains(self, key: str) -> bool:
        """Return True if ``key`` is one of the mapping's own keys."""
        return key in self._data

    def __repr__(self) -> str:
        return f"FieldMap({dict(self._data)!r})"


def contains_any(sources: tuple[FieldMap, ...], key: str) -> bool:
    """Return True if any source holds ``key``, checked in order."""
    return any(source.contains(key) for source in sources)
