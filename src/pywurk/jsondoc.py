"""Path-addressed JSON documents with modification tracking.

Manifests are loaded into a :class:`JsonDocument`. Reads and writes go through
:class:`JsonNode` views addressed by a key path, so code never holds on to raw
nested dictionaries that could be mutated behind the document's back.
"""

from __future__ import annotations

import copy
import json
from collections.abc import Iterator
from typing import Any, TypeVar, overload

T = TypeVar("T")

_MISSING = object()

PathKey = str | int


def _lookup(value: Any, path: tuple[PathKey, ...]) -> Any:
    for key in path:
        if isinstance(value, dict) and isinstance(key, str):
            value = value.get(key, _MISSING)
        elif isinstance(value, list) and isinstance(key, int) and -len(value) <= key < len(value):
            value = value[key]
        else:
            return _MISSING
        if value is _MISSING:
            return _MISSING
    return value


def _matches(value: Any, type_: type) -> bool:
    # bool is an int subclass, but JSON keeps them apart.
    if type_ in (int, float):
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    if type_ is type(None):
        return value is None
    return isinstance(value, type_)


class JsonDocument:
    """Mutable JSON document that remembers whether it was changed.

    Attributes:
        revision: Incremented on every effective change.
    """

    def __init__(self, value: Any = None, *, readonly: bool = False) -> None:
        self._value = copy.deepcopy(value)
        self._modified = False
        self._readonly = readonly
        self.revision = 0

    @classmethod
    def parse(cls, text: str, *, readonly: bool = False) -> JsonDocument:
        """Parse JSON text. Empty text yields a ``null`` document."""
        return cls(json.loads(text) if text.strip() else None, readonly=readonly)

    @property
    def is_modified(self) -> bool:
        return self._modified

    @property
    def root(self) -> JsonNode:
        return JsonNode(self, ())

    def at(self, *path: PathKey) -> JsonNode:
        return JsonNode(self, tuple(path))

    def unwrap(self) -> Any:
        """Return a deep copy of the whole document value."""
        return copy.deepcopy(self._value)

    def dumps(self, *, indent: int = 2) -> str:
        return json.dumps(self._value, indent=indent, ensure_ascii=False) + "\n"

    def get(self, path: tuple[PathKey, ...]) -> Any:
        return _lookup(self._value, path)

    def set(self, path: tuple[PathKey, ...], value: Any) -> None:
        """Replace the value at ``path``, creating intermediate objects."""
        if self._readonly:
            raise TypeError("cannot modify a read-only JSON document")

        current = self.get(path)
        if current is not _MISSING and current == value:
            return

        value = copy.deepcopy(value)

        if not path:
            self._value = value
        else:
            self._value = _replace(self._value, path, value)

        self._modified = True
        self.revision += 1


def _replace(container: Any, path: tuple[PathKey, ...], value: Any) -> Any:
    """Copy-on-write replacement along ``path``."""
    key, rest = path[0], path[1:]

    if isinstance(container, list) and isinstance(key, int):
        result: Any = list(container)
        result[key] = value if not rest else _replace(result[key], rest, value)
        return result

    result = dict(container) if isinstance(container, dict) else {}
    if not rest:
        result[key] = value
    else:
        result[key] = _replace(result.get(key), rest, value)
    return result


class JsonNode:
    """View of one location inside a :class:`JsonDocument`."""

    def __init__(self, document: JsonDocument, path: tuple[PathKey, ...]) -> None:
        self.document = document
        self.path = path

    def __repr__(self) -> str:
        return f"JsonNode({'.'.join(map(str, self.path)) or '<root>'}={self.unwrap()!r})"

    def at(self, *keys: PathKey) -> JsonNode:
        return JsonNode(self.document, self.path + tuple(keys))

    @property
    def exists(self) -> bool:
        return self.document.get(self.path) is not _MISSING

    def unwrap(self) -> Any:
        value = self.document.get(self.path)
        return None if value is _MISSING else copy.deepcopy(value)

    def is_(self, type_: type) -> bool:
        value = self.document.get(self.path)
        return value is not _MISSING and _matches(value, type_)

    @overload
    def as_(self, type_: type[T]) -> T | None: ...

    @overload
    def as_(self, type_: type[T], default: T) -> T: ...

    def as_(self, type_: type[T], default: T | None = None) -> T | None:
        """Return the value if it has the given JSON type, else ``default``."""
        value = self.document.get(self.path)
        if value is _MISSING or not _matches(value, type_):
            return default
        return copy.deepcopy(value)

    def keys(self) -> list[str]:
        value = self.document.get(self.path)
        return list(value.keys()) if isinstance(value, dict) else []

    def items(self) -> Iterator[tuple[str, JsonNode]]:
        for key in self.keys():
            yield key, self.at(key)

    def __iter__(self) -> Iterator[JsonNode]:
        value = self.document.get(self.path)
        if isinstance(value, list):
            for index in range(len(value)):
                yield self.at(index)

    def set(self, value: Any) -> None:
        self.document.set(self.path, value)


def parse_json(text: str) -> JsonNode:
    """Parse JSON text into a read-only root node."""
    return JsonDocument.parse(text, readonly=True).root
