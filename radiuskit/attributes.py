"""Collections of RADIUS attributes keyed by attribute type."""

from __future__ import annotations

from typing import Iterable, Iterator, Mapping

from .errors import NoAttributeError

TYPE_INVALID = -1
"""A type number that can stand for an invalid attribute type."""


class Attributes:
    """A mapping of attribute type to the list of values of that type."""

    __slots__ = ("_items",)

    def __init__(self, items: Mapping[int, Iterable[bytes]] | None = None) -> None:
        self._items: dict[int, list[bytes]] = {}
        if items:
            for key, values in items.items():
                self._items[int(key)] = [bytes(v) for v in values]

    def __getitem__(self, key: int) -> list[bytes]:
        """Return the values of a type; an empty list if there are none."""
        return self._items.get(key, [])

    def __setitem__(self, key: int, values: Iterable[bytes]) -> None:
        self._items[key] = [bytes(v) for v in values]

    def __contains__(self, key: object) -> bool:
        return bool(self._items.get(key))  # type: ignore[arg-type]

    def __iter__(self) -> Iterator[int]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Attributes):
            return NotImplemented
        return self._items == other._items

    def __repr__(self) -> str:
        return f"Attributes({self._items!r})"

    def items(self):
        return self._items.items()

    def add(self, key: int, value: bytes) -> None:
        """Append a value to the given type."""
        self._items.setdefault(key, []).append(bytes(value))

    def delete(self, key: int) -> None:
        """Remove every value of the given type."""
        self._items.pop(key, None)

    def get(self, key: int) -> bytes | None:
        """Return the first value of the given type, or None."""
        values = self._items.get(key)
        return values[0] if values else None

    def lookup(self, key: int) -> bytes:
        """Return the first value of the given type, raising if absent."""
        values = self._items.get(key)
        if not values:
            raise NoAttributeError()
        return values[0]

    def set(self, key: int, value: bytes) -> None:
        """Replace every value of the given type with a single value."""
        self._items[key] = [bytes(value)]

    def wire_size(self) -> int:
        """Return the encoded size in bytes of all valid-typed attributes."""
        size = 0
        for typ, values in self._items.items():
            if not 1 <= typ <= 255:
                continue
            for value in values:
                if len(value) > 255:
                    raise ValueError("invalid attribute length")
                size += 2 + len(value)
        return size

    def encode(self) -> bytes:
        """Encode the attributes to wire format, ordered by type."""
        out = bytearray()
        for typ in sorted(t for t in self._items if 1 <= t <= 255):
            for value in self._items[typ]:
                if len(value) > 255:
                    continue
                out.append(typ)
                out.append((2 + len(value)) & 0xFF)
                out += value
        return bytes(out)


def parse_attributes(b: bytes) -> Attributes:
    """Parse wire-encoded attributes; raises ValueError if malformed."""
    attrs = Attributes()
    data = memoryview(bytes(b))
    while data:
        if len(data) < 2:
            raise ValueError("short buffer")
        length = data[1]
        if length > len(data) or length < 2:
            raise ValueError("invalid attribute length")
        attrs.add(data[0], bytes(data[2:length]))
        data = data[length:]
    return attrs