"""Data types describing a parsed RADIUS dictionary."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Iterable, List

ENCRYPT_USER_PASSWORD = 1
"""Value of the ``encrypt=`` flag for RFC 2865 User-Password encryption."""

ENCRYPT_TUNNEL_PASSWORD = 2
"""Value of the ``encrypt=`` flag for RFC 2868 Tunnel-Password encryption."""


class AttributeType(IntEnum):
    """The data type of a dictionary attribute."""

    STRING = 1
    OCTETS = 2
    IPADDR = 3
    DATE = 4
    INTEGER = 5
    IPV6ADDR = 6
    IPV6PREFIX = 7
    IFID = 8
    INTEGER64 = 9
    VSA = 10
    ETHER = 11
    ABINARY = 12
    BYTE = 13
    SHORT = 14
    SIGNED = 15
    TLV = 16
    IPV4PREFIX = 17

    def __str__(self) -> str:
        return self.name.lower()

    def __format__(self, spec: str) -> str:
        return format(str(self), spec)


def oid_to_string(oid: Iterable[int]) -> str:
    """Render an OID as dot-separated decimal numbers."""
    return ".".join(str(part) for part in oid)


@dataclass
class Attribute:
    """An ATTRIBUTE definition; unset flags are None."""

    name: str
    oid: tuple
    type: AttributeType
    size: int | None = None
    flag_encrypt: int | None = None
    flag_has_tag: bool | None = None
    flag_concat: bool | None = None

    def __post_init__(self) -> None:
        self.oid = tuple(int(part) for part in self.oid)

    def has_tag(self) -> bool:
        """Return whether the attribute carries the ``has_tag`` flag."""
        return self.flag_has_tag is True


@dataclass
class Value:
    """A VALUE definition naming a number of an integer attribute."""

    attribute: str
    name: str
    number: int


@dataclass
class Vendor:
    """A VENDOR definition with the attributes and values declared for it."""

    name: str
    number: int
    type_octets: int | None = None
    length_octets: int | None = None
    attributes: List[Attribute] = field(default_factory=list)
    values: List[Value] = field(default_factory=list)

    @property
    def effective_type_octets(self) -> int:
        """Width of the vendor attribute type field; 1 when not declared."""
        return 1 if self.type_octets is None else self.type_octets

    @property
    def effective_length_octets(self) -> int:
        """Width of the vendor attribute length field; 1 when not declared."""
        return 1 if self.length_octets is None else self.length_octets


@dataclass
class Dictionary:
    """A complete dictionary: top-level attributes, values and vendors."""

    attributes: List[Attribute] = field(default_factory=list)
    values: List[Value] = field(default_factory=list)
    vendors: List[Vendor] = field(default_factory=list)


def _oid_key(attr: Attribute) -> tuple:
    # Missing trailing components count as zero, so strip trailing zeros.
    oid = list(attr.oid)
    while oid and oid[-1] == 0:
        oid.pop()
    return tuple(oid)


def sort_attributes(attrs: List[Attribute]) -> None:
    """Stably sort attributes in place by OID."""
    attrs.sort(key=_oid_key)


def sort_values(values: List[Value]) -> None:
    """Stably sort values in place by number."""
    values.sort(key=lambda value: value.number)


def sort_vendors(vendors: List[Vendor]) -> None:
    """Stably sort vendors in place by number."""
    vendors.sort(key=lambda vendor: vendor.number)