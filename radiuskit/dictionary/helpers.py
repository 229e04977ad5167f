"""Lookup helpers and merging of dictionaries."""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable, List, Sequence

from .errors import DictionaryError
from .types import Attribute, Dictionary, Value, Vendor, oid_to_string


def attribute_by_name(attrs: Iterable[Attribute], name: str) -> Attribute | None:
    """Return the first attribute with the given name, or None."""
    return next((attr for attr in attrs if attr.name == name), None)


def attribute_by_oid(attrs: Iterable[Attribute], oid: Sequence[int]) -> Attribute | None:
    """Return the first attribute with the given OID, or None."""
    wanted = tuple(oid)
    return next((attr for attr in attrs if attr.oid == wanted), None)


def values_by_attribute(values: Iterable[Value], attribute: str) -> List[Value]:
    """Return every value defined for the named attribute, in order."""
    return [value for value in values if value.attribute == attribute]


def vendor_by_name(vendors: Iterable[Vendor], name: str) -> Vendor | None:
    """Return the first vendor with the given name, or None."""
    return next((vendor for vendor in vendors if vendor.name == name), None)


def vendor_by_number(vendors: Iterable[Vendor], number: int) -> Vendor | None:
    """Return the first vendor with the given number, or None."""
    return next((vendor for vendor in vendors if vendor.number == number), None)


def _find_conflict(existing: Sequence[Attribute], attr: Attribute) -> Attribute | None:
    return attribute_by_name(existing, attr.name) or attribute_by_oid(existing, attr.oid)


def merge(d1: Dictionary, d2: Dictionary) -> Dictionary:
    """Combine two dictionaries into a new one; raises DictionaryError on conflicts."""
    for attr in d2.attributes:
        if _find_conflict(d1.attributes, attr) is not None:
            raise DictionaryError(
                f"duplicate attribute {attr.name} ({oid_to_string(attr.oid)})"
            )

    for vendor in d2.vendors:
        by_name = vendor_by_name(d1.vendors, vendor.name)
        by_number = vendor_by_number(d1.vendors, vendor.number)
        if by_name is not by_number:
            raise DictionaryError(f"conflicting vendor: {vendor.name} ({vendor.number})")
        if by_name is None:
            continue
        for attr in vendor.attributes:
            if _find_conflict(by_name.attributes, attr) is not None:
                raise DictionaryError(
                    f"duplicate vendor attribute {attr.name} ({oid_to_string(attr.oid)})"
                )

    vendors = list(d1.vendors)
    for vendor in d2.vendors:
        index = next(
            (i for i, existing in enumerate(vendors) if existing.number == vendor.number),
            None,
        )
        if index is None:
            vendors.append(vendor)
        else:
            existing = vendors[index]
            vendors[index] = replace(
                existing,
                attributes=existing.attributes + vendor.attributes,
                values=existing.values + vendor.values,
            )

    return Dictionary(
        attributes=d1.attributes + d2.attributes,
        values=d1.values + d2.values,
        vendors=vendors,
    )