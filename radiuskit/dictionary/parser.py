"""Parsing of FreeRADIUS-style dictionary files."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from typing import IO, Iterable, List, Optional, Set

from .errors import (
    BeginVendorIncludeError,
    DictionaryError,
    DuplicateAttributeError,
    DuplicateAttributeFlagError,
    DuplicateVendorError,
    InvalidAttributeEncryptTypeError,
    InvalidEndVendorError,
    InvalidOIDError,
    InvalidVendorFormatError,
    NestedVendorBlockError,
    ParseError,
    RecursiveIncludeError,
    UnclosedVendorBlockError,
    UnknownAttributeFlagError,
    UnknownAttributeTypeError,
    UnknownLineError,
    UnknownVendorError,
    UnmatchedEndVendorError,
)
from .helpers import attribute_by_name, vendor_by_name
from .types import Attribute, AttributeType, Dictionary, Value, Vendor

_OID_RE = re.compile(r"[0-9]+(?:\.[0-9]+)*")
_INT_RE = re.compile(r"[+-]?[0-9]+")
_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1

_TYPES = {attr_type.name.lower(): attr_type for attr_type in AttributeType}


def parse_oid(s: str) -> Optional[tuple]:
    """Parse a dotted OID such as ``26.9.1``; None if it is malformed."""
    if not _OID_RE.fullmatch(s):
        return None
    return tuple(int(part) for part in s.split("."))


def _parse_int32(text: str) -> int:
    if not _INT_RE.fullmatch(text):
        raise ValueError(f'parsing "{text}": invalid syntax')
    number = int(text)
    if not _INT32_MIN <= number <= _INT32_MAX:
        raise ValueError(f'parsing "{text}": value out of range')
    return number


def _name_of(f) -> str:
    return str(getattr(f, "name", "<unknown>"))


@dataclass
class FileSystemOpener:
    """Opens dictionary files, resolving relative names against ``root``."""

    root: str = ""

    def open_file(self, name: str) -> IO[str]:
        """Open a dictionary file for reading; its ``name`` is an absolute path."""
        path = os.fspath(name)
        if not os.path.isabs(path):
            path = os.path.join(os.fspath(self.root), path)
        return open(os.path.abspath(path), encoding="utf-8")


@dataclass
class Parser:
    """Reads dictionary files into a :class:`Dictionary`."""

    opener: FileSystemOpener = field(default_factory=FileSystemOpener)
    ignore_identical_attributes: bool = False

    def parse(self, f: Iterable[str]) -> Dictionary:
        """Parse an open dictionary file, following its ``$INCLUDE`` lines."""
        dictionary = Dictionary()
        self._parse(dictionary, {_name_of(f)}, f)
        return dictionary

    def parse_file(self, filename: str) -> Dictionary:
        """Open the named file with the opener and parse it."""
        with self.opener.open_file(filename) as f:
            return self.parse(f)

    def _parse(self, dictionary: Dictionary, active: Set[str], f) -> None:
        name = _name_of(f)
        vendor_block: Optional[Vendor] = None
        line_no = 0

        for line_no, raw in enumerate(f, start=1):
            text = raw.rstrip("\n")
            if text.endswith("\r"):
                text = text[:-1]
            line = text.split("#", 1)[0]
            if not line:
                continue
            fields = line.split()
            try:
                vendor_block = self._parse_line(dictionary, active, fields, text, vendor_block)
            except ParseError:
                raise
            except (DictionaryError, ValueError, OSError) as exc:
                raise ParseError(exc, name, line_no) from exc

        if vendor_block is not None:
            raise ParseError(UnclosedVendorBlockError(), name, line_no)

    def _parse_line(self, dictionary: Dictionary, active: Set[str], fields: List[str],
                    text: str, vendor_block: Optional[Vendor]) -> Optional[Vendor]:
        keyword = fields[0] if fields else ""
        count = len(fields)

        if keyword == "ATTRIBUTE" and count in (4, 5):
            attr = self._parse_attribute(fields)
            container = dictionary.attributes if vendor_block is None else vendor_block.attributes
            existing = attribute_by_name(container, attr.name)
            if existing is not None:
                if self.ignore_identical_attributes and attr == existing:
                    return vendor_block
                raise DuplicateAttributeError(attr)
            container.append(attr)

        elif keyword == "VALUE" and count == 4:
            value = Value(attribute=fields[1], name=fields[2], number=_parse_int32(fields[3]))
            # VALUEs may be redefined; no duplicate check.
            container = dictionary.values if vendor_block is None else vendor_block.values
            container.append(value)

        elif keyword == "VENDOR" and count in (3, 4):
            vendor = self._parse_vendor(fields)
            if any(v.name == vendor.name or v.number == vendor.number
                   for v in dictionary.vendors):
                raise DuplicateVendorError(vendor)
            dictionary.vendors.append(vendor)

        elif keyword == "BEGIN-VENDOR" and count == 2:
            if vendor_block is not None:
                raise NestedVendorBlockError()
            vendor = vendor_by_name(dictionary.vendors, fields[1])
            if vendor is None:
                raise UnknownVendorError(fields[1])
            return vendor

        elif keyword == "END-VENDOR" and count == 2:
            if vendor_block is None:
                raise UnmatchedEndVendorError()
            if vendor_block.name != fields[1]:
                raise InvalidEndVendorError(fields[1])
            return None

        elif keyword == "$INCLUDE" and count == 2:
            if vendor_block is not None:
                raise BeginVendorIncludeError()
            with self.opener.open_file(fields[1]) as included:
                included_name = _name_of(included)
                if included_name in active:
                    raise RecursiveIncludeError(included_name)
                active.add(included_name)
                try:
                    self._parse(dictionary, active, included)
                finally:
                    active.discard(included_name)

        else:
            raise UnknownLineError(text)

        return vendor_block

    @staticmethod
    def _parse_attribute(fields: List[str]) -> Attribute:
        oid = parse_oid(fields[2])
        if not oid:
            raise InvalidOIDError(fields[2])

        type_name = fields[3]
        lowered = type_name.lower()
        size = None
        if lowered in _TYPES:
            attr_type = _TYPES[lowered]
        elif len(type_name) > 8 and lowered.startswith("octets[") and type_name.endswith("]"):
            try:
                size = _parse_int32(type_name[7:-1])
            except ValueError:
                raise UnknownAttributeTypeError(type_name) from None
            attr_type = AttributeType.OCTETS
        else:
            raise UnknownAttributeTypeError(type_name)

        attr = Attribute(name=fields[1], oid=oid, type=attr_type, size=size)

        if len(fields) >= 5:
            for flag in fields[4].split(","):
                if flag.startswith("encrypt="):
                    if attr.flag_encrypt is not None:
                        raise DuplicateAttributeFlagError(flag)
                    encrypt_type = flag[len("encrypt="):]
                    try:
                        attr.flag_encrypt = _parse_int32(encrypt_type)
                    except ValueError:
                        raise InvalidAttributeEncryptTypeError(encrypt_type) from None
                elif flag == "has_tag":
                    if attr.flag_has_tag is not None:
                        raise DuplicateAttributeFlagError(flag)
                    attr.flag_has_tag = True
                elif flag == "concat":
                    if attr.flag_concat is not None:
                        raise DuplicateAttributeFlagError(flag)
                    attr.flag_concat = True
                else:
                    raise UnknownAttributeFlagError(flag)

        return attr

    @staticmethod
    def _parse_vendor(fields: List[str]) -> Vendor:
        vendor = Vendor(name=fields[1], number=_parse_int32(fields[2]))
        if len(fields) == 4:
            # "format=t,l" with t one of 1, 2, 4
            spec = fields[3]
            if (not spec.startswith("format=") or len(spec.encode("utf-8")) != 10
                    or spec[8] != "," or spec[7] not in "124"):
                raise InvalidVendorFormatError(spec)
            vendor.type_octets = int(spec[7])
            vendor.length_octets = (ord(spec[9]) - ord("0")) & 0xFF
        return vendor