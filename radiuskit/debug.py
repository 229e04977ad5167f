"""Human-readable dumps of RADIUS packets for debugging."""

from __future__ import annotations

import io
from dataclasses import dataclass
from datetime import datetime, timezone
from ipaddress import IPv4Address, IPv6Address
from typing import TextIO

from .attribute import user_password
from .code import code_name
from .dictionary.helpers import attribute_by_oid, values_by_attribute
from .dictionary.types import Attribute, AttributeType, Dictionary, ENCRYPT_USER_PASSWORD
from .packet import Packet

_ESCAPES = {
    0x07: "\\a",
    0x08: "\\b",
    0x0C: "\\f",
    0x0A: "\\n",
    0x0D: "\\r",
    0x09: "\\t",
    0x0B: "\\v",
    0x22: '\\"',
    0x5C: "\\\\",
}


@dataclass
class Config:
    """Settings for dumping packets."""

    dictionary: Dictionary


def _quote(data: bytes) -> str:
    parts = ['"']
    for ch in bytes(data).decode("utf-8", errors="surrogateescape"):
        cp = ord(ch)
        if 0xDC80 <= cp <= 0xDCFF:
            parts.append(f"\\x{cp - 0xDC00:02x}")
        elif cp in _ESCAPES:
            parts.append(_ESCAPES[cp])
        elif ch.isprintable():
            parts.append(ch)
        elif cp < 0x20 or cp == 0x7F:
            parts.append(f"\\x{cp:02x}")
        elif cp < 0x10000:
            parts.append(f"\\u{cp:04x}")
        else:
            parts.append(f"\\U{cp:08x}")
    parts.append('"')
    return "".join(parts)


def _format_ip(value: bytes) -> str:
    if len(value) == 4:
        return str(IPv4Address(value))
    address = IPv6Address(value)
    if address.ipv4_mapped is not None:
        return str(address.ipv4_mapped)
    return str(address)


def _format_value(config: Config, packet: Packet, definition: Attribute, value: bytes) -> str:
    kind = definition.type
    if kind in (AttributeType.STRING, AttributeType.OCTETS):
        if definition.flag_encrypt == ENCRYPT_USER_PASSWORD:
            try:
                return _quote(user_password(value, packet.secret, packet.authenticator))
            except ValueError:
                pass
        return _quote(value)

    if kind == AttributeType.DATE and len(value) == 4:
        moment = datetime.fromtimestamp(int.from_bytes(value, "big"), tz=timezone.utc)
        return moment.strftime("%Y-%m-%dT%H:%M:%SZ")

    if kind == AttributeType.INTEGER:
        if len(value) == 4:
            number = int.from_bytes(value, "big")
            names = sorted(
                v.name
                for v in values_by_attribute(config.dictionary.values, definition.name)
                if v.number == number
            )
            return " / ".join(names) if names else str(number)
        if len(value) == 8:
            number = int.from_bytes(value, "big")
            if number >= 1 << 63:
                number -= 1 << 64
            return str(number)
        return ""

    if kind in (AttributeType.IPADDR, AttributeType.IPV6ADDR) and len(value) in (4, 16):
        return _format_ip(value)

    if kind == AttributeType.IFID and len(value) == 8:
        return value.hex(":")

    return ""


def _dump_attributes(w: TextIO, config: Config, packet: Packet) -> None:
    for attr_type, values in sorted(packet.attributes.items()):
        for value in values:
            definition = attribute_by_oid(config.dictionary.attributes, (attr_type,))
            if definition is not None:
                name = definition.name
                text = _format_value(config, packet, definition, bytes(value))
            else:
                name = f"#{attr_type}"
                text = ""
            if not text:
                text = "0x" + bytes(value).hex()
            w.write(f"  {name} = {text}\n")


def dump(w: TextIO, config: Config, packet: Packet) -> None:
    """Write a description of ``packet`` and its attributes to ``w``."""
    w.write(f"{code_name(packet.code)} Id {packet.identifier}\n")
    _dump_attributes(w, config, packet)


def dump_string(config: Config, packet: Packet) -> str:
    """Return the description written by :func:`dump`, without the final newline."""
    buffer = io.StringIO()
    dump(buffer, config, packet)
    return buffer.getvalue()[:-1]