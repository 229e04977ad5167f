"""Encoding and decoding of individual RADIUS attribute values."""

from __future__ import annotations

import hashlib
import ipaddress
import math
from datetime import datetime, timezone
from ipaddress import IPv4Address, IPv6Address, IPv6Network

_MAX_UINT32 = 0xFFFFFFFF
_MAX_UINT64 = 0xFFFFFFFFFFFFFFFF


def _xor(data: bytes, key: bytes) -> bytes:
    return bytes(x ^ y for x, y in zip(data, key))


def _blocks(data: bytes):
    for start in range(0, len(data), 16):
        yield data[start:start + 16]


def _to_ip(addr) -> IPv4Address | IPv6Address:
    if isinstance(addr, (IPv4Address, IPv6Address)):
        return addr
    if isinstance(addr, (bytes, bytearray)):
        return ipaddress.ip_address(bytes(addr))
    return ipaddress.ip_address(addr)


def integer(a: bytes) -> int:
    """Decode a 4-byte big-endian unsigned integer."""
    if len(a) != 4:
        raise ValueError("invalid length")
    return int.from_bytes(a, "big")


def new_integer(i: int) -> bytes:
    """Encode an unsigned 32-bit integer."""
    if not 0 <= i <= _MAX_UINT32:
        raise ValueError("integer out of range")
    return i.to_bytes(4, "big")


def string(a: bytes) -> str:
    """Decode an attribute as text."""
    return bytes(a).decode("utf-8", errors="surrogateescape")


def new_string(s: str) -> bytes:
    """Encode text as an attribute; at most 253 bytes."""
    data = s.encode("utf-8", errors="surrogateescape")
    if len(data) > 253:
        raise ValueError("string too long")
    return data


def new_bytes(b: bytes) -> bytes:
    """Copy raw bytes into an attribute; at most 253 bytes."""
    if len(b) > 253:
        raise ValueError("value too long")
    return bytes(b)


def ip_addr(a: bytes) -> IPv4Address:
    """Decode a 4-byte IPv4 address."""
    if len(a) != 4:
        raise ValueError("invalid length")
    return IPv4Address(bytes(a))


def new_ip_addr(addr) -> bytes:
    """Encode an IPv4 address (IPv4-mapped IPv6 addresses are accepted)."""
    try:
        ip = _to_ip(addr)
    except ValueError as exc:
        raise ValueError("invalid IPv4 address") from exc
    if isinstance(ip, IPv6Address):
        if ip.ipv4_mapped is None:
            raise ValueError("invalid IPv4 address")
        ip = ip.ipv4_mapped
    return ip.packed


def ipv6_addr(a: bytes) -> IPv6Address:
    """Decode a 16-byte IPv6 address."""
    if len(a) != 16:
        raise ValueError("invalid length")
    return IPv6Address(bytes(a))


def new_ipv6_addr(addr) -> bytes:
    """Encode an IP address in 16-byte form; IPv4 addresses are mapped."""
    try:
        ip = _to_ip(addr)
    except ValueError as exc:
        raise ValueError("invalid IPv6 address") from exc
    if isinstance(ip, IPv4Address):
        return bytes(10) + b"\xff\xff" + ip.packed
    return ip.packed


def ifid(a: bytes) -> bytes:
    """Decode an 8-byte interface identifier."""
    if len(a) != 8:
        raise ValueError("invalid length")
    return bytes(a)


def new_ifid(addr: bytes) -> bytes:
    """Encode an 8-byte interface identifier."""
    if len(addr) != 8:
        raise ValueError("invalid length")
    return bytes(addr)


def user_password(a: bytes, secret: bytes, request_authenticator: bytes) -> bytes:
    """Decrypt an RFC 2865 User-Password attribute."""
    a = bytes(a)
    if len(a) < 16 or len(a) > 128:
        raise ValueError(f"invalid attribute length ({len(a)})")
    if not secret:
        raise ValueError("empty secret")
    if len(request_authenticator) != 16:
        raise ValueError(
            f"invalid requestAuthenticator length ({len(request_authenticator)})"
        )
    if len(a) % 16:
        raise ValueError(f"invalid attribute length ({len(a)})")

    secret = bytes(secret)
    previous = bytes(request_authenticator)
    plaintext = bytearray()
    for block in _blocks(a):
        plaintext += _xor(block, hashlib.md5(secret + previous).digest())
        previous = block
    return bytes(plaintext).split(b"\x00", 1)[0]


def new_user_password(plaintext: bytes, secret: bytes, request_authenticator: bytes) -> bytes:
    """Encrypt plaintext as an RFC 2865 User-Password attribute."""
    if len(plaintext) > 128:
        raise ValueError("plaintext longer than 128 characters")
    if not secret:
        raise ValueError("empty secret")
    if len(request_authenticator) != 16:
        raise ValueError("requestAuthenticator not 16-bytes")

    chunks = max(1, math.ceil(len(plaintext) / 16))
    padded = bytes(plaintext).ljust(chunks * 16, b"\x00")

    secret = bytes(secret)
    previous = bytes(request_authenticator)
    encrypted = bytearray()
    for block in _blocks(padded):
        previous = _xor(block, hashlib.md5(secret + previous).digest())
        encrypted += previous
    return bytes(encrypted)


def date(a: bytes) -> datetime:
    """Decode a 4-byte UNIX timestamp as an aware UTC datetime."""
    if len(a) != 4:
        raise ValueError("invalid length")
    return datetime.fromtimestamp(int.from_bytes(a, "big"), tz=timezone.utc)


def new_date(t: datetime) -> bytes:
    """Encode a datetime as a 4-byte UNIX timestamp."""
    unix = math.floor(t.timestamp())
    if unix > _MAX_UINT32 or unix < 0:
        raise ValueError("time out of range")
    return unix.to_bytes(4, "big")


def vendor_specific(a: bytes) -> tuple[int, bytes]:
    """Split a Vendor-Specific attribute into (vendor ID, value)."""
    if len(a) < 5:
        raise ValueError("invalid length")
    return int.from_bytes(a[:4], "big"), bytes(a[4:])


def new_vendor_specific(vendor_id: int, value: bytes) -> bytes:
    """Build a Vendor-Specific attribute."""
    if len(value) > 249:
        raise ValueError("value too long")
    if not 0 <= vendor_id <= _MAX_UINT32:
        raise ValueError("vendor ID out of range")
    return vendor_id.to_bytes(4, "big") + bytes(value)


def integer64(a: bytes) -> int:
    """Decode an 8-byte big-endian unsigned integer."""
    if len(a) != 8:
        raise ValueError("invalid length")
    return int.from_bytes(a, "big")


def new_integer64(i: int) -> bytes:
    """Encode an unsigned 64-bit integer."""
    if not 0 <= i <= _MAX_UINT64:
        raise ValueError("integer out of range")
    return i.to_bytes(8, "big")


def tlv(a: bytes) -> tuple[int, bytes]:
    """Split a Type-Length-Value attribute into (type, value)."""
    if len(a) < 3 or len(a) > 255 or a[1] != len(a):
        raise ValueError("invalid length")
    return a[0], bytes(a[2:])


def new_tlv(tlv_type: int, tlv_value: bytes) -> bytes:
    """Build a Type-Length-Value attribute."""
    if len(tlv_value) < 1 or len(tlv_value) > 253:
        raise ValueError("invalid value length")
    return bytes([tlv_type & 0xFF, 2 + len(tlv_value)]) + bytes(tlv_value)


def _tunnel_keystream_xor(data: bytes, salt: bytes, secret: bytes,
                          request_authenticator: bytes, encrypting: bool) -> bytes:
    out = bytearray()
    previous = request_authenticator + salt
    for block in _blocks(data):
        result = _xor(block, hashlib.md5(secret + previous).digest())
        out += result
        previous = result if encrypting else block
    return bytes(out)


def new_tunnel_password(password: bytes, salt: bytes, secret: bytes,
                        request_authenticator: bytes) -> bytes:
    """Encrypt an RFC 2868 Tunnel-Password; the caller adds any tag."""
    if len(password) > 249:
        raise ValueError("invalid password length")
    if len(salt) != 2:
        raise ValueError("invalid salt length")
    if salt[0] & 0x80 != 0x80:
        raise ValueError("invalid salt")
    if not secret:
        raise ValueError("empty secret")
    if len(request_authenticator) != 16:
        raise ValueError("invalid requestAuthenticator length")

    chunks = max(1, math.ceil((1 + len(password)) / 16))
    plaintext = (bytes([len(password)]) + bytes(password)).ljust(chunks * 16, b"\x00")
    salt = bytes(salt)
    return salt + _tunnel_keystream_xor(
        plaintext, salt, bytes(secret), bytes(request_authenticator), encrypting=True
    )


def tunnel_password(a: bytes, secret: bytes,
                    request_authenticator: bytes) -> tuple[bytes, bytes]:
    """Decrypt an untagged RFC 2868 Tunnel-Password into (password, salt)."""
    if len(a) > 252 or len(a) < 18 or (len(a) - 2) % 16 != 0:
        raise ValueError("invalid length")
    if not secret:
        raise ValueError("empty secret")
    if len(request_authenticator) != 16:
        raise ValueError("invalid requestAuthenticator length")
    if a[0] & 0x80 != 0x80:
        raise ValueError("invalid salt")

    salt = bytes(a[:2])
    plaintext = _tunnel_keystream_xor(
        bytes(a[2:]), salt, bytes(secret), bytes(request_authenticator), encrypting=False
    )
    length = plaintext[0]
    if length > len(plaintext) - 1:
        raise ValueError("invalid password length")
    return plaintext[1:1 + length], salt


def new_ipv6_prefix(prefix) -> bytes:
    """Encode an IPv6 network as a Framed-IPv6-Prefix style attribute."""
    if prefix is None:
        raise ValueError("nil prefix")
    if isinstance(prefix, str):
        prefix = ipaddress.ip_network(prefix, strict=False)
    if not isinstance(prefix, IPv6Network):
        raise ValueError("IP is not IPv6")

    ones = prefix.prefixlen
    data = bytearray(prefix.network_address.packed[:(ones + 7) // 8])
    if ones % 8:
        data[-1] &= (0xFF << (8 - ones % 8)) & 0xFF
    return bytes([0, ones]) + bytes(data)


def ipv6_prefix(a: bytes) -> IPv6Network:
    """Decode an IPv6 prefix attribute into a network."""
    if len(a) < 2 or len(a) > 18:
        raise ValueError("invalid length")
    prefix_length = a[1]
    if (len(a) - 2) * 8 < prefix_length:
        raise ValueError("invalid prefix length")
    address = bytes(a[2:]).ljust(16, b"\x00")
    return IPv6Network((IPv6Address(address), prefix_length), strict=False)