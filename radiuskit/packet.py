"""RADIUS packets and their wire encoding."""

from __future__ import annotations

import hashlib
import hmac
import secrets
from dataclasses import dataclass, field
from typing import Union

from .attributes import Attributes, parse_attributes
from .code import Code

MAX_PACKET_LENGTH = 4095
"""The maximum wire length of a RADIUS packet."""

_HEADER_LENGTH = 20
_NUL_AUTHENTICATOR = bytes(16)

_REQUEST_AUTHENTICATOR_CODES = frozenset({Code.ACCESS_REQUEST, Code.STATUS_SERVER})
_ZERO_AUTHENTICATOR_CODES = frozenset(
    {Code.ACCOUNTING_REQUEST, Code.DISCONNECT_REQUEST, Code.COA_REQUEST}
)
_RESPONSE_AUTHENTICATOR_CODES = frozenset(
    {
        Code.ACCESS_ACCEPT,
        Code.ACCESS_REJECT,
        Code.ACCOUNTING_RESPONSE,
        Code.ACCESS_CHALLENGE,
        Code.DISCONNECT_ACK,
        Code.DISCONNECT_NAK,
        Code.COA_ACK,
        Code.COA_NAK,
    }
)


def _as_code(value: int) -> Union[Code, int]:
    try:
        return Code(value)
    except ValueError:
        return int(value)


@dataclass
class Packet:
    """A RADIUS packet."""

    code: Union[Code, int]
    identifier: int = 0
    authenticator: bytes = bytes(16)
    secret: bytes = b""
    attributes: Attributes = field(default_factory=Attributes)

    def __post_init__(self) -> None:
        self.code = _as_code(self.code)
        if not 0 <= self.identifier <= 255:
            raise ValueError("identifier out of range")
        self.authenticator = bytes(self.authenticator)
        if len(self.authenticator) != 16:
            raise ValueError("authenticator must be 16 bytes")
        self.secret = bytes(self.secret)

    def response(self, code: Union[Code, int]) -> "Packet":
        """Return a new packet sharing this one's identifier, secret and authenticator."""
        return Packet(
            code=code,
            identifier=self.identifier,
            authenticator=self.authenticator,
            secret=self.secret,
        )

    def encode(self) -> bytes:
        """Encode the packet to wire format; raises ValueError if it cannot be."""
        try:
            attributes_size = self.attributes.wire_size()
        except ValueError:
            raise ValueError("invalid packet attribute length") from None
        size = _HEADER_LENGTH + attributes_size
        if size > MAX_PACKET_LENGTH:
            raise ValueError("encoded packet is too long")

        code = int(self.code)
        header = bytes([code & 0xFF, self.identifier]) + size.to_bytes(2, "big")
        body = self.attributes.encode()

        if code in _REQUEST_AUTHENTICATOR_CODES:
            authenticator = self.authenticator
        elif code in _ZERO_AUTHENTICATOR_CODES or code in _RESPONSE_AUTHENTICATOR_CODES:
            basis = _NUL_AUTHENTICATOR if code in _ZERO_AUTHENTICATOR_CODES else self.authenticator
            authenticator = hashlib.md5(header + basis + body + self.secret).digest()
        else:
            raise ValueError("radius: unknown Packet Code")

        return header + authenticator + body


def new(code: Union[Code, int], secret: bytes) -> Packet:
    """Create a packet with a random identifier and authenticator."""
    random = secrets.token_bytes(17)
    return Packet(code=code, identifier=random[0], authenticator=random[1:], secret=secret)


def parse(b: bytes, secret: bytes) -> Packet:
    """Parse a wire-encoded packet; raises ValueError if it is malformed."""
    b = bytes(b)
    if len(b) < _HEADER_LENGTH:
        raise ValueError("radius: packet not at least 20 bytes long")
    length = int.from_bytes(b[2:4], "big")
    if length < _HEADER_LENGTH or length > MAX_PACKET_LENGTH or len(b) != length:
        raise ValueError("radius: invalid packet length")

    attributes = parse_attributes(b[_HEADER_LENGTH:])
    return Packet(
        code=b[0],
        identifier=b[1],
        authenticator=b[4:20],
        secret=secret,
        attributes=attributes,
    )


def is_authentic_response(response: bytes, request: bytes, secret: bytes) -> bool:
    """Return whether ``response`` is an authentic response to ``request``."""
    if len(response) < _HEADER_LENGTH or len(request) < _HEADER_LENGTH or not secret:
        return False
    digest = hashlib.md5(
        bytes(response[:4]) + bytes(request[4:20]) + bytes(response[20:]) + bytes(secret)
    ).digest()
    return hmac.compare_digest(digest, bytes(response[4:20]))


def is_authentic_request(request: bytes, secret: bytes) -> bool:
    """Return whether ``request`` is an authentic request under ``secret``."""
    if len(request) < _HEADER_LENGTH or not secret:
        return False
    code = request[0]
    if code in _REQUEST_AUTHENTICATOR_CODES:
        return True
    if code in _ZERO_AUTHENTICATOR_CODES:
        digest = hashlib.md5(
            bytes(request[:4]) + _NUL_AUTHENTICATOR + bytes(request[20:]) + bytes(secret)
        ).digest()
        return hmac.compare_digest(digest, bytes(request[4:20]))
    return False