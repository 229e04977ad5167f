"""RADIUS packet codes."""

from __future__ import annotations

from enum import IntEnum


class Code(IntEnum):
    """Standard RADIUS packet codes."""

    ACCESS_REQUEST = 1
    ACCESS_ACCEPT = 2
    ACCESS_REJECT = 3
    ACCOUNTING_REQUEST = 4
    ACCOUNTING_RESPONSE = 5
    ACCESS_CHALLENGE = 11
    STATUS_SERVER = 12
    STATUS_CLIENT = 13
    DISCONNECT_REQUEST = 40
    DISCONNECT_ACK = 41
    DISCONNECT_NAK = 42
    COA_REQUEST = 43
    COA_ACK = 44
    COA_NAK = 45
    RESERVED = 255

    def __str__(self) -> str:
        return code_name(self)

    def __format__(self, spec: str) -> str:
        return format(str(self), spec)


_NAMES = {
    1: "Access-Request",
    2: "Access-Accept",
    3: "Access-Reject",
    4: "Accounting-Request",
    5: "Accounting-Response",
    11: "Access-Challenge",
    12: "Status-Server",
    13: "Status-Client",
    40: "Disconnect-Request",
    41: "Disconnect-ACK",
    42: "Disconnect-NAK",
    43: "CoA-Request",
    44: "CoA-ACK",
    45: "CoA-NAK",
    255: "Reserved",
}


def code_name(value: int) -> str:
    """Return the protocol name of a packet code, or ``Code(N)`` if unknown."""
    number = int(value)
    return _NAMES.get(number, f"Code({number})")