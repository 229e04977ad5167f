import pytest

from radiuskit.attributes import Attributes
from radiuskit.code import Code
from radiuskit.packet import (
    MAX_PACKET_LENGTH,
    Packet,
    is_authentic_request,
    is_authentic_response,
    new,
    parse,
)

SECRET = b"secret"


def _request(code=Code.ACCESS_REQUEST):
    packet = new(code, SECRET)
    packet.attributes.add(1, b"user")
    packet.attributes.add(4, bytes([10, 0, 0, 1]))
    return packet


def test_new_fields():
    packet = new(Code.ACCESS_REQUEST, SECRET)
    assert packet.code is Code.ACCESS_REQUEST
    assert packet.secret == SECRET
    assert len(packet.authenticator) == 16
    assert 0 <= packet.identifier <= 255
    assert len(packet.attributes) == 0


def test_encode_access_request_header():
    packet = Packet(code=Code.ACCESS_REQUEST, identifier=7, authenticator=bytes(range(16)),
                    secret=SECRET)
    wire = packet.encode()
    assert wire[:4] == bytes([1, 7, 0, 20])
    assert wire[4:20] == bytes(range(16))
    assert len(wire) == 20


def test_encode_parse_round_trip():
    packet = _request()
    wire = packet.encode()
    assert int.from_bytes(wire[2:4], "big") == len(wire)
    parsed = parse(wire, SECRET)
    assert parsed.code is Code.ACCESS_REQUEST
    assert parsed.identifier == packet.identifier
    assert parsed.authenticator == packet.authenticator
    assert parsed.secret == SECRET
    assert parsed.attributes == packet.attributes


def test_accounting_request_is_authentic():
    wire = _request(Code.ACCOUNTING_REQUEST).encode()
    assert is_authentic_request(wire, SECRET) is True
    assert is_authentic_request(wire, b"other") is False


def test_tampered_accounting_request_is_not_authentic():
    wire = bytearray(_request(Code.ACCOUNTING_REQUEST).encode())
    wire[-1] ^= 0xFF
    assert is_authentic_request(bytes(wire), SECRET) is False


def test_access_request_always_authentic():
    wire = _request().encode()
    assert is_authentic_request(wire, SECRET) is True


@pytest.mark.parametrize(
    "request_bytes, secret",
    [
        (b"\x01" * 19, SECRET),
        (bytes([1]) + bytes(19), b""),
        (bytes([2]) + bytes(19), SECRET),
    ],
)
def test_is_authentic_request_rejects(request_bytes, secret):
    assert is_authentic_request(request_bytes, secret) is False


def test_response_is_authentic():
    request = _request()
    request_wire = request.encode()
    response = request.response(Code.ACCESS_ACCEPT)
    response.attributes.add(18, b"welcome")
    response_wire = response.encode()
    assert is_authentic_response(response_wire, request_wire, SECRET) is True
    assert is_authentic_response(response_wire, request_wire, b"other") is False


def test_response_with_wrong_authenticator_is_not_authentic():
    request = _request()
    request_wire = request.encode()
    response = request.response(Code.ACCESS_ACCEPT)
    response.authenticator = bytes(16)
    assert is_authentic_response(response.encode(), request_wire, SECRET) is False


def test_is_authentic_response_short_inputs():
    wire = _request().encode()
    assert is_authentic_response(wire[:10], wire, SECRET) is False
    assert is_authentic_response(wire, wire, b"") is False


def test_response_copies_request_fields():
    request = _request()
    response = request.response(Code.ACCESS_REJECT)
    assert response.code is Code.ACCESS_REJECT
    assert response.identifier == request.identifier
    assert response.authenticator == request.authenticator
    assert response.secret == request.secret
    assert len(response.attributes) == 0


def test_encode_unknown_code():
    packet = Packet(code=99, secret=SECRET)
    with pytest.raises(ValueError, match="unknown Packet Code"):
        packet.encode()


def test_encode_too_long():
    attributes = Attributes({1: [bytes(200)] * 21})
    packet = Packet(code=Code.ACCESS_REQUEST, secret=SECRET, attributes=attributes)
    with pytest.raises(ValueError, match="too long"):
        packet.encode()


def test_encode_oversized_attribute():
    packet = Packet(code=Code.ACCESS_REQUEST, secret=SECRET)
    packet.attributes.add(1, bytes(256))
    with pytest.raises(ValueError, match="invalid packet attribute length"):
        packet.encode()


def test_parse_short_packet():
    with pytest.raises(ValueError, match="packet not at least 20 bytes long"):
        parse(b"AAAA", SECRET)


def test_parse_length_mismatch():
    wire = _request().encode()
    with pytest.raises(ValueError, match="invalid packet length"):
        parse(wire + b"\x00", SECRET)


def test_parse_length_over_maximum():
    wire = bytes([1, 0]) + (MAX_PACKET_LENGTH + 1).to_bytes(2, "big") + bytes(16)
    with pytest.raises(ValueError, match="invalid packet length"):
        parse(wire, SECRET)


def test_parse_bad_attributes():
    wire = bytes([1, 0, 0, 21]) + bytes(16) + b"\x01"
    with pytest.raises(ValueError, match="short buffer"):
        parse(wire, SECRET)


def test_parse_keeps_unknown_code():
    wire = bytes([99, 3, 0, 20]) + bytes(16)
    packet = parse(wire, SECRET)
    assert packet.code == 99
    assert packet.identifier == 3


def test_packet_rejects_bad_authenticator():
    with pytest.raises(ValueError):
        Packet(code=Code.ACCESS_REQUEST, authenticator=b"short")