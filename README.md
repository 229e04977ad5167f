# radiuskit

A small, dependency-free toolkit for working with RADIUS (RFC 2865, RFC 2866
and related RFCs):

- encoding and decoding of individual attribute values (integers, strings,
  IPv4/IPv6 addresses, interface ids, dates, vendor-specific and TLV
  attributes, IPv6 prefixes);
- RFC 2865 `User-Password` and RFC 2868 `Tunnel-Password` hiding;
- a multi-valued attribute container with a deterministic wire encoding;
- packet encoding, parsing and authenticator checks;
- a UDP client with retransmission and response verification;
- a parser for FreeRADIUS dictionary files, with merge and lookup helpers;
- a human-readable packet dump driven by a dictionary.

## Installation

```
pip install radiuskit
```

Python 3.10 or newer is required. There are no runtime dependencies.

## Attribute values

The functions in `radiuskit.attribute` turn Python values into wire-encoded
attribute values (`bytes`) and back. Invalid input raises `ValueError`.

```python
from radiuskit.attribute import integer, new_integer, new_string, string

raw = new_integer(1812)
assert integer(raw) == 1812

name = new_string("alice")
assert string(name) == "alice"
```

Addresses decode to `ipaddress.IPv4Address` / `IPv6Address`, dates to an
aware UTC `datetime`, and IPv6 prefixes to `ipaddress.IPv6Network`.

Password hiding uses the shared secret and the request authenticator:

```python
from radiuskit.attribute import new_user_password, user_password

secret = b"secret"
authenticator = bytes(16)

hidden = new_user_password(b"password", secret, authenticator)
assert user_password(hidden, secret, authenticator) == b"password"
```

`new_tunnel_password(password, salt, secret, request_authenticator)` and
`tunnel_password(a, secret, request_authenticator)` do the same for
RFC 2868; the salt is two bytes with the high bit of the first set, and
`tunnel_password` returns `(password, salt)`.

## Attribute sets

`radiuskit.attributes.Attributes` keeps every value for each attribute type,
in insertion order, and encodes them sorted by type. Types outside 1–255 are
kept but never encoded.

```python
from radiuskit.attributes import Attributes, parse_attributes

attrs = Attributes()
attrs.add(1, b"alice")
attrs.add(3, b"C")
wire = attrs.encode()

decoded = parse_attributes(wire)
assert decoded.get(1) == b"alice"
```

`get` returns `None` when a type is absent; `lookup` raises
`radiuskit.errors.NoAttributeError` instead. `set` replaces all values of a
type and `delete` removes them.

## Packets

`radiuskit.packet.Packet` is a dataclass with `code`, `identifier`,
`authenticator`, `secret` and `attributes`. `new(code, secret)` fills in a
random identifier and authenticator; `parse(b, secret)` decodes wire bytes;
`Packet.encode()` computes the authenticator the packet code calls for and
raises `ValueError` for unknown codes or oversized packets;
`Packet.response(code)` starts a reply. `is_authentic_response` and
`is_authentic_request` check authenticators of raw packets.

Packet codes are the `radiuskit.code.Code` enum; `code_name` gives the
protocol name (`"Access-Request"`, …) or `Code(N)` for unknown numbers.

## The client

`radiuskit.client.Client` sends a packet over UDP (`net` may be `"udp"`,
`"udp4"` or `"udp6"`), resends it every `retry` seconds, and returns the first
reply that parses and, unless `insecure_skip_verify` is set, is authentic.
After `max_packet_errors` bad replies the last error is raised
(`ValueError` for a malformed packet, `NonAuthenticResponseError` for a bad
authenticator); zero means bad replies are always dropped. `TimeoutError` is
raised when `timeout` runs out.

```python
from radiuskit.client import exchange
from radiuskit.code import Code, code_name
from radiuskit.packet import new

secret = b"secret"
request = new(Code.ACCESS_REQUEST, secret)
reply = exchange(request, "127.0.0.1:1812", timeout=5.0)
print(code_name(reply.code))
```

The module-level `exchange` uses `DEFAULT_CLIENT`, which retries every second
and gives up after ten bad replies.

## Dictionaries

`radiuskit.dictionary.parser.Parser` reads FreeRADIUS dictionary files
(`ATTRIBUTE`, `VALUE`, `VENDOR`, `BEGIN-VENDOR`/`END-VENDOR`, `$INCLUDE`),
opening them through a `FileSystemOpener` that resolves relative names
against its `root`. Problems are raised as
`radiuskit.dictionary.errors.ParseError`, carrying the file name, line number
and the underlying error in `inner`. With `ignore_identical_attributes=True`
an attribute defined twice identically is accepted.

```python
from radiuskit.dictionary.parser import FileSystemOpener, Parser, parse_oid

parser = Parser(opener=FileSystemOpener(root="dictionaries"))
dictionary = parser.parse_file("dictionary")

assert parse_oid("26.9") == (26, 9)
```

The model lives in `radiuskit.dictionary.types` (`Dictionary`, `Attribute`,
`Value`, `Vendor`, `AttributeType`, plus `sort_attributes`, `sort_values`
and `sort_vendors`). `radiuskit.dictionary.helpers.merge` combines two
dictionaries, raising `DictionaryError` on conflicting attributes or vendors,
and `attribute_by_name`, `attribute_by_oid`, `values_by_attribute`,
`vendor_by_name` and `vendor_by_number` search them.

## Dumping packets

`radiuskit.debug.dump_string(Config(dictionary=...), packet)` renders a
packet using a dictionary, naming attributes, decoding values by their
declared type, naming integer values and revealing hidden `User-Password`
values; `dump` writes the same text to a file-like object. Unknown
attributes are shown as `#N = 0x…`.

```
Access-Request Id 33
  User-Name = "Tim"
  NAS-IP-Address = 10.0.2.5
```

## What it does not do

- There is no RADIUS server; the package only sends requests and checks
  replies.
- There is no command-line program.
- No dictionary files are bundled; `debug` needs a `Dictionary` you parse
  yourself.
- There are no ready-made per-attribute accessors (such as a `User-Name`
  getter); attributes are read and written by type number with the
  functions in `radiuskit.attribute`.

## Running the tests

```
pip install -e ".[test]"
pytest
```