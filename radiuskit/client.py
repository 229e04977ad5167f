"""A RADIUS client that exchanges packets with a server over UDP."""

from __future__ import annotations

import contextlib
import socket
import time
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from .errors import NonAuthenticResponseError
from .packet import MAX_PACKET_LENGTH, Packet, is_authentic_response, parse

_FAMILIES = {
    "udp": socket.AF_UNSPEC,
    "udp4": socket.AF_INET,
    "udp6": socket.AF_INET6,
}


def _split_host_port(addr: Union[str, Tuple[str, int]]) -> Tuple[str, int]:
    if isinstance(addr, tuple):
        host, port = addr
        return host, int(port)
    if addr.startswith("["):
        end = addr.find("]")
        if end < 0 or addr[end + 1:end + 2] != ":":
            raise ValueError(f"invalid address {addr!r}")
        host, port_text = addr[1:end], addr[end + 2:]
    else:
        if ":" not in addr:
            raise ValueError(f"missing port in address {addr!r}")
        host, port_text = addr.rsplit(":", 1)
        if ":" in host:
            raise ValueError(f"too many colons in address {addr!r}")
    try:
        return host, int(port_text)
    except ValueError:
        raise ValueError(f"invalid port in address {addr!r}") from None


def _send(sock: socket.socket, wire: bytes) -> None:
    # Write failures are not fatal; a later read reports any real problem.
    with contextlib.suppress(OSError):
        sock.send(wire)


@dataclass
class Client:
    """Exchanges RADIUS packets with a server.

    ``retry`` is the resend interval in seconds (zero or less disables it).
    ``max_packet_errors`` is how many invalid or non-authentic replies are
    tolerated before the last error is raised; zero drops them all.
    """

    net: str = "udp"
    retry: float = 0.0
    max_packet_errors: int = 0
    insecure_skip_verify: bool = False

    def exchange(self, packet: Packet, addr, timeout: Optional[float] = None) -> Packet:
        """Send ``packet`` to ``addr`` ("host:port") and wait for the reply.

        Raises TimeoutError once ``timeout`` seconds have passed without an
        acceptable reply; ``None`` waits indefinitely.
        """
        wire = packet.encode()

        network = self.net or "udp"
        if network not in _FAMILIES:
            raise ValueError(f"unsupported network {network!r}")

        start = time.monotonic()
        deadline = None if timeout is None else start + timeout
        if deadline is not None and timeout <= 0:
            raise TimeoutError("radius: exchange timed out")

        host, port = _split_host_port(addr)
        family, socktype, proto, _, sockaddr = socket.getaddrinfo(
            host, port, _FAMILIES[network], socket.SOCK_DGRAM
        )[0]

        with socket.socket(family, socktype, proto) as sock:
            sock.connect(sockaddr)
            _send(sock, wire)
            return self._await_reply(sock, wire, packet.secret, deadline)

    def _await_reply(self, sock: socket.socket, wire: bytes, secret: bytes,
                     deadline: Optional[float]) -> Packet:
        next_retry = time.monotonic() + self.retry if self.retry > 0 else None
        error_count = 0

        while True:
            now = time.monotonic()
            if deadline is not None and now >= deadline:
                raise TimeoutError("radius: exchange timed out")
            if next_retry is not None and now >= next_retry:
                _send(sock, wire)
                next_retry = now + self.retry

            waits = [t - now for t in (deadline, next_retry) if t is not None]
            sock.settimeout(max(min(waits), 1e-4) if waits else None)
            try:
                incoming = sock.recv(MAX_PACKET_LENGTH)
            except socket.timeout:
                continue

            try:
                received = parse(incoming, secret)
            except ValueError:
                error_count += 1
                if 0 < self.max_packet_errors <= error_count:
                    raise
                continue

            if not self.insecure_skip_verify and not is_authentic_response(
                incoming, wire, secret
            ):
                error_count += 1
                if 0 < self.max_packet_errors <= error_count:
                    raise NonAuthenticResponseError()
                continue

            return received


DEFAULT_CLIENT = Client(retry=1.0, max_packet_errors=10)
"""The client used by :func:`exchange`."""


def exchange(packet: Packet, addr, timeout: Optional[float] = None) -> Packet:
    """Exchange ``packet`` with the server at ``addr`` using DEFAULT_CLIENT."""
    return DEFAULT_CLIENT.exchange(packet, addr, timeout)