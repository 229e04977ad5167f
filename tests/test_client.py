import socket
import threading

import pytest

from radiuskit.client import Client, exchange
from radiuskit.code import Code
from radiuskit.errors import NonAuthenticResponseError
from radiuskit.packet import Packet, new, parse


class _Server:
    def __init__(self, handler, secret):
        self.handler = handler
        self.secret = secret
        self.sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        self.sock.bind(("127.0.0.1", 0))
        self.sock.settimeout(0.05)
        self.addr = "127.0.0.1:%d" % self.sock.getsockname()[1]
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()

    def _run(self):
        while not self._stop.is_set():
            try:
                data, peer = self.sock.recvfrom(4096)
            except socket.timeout:
                continue
            except OSError:
                break
            try:
                request = parse(data, self.secret)
            except ValueError:
                continue
            reply = self.handler(request)
            if reply is not None:
                self.sock.sendto(reply, peer)

    def close(self):
        self._stop.set()
        self._thread.join()
        self.sock.close()


@pytest.fixture
def start_server():
    servers = []

    def factory(handler, secret):
        server = _Server(handler, secret)
        servers.append(server)
        return server

    yield factory
    for server in servers:
        server.close()


def test_exchange_expired(start_server):
    server = start_server(lambda request: None, b"secret")
    client = Client()
    with pytest.raises(TimeoutError):
        client.exchange(new(Code.ACCESS_REQUEST, b"secret"), server.addr, timeout=-3600)


def test_exchange_times_out_without_reply(start_server):
    secret = b"secret"
    server = start_server(lambda request: None, secret)
    client = Client(retry=0.005)
    with pytest.raises(TimeoutError):
        client.exchange(new(Code.ACCESS_REQUEST, secret), server.addr, timeout=0.1)


def test_exchange_retry(start_server):
    secret = b"secret"
    attempts = []

    def handler(request):
        attempts.append(request.identifier)
        if len(attempts) == 4:
            return request.response(Code.ACCESS_ACCEPT).encode()
        return None

    server = start_server(handler, secret)
    client = Client(retry=0.05)
    response = client.exchange(new(Code.ACCESS_REQUEST, secret), server.addr, timeout=5)
    assert response.code == Code.ACCESS_ACCEPT
    assert len(attempts) == 4


def test_exchange_invalid_packet(start_server):
    secret = b"secret"
    server = None

    def handler(request):
        return b"AAAA"

    server = start_server(handler, secret)
    client = Client(retry=0.005, max_packet_errors=2)
    with pytest.raises(ValueError, match="packet not at least 20 bytes long"):
        client.exchange(new(Code.ACCESS_REQUEST, secret), server.addr, timeout=5)


def _forged_accept(request):
    reply = request.response(Code.ACCESS_ACCEPT)
    reply.authenticator = bytes(16)
    return reply.encode()


def test_exchange_nonauthentic_packet(start_server):
    secret = b"secret"
    server = start_server(_forged_accept, secret)
    client = Client(retry=0.005, max_packet_errors=2)
    with pytest.raises(NonAuthenticResponseError):
        client.exchange(new(Code.ACCESS_REQUEST, secret), server.addr, timeout=5)


def test_exchange_skip_verify_accepts_nonauthentic(start_server):
    secret = b"secret"
    server = start_server(_forged_accept, secret)
    client = Client(retry=0.005, insecure_skip_verify=True)
    request = new(Code.ACCESS_REQUEST, secret)
    response = client.exchange(request, server.addr, timeout=5)
    assert response.code == Code.ACCESS_ACCEPT
    assert response.identifier == request.identifier


def test_module_exchange_uses_default_client(start_server):
    secret = b"secret"

    def handler(request):
        reply = request.response(Code.ACCESS_REJECT)
        reply.attributes.add(18, b"denied")
        return reply.encode()

    server = start_server(handler, secret)
    response = exchange(new(Code.ACCESS_REQUEST, secret), server.addr, timeout=5)
    assert response.code == Code.ACCESS_REJECT
    assert response.attributes.get(18) == b"denied"


def test_exchange_encode_error_is_raised_first():
    packet = Packet(code=99, secret=b"secret")
    with pytest.raises(ValueError, match="unknown Packet Code"):
        Client().exchange(packet, "127.0.0.1:1812", timeout=1)


def test_exchange_rejects_unknown_network():
    client = Client(net="tcp")
    with pytest.raises(ValueError, match="unsupported network"):
        client.exchange(new(Code.ACCESS_REQUEST, b"secret"), "127.0.0.1:1812", timeout=1)


def test_exchange_rejects_address_without_port():
    with pytest.raises(ValueError, match="missing port"):
        Client().exchange(new(Code.ACCESS_REQUEST, b"secret"), "127.0.0.1", timeout=1)