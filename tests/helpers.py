"""
Test doubles for the daemon side of an exchange.
"""

import json
from typing import Dict, List, Optional


def make_response(status: int = 200, body=b'', headers: Optional[Dict[str, str]] = None,
                  reason: str = 'OK', chunks: Optional[List[bytes]] = None) -> bytes:
    """Build raw response bytes; pass ``chunks`` for a chunked body."""
    if not isinstance(body, bytes):
        body = json.dumps(body).encode('utf-8')

    lines = [f"HTTP/1.1 {status} {reason}"]
    headers = dict(headers or {})
    if chunks is not None:
        headers.setdefault('Transfer-Encoding', 'chunked')
    elif 'Content-Length' not in headers and status not in (204, 304):
        headers['Content-Length'] = str(len(body))
    for name, value in headers.items():
        lines.append(f"{name}: {value}")
    head = ('\r\n'.join(lines) + '\r\n\r\n').encode('iso-8859-1')

    if chunks is None:
        return head + body
    encoded = b''.join(b'%x\r\n%s\r\n' % (len(c), c) for c in chunks)
    return head + encoded + b'0\r\n\r\n'


def json_response(data, status: int = 200, reason: str = 'OK') -> bytes:
    return make_response(status, data, {'Content-Type': 'application/json'}, reason=reason)


def error_response(status: int, message: str, reason: str = 'Error') -> bytes:
    return json_response({'message': message}, status=status, reason=reason)


class ParsedRequest:
    """Request bytes captured from a client, split into its parts."""

    def __init__(self, raw: bytes):
        head, _, self.body = raw.partition(b'\r\n\r\n')
        lines = head.decode('iso-8859-1').split('\r\n')
        self.request_line = lines[0]
        self.method, self.target, self.version = self.request_line.split(' ')
        self.path, _, self.query = self.target.partition('?')
        self.header_lines = lines[1:]
        self.headers = dict(line.split(': ', 1) for line in lines[1:])

    @property
    def params(self) -> Dict[str, str]:
        from urllib.parse import parse_qsl
        return dict(parse_qsl(self.query, keep_blank_values=True))

    def json(self):
        return json.loads(self.body.decode('utf-8'))


class FakeConnection:
    """
    In-memory connection replaying scripted daemon bytes.

    ``max_recv`` caps how many bytes a single recv returns so partial reads
    get exercised.
    """

    def __init__(self, data: bytes = b'', max_recv: Optional[int] = None,
                 send_error: Optional[Exception] = None):
        self.data = data
        self.pos = 0
        self.max_recv = max_recv
        self.send_error = send_error
        self.sent = b''
        self.send_calls = 0
        self.recv_calls = 0
        self.opened = False
        self.closed = False

    def __enter__(self):
        self.opened = True
        return self

    def __exit__(self, exc_type, exc, tb):
        self.closed = True

    def sendall(self, data: bytes):
        self.send_calls += 1
        if self.send_error is not None:
            raise self.send_error
        self.sent += data

    def recv(self, size: int) -> bytes:
        self.recv_calls += 1
        if self.max_recv is not None:
            size = min(size, self.max_recv)
        chunk = self.data[self.pos:self.pos + size]
        self.pos += len(chunk)
        return chunk

    @property
    def remaining(self) -> bytes:
        return self.data[self.pos:]


class RecordingFactory:
    """Connection factory handing out one FakeConnection per scripted response."""

    def __init__(self, *responses: bytes, max_recv: Optional[int] = None):
        self.responses = list(responses)
        self.max_recv = max_recv
        self.connections: List[FakeConnection] = []

    def __call__(self) -> FakeConnection:
        if not self.responses:
            raise AssertionError("Unexpected extra request")
        conn = FakeConnection(self.responses.pop(0), max_recv=self.max_recv)
        self.connections.append(conn)
        return conn

    def queue(self, *responses: bytes):
        self.responses.extend(responses)

    @property
    def requests(self) -> List[ParsedRequest]:
        return [ParsedRequest(conn.sent) for conn in self.connections]

    @property
    def last(self) -> ParsedRequest:
        return self.requests[-1]
