"""
HTTP/1.1 framing for the Docker socket
Request serialization, status line/header parsing and body decoding
"""

import json
import re
from typing import Any, Dict, Mapping, Optional
from urllib.parse import quote

from .exceptions import (
    ConnectionClosed,
    IncompleteBodyError,
    MissingLengthError,
    ProtocolError,
)

# Value sent in the Host header; the socket has no hostname
DAEMON_HOST = 'docker'

MAX_LINE = 65536
MAX_HEADERS = 100
CRLF = b'\r\n'

# ASCII only; str.isdigit() and int() also accept other Unicode digits
STATUS_CODE_RE = re.compile(r'[0-9]{3}')
DECIMAL_RE = re.compile(r'[0-9]+')
HEX_RE = re.compile(r'[0-9A-Fa-f]+')

# Characters left unescaped in the request path
PATH_SAFE = '/:@'


class HttpRequest:
    """Single request to the daemon, consumed once by write_request"""

    def __init__(self, method: str, path: str, query: Optional[Mapping[str, Any]] = None,
                 headers: Optional[Dict[str, str]] = None, body: bytes = b''):
        self.method = method.upper()
        self.path = path
        self.query = dict(query) if query else {}
        self.headers = dict(headers) if headers else {}
        self.body = body or b''

    def __repr__(self):
        return f"<HttpRequest: {self.method} {self.path}>"


class HttpResponse:
    """Fully read response from the daemon"""

    def __init__(self, status: int, headers: Dict[str, str], body: bytes = b'',
                 reason: str = ''):
        self.status = status
        self.headers = headers
        self.body = body
        self.reason = reason

    def __repr__(self):
        return f"<HttpResponse: {self.status} ({len(self.body)} bytes)>"

    def header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Case-insensitive header lookup"""
        return find_header(self.headers, name, default)

    @property
    def text(self) -> str:
        return self.body.decode('utf-8', errors='replace')

    def json(self) -> Any:
        """Decode body as JSON"""
        return json.loads(self.body.decode('utf-8'))


def find_header(headers: Mapping[str, str], name: str,
                default: Optional[str] = None) -> Optional[str]:
    """Look up a header by name ignoring case; last matching entry wins"""
    wanted = name.lower()
    found = default
    for key, value in headers.items():
        if key.lower() == wanted:
            found = value
    return found


def _has_header(headers: Mapping[str, str], name: str) -> bool:
    return find_header(headers, name) is not None


# ---------------------------------------------------------------------------
# Line Reader
# ---------------------------------------------------------------------------

class LineReader:
    """
    Reads CRLF-terminated lines and exact byte counts from a connection

    The connection only needs a ``recv(n)`` method returning ``b''`` at end
    of stream. Lines are read one byte at a time and bodies are read with
    exact counts, so no byte beyond what was asked for is ever consumed.
    """

    def __init__(self, conn):
        self.conn = conn

    def read_line(self) -> str:
        """
        Read one line and strip its CRLF terminator

        Returns:
            Line decoded as ISO-8859-1, without the trailing CRLF

        Raises:
            ConnectionClosed: Stream ended before a newline was seen
            ProtocolError: Line is too long or not terminated by CRLF
        """
        line = bytearray()
        while True:
            byte = self.conn.recv(1)
            if not byte:
                raise ConnectionClosed(
                    f"Connection closed while reading line ({len(line)} bytes read)"
                )
            line += byte
            if byte == b'\n':
                break
            if len(line) > MAX_LINE:
                raise ProtocolError(f"Line exceeds {MAX_LINE} bytes")

        if not line.endswith(CRLF):
            raise ProtocolError(f"Line not terminated by CRLF: {bytes(line)!r}")
        return line[:-2].decode('iso-8859-1')

    def read_exact(self, size: int) -> bytes:
        """
        Read exactly ``size`` bytes, looping on partial reads

        Raises:
            IncompleteBodyError: Stream ended before ``size`` bytes arrived
        """
        chunks = []
        remaining = size
        while remaining > 0:
            data = self.conn.recv(remaining)
            if not data:
                raise IncompleteBodyError(size, size - remaining)
            chunks.append(data)
            remaining -= len(data)
        return b''.join(chunks)


# ---------------------------------------------------------------------------
# Request Writer
# ---------------------------------------------------------------------------

def encode_query(params: Optional[Mapping[str, Any]]) -> str:
    """
    Encode query parameters in insertion order

    None values are skipped, booleans become true/false and lists or dicts
    are sent as JSON (the daemon expects JSON for filters and build args).
    """
    if not params:
        return ''

    query_parts = []
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, bool):
            value = 'true' if value else 'false'
        elif isinstance(value, (list, dict)):
            value = json.dumps(value)
        query_parts.append(f"{quote(str(key), safe='')}={quote(str(value), safe='')}")
    return '&'.join(query_parts)


def build_request_line(request: HttpRequest) -> str:
    target = quote(request.path, safe=PATH_SAFE)
    query = encode_query(request.query)
    if query:
        target = f"{target}?{query}"
    return f"{request.method} {target} HTTP/1.1\r\n"


def prepare_headers(request: HttpRequest) -> Dict[str, str]:
    """Return the request headers with Host and body headers injected"""
    headers = dict(request.headers)
    headers['Host'] = DAEMON_HOST
    if len(request.body) > 0:
        headers['Content-Length'] = str(len(request.body))
        if not _has_header(headers, 'Content-Type'):
            headers['Content-Type'] = 'application/json'
    return headers


def serialize_request(request: HttpRequest) -> bytes:
    """Serialize request line, headers, blank line and body into one buffer"""
    head = build_request_line(request)
    for name, value in prepare_headers(request).items():
        head += f"{name}: {value}\r\n"
    head += '\r\n'
    return head.encode('iso-8859-1') + request.body


def write_request(conn, request: HttpRequest):
    """Write the whole request to the connection in a single sendall"""
    conn.sendall(serialize_request(request))


# ---------------------------------------------------------------------------
# Response Parser
# ---------------------------------------------------------------------------

def parse_status_line(line: str):
    """
    Parse ``HTTP/1.1 404 Not Found`` into (404, 'Not Found')

    Raises:
        ProtocolError: Line is not a valid HTTP status line
    """
    parts = line.split(None, 2)
    if len(parts) < 2 or not parts[0].startswith('HTTP/'):
        raise ProtocolError(f"Malformed status line: {line!r}")

    code = parts[1]
    if not STATUS_CODE_RE.fullmatch(code):
        raise ProtocolError(f"Malformed status code in status line: {line!r}")

    reason = parts[2] if len(parts) > 2 else ''
    return int(code), reason


def parse_header_line(line: str):
    name, sep, value = line.partition(':')
    name = name.strip()
    if not sep or not name:
        raise ProtocolError(f"Malformed header line: {line!r}")
    return name, value.strip()


def read_headers(reader: LineReader) -> Dict[str, str]:
    """Read header lines up to the empty line; duplicate names keep the last value"""
    headers: Dict[str, str] = {}
    count = 0
    while True:
        line = reader.read_line()
        if line == '':
            return headers
        count += 1
        if count > MAX_HEADERS:
            raise ProtocolError(f"More than {MAX_HEADERS} header lines")
        name, value = parse_header_line(line)
        headers[name] = value


def is_chunked(headers: Mapping[str, str]) -> bool:
    encoding = find_header(headers, 'Transfer-Encoding')
    if not encoding:
        return False
    codings = [c.strip().lower() for c in encoding.split(',')]
    return codings[-1] == 'chunked'


def parse_chunk_size(line: str) -> int:
    size_text = line.split(';', 1)[0].strip()
    if not HEX_RE.fullmatch(size_text):
        raise ProtocolError(f"Malformed chunk size line: {line!r}")
    return int(size_text, 16)


def read_chunked(reader: LineReader) -> bytes:
    """Decode a chunked body; trailers after the last chunk are drained and dropped"""
    chunks = []
    while True:
        size = parse_chunk_size(reader.read_line())
        if size == 0:
            break
        chunks.append(reader.read_exact(size))
        if reader.read_line() != '':
            raise ProtocolError("Chunk data not followed by CRLF")

    while reader.read_line() != '':
        pass
    return b''.join(chunks)


def content_length(headers: Mapping[str, str]) -> int:
    value = find_header(headers, 'Content-Length')
    if value is None:
        raise MissingLengthError("Response has no Content-Length and is not chunked")
    value = value.strip()
    if not DECIMAL_RE.fullmatch(value):
        raise MissingLengthError(f"Invalid Content-Length: {value!r}")
    return int(value)


def has_body(status: int, method: str) -> bool:
    if method.upper() == 'HEAD':
        return False
    return not (100 <= status < 200 or status in (204, 304))


def read_body(reader: LineReader, status: int, headers: Mapping[str, str],
              method: str = 'GET') -> bytes:
    """Pick chunked or fixed-length decoding from the parsed headers"""
    if not has_body(status, method):
        return b''
    if is_chunked(headers):
        return read_chunked(reader)
    return reader.read_exact(content_length(headers))


def read_response(conn, method: str = 'GET') -> HttpResponse:
    """Read status line, headers and body from the connection"""
    reader = LineReader(conn)
    status, reason = parse_status_line(reader.read_line())
    headers = read_headers(reader)
    body = read_body(reader, status, headers, method)
    return HttpResponse(status, headers, body, reason)
