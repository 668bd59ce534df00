"""
HTTP Client for Docker Unix Socket
Raw HTTP/1.1 over a fresh socket connection per exchange
"""

import json
import logging
import socket
from typing import Any, Callable, Dict, Mapping, Optional, Type

from .exceptions import (
    APIError,
    Conflict,
    DockerConnectionError,
    NotFound,
    TransportError,
)
from .http_wire import HttpRequest, HttpResponse, read_response, write_request

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 60


class UnixSocketConnection:
    """
    One stream connection to the daemon socket

    Used as a context manager; the socket is closed when the block exits,
    whether the exchange succeeded or not.
    """

    def __init__(self, socket_path: str, timeout: Optional[float] = DEFAULT_TIMEOUT):
        self.socket_path = socket_path
        self.timeout = timeout
        self.sock: Optional[socket.socket] = None

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def connect(self):
        """Connect to Unix socket"""
        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        sock.settimeout(self.timeout)
        try:
            sock.connect(self.socket_path)
        except socket.timeout as e:
            sock.close()
            raise DockerConnectionError(
                f"Timed out connecting to Docker socket {self.socket_path}"
            ) from e
        except FileNotFoundError as e:
            sock.close()
            raise DockerConnectionError(f"Docker socket not found: {self.socket_path}") from e
        except OSError as e:
            sock.close()
            raise DockerConnectionError(
                f"Cannot connect to Docker socket {self.socket_path}: {e}"
            ) from e
        self.sock = sock

    def sendall(self, data: bytes):
        if self.sock is None:
            raise DockerConnectionError("Connection is not open")
        try:
            self.sock.sendall(data)
        except socket.timeout as e:
            raise DockerConnectionError(f"Timed out writing to {self.socket_path}") from e
        except OSError as e:
            raise DockerConnectionError(f"Write to {self.socket_path} failed: {e}") from e

    def recv(self, size: int) -> bytes:
        if self.sock is None:
            raise DockerConnectionError("Connection is not open")
        try:
            return self.sock.recv(size)
        except socket.timeout as e:
            raise DockerConnectionError(f"Timed out reading from {self.socket_path}") from e
        except OSError as e:
            raise DockerConnectionError(f"Read from {self.socket_path} failed: {e}") from e

    def close(self):
        if self.sock is not None:
            self.sock.close()
            self.sock = None


class DockerHTTPClient:
    """HTTP client for Docker daemon"""

    def __init__(self, socket_path: str, timeout: Optional[float] = DEFAULT_TIMEOUT,
                 api_version: Optional[str] = None,
                 connection_factory: Optional[Callable[[], Any]] = None):
        """
        Initialize Docker HTTP client

        Args:
            socket_path: Docker socket path (a unix:// prefix is accepted)
            timeout: Socket timeout in seconds for connect, read and write
            api_version: API version prefix for every path, e.g. '1.43'
            connection_factory: Callable returning a new connection context
                manager; defaults to a UnixSocketConnection on socket_path
        """
        self.socket_path = socket_path.replace('unix://', '', 1)
        self.timeout = timeout
        self.api_version = api_version
        if connection_factory is None:
            connection_factory = self._open_socket
        self.connection_factory = connection_factory

    def _open_socket(self) -> UnixSocketConnection:
        return UnixSocketConnection(self.socket_path, timeout=self.timeout)

    def url(self, path: str) -> str:
        if self.api_version:
            return f"/v{self.api_version.lstrip('v')}{path}"
        return path

    def exchange(self, method: str, path: str, params: Optional[Mapping[str, Any]] = None,
                 body: bytes = b'', headers: Optional[Dict[str, str]] = None) -> HttpResponse:
        """
        Perform one request/response exchange on a new connection

        Args:
            method: HTTP method
            path: API path without query string
            params: URL query parameters
            body: Raw request body
            headers: Extra request headers

        Returns:
            Fully read HttpResponse

        Raises:
            TransportError: Connection, framing or body errors
        """
        request = HttpRequest(method, self.url(path), query=params, headers=headers, body=body)
        try:
            with self.connection_factory() as conn:
                write_request(conn, request)
                response = read_response(conn, method=request.method)
        except TransportError as e:
            logger.debug(f"{request.method} {request.path} failed: {e}")
            raise

        logger.debug(
            f"{request.method} {request.path} -> {response.status} ({len(response.body)} bytes)"
        )
        return response

    def raise_for_status(self, response: HttpResponse,
                         not_found: Optional[Type[NotFound]] = None):
        """
        Raise an APIError subclass if the daemon returned an error status

        Args:
            response: Response to check
            not_found: NotFound subclass to raise for 404
        """
        if response.status < 400:
            return

        error_body = response.text
        try:
            error_msg = json.loads(error_body).get('message', error_body)
        except (ValueError, AttributeError):
            error_msg = error_body
        error_msg = error_msg.strip() or response.reason

        if response.status == 404:
            cls = not_found or NotFound
        elif response.status == 409:
            cls = Conflict
        else:
            cls = APIError

        raise cls(
            f"Docker API error ({response.status}): {error_msg}",
            response=response,
            status_code=response.status,
            explanation=error_msg,
        )

    def request(self, method: str, path: str, data: Any = None,
                params: Optional[Mapping[str, Any]] = None,
                headers: Optional[Dict[str, str]] = None,
                not_found: Optional[Type[NotFound]] = None, raw: bool = False) -> Any:
        """
        Make HTTP request to Docker daemon

        Args:
            method: HTTP method (GET, POST, DELETE, etc.)
            path: API path
            data: JSON data for request body, or raw bytes
            params: URL query parameters
            headers: HTTP headers
            not_found: NotFound subclass raised on 404
            raw: Return the body bytes instead of decoding it

        Returns:
            Parsed JSON response, text if the body is not JSON, None if empty
        """
        if data is None:
            body = b''
        elif isinstance(data, bytes):
            body = data
        else:
            body = json.dumps(data).encode('utf-8')

        response = self.exchange(method, path, params=params, body=body, headers=headers)
        self.raise_for_status(response, not_found=not_found)

        if raw:
            return response.body
        if not response.body:
            return None
        try:
            return response.json()
        except ValueError:
            # Return raw text if not JSON
            return response.text

    def get(self, path: str, **kwargs) -> Any:
        """Make GET request"""
        return self.request('GET', path, **kwargs)

    def post(self, path: str, **kwargs) -> Any:
        """Make POST request"""
        return self.request('POST', path, **kwargs)

    def delete(self, path: str, **kwargs) -> Any:
        """Make DELETE request"""
        return self.request('DELETE', path, **kwargs)

    def put(self, path: str, **kwargs) -> Any:
        """Make PUT request"""
        return self.request('PUT', path, **kwargs)

    def head(self, path: str, **kwargs) -> Any:
        """Make HEAD request"""
        return self.request('HEAD', path, **kwargs)
