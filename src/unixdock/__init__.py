"""
unixdock - Docker Engine API client over the daemon's Unix socket
Raw HTTP/1.1 framing, one connection per request, no external dependencies
"""

from .client import DockerClient
from .exceptions import (
    DockerException,
    TransportError,
    DockerConnectionError,
    ConnectionClosed,
    IncompleteBodyError,
    ProtocolError,
    MissingLengthError,
    APIError,
    NotFound,
    Conflict,
    ImageNotFound,
    ContainerNotFound,
    NetworkNotFound,
    VolumeNotFound,
    ExecNotFound,
)
from .http_wire import HttpRequest, HttpResponse

__all__ = [
    'DockerClient',
    'HttpRequest',
    'HttpResponse',
    'DockerException',
    'TransportError',
    'DockerConnectionError',
    'ConnectionClosed',
    'IncompleteBodyError',
    'ProtocolError',
    'MissingLengthError',
    'APIError',
    'NotFound',
    'Conflict',
    'ImageNotFound',
    'ContainerNotFound',
    'NetworkNotFound',
    'VolumeNotFound',
    'ExecNotFound',
]

__version__ = '1.0.0'
