"""
Docker API Exceptions
"""


class DockerException(Exception):
    """Base Docker exception"""
    pass


class TransportError(DockerException):
    """Exchange with the daemon failed below the HTTP status level"""
    pass


class DockerConnectionError(TransportError):
    """Socket could not be opened, written or read"""
    pass


class ConnectionClosed(DockerConnectionError):
    """Daemon closed the stream in the middle of a response"""
    pass


class IncompleteBodyError(ConnectionClosed):
    """Stream ended before the declared number of body bytes arrived"""

    def __init__(self, expected: int, received: int):
        super().__init__(
            f"Connection closed after {received} of {expected} body bytes"
        )
        self.expected = expected
        self.received = received


class ProtocolError(TransportError):
    """Malformed HTTP framing received from the daemon"""
    pass


class MissingLengthError(ProtocolError):
    """Response is neither chunked nor carries a usable Content-Length"""
    pass


class APIError(DockerException):
    """Docker API error"""

    def __init__(self, message, response=None, status_code=None, explanation=None):
        super().__init__(message)
        self.response = response
        self.status_code = status_code
        self.explanation = explanation


class NotFound(APIError):
    """Requested object does not exist"""
    pass


class Conflict(APIError):
    """Request conflicts with the current object state"""
    pass


class ImageNotFound(NotFound):
    """Image not found"""
    pass


class ContainerNotFound(NotFound):
    """Container not found"""
    pass


class NetworkNotFound(NotFound):
    """Network not found"""
    pass


class VolumeNotFound(NotFound):
    """Volume not found"""
    pass


class ExecNotFound(NotFound):
    """Exec instance not found"""
    pass
