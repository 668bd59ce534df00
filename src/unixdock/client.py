"""
Docker Client - Main API entry point
"""

from typing import Any, Callable, Optional
from .http_client import DockerHTTPClient, DEFAULT_TIMEOUT
from .containers import ContainerCollection
from .execs import ExecCollection
from .images import ImageCollection
from .networks import NetworkCollection
from .settings import detect_socket_path
from .volumes import VolumeCollection


class DockerClient:
    """
    Docker API Client
    Raw HTTP/1.1 over the daemon's Unix socket, one connection per request
    """

    def __init__(self, base_url: Optional[str] = None,
                 timeout: Optional[float] = DEFAULT_TIMEOUT,
                 api_version: Optional[str] = None,
                 connection_factory: Optional[Callable[[], Any]] = None):
        """
        Initialize Docker client

        Args:
            base_url: Docker socket path or unix:// URL (default: auto-detect)
            timeout: Socket timeout in seconds
            api_version: Pin requests to an API version, e.g. '1.43'
            connection_factory: Replacement for socket connections
        """
        if base_url is None:
            base_url = detect_socket_path()

        self.http = DockerHTTPClient(
            base_url,
            timeout=timeout,
            api_version=api_version,
            connection_factory=connection_factory,
        )
        self.images = ImageCollection(self)
        self.containers = ContainerCollection(self)
        self.networks = NetworkCollection(self)
        self.volumes = VolumeCollection(self)
        self.execs = ExecCollection(self)

    def __repr__(self):
        return f"<DockerClient: {self.http.socket_path}>"

    def version(self) -> dict:
        """Get Docker version info"""
        return self.http.get('/version')

    def info(self) -> dict:
        """Get Docker system info"""
        return self.http.get('/info')

    def ping(self) -> str:
        """Ping Docker daemon"""
        self.http.get('/_ping')
        return 'OK'

    def ping_head(self) -> str:
        """Ping Docker daemon with a HEAD request"""
        self.http.head('/_ping')
        return 'OK'

    def close(self):
        """Close client (no-op, connections are per request)"""
        pass
