"""
pytest configuration and fixtures.
"""

import os
import shutil
import socket
import tempfile
import threading
from typing import Generator, List

import pytest

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from unixdock import DockerClient
from helpers import RecordingFactory


@pytest.fixture
def factory() -> RecordingFactory:
    """Scripted connection factory; queue responses before calling the client."""
    return RecordingFactory()


@pytest.fixture
def client(factory: RecordingFactory) -> DockerClient:
    """DockerClient whose connections come from the recording factory."""
    return DockerClient('/nonexistent/docker.sock', connection_factory=factory)


class FakeDaemon:
    """Unix socket server answering each connection with the next canned response."""

    def __init__(self, socket_path: str):
        self.socket_path = socket_path
        self.responses: List[bytes] = []
        self.requests: List[bytes] = []
        self.connections = 0
        self._server = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        self._server.bind(socket_path)
        self._server.listen(8)
        self._running = True
        self._thread = threading.Thread(target=self._serve, daemon=True)

    def start(self):
        self._thread.start()

    def queue(self, *responses: bytes):
        self.responses.extend(responses)

    def _read_request(self, conn: socket.socket) -> bytes:
        data = b''
        while b'\r\n\r\n' not in data:
            chunk = conn.recv(4096)
            if not chunk:
                return data
            data += chunk

        head, _, body = data.partition(b'\r\n\r\n')
        length = 0
        for line in head.split(b'\r\n')[1:]:
            name, _, value = line.partition(b':')
            if name.strip().lower() == b'content-length':
                length = int(value.strip())
        while len(body) < length:
            chunk = conn.recv(4096)
            if not chunk:
                break
            body += chunk
        return head + b'\r\n\r\n' + body

    def _serve(self):
        while self._running:
            try:
                conn, _ = self._server.accept()
            except OSError:
                return
            if not self._running:
                conn.close()
                return
            with conn:
                self.connections += 1
                self.requests.append(self._read_request(conn))
                if self.responses:
                    conn.sendall(self.responses.pop(0))

    def stop(self):
        self._running = False
        # Wake the blocking accept()
        try:
            with socket.socket(socket.AF_UNIX, socket.SOCK_STREAM) as wake:
                wake.connect(self.socket_path)
        except OSError:
            pass
        self._thread.join(timeout=5.0)
        self._server.close()


@pytest.fixture
def fake_daemon() -> Generator[FakeDaemon, None, None]:
    """Threaded daemon stand-in on a real Unix socket."""
    # AF_UNIX paths are limited to ~100 bytes, keep the directory short
    tmpdir = tempfile.mkdtemp(prefix='udk')
    daemon = FakeDaemon(os.path.join(tmpdir, 'docker.sock'))
    daemon.start()

    yield daemon

    daemon.stop()
    shutil.rmtree(tmpdir, ignore_errors=True)
