"""
Settings for unixdock
Socket auto-detection and client settings stored in a JSON file
"""

import json
import os
import logging
import platform
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

DEFAULT_SOCKET = '/var/run/docker.sock'

DEFAULT_SETTINGS: Dict[str, Any] = {
    'socket_path': '',
    'timeout': 60,
    'api_version': None,
    'log_level': 'INFO',
}


def detect_socket_path() -> str:
    """
    Find the Docker daemon socket

    DOCKER_HOST wins when it is a unix:// URL, then the Docker Desktop
    socket on macOS, then the standard Linux location.
    """
    docker_host = os.environ.get('DOCKER_HOST', '')
    if docker_host.startswith('unix://'):
        return docker_host[len('unix://'):]
    if docker_host:
        logger.warning(f"Ignoring non-unix DOCKER_HOST: {docker_host}")

    if platform.system() == "Darwin":
        desktop_socket = os.path.expanduser('~/.docker/run/docker.sock')
        if os.path.exists(desktop_socket):
            return desktop_socket

    return DEFAULT_SOCKET


class SettingsManager:
    """Manager for client settings"""

    @staticmethod
    def get_user_settings_path() -> str:
        """Get path to user settings file"""
        config_dir = os.path.join(
            os.environ.get('XDG_CONFIG_HOME', os.path.expanduser('~/.config')),
            'unixdock'
        )
        return os.path.join(config_dir, 'settings.json')

    def __init__(self, settings_file: Optional[str] = None):
        """
        Initialize settings manager

        Args:
            settings_file: JSON file to load (default: user settings path)
        """
        self.settings_file = settings_file or self.get_user_settings_path()
        self.settings: Dict[str, Any] = {}

        self.load()

    def load(self):
        """Load settings from file, falling back to defaults"""
        self.settings = DEFAULT_SETTINGS.copy()

        if not os.path.exists(self.settings_file):
            logger.debug(f"No settings file at {self.settings_file}, using defaults")
            return

        try:
            with open(self.settings_file, 'r', encoding='utf-8') as f:
                loaded_settings = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Could not load settings from {self.settings_file}: {e}")
            return

        if not isinstance(loaded_settings, dict):
            logger.warning(f"Ignoring settings file {self.settings_file}: not a JSON object")
            return

        # User settings override defaults
        self.settings.update(loaded_settings)
        logger.debug(f"Settings loaded from {self.settings_file}")

    def save(self) -> bool:
        """Save settings to file"""
        try:
            os.makedirs(os.path.dirname(self.settings_file) or '.', exist_ok=True)
            with open(self.settings_file, 'w', encoding='utf-8') as f:
                json.dump(self.settings, f, indent=4, ensure_ascii=False)
        except OSError as e:
            logger.error(f"Error saving settings: {e}")
            return False

        logger.debug(f"Settings saved to {self.settings_file}")
        return True

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get setting value

        Args:
            key: Setting key
            default: Default value if key not found

        Returns:
            Setting value
        """
        return self.settings.get(key, default)

    def set(self, key: str, value: Any, save: bool = True):
        """
        Set setting value

        Args:
            key: Setting key
            value: Setting value
            save: Save to file immediately
        """
        self.settings[key] = value

        if save:
            self.save()

    def reset_to_defaults(self, save: bool = True):
        self.settings = DEFAULT_SETTINGS.copy()

        if save:
            self.save()

    def get_all(self) -> Dict[str, Any]:
        """Get all settings"""
        return self.settings.copy()

    def socket_path(self) -> str:
        return self.get('socket_path') or detect_socket_path()

    def create_client(self, **overrides):
        """
        Build a DockerClient from these settings

        Args:
            **overrides: base_url, timeout or api_version taking precedence
        """
        from .client import DockerClient

        options = {
            'base_url': self.socket_path(),
            'timeout': self.get('timeout'),
            'api_version': self.get('api_version'),
        }
        options.update({k: v for k, v in overrides.items() if v is not None})
        return DockerClient(**options)
