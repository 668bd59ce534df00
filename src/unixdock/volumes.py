"""
Docker Volumes API
"""

import logging
from typing import List, Dict, Optional, Any
from .exceptions import VolumeNotFound

logger = logging.getLogger(__name__)


class Volume:
    """Docker Volume object"""

    def __init__(self, collection, attrs: dict):
        self.collection = collection
        self._set_attrs(attrs)

    def _set_attrs(self, attrs: dict):
        self.attrs = attrs
        self.name = attrs.get('Name', '')
        self.driver = attrs.get('Driver', '')
        self.mountpoint = attrs.get('Mountpoint', '')

    def __repr__(self):
        return f"<Volume: {self.name}>"

    def reload(self):
        self._set_attrs(self.collection.inspect(self.name))
        return self

    def remove(self, force: bool = False):
        """Remove volume"""
        self.collection.remove(self.name, force=force)


class VolumeCollection:
    """Docker Volumes Collection"""

    def __init__(self, client):
        self.client = client

    @property
    def http(self):
        return self.client.http

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Volume]:
        """
        List volumes

        Args:
            filters: dict of filters (e.g., {'dangling': ['true']})

        Returns:
            List of Volume objects
        """
        data = self.http.get('/volumes', params={'filters': filters}) or {}
        for warning in data.get('Warnings') or []:
            logger.warning(f"Volume list: {warning}")
        return [Volume(self, vol) for vol in data.get('Volumes') or []]

    def inspect(self, name: str) -> Dict[str, Any]:
        return self.http.get(f'/volumes/{name}', not_found=VolumeNotFound)

    def get(self, name: str) -> Volume:
        """
        Get volume by name

        Raises:
            VolumeNotFound: If volume or its driver does not exist
        """
        return Volume(self, self.inspect(name))

    def create(self, name: Optional[str] = None, driver: Optional[str] = None,
               driver_opts: Optional[Dict[str, str]] = None,
               labels: Optional[Dict[str, str]] = None) -> Volume:
        """
        Create volume

        Args:
            name: Volume name (daemon generates one if omitted)
            driver: Volume driver (default: local)
            driver_opts: Driver options dict
            labels: Labels dict

        Returns:
            Volume object
        """
        data: Dict[str, Any] = {}
        if name:
            data['Name'] = name
        if driver:
            data['Driver'] = driver
        if driver_opts:
            data['DriverOpts'] = driver_opts
        if labels:
            data['Labels'] = labels

        result = self.http.post('/volumes/create', data=data)
        logger.debug(f"Created volume {result['Name']}")
        return Volume(self, result)

    def remove(self, name: str, force: bool = False):
        params = {'force': force or None}
        self.http.delete(f'/volumes/{name}', params=params, not_found=VolumeNotFound)
        logger.debug(f"Removed volume {name}")

    def prune(self, filters: Optional[Dict] = None) -> Dict[str, Any]:
        """
        Remove unused volumes

        Returns:
            Dict with VolumesDeleted and SpaceReclaimed
        """
        result = self.http.post('/volumes/prune', params={'filters': filters}) or {}
        logger.debug(f"Pruned volumes: {result.get('VolumesDeleted') or []}")
        return result
