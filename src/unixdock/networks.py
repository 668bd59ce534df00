"""
Docker Networks API
"""

import logging
from typing import List, Dict, Optional, Any
from .exceptions import NetworkNotFound

logger = logging.getLogger(__name__)


class Network:
    """Docker Network object"""

    def __init__(self, collection, attrs: dict):
        self.collection = collection
        self._set_attrs(attrs)

    def _set_attrs(self, attrs: dict):
        self.attrs = attrs
        self.id = attrs.get('Id', '')
        self.name = attrs.get('Name', '')

    def __repr__(self):
        return f"<Network: {self.name or self.id[:12]}>"

    @property
    def containers(self) -> List[str]:
        """IDs of attached containers (as of the last reload)"""
        return list((self.attrs.get('Containers') or {}).keys())

    def reload(self):
        """Reload network data"""
        self._set_attrs(self.collection.inspect(self.id))
        return self

    def connect(self, container: str, endpoint_config: Optional[Dict[str, Any]] = None):
        self.collection.connect(self.id, container, endpoint_config=endpoint_config)

    def disconnect(self, container: str, force: bool = False):
        self.collection.disconnect(self.id, container, force=force)

    def remove(self):
        """Remove network"""
        self.collection.remove(self.id)


class NetworkCollection:
    """Docker Networks Collection"""

    def __init__(self, client):
        self.client = client

    @property
    def http(self):
        return self.client.http

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Network]:
        """
        List networks

        Args:
            filters: dict of filters (e.g., {'name': ['mynet']})

        Returns:
            List of Network objects
        """
        data = self.http.get('/networks', params={'filters': filters}) or []
        return [Network(self, net) for net in data]

    def inspect(self, network_id: str, verbose: bool = False,
                scope: Optional[str] = None) -> Dict[str, Any]:
        params = {'verbose': verbose or None, 'scope': scope}
        return self.http.get(f'/networks/{network_id}', params=params,
                             not_found=NetworkNotFound)

    def get(self, network_id: str, verbose: bool = False,
            scope: Optional[str] = None) -> Network:
        """
        Get network by ID or name

        Args:
            network_id: Network ID or name
            verbose: Include swarm service details
            scope: Restrict lookup to a scope (swarm, global, local)

        Returns:
            Network object
        """
        return Network(self, self.inspect(network_id, verbose=verbose, scope=scope))

    def create(self, name: str, driver: str = 'bridge', internal: bool = False,
               attachable: bool = True, options: Optional[Dict[str, str]] = None,
               labels: Optional[Dict[str, str]] = None,
               ipam: Optional[Dict[str, Any]] = None) -> Network:
        """
        Create network

        Args:
            name: Network name
            driver: Network driver
            internal: Restrict external access
            attachable: Allow manual container attachment
            options: Driver options dict
            labels: Labels dict
            ipam: IPAM configuration

        Returns:
            Network object
        """
        data = {
            'Name': name,
            'Driver': driver,
            'Internal': internal,
            'Attachable': attachable,
            'CheckDuplicate': True
        }

        if options:
            data['Options'] = options

        if labels:
            data['Labels'] = labels

        if ipam:
            data['IPAM'] = ipam

        result = self.http.post('/networks/create', data=data)
        if result.get('Warning'):
            logger.warning(f"Network create: {result['Warning']}")
        logger.debug(f"Created network {name} ({result['Id'][:12]})")
        return self.get(result['Id'])

    def remove(self, network_id: str):
        self.http.delete(f'/networks/{network_id}', not_found=NetworkNotFound)
        logger.debug(f"Removed network {network_id}")

    def connect(self, network_id: str, container: str,
                endpoint_config: Optional[Dict[str, Any]] = None):
        """Attach a container to the network"""
        data = {'Container': container}
        if endpoint_config:
            data['EndpointConfig'] = endpoint_config
        self.http.post(f'/networks/{network_id}/connect', data=data,
                       not_found=NetworkNotFound)

    def disconnect(self, network_id: str, container: str, force: bool = False):
        """Detach a container from the network"""
        data = {'Container': container, 'Force': force}
        self.http.post(f'/networks/{network_id}/disconnect', data=data,
                       not_found=NetworkNotFound)

    def prune(self, filters: Optional[Dict] = None) -> Dict[str, Any]:
        """
        Remove unused networks

        Args:
            filters: Filters to use

        Returns:
            Dict with deleted networks info
        """
        result = self.http.post('/networks/prune', params={'filters': filters}) or {}
        logger.debug(f"Pruned networks: {result.get('NetworksDeleted') or []}")
        return result
