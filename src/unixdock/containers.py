"""
Docker Containers API
"""

import logging
from typing import List, Dict, Any, Optional, Union
from .exceptions import ContainerNotFound, ImageNotFound

logger = logging.getLogger(__name__)


class Container:
    """Docker Container object"""

    def __init__(self, attrs: Dict[str, Any], collection):
        self.collection = collection
        self._set_attrs(attrs)

    def _set_attrs(self, attrs: Dict[str, Any]):
        self.attrs = attrs
        self.id = attrs.get('Id', '')
        self.short_id = self.id[:12] if self.id else ''
        names = attrs.get('Names')
        self.name = attrs.get('Name', names[0] if names else '').lstrip('/')

        # Inspect returns State as a dict, list returns it as a string
        state = attrs.get('State', {})
        if isinstance(state, dict):
            self.status = state.get('Status', 'unknown')
        else:
            self.status = state or attrs.get('Status', 'unknown')

        config = attrs.get('Config') or {}
        self.image = config.get('Image') or attrs.get('Image', attrs.get('ImageID', ''))
        self.labels = attrs.get('Labels', config.get('Labels')) or {}

    def __repr__(self):
        return f"<Container: {self.name or self.short_id}>"

    def reload(self):
        """Refresh attrs from the daemon"""
        self._set_attrs(self.collection.inspect(self.id))
        return self

    def start(self, detach_keys: Optional[str] = None) -> bool:
        """Start this container"""
        return self.collection.start(self.id, detach_keys=detach_keys)

    def stop(self, timeout: Optional[int] = None) -> bool:
        """Stop this container"""
        return self.collection.stop(self.id, timeout=timeout)

    def restart(self, timeout: Optional[int] = None):
        """Restart this container"""
        return self.collection.restart(self.id, timeout=timeout)

    def kill(self, signal: str = 'SIGKILL'):
        """Kill this container"""
        return self.collection.kill(self.id, signal=signal)

    def pause(self):
        return self.collection.pause(self.id)

    def unpause(self):
        return self.collection.unpause(self.id)

    def remove(self, v: bool = False, force: bool = False, link: bool = False):
        """Remove this container"""
        return self.collection.remove(self.id, v=v, force=force, link=link)

    def rename(self, name: str):
        self.collection.rename(self.id, name)
        self.name = name

    def top(self, ps_args: str = '-ef') -> Dict[str, Any]:
        return self.collection.top(self.id, ps_args=ps_args)

    def changes(self) -> List[Dict[str, Any]]:
        return self.collection.changes(self.id)

    def update(self, **resources) -> Dict[str, Any]:
        return self.collection.update(self.id, **resources)

    def wait(self, condition: str = 'not-running') -> Dict[str, Any]:
        return self.collection.wait(self.id, condition=condition)

    def stats(self) -> Dict[str, Any]:
        return self.collection.stats(self.id)

    def exec_run(self, cmd: Union[str, List[str]], **kwargs):
        """Execute command in container"""
        return self.collection.exec_run(self.id, cmd, **kwargs)


class ContainerCollection:
    """Docker Containers collection"""

    def __init__(self, client):
        self.client = client

    @property
    def http(self):
        return self.client.http

    def list(self, all: bool = False, limit: Optional[int] = None, size: bool = False,
             filters: Optional[Dict[str, Any]] = None) -> List[Container]:
        """
        List containers

        Args:
            all: Show all containers (including stopped)
            limit: Maximum number of containers to return
            size: Include SizeRw and SizeRootFs
            filters: Filters to apply

        Returns:
            List of Container objects
        """
        params = {'all': all}
        if limit:
            params['limit'] = limit
        if size:
            params['size'] = size
        if filters:
            params['filters'] = filters

        containers_data = self.http.get('/containers/json', params=params)
        return [Container(c_data, self) for c_data in containers_data or []]

    def inspect(self, container_id: str, size: bool = False) -> Dict[str, Any]:
        """Low-level information about a container"""
        params = {'size': size} if size else None
        return self.http.get(f'/containers/{container_id}/json', params=params,
                             not_found=ContainerNotFound)

    def get(self, container_id: str) -> Container:
        """
        Get container by ID or name

        Args:
            container_id: Container ID or name

        Returns:
            Container object

        Raises:
            ContainerNotFound: If container not found
        """
        return Container(self.inspect(container_id), self)

    def create(self, image: str, name: Optional[str] = None,
               command: Optional[Union[str, List[str]]] = None,
               environment: Optional[Dict[str, str]] = None,
               volumes: Optional[Dict[str, Dict[str, str]]] = None,
               ports: Optional[Dict[str, int]] = None,
               stdin_open: bool = False, tty: bool = False,
               network_mode: Optional[str] = None, hostname: Optional[str] = None,
               auto_remove: bool = False, platform: Optional[str] = None,
               **kwargs) -> Container:
        """
        Create container

        Args:
            image: Image name or ID
            name: Container name
            command: Command to run; a string is run through sh -c
            environment: Environment variables
            volumes: Volume mounts {host_path: {'bind': container_path, 'mode': 'rw'}}
            ports: Port bindings {container_port: host_port}
            stdin_open: Keep STDIN open
            tty: Allocate TTY
            network_mode: Network mode
            hostname: Container hostname
            auto_remove: Auto-remove when stopped
            platform: Platform (e.g., linux/amd64)
            **kwargs: Raw fields merged into the create body

        Returns:
            Container object
        """
        config = {
            'Image': image,
            'Tty': tty,
            'OpenStdin': stdin_open,
            'StdinOnce': False,
            'AttachStdin': stdin_open,
            'AttachStdout': True,
            'AttachStderr': True,
        }

        if command:
            if isinstance(command, str):
                config['Cmd'] = ['sh', '-c', command]
            else:
                config['Cmd'] = list(command)

        if environment:
            config['Env'] = [f"{k}={v}" for k, v in environment.items()]

        if hostname:
            config['Hostname'] = hostname

        host_config = {}

        if auto_remove:
            host_config['AutoRemove'] = auto_remove

        if network_mode:
            host_config['NetworkMode'] = network_mode

        if volumes:
            binds = []
            for host_path, mount_info in volumes.items():
                container_path = mount_info.get('bind', '')
                mode = mount_info.get('mode', 'rw')
                binds.append(f"{host_path}:{container_path}:{mode}")
            host_config['Binds'] = binds

        if ports:
            port_bindings = {}
            exposed_ports = {}
            for container_port, host_port in ports.items():
                port_key = str(container_port)
                if '/' not in port_key:
                    port_key = f"{port_key}/tcp"
                exposed_ports[port_key] = {}
                port_bindings[port_key] = [{'HostPort': str(host_port)}]
            config['ExposedPorts'] = exposed_ports
            host_config['PortBindings'] = port_bindings

        if host_config:
            config['HostConfig'] = host_config

        config.update(kwargs)

        params = {'name': name, 'platform': platform}
        result = self.http.post('/containers/create', params=params, data=config,
                                not_found=ImageNotFound)
        for warning in result.get('Warnings') or []:
            logger.warning(f"Container create: {warning}")
        logger.debug(f"Created container {result['Id'][:12]} from {image}")

        return self.get(result['Id'])

    def run(self, image: str, command: Optional[Union[str, List[str]]] = None,
            **kwargs) -> Container:
        """
        Create and start container

        Args:
            image: Image name
            command: Command to run
            **kwargs: Additional create parameters

        Returns:
            Container object
        """
        container = self.create(image, command=command, **kwargs)
        container.start()
        return container.reload()

    def _state_change(self, container_id: str, action: str,
                      params: Optional[Dict[str, Any]] = None) -> bool:
        # 304 means the container was already in the requested state
        response = self.http.exchange('POST', f'/containers/{container_id}/{action}',
                                      params=params)
        self.http.raise_for_status(response, not_found=ContainerNotFound)
        return response.status != 304

    def start(self, container_id: str, detach_keys: Optional[str] = None) -> bool:
        """Start container; False if it was already running"""
        return self._state_change(container_id, 'start', {'detachKeys': detach_keys})

    def stop(self, container_id: str, timeout: Optional[int] = None) -> bool:
        """Stop container; False if it was already stopped"""
        return self._state_change(container_id, 'stop', {'t': timeout})

    def restart(self, container_id: str, timeout: Optional[int] = None):
        """Restart container"""
        params = {'t': timeout}
        self.http.post(f'/containers/{container_id}/restart', params=params,
                       not_found=ContainerNotFound)

    def kill(self, container_id: str, signal: str = 'SIGKILL'):
        """Kill container"""
        params = {'signal': signal}
        self.http.post(f'/containers/{container_id}/kill', params=params,
                       not_found=ContainerNotFound)

    def pause(self, container_id: str):
        self.http.post(f'/containers/{container_id}/pause', not_found=ContainerNotFound)

    def unpause(self, container_id: str):
        self.http.post(f'/containers/{container_id}/unpause', not_found=ContainerNotFound)

    def remove(self, container_id: str, v: bool = False, force: bool = False,
               link: bool = False):
        """Remove container"""
        params = {'v': v, 'force': force, 'link': link}
        self.http.delete(f'/containers/{container_id}', params=params,
                         not_found=ContainerNotFound)
        logger.debug(f"Removed container {container_id}")

    def rename(self, container_id: str, name: str):
        self.http.post(f'/containers/{container_id}/rename', params={'name': name},
                       not_found=ContainerNotFound)

    def top(self, container_id: str, ps_args: str = '-ef') -> Dict[str, Any]:
        """Processes running inside the container"""
        return self.http.get(f'/containers/{container_id}/top',
                             params={'ps_args': ps_args}, not_found=ContainerNotFound)

    def changes(self, container_id: str) -> List[Dict[str, Any]]:
        """Filesystem changes since the container was created"""
        return self.http.get(f'/containers/{container_id}/changes',
                             not_found=ContainerNotFound) or []

    def update(self, container_id: str, **resources) -> Dict[str, Any]:
        """
        Update resource limits

        Args:
            container_id: Container ID
            **resources: Raw update fields, e.g. Memory=..., CpuShares=...
        """
        return self.http.post(f'/containers/{container_id}/update', data=resources,
                              not_found=ContainerNotFound)

    def wait(self, container_id: str, condition: str = 'not-running') -> Dict[str, Any]:
        """Block until the container reaches the condition; returns StatusCode"""
        return self.http.post(f'/containers/{container_id}/wait',
                              params={'condition': condition}, not_found=ContainerNotFound)

    def stats(self, container_id: str) -> Dict[str, Any]:
        """Single resource usage snapshot"""
        return self.http.get(f'/containers/{container_id}/stats',
                             params={'stream': False}, not_found=ContainerNotFound)

    def exec_run(self, container_id: str, cmd: Union[str, List[str]], **kwargs):
        """
        Execute command in running container

        Creates a detached exec instance and starts it.

        Args:
            container_id: Container ID
            cmd: Command to execute
            **kwargs: Options passed to ExecCollection.create

        Returns:
            Started ExecInstance
        """
        instance = self.client.execs.create(container_id, cmd, **kwargs)
        instance.start(tty=kwargs.get('tty', False))
        return instance
