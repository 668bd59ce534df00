"""
Docker Exec API
"""

import logging
from typing import Any, Dict, List, Optional, Union
from .exceptions import ContainerNotFound, ExecNotFound

logger = logging.getLogger(__name__)


class ExecInstance:
    """Command execution inside a running container"""

    def __init__(self, exec_id: str, collection):
        self.id = exec_id
        self.collection = collection

    def __repr__(self):
        return f"<ExecInstance: {self.id[:12]}>"

    def start(self, tty: bool = False):
        return self.collection.start(self.id, tty=tty)

    def inspect(self) -> Dict[str, Any]:
        return self.collection.inspect(self.id)

    @property
    def exit_code(self) -> Optional[int]:
        """Exit code, or None while the command is still running"""
        info = self.inspect()
        if info.get('Running'):
            return None
        return info.get('ExitCode')


class ExecCollection:
    """Docker exec instances"""

    def __init__(self, client):
        self.client = client

    def create(self, container_id: str, cmd: Union[str, List[str]], stdout: bool = True,
               stderr: bool = True, stdin: bool = False, tty: bool = False,
               privileged: bool = False, user: str = '',
               environment: Optional[Dict[str, str]] = None,
               workdir: str = '') -> ExecInstance:
        """
        Set up an exec instance in a running container

        Args:
            container_id: Container ID
            cmd: Command to execute; a string is run through sh -c
            stdout: Attach to stdout
            stderr: Attach to stderr
            stdin: Attach to stdin
            tty: Allocate TTY
            privileged: Run as privileged
            user: User to run as
            environment: Environment variables
            workdir: Working directory

        Returns:
            ExecInstance (not started)
        """
        exec_config = {
            'AttachStdout': stdout,
            'AttachStderr': stderr,
            'AttachStdin': stdin,
            'Tty': tty,
            'Privileged': privileged,
            'Cmd': cmd if isinstance(cmd, list) else ['sh', '-c', cmd],
        }

        if user:
            exec_config['User'] = user
        if environment:
            exec_config['Env'] = [f"{k}={v}" for k, v in environment.items()]
        if workdir:
            exec_config['WorkingDir'] = workdir

        result = self.client.http.post(
            f'/containers/{container_id}/exec',
            data=exec_config,
            not_found=ContainerNotFound
        )
        logger.debug(f"Created exec {result['Id'][:12]} in {container_id}")
        return ExecInstance(result['Id'], self)

    def get(self, exec_id: str) -> ExecInstance:
        return ExecInstance(exec_id, self)

    def start(self, exec_id: str, tty: bool = False):
        """Start exec instance detached; output is not collected"""
        start_config = {'Detach': True, 'Tty': tty}
        self.client.http.post(f'/exec/{exec_id}/start', data=start_config,
                              not_found=ExecNotFound)

    def inspect(self, exec_id: str) -> Dict[str, Any]:
        return self.client.http.get(f'/exec/{exec_id}/json', not_found=ExecNotFound)
