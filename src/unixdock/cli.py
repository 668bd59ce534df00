"""
CLI - command line interface
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from .exceptions import DockerException
from .settings import SettingsManager

logger = logging.getLogger(__name__)


class DockerCLI:
    """Command line front end over DockerClient"""

    def __init__(self, client):
        self.client = client

    def _print_json(self, data):
        print(json.dumps(data, indent=2, sort_keys=True))

    def ping(self):
        print(self.client.ping())

    def version(self):
        self._print_json(self.client.version())

    def info(self):
        self._print_json(self.client.info())

    def list_containers(self, all_containers: bool = False):
        """List containers"""
        containers = self.client.containers.list(all=all_containers)

        if not containers:
            logger.info("No containers found")
            return

        print(f"{'NAME':<30} {'STATUS':<15} {'IMAGE':<40} {'ID':<15}")
        print("-" * 100)
        for c in containers:
            print(f"{c.name:<30} {c.status:<15} {c.image:<40} {c.short_id:<15}")

        print(f"\nTotal: {len(containers)}")

    def list_images(self):
        images = self.client.images.list()

        if not images:
            logger.info("No images found")
            return

        print(f"{'TAG':<50} {'ID':<15} {'SIZE (MB)':>10}")
        print("-" * 77)
        for image in images:
            tag = image.tags[0] if image.tags else '<none>'
            print(f"{tag:<50} {image.short_id:<15} {image.size / 1e6:>10.1f}")

    def list_networks(self):
        networks = self.client.networks.list()

        if not networks:
            logger.info("No networks found")
            return

        print(f"{'NAME':<30} {'DRIVER':<15} {'SCOPE':<10} {'ID':<15}")
        print("-" * 73)
        for network in networks:
            driver = network.attrs.get('Driver', 'unknown')
            scope = network.attrs.get('Scope', 'local')
            print(f"{network.name:<30} {driver:<15} {scope:<10} {network.id[:12]:<15}")

    def list_volumes(self):
        volumes = self.client.volumes.list()

        if not volumes:
            logger.info("No volumes found")
            return

        print(f"{'NAME':<40} {'DRIVER':<15}")
        print("-" * 56)
        for volume in volumes:
            print(f"{volume.name:<40} {volume.driver:<15}")


def resolve_log_level(value) -> Optional[int]:
    """Map a log_level setting such as 'debug' or 20 to a logging level, None if unknown"""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    level = logging.getLevelName(str(value).strip().upper())
    return level if isinstance(level, int) else None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='unixdock',
        description='Talk to the Docker daemon over its Unix socket',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Usage examples:
  %(prog)s ping                                    # Check the daemon answers
  %(prog)s ps -a                                   # List all containers
  %(prog)s --socket /run/user/1000/docker.sock images
"""
    )

    parser.add_argument('--socket', help='Docker socket path (default: auto-detect)')
    parser.add_argument('--timeout', type=float, help='Socket timeout in seconds')
    parser.add_argument('--api-version', help='Pin the API version, e.g. 1.43')
    parser.add_argument('--config', help='Settings file to load')
    parser.add_argument('--debug', action='store_true', help='Log every HTTP exchange')

    subparsers = parser.add_subparsers(dest='action', required=True)
    subparsers.add_parser('ping', help='Ping the daemon')
    subparsers.add_parser('version', help='Show daemon version')
    subparsers.add_parser('info', help='Show daemon information')
    ps = subparsers.add_parser('ps', help='List containers')
    ps.add_argument('-a', '--all', action='store_true', help='Show all containers')
    subparsers.add_parser('images', help='List images')
    subparsers.add_parser('networks', help='List networks')
    subparsers.add_parser('volumes', help='List volumes')

    return parser


def run_cli(argv: Optional[List[str]] = None) -> int:
    """Start CLI application; returns the process exit code"""
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = SettingsManager(args.config)
    level_name = settings.get('log_level', 'INFO')
    level = logging.DEBUG if args.debug else resolve_log_level(level_name)
    logging.basicConfig(level=level or logging.INFO, format='%(message)s')
    if level is None:
        logger.warning(f"Unknown log_level {level_name!r} in settings, using INFO")

    try:
        client = settings.create_client(
            base_url=args.socket,
            timeout=args.timeout,
            api_version=args.api_version,
        )
        cli = DockerCLI(client)

        if args.action == 'ping':
            cli.ping()
        elif args.action == 'version':
            cli.version()
        elif args.action == 'info':
            cli.info()
        elif args.action == 'ps':
            cli.list_containers(all_containers=args.all)
        elif args.action == 'images':
            cli.list_images()
        elif args.action == 'networks':
            cli.list_networks()
        elif args.action == 'volumes':
            cli.list_volumes()

    except KeyboardInterrupt:
        logger.info("\nInterrupted by user")
        return 130
    except DockerException as e:
        logger.error(f"Error: {e}")
        return 1

    return 0


def main():
    sys.exit(run_cli())


if __name__ == "__main__":
    main()
