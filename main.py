#!/usr/bin/env python3
"""
unixdock
Application entry point
"""

import sys

from unixdock.cli import run_cli


def main():
    """Main function"""
    sys.exit(run_cli(sys.argv[1:]))


if __name__ == "__main__":
    main()
