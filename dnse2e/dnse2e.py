#!/usr/bin/env python3
"""ExternalDNS e2e infrastructure tools: CLI entrypoint."""

import argparse

from dnse2e.commands.infra import register_infra_command
from dnse2e.logging_setup import setup_cli_logging


def main():
    parser = argparse.ArgumentParser(description="ExternalDNS e2e infrastructure tools")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging, including Azure SDK and HTTP")
    subparsers = parser.add_subparsers(dest="command", required=True)

    register_infra_command(subparsers)

    args = parser.parse_args()
    setup_cli_logging(verbose=args.verbose)
    args.func(args)


if __name__ == "__main__":
    main()
