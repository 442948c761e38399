"""
Homonym Collector CLI.
"""

import argparse

from homonyms.cli.commands import collection, homonym, seed, word
from homonyms.core.logging_config import configure_logging


def main():
    parser = argparse.ArgumentParser(prog="homonyms", description="Homonym Collector CLI")
    parser.add_argument("--local", action="store_true", help="Use the local store instead of the API")
    parser.add_argument("--log-level", help="Logging level (default: HOMONYMS_LOG_LEVEL or INFO)")
    subparsers = parser.add_subparsers(dest="command")

    collection.add_subparser(subparsers)
    homonym.add_subparser(subparsers)
    word.add_subparser(subparsers)
    seed.add_subparser(subparsers)

    args = parser.parse_args()
    configure_logging(args.log_level)

    if hasattr(args, "func"):
        args.func(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
