"""CLI interface for repowatch.

Usage:
    python -m repowatch available SUBJECT REPO PACKAGE VERSION PATH [--file F]
    python -m repowatch indexed SUBJECT REPO PACKAGE VERSION PATH --file F
"""

import argparse
import sys
from typing import List, Optional

import yaml

from .client import Client
from .common.config import RepoWatchConfig, load_typed_config
from .common.logger import setup_logger
from .content import Content
from .errors import RepoWatchError
from .repos.base import ContentIdentity


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="repowatch",
        description="Wait for uploaded content to converge on the repository service",
    )
    parser.add_argument("--config", help="Path to a YAML configuration file")
    parser.add_argument("--log-level", help="Override the configured log level")

    subparsers = parser.add_subparsers(dest="command", required=True)

    available = subparsers.add_parser(
        "available", help="Wait until the download mirror serves the content"
    )
    indexed = subparsers.add_parser(
        "indexed", help="Wait until the repository index lists the content"
    )

    for subparser in (available, indexed):
        subparser.add_argument("subject", help="User or organization")
        subparser.add_argument("repository", help="Repository name")
        subparser.add_argument("package", help="Package name")
        subparser.add_argument("version", help="Version name")
        subparser.add_argument("path", help="Path of the file in the repository")
        subparser.add_argument(
            "--file", help="Local copy of the upload, used to compute checksums"
        )
        subparser.add_argument(
            "--timeout", type=float, help="Time budget in seconds"
        )

    indexed.add_argument(
        "--distribution", action="append", default=[], help="Debian distribution"
    )
    indexed.add_argument(
        "--component", action="append", default=[], help="Debian component"
    )
    indexed.add_argument(
        "--architecture", action="append", default=[], help="Debian architecture"
    )

    return parser


def run(args: argparse.Namespace, config: RepoWatchConfig, client: Client) -> None:
    """Run one subcommand.

    Raises:
        RepoWatchError: If the content did not converge
    """
    identity = ContentIdentity(
        args.subject, args.repository, args.package, args.version, args.path
    )

    if args.command == "available":
        content = Content(
            client,
            identity,
            availability_interval=config.wait.availability_interval,
        )
        if args.file:
            content.set_checksum_from_file(args.file)
        timeout = args.timeout if args.timeout is not None else config.wait.availability_timeout
        checksum = content.wait_for_availability(timeout)
        print(f"Content: {content}")
        print("Status: available")
        print(f"SHA-256: {checksum.sha256_hex}")
        return

    content = Content.resolve(
        client,
        identity,
        debian_targets=config.debian_targets,
        indexation_interval=config.wait.indexation_interval,
    )
    if args.file:
        content.set_checksum_from_file(args.file)
    if args.distribution or args.component or args.architecture:
        content.set_debian_targets(
            args.distribution, args.component, args.architecture
        )
    timeout = args.timeout if args.timeout is not None else config.wait.indexation_timeout
    content.wait_for_indexation(timeout)
    print(f"Content: {content}")
    print(f"Repository type: {content.kind.value}")
    print("Status: indexed")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for repowatch CLI."""
    args = build_parser().parse_args(argv)

    try:
        config = load_typed_config(args.config)
    except (FileNotFoundError, TypeError, ValueError, yaml.YAMLError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        setup_logger(
            log_dir=config.logging.log_dir,
            level=args.log_level or config.logging.level,
            file_logging=config.logging.file_logging,
        )
    except (ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    with Client.from_config(config.client) as client:
        try:
            run(args, config, client)
        except (RepoWatchError, OSError) as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
