"""
Command line entry point.

Usage:
    gmail-downloader download LABEL [-o DIR] [--no-overwrite]
    gmail-downloader labels
    gmail-downloader auth

credentials.json and token.json are read from $GDOWN_HOME, or from the
current directory when it is unset.
"""

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

from pydantic import ValidationError

from gmail_downloader import __version__
from gmail_downloader.config.settings import AppConfig, Settings, get_settings
from gmail_downloader.exceptions import DownloaderError
from gmail_downloader.services.downloader import AttachmentDownloader
from gmail_downloader.services.gmail_client import init_service
from gmail_downloader.services.label_resolver import list_labels
from gmail_downloader.utils.logging import configure_logging, get_logger

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gmail-downloader",
        description="Download the attachments of Gmail messages under a label.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    download = subparsers.add_parser("download", help="download attachments of a label")
    download.add_argument("label", help="label name, matched exactly (case-sensitive)")
    download.add_argument(
        "-o",
        "--output",
        type=Path,
        default=Path("."),
        help="directory the attachments are written to (default: current directory)",
    )
    download.add_argument(
        "--no-overwrite",
        action="store_true",
        help="leave attachments that already exist in the output directory untouched",
    )

    subparsers.add_parser("labels", help="list the labels of the account")
    subparsers.add_parser("auth", help="authorize and cache the OAuth token")
    return parser


def run_download(args: argparse.Namespace, settings: Settings) -> None:
    client = init_service(settings.gmail)
    downloader = AttachmentDownloader(
        client,
        file_mode=settings.gmail.file_mode,
        max_results=settings.gmail.max_results,
    )
    report = downloader.download(args.label, args.output, overwrite=not args.no_overwrite)
    print(
        f"{len(report.written)} attachment(s) written, "
        f"{len(report.skipped)} skipped, from {report.messages} message(s)"
    )


def run_labels(args: argparse.Namespace, settings: Settings) -> None:
    client = init_service(settings.gmail)
    for label in list_labels(client):
        print(f"{label.name}\t{label.id}")


def run_auth(args: argparse.Namespace, settings: Settings) -> None:
    init_service(settings.gmail)
    print(f"Authorized, token cached in {settings.gmail.token_path}")


COMMANDS = {
    "download": run_download,
    "labels": run_labels,
    "auth": run_auth,
}


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = get_settings()
    except ValidationError as e:
        configure_logging(AppConfig.model_construct())
        logger.error("Invalid configuration", command=args.command, error=str(e))
        return 1

    configure_logging(settings.app)

    try:
        COMMANDS[args.command](args, settings)
    except DownloaderError as e:
        logger.error("Run failed", command=args.command, error=str(e))
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 130

    return 0


if __name__ == "__main__":
    sys.exit(main())
