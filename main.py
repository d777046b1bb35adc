"""KalturaBridge command line interface."""

import argparse
import json
import sys

from pydantic import BaseModel, ValidationError

from kalturabridge import __version__, log
from kalturabridge.config.settings import get_config
from kalturabridge.core.manager import KalturaManager
from kalturabridge.exceptions import KalturaBridgeError
from kalturabridge.models.entry import EntryUpdate
from kalturabridge.utils.terminal import supports_utf8

KALTURABRIDGE_HEADER = (
    f"KalturaBridge {__version__}" + (" ·" if supports_utf8() else " -") + " "
    "Kaltura media management"
)


def _parse_fields(pairs: list[str]) -> dict[str, str]:
    """Parse ``NAME=VALUE`` arguments into a mapping."""
    fields: dict[str, str] = {}
    for pair in pairs:
        name, sep, value = pair.partition("=")
        if not sep or not name:
            raise argparse.ArgumentTypeError(f"Expected NAME=VALUE, got '{pair}'")
        fields[name] = value
    return fields


def _print(result: object) -> None:
    if isinstance(result, BaseModel):
        result = result.model_dump(mode="json", by_alias=True)
    elif isinstance(result, list):
        result = [
            item.model_dump(mode="json", by_alias=True)
            if isinstance(item, BaseModel)
            else item
            for item in result
        ]
    print(json.dumps(result, indent=2, ensure_ascii=False, default=str))


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with one subcommand per operation."""
    parser = argparse.ArgumentParser(description="Manage media on Kaltura.")
    parser.add_argument(
        "--version", action="version", version=f"KalturaBridge {__version__}"
    )
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("channels", help="List the publishable channels")
    commands.add_parser("providers", help="List the allowed metadata providers")

    for name, help_text in (
        ("retrieve", "Show an entry with its channel and metadata"),
        ("metadata-get", "Show the custom metadata of an entry"),
        ("remove", "Delete an entry"),
        ("ready", "Check whether an entry finished transcoding"),
        ("thumbnails", "List the thumbnails of an entry"),
        ("download-url", "Show the source download URL of an entry"),
    ):
        command = commands.add_parser(name, help=help_text)
        command.add_argument("entry_id", help="Kaltura entry id")

    metadata_set = commands.add_parser(
        "metadata-set", help="Replace the custom metadata of an entry"
    )
    metadata_set.add_argument("entry_id", help="Kaltura entry id")
    metadata_set.add_argument("fields", nargs="+", help="Fields as NAME=VALUE")

    publish = commands.add_parser("publish", help="Upload and publish a video file")
    publish.add_argument("path", help="Path of the video file")

    return parser


def run(args: argparse.Namespace, manager: KalturaManager) -> object:
    """Dispatch a parsed command to the manager and return its result."""
    match args.command:
        case "channels":
            return manager.get_channels()
        case "providers":
            return manager.get_provider_list()
        case "retrieve":
            return manager.retrieve(args.entry_id)
        case "metadata-get":
            return manager.get_metadata(args.entry_id)
        case "metadata-set":
            client = manager.session.open()
            return manager.metadata.update_metadata(
                client, _parse_fields(args.fields), args.entry_id
            )
        case "remove":
            return manager.remove(args.entry_id)
        case "ready":
            return manager.is_video_ready(args.entry_id)
        case "thumbnails":
            return manager.get_video_thumbnail_list(args.entry_id)
        case "download-url":
            return manager.get_download_url(args.entry_id)
        case "publish":
            return manager.publish(args.path)
    raise ValueError(f"Unknown command '{args.command}'")


def main(argv: list[str] | None = None) -> int:
    """Main entry point.

    Args:
        argv (list[str] | None): Command-line arguments, defaults to sys.argv.

    Returns:
        int: Exit code (0 for success, 1 for error)
    """
    args = build_parser().parse_args(argv)

    try:
        config = get_config()
    except ValidationError as e:
        log.error(f"KalturaBridge: Configuration validation error: {e}")
        return 1

    log.setup(config.log_level, config.data_path / "logs")
    log.debug(KALTURABRIDGE_HEADER)
    log.debug(str(config))

    try:
        with KalturaManager(config) as manager:
            _print(run(args, manager))
    except argparse.ArgumentTypeError as e:
        log.error(f"KalturaBridge: {e}")
        return 1
    except KalturaBridgeError as e:
        log.error(f"KalturaBridge: {type(e).__name__}: {e}")
        return 1
    except (OSError, PermissionError) as e:
        log.error(f"KalturaBridge: File system error: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
