"""CLI entrypoint running a single download or upload sync flow."""

from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path
from typing import Optional, Sequence

from dotenv import load_dotenv
from pydantic import ValidationError

from .config import Settings, get_settings
from .errors import PartialUploadFailure, SyncError
from .logging_handlers import DateStampedFileHandler, cleanup_old_logs
from .storage import OutlineFile
from .sync.service import SyncService
from .todoist import TodoistClient

logger = logging.getLogger("orgsync")

_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(settings: Optional[Settings] = None) -> None:
    """Configure console logging plus an optional per-run log file."""

    log_level_str = (settings.log_level if settings else "INFO").upper()
    log_level = getattr(logging, log_level_str, logging.INFO)

    formatter = logging.Formatter(_LOG_FORMAT, datefmt=_DATE_FORMAT)
    handlers: list[logging.Handler] = []

    if settings is not None and settings.log_dir is not None:
        file_handler = DateStampedFileHandler(settings.log_dir)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    handlers.append(console_handler)

    logging.basicConfig(level=log_level, handlers=handlers, force=True)
    logger.setLevel(log_level)

    # httpx logs every request at INFO
    quiet_level = log_level if log_level <= logging.DEBUG else logging.WARNING
    logging.getLogger("httpx").setLevel(quiet_level)
    logging.getLogger("httpcore").setLevel(quiet_level)

    if settings is not None and settings.log_dir is not None:
        cleanup_old_logs(settings.log_dir, settings.log_retention_hours, logger)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="orgsync",
        description="Sync an Org outline file with Todoist.",
    )
    parser.add_argument(
        "--outline",
        type=Path,
        default=None,
        help="Outline file to sync (defaults to ORGSYNC_OUTLINE or todoist.org)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser(
        "download", help="Replace the outline with the projects and tasks on Todoist"
    )
    subparsers.add_parser(
        "upload", help="Create Todoist tasks for outline tasks without an ID"
    )
    return parser


async def run(command: str, settings: Settings, outline: Path) -> None:
    storage = OutlineFile(outline)
    async with TodoistClient(settings) as client:
        service = SyncService(client, storage, write_back_ids=settings.write_back_ids)
        if command == "download":
            result = await service.download()
            logger.info("Outline %s now holds %d task(s)", outline, len(result.tasks))
        else:
            upload = await service.upload()
            logger.info("Created %d task(s)", len(upload.created))


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    load_dotenv()

    try:
        settings = get_settings()
    except ValidationError as exc:
        configure_logging()
        logger.error("Invalid configuration: %s", exc)
        return 1

    configure_logging(settings)
    outline = args.outline or settings.outline_path

    try:
        asyncio.run(run(args.command, settings, outline))
    except PartialUploadFailure as exc:
        for entry in exc.created:
            logger.info("Created %r as %s", entry.local.content, entry.remote.id)
        for failure in exc.failures:
            logger.error("Failed to create %r: %s", failure.content, failure.error)
        return 1
    except SyncError as exc:
        logger.error("%s failed: %s", args.command.capitalize(), exc)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
