#!/usr/bin/env python3
"""CLI entrypoint for the Teardown API scraper."""
from __future__ import annotations

import argparse
import logging
from pathlib import Path

import requests

from teardown_api.scraper import fetch, parser, storage
from teardown_api.scraper.parser import ApiDocument, VersionNotFoundError

EXIT_OK = 0
EXIT_UP_TO_DATE = 1
EXIT_ERROR = 2


class ScraperSettings:
    def __init__(
        self,
        url: str | None = None,
        output: str | None = None,
        timeout: float | None = None,
    ) -> None:
        self.url = fetch.resolve_url(url)
        self.output_dir = storage.resolve_output_dir(output)
        self.timeout = fetch.resolve_timeout(timeout)


logger = logging.getLogger("teardown_api.scraper.cli")


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="[%(levelname)s] %(message)s",
    )


def load_document(settings: ScraperSettings, input_path: str | None) -> ApiDocument:
    if input_path:
        logger.info("Reading %s", input_path)
        text = fetch.read_document(Path(input_path).expanduser())
    else:
        text = fetch.fetch_document(settings.url, timeout=settings.timeout)
    return parser.parse_document(text)


def command_scrape(args: argparse.Namespace) -> int:
    settings = ScraperSettings(args.url, args.output, args.timeout)
    document = load_document(settings, args.input)
    logger.info(
        "Parsed version %s: %d categories, %d functions",
        document.version,
        len(document.categories),
        len(document.functions),
    )
    if not storage.output_data(settings.output_dir, document, force=args.force):
        logger.info("Up to date")
        return EXIT_UP_TO_DATE
    logger.info("Scraping completed successfully.")
    return EXIT_OK


def command_check(args: argparse.Namespace) -> int:
    settings = ScraperSettings(args.url, args.output, args.timeout)
    document = load_document(settings, args.input)
    local_version = storage.load_local_version(settings.output_dir)
    print_category_table(document)
    print(f"\nFunctions: {len(document.functions)}")
    print("Remote version:", document.version)
    print("Local version:", local_version or "none")
    if local_version == document.version:
        print("Status: up to date")
    else:
        print("Status: update available")
    return EXIT_OK


def print_category_table(document: ApiDocument) -> None:
    print("Category".ljust(40), "Entries".ljust(8), "Tables")
    print("-" * 60)
    for category in document.categories:
        print(
            category.name.ljust(40),
            str(len(category.entries)).ljust(8),
            str(len(category.tables)),
        )


def positive_float(value: str) -> float:
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number: {value}") from None
    if not number > 0:
        raise argparse.ArgumentTypeError(f"must be greater than 0: {value}")
    return number


def add_input_argument(subparser: argparse.ArgumentParser) -> None:
    subparser.add_argument(
        "--input",
        help="Parse a saved copy of the manual instead of downloading it",
    )


def build_parser() -> argparse.ArgumentParser:
    parser_obj = argparse.ArgumentParser(description="Scrape the Teardown scripting API manual")
    parser_obj.add_argument("--url", help="Manual URL (overrides TEARDOWN_API_URL)")
    parser_obj.add_argument("--output", help="Output directory (overrides TEARDOWN_API_OUTPUT)")
    parser_obj.add_argument(
        "--timeout",
        type=positive_float,
        help="HTTP timeout in seconds (overrides TEARDOWN_API_TIMEOUT)",
    )
    parser_obj.add_argument("--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser_obj.add_subparsers(dest="command")

    scrape_parser = subparsers.add_parser("scrape", help="Scrape the manual and write the API file")
    add_input_argument(scrape_parser)
    scrape_parser.add_argument(
        "--force",
        action="store_true",
        help="Write output even when the stored version is current",
    )
    scrape_parser.set_defaults(func=command_scrape)

    check_parser = subparsers.add_parser("check", help="Dry-run version and category check")
    add_input_argument(check_parser)
    check_parser.set_defaults(func=command_check)

    return parser_obj


def main(argv: list[str] | None = None) -> int:
    parser_obj = build_parser()
    args = parser_obj.parse_args(argv)
    if not getattr(args, "command", None):
        parser_obj.print_help()
        return EXIT_OK
    configure_logging(args.verbose)
    try:
        return int(args.func(args))
    except (requests.RequestException, VersionNotFoundError, OSError) as exc:
        logger.error("Error while scraping: %s", exc)
        return EXIT_ERROR


if __name__ == "__main__":
    raise SystemExit(main())
