"""CLI entry point for cephmeta."""

import argparse
import json
import logging
import sys
import xml.etree.ElementTree as ET
from pathlib import Path

import httpx

from cephmeta.bucket import Bucket
from cephmeta.config import load_config
from cephmeta.errors import CephMetaError
from cephmeta.logging_config import configure_logging
from cephmeta.meta import lookup
from cephmeta.metrics import init_metrics


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        argv: Argument list to parse. Defaults to sys.argv[1:].

    Returns:
        Parsed argument namespace.
    """
    parser = argparse.ArgumentParser(
        prog="cephmeta",
        description="Look up size, content type and access level of RGW objects",
    )
    parser.add_argument(
        "urls",
        nargs="+",
        metavar="URL",
        help="Fully qualified object URL(s)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=Path("cephmeta.yaml"),
        help="Path to YAML configuration file (default: cephmeta.yaml)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides config, default: INFO)",
    )
    parser.add_argument(
        "--log-format",
        type=str,
        default=None,
        choices=["text", "json"],
        help="Log format: 'text' (human-readable) or 'json' (structured)",
    )
    return parser.parse_args(argv)


def describe(url: str, bucket: Bucket) -> dict:
    """Look up one URL and return a JSON-ready result, closing the body."""
    try:
        fmeta = lookup(url, bucket)
    except CephMetaError as exc:
        return {"url": url, "error": exc.code, "message": exc.message}
    except (httpx.HTTPError, ET.ParseError) as exc:
        return {"url": url, "error": type(exc).__name__, "message": str(exc)}

    with fmeta:
        return {
            "url": url,
            "key": fmeta.key,
            "filesize": fmeta.filesize,
            "mimetype": fmeta.mimetype,
            "acl": fmeta.acl.value,
        }


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the cephmeta CLI.

    Prints one JSON object per URL to stdout.

    Args:
        argv: Argument list to parse. Defaults to sys.argv[1:].

    Returns:
        0 if every lookup succeeded, 1 otherwise.
    """
    args = parse_args(argv)

    # Basic stderr logger for config-loading errors
    logging.basicConfig(level=logging.INFO, stream=sys.stderr)
    logger = logging.getLogger("cephmeta")

    try:
        config = load_config(args.config)
    except FileNotFoundError:
        logger.error("Config file not found: %s", args.config)
        return 1
    except Exception as exc:
        logger.error("Failed to load config: %s", exc)
        return 1

    if args.log_level is not None:
        config.logging.level = args.log_level
    if args.log_format is not None:
        config.logging.format = args.log_format

    configure_logging(
        level=config.logging.level,
        fmt=config.logging.format,
        library_level=config.logging.library_level,
    )

    if config.metrics:
        init_metrics()

    failed = False
    with Bucket.from_config(config.bucket, config.client) as bucket:
        for url in args.urls:
            result = describe(url, bucket)
            if "error" in result:
                failed = True
                logger.warning("Lookup failed for %s: %s", url, result["error"])
            print(json.dumps(result))

    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
