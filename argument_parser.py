#!/usr/bin/env python3
"""Command line argument parsing and configuration building."""

from __future__ import annotations

import argparse
import dataclasses
import os
import sys
from typing import List, Optional

from config import (DEFAULT_CONFIG_FILE, Config, RunOptions,
                    load_configuration)
from errors import ConfigError
from logging_utils import Logger
from security import SecurityValidator

# Exit codes
EXIT_AUTH_ERROR = 40
EXIT_CONFIG_ERROR = 2

SOURCE_TOKEN_ENV = "SOURCE_GITHUB_TOKEN"
TARGET_TOKEN_ENV = "TARGET_GITHUB_TOKEN"


def _create_argument_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        description=(
            "Migrate the repositories of a GitHub organization to another "
            "GitHub or GitHub Enterprise organization"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s
  %(prog)s --config migration.yml --dry-run
  %(prog)s --limit 1
        """,
    )
    parser.add_argument(
        "-c",
        "--config",
        dest="config",
        default=DEFAULT_CONFIG_FILE,
        help=f"YAML configuration file (default: {DEFAULT_CONFIG_FILE})",
    )
    parser.add_argument(
        "-d",
        "--dry-run",
        action="store_true",
        dest="dry_run",
        help="List the repositories that would be migrated and stop",
    )
    parser.add_argument(
        "--limit",
        dest="limit",
        type=int,
        help="Process at most this many repositories",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        dest="quiet",
        help="Hide debug output",
    )
    return parser


def _validate_config(cfg: Config) -> None:
    """Validate organizations, URLs and paths; raises ValueError."""
    SecurityValidator.validate_org_name(cfg.source.organization)
    SecurityValidator.validate_org_name(cfg.target.organization)
    for endpoint in (cfg.source, cfg.target):
        if endpoint.url:
            SecurityValidator.validate_url(endpoint.url, ["https", "http"])
        if endpoint.ca_bundle and not os.path.isfile(endpoint.ca_bundle):
            raise ValueError(f"CA bundle not found: {endpoint.ca_bundle}")
        if endpoint.ca_bundle and endpoint.insecure:
            raise ValueError("ca_bundle and insecure are mutually exclusive")
    for name in cfg.source.ignore:
        SecurityValidator.validate_repo_name(name)
    if cfg.source.content.path:
        SecurityValidator.validate_content_path(cfg.source.content.path)


def _with_tokens(cfg: Config) -> Config:
    """Fill empty tokens from the environment and require both."""
    source_token = cfg.source.token or os.getenv(SOURCE_TOKEN_ENV, "")
    target_token = cfg.target.token or os.getenv(TARGET_TOKEN_ENV, "")
    if not source_token:
        Logger.error(
            f"error: source token not provided (use source.token or {SOURCE_TOKEN_ENV})"
        )
        sys.exit(EXIT_AUTH_ERROR)
    if not target_token:
        Logger.error(
            f"error: target token not provided (use target.token or {TARGET_TOKEN_ENV})"
        )
        sys.exit(EXIT_AUTH_ERROR)

    return dataclasses.replace(
        cfg,
        source=dataclasses.replace(cfg.source, token=source_token),
        target=dataclasses.replace(cfg.target, token=target_token),
    )


def parse_arguments(argv: Optional[List[str]] = None) -> Config:
    """Parse command line arguments, load the YAML file and return the configuration."""
    parser = _create_argument_parser()
    args = parser.parse_args(argv)

    if args.limit is not None and args.limit < 1:
        parser.error("--limit must be a positive integer")
    Logger.verbose = not args.quiet

    options = RunOptions(dry_run=args.dry_run, limit=args.limit)
    try:
        cfg = load_configuration(args.config, options)
    except ConfigError as e:
        Logger.error(f"configuration error: {e}")
        sys.exit(EXIT_CONFIG_ERROR)

    try:
        _validate_config(cfg)
    except ValueError as e:
        Logger.security_event(
            "CONFIG_VALIDATION_FAILED", f"configuration validation failed: {e}"
        )
        Logger.error(f"configuration validation error: {e}")
        sys.exit(EXIT_CONFIG_ERROR)

    return _with_tokens(cfg)
