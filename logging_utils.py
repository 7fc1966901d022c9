#!/usr/bin/env python3
"""Logging utilities for gh-org-migrate."""

import os
import sys
import time

import colorama

from security import SecurityValidator

colorama.init(autoreset=True)


class Logger:
    """Colored console output with credential redaction and key=value fields.

    Every method takes free-form message parts plus keyword fields, e.g.
    ``Logger.info("cloning the repository", url=ssh_url)`` renders as
    ``[gh-org-migrate:123] cloning the repository url=git@host:org/repo.git``.
    """

    PROCESS_NAME = "gh-org-migrate"
    verbose = True

    @classmethod
    def debug(cls, *messages: object, **fields: object) -> None:
        if not cls.verbose:
            return
        cls._write_stdout(colorama.Fore.LIGHTBLACK_EX, *messages, **fields)

    @classmethod
    def info(cls, *messages: object, **fields: object) -> None:
        cls._write_stdout(colorama.Fore.CYAN, *messages, **fields)

    @classmethod
    def warn(cls, *messages: object, **fields: object) -> None:
        cls._write_stdout(colorama.Fore.YELLOW, *messages, **fields)

    @classmethod
    def error(cls, *messages: object, **fields: object) -> None:
        cls._write_stderr(colorama.Fore.RED, *messages, **fields)

    @classmethod
    def security_event(cls, event_type: str, details: str) -> None:
        """Log security events with appropriate sanitization."""
        timestamp = time.strftime("%Y-%m-%d %H:%M:%S")
        cls._write_stderr(
            colorama.Fore.MAGENTA,
            f"[SECURITY:{event_type}] {timestamp}: {details}",
        )

    @classmethod
    def _write_stdout(cls, color: str, *messages: object, **fields: object) -> None:
        sys.stdout.write(cls._format_line(color, *messages, **fields) + "\n")

    @classmethod
    def _write_stderr(cls, color: str, *messages: object, **fields: object) -> None:
        sys.stderr.write(cls._format_line(color, *messages, **fields) + "\n")

    @classmethod
    def _get_header(cls) -> str:
        return f"[{cls.PROCESS_NAME}:{os.getpid()}]"

    @classmethod
    def _format_fields(cls, fields: dict) -> str:
        return " ".join(f"{key}={value}" for key, value in fields.items())

    @classmethod
    def _format_line(cls, color: str, *messages: object, **fields: object) -> str:
        header = cls._get_header()
        message = " ".join(str(m) for m in messages)
        if fields:
            message = f"{message} {cls._format_fields(fields)}".strip()
        message = SecurityValidator.sanitize_for_logging(message)
        return f"{color}{header}{colorama.Style.RESET_ALL} {message}"
