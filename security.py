#!/usr/bin/env python3
"""Security validation utilities for gh-org-migrate."""

import os
import re
from typing import List, Optional
from urllib.parse import urlparse


class SecurityValidator:
    """Input validation and log sanitization helpers."""

    MAX_REPO_NAME_LENGTH = 100
    MAX_ORG_NAME_LENGTH = 39
    MAX_URL_LENGTH = 2048
    MAX_PATH_LENGTH = 500

    SAFE_REPO_NAME_PATTERN = re.compile(r"^[A-Za-z0-9._-]+$")
    # GitHub logins: alphanumerics and single inner hyphens
    SAFE_ORG_NAME_PATTERN = re.compile(r"^[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?$")
    SCP_LIKE_SSH_PATTERN = re.compile(r"^[A-Za-z0-9._-]+@[A-Za-z0-9.-]+:[^\s]+$")

    @staticmethod
    def _has_control_chars(value: str) -> bool:
        return "\x00" in value or any(ord(c) < 32 for c in value)

    @classmethod
    def validate_repo_name(cls, name: str) -> str:
        """Validate a repository name before it is used as a path segment."""
        if not name or not isinstance(name, str):
            raise ValueError("Repository name must be a non-empty string")

        if len(name) > cls.MAX_REPO_NAME_LENGTH:
            raise ValueError(
                f"Repository name exceeds maximum length of {cls.MAX_REPO_NAME_LENGTH}"
            )

        if ".." in name or "/" in name or "\\" in name:
            raise ValueError("Repository name contains invalid path characters")

        if cls._has_control_chars(name):
            raise ValueError(
                "Repository name contains null bytes or control characters"
            )

        if not cls.SAFE_REPO_NAME_PATTERN.match(name):
            raise ValueError("Repository name contains invalid characters")

        return name

    @classmethod
    def validate_org_name(cls, org: str) -> str:
        """Validate an organization login."""
        if not org or not isinstance(org, str):
            raise ValueError("Organization name must be a non-empty string")

        if len(org) > cls.MAX_ORG_NAME_LENGTH:
            raise ValueError(
                f"Organization name exceeds maximum length of {cls.MAX_ORG_NAME_LENGTH}"
            )

        if not cls.SAFE_ORG_NAME_PATTERN.match(org) or "--" in org:
            raise ValueError("Organization name contains invalid characters")

        return org

    @classmethod
    def validate_url(cls, url: str, allowed_schemes: Optional[List[str]] = None) -> str:
        """Validate an API or git URL.

        Accepts ``http(s)://`` and ``ssh://`` URLs as well as scp-like
        ``git@host:org/repo.git`` addresses, which are reported as ``ssh``.
        """
        if not url or not isinstance(url, str):
            raise ValueError("URL must be a non-empty string")

        if len(url) > cls.MAX_URL_LENGTH:
            raise ValueError(f"URL exceeds maximum length of {cls.MAX_URL_LENGTH}")

        if cls._has_control_chars(url) or any(c.isspace() for c in url):
            raise ValueError("URL contains whitespace or control characters")

        if cls.SCP_LIKE_SSH_PATTERN.match(url) and "://" not in url:
            scheme = "ssh"
        else:
            parsed = urlparse(url)
            scheme = parsed.scheme.lower()
            if scheme not in ("http", "https", "ssh"):
                raise ValueError("URL must use http, https or ssh scheme")
            if not parsed.netloc:
                raise ValueError(f"URL has no host: {url}")

        if allowed_schemes and scheme not in allowed_schemes:
            raise ValueError(
                f"URL scheme '{scheme}' not in allowed schemes: {allowed_schemes}"
            )

        return url

    @classmethod
    def validate_file_path(cls, path: str) -> str:
        """Validate a local file or directory path and return it normalized."""
        if not path or not isinstance(path, str):
            raise ValueError("File path must be a non-empty string")

        if len(path) > cls.MAX_PATH_LENGTH:
            raise ValueError(
                f"File path exceeds maximum length of {cls.MAX_PATH_LENGTH}"
            )

        if "\x00" in path:
            raise ValueError("File path contains null bytes")

        return os.path.normpath(os.path.expanduser(path))

    @classmethod
    def validate_content_path(cls, path: str) -> str:
        """Validate a repository-relative file path (e.g. README.md)."""
        if not path or not isinstance(path, str):
            raise ValueError("Content path must be a non-empty string")

        if cls._has_control_chars(path):
            raise ValueError("Content path contains null bytes or control characters")

        if path.startswith("/") or ".." in path.split("/"):
            raise ValueError("Content path must be relative to the repository root")

        return path

    @classmethod
    def sanitize_for_logging(cls, message: str) -> str:
        """Sanitize message for safe logging by removing potential credentials."""
        if not message:
            return message

        patterns = [
            (r"https://[^:/@\s]+:[^@\s]+@", "https://[REDACTED]@"),
            (r"(bearer\s+|token\s*[=:]\s*)[^\s]+", r"\1[REDACTED]"),
            (r"password\s*[=:]\s*[^\s]+", "password=[REDACTED]"),
            (r"gh[pousr]_[A-Za-z0-9_]+", "[GITHUB_TOKEN_REDACTED]"),
            (r"github_pat_[A-Za-z0-9_]+", "[GITHUB_TOKEN_REDACTED]"),
        ]

        sanitized = message
        for pattern, replacement in patterns:
            sanitized = re.sub(pattern, replacement, sanitized, flags=re.IGNORECASE)

        return sanitized
