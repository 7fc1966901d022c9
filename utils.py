#!/usr/bin/env python3
"""Utility functions for gh-org-migrate."""

from __future__ import annotations

import threading
import time
from typing import Iterable, List, Sequence, TypeVar

from logging_utils import Logger

URL_PLACEHOLDER = "{{url}}"
CONTENT_SEPARATOR = "\n\n"
COMMIT_MESSAGE = "updated {path}"

T = TypeVar("T")


class RateLimiter:
    """Sliding window limiter that keeps API calls under a per-minute budget."""

    def __init__(self, max_requests_per_minute: int = 60, window_s: float = 60.0):
        self.max_requests = max_requests_per_minute
        self.window_s = window_s
        self.requests: List[float] = []
        self.lock = threading.Lock()

    def wait_if_needed(self, operation_type: str = "API") -> None:
        """Block until another request fits in the current window."""
        current_time = time.time()

        with self.lock:
            self._clean_old_requests(current_time)
            if len(self.requests) >= self.max_requests:
                wait_time = self.window_s - (current_time - self.requests[0])
                if wait_time > 0:
                    Logger.security_event(
                        "RATE_LIMIT_HIT",
                        f"rate limit reached for {operation_type}, "
                        f"waiting {wait_time:.2f}s",
                    )
                    time.sleep(wait_time)
                    current_time = time.time()
                    self._clean_old_requests(current_time)
            self.requests.append(current_time)

    def _clean_old_requests(self, current_time: float) -> None:
        cutoff_time = current_time - self.window_s
        self.requests = [
            req_time for req_time in self.requests if req_time > cutoff_time
        ]


def filter_ignored(repos: Iterable[T], ignore: Sequence[str]) -> List[T]:
    """Drop repositories whose name is in ``ignore`` (exact match), keeping order."""
    ignored = set(ignore)
    return [repo for repo in repos if getattr(repo, "name") not in ignored]


def render_message(template: str, url: str) -> str:
    """Replace every ``{{url}}`` placeholder in ``template`` with ``url``."""
    return template.replace(URL_PLACEHOLDER, url)


def compose_content(message: str, original: str) -> str:
    """Prepend the rendered migration notice to the original file body."""
    return f"{message}{CONTENT_SEPARATOR}{original}"


def commit_message_for(path: str) -> str:
    return COMMIT_MESSAGE.format(path=path)
