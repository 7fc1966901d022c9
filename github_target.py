#!/usr/bin/env python3
"""Target organization wrapper: repository creation."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

import github
import requests

if TYPE_CHECKING:
    from github.Organization import Organization

from errors import CreateRepositoryError
from logging_utils import Logger
from models import RepositoryDescriptor
from utils import RateLimiter


class GitHubTarget:
    """Operations issued against the target instance."""

    def __init__(
        self,
        api: github.Github,
        org_name: str,
        *,
        rate_limiter: Optional[RateLimiter] = None,
    ) -> None:
        self.api = api
        self.org_name = org_name
        self.org: Optional["Organization"] = None
        self.rate_limiter = rate_limiter or RateLimiter(max_requests_per_minute=50)

    def _organization(self) -> "Organization":
        if self.org is None:
            self.rate_limiter.wait_if_needed("GitHub API")
            self.org = self.api.get_organization(self.org_name)
        return self.org

    def create_repo(self, source: RepositoryDescriptor) -> RepositoryDescriptor:
        """Create an empty copy of ``source`` in the target organization.

        Descriptive fields are copied; issues, projects, wiki, rebase merge and
        squash merge are always disabled.
        """
        try:
            org = self._organization()
            self.rate_limiter.wait_if_needed("GitHub API")
            repo = org.create_repo(
                name=source.name,
                description=source.description or "",
                homepage=source.homepage or "",
                private=source.private,
                has_issues=False,
                has_projects=False,
                has_wiki=False,
                allow_rebase_merge=False,
                allow_squash_merge=False,
                auto_init=False,
            )
        except (github.GithubException, requests.RequestException) as e:
            raise CreateRepositoryError(
                f"failed to create repo '{self.org_name}/{source.name}': {e}"
            ) from e

        created = RepositoryDescriptor.from_github(repo)
        Logger.info(
            "a new repository was created successfully", url=created.html_url
        )
        return created
