#!/usr/bin/env python3
"""Source organization wrapper: listing, marker file update and archiving."""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional, Sequence

import github
import requests

if TYPE_CHECKING:
    from github.Repository import Repository

from config import ContentConfig, GitSettings
from errors import ArchiveError, ContentUpdateError, ListingError
from github_client import PER_PAGE
from logging_utils import Logger
from models import RepositoryDescriptor
from utils import (RateLimiter, commit_message_for, compose_content,
                   filter_ignored, render_message)

API_ERRORS = (github.GithubException, requests.RequestException)


class GitHubSource:
    """Operations issued against the source instance."""

    def __init__(
        self,
        api: github.Github,
        org_name: str,
        *,
        rate_limiter: Optional[RateLimiter] = None,
    ) -> None:
        self.api = api
        self.org_name = org_name
        self.rate_limiter = rate_limiter or RateLimiter(max_requests_per_minute=50)

    def _fetch_all(self) -> List[RepositoryDescriptor]:
        self.rate_limiter.wait_if_needed("GitHub API")
        paginated = self.api.get_organization(self.org_name).get_repos()

        # Iteration follows the Link "next" relation until the last page
        candidates: List[RepositoryDescriptor] = []
        for repo in paginated:
            if candidates and len(candidates) % PER_PAGE == 0:
                self.rate_limiter.wait_if_needed("GitHub API")
            candidates.append(RepositoryDescriptor.from_github(repo))
        Logger.debug("fetched repositories", org=self.org_name, size=len(candidates))
        return candidates

    def list_repositories(
        self, ignore: Sequence[str] = (), skip_archived: bool = False
    ) -> List[RepositoryDescriptor]:
        """Return the organization's repositories minus the ignored names.

        Raises ListingError if any page fetch fails; no partial result is
        returned.
        """
        Logger.info("discovering repositories", org=self.org_name)
        try:
            candidates = self._fetch_all()
        except API_ERRORS as e:
            raise ListingError(
                f"failed to list repositories of '{self.org_name}': {e}"
            ) from e

        Logger.info("some repositories were found", amount=len(candidates))
        if ignore:
            Logger.info("ignoring some repositories", names=",".join(ignore))
        repos = filter_ignored(candidates, ignore)

        if skip_archived:
            for repo in repos:
                if repo.archived:
                    Logger.warn("skipping archived repository", name=repo.name)
            repos = [repo for repo in repos if not repo.archived]

        Logger.info("repositories to process", amount=len(repos))
        return repos

    def _get_repo(self, name: str) -> "Repository":
        self.rate_limiter.wait_if_needed("GitHub API")
        return self.api.get_repo(f"{self.org_name}/{name}")

    def update_content(
        self,
        name: str,
        content: ContentConfig,
        target_html_url: str,
        git: GitSettings,
    ) -> None:
        """Prepend the migration notice to ``content.path`` in the source repo.

        The SHA read here is sent back with the update, so the commit is
        rejected if the file changed in between.
        """
        path = content.path
        try:
            repo = self._get_repo(name)
            self.rate_limiter.wait_if_needed("GitHub API")
            current = repo.get_contents(path)
        except API_ERRORS as e:
            raise ContentUpdateError(
                f"cannot fetch '{path}' from {self.org_name}/{name}: {e}"
            ) from e

        if isinstance(current, list):
            raise ContentUpdateError(
                f"'{path}' in {self.org_name}/{name} is a directory"
            )

        try:
            original = current.decoded_content.decode("utf-8")
        except (AssertionError, UnicodeDecodeError) as e:
            raise ContentUpdateError(
                f"cannot decode '{path}' from {self.org_name}/{name}: {e}"
            ) from e

        Logger.info("updating the content...", filename=path, name=name)
        notice = render_message(content.message, target_html_url)
        body = compose_content(notice, original)

        kwargs = {}
        if git.commit_author and git.commit_email:
            kwargs["committer"] = github.InputGitAuthor(
                git.commit_author, git.commit_email
            )

        try:
            self.rate_limiter.wait_if_needed("GitHub API")
            repo.update_file(
                path,
                commit_message_for(path),
                body,
                current.sha,
                **kwargs,
            )
        except github.GithubException as e:
            if e.status == 409:
                raise ContentUpdateError(
                    f"'{path}' changed since it was read (stale sha "
                    f"{current.sha}): {e}"
                ) from e
            raise ContentUpdateError(
                f"failed to update '{path}' in {self.org_name}/{name}: {e}"
            ) from e
        except requests.RequestException as e:
            raise ContentUpdateError(
                f"failed to update '{path}' in {self.org_name}/{name}: {e}"
            ) from e

    def archive_repo(self, name: str) -> None:
        Logger.info("archiving the repository...", name=name)
        try:
            repo = self._get_repo(name)
            self.rate_limiter.wait_if_needed("GitHub API")
            repo.edit(archived=True)
        except API_ERRORS as e:
            raise ArchiveError(
                f"failed to archive {self.org_name}/{name}: {e}"
            ) from e
