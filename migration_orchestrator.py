#!/usr/bin/env python3
"""Main orchestrator for migrating a source organization to a target organization."""

from __future__ import annotations

from typing import List, Optional

from config import Config
from errors import (ArchiveError, ClientError, ContentUpdateError,
                    CreateRepositoryError, GitOperationError, ListingError)
from git_transfer import GitTransfer
from github_client import (new_github_client, preflight_org_access,
                           tls_verify_for)
from github_source import GitHubSource
from github_target import GitHubTarget
from logging_utils import Logger
from models import MigrationSummary, RepositoryDescriptor, RepositoryOutcome

# Exit codes
EXIT_SUCCESS = 0
EXIT_EXECUTION_ERROR = 1
EXIT_GITHUB_ERROR = 31
EXIT_AUTH_ERROR = 40


class MigrationOrchestrator:
    """Drives list -> create -> clone/push -> [update] -> [archive] per repo.

    Endpoint wrappers can be injected; otherwise they are built from the
    configuration when ``run`` starts.
    """

    def __init__(
        self,
        cfg: Config,
        *,
        source: Optional[GitHubSource] = None,
        target: Optional[GitHubTarget] = None,
        transfer: Optional[GitTransfer] = None,
    ) -> None:
        self.cfg = cfg
        self.source = source
        self.target = target
        self.transfer = transfer or GitTransfer(cfg.git)
        self.summary = MigrationSummary()

    def _connect(self) -> None:
        if self.source is None:
            verify = tls_verify_for(self.cfg.source)
            preflight_org_access(self.cfg.source, verify)
            self.source = GitHubSource(
                new_github_client(self.cfg.source, verify),
                self.cfg.source.organization,
            )
        if self.target is None:
            verify = tls_verify_for(self.cfg.target)
            preflight_org_access(self.cfg.target, verify)
            self.target = GitHubTarget(
                new_github_client(self.cfg.target, verify),
                self.cfg.target.organization,
            )
        Logger.warn("source github", url=self.cfg.source.url or "github.com")
        Logger.warn("target github", url=self.cfg.target.url or "github.com")

    def _select(self, repos: List[RepositoryDescriptor]) -> List[RepositoryDescriptor]:
        limit = self.cfg.options.limit
        if limit is not None and len(repos) > limit:
            Logger.warn(
                "processing a limited number of repositories",
                limit=limit,
                remaining=len(repos) - limit,
            )
            return repos[:limit]
        return repos

    def run(self) -> int:
        try:
            self._connect()
        except ClientError as e:
            Logger.error(f"cannot initialize github clients: {e}")
            return EXIT_AUTH_ERROR

        try:
            repos = self.source.list_repositories(
                ignore=self.cfg.source.ignore,
                skip_archived=self.cfg.source.skip_archived,
            )
        except ListingError as e:
            Logger.error(str(e))
            return EXIT_GITHUB_ERROR

        repos = self._select(repos)
        total = len(repos)

        if self.cfg.options.dry_run:
            for idx, repo in enumerate(repos, start=1):
                Logger.info(
                    f"[{idx}/{total}] would migrate: "
                    f"{self.cfg.source.organization}/{repo.name} -> "
                    f"{self.cfg.target.organization}/{repo.name}"
                )
            Logger.info("dry-run completed")
            return EXIT_SUCCESS

        try:
            for idx, repo in enumerate(repos, start=1):
                Logger.info(
                    "processing a repository", name=repo.name, index=f"{idx}/{total}"
                )
                self.summary.record(self.migrate_repository(repo))
        except Exception as e:
            Logger.error(f"unexpected error: {e}")
            return EXIT_EXECUTION_ERROR

        Logger.info("migration finished", **self.summary.as_fields())
        return EXIT_SUCCESS

    def migrate_repository(self, repo: RepositoryDescriptor) -> RepositoryOutcome:
        """Run the per-repository pipeline.

        Create and clone/push failures end the pipeline for this repository.
        Content update and archive failures are logged only.
        """
        outcome = RepositoryOutcome(name=repo.name)

        try:
            created = self.target.create_repo(repo)
            outcome.created = True
            self.transfer.clone_and_push(repo, created.ssh_url)
            outcome.pushed = True
        except (CreateRepositoryError, GitOperationError) as e:
            Logger.error(str(e), name=repo.name)
            outcome.errors.append(str(e))
            return outcome

        if self.cfg.source.content.path:
            try:
                self.source.update_content(
                    repo.name,
                    self.cfg.source.content,
                    created.html_url,
                    self.cfg.git,
                )
                outcome.content_updated = True
            except ContentUpdateError as e:
                Logger.error(str(e), name=repo.name)
                outcome.errors.append(str(e))

        if self.cfg.source.archive:
            try:
                self.source.archive_repo(repo.name)
                outcome.archived = True
            except ArchiveError as e:
                Logger.error(str(e), name=repo.name)
                outcome.errors.append(str(e))

        Logger.info("done", name=repo.name)
        return outcome
