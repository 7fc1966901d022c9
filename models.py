#!/usr/bin/env python3
"""Repository descriptors and migration outcomes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from github.Repository import Repository


@dataclass(frozen=True)
class RepositoryDescriptor:
    """The fields of a remote repository the migration cares about."""
    name: str
    description: Optional[str] = None
    homepage: Optional[str] = None
    private: bool = False
    ssh_url: str = ""
    html_url: str = ""
    archived: bool = False

    @classmethod
    def from_github(cls, repo: "Repository") -> "RepositoryDescriptor":
        return cls(
            name=repo.name,
            description=repo.description,
            homepage=repo.homepage,
            private=bool(repo.private),
            ssh_url=repo.ssh_url or "",
            html_url=repo.html_url or "",
            archived=bool(repo.archived),
        )


@dataclass
class RepositoryOutcome:
    """What happened to a single repository during the run."""
    name: str
    created: bool = False
    pushed: bool = False
    content_updated: bool = False
    archived: bool = False
    errors: List[str] = field(default_factory=list)

    @property
    def failed(self) -> bool:
        """A repository fails when it was not both created and pushed."""
        return not (self.created and self.pushed)


@dataclass
class MigrationSummary:
    outcomes: List[RepositoryOutcome] = field(default_factory=list)

    def record(self, outcome: RepositoryOutcome) -> None:
        self.outcomes.append(outcome)

    @property
    def created(self) -> int:
        return sum(1 for o in self.outcomes if o.created)

    @property
    def pushed(self) -> int:
        return sum(1 for o in self.outcomes if o.pushed)

    @property
    def updated(self) -> int:
        return sum(1 for o in self.outcomes if o.content_updated)

    @property
    def archived(self) -> int:
        return sum(1 for o in self.outcomes if o.archived)

    @property
    def failed(self) -> int:
        return sum(1 for o in self.outcomes if o.failed)

    def as_fields(self) -> dict:
        return {
            "total": len(self.outcomes),
            "created": self.created,
            "pushed": self.pushed,
            "updated": self.updated,
            "archived": self.archived,
            "failed": self.failed,
        }
