#!/usr/bin/env python3
"""Exception hierarchy for gh-org-migrate."""


class MigrationError(Exception):
    """Base class for all migration failures."""


class ConfigError(MigrationError):
    """Configuration file missing, unreadable or malformed."""


class ClientError(MigrationError):
    """GitHub client could not be built or the organization is not reachable."""


class ListingError(MigrationError):
    """Repository listing failed on the source organization."""


class CreateRepositoryError(MigrationError):
    """Repository creation was rejected by the target instance."""


class GitOperationError(MigrationError):
    """A git clone, remote or push step failed."""


class ContentUpdateError(MigrationError):
    """Marker file could not be fetched or committed back."""


class ArchiveError(MigrationError):
    """Source repository could not be archived."""
