#!/usr/bin/env python3
"""
gh-org-migrate - Migrate all repositories of a GitHub organization to
another GitHub or GitHub Enterprise organization.

Each repository is recreated on the target, its full history is transferred
with a bare git clone and mirror push over SSH, and the source can optionally
receive a migration notice in a marker file and be archived.

License: MIT
"""

from __future__ import annotations

import sys
from typing import NoReturn

from argument_parser import parse_arguments
from migration_orchestrator import MigrationOrchestrator

# Exit codes
EXIT_EXECUTION_ERROR = 1


def main() -> NoReturn:
    if __name__ != "__main__":
        sys.exit(EXIT_EXECUTION_ERROR)

    cfg = parse_arguments()
    orchestrator = MigrationOrchestrator(cfg)
    sys.exit(orchestrator.run())


if __name__ == "__main__":
    main()
