#!/usr/bin/env python3
"""Bare clone from the source and mirror push to the target over SSH."""

from __future__ import annotations

import os
import shlex
import subprocess
from typing import Dict, List, Optional

from config import GitSettings
from errors import GitOperationError
from logging_utils import Logger
from models import RepositoryDescriptor
from security import SecurityValidator


class GitTransfer:
    """Moves full git history with the system ``git`` binary."""

    def __init__(self, settings: GitSettings, git_binary: str = "git") -> None:
        self.settings = settings
        self.git_binary = git_binary

    def load_key(self) -> str:
        """Validate the SSH private key file and return its normalized path.

        Passphrase-protected keys are not supported.
        """
        try:
            key_path = SecurityValidator.validate_file_path(self.settings.key_file)
        except ValueError as e:
            raise GitOperationError(f"invalid ssh key path: {e}") from e

        Logger.info("using the private key...", file=key_path)
        try:
            with open(key_path, "r", encoding="utf-8", errors="replace") as fh:
                key = fh.read()
        except OSError as e:
            raise GitOperationError(f"cannot read ssh key '{key_path}': {e}") from e

        if "PRIVATE KEY" not in key:
            raise GitOperationError(f"'{key_path}' does not contain a private key")
        if "ENCRYPTED" in key:
            raise GitOperationError(
                f"'{key_path}' is passphrase protected, which is not supported"
            )
        return key_path

    @staticmethod
    def _ssh_env(key_path: str) -> Dict[str, str]:
        env = os.environ.copy()
        env.update(
            {
                "GIT_SSH_COMMAND": (
                    f"ssh -i {shlex.quote(key_path)} -o IdentitiesOnly=yes "
                    "-o BatchMode=yes -o StrictHostKeyChecking=accept-new"
                ),
                "GIT_TERMINAL_PROMPT": "0",
            }
        )
        return env

    def _run(
        self,
        args: List[str],
        step: str,
        *,
        cwd: Optional[str] = None,
        env: Optional[Dict[str, str]] = None,
    ) -> None:
        try:
            subprocess.run(
                [self.git_binary, *args],
                cwd=cwd,
                env=env,
                check=True,
                capture_output=True,
                text=True,
            )
        except subprocess.CalledProcessError as e:
            output = SecurityValidator.sanitize_for_logging(
                (e.stderr or e.stdout or "").strip()
            )
            raise GitOperationError(f"git {step} failed: {output}") from e
        except OSError as e:
            raise GitOperationError(f"git {step} could not start: {e}") from e

    def clone_dir_for(self, name: str) -> str:
        if not self.settings.clone_path:
            raise GitOperationError("git.clone_path is not configured")
        try:
            validated_name = SecurityValidator.validate_repo_name(name)
            base = SecurityValidator.validate_file_path(self.settings.clone_path)
        except ValueError as e:
            raise GitOperationError(f"invalid clone destination: {e}") from e
        return os.path.join(base, validated_name)

    @staticmethod
    def _prepare_destination(clone_dir: str) -> None:
        """Require an absent or empty destination and create its parent."""
        try:
            if os.path.isdir(clone_dir) and os.listdir(clone_dir):
                raise GitOperationError(
                    f"destination '{clone_dir}' already exists and is not empty"
                )
            if os.path.exists(clone_dir) and not os.path.isdir(clone_dir):
                raise GitOperationError(
                    f"destination '{clone_dir}' is not a directory"
                )
            os.makedirs(os.path.dirname(clone_dir), exist_ok=True)
        except OSError as e:
            raise GitOperationError(
                f"cannot prepare clone destination '{clone_dir}': {e}"
            ) from e

    def clone_bare(self, source: RepositoryDescriptor, key_path: str) -> str:
        clone_dir = self.clone_dir_for(source.name)
        self._prepare_destination(clone_dir)
        Logger.info("cloning the repository...", url=source.ssh_url)
        self._run(
            ["clone", "--bare", source.ssh_url, clone_dir],
            "clone",
            env=self._ssh_env(key_path),
        )
        return clone_dir

    def add_remote(self, clone_dir: str, target_url: str) -> None:
        if not self.settings.remote_name:
            raise GitOperationError("git.remote_name is not configured")
        Logger.info("adding a new remote...", remote=target_url)
        self._run(
            ["remote", "add", self.settings.remote_name, target_url],
            "remote add",
            cwd=clone_dir,
        )

    def push(self, clone_dir: str, key_path: str, target_url: str) -> None:
        Logger.info("pushing to the new remote...", remote=target_url)
        self._run(
            ["push", "--mirror", self.settings.remote_name],
            "push",
            cwd=clone_dir,
            env=self._ssh_env(key_path),
        )

    def clone_and_push(self, source: RepositoryDescriptor, target_url: str) -> str:
        """Clone ``source`` bare, register ``target_url`` as a remote and push.

        Returns the local clone directory, which is left in place.
        """
        try:
            SecurityValidator.validate_url(source.ssh_url, ["ssh"])
            SecurityValidator.validate_url(target_url, ["ssh"])
        except ValueError as e:
            raise GitOperationError(f"invalid ssh url: {e}") from e

        key_path = self.load_key()
        clone_dir = self.clone_bare(source, key_path)
        self.add_remote(clone_dir, target_url)
        self.push(clone_dir, key_path, target_url)
        Logger.info("repository pushed", name=source.name, path=clone_dir)
        return clone_dir
