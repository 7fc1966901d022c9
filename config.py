#!/usr/bin/env python3
"""Configuration dataclasses and YAML loader for gh-org-migrate."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import yaml

from errors import ConfigError

DEFAULT_CONFIG_FILE = "config.yml"


@dataclass(frozen=True)
class ContentConfig:
    """Marker file rewritten in the source repository after migration."""
    path: str = ""
    message: str = ""


@dataclass(frozen=True)
class EndpointConfig:
    """One GitHub-compatible instance: API URL, credentials and organization.

    An empty ``url`` means the public github.com API. ``ca_bundle`` points at a
    PEM bundle to trust; ``insecure`` disables certificate verification.
    """
    url: str = ""
    token: str = ""
    organization: str = ""
    ca_bundle: str = ""
    insecure: bool = False


@dataclass(frozen=True)
class SourceConfig(EndpointConfig):
    """Source endpoint plus the per-repository post-migration behavior."""
    ignore: Tuple[str, ...] = ()
    archive: bool = False
    skip_archived: bool = False
    content: ContentConfig = field(default_factory=ContentConfig)


@dataclass(frozen=True)
class TargetConfig(EndpointConfig):
    """Target endpoint."""


@dataclass(frozen=True)
class GitSettings:
    """Local git clone/push settings."""
    clone_path: str = ""
    remote_name: str = ""
    key_file: str = ""
    commit_author: str = ""
    commit_email: str = ""


@dataclass(frozen=True)
class RunOptions:
    """Command line options that are not part of the YAML file."""
    dry_run: bool = False
    limit: Optional[int] = None


@dataclass(frozen=True)
class Config:
    """Main configuration for a migration run."""
    source: SourceConfig = field(default_factory=SourceConfig)
    target: TargetConfig = field(default_factory=TargetConfig)
    git: GitSettings = field(default_factory=GitSettings)
    options: RunOptions = field(default_factory=RunOptions)


def _section(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"'{key}' must be a mapping, got {type(value).__name__}")
    return value


def _str(data: Dict[str, Any], key: str) -> str:
    value = data.get(key)
    return "" if value is None else str(value)


def _bool(data: Dict[str, Any], key: str) -> bool:
    value = data.get(key)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ConfigError(f"'{key}' must be true or false, got {value!r}")
    return value


def _str_list(data: Dict[str, Any], key: str) -> List[str]:
    value = data.get(key)
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list):
        raise ConfigError(f"'{key}' must be a list of names")
    return [str(v) for v in value]


def _endpoint_fields(data: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "url": _str(data, "url"),
        "token": _str(data, "token"),
        "organization": _str(data, "organization"),
        "ca_bundle": _str(data, "ca_bundle"),
        "insecure": _bool(data, "insecure"),
    }


def config_from_dict(data: Dict[str, Any], options: Optional[RunOptions] = None) -> Config:
    """Map a parsed YAML document onto ``Config``.

    Missing keys keep their zero values and unknown keys are ignored.
    """
    if not isinstance(data, dict):
        raise ConfigError("configuration must be a mapping at the top level")

    source = _section(data, "source")
    target = _section(data, "target")
    git = _section(data, "git")
    content = _section(source, "content")

    return Config(
        source=SourceConfig(
            **_endpoint_fields(source),
            ignore=tuple(_str_list(source, "ignore")),
            archive=_bool(source, "archive"),
            skip_archived=_bool(source, "skip_archived"),
            content=ContentConfig(
                path=_str(content, "path"),
                message=_str(content, "message"),
            ),
        ),
        target=TargetConfig(**_endpoint_fields(target)),
        git=GitSettings(
            clone_path=_str(git, "clone_path"),
            remote_name=_str(git, "remote_name"),
            key_file=_str(git, "ctr_file"),
            commit_author=_str(git, "commit_author"),
            commit_email=_str(git, "commit_email"),
        ),
        options=options or RunOptions(),
    )


def load_configuration(path: str = DEFAULT_CONFIG_FILE,
                       options: Optional[RunOptions] = None) -> Config:
    """Read and parse the YAML configuration file at ``path``."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except OSError as e:
        raise ConfigError(f"cannot read configuration file '{path}': {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"cannot parse configuration file '{path}': {e}") from e

    # An empty document parses to None
    return config_from_dict(data if data is not None else {}, options)
