"""Tests for command line parsing and token resolution."""

from __future__ import annotations

from pathlib import Path

import pytest

from argument_parser import (EXIT_AUTH_ERROR, EXIT_CONFIG_ERROR,
                             SOURCE_TOKEN_ENV, TARGET_TOKEN_ENV,
                             parse_arguments)

BASE_CONFIG = """
source:
  organization: old-org
  token: {source_token}
  ignore: [legacy]
target:
  organization: new-org
  token: {target_token}
git:
  clone_path: /var/tmp/migration
  remote_name: migration
  ctr_file: /home/migrator/.ssh/id_ed25519
"""


@pytest.fixture(autouse=True)
def _clear_token_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(SOURCE_TOKEN_ENV, raising=False)
    monkeypatch.delenv(TARGET_TOKEN_ENV, raising=False)


def _write(tmp_path: Path, source_token: str = 'src', target_token: str = 'dst') -> str:
    path = tmp_path / 'config.yml'
    path.write_text(
        BASE_CONFIG.format(source_token=source_token, target_token=target_token)
    )
    return str(path)


def test_parse_arguments_loads_config_and_options(tmp_path: Path) -> None:
    cfg = parse_arguments(['--config', _write(tmp_path), '--dry-run', '--limit', '1'])

    assert cfg.source.organization == 'old-org'
    assert cfg.source.token == 'src'
    assert cfg.target.token == 'dst'
    assert cfg.options.dry_run is True
    assert cfg.options.limit == 1


def test_tokens_fall_back_to_environment(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv(SOURCE_TOKEN_ENV, 'env-src')
    monkeypatch.setenv(TARGET_TOKEN_ENV, 'env-dst')

    cfg = parse_arguments(['-c', _write(tmp_path, source_token='""', target_token='""')])

    assert cfg.source.token == 'env-src'
    assert cfg.target.token == 'env-dst'


def test_missing_token_exits_with_auth_error(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        parse_arguments(['-c', _write(tmp_path, target_token='""')])

    assert excinfo.value.code == EXIT_AUTH_ERROR


def test_missing_config_file_exits_with_config_error(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        parse_arguments(['-c', str(tmp_path / 'absent.yml')])

    assert excinfo.value.code == EXIT_CONFIG_ERROR


def test_invalid_organization_exits_with_config_error(tmp_path: Path) -> None:
    path = tmp_path / 'config.yml'
    path.write_text('source:\n  organization: "bad org"\ntarget:\n  organization: ok\n')

    with pytest.raises(SystemExit) as excinfo:
        parse_arguments(['-c', str(path)])

    assert excinfo.value.code == EXIT_CONFIG_ERROR


def test_insecure_and_ca_bundle_are_exclusive(tmp_path: Path) -> None:
    bundle = tmp_path / 'ca.pem'
    bundle.write_text('-----BEGIN CERTIFICATE-----\n')
    path = tmp_path / 'config.yml'
    path.write_text(
        'source:\n  organization: a\n  token: t\n'
        f'target:\n  organization: b\n  token: t\n  insecure: true\n  ca_bundle: {bundle}\n'
    )

    with pytest.raises(SystemExit) as excinfo:
        parse_arguments(['-c', str(path)])

    assert excinfo.value.code == EXIT_CONFIG_ERROR


def test_limit_must_be_positive(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        parse_arguments(['-c', _write(tmp_path), '--limit', '0'])

    assert excinfo.value.code == 2
