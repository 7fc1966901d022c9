"""Tests for the client factory and organization preflight."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
import requests

from config import EndpointConfig
from errors import ClientError
from github_client import (PUBLIC_API_URL, enterprise_api_url,
                           new_github_client, preflight_org_access,
                           tls_verify_for)


@pytest.mark.parametrize(
    'url',
    [
        'https://ghe.acme.com',
        'https://ghe.acme.com/',
        'https://ghe.acme.com/api/v3',
        'https://ghe.acme.com/api/v3/',
    ],
)
def test_enterprise_api_url_appends_rest_root(url: str) -> None:
    assert enterprise_api_url(url) == 'https://ghe.acme.com/api/v3'


@pytest.mark.parametrize('url', ['ghe.acme.com', 'ftp://ghe.acme.com', 'https://'])
def test_enterprise_api_url_rejects_malformed(url: str) -> None:
    with pytest.raises(ClientError, match='malformed enterprise URL'):
        enterprise_api_url(url)


def test_tls_verification_is_on_by_default() -> None:
    assert tls_verify_for(EndpointConfig(token='t')) is True
    assert tls_verify_for(EndpointConfig(ca_bundle='/etc/ca.pem')) == '/etc/ca.pem'
    assert tls_verify_for(EndpointConfig(insecure=True)) is False


@patch('github_client.github.Github')
def test_new_github_client_public_host(mock_github: MagicMock) -> None:
    client = new_github_client(EndpointConfig(token='t'))

    assert client is mock_github.return_value
    kwargs = mock_github.call_args.kwargs
    assert 'base_url' not in kwargs
    assert kwargs['verify'] is True


@patch('github_client.github.Github')
def test_new_github_client_enterprise_host(mock_github: MagicMock) -> None:
    new_github_client(
        EndpointConfig(url='https://ghe.acme.com', token='t', ca_bundle='/etc/ca.pem')
    )

    kwargs = mock_github.call_args.kwargs
    assert kwargs['base_url'] == 'https://ghe.acme.com/api/v3'
    assert kwargs['verify'] == '/etc/ca.pem'


@patch('github_client.github.Github')
def test_new_github_client_rejects_malformed_url(mock_github: MagicMock) -> None:
    with pytest.raises(ClientError):
        new_github_client(EndpointConfig(url='not a url', token='t'))
    mock_github.assert_not_called()


@patch('github_client.requests.get')
def test_preflight_accepts_visible_org(mock_get: MagicMock) -> None:
    mock_get.return_value = MagicMock(status_code=200)

    preflight_org_access(EndpointConfig(token='t', organization='acme'))

    assert mock_get.call_args.args[0] == f'{PUBLIC_API_URL}/orgs/acme'
    assert mock_get.call_args.kwargs['headers']['Authorization'] == 'Bearer t'


@pytest.mark.parametrize('status', [401, 403, 404])
@patch('github_client.requests.get')
def test_preflight_rejects_inaccessible_org(mock_get: MagicMock, status: int) -> None:
    mock_get.return_value = MagicMock(status_code=status)

    with pytest.raises(ClientError, match=str(status)):
        preflight_org_access(EndpointConfig(token='t', organization='acme'))


@patch('github_client.requests.get')
def test_preflight_network_error(mock_get: MagicMock) -> None:
    mock_get.side_effect = requests.ConnectionError('connection refused')

    with pytest.raises(ClientError, match='failed to contact'):
        preflight_org_access(EndpointConfig(token='t', organization='acme'))


@patch('github_client.requests.get')
def test_preflight_unexpected_status_only_warns(mock_get: MagicMock) -> None:
    mock_get.return_value = MagicMock(status_code=500)

    preflight_org_access(EndpointConfig(token='t', organization='acme'))
