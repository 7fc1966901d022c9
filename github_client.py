#!/usr/bin/env python3
"""GitHub client factory and organization preflight checks."""

from __future__ import annotations

from typing import Optional, Union
from urllib.parse import urlparse

import github
import requests

from config import EndpointConfig
from errors import ClientError
from logging_utils import Logger

PUBLIC_API_URL = "https://api.github.com"
ENTERPRISE_API_SUFFIX = "/api/v3"
PER_PAGE = 30


def enterprise_api_url(url: str) -> str:
    """Return the REST root of an enterprise installation.

    ``https://ghe.acme.com`` and ``https://ghe.acme.com/api/v3/`` both resolve
    to ``https://ghe.acme.com/api/v3``.
    """
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ClientError(f"malformed enterprise URL: {url!r}")

    base = url.rstrip("/")
    if not base.endswith(ENTERPRISE_API_SUFFIX):
        base += ENTERPRISE_API_SUFFIX
    return base


def api_url_for(endpoint: EndpointConfig) -> str:
    if not endpoint.url:
        return PUBLIC_API_URL
    return enterprise_api_url(endpoint.url)


def tls_verify_for(endpoint: EndpointConfig) -> Union[bool, str]:
    """Map the endpoint TLS options onto the requests ``verify`` argument."""
    if endpoint.insecure:
        Logger.security_event(
            "TLS_VERIFY_DISABLED",
            f"certificate verification disabled for {api_url_for(endpoint)}",
        )
        return False
    if endpoint.ca_bundle:
        return endpoint.ca_bundle
    return True


def new_github_client(
    endpoint: EndpointConfig, verify: Optional[Union[bool, str]] = None
) -> github.Github:
    """Build an authenticated client for ``endpoint`` without touching the network."""
    api_url = api_url_for(endpoint)
    Logger.info("init github API", url=api_url)
    auth = github.Auth.Token(endpoint.token)
    if verify is None:
        verify = tls_verify_for(endpoint)
    if api_url == PUBLIC_API_URL:
        return github.Github(auth=auth, per_page=PER_PAGE, verify=verify)
    return github.Github(
        base_url=api_url, auth=auth, per_page=PER_PAGE, verify=verify
    )


def _get_api_headers(token: str) -> dict:
    return {
        "Accept": "application/vnd.github+json",
        "Authorization": f"Bearer {token}",
        "X-GitHub-Api-Version": "2022-11-28",
    }


def preflight_org_access(
    endpoint: EndpointConfig, verify: Optional[Union[bool, str]] = None
) -> None:
    """Check that the organization exists and is visible to the token."""
    if verify is None:
        verify = tls_verify_for(endpoint)
    org_url = f"{api_url_for(endpoint)}/orgs/{endpoint.organization}"
    try:
        response = requests.get(
            org_url,
            headers=_get_api_headers(endpoint.token),
            timeout=30,
            verify=verify,
        )
    except requests.RequestException as e:
        raise ClientError(f"failed to contact github api at {org_url}: {e}") from e

    if response.status_code == 401:
        raise ClientError(
            "unauthorized (401): token invalid or not authorized for the API"
        )
    if response.status_code == 403:
        raise ClientError(
            f"forbidden (403): token lacks permission to access "
            f"organization '{endpoint.organization}' (missing read:org scope "
            "or SAML SSO not authorized for this token)"
        )
    if response.status_code == 404:
        raise ClientError(
            f"not found (404): organization '{endpoint.organization}' does not "
            "exist or is not visible to this token"
        )
    if response.status_code != 200:
        Logger.warn(
            "unexpected response checking org visibility",
            org=endpoint.organization,
            status=response.status_code,
        )
        return

    Logger.debug("organization reachable", org=endpoint.organization)
