"""
Package Collection Generator — GitHub repository metadata client.

Resolves README and license information for packages hosted on GitHub:
  GET /repos/{owner}/{repo}/readme   — README html_url
  GET /repos/{owner}/{repo}/license  — SPDX id + html_url

Metadata is a nice-to-have: HTTP and network failures are logged and
reported as "unknown" (None), never raised.
"""

from __future__ import annotations

import re
from typing import Any

import httpx

from collectiongen.inspector.auth import GitHubCredentials
from collectiongen.models.collection import License
from collectiongen.utils.logging import logger

GITHUB_URL_PATTERN = re.compile(
    r"^(?:https?://|git@|ssh://git@)github\.com[/:]([^/]+)/([^/]+?)(?:\.git)?/?$",
    re.IGNORECASE,
)


def parse_github_url(url: str) -> tuple[str, str] | None:
    """Return (owner, repo) for a github.com package URL, else None."""
    match = GITHUB_URL_PATTERN.match(url.strip())
    if not match:
        return None
    return match.group(1), match.group(2)


class GitHubMetadataClient:
    """Thin sync wrapper around the GitHub REST API."""

    def __init__(
        self,
        base_url: str,
        credentials: GitHubCredentials,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.credentials = credentials
        self.timeout = timeout
        self.transport = transport
        self._cache: dict[tuple[str, str, str], dict[str, Any] | None] = {}

    def _get(self, owner: str, repo: str, resource: str) -> dict[str, Any] | None:
        key = (owner.lower(), repo.lower(), resource)
        if key in self._cache:
            return self._cache[key]

        data: dict[str, Any] | None = None
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                resp = client.get(
                    f"{self.base_url}/repos/{owner}/{repo}/{resource}",
                    headers=self.credentials.as_headers(),
                )
            if resp.status_code == 404:
                logger.debug("  GitHub %s/%s has no %s", owner, repo, resource)
            elif not resp.is_success:
                logger.warning(
                    "  GitHub %s for %s/%s returned %d", resource, owner, repo, resp.status_code,
                )
            else:
                data = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("  GitHub %s lookup for %s/%s failed: %s", resource, owner, repo, exc)

        self._cache[key] = data
        return data

    def readme_url(self, url: str) -> str | None:
        repo = parse_github_url(url)
        if repo is None:
            return None
        data = self._get(*repo, "readme")
        return data.get("html_url") if data else None

    def license(self, url: str) -> License | None:
        repo = parse_github_url(url)
        if repo is None:
            return None
        data = self._get(*repo, "license")
        if not data:
            return None
        info = data.get("license") or {}
        name = info.get("spdx_id")
        if not name or name == "NOASSERTION":
            name = info.get("name")
        license_url = data.get("html_url")
        if not name or not license_url:
            return None
        return License(name=name, url=license_url)
