"""
Package Collection Generator — GitHub API authentication helpers.

Requests are anonymous unless a token is configured; anonymous access
works but is heavily rate limited.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class GitHubCredentials:
    token: str = ""

    def as_headers(self) -> dict[str, str]:
        """Return the headers sent with every GitHub API request."""
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers
