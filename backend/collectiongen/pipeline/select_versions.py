"""
Package Collection Generator — Version selection step.

Turns the tags a package publishes into the ordered list of versions that
go into the collection: either the explicit allow-list from the input, or
the latest release of every major version line, newest first.
"""

from __future__ import annotations

from collectiongen.errors import VersionNotFoundError
from collectiongen.utils.logging import logger
from collectiongen.utils.semver import SemanticVersion


def select_explicit_versions(url: str, requested: list[str], available: list[str]) -> list[str]:
    """
    Return the requested tags in the order given.

    Raises VersionNotFoundError listing every requested tag that is not
    published (exact string match).
    """
    published = set(available)
    missing = [tag for tag in requested if tag not in published]
    if missing:
        raise VersionNotFoundError(url, missing)
    return list(requested)


def select_latest_per_major(tags: list[str]) -> list[str]:
    """
    Pick the most recent version of each major line, newest first.

    Unparseable tags are ignored. Pre-releases are only considered for a
    major line that has no stable release. On a precedence tie ("1.0.0"
    and "v1.0.0") the tag listed first wins.
    """
    parsed: list[tuple[SemanticVersion, str]] = []
    for tag in tags:
        version = SemanticVersion.parse(tag)
        if version is None:
            logger.debug("  Ignoring non-semver tag %r", tag)
            continue
        parsed.append((version, tag))

    best: dict[int, tuple[SemanticVersion, str]] = {}
    for version, tag in parsed:
        current = best.get(version.major)
        if current is None or _outranks(version, current[0]):
            best[version.major] = (version, tag)

    ranked = sorted(best.values(), key=lambda item: item[0], reverse=True)
    return [tag for _, tag in ranked]


def _outranks(candidate: SemanticVersion, current: SemanticVersion) -> bool:
    if candidate.is_prerelease != current.is_prerelease:
        return current.is_prerelease
    return candidate > current


def select_versions(url: str, requested: list[str] | None, available: list[str]) -> list[str]:
    if requested is not None:
        return select_explicit_versions(url, requested, available)
    return select_latest_per_major(available)
