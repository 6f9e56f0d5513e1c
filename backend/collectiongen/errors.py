"""
Package Collection Generator — Structured error catalog.

Every error has a code, human message, and suggested fix.
Fatal errors abort the run; per-package and per-version errors are
recorded as warnings next to the generated collection.
"""

from __future__ import annotations

from typing import Any


class CollectionGenError(Exception):
    """Base error with structured code + suggestion."""

    fatal = True

    def __init__(self, code: str, message: str, suggestion: str = "", detail: Any = None):
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.detail = detail
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "error_code": self.code,
            "message": self.message,
        }
        if self.suggestion:
            d["suggestion"] = self.suggestion
        if self.detail:
            d["detail"] = self.detail
        return d


class MalformedInputError(CollectionGenError):
    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__(
            code="MALFORMED_INPUT",
            message=f"Input validation failed: {'; '.join(errors)}",
            suggestion="Check required fields: title (string), packages (list of objects with a url).",
            detail=errors,
        )


class UnreachablePackageError(CollectionGenError):
    fatal = False

    def __init__(self, url: str, reason: str = ""):
        self.url = url
        super().__init__(
            code="UNREACHABLE_PACKAGE",
            message=f"Package location cannot be resolved: {url}" + (f" ({reason})" if reason else ""),
            suggestion="Check the package URL and your network or credentials.",
        )


class VersionNotFoundError(CollectionGenError):
    def __init__(self, url: str, versions: list[str]):
        self.url = url
        self.versions = versions
        super().__init__(
            code="VERSION_NOT_FOUND",
            message=f"Requested versions not tagged in {url}: {', '.join(versions)}",
            suggestion="Remove the versions from the input or push the missing tags.",
            detail=versions,
        )


class ManifestUnreadableError(CollectionGenError):
    fatal = False

    def __init__(self, url: str, version: str, reason: str = ""):
        self.url = url
        self.version = version
        super().__init__(
            code="MANIFEST_UNREADABLE",
            message=f"Manifest of {url} at {version} could not be read" + (f": {reason}" if reason else ""),
            suggestion="Make sure the tag contains a valid Package.swift.",
        )


class VersionUnavailableError(CollectionGenError):
    fatal = False

    def __init__(self, url: str, version: str, reason: str = ""):
        self.url = url
        self.version = version
        super().__init__(
            code="VERSION_UNAVAILABLE",
            message=f"Version {version} of {url} is no longer available" + (f": {reason}" if reason else ""),
            suggestion="The tag may have been deleted or moved. Re-run the generator.",
        )


class EmptyCatalogError(CollectionGenError):
    def __init__(self, skipped: int = 0):
        super().__init__(
            code="EMPTY_CATALOG",
            message=f"No packages left to publish ({skipped} skipped)",
            suggestion="Check the warnings above; every package failed inspection or was filtered out.",
        )


class SerializationFailureError(CollectionGenError):
    def __init__(self, path: str, reason: str):
        super().__init__(
            code="SERIALIZATION_FAILURE",
            message=f"Could not write package collection to {path}: {reason}",
            suggestion="Check that the output directory exists and is writable.",
        )


class UnsupportedFormatVersionError(CollectionGenError):
    def __init__(self, found: Any, supported: list[str]):
        self.found = found
        super().__init__(
            code="UNSUPPORTED_FORMAT_VERSION",
            message=f"Unsupported collection formatVersion: {found!r}",
            suggestion=f"Supported format versions: {', '.join(supported)}.",
        )


class InvalidCollectionError(CollectionGenError):
    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__(
            code="INVALID_COLLECTION",
            message=f"Package collection is invalid: {'; '.join(errors)}",
            suggestion="Regenerate the collection or fix the listed fields.",
            detail=errors,
        )
