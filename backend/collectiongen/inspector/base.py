"""
Package Collection Generator — Package inspector contract.

The generation pipeline is the only caller. Each call is a blocking unit
of work: it either returns a complete result or raises one of
UnreachablePackageError, VersionUnavailableError, ManifestUnreadableError.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

from collectiongen.models.collection import License, Platform, PlatformVersion, Product, Target


class InspectionResult(BaseModel):
    """Manifest metadata of one package at one tag."""

    model_config = ConfigDict(frozen=True)

    package_name: str = Field(min_length=1)
    targets: list[Target] = Field(default_factory=list)
    products: list[Product] = Field(default_factory=list)
    tools_version: str = Field(min_length=1)
    minimum_platform_versions: list[PlatformVersion] | None = None
    verified_platforms: list[Platform] | None = None
    verified_swift_versions: list[str] | None = None
    license: License | None = None


@runtime_checkable
class PackageInspector(Protocol):
    def list_versions(self, url: str) -> list[str]:
        """Return the package's version tags."""
        ...

    def inspect(self, url: str, version: str) -> InspectionResult:
        """Read the manifest of the package at the given tag."""
        ...

    def readme_url(self, url: str) -> str | None:
        """Return the package's README URL, if one can be found."""
        ...
