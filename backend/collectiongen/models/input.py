"""
Package Collection Generator — Input descriptor.

The user-authored request: which packages to publish and which of their
versions, products and targets to include. Read once per run.
"""

from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from collectiongen.models.collection import Author, UrlStr
from collectiongen.utils.semver import SemanticVersion


class InputPackage(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    url: UrlStr
    summary: str | None = Field(
        default=None,
        validation_alias=AliasChoices("description", "summary"),
        serialization_alias="description",
    )
    keywords: list[str] | None = None
    # Absent means "select automatically": latest release of each major line.
    versions: list[str] | None = None
    excluded_products: list[str] | None = Field(default=None, alias="excludedProducts")
    excluded_targets: list[str] | None = Field(default=None, alias="excludedTargets")
    readme_url: UrlStr | None = Field(default=None, alias="readmeURL")

    @field_validator("versions")
    @classmethod
    def _explicit_versions(cls, value: list[str] | None) -> list[str] | None:
        if value is None:
            return value
        if not value:
            raise ValueError("versions must not be empty; omit it to select automatically")
        invalid = [v for v in value if SemanticVersion.parse(v) is None]
        if invalid:
            raise ValueError(f"not semantic versions: {', '.join(invalid)}")
        canonical = [str(SemanticVersion.parse(v)) for v in value]
        duplicates = sorted({v for v, c in zip(value, canonical) if canonical.count(c) > 1})
        if duplicates:
            raise ValueError(f"duplicate versions: {', '.join(duplicates)}")
        return value


class GeneratorInput(BaseModel):
    """Input for the package-collection-generate command."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    title: str = Field(min_length=1)
    overview: str | None = Field(
        default=None,
        validation_alias=AliasChoices("overview", "description"),
        serialization_alias="overview",
    )
    keywords: list[str] | None = None
    packages: list[InputPackage] = Field(min_length=1)
    author: Author | None = None

    @model_validator(mode="after")
    def _unique_packages(self) -> GeneratorInput:
        urls = [p.url for p in self.packages]
        duplicates = sorted({u for u in urls if urls.count(u) > 1})
        if duplicates:
            raise ValueError(f"duplicate package urls: {', '.join(duplicates)}")
        return self
