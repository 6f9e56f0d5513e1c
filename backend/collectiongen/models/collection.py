"""
Package Collection Generator — Typed package collection model (format 1.0).

Every pipeline step, the serializer and the text renderer work against
these records. No raw dicts leak across boundaries.

Absent optional fields are omitted from serialized output: the rule lives
in CollectionModel's serializer and nowhere else.
"""

from __future__ import annotations

import enum
import re
from datetime import datetime
from typing import Annotated, Any, Literal

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    RootModel,
    SerializerFunctionWrapHandler,
    field_validator,
    model_serializer,
    model_validator,
)
from pydantic.alias_generators import to_camel

from collectiongen.utils.semver import SemanticVersion, is_semantic_version

LibraryLinkage = Literal["automatic", "static", "dynamic"]

# scheme://rest, or scp-style git@host:path
URL_PATTERN = re.compile(r"^(?:[A-Za-z][A-Za-z0-9+.-]*://\S+|[\w.-]+@[\w.-]+:\S+)$")


def _check_url(value: str) -> str:
    if not URL_PATTERN.match(value):
        raise ValueError(f"not a URL: {value!r}")
    return value


UrlStr = Annotated[str, Field(min_length=1), AfterValidator(_check_url)]


class FormatVersion(str, enum.Enum):
    """Wire schema revisions. Append-only: never remove or rename a member."""

    V1_0 = "1.0"

    @classmethod
    def supported(cls) -> list[str]:
        return [member.value for member in cls]


class CollectionModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    @model_serializer(mode="wrap")
    def _omit_absent(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        data = handler(self)
        return {key: value for key, value in data.items() if value is not None}


class License(CollectionModel):
    name: str = Field(min_length=1)
    url: UrlStr


class Platform(CollectionModel):
    name: str = Field(min_length=1)


class PlatformVersion(CollectionModel):
    name: str = Field(min_length=1)
    version: str = Field(min_length=1)


class Target(CollectionModel):
    name: str = Field(min_length=1)
    module_name: str | None = None


class ProductType(RootModel[dict[str, Any]]):
    """
    Single-key product type, e.g. {"library": ["automatic"]} or {"executable": null}.

    Unknown variants are carried as-is; only the single-key shape is checked.
    """

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _single_variant(self) -> ProductType:
        if len(self.root) != 1:
            raise ValueError("product type must have exactly one variant key")
        return self

    @classmethod
    def library(cls, linkage: LibraryLinkage = "automatic") -> ProductType:
        return cls({"library": [linkage]})

    @classmethod
    def executable(cls) -> ProductType:
        return cls({"executable": None})

    @classmethod
    def plugin(cls) -> ProductType:
        return cls({"plugin": None})

    @classmethod
    def test(cls) -> ProductType:
        return cls({"test": None})

    @property
    def kind(self) -> str:
        return next(iter(self.root))

    def __str__(self) -> str:
        payload = self.root[self.kind]
        if payload is None:
            return self.kind
        if isinstance(payload, list):
            return f"{self.kind}({', '.join(str(p) for p in payload)})"
        return f"{self.kind}({payload})"


class Product(CollectionModel):
    name: str = Field(min_length=1)
    type: ProductType
    targets: list[str] = Field(min_length=1)


class Version(CollectionModel):
    """One tagged release of a package."""

    version: str
    package_name: str = Field(min_length=1)
    targets: list[Target] = Field(default_factory=list)
    products: list[Product] = Field(default_factory=list)
    tools_version: str = Field(min_length=1)
    minimum_platform_versions: list[PlatformVersion] | None = None
    verified_platforms: list[Platform] | None = None
    verified_swift_versions: list[str] | None = None
    license: License | None = None

    @field_validator("version")
    @classmethod
    def _semantic_version(cls, value: str) -> str:
        if not is_semantic_version(value):
            raise ValueError(f"not a semantic version: {value!r}")
        return value


class Package(CollectionModel):
    """A package and its selected versions, in caller order (newest first)."""

    url: UrlStr
    summary: str | None = None
    keywords: list[str] | None = None
    versions: list[Version] = Field(min_length=1)
    readme_url: UrlStr | None = Field(default=None, alias="readmeURL")

    @model_validator(mode="after")
    def _unique_versions(self) -> Package:
        seen: set[str] = set()
        for v in self.versions:
            canonical = str(SemanticVersion.parse(v.version))
            if canonical in seen:
                raise ValueError(f"duplicate version {v.version} for {self.url}")
            seen.add(canonical)
        return self


class Author(CollectionModel):
    name: str = Field(min_length=1)


class Collection(CollectionModel):
    """
    Package collection document.

    Built once by the generation pipeline and never mutated afterwards;
    generated_at is stamped at build time.
    """

    name: str = Field(min_length=1)
    overview: str | None = None
    keywords: list[str] | None = None
    packages: list[Package] = Field(min_length=1)
    format_version: FormatVersion = FormatVersion.V1_0
    revision: int | None = Field(default=None, ge=1)
    generated_at: datetime
    generated_by: Author | None = None
