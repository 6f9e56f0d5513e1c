"""
Package Collection Generator — Manifest dump parser.

Maps the JSON printed by `swift package dump-package` to an
InspectionResult. Only the fields the collection publishes are read.
"""

from __future__ import annotations

import re
from typing import Any

import pydantic

from collectiongen.inspector.base import InspectionResult
from collectiongen.models.collection import PlatformVersion, Product, ProductType, Target

UNPUBLISHED_TARGET_TYPES = {"test"}
_NON_IDENTIFIER = re.compile(r"[^0-9A-Za-z_]")


class ManifestFormatError(ValueError):
    """The manifest dump does not have the expected shape."""


def module_name(target_name: str) -> str:
    """Importable module name of a target: non-identifier characters become "_"."""
    name = _NON_IDENTIFIER.sub("_", target_name)
    if name[:1].isdigit():
        name = "_" + name
    return name


def normalize_tools_version(raw: Any) -> str:
    if isinstance(raw, dict):
        raw = raw.get("_version")
    if not isinstance(raw, str) or not raw.strip():
        raise ManifestFormatError("missing toolsVersion")
    parts = raw.strip().split(".")
    while len(parts) < 3:
        parts.append("0")
    return ".".join(parts)


def _parse_platforms(raw: Any) -> list[PlatformVersion] | None:
    if not raw:
        return None
    return [
        PlatformVersion(name=p["platformName"], version=p["version"])
        for p in raw
    ]


def parse_manifest(dump: dict[str, Any]) -> InspectionResult:
    """
    Build an InspectionResult from a dump-package payload.

    Targets and products keep manifest order. Test targets and test
    products are not published.
    Raises ManifestFormatError when required keys are missing.
    """
    try:
        targets = [
            Target(name=t["name"], module_name=module_name(t["name"]))
            for t in dump.get("targets", [])
            if t.get("type", "regular") not in UNPUBLISHED_TARGET_TYPES
        ]
        products = []
        for p in dump.get("products", []):
            product_type = ProductType(p["type"])
            if product_type.kind == "test":
                continue
            products.append(Product(name=p["name"], type=product_type, targets=p["targets"]))

        return InspectionResult(
            package_name=dump["name"],
            targets=targets,
            products=products,
            tools_version=normalize_tools_version(dump.get("toolsVersion")),
            minimum_platform_versions=_parse_platforms(dump.get("platforms")),
        )
    except (KeyError, TypeError) as exc:
        raise ManifestFormatError(f"unexpected manifest shape: {exc}") from exc
    except pydantic.ValidationError as exc:
        raise ManifestFormatError(f"invalid manifest value: {exc.error_count()} error(s)") from exc
