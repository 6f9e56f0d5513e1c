"""Package Collection Generator data models — typed contracts for the entire pipeline."""

from collectiongen.models.collection import (
    Author,
    Collection,
    FormatVersion,
    License,
    Package,
    Platform,
    PlatformVersion,
    Product,
    ProductType,
    Target,
    Version,
)
from collectiongen.models.input import GeneratorInput, InputPackage
from collectiongen.models.job import (
    GenerationResult,
    JobState,
    PackageFailure,
    StepTiming,
)

__all__ = [
    "Author",
    "Collection",
    "FormatVersion",
    "License",
    "Package",
    "Platform",
    "PlatformVersion",
    "Product",
    "ProductType",
    "Target",
    "Version",
    "GeneratorInput",
    "InputPackage",
    "GenerationResult",
    "JobState",
    "PackageFailure",
    "StepTiming",
]
