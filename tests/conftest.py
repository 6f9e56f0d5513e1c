"""Shared test configuration and fixtures for the package collection generator test suite."""

import sys
import time
from pathlib import Path

import pytest

# Add backend to Python path so imports work
backend_dir = str(Path(__file__).parent.parent / "backend")
if backend_dir not in sys.path:
    sys.path.insert(0, backend_dir)

from collectiongen.inspector.base import InspectionResult  # noqa: E402
from collectiongen.models.collection import Product, ProductType, Target  # noqa: E402


class ScriptedInspector:
    """
    In-memory package inspector.

    `packages` maps url -> {tag: InspectionResult | Exception}. Urls listed
    in `unreachable` fail list_versions; `delays` (seconds, per url) slow
    down inspect() so completion order differs from input order.
    """

    def __init__(self, packages, unreachable=(), readmes=None, delays=None, tags=None):
        self.packages = packages
        self.unreachable = set(unreachable)
        self.readmes = readmes or {}
        self.delays = delays or {}
        self.tags = tags or {}
        self.calls: list[tuple[str, str]] = []

    def list_versions(self, url):
        from collectiongen.errors import UnreachablePackageError

        if url in self.unreachable:
            raise UnreachablePackageError(url, "not found")
        return list(self.tags.get(url, self.packages.get(url, {}).keys()))

    def inspect(self, url, version):
        self.calls.append((url, version))
        time.sleep(self.delays.get(url, 0))
        outcome = self.packages[url][version]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def readme_url(self, url):
        return self.readmes.get(url)


def library_result(package_name, *target_names, tools_version="5.2.0", **extra):
    """One library product per target, the shape most test packages have."""
    return InspectionResult(
        package_name=package_name,
        targets=[Target(name=n, module_name=n) for n in target_names],
        products=[Product(name=n, type=ProductType.library(), targets=[n]) for n in target_names],
        tools_version=tools_version,
        **extra,
    )


@pytest.fixture
def scripted_inspector():
    return ScriptedInspector


@pytest.fixture
def make_result():
    return library_result


@pytest.fixture(scope="session")
def project_root():
    return Path(__file__).parent.parent


@pytest.fixture(scope="session")
def fixtures_dir(project_root):
    return project_root / "tests" / "fixtures"
