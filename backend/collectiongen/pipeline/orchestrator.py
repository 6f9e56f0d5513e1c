"""
Package Collection Generator — Generation orchestrator.

Runs the collection pipeline as a state machine:

  RECEIVED → VALIDATED → INSPECTED → ASSEMBLED → DELIVERED

Packages are inspected concurrently (inspector calls run in worker
threads) and re-joined in input order, so the collection is identical to
a sequential run. Versions of one package are inspected one at a time.
Each step is timed, logged, and recorded in the GenerationResult.
"""

from __future__ import annotations

import asyncio
import time
import uuid
from datetime import datetime, timezone
from typing import Any

from collectiongen.core.config import settings
from collectiongen.errors import (
    CollectionGenError,
    EmptyCatalogError,
    ManifestUnreadableError,
    UnreachablePackageError,
    VersionUnavailableError,
)
from collectiongen.inspector.base import InspectionResult, PackageInspector
from collectiongen.models.collection import Collection, FormatVersion, Package, Version
from collectiongen.models.input import GeneratorInput, InputPackage
from collectiongen.models.job import GenerationResult, JobState, PackageFailure, StepTiming
from collectiongen.pipeline.exclusions import apply_exclusions
from collectiongen.pipeline.select_versions import select_versions
from collectiongen.utils.logging import logger
from collectiongen.utils.semver import SemanticVersion
from collectiongen.utils.validate import validate_input_payload


class PipelineContext:
    """Mutable context passed through pipeline steps."""

    def __init__(self):
        self.input: GeneratorInput | None = None
        self.packages: list[Package | None] = []
        self.collection: Collection | None = None
        self.warnings: list[str] = []
        self.failures: list[PackageFailure] = []


class GenerationOrchestrator:
    """
    State-machine orchestrator for the collection generation pipeline.

    Only fatal errors (malformed input, an explicitly requested version
    that is not tagged, an empty collection) escape run(). Unreachable
    packages and unreadable versions are skipped and recorded.
    """

    def __init__(
        self,
        input_data: GeneratorInput | dict[str, Any],
        inspector: PackageInspector,
        revision: int | None = None,
        max_concurrency: int | None = None,
    ):
        self.job_id = uuid.uuid4().hex[:12]
        self.raw_input = input_data
        self.inspector = inspector
        self.revision = revision
        self.max_concurrency = max_concurrency or settings.max_concurrency
        self.state = JobState.RECEIVED
        self.ctx = PipelineContext()
        self.timings: list[StepTiming] = []

    def _record_step(self, name: str, start: float, status: str = "ok", detail: str = ""):
        ms = int((time.perf_counter() - start) * 1000)
        self.timings.append(StepTiming(step=name, duration_ms=ms, status=status, detail=detail))
        symbol = "✓" if status == "ok" else ("⊘" if status == "skipped" else "✗")
        logger.info("  %s %s — %dms %s", symbol, name, ms, detail)

    def _record_failure(self, url: str, exc: CollectionGenError, version: str | None = None):
        self.ctx.failures.append(
            PackageFailure(url=url, version=version, code=exc.code, message=exc.message)
        )
        where = f"{url} @ {version}" if version else url
        self.ctx.warnings.append(f"{where}: {exc.message}")
        logger.warning("  Skipped %s — %s", where, exc.code)

    async def run(self) -> GenerationResult:
        """Execute the full pipeline. Returns a complete GenerationResult."""
        logger.info("=" * 60)
        logger.info("[%s] Collection generation starting", self.job_id)
        logger.info("=" * 60)
        pipeline_start = time.perf_counter()

        try:
            await self._step_validate()
            await self._step_inspect()
            await self._step_assemble()
            self.state = JobState.DELIVERED
        except Exception:
            self.state = JobState.FAILED
            raise

        total_ms = int((time.perf_counter() - pipeline_start) * 1000)
        logger.info("=" * 60)
        logger.info(
            "[%s] Generation complete — %d packages, %d skipped, %dms",
            self.job_id, len(self.ctx.collection.packages), len(self.ctx.failures), total_ms,
        )
        logger.info("=" * 60)

        return GenerationResult(
            job_id=self.job_id,
            collection=self.ctx.collection,
            timings=self.timings,
            warnings=self.ctx.warnings,
            failures=self.ctx.failures,
        )

    async def _step_validate(self):
        t = time.perf_counter()
        if isinstance(self.raw_input, GeneratorInput):
            self.ctx.input = self.raw_input
        else:
            try:
                self.ctx.input = validate_input_payload(self.raw_input)
            except CollectionGenError as exc:
                self._record_step("validate", t, "failed", exc.message)
                raise
        self.state = JobState.VALIDATED
        self._record_step("validate", t, detail=f"{len(self.ctx.input.packages)} packages")

    async def _step_inspect(self):
        t = time.perf_counter()
        semaphore = asyncio.Semaphore(self.max_concurrency)
        tasks = [
            asyncio.create_task(self._process_package(pkg, semaphore))
            for pkg in self.ctx.input.packages
        ]
        try:
            self.ctx.packages = list(await asyncio.gather(*tasks))
        except Exception as exc:
            for task in tasks:
                task.cancel()
            self._record_step("inspect", t, "failed", str(exc))
            raise
        self.state = JobState.INSPECTED
        kept = sum(1 for p in self.ctx.packages if p is not None)
        self._record_step("inspect", t, detail=f"{kept}/{len(tasks)} packages")

    async def _process_package(
        self, pkg: InputPackage, semaphore: asyncio.Semaphore
    ) -> Package | None:
        async with semaphore:
            try:
                tags = await asyncio.to_thread(self.inspector.list_versions, pkg.url)
            except UnreachablePackageError as exc:
                self._record_failure(pkg.url, exc)
                return None

            selected = select_versions(pkg.url, pkg.versions, tags)
            logger.info("  %s: selected %s", pkg.url, ", ".join(selected) or "nothing")

            versions: list[Version] = []
            for tag in selected:
                try:
                    result = await asyncio.to_thread(self.inspector.inspect, pkg.url, tag)
                except (ManifestUnreadableError, VersionUnavailableError) as exc:
                    self._record_failure(pkg.url, exc, version=tag)
                    continue
                versions.append(build_version(tag, result, pkg))

            if not versions:
                message = f"{pkg.url}: no usable versions, package dropped"
                self.ctx.warnings.append(message)
                logger.warning("  %s", message)
                return None

            readme_url = pkg.readme_url
            if readme_url is None:
                readme_url = await asyncio.to_thread(self.inspector.readme_url, pkg.url)

        return Package(
            url=pkg.url,
            summary=pkg.summary,
            keywords=pkg.keywords,
            versions=versions,
            readme_url=readme_url,
        )

    async def _step_assemble(self):
        t = time.perf_counter()
        packages = [p for p in self.ctx.packages if p is not None]
        if not packages:
            self._record_step("assemble", t, "failed", "no packages")
            raise EmptyCatalogError(skipped=len(self.ctx.packages))

        source = self.ctx.input
        self.ctx.collection = Collection(
            name=source.title,
            overview=source.overview,
            keywords=source.keywords,
            packages=packages,
            format_version=FormatVersion.V1_0,
            revision=self.revision,
            generated_at=datetime.now(timezone.utc).replace(microsecond=0),
            generated_by=source.author,
        )
        self.state = JobState.ASSEMBLED
        self._record_step("assemble", t, detail=f"{len(packages)} packages")


def build_version(tag: str, result: InspectionResult, pkg: InputPackage) -> Version:
    """Assemble one Version record from an inspection result and the input's exclusions."""
    targets, products = apply_exclusions(
        result.targets,
        result.products,
        excluded_products=pkg.excluded_products,
        excluded_targets=pkg.excluded_targets,
    )
    parsed = SemanticVersion.parse(tag)
    return Version(
        version=str(parsed) if parsed else tag,
        package_name=result.package_name,
        targets=targets,
        products=products,
        tools_version=result.tools_version,
        minimum_platform_versions=result.minimum_platform_versions,
        verified_platforms=result.verified_platforms,
        verified_swift_versions=result.verified_swift_versions,
        license=result.license,
    )
