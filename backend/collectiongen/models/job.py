"""
Package Collection Generator — Generation job result contracts.

Every run returns a GenerationResult with full traceability:
step timings, recorded per-package failures and the collection itself.
"""

from __future__ import annotations

import enum

from pydantic import BaseModel, Field

from collectiongen.models.collection import Collection


class JobState(str, enum.Enum):
    RECEIVED = "RECEIVED"
    VALIDATED = "VALIDATED"
    INSPECTED = "INSPECTED"
    ASSEMBLED = "ASSEMBLED"
    DELIVERED = "DELIVERED"
    FAILED = "FAILED"


class StepTiming(BaseModel):
    step: str
    duration_ms: int
    status: str = "ok"  # ok | skipped | failed
    detail: str = ""


class PackageFailure(BaseModel):
    """A package or a single version that was skipped."""

    url: str
    version: str | None = None
    code: str
    message: str


class GenerationResult(BaseModel):
    """Complete output contract for one generation run."""

    job_id: str
    collection: Collection
    timings: list[StepTiming] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    failures: list[PackageFailure] = Field(default_factory=list)
