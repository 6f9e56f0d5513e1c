"""
Package Collection Generator — Git + SwiftPM package inspector.

Keeps one checkout per package URL under the working directory:
  - an existing checkout is reused (tags are refreshed when possible)
  - otherwise the package URL is cloned
Tags come from `git tag`; manifests are read by checking out the tag and
running `swift package dump-package`.
Commands against one checkout are serialized; different packages run in
parallel.
"""

from __future__ import annotations

import hashlib
import json
import subprocess
import threading
from pathlib import Path

from collectiongen.errors import (
    ManifestUnreadableError,
    UnreachablePackageError,
    VersionUnavailableError,
)
from collectiongen.inspector.base import InspectionResult
from collectiongen.inspector.github import GitHubMetadataClient
from collectiongen.inspector.manifest import ManifestFormatError, parse_manifest
from collectiongen.utils.logging import logger, step_timer


class CommandError(Exception):
    def __init__(self, argv: list[str], returncode: int, stderr: str):
        self.argv = argv
        self.returncode = returncode
        self.stderr = stderr.strip()
        super().__init__(f"{' '.join(argv)} exited with {returncode}: {self.stderr[:500]}")


def checkout_name(url: str) -> str:
    """Directory name of a package's checkout: "<repo>-<url digest>".

    The digest keeps packages with the same repository name on different
    hosts or owners in separate checkouts.
    """
    name = url.rstrip("/").replace(":", "/").rsplit("/", 1)[-1]
    if name.endswith(".git"):
        name = name[: -len(".git")]
    digest = hashlib.sha256(url.encode("utf-8")).hexdigest()[:12]
    return f"{name or 'package'}-{digest}"


class GitPackageInspector:
    """Inspect packages through local git checkouts and the Swift toolchain."""

    def __init__(
        self,
        working_directory: str | Path,
        git: str = "git",
        swift: str = "swift",
        command_timeout: float = 300.0,
        github: GitHubMetadataClient | None = None,
    ):
        self.working_directory = Path(working_directory)
        self.git = git
        self.swift = swift
        self.command_timeout = command_timeout
        self.github = github
        self._locks: dict[Path, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def _run(self, argv: list[str], cwd: Path | None = None) -> str:
        try:
            proc = subprocess.run(
                argv,
                cwd=str(cwd) if cwd else None,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                timeout=self.command_timeout,
                check=False,
            )
        except (OSError, subprocess.TimeoutExpired) as exc:
            raise CommandError(argv, -1, str(exc)) from exc
        if proc.returncode != 0:
            raise CommandError(argv, proc.returncode, proc.stderr)
        return proc.stdout

    def checkout_path(self, url: str) -> Path:
        return self.working_directory / checkout_name(url)

    def _checkout_lock(self, path: Path) -> threading.Lock:
        with self._locks_guard:
            return self._locks.setdefault(path, threading.Lock())

    def _ensure_checkout(self, url: str) -> Path:
        path = self.checkout_path(url)
        if (path / ".git").exists():
            try:
                self._run([self.git, "fetch", "--tags", "--quiet"], cwd=path)
            except CommandError as exc:
                logger.warning("  Could not refresh %s, using existing checkout: %s", path, exc.stderr)
            return path

        self.working_directory.mkdir(parents=True, exist_ok=True)
        with step_timer(f"Clone {url}"):
            try:
                self._run([self.git, "clone", "--quiet", url, str(path)])
            except CommandError as exc:
                raise UnreachablePackageError(url, exc.stderr) from exc
        return path

    def list_versions(self, url: str) -> list[str]:
        with self._checkout_lock(self.checkout_path(url)):
            path = self._ensure_checkout(url)
            try:
                output = self._run([self.git, "tag", "--list"], cwd=path)
            except CommandError as exc:
                raise UnreachablePackageError(url, exc.stderr) from exc
        tags = [line.strip() for line in output.splitlines() if line.strip()]
        logger.info("  %s: %d tags", url, len(tags))
        return tags

    def inspect(self, url: str, version: str) -> InspectionResult:
        path = self.checkout_path(url)
        # the working tree is shared, so checkout and dump must not interleave
        with self._checkout_lock(path):
            try:
                self._run([self.git, "checkout", "--quiet", "--force", f"refs/tags/{version}"], cwd=path)
            except CommandError as exc:
                raise VersionUnavailableError(url, version, exc.stderr) from exc

            try:
                output = self._run([self.swift, "package", "dump-package", "--package-path", str(path)])
                result = parse_manifest(json.loads(output))
            except CommandError as exc:
                raise ManifestUnreadableError(url, version, exc.stderr) from exc
            except (json.JSONDecodeError, ManifestFormatError) as exc:
                raise ManifestUnreadableError(url, version, str(exc)) from exc

        if self.github is not None and result.license is None:
            license_ = self.github.license(url)
            if license_ is not None:
                result = result.model_copy(update={"license": license_})
        return result

    def readme_url(self, url: str) -> str | None:
        if self.github is None:
            return None
        return self.github.readme_url(url)
