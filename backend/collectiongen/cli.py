"""
Package Collection Generator — command line entry point.

  package-collection-generate <input-path> <output-path>
      [--working-directory-path PATH] [--revision N] [--verbose]

Reads the input descriptor, inspects every listed package, and writes
the package collection. Nothing is written when the run fails.
"""

from __future__ import annotations

import argparse
import asyncio
import sys

from collectiongen.core.config import settings
from collectiongen.errors import CollectionGenError
from collectiongen.inspector.auth import GitHubCredentials
from collectiongen.inspector.base import PackageInspector
from collectiongen.inspector.git import GitPackageInspector
from collectiongen.inspector.github import GitHubMetadataClient
from collectiongen.pipeline.orchestrator import GenerationOrchestrator
from collectiongen.render import render
from collectiongen.serialization import write_collection
from collectiongen.utils.logging import logger, set_verbose, step_timer
from collectiongen.utils.validate import load_input_file


def _positive_int(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {raw!r}")
    if value < 1:
        raise argparse.ArgumentTypeError("revision must be at least 1")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="package-collection-generate",
        description="Generate a package collection from an input descriptor.",
    )
    parser.add_argument("input_path", metavar="input-path", help="Path to the input JSON file")
    parser.add_argument("output_path", metavar="output-path", help="Where to write the package collection")
    parser.add_argument(
        "--working-directory-path",
        default=None,
        help="Directory for package checkouts (existing checkouts are reused)",
    )
    parser.add_argument("--revision", type=_positive_int, default=None, help="Collection revision number")
    parser.add_argument("--verbose", action="store_true", help="Show extra logging for debugging")
    return parser


def build_inspector(working_directory: str | None) -> PackageInspector:
    github = GitHubMetadataClient(
        base_url=settings.github.api_base_url,
        credentials=GitHubCredentials(token=settings.github.token),
        timeout=settings.github.timeout,
    )
    return GitPackageInspector(
        working_directory=working_directory or settings.working_directory,
        git=settings.toolchain.git,
        swift=settings.toolchain.swift,
        command_timeout=settings.toolchain.command_timeout,
        github=github,
    )


def run(args: argparse.Namespace, inspector: PackageInspector | None = None) -> int:
    set_verbose(args.verbose)
    try:
        with step_timer("Load input"):
            source = load_input_file(args.input_path)
        logger.debug("Input:\n%s", render(source))

        orchestrator = GenerationOrchestrator(
            source,
            inspector or build_inspector(args.working_directory_path),
            revision=args.revision,
        )
        result = asyncio.run(orchestrator.run())

        for warning in result.warnings:
            logger.warning("%s", warning)
        logger.debug("Collection:\n%s", render(result.collection))

        write_collection(result.collection, args.output_path)
    except CollectionGenError as exc:
        logger.error("%s: %s", exc.code, exc.message)
        if exc.suggestion:
            logger.error("  %s", exc.suggestion)
        return 1

    print(f"Package collection saved to {args.output_path}")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    return run(args)


if __name__ == "__main__":
    sys.exit(main())
