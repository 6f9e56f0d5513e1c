"""
Package Collection Generator — Configuration
Loads .env automatically, then reads all settings from environment variables.
"""

import os
import sys
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

_env_path = Path(__file__).resolve().parent.parent.parent.parent / ".env"
load_dotenv(_env_path)


@dataclass(frozen=True)
class ToolchainConfig:
    """External commands used to inspect package checkouts."""
    git: str
    swift: str
    command_timeout: float


@dataclass(frozen=True)
class GitHubConfig:
    """GitHub REST API access for README and license metadata."""
    api_base_url: str
    token: str
    timeout: float


@dataclass(frozen=True)
class AppConfig:
    """Top-level application configuration."""
    working_directory: str
    max_concurrency: int
    toolchain: ToolchainConfig
    github: GitHubConfig


def _load_config() -> AppConfig:
    return AppConfig(
        working_directory=os.getenv(
            "COLLECTIONGEN_WORKDIR",
            os.path.join(os.path.expanduser("~"), ".cache", "package-collection-generator"),
        ),
        max_concurrency=int(os.getenv("COLLECTIONGEN_MAX_CONCURRENCY", "4")),
        toolchain=ToolchainConfig(
            git=os.getenv("COLLECTIONGEN_GIT", "git"),
            swift=os.getenv("COLLECTIONGEN_SWIFT", "swift"),
            command_timeout=float(os.getenv("COLLECTIONGEN_COMMAND_TIMEOUT", "300.0")),
        ),
        github=GitHubConfig(
            api_base_url=os.getenv("GITHUB_API_BASE_URL", "https://api.github.com"),
            token=os.getenv("GITHUB_TOKEN", ""),
            timeout=float(os.getenv("GITHUB_HTTP_TIMEOUT", "10.0")),
        ),
    )


def _validate_config(cfg: AppConfig) -> None:
    """Fail fast on settings that would make every run fail."""
    problems: list[str] = []
    if cfg.max_concurrency < 1:
        problems.append("COLLECTIONGEN_MAX_CONCURRENCY must be at least 1")
    if cfg.toolchain.command_timeout <= 0:
        problems.append("COLLECTIONGEN_COMMAND_TIMEOUT must be positive")
    if cfg.github.timeout <= 0:
        problems.append("GITHUB_HTTP_TIMEOUT must be positive")
    if problems:
        print(
            f"\n  ERROR: Invalid configuration: {'; '.join(problems)}\n"
            f"  Fix the environment variables or the .env file at the project root.\n",
            file=sys.stderr,
        )
        sys.exit(1)


settings = _load_config()
_validate_config(settings)
