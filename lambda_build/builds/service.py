"""Build service module.

This module provides the high-level build API:
- build(): resolve target, prepare toolchain, compile and package
- package_existing(): zip a function built by an earlier run

The pipeline is strictly sequential; binaries are packaged one after
another in manifest order.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from lambda_build.builds.packager import find_function_archive, package_binary
from lambda_build.builds.runner import (
    compose_build_command,
    compose_build_env,
    run_build,
    validate_binary_filter,
)
from lambda_build.config import get_settings
from lambda_build.errors import BuildFailedError
from lambda_build.targets.resolver import resolve_target
from lambda_build.toolchain import CargoToolchain
from lambda_build.types import BuildArtifact, BuildReport, BuildRequest, ResolvedTarget

if TYPE_CHECKING:
    from lambda_build.config import Settings

logger = logging.getLogger(__name__)


def compiled_binary_path(target_dir: Path, target: ResolvedTarget, name: str) -> Path:
    """Where cargo writes a binary: <target_dir>/<platform>/<profile>/<name>."""
    return target_dir / target.platform_key / target.profile_dir / name


def default_lambda_dir(target_dir: Path) -> Path:
    """Default Lambda output root: <target_dir>/lambda."""
    return target_dir / "lambda"


def build(
    request: BuildRequest,
    settings: Settings | None = None,
    toolchain: CargoToolchain | None = None,
) -> BuildReport:
    """Compile the project for Lambda and package every produced binary.

    Args:
        request: The build request.
        settings: Settings instance; uses default if not provided.
        toolchain: Toolchain operations; uses CargoToolchain if not provided.

    Returns:
        BuildReport with the resolved target and one artifact per
        binary the compiler produced.

    Raises:
        ConflictingOptionsError: --arm64 combined with --target.
        UnsupportedTargetError: Target is not a Lambda platform.
        ToolchainUnavailableError: Target component missing and not installable.
        ManifestError: Binary targets could not be read.
        UnknownBinaryTargetError: --bin names an undeclared binary.
        LinkerUnavailableError: Zig linker missing and not installable.
        BuildFailedError: cargo exited unsuccessfully.
        BinaryNotFoundError: A binary vanished before packaging.
        UnsupportedArchitectureError: A binary is not arm64 or x86_64.
        ArtifactWriteError: An artifact could not be written.
    """
    if settings is None:
        settings = get_settings()
    if toolchain is None:
        toolchain = CargoToolchain(settings)

    host = toolchain.host_facts()
    target = resolve_target(request, host)
    logger.info(
        "Building for %s (%s profile)", target.triple, target.profile_dir
    )

    toolchain.ensure_target(target.platform_key, host)

    binaries = toolchain.binary_targets(request.manifest_path)
    validate_binary_filter(request.bins, binaries)

    if not request.disable_zig_linker:
        toolchain.ensure_linker()

    command = compose_build_command(target, request, cargo=settings.cargo_command)
    result = run_build(command, env=compose_build_env(request))
    if not result.success:
        raise BuildFailedError(result.exit_code or 1)

    lambda_dir = (
        request.lambda_dir
        or settings.lambda_dir
        or default_lambda_dir(settings.target_dir)
    )
    artifacts: list[BuildArtifact] = []
    for name in binaries:
        binary = compiled_binary_path(settings.target_dir, target, name)
        if not binary.exists():
            logger.debug("Skipping %s: not produced by this build", name)
            continue
        artifacts.append(
            package_binary(binary, lambda_dir / name, request.output_format)
        )

    logger.info("Packaged %d function(s) into %s", len(artifacts), lambda_dir)
    return BuildReport(target=target, artifacts=tuple(artifacts))


def package_existing(
    name: str,
    lambda_dir: Path | None = None,
    settings: Settings | None = None,
) -> BuildArtifact:
    """Zip a function binary produced by an earlier build.

    Args:
        name: Function (binary) name.
        lambda_dir: Lambda output root override.
        settings: Settings instance; uses default if not provided.

    Returns:
        BuildArtifact for the bootstrap.zip archive.

    Raises:
        BinaryNotFoundError: If the function has not been built.
    """
    if settings is None:
        settings = get_settings()
    return find_function_archive(
        name,
        lambda_dir=lambda_dir or settings.lambda_dir,
        target_dir=settings.target_dir,
    )


__all__ = [
    "build",
    "compiled_binary_path",
    "default_lambda_dir",
    "package_existing",
]
