"""Build target resolution.

This module decides which target triple a run compiles for:
- Rejecting --arm64 combined with an explicit --target
- Validating explicit targets against the platforms AWS Lambda runs
- Falling back to the host triple or to x86_64 Linux
- Mapping the cargo profile to its output directory

Everything here is pure; no tool is invoked.
"""

from __future__ import annotations

import logging

from lambda_build.errors import ConflictingOptionsError, UnsupportedTargetError
from lambda_build.types import BuildRequest, HostFacts, ResolvedTarget

logger = logging.getLogger(__name__)

TARGET_ARM = "aarch64-unknown-linux-gnu"
TARGET_X86_64 = "x86_64-unknown-linux-gnu"

# Prefixes rather than exact triples: musl variants and glibc-versioned
# triples (x86_64-unknown-linux-gnu.2.17) are also valid Lambda targets.
SUPPORTED_PREFIXES = ("aarch64-unknown-linux", "x86_64-unknown-linux")

DEBUG_PROFILES = frozenset({"dev", "test"})
RELEASE_PROFILES = frozenset({"release", "bench"})


def normalize_target(triple: str) -> str:
    """Strip a trailing glibc version suffix from a triple.

    Args:
        triple: Target triple, e.g. aarch64-unknown-linux-gnu.2.26.

    Returns:
        Everything before the first '.', e.g. aarch64-unknown-linux-gnu.
    """
    return triple.split(".", 1)[0]


def is_supported_target(triple: str) -> bool:
    """Check whether a triple belongs to a Lambda platform family."""
    return normalize_target(triple).startswith(SUPPORTED_PREFIXES)


def check_build_target(triple: str) -> None:
    """Validate that a build target is supported by AWS Lambda.

    Raises:
        UnsupportedTargetError: If the triple is neither arm64 nor x86_64 Linux.
    """
    if not is_supported_target(triple):
        raise UnsupportedTargetError(triple)


def profile_directory(profile: str | None, release: bool) -> str:
    """Return the directory cargo writes a profile's output to.

    Args:
        profile: Explicit --profile value, if any.
        release: Whether --release was given.

    Returns:
        debug, release, or the custom profile name itself.
    """
    if profile is None:
        return "release" if release else "debug"
    if profile in DEBUG_PROFILES:
        return "debug"
    if profile in RELEASE_PROFILES:
        return "release"
    return profile


def resolve_target(request: BuildRequest, host: HostFacts) -> ResolvedTarget:
    """Resolve the single target triple for a build request.

    Args:
        request: The build request.
        host: Facts about the host compiler.

    Returns:
        ResolvedTarget with triple, platform key and profile directory.

    Raises:
        ConflictingOptionsError: If --arm64 is combined with --target.
        UnsupportedTargetError: If the explicit target is not a Lambda target.
    """
    if request.arm64 and request.targets:
        raise ConflictingOptionsError()

    if request.arm64:
        triple = TARGET_ARM
    elif request.targets:
        triple = request.targets[0]
        check_build_target(triple)
    elif host.host_triple in (TARGET_ARM, TARGET_X86_64):
        # Naming the host explicitly puts output under target/<triple>/
        triple = host.host_triple
    else:
        logger.debug(
            "Host %s cannot run Lambda binaries, cross-compiling for %s",
            host.host_triple,
            TARGET_X86_64,
        )
        triple = TARGET_X86_64

    resolved = ResolvedTarget(
        triple=triple,
        platform_key=normalize_target(triple),
        profile_dir=profile_directory(request.profile, request.release),
    )
    logger.debug("Resolved build target: %s", resolved)
    return resolved


__all__ = [
    "SUPPORTED_PREFIXES",
    "TARGET_ARM",
    "TARGET_X86_64",
    "check_build_target",
    "is_supported_target",
    "normalize_target",
    "profile_directory",
    "resolve_target",
]
