"""Shared type definitions for lambda_build.

This module contains the enums and immutable records passed between
the target resolver, toolchain gate, build runner and packager.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any


class OutputFormat(str, Enum):
    """Format of the packaged Lambda function."""

    BINARY = "Binary"
    ZIP = "Zip"

    @classmethod
    def parse(cls, value: str) -> OutputFormat:
        """Parse an output format name, ignoring case.

        Raises:
            ValueError: If the value names no known format.
        """
        for member in cls:
            if member.value.lower() == value.lower():
                return member
        valid = ", ".join(m.value for m in cls)
        raise ValueError(f"invalid output format '{value}', expected one of: {valid}")


class Architecture(str, Enum):
    """Lambda instruction set architecture, named as AWS names it."""

    ARM64 = "arm64"
    X86_64 = "x86_64"


@dataclass(frozen=True)
class HostFacts:
    """Facts about the host Rust compiler.

    Attributes:
        host_triple: Triple the compiler runs on (and builds for by default).
        release_channel: stable, beta, nightly or dev.
        release: Full compiler release string (e.g. 1.76.0-nightly).
    """

    host_triple: str
    release_channel: str
    release: str = ""


@dataclass(frozen=True)
class BuildRequest:
    """Everything the user asked for in one build run.

    Attributes:
        targets: Explicit target triples; only the first one is used.
        arm64: Shortcut for the arm64 Linux target.
        profile: Explicit cargo profile name.
        release: Whether --release was given.
        bins: Binary names to build; empty means all of them.
        manifest_path: Path to Cargo.toml.
        disable_zig_linker: Build with plain cargo instead of cargo-zigbuild.
        extra_args: Arguments passed through to cargo untouched.
        output_format: How to package each binary.
        lambda_dir: Output root override for packaged functions.
    """

    targets: tuple[str, ...] = ()
    arm64: bool = False
    profile: str | None = None
    release: bool = False
    bins: tuple[str, ...] = ()
    manifest_path: Path = Path("Cargo.toml")
    disable_zig_linker: bool = False
    extra_args: tuple[str, ...] = ()
    output_format: OutputFormat = OutputFormat.BINARY
    lambda_dir: Path | None = None


@dataclass(frozen=True)
class ResolvedTarget:
    """The single target a run compiles for.

    Attributes:
        triple: Triple passed to the compiler, possibly with a glibc suffix.
        platform_key: Triple without the glibc suffix; names the output dir.
        profile_dir: Output directory of the profile (debug, release, ...).
    """

    triple: str
    platform_key: str
    profile_dir: str


@dataclass(frozen=True)
class BuildArtifact:
    """A packaged Lambda function.

    Attributes:
        architecture: Architecture read from the binary.
        sha256: Upper-case SHA-256 of the raw binary bytes.
        path: The bootstrap.zip archive or the renamed bootstrap binary.
    """

    architecture: Architecture
    sha256: str
    path: Path

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "architecture": self.architecture.value,
            "sha256": self.sha256,
            "path": str(self.path),
        }


@dataclass(frozen=True)
class BuildReport:
    """Outcome of a successful build run."""

    target: ResolvedTarget
    artifacts: tuple[BuildArtifact, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "target": asdict(self.target),
            "artifacts": [a.to_dict() for a in self.artifacts],
        }


__all__ = [
    "Architecture",
    "BuildArtifact",
    "BuildReport",
    "BuildRequest",
    "HostFacts",
    "OutputFormat",
    "ResolvedTarget",
]
