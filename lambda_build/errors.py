"""Error definitions for lambda_build.

Every failure the pipeline can report is a subclass of LambdaBuildError
with a stable code, so the CLI (and any other frontend) can map errors
to messages and exit codes without string matching.
"""

from __future__ import annotations

from pathlib import Path

# Stable error codes
CONFLICTING_OPTIONS = "conflicting_options"
UNSUPPORTED_TARGET = "unsupported_target"
UNKNOWN_BINARY_TARGET = "unknown_binary_target"
TOOLCHAIN_UNAVAILABLE = "toolchain_unavailable"
LINKER_UNAVAILABLE = "linker_unavailable"
MANIFEST_ERROR = "manifest_error"
BUILD_SPAWN_ERROR = "build_spawn_error"
BUILD_FAILED = "build_failed"
BINARY_NOT_FOUND = "binary_not_found"
UNSUPPORTED_ARCHITECTURE = "unsupported_architecture"
IO_ERROR = "io_error"


class LambdaBuildError(Exception):
    """Base error for all lambda_build operations."""

    def __init__(self, message: str, code: str) -> None:
        super().__init__(message)
        self.message = message
        self.code = code


class ConflictingOptionsError(LambdaBuildError):
    """Mutually exclusive target selection flags were given together."""

    def __init__(self) -> None:
        super().__init__(
            "invalid options: --arm64 and --target cannot be specified at the same time",
            code=CONFLICTING_OPTIONS,
        )


class UnsupportedTargetError(LambdaBuildError):
    """Target triple is not one AWS Lambda can run."""

    def __init__(self, target: str) -> None:
        super().__init__(
            f"Invalid or unsupported target for AWS Lambda: {target}",
            code=UNSUPPORTED_TARGET,
        )
        self.target = target


class UnknownBinaryTargetError(LambdaBuildError):
    """A --bin filter names a binary the manifest does not declare."""

    def __init__(self, name: str) -> None:
        super().__init__(
            f"binary target is missing from this project: {name}",
            code=UNKNOWN_BINARY_TARGET,
        )
        self.name = name


class ToolchainUnavailableError(LambdaBuildError):
    """The Rust toolchain cannot compile for the requested target."""

    def __init__(self, message: str, target: str | None = None) -> None:
        super().__init__(message, code=TOOLCHAIN_UNAVAILABLE)
        self.target = target


class LinkerUnavailableError(LambdaBuildError):
    """The zig linker helper is missing and could not be installed."""

    def __init__(self, component: str, message: str) -> None:
        super().__init__(message, code=LINKER_UNAVAILABLE)
        self.component = component


class ManifestError(LambdaBuildError):
    """Binary targets could not be read from the Cargo manifest."""

    def __init__(self, manifest_path: Path, message: str) -> None:
        super().__init__(message, code=MANIFEST_ERROR)
        self.manifest_path = manifest_path


class BuildSpawnError(LambdaBuildError):
    """The compiler process could not be started or waited on."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code=BUILD_SPAWN_ERROR)


class BuildFailedError(LambdaBuildError):
    """The compiler process exited unsuccessfully.

    The exit code is propagated unchanged so callers can tell compiler
    errors apart from this tool's own failures.
    """

    def __init__(self, exit_code: int) -> None:
        super().__init__(
            f"cargo build failed with exit code {exit_code}",
            code=BUILD_FAILED,
        )
        self.exit_code = exit_code


class BinaryNotFoundError(LambdaBuildError):
    """The compiled binary to package does not exist."""

    def __init__(self, path: Path, message: str | None = None) -> None:
        super().__init__(
            message
            or f"binary not found: {path}, run `lambda-build build` to create it",
            code=BINARY_NOT_FOUND,
        )
        self.path = path


class UnsupportedArchitectureError(LambdaBuildError):
    """The binary is not an arm64 or x86_64 executable."""

    def __init__(self, detected: str) -> None:
        super().__init__(
            f"invalid binary architecture: {detected}",
            code=UNSUPPORTED_ARCHITECTURE,
        )
        self.detected = detected


class ArtifactWriteError(LambdaBuildError):
    """Writing or moving an artifact failed."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Failed to write {path}: {reason}", code=IO_ERROR)
        self.path = path


__all__ = [
    "ArtifactWriteError",
    "BinaryNotFoundError",
    "BuildFailedError",
    "BuildSpawnError",
    "ConflictingOptionsError",
    "LambdaBuildError",
    "LinkerUnavailableError",
    "ManifestError",
    "ToolchainUnavailableError",
    "UnknownBinaryTargetError",
    "UnsupportedArchitectureError",
    "UnsupportedTargetError",
]
