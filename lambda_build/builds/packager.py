"""Lambda artifact packaging.

This module handles:
- Reading a compiled binary and detecting its architecture
- Computing the SHA-256 checksum of the raw binary
- Writing bootstrap.zip archives (single `bootstrap` entry)
- Moving raw binaries into place as `bootstrap`
- Zipping a previously built bootstrap binary

Every artifact lands under <lambda_dir>/<function name>/.
"""

from __future__ import annotations

import hashlib
import logging
import os
import shutil
import tempfile
import zipfile
from pathlib import Path

from lambda_build.builds.elf import ArchitectureDetector, detect_architecture
from lambda_build.errors import ArtifactWriteError, BinaryNotFoundError
from lambda_build.types import BuildArtifact, OutputFormat

logger = logging.getLogger(__name__)

# Lambda custom runtimes execute a file with exactly this name
BOOTSTRAP = "bootstrap"
BOOTSTRAP_ZIP = "bootstrap.zip"

BOOTSTRAP_MODE = 0o755


def compute_sha256(data: bytes) -> str:
    """Compute the upper-case SHA-256 hex digest of data."""
    return hashlib.sha256(data).hexdigest().upper()


def _current_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


def _write_zip(data: bytes, zipped: Path) -> None:
    """Write data as the single `bootstrap` entry of a new archive.

    The archive is written next to its destination and renamed into
    place, so a failed write never leaves a truncated bootstrap.zip.
    """
    with tempfile.NamedTemporaryFile(
        dir=zipped.parent, prefix=".bootstrap-", suffix=".tmp", delete=False
    ) as tmp_file:
        tmp_path = Path(tmp_file.name)

    try:
        info = zipfile.ZipInfo(BOOTSTRAP)
        info.compress_type = zipfile.ZIP_DEFLATED
        info.external_attr = (0o100000 | BOOTSTRAP_MODE) << 16
        with zipfile.ZipFile(tmp_path, "w") as zf:
            zf.writestr(info, data)
        # NamedTemporaryFile creates 0600; give the archive regular file permissions
        os.chmod(tmp_path, 0o666 & ~_current_umask())
        os.replace(tmp_path, zipped)
    except Exception:
        tmp_path.unlink(missing_ok=True)
        raise


def package_binary(
    binary_path: Path,
    destination_dir: Path,
    output_format: OutputFormat,
    detector: ArchitectureDetector = detect_architecture,
) -> BuildArtifact:
    """Package a compiled binary as a Lambda function.

    Args:
        binary_path: Compiled binary.
        destination_dir: Function directory (<lambda_dir>/<name>).
        output_format: Zip writes bootstrap.zip, Binary moves the file to bootstrap.
        detector: Architecture detection for the raw bytes.

    Returns:
        BuildArtifact with architecture, checksum and final path.

    Raises:
        BinaryNotFoundError: If binary_path does not exist.
        UnsupportedArchitectureError: If the binary is not arm64 or x86_64.
        ArtifactWriteError: If the artifact cannot be written.
    """
    if not binary_path.is_file():
        raise BinaryNotFoundError(binary_path)

    try:
        data = binary_path.read_bytes()
    except OSError as e:
        raise ArtifactWriteError(binary_path, str(e)) from e

    architecture = detector(data)
    sha256 = compute_sha256(data)

    try:
        destination_dir.mkdir(parents=True, exist_ok=True)
        if output_format is OutputFormat.ZIP:
            path = destination_dir / BOOTSTRAP_ZIP
            _write_zip(data, path)
        else:
            path = destination_dir / BOOTSTRAP
            if binary_path.resolve() != path.resolve():
                shutil.move(str(binary_path), str(path))
    except OSError as e:
        raise ArtifactWriteError(destination_dir, str(e)) from e

    logger.info("Packaged %s (%s, sha256=%s)", path, architecture.value, sha256)
    return BuildArtifact(architecture=architecture, sha256=sha256, path=path)


def zip_binary(
    binary_path: Path,
    destination_dir: Path,
    detector: ArchitectureDetector = detect_architecture,
) -> BuildArtifact:
    """Create bootstrap.zip from a function binary.

    The binary inside the archive is always called `bootstrap`.
    """
    return package_binary(binary_path, destination_dir, OutputFormat.ZIP, detector)


def find_function_archive(
    name: str,
    lambda_dir: Path | None = None,
    target_dir: Path = Path("target"),
) -> BuildArtifact:
    """Zip the bootstrap binary of an already built function.

    Args:
        name: Function (binary) name.
        lambda_dir: Lambda output root (default: <target_dir>/lambda).
        target_dir: Cargo target directory.

    Returns:
        BuildArtifact for <lambda_dir>/<name>/bootstrap.zip.

    Raises:
        BinaryNotFoundError: If the bootstrap binary has not been built.
    """
    root = lambda_dir if lambda_dir is not None else target_dir / "lambda"
    bootstrap_dir = root / name
    binary_path = bootstrap_dir / BOOTSTRAP
    if not binary_path.is_file():
        raise BinaryNotFoundError(
            binary_path,
            f"bootstrap file for {name} not found, "
            "use `lambda-build build` to create it",
        )
    return zip_binary(binary_path, bootstrap_dir)


__all__ = [
    "BOOTSTRAP",
    "BOOTSTRAP_ZIP",
    "compute_sha256",
    "find_function_archive",
    "package_binary",
    "zip_binary",
]
