"""Binary target discovery from a Cargo manifest.

Uses `cargo metadata` rather than parsing Cargo.toml directly, so
auto-discovered binaries (src/main.rs, src/bin/*.rs) and workspace
members are reported the same way cargo itself sees them.
"""

from __future__ import annotations

import json
import logging
import subprocess
from pathlib import Path
from typing import Any

from lambda_build.errors import ManifestError

logger = logging.getLogger(__name__)


def parse_binary_targets(metadata: dict[str, Any]) -> list[str]:
    """Extract binary target names from `cargo metadata` output.

    Args:
        metadata: Decoded JSON from `cargo metadata --format-version 1`.

    Returns:
        Binary names in package order, without duplicates.
    """
    names: list[str] = []
    for package in metadata.get("packages", []):
        for target in package.get("targets", []):
            if "bin" in target.get("kind", []) and target["name"] not in names:
                names.append(target["name"])
    return names


def binary_targets(manifest_path: Path, cargo: str = "cargo") -> list[str]:
    """List the binary targets declared by a manifest.

    Args:
        manifest_path: Path to Cargo.toml.
        cargo: cargo executable.

    Returns:
        Binary target names in discovery order.

    Raises:
        ManifestError: If the manifest is missing or cargo metadata fails.
    """
    if not manifest_path.is_file():
        raise ManifestError(manifest_path, f"Cargo manifest not found: {manifest_path}")

    cmd = [
        cargo,
        "metadata",
        "--format-version",
        "1",
        "--no-deps",
        "--manifest-path",
        str(manifest_path),
    ]
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, check=True)
        metadata = json.loads(result.stdout)
    except FileNotFoundError as e:
        raise ManifestError(manifest_path, f"{cargo} not found") from e
    except subprocess.CalledProcessError as e:
        raise ManifestError(
            manifest_path,
            f"cargo metadata failed for {manifest_path}: {(e.stderr or '').strip()}",
        ) from e
    except json.JSONDecodeError as e:
        raise ManifestError(
            manifest_path, f"Invalid cargo metadata output: {e}"
        ) from e

    names = parse_binary_targets(metadata)
    logger.debug("Binary targets in %s: %s", manifest_path, ", ".join(names))
    return names


__all__ = ["binary_targets", "parse_binary_targets"]
