"""Target resolution module.

This module handles:
- Choosing the target triple from flags and host facts
- Validating targets against AWS Lambda platforms
- Mapping cargo profiles to output directories
"""

from lambda_build.targets.resolver import (
    TARGET_ARM,
    TARGET_X86_64,
    resolve_target,
)

__all__ = ["TARGET_ARM", "TARGET_X86_64", "resolve_target"]
