"""Lambda Build - compile Rust functions and package them for AWS Lambda.

This package resolves a Lambda-compatible build target, drives the cargo
toolchain to compile for it, and packages the resulting binaries as
`bootstrap` executables or `bootstrap.zip` archives.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
