"""Tests for the CargoToolchain facade."""

from pathlib import Path
from unittest.mock import patch

from lambda_build.config import Settings
from lambda_build.toolchain import CargoToolchain
from lambda_build.types import HostFacts

HOST = HostFacts(host_triple="x86_64-unknown-linux-gnu", release_channel="beta")


class TestCargoToolchain:
    """Tests for CargoToolchain class."""

    def test_uses_configured_commands(self):
        settings = Settings(
            cargo_command="/opt/cargo",
            rustc_command="/opt/rustc",
            rustup_command="/opt/rustup",
            auto_install=False,
        )
        toolchain = CargoToolchain(settings)

        with (
            patch("lambda_build.toolchain.read_host_facts", return_value=HOST) as facts,
            patch("lambda_build.toolchain.ensure_target_available") as ensure_target,
            patch("lambda_build.toolchain.ensure_zig_linker") as ensure_linker,
            patch("lambda_build.toolchain.binary_targets", return_value=["a"]) as bins,
        ):
            assert toolchain.host_facts() == HOST
            toolchain.ensure_target("aarch64-unknown-linux-gnu", HOST)
            toolchain.ensure_linker()
            assert toolchain.binary_targets(Path("Cargo.toml")) == ["a"]

        facts.assert_called_once_with("/opt/rustc")
        ensure_target.assert_called_once_with(
            "aarch64-unknown-linux-gnu",
            "x86_64-unknown-linux-gnu",
            "beta",
            rustc="/opt/rustc",
            rustup="/opt/rustup",
            auto_install=False,
        )
        ensure_linker.assert_called_once_with(cargo="/opt/cargo", auto_install=False)
        bins.assert_called_once_with(Path("Cargo.toml"), cargo="/opt/cargo")
