"""Thin CLI wrapper for lambda_build.

This module provides the command-line interface using Typer.
All business logic is delegated to core modules.
"""

import json
import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

from lambda_build import __version__
from lambda_build.config import get_settings, print_settings_json
from lambda_build.errors import BuildFailedError, LambdaBuildError
from lambda_build.types import BuildArtifact, BuildRequest, OutputFormat

app = typer.Typer(
    name="lambda-build",
    help="Lambda Build - compile Rust functions and package them for AWS Lambda",
    no_args_is_help=True,
)
console = Console()
err_console = Console(stderr=True)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"lambda-build version {__version__}")
        raise typer.Exit()


def configure_logging(level: str) -> None:
    """Send log records to stderr through rich."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging"),
    ] = False,
) -> None:
    """Lambda Build - compile Rust functions and package them for AWS Lambda."""
    configure_logging("DEBUG" if verbose else get_settings().log_level)


def _print_artifact(name: str, artifact: BuildArtifact) -> None:
    console.print(f"  [green]{name}[/green]")
    console.print(f"    Architecture: {artifact.architecture.value}")
    console.print(f"    SHA-256:      {artifact.sha256}")
    console.print(f"    Path:         {artifact.path}", soft_wrap=True)


@app.command(
    context_settings={"allow_extra_args": True, "ignore_unknown_options": True},
)
def build(
    ctx: typer.Context,
    output_format: Annotated[
        OutputFormat | None,
        typer.Option(
            "--output-format",
            case_sensitive=False,
            help="Format to produce the function into (default: Binary)",
        ),
    ] = None,
    lambda_dir: Annotated[
        Path | None,
        typer.Option(
            "--lambda-dir",
            "-l",
            help="Directory where the final lambda binaries will be located",
        ),
    ] = None,
    arm64: Annotated[
        bool,
        typer.Option("--arm64", help="Shortcut for --target aarch64-unknown-linux-gnu"),
    ] = False,
    target: Annotated[
        list[str] | None,
        typer.Option("--target", help="Build for the target triple"),
    ] = None,
    release: Annotated[
        bool,
        typer.Option("--release", "-r", help="Build in release mode, stripping symbols"),
    ] = False,
    profile: Annotated[
        str | None,
        typer.Option("--profile", help="Build with the given cargo profile"),
    ] = None,
    bins: Annotated[
        list[str] | None,
        typer.Option("--bin", help="Build only the named binary (can be repeated)"),
    ] = None,
    manifest_path: Annotated[
        Path | None,
        typer.Option("--manifest-path", help="Path to Cargo.toml"),
    ] = None,
    disable_zig_linker: Annotated[
        bool,
        typer.Option("--disable-zig-linker", help="Link with the default cargo linker"),
    ] = False,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON"),
    ] = False,
) -> None:
    """Compile the project for AWS Lambda and package each binary.

    Unrecognized options and extra arguments are passed to cargo.
    """
    from lambda_build.builds.service import build as run_pipeline

    settings = get_settings()
    request = BuildRequest(
        targets=tuple(target or ()),
        arm64=arm64,
        profile=profile,
        release=release,
        bins=tuple(bins or ()),
        manifest_path=manifest_path or settings.manifest_path,
        disable_zig_linker=disable_zig_linker,
        extra_args=tuple(ctx.args),
        output_format=output_format or settings.output_format,
        lambda_dir=lambda_dir,
    )

    try:
        report = run_pipeline(request, settings=settings)
    except BuildFailedError as e:
        # Reproduce cargo's exit code; cargo already reported the error
        raise typer.Exit(code=e.exit_code) from None
    except LambdaBuildError as e:
        err_console.print(f"[red]Error: {e.message}[/red]")
        raise typer.Exit(code=1) from None

    if json_output:
        typer.echo(json.dumps(report.to_dict(), indent=2))
        return

    if not report.artifacts:
        console.print("[yellow]No binaries were produced[/yellow]")
        return

    console.print(
        f"[bold]Built {len(report.artifacts)} function(s) for "
        f"{report.target.triple} ({report.target.profile_dir}):[/bold]"
    )
    for artifact in report.artifacts:
        _print_artifact(artifact.path.parent.name, artifact)


@app.command()
def archive(
    name: Annotated[str, typer.Argument(help="Function (binary) name")],
    lambda_dir: Annotated[
        Path | None,
        typer.Option(
            "--lambda-dir",
            "-l",
            help="Directory where the lambda binaries are located",
        ),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON"),
    ] = False,
) -> None:
    """Zip the bootstrap binary of an already built function."""
    from lambda_build.builds.service import package_existing

    try:
        artifact = package_existing(name, lambda_dir=lambda_dir)
    except LambdaBuildError as e:
        err_console.print(f"[red]Error: {e.message}[/red]")
        raise typer.Exit(code=1) from None

    if json_output:
        typer.echo(json.dumps(artifact.to_dict(), indent=2))
    else:
        console.print("[bold]Archived function:[/bold]")
        _print_artifact(name, artifact)


@app.command()
def config(
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON"),
    ] = False,
) -> None:
    """Show effective configuration."""
    settings = get_settings()
    if json_output:
        typer.echo(print_settings_json(settings))
    else:
        lambda_dir_display = (
            str(settings.lambda_dir)
            if settings.lambda_dir
            else f"{settings.target_dir / 'lambda'} (default)"
        )
        console.print("[bold]Effective Configuration:[/bold]")
        console.print()
        console.print("[bold]Paths:[/bold]")
        console.print(f"  Target directory:    {settings.target_dir}")
        console.print(f"  Lambda directory:    {lambda_dir_display}")
        console.print(f"  Manifest path:       {settings.manifest_path}")
        console.print()
        console.print("[bold]Packaging:[/bold]")
        console.print(f"  Output format:       {settings.output_format.value}")
        console.print()
        console.print("[bold]Toolchain:[/bold]")
        console.print(f"  cargo:               {settings.cargo_command}")
        console.print(f"  rustc:               {settings.rustc_command}")
        console.print(f"  rustup:              {settings.rustup_command}")
        console.print(f"  Auto install:        {settings.auto_install}")
        console.print()
        console.print("[bold]Operational:[/bold]")
        console.print(f"  Log level:           {settings.log_level}")


if __name__ == "__main__":
    app()
