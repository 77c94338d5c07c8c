"""scelint - lint SIMP compliance profile data.

Checks every compliance data file under PATHS (module directories or
individual files) and compiles the Hiera data for each profile.
"""

from __future__ import annotations

import sys
import time
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from .. import __version__
from ..core.config import get_effective_config
from ..core.errors import InputPathError
from ..core.lint import Lint
from ..formatters.junit import export_junit_results

console = Console(soft_wrap=True)


def _print_messages(label: str, style: str, messages: list[str]) -> None:
    for message in messages:
        console.print(f"  [{style}]{label}[/{style}] {escape(message)}")


def get_exit_code(lint: Lint, config: dict) -> int:
    codes = config["ci"]["exit_codes"]
    if lint.errors:
        return codes["errors"]
    if config["ci"]["strict"] and lint.warnings:
        return codes["errors"]
    return codes["ok"]


@click.command(name="scelint")
@click.version_option(__version__, prog_name="scelint")
@click.argument("paths", nargs=-1, type=click.Path())
@click.option("--verbose", "-v", is_flag=True, help="Also print notes")
@click.option("--strict", "-s", is_flag=True, help="Treat warnings as errors")
@click.option("--output-format", "-f", type=click.Choice(["text", "json", "junit"]), help="Output format")
@click.option("--output", "-o", type=click.Path(), help="Output file (json/junit)")
@click.option("--config", "config_file", type=click.Path(exists=True), help="Config file (default: ./.scelint.yaml)")
def scelint_cli(
    paths: tuple[str, ...],
    verbose: bool,
    strict: bool,
    output_format: str | None,
    output: str | None,
    config_file: str | None,
) -> None:
    """Lint SIMP compliance data in PATHS (default: current directory)."""
    cli_overrides: dict = {"output": {}, "ci": {}}
    if verbose:
        cli_overrides["output"]["verbose"] = True
    if output_format:
        cli_overrides["output"]["format"] = output_format
    if strict:
        cli_overrides["ci"]["strict"] = True

    config = get_effective_config(
        Path.cwd(),
        config_file=Path(config_file) if config_file else None,
        cli_overrides=cli_overrides,
    )
    fmt = config["output"]["format"]

    start = time.time()
    try:
        lint = Lint(list(paths) or ["."], config=config)
    except InputPathError as e:
        console.print(f"  [red]ERROR[/red] {escape(str(e))}")
        sys.exit(config["ci"]["exit_codes"]["input"])
    duration = time.time() - start

    exit_code = get_exit_code(lint, config)

    if fmt == "json":
        payload = lint.report().model_dump_json(indent=2)
        if output:
            Path(output).write_text(payload + "\n", encoding="utf-8")
        else:
            click.echo(payload)
        sys.exit(exit_code)

    if fmt == "junit":
        out_path = Path(output) if output else Path("scelint-results.xml")
        result = export_junit_results(
            lint.diagnostics,
            out_path,
            strict=config["ci"]["strict"],
            duration=duration,
        )
        console.print(
            f"  [dim]JUnit[/dim] {result['total_tests']} results, "
            f"{result['failures']} failures written to {escape(result['path'])}"
        )
        sys.exit(exit_code)

    _print_messages("ERROR", "red", lint.errors)
    _print_messages("WARN", "yellow", lint.warnings)
    if config["output"]["verbose"]:
        _print_messages("NOTE", "dim", lint.notes)

    if not lint.files:
        console.print("  [dim]No compliance data found[/dim]")
        sys.exit(exit_code)

    counts = lint.diagnostics.counts()
    summary = (
        f"Checked {len(lint.files)} files: "
        f"{counts['errors']} errors, {counts['warnings']} warnings, {counts['notes']} notes"
    )
    if exit_code == config["ci"]["exit_codes"]["ok"]:
        console.print(f"\n  [green]OK[/green] {summary}")
    else:
        console.print(f"\n  [red]FAIL[/red] {summary}")

    sys.exit(exit_code)


def main() -> None:
    scelint_cli()


if __name__ == "__main__":
    main()
