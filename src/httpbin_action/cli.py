"""CLI interface for httpbin-action using Typer framework."""

import json as jsonlib
import logging
import signal
import sys
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from httpbin_action import __description__, __version__
from httpbin_action.config import ActionConfig, LogLevel, OutputFormat, load_config
from httpbin_action.environment import inspect_environment
from httpbin_action.github import error_annotation, is_github_actions, read_input, write_output
from httpbin_action.harness import DEFAULT_SCENARIOS, SuiteResult, load_scenarios, run_scenarios
from httpbin_action.validation import ArgumentSanitizer, ValidationResult

DOCKER_RUN_ARGS_INPUT = "docker-run-args"

app = typer.Typer(
    name="httpbin-action",
    help=__description__,
    add_completion=False,
    rich_markup_mode="rich"
)

console = Console()

_LOG_LEVELS = {
    LogLevel.ERROR.value: logging.ERROR,
    LogLevel.WARN.value: logging.WARNING,
    LogLevel.INFO.value: logging.INFO,
    LogLevel.DEBUG.value: logging.DEBUG,
}

# Global flag to track graceful shutdown
_shutdown_requested = False


def _signal_handler(signum: int, frame) -> None:
    """Handle interrupt signals gracefully."""
    global _shutdown_requested

    signal_names = {
        signal.SIGINT: "SIGINT (Ctrl+C)",
        signal.SIGTERM: "SIGTERM"
    }

    signal_name = signal_names.get(signum, f"signal {signum}")

    if not _shutdown_requested:
        _shutdown_requested = True
        console.print(f"\n[yellow]⚠ Received {signal_name} - shutting down gracefully...[/yellow]")
        console.print("[dim]Press Ctrl+C again to force quit[/dim]")
        raise typer.Exit(1)
    else:
        console.print("[red]⚠ Force quit requested[/red]")
        sys.exit(130)  # Standard exit code for Ctrl+C


def _setup_signal_handlers():
    """Setup signal handlers for graceful shutdown."""
    try:
        signal.signal(signal.SIGINT, _signal_handler)
        if hasattr(signal, 'SIGTERM'):  # SIGTERM not available on Windows
            signal.signal(signal.SIGTERM, _signal_handler)
    except (OSError, ValueError):
        # Not available outside the main thread
        pass


def _configure_logging(level: str) -> None:
    """Send log records to stderr through rich."""
    handler = RichHandler(console=Console(stderr=True), show_path=False, show_time=False)
    logging.basicConfig(
        level=_LOG_LEVELS.get(level, logging.WARNING),
        format="%(message)s",
        handlers=[handler],
        force=True
    )


def _load_config_or_exit(config: Path | None) -> ActionConfig:
    try:
        action_config = load_config(config)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    _configure_logging(action_config.logging.level)
    return action_config


def _resolve_format(format: str | None, action_config: ActionConfig) -> str:
    format = format or action_config.output.format
    valid_formats = [f.value for f in OutputFormat]
    if format not in valid_formats:
        console.print(f"[red]Error:[/red] Invalid format '{format}'. Must be one of: {', '.join(valid_formats)}")
        raise typer.Exit(1)
    return format


def version_callback(value: bool) -> None:
    """Show version information and exit."""
    if value:
        console.print(f"httpbin-action version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option("--version", "-v", callback=version_callback, help="Show version and exit")
    ] = False,
) -> None:
    """httpbin-action - docker-run-args sanitizer and CI helpers."""
    _setup_signal_handlers()


def _print_validation_table(result: ValidationResult) -> None:
    if result.accepted:
        console.print("[green]Validation Status: ACCEPT[/green]")
        if not result.tokens:
            console.print("[dim]No docker-run-args supplied[/dim]")
            return

        table = Table(title="Arguments")
        table.add_column("#", style="dim", justify="right")
        table.add_column("Argument", style="cyan")
        for i, token in enumerate(result.tokens):
            table.add_row(str(i), escape(token))
        console.print(table)
        return

    console.print("[red]Validation Status: REJECT[/red]")
    first = result.rejection
    console.print(f"Rejected by rule: [cyan]{first.rule}[/cyan]")

    table = Table(title="Issues Found")
    table.add_column("Rule", style="cyan")
    table.add_column("Token", style="white")
    table.add_column("Message", style="white")
    for issue in result.issues:
        table.add_row(issue.rule, escape(issue.token or ""), escape(issue.message))
    console.print(table)


@app.command()
def validate(
    args: Annotated[
        Optional[str],
        typer.Option("--args", "-a", help="docker-run-args string (default: the docker-run-args action input)")
    ] = None,
    format: Annotated[
        Optional[str],
        typer.Option("--format", "-f", help="Output format: table, json")
    ] = None,
    config: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Configuration file path (default: search for .httpbin-action.json)")
    ] = None,
    github: Annotated[
        Optional[bool],
        typer.Option("--github/--no-github", help="Emit workflow annotations and step outputs (default: auto-detect)")
    ] = None,
) -> None:
    """Screen docker-run-args for shell-injection patterns."""
    action_config = _load_config_or_exit(config)
    format = _resolve_format(format, action_config)

    if args is None:
        args = read_input(DOCKER_RUN_ARGS_INPUT)

    if github is None:
        github = is_github_actions() and action_config.github.annotations

    sanitizer = ArgumentSanitizer(action_config)
    sanitizer.create_default_rules()
    result = sanitizer.validate(args)

    if format == OutputFormat.JSON.value:
        typer.echo(jsonlib.dumps(result.to_dict(), indent=2))
    else:
        _print_validation_table(result)

    if github:
        if result.accepted:
            try:
                write_output(action_config.github.output_name, " ".join(result.tokens))
            except OSError as e:
                console.print(f"[red]Error:[/red] Failed to write step output: {escape(str(e))}")
                raise typer.Exit(1)
        else:
            first = result.rejection
            typer.echo(error_annotation(
                f"Invalid docker-run-args argument '{first.token}': {first.message}",
                title=f"docker-run-args rejected ({first.rule})"
            ))

    raise typer.Exit(result.exit_code)


def _print_suite_table(suite: SuiteResult, verbose: bool) -> None:
    table = Table(title="Input Validation Scenarios")
    table.add_column("Result", style="white")
    table.add_column("Scenario", style="cyan")
    if verbose:
        table.add_column("Arguments", style="dim")
        table.add_column("Rule", style="dim")

    for outcome in suite.outcomes:
        status = "[green]PASS[/green]" if outcome.passed else "[red]FAIL[/red]"
        row = [status, escape(outcome.scenario.name)]
        if verbose:
            rejection = outcome.result.rejection
            row.append(escape(outcome.scenario.docker_run_args))
            row.append(rejection.rule if rejection else "")
        table.add_row(*row)

    console.print(table)
    console.print("Test Summary:")
    console.print(f"  Total tests run: {suite.tests_run}")
    console.print(f"  Tests passed: {suite.tests_passed}")
    console.print(f"  Tests failed: {suite.tests_failed}")

    if suite.success:
        console.print("[green]All tests passed![/green]")
    else:
        console.print("[red]Some tests failed![/red]")
        for outcome in suite.outcomes:
            if not outcome.passed:
                console.print(f"  [red]FAIL[/red] {escape(outcome.description)}")


@app.command()
def selftest(
    scenarios: Annotated[
        Optional[Path],
        typer.Option("--scenarios", "-s", help="JSON file with scenarios (default: built-in suite)")
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-V", help="Show arguments and matched rule per scenario")
    ] = False,
    format: Annotated[
        Optional[str],
        typer.Option("--format", "-f", help="Output format: table, json")
    ] = None,
    config: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Configuration file path (default: search for .httpbin-action.json)")
    ] = None,
) -> None:
    """Run the input validation scenarios against the sanitizer."""
    action_config = _load_config_or_exit(config)
    format = _resolve_format(format, action_config)

    if scenarios is not None:
        try:
            scenario_list = load_scenarios(scenarios)
        except (FileNotFoundError, ValueError) as e:
            console.print(f"[red]Error:[/red] {escape(str(e))}")
            raise typer.Exit(1)
    else:
        scenario_list = DEFAULT_SCENARIOS

    sanitizer = ArgumentSanitizer(action_config)
    sanitizer.create_default_rules()
    suite = run_scenarios(scenario_list, sanitizer)

    if format == OutputFormat.JSON.value:
        typer.echo(jsonlib.dumps(suite.to_dict(), indent=2))
    else:
        _print_suite_table(suite, verbose)

    raise typer.Exit(suite.exit_code)


@app.command()
def doctor(
    config: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Configuration file path (default: search for .httpbin-action.json)")
    ] = None,
    format: Annotated[
        Optional[str],
        typer.Option("--format", "-f", help="Output format: table, json")
    ] = None,
) -> None:
    """Check that the tools the action shells out to are installed."""
    action_config = _load_config_or_exit(config)
    format = _resolve_format(format, action_config)

    report = inspect_environment(
        action_config.environment.required_tools,
        action_config.environment.optional_tools
    )

    if format == OutputFormat.JSON.value:
        typer.echo(jsonlib.dumps(report.to_dict(), indent=2))
    else:
        table = Table(title="Prerequisites")
        table.add_column("Tool", style="cyan")
        table.add_column("Required", style="white")
        table.add_column("Status", style="white")
        table.add_column("Path", style="dim")
        for check in report.checks:
            if check.found:
                status = "[green]found[/green]"
            elif check.required:
                status = "[red]missing[/red]"
            else:
                status = "[yellow]missing[/yellow]"
            table.add_row(check.name, "yes" if check.required else "no", status, check.path or "")
        console.print(table)

        if report.docker_host:
            console.print(f"Docker host: {report.docker_host}")
        else:
            console.print("Docker host: [dim]default configuration[/dim]")

        if report.ready:
            console.print("[green]Environment ready[/green]")
        else:
            console.print(f"[red]Missing required tools:[/red] {', '.join(report.missing_required)}")

    raise typer.Exit(0 if report.ready else 1)


if __name__ == "__main__":
    app()
