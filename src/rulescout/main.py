from pathlib import Path
from typing import List, Optional

import typer
from rich.markup import escape
from rich.table import Table

from rulescout import __version__
from rulescout.autoconfig import build_registry, extend_from_recommended, run_discovery
from rulescout.cancellation import CancellationToken
from rulescout.cli.config import CLIConfig
from rulescout.cli.output import RichProgressSink, echo, get_console, print_json, structured_error
from rulescout.exceptions import (
    ConfigError,
    DiscoveryCancelled,
    EmptyCorpusError,
    ParseError,
    RulescoutError,
)
from rulescout.linter import RuleCatalog
from rulescout.logging_config import logger, reset_logging, setup_logging
from rulescout.schemas import LintConfig
from rulescout.user_config import get_user_config

app = typer.Typer()
console = get_console()

ERROR_CODES = {
    ParseError: "PARSE_ERROR",
    EmptyCorpusError: "EMPTY_CORPUS",
    DiscoveryCancelled: "CANCELLED",
    ConfigError: "CONFIG_ERROR",
}


def _error_code(error: RulescoutError) -> str:
    for error_type, code in ERROR_CODES.items():
        if isinstance(error, error_type):
            return code
    return "DISCOVERY_ERROR"


@app.callback()
def global_options(
    human: bool = typer.Option(
        False,
        "--human",
        "-H",
        help="Enable human mode: progress bar, tables and colors (also via RULESCOUT_HUMAN_MODE env var)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level"),
):
    """
    rulescout: bootstrap a lint configuration from existing code.

    Machine mode is the default (plain JSON on stdout, no console logging).
    Use --human/-H for pretty output.
    """
    CLIConfig.set_machine_mode(False if human else None)

    reset_logging()
    setup_logging(
        verbose=verbose,
        suppress_console=CLIConfig.is_machine_mode(),
    )


@app.command()
def version():
    """
    Prints the current version of rulescout.
    """
    echo(f"rulescout v{__version__}")


@app.command()
def discover(
    patterns: List[str] = typer.Argument(..., help="Files, directories or glob patterns to learn from."),
    base_config: Optional[Path] = typer.Option(
        None,
        "--base-config",
        "-c",
        help="JSON lint configuration to start from (env, parserOptions, plugins, ...).",
        exists=True,
        dir_okay=False,
        readable=True,
    ),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", help="Cancel discovery after this many seconds."
    ),
    extend_recommended: Optional[bool] = typer.Option(
        None,
        "--extend-recommended/--no-extend-recommended",
        help="Extend rulescout:recommended and drop rules it already sets (default from user config).",
    ),
    no_gitignore: bool = typer.Option(
        False, "--no-gitignore", help="Do not respect .gitignore files."
    ),
    ext: Optional[List[str]] = typer.Option(
        None, "--ext", help="File extensions to include when walking directories. Can be used multiple times."
    ),
    max_bytes: Optional[int] = typer.Option(
        None, "--max-bytes", help="Skip files larger than this size (in bytes)."
    ),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Discover a rule configuration that reports nothing on the given files.

    Examples:
        rulescout discover src/
        rulescout discover "src/**/*.py" tests/ --json
        rulescout -H discover src/ --base-config base.json --timeout 120
    """
    machine = CLIConfig.is_machine_mode() or json_output
    user_config = get_user_config()

    try:
        settings = user_config.discovery_settings()
        if ext:
            settings["extensions"] = list(ext)
        if no_gitignore:
            settings["respect_gitignore"] = False
        if max_bytes is not None:
            settings["max_bytes"] = max_bytes
        if timeout is None:
            timeout = user_config.get("discovery.timeout")
        if extend_recommended is None:
            extend_recommended = bool(user_config.get("discovery.extend_recommended", True))

        base = LintConfig.from_file(base_config) if base_config else LintConfig()
        cancellation = CancellationToken(timeout) if timeout is not None else None
        catalog = RuleCatalog.builtin()

        if machine:
            result = run_discovery(base, patterns, None, catalog=catalog, cancellation=cancellation, **settings)
        else:
            with RichProgressSink() as sink:
                result = run_discovery(base, patterns, sink, catalog=catalog, cancellation=cancellation, **settings)

        final_config = result.config
        if extend_recommended:
            final_config = extend_from_recommended(final_config, catalog)

    except RulescoutError as e:
        logger.error(f"Discovery failed: {e}")
        if machine:
            error = structured_error(
                code=_error_code(e),
                message=str(e),
                input_value=" ".join(patterns),
            )
            print_json(error)
        else:
            console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1)

    if machine:
        output = {
            "command": "discover",
            "status": "success",
            "config": final_config.to_dict(),
            "summary": result.summary.model_dump(),
            "trials": result.trial_count,
            "failing_rules": sorted(result.failing_rules),
        }
        print_json(output)
        return

    console.print(f"[green]{result.summary.message}[/green]")
    if result.failing_rules:
        console.print(
            f"[dim]No clean configuration for: {', '.join(sorted(result.failing_rules))}[/dim]"
        )
    console.print_json(final_config.to_json())


@app.command()
def rules(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    List the rules discovery configures and how many candidates each gets.
    """
    catalog = RuleCatalog.builtin()
    registry = build_registry(catalog)
    recommended = catalog.recommended_ids()

    rows = []
    for rule, entry in zip(catalog, registry):
        rows.append({
            "rule_id": rule.rule_id,
            "description": rule.description,
            "recommended": rule.rule_id in recommended,
            "candidates": [candidate.setting for candidate in entry.candidates],
        })

    if CLIConfig.is_machine_mode() or json_output:
        print_json({"rules": rows, "count": len(rows)})
        return

    table = Table(title="rulescout rules")
    table.add_column("Rule", style="cyan", no_wrap=True)
    table.add_column("Recommended", style="green")
    table.add_column("Candidates", justify="right", style="magenta")
    table.add_column("Description")

    for row in rows:
        table.add_row(
            row["rule_id"],
            "yes" if row["recommended"] else "",
            str(len(row["candidates"])),
            row["description"],
        )

    console.print(table)


if __name__ == "__main__":
    app()
