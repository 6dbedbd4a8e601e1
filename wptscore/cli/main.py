"""Main CLI entry point for wptscore."""

import json
import sys
from pathlib import Path
from typing import NoReturn

import click
import yaml
from pydantic import ValidationError

from wptscore import __version__
from wptscore.areas import FocusAreaRegistry, build_registry, classify
from wptscore.core.exceptions import WPTScoreError
from wptscore.core.logging import bind_context, configure_logging, get_logger
from wptscore.core.settings import WPTScoreSettings, get_settings
from wptscore.merge import merge_all
from wptscore.results import load_json, load_runs, save_json, save_run
from wptscore.scoring import (
    ScoreAggregator,
    format_scores_console,
    format_scores_json,
)
from wptscore.scoring.reporter import supports_color

EXIT_SUCCESS = 0
EXIT_ERROR = 2  # Error (invalid input, missing file, merge conflict, etc.)

# Errors reported to the user instead of a traceback.
# json.JSONDecodeError and pydantic.ValidationError are ValueErrors.
HANDLED_ERRORS = (WPTScoreError, OSError, ValueError)

logger = get_logger(__name__)


class CLIContext:
    """Context object holding settings and the focus area registry."""

    def __init__(self) -> None:
        self.settings: WPTScoreSettings | None = None
        self.verbose: bool = False
        self._registry: FocusAreaRegistry | None = None

    @property
    def registry(self) -> FocusAreaRegistry:
        """Registry built from the configured CSS2 focus folders."""
        if self._registry is None:
            settings = self.settings or get_settings()
            self._registry = build_registry(settings.css2_focus_folders)
        return self._registry


pass_cli_context = click.make_pass_decorator(CLIContext, ensure=True)


def _fail(error: Exception) -> NoReturn:
    click.echo(f"Error: {error}", err=True)
    sys.exit(EXIT_ERROR)


def _split_paths(run_arg: str) -> list[Path]:
    """Split a comma-separated list of shard files."""
    paths = [Path(part.strip()) for part in run_arg.split(",") if part.strip()]
    if not paths:
        raise ValueError(f"No run file given in {run_arg!r}")
    return paths


def _run_labels(run_args: tuple[str, ...]) -> list[str]:
    """Short column labels for runs: the first file's stem, if unique."""
    stems = [_split_paths(run_arg)[0].stem for run_arg in run_args]
    if len(set(stems)) == len(stems):
        return stems
    return list(run_args)


def _write_output(text: str, output_file: Path | None) -> None:
    if output_file:
        output_file.parent.mkdir(parents=True, exist_ok=True)
        output_file.write_text(text + "\n", encoding="utf-8")
        click.echo(f"Results written to {output_file}")
    else:
        click.echo(text)


@click.group()
@click.option(
    "--config",
    "-c",
    "config_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to wptscore.config.yaml configuration file",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable debug logging",
)
@click.version_option(version=__version__, prog_name="wptscore")
@click.pass_context
def cli(ctx: click.Context, config_file: Path | None, verbose: bool) -> None:
    """wptscore - focus area scores for web-platform-tests runs.

    Run files are JSON, either raw harness reports (with a "results" list)
    or normalized runs (with "test_scores"). A run split into shards is
    given as a comma-separated list of files.

    Examples:

    \b
      # Score two runs against a reference run
      wptscore score run-a.json run-b.json --against reference.json

    \b
      # Normalize a sharded raw report into one file
      wptscore normalize shard-1.json shard-2.json -o run.json

    \b
      # List focus areas in display order
      wptscore areas
    """
    cli_ctx = ctx.ensure_object(CLIContext)
    cli_ctx.verbose = verbose

    try:
        cli_ctx.settings = get_settings(config_file=config_file)
    except (ValidationError, yaml.YAMLError, OSError) as e:
        _fail(ValueError(f"Invalid configuration: {e}"))

    log_settings = cli_ctx.settings.logging
    configure_logging(
        level="DEBUG" if verbose else log_settings.level,
        json_output=log_settings.json_output,
        log_file=log_settings.file,
    )


@cli.command(name="areas")
@click.option(
    "--output",
    type=click.Choice(["console", "json"]),
    default="console",
    help="Output format (console or json)",
)
@pass_cli_context
def areas_command(cli_ctx: CLIContext, output: str) -> None:
    """List focus areas in display order."""
    try:
        registry = cli_ctx.registry
    except ValueError as e:
        _fail(e)

    area_keys, area_names = registry.list_ordered_areas()

    if output == "json":
        data = [
            {
                "key": key,
                "name": area_names[key],
                "order": registry[key].order,
            }
            for key in area_keys
        ]
        click.echo(json.dumps(data, indent=2))
        return

    key_width = max(len(key) for key in area_keys)
    for key in area_keys:
        order = registry[key].order
        click.echo(f"{order:>3}  {key.ljust(key_width)}  {area_names[key]}")


@cli.command(name="normalize")
@click.argument(
    "raw_files", nargs=-1, required=True, type=click.Path(path_type=Path)
)
@click.option(
    "--output-file",
    "-o",
    required=True,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Where to write the normalized run",
)
def normalize_command(raw_files: tuple[Path, ...], output_file: Path) -> None:
    """Normalize the shards of one run into a single run file.

    RAW_FILES are raw reports (or already normalized runs) covering
    disjoint tests.
    """
    try:
        run = load_runs(list(raw_files))
        save_run(run, output_file)
    except HANDLED_ERRORS as e:
        _fail(e)

    click.echo(f"Normalized {len(run)} tests to {output_file}")


@cli.command(name="merge")
@click.argument(
    "fragments", nargs=-1, required=True, type=click.Path(path_type=Path)
)
@click.option(
    "--output-file",
    "-o",
    required=True,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Where to write the merged document",
)
def merge_command(fragments: tuple[Path, ...], output_file: Path) -> None:
    """Deep-merge JSON fragments with disjoint leaf keys.

    Arrays are never merged, and a leaf key present in two fragments is an
    error.
    """
    try:
        documents = []
        for path in fragments:
            data = load_json(path)
            if not isinstance(data, dict):
                raise ValueError(f"{path}: expected a JSON object")
            documents.append(data)
        merged = merge_all(documents)
        save_json(merged, output_file)
    except HANDLED_ERRORS as e:
        _fail(e)

    click.echo(f"Merged {len(fragments)} fragments into {output_file}")


@cli.command(name="score")
@click.argument("runs", nargs=-1, required=True)
@click.option(
    "--against",
    "-a",
    required=True,
    help="Reference run file (comma-separated for shards)",
)
@click.option(
    "--output",
    type=click.Choice(["console", "json"]),
    default="console",
    help="Output format (console or json)",
)
@click.option(
    "--output-file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output file path",
)
@click.option(
    "--no-color",
    is_flag=True,
    help="Disable colored console output",
)
@pass_cli_context
def score_command(
    cli_ctx: CLIContext,
    runs: tuple[str, ...],
    against: str,
    output: str,
    output_file: Path | None,
    no_color: bool,
) -> None:
    """Score runs against a reference run, per focus area.

    RUNS are run files to score (comma-separated for shards). The reference
    run decides which tests and subtests are scored; scores range from 0
    to 1000.

    Examples:

    \b
      wptscore score nightly.json --against stable.json
      wptscore score a-1.json,a-2.json --against ref.json --output=json
    """
    try:
        registry = cli_ctx.registry
        with bind_context(reference=against):
            reference = load_runs(_split_paths(against))
            classification = classify(reference, registry)
            aggregator = ScoreAggregator(registry)

            tables = {}
            for label, run_arg in zip(_run_labels(runs), runs):
                candidate = load_runs(_split_paths(run_arg))
                tables[label] = aggregator.score_run(
                    candidate, reference, classification
                )
                logger.debug("run_scored", run=run_arg, tests=len(candidate))
    except HANDLED_ERRORS as e:
        _fail(e)

    if output == "json":
        text = json.dumps(format_scores_json(registry, tables), indent=2)
    else:
        use_colors = not no_color and output_file is None and supports_color()
        text = format_scores_console(registry, tables, use_colors=use_colors)

    _write_output(text, output_file)


def main() -> None:
    """Main entry point for the CLI."""
    cli(auto_envvar_prefix="WPTSCORE")


if __name__ == "__main__":
    main()
