"""
Command-line interface for schema_synth.

Provides sample, query, and info commands for fixture generation.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Dict, Optional, Tuple

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from schema_synth.errors import SchemaSynthError
from schema_synth.generator import compile_schema
from schema_synth.loader import config_from_dict, load_config, load_schema
from schema_synth.models import GenerationConfig
from schema_synth.output import FixtureWriter, render
from schema_synth.strategies import Sampler, Strategy

console = Console()


def setup_logging(verbose: bool = False) -> None:
    """Configure logging with Rich handler."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
    )


def parse_limits(values: Tuple[str, ...], option: str) -> Dict[str, int]:
    """Parse repeated TYPE=N options."""
    limits = {}
    for item in values:
        if "=" not in item:
            raise click.BadParameter(f"expected TYPE=N, got {item!r}", param_hint=option)
        name, count = item.split("=", 1)
        try:
            limits[name.strip()] = int(count.strip())
        except ValueError:
            raise click.BadParameter(f"expected an integer in {item!r}", param_hint=option) from None
    return limits


def build_config(
    config_file: Optional[Path],
    depth: Tuple[str, ...],
    width: Tuple[str, ...],
    seed: Optional[int],
    count: int,
    output_format: str,
    output_dir: Optional[Path],
) -> GenerationConfig:
    """Merge the config file (if any) with command-line options."""
    overrides = {
        "seed": seed,
        "count": count,
        "output_format": output_format,
        "output_dir": output_dir,
    }
    if config_file:
        config = load_config(config_file, **overrides)
    else:
        config = config_from_dict({}, **overrides)
    config.depth.update(parse_limits(depth, "--depth"))
    config.width.update(parse_limits(width, "--width"))
    return config


def emit(name: str, strategy: Strategy, config: GenerationConfig, write_files: bool, source: str) -> None:
    """Draw samples and print them or write them as fixtures."""
    sampler = Sampler(seed=config.seed, default_max_size=config.default_list_size)
    samples = sampler.sample(strategy, config.count)

    if write_files:
        writer = FixtureWriter(config)
        path = writer.write(name, samples, source=source)
        writer.write_manifest()
        console.print(f"[green]Wrote {len(samples)} samples to: {path}[/green]")
    else:
        click.echo(render(samples, config.output_format), nl=False)


def common_options(func):
    """Options shared by the sample and query commands."""
    options = [
        click.option("--schema", "schema_file", type=click.Path(exists=True, dir_okay=False, path_type=Path),
                     required=True, help="Schema file (YAML or JSON)"),
        click.option("--config", "config_file", type=click.Path(exists=True, dir_okay=False, path_type=Path),
                     default=None, help="Generation config file (YAML or JSON)"),
        click.option("-n", "--count", type=click.IntRange(min=0), default=1, show_default=True,
                     help="Number of samples to draw"),
        click.option("--depth", multiple=True, metavar="TYPE=N",
                     help="Recursion budget for an object type (repeatable)"),
        click.option("--width", multiple=True, metavar="TYPE=N",
                     help="Max list length for lists of a type (repeatable)"),
        click.option("--seed", type=int, default=None, help="Random seed for reproducibility"),
        click.option("--format", "output_format", type=click.Choice(["json", "yaml"]), default="json",
                     show_default=True, help="Output format"),
        click.option("--output-dir", type=click.Path(file_okay=False, path_type=Path), default=None,
                     help="Write fixture files here instead of printing"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@click.group()
@click.version_option(version="0.1.0", prog_name="schema_synth")
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
def cli(verbose: bool) -> None:
    """
    Schema Synth - random fixture generators compiled from type schemas.

    Draw full-graph samples of a type, or query-shaped results.
    """
    setup_logging(verbose)


@cli.command()
@common_options
@click.option("--type", "type_name", type=str, required=True, help="Type to sample")
def sample(
    schema_file: Path,
    config_file: Optional[Path],
    count: int,
    depth: Tuple[str, ...],
    width: Tuple[str, ...],
    seed: Optional[int],
    output_format: str,
    output_dir: Optional[Path],
    type_name: str,
) -> None:
    """
    Draw samples of a type.

    Examples:

        schema_synth sample --schema football.yaml --type player -n 5

        schema_synth sample --schema football.yaml --type team \\
            --depth team=0 --width player=2 --seed 42
    """
    try:
        config = build_config(config_file, depth, width, seed, count, output_format, output_dir)
        generators = compile_schema(
            load_schema(schema_file),
            depth=config.depth,
            width=config.width,
            scalars=config.scalars,
            default_depth=config.default_depth,
        )
        emit(type_name, generators(type_name), config, output_dir is not None, source=type_name)
    except SchemaSynthError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        sys.exit(1)


@cli.command()
@common_options
@click.option("--query", "query_text", type=str, default=None, help="Query text")
@click.option("--query-file", type=click.Path(exists=True, dir_okay=False, path_type=Path), default=None,
              help="File containing the query")
@click.option("--operation", type=str, default=None, help="Operation name when the document has several")
@click.option("--name", "fixture_name", type=str, default="query", show_default=True,
              help="Fixture name when writing files")
def query(
    schema_file: Path,
    config_file: Optional[Path],
    count: int,
    depth: Tuple[str, ...],
    width: Tuple[str, ...],
    seed: Optional[int],
    output_format: str,
    output_dir: Optional[Path],
    query_text: Optional[str],
    query_file: Optional[Path],
    operation: Optional[str],
    fixture_name: str,
) -> None:
    """
    Draw query-shaped results wrapped as {"data": {...}}.

    Example:

        schema_synth query --schema football.yaml \\
            --query "{ teams { wins players { name } } }" -n 3
    """
    from schema_synth.query import compile_query

    if (query_text is None) == (query_file is None):
        raise click.UsageError("Provide exactly one of --query or --query-file")
    if query_file:
        query_text = query_file.read_text()

    try:
        config = build_config(config_file, depth, width, seed, count, output_format, output_dir)
        generators = compile_schema(
            load_schema(schema_file),
            depth=config.depth,
            width=config.width,
            scalars=config.scalars,
            default_depth=config.default_depth,
        )
        strategy = compile_query(generators, query_text, operation_name=operation)
        emit(fixture_name, strategy, config, output_dir is not None, source=query_text)
    except SchemaSynthError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        sys.exit(1)


@cli.command()
@click.option("--schema", "schema_file", type=click.Path(exists=True, dir_okay=False, path_type=Path),
              required=True, help="Schema file (YAML or JSON)")
def info(schema_file: Path) -> None:
    """
    Display the types and queries declared by a schema.

    Example:

        schema_synth info --schema football.yaml
    """
    try:
        schema = load_schema(schema_file)
    except SchemaSynthError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        sys.exit(1)

    types_table = Table(title="Types")
    types_table.add_column("Name", style="cyan")
    types_table.add_column("Kind", style="green")
    types_table.add_column("Shape", style="yellow")

    for name, enum in schema.enums.items():
        types_table.add_row(name, "enum", escape(", ".join(enum.values)))
    for name, obj in schema.objects.items():
        shape = ", ".join(f"{f.name}: {f.type}" for f in obj.fields)
        types_table.add_row(name, "object", escape(shape))
    for name in schema.scalars:
        types_table.add_row(name, "scalar", "-")

    console.print(types_table)

    if schema.queries:
        queries_table = Table(title="Queries")
        queries_table.add_column("Name", style="cyan")
        queries_table.add_column("Type", style="green")
        for name, query_def in schema.queries.items():
            queries_table.add_row(name, escape(str(query_def.type)))
        console.print(queries_table)


if __name__ == "__main__":
    cli()
