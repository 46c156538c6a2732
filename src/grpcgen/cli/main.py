"""Main CLI entry point for grpcgen.

Generates proto3 documents and gRPC bindings from annotated Go sources.
"""

import json
import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from grpcgen import __version__
from grpcgen.config import DEFAULT_CONFIG_NAME, ConfigLoader, GeneratorConfig, load_config
from grpcgen.engine.pipeline import GenerationPipeline, GenerationResult
from grpcgen.errors import GrpcGenError
from grpcgen.schemas.base import AssemblyResult
from grpcgen.utils.helpers import write_document

console = Console()


def configure_logging(level: str) -> None:
    """Send log records to stderr through rich."""
    handler = RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_path=False,
        markup=False,
    )
    logging.basicConfig(level=level, format="%(message)s", handlers=[handler], force=True)


@click.group()
@click.version_option(version=__version__, prog_name="grpcgen")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option("--config", "-c", "config_path", type=click.Path(exists=True, dir_okay=False), help="YAML configuration file")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config_path: str | None) -> None:
    """grpcgen - Generate proto3 services and messages from annotated Go code.

    Structs marked with // @grpcGen:Message become messages; functions marked
    with // @grpcGen:Service and // @grpcGen:SrvName: <Name> become rpcs.
    """
    ctx.ensure_object(dict)
    try:
        config = load_config(config_path)
    except GrpcGenError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        sys.exit(1)

    configure_logging("DEBUG" if verbose else config.log_level)
    ctx.obj["verbose"] = verbose
    ctx.obj["config"] = config


@cli.command()
@click.argument("sources", nargs=-1, required=True, type=click.Path())
@click.option("--no-compile", is_flag=True, help="Write the .proto document without running protoc")
@click.option("--no-rewrite", is_flag=True, help="Leave the Go source untouched")
@click.option("--output-subdir", help="Directory next to each source receiving the document")
@click.option("--fail-fast", is_flag=True, help="Stop at the first failing source")
@click.option("--json", "as_json", is_flag=True, help="Print results as JSON")
@click.pass_context
def generate(
    ctx: click.Context,
    sources: tuple[str, ...],
    no_compile: bool,
    no_rewrite: bool,
    output_subdir: str | None,
    fail_fast: bool,
    as_json: bool,
) -> None:
    """Generate .proto documents and bindings from Go sources.

    SOURCES are .go files, processed one after the other.
    """
    config: GeneratorConfig = ctx.obj["config"].model_copy(deep=True)
    if no_compile:
        config.compiler.enabled = False
    if no_rewrite:
        config.rewrite_source = False
    if output_subdir:
        config.output.subdirectory = output_subdir

    pipeline = GenerationPipeline(config)
    results = pipeline.run_many(sources, fail_fast=fail_fast)

    if as_json:
        click.echo(json.dumps([r.summary() for r in results], indent=2))
    else:
        _print_results(results)

    failed = [r for r in results if not r.ok]
    if failed or len(results) < len(sources):
        sys.exit(1)


@cli.command()
@click.argument("source", type=click.Path())
@click.option("--output", "-o", type=click.Path(), help="Output file (stdout if not specified)")
@click.pass_context
def render(ctx: click.Context, source: str, output: str | None) -> None:
    """Print the .proto document for a Go source without side effects.

    SOURCE is the .go file to read.
    """
    pipeline = GenerationPipeline(ctx.obj["config"])

    try:
        _, document = pipeline.build(source)
    except GrpcGenError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        sys.exit(1)

    if output:
        try:
            write_document(Path(output), document)
        except GrpcGenError as e:
            console.print(f"[red]Error: {escape(str(e))}[/red]")
            sys.exit(1)
        console.print(f"[green]Wrote {output}[/green]")
    else:
        click.echo(document, nl=False)


@cli.command()
@click.argument("source", type=click.Path())
@click.pass_context
def inspect(ctx: click.Context, source: str) -> None:
    """Show the records and services found in a Go source.

    SOURCE is the .go file to read.
    """
    pipeline = GenerationPipeline(ctx.obj["config"])

    try:
        assembly, _ = pipeline.build(source)
    except GrpcGenError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        sys.exit(1)

    _print_assembly(assembly)


@cli.command()
@click.option("--output", "-o", type=click.Path(), default=DEFAULT_CONFIG_NAME, help="Output file path")
def init_config(output: str) -> None:
    """Initialize a configuration file with the default settings."""
    ConfigLoader().save_file(GeneratorConfig(), output)
    console.print(f"[green]Created config: {output}[/green]")


def _print_assembly(assembly: AssemblyResult) -> None:
    """Print records, services and issues of one assembly."""
    model = assembly.model
    console.print(Panel.fit(
        f"Package: [cyan]{model.package_name}[/cyan]\n"
        f"Records: {len(model.records)}\n"
        f"Services: {len(model.service_groups)} ({model.procedure_count} rpcs)",
        title="Schema",
    ))

    table = Table(title="Messages")
    table.add_column("Message", style="cyan")
    table.add_column("#", justify="right")
    table.add_column("Field")
    table.add_column("Type", style="green")
    for record in model.records.values():
        for ordinal, f in enumerate(record.fields, start=1):
            table.add_row(record.name if ordinal == 1 else "", str(ordinal), f.name, f.type)
    console.print(table)

    table = Table(title="Services")
    table.add_column("Service", style="cyan")
    table.add_column("RPC")
    table.add_column("Input", style="green")
    table.add_column("Output", style="green")
    for group in model.service_groups.values():
        for i, proc in enumerate(group.procedures):
            table.add_row(group.name if i == 0 else "", proc.name, proc.input_type or "-", proc.output_type or "-")
    console.print(table)

    for issue in assembly.issues:
        color = "yellow" if issue.severity.value == "warning" else "blue"
        console.print(f"  [{color}]{issue.severity.value.upper()}[/{color}]: {escape(issue.message)}")
        if issue.declaration:
            console.print(f"    At: {issue.declaration} (line {issue.line})")


def _print_results(results: list[GenerationResult]) -> None:
    """Print a summary of a generate run."""
    table = Table(title="Generation Results")
    table.add_column("Source", style="cyan")
    table.add_column("Document")
    table.add_column("Messages", justify="right")
    table.add_column("RPCs", justify="right")
    table.add_column("Status")

    for result in results:
        if result.ok and result.assembly is not None:
            model = result.assembly.model
            status = "[green]OK[/green]"
            if result.assembly.warning_count:
                status += f" [yellow]({result.assembly.warning_count} warnings)[/yellow]"
            table.add_row(
                str(result.source),
                str(result.document),
                str(len(model.records)),
                str(model.procedure_count),
                status,
            )
        else:
            table.add_row(str(result.source), "-", "-", "-", "[red]FAILED[/red]")

    console.print(table)

    for result in results:
        if not result.ok:
            console.print(Panel(Text(str(result.error)), title=f"[red]{escape(str(result.source))}[/red]", border_style="red"))

    succeeded = sum(1 for r in results if r.ok)
    color = "green" if succeeded == len(results) else "red"
    console.print(f"[{color}]Generated {succeeded} of {len(results)} document(s)[/{color}]")
