# orchestration/cli.py
from pathlib import Path
from typing import Dict, Optional, Tuple
import json
import click

from config import Config
from orchestration.pipeline import ValidationPipeline, GraphValidationResult, prepare_validation_summary
from services.validation import GraphValidator
from utils.error_handler import GraphError, format_error_message

def _schema_options(func):
    func = click.option('--config', '-c', 'config_path', type=click.Path(exists=True),
                        help="YAML configuration file")(func)
    func = click.option('--schemas', '-s', multiple=True, type=click.Path(),
                        help="Additional schema files (repeatable)")(func)
    func = click.option('--deprecated', '-d', is_flag=True, default=False,
                        help="Accept deprecated (superseded) types in schema")(func)
    func = click.option('--exhaustive', is_flag=True, default=False,
                        help="Report every violation instead of stopping at the first")(func)
    func = click.option('--output', '-o', type=click.Path(),
                        help="Output path for validation summary")(func)
    return func

@click.group()
def cli():
    """Validate graphs against Schema.org"""
    pass

@cli.command('validate-files')
@click.argument('graph_files', nargs=-1, required=True, type=click.Path())
@_schema_options
def validate_files(graph_files: Tuple[str, ...], config_path: Optional[str], schemas: Tuple[str, ...],
                   deprecated: bool, exhaustive: bool, output: Optional[str]):
    """Validate graphs stored as YAML or JSON documents."""
    _run(config_path, schemas, deprecated, exhaustive, output,
         lambda pipeline: pipeline.validate_files(graph_files))

@cli.command('validate-neo4j')
@_schema_options
def validate_neo4j(config_path: Optional[str], schemas: Tuple[str, ...],
                   deprecated: bool, exhaustive: bool, output: Optional[str]):
    """Validate the graph in the Neo4j database named by the configuration."""
    _run(config_path, schemas, deprecated, exhaustive, output,
         lambda pipeline: pipeline.validate_neo4j())

def _run(config_path, schemas, deprecated, exhaustive, output, validate):
    try:
        config = Config(config_path)
        validator = GraphValidator.from_config(
            config,
            extra_schemas=schemas,
            include_superseded=True if deprecated else None,
            fail_fast=False if exhaustive else None
        )
        with ValidationPipeline(config, validator) as pipeline:
            results: Dict[str, GraphValidationResult] = validate(pipeline)
    except GraphError as e:
        click.echo(format_error_message(e), err=True)
        raise click.Abort()

    summary = prepare_validation_summary(results)
    for name, result in results.items():
        if result.error:
            click.echo(f"{name}: ERROR ({result.error})")
        elif result.valid:
            click.echo(f"{name}: valid")
        else:
            click.echo(f"{name}: not valid")
            for violation in result.violations:
                click.echo(f"  - {violation.message}")

    click.echo(f"Finished - {summary['valid']} graphs (out of {summary['total_graphs']}) valid")

    # Save detailed results if output path provided
    if output:
        output_path = Path(output)
        with open(output_path, 'w') as f:
            json.dump(summary, f, indent=2)
        click.echo(f"Detailed results saved to: {output_path}")

    if summary['valid'] != summary['total_graphs']:
        raise SystemExit(1)

if __name__ == "__main__":
    cli()
