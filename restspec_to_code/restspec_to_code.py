import json
import logging
import sys

import click

from .pipeline import CodeGeneratorConfig, CompilationFailedError, OutputMode, RequestBuilderGenerator


@click.command()
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.option(
    "--schema-path",
    "-s",
    "schema_paths",
    multiple=True,
    type=click.Path(exists=True, file_okay=False, resolve_path=True),
    help="Directory searched for named data schemas (repeatable)",
)
@click.option("--namespace", "-n", default=None, type=str, help="Namespace of resources that declare none")
@click.option("--force", is_flag=True, default=False, help="Rewrite target files even when they are up to date")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log per-resource progress")
@click.argument("target_dir", type=click.Path(file_okay=False, resolve_path=True))
@click.argument("sources", nargs=-1, required=True, type=click.Path(resolve_path=True))
def restspec_to_code(config, schema_paths, namespace, force, verbose, target_dir, sources):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if config is not None:
        with open(config) as f:
            config = CodeGeneratorConfig.from_dict(json.load(f))
    else:
        config = CodeGeneratorConfig()

    # CLI flags override the config file
    config.schema_paths = list(config.schema_paths) + list(schema_paths)
    if namespace is not None:
        config.default_namespace = namespace
    if force:
        config.output.mode = OutputMode.FORCE

    generator = RequestBuilderGenerator(config)
    try:
        result = generator.run(target_dir, *sources)
    except CompilationFailedError as e:
        for diagnostic in e.diagnostics:
            click.echo(str(diagnostic), err=True)
        click.echo("No resource compiled", err=True)
        sys.exit(1)

    click.echo(f"{len(result.modified_files)} of {len(result.target_files)} file(s) written to {target_dir}")

    if result.diagnostics:
        for diagnostic in result.diagnostics:
            click.echo(str(diagnostic), err=True)
        sys.exit(1)
