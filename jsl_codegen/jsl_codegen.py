import json
import logging
from pathlib import Path

import click

from .pipeline import CodeGeneratorConfig, NameCollisionError, OutputMode, OutputValidationError, SchemaError, generate_targets
from .utils import to_pascal_case

logger = logging.getLogger(__name__)


@click.command()
@click.option("--go-out", default=None, type=click.Path(file_okay=False, resolve_path=True), help="Directory for the Go output")
@click.option("--ts-out", default=None, type=click.Path(file_okay=False, resolve_path=True), help="Directory for the TypeScript output")
@click.option("--py-out", default=None, type=click.Path(file_okay=False, resolve_path=True), help="Directory for the Python output")
@click.option("--name", "-n", default=None, type=str, help="Root type name (default: input file stem)")
@click.option("--config", "-c", default=None, type=click.Path(exists=True, dir_okay=False, resolve_path=True))
@click.option("--force", "-f", is_flag=True, default=False, help="Overwrite existing output files")
@click.option("--format", "format_", is_flag=True, default=False, help="Run gofmt / ruff on the output when installed")
@click.option("--verbose", "-v", is_flag=True, default=False)
@click.argument("path", type=click.Path(exists=True, dir_okay=False, resolve_path=True))
def jsl_codegen(go_out, ts_out, py_out, name, config, force, format_, verbose, path):
    """Generate Go, TypeScript and Python types from the JSL schema at PATH."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    targets = {}
    if go_out is not None:
        targets["go"] = Path(go_out)
    if ts_out is not None:
        targets["typescript"] = Path(ts_out)
    if py_out is not None:
        targets["python"] = Path(py_out)
    if not targets:
        raise click.UsageError("at least one of --go-out, --ts-out or --py-out is required")

    try:
        with open(path, encoding="utf-8") as f:
            schema = json.load(f)
    except json.JSONDecodeError as e:
        raise click.ClickException(f"{path}: invalid JSON: {e}") from e

    if config is not None:
        with open(config, encoding="utf-8") as f:
            config = CodeGeneratorConfig.from_dict(json.load(f))
    else:
        config = CodeGeneratorConfig()

    # CLI flags override the config file
    if force:
        config.output.mode = OutputMode.FORCE
    if format_:
        config.formatter.enabled = True

    if name is None:
        name = to_pascal_case(Path(path).stem)

    logger.debug("Generating %s for %s", ", ".join(targets), name)

    try:
        written = generate_targets(name, schema, targets, config)
    except (SchemaError, NameCollisionError, OutputValidationError, OSError) as e:
        raise click.ClickException(str(e)) from e

    for output in written:
        click.echo(str(output))
