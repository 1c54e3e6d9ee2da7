import json

import click

from . import __version__
from .cli_utils import configure_logging, reconstruct_command_line
from .pipeline import GeneratorConfig, convert_path
from .pipeline.backends import BACKENDS


@click.command()
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.option("--backend", "-b", default="sdl", type=click.Choice(list(BACKENDS)))
@click.option("--force", "-f", is_flag=True, default=False, help="Overwrite existing schema files")
@click.option("--no-validate", is_flag=True, default=False, help="Do not validate the generated schema before writing it")
@click.option("--debug", "-d", is_flag=True, default=False, help="Log at debug level")
@click.version_option(__version__, prog_name="ecore_to_graphql")
@click.argument("path", default=None, type=click.Path(exists=True, resolve_path=True))
@click.argument("output", default=None, type=click.Path(resolve_path=True))
def ecore_to_graphql(config, backend, force, no_validate, debug, path, output):
    """Generate GraphQL schemas (.graphqls) from the Ecore or JSON metamodels at PATH."""
    configure_logging(debug)

    if config is not None:
        with open(config) as f:
            config = GeneratorConfig.from_dict(json.load(f))
    else:
        config = GeneratorConfig()

    # CLI flag overrides the config file
    if no_validate:
        config.output.validate_before_write = False

    command_line = reconstruct_command_line(ecore_to_graphql)
    written, failed = convert_path(path, output, config, backend=backend, force=force, command_line=command_line)

    if failed:
        raise click.ClickException(f"{len(failed)} metamodel(s) failed, {len(written)} schema(s) written")
