import json
import logging
from pathlib import Path

import click

from .cli_utils import reconstruct_command_line
from .pipeline import Language, ParserConfig, PipelineGenerator, XsdToCodeError


@click.command()
@click.option("--input", "-i", "input_path", required=True, type=click.Path(exists=True, resolve_path=True))
@click.option("--output", "-o", "output_dir", default=None, type=click.Path(resolve_path=True))
@click.option(
    "--language",
    "-l",
    default=None,
    type=click.Choice([Language.GO.value, Language.TYPESCRIPT.value]),
    help="Target language (default: Go)",
)
@click.option("--package", "-p", default=None, type=str, help="Package name for languages that need one")
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.option("--strict", is_flag=True, default=False, help="Fail on type references that resolve to nothing")
@click.option("--verbose", "-v", is_flag=True, default=False)
def xsd_to_code(input_path, output_dir, language, package, config, strict, verbose):
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)

    if config is not None:
        with open(config) as f:
            config = ParserConfig.from_dict(json.load(f))
    else:
        config = ParserConfig()

    # Command line flags override the config file
    if language is not None:
        config.lang = language
    if package is not None:
        config.package = package
    if output_dir is not None:
        config.output_dir = output_dir
    if strict:
        config.strict = True

    input_path = Path(input_path)
    config.input_dir = str(input_path if input_path.is_dir() else input_path.parent)

    try:
        generator = PipelineGenerator(config, generation_comment=reconstruct_command_line(xsd_to_code))
        generator.process_all(input_path)
    except XsdToCodeError as e:
        raise click.ClickException(f"process error on {click.format_filename(input_path)}: {e}") from e

    click.echo("done")
