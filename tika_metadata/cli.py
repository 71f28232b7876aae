"""Command line interface for tika-metadata."""

import json
import sys
from typing import Optional

import click
from pydantic import ValidationError

from tika_metadata import __version__
from tika_metadata.core.config import ExtractionConfig
from tika_metadata.core.enums import ExtractionOption, LogLevel, ResourceType, ServiceType
from tika_metadata.core.exceptions import TikaMetadataError
from tika_metadata.core.logging import LoggerManager
from tika_metadata.extractor import TikaExtractor
from tika_metadata.resources import FileResource


def _load_config(config: Optional[str]) -> ExtractionConfig:
    """Load configuration from a file, or from the environment if none is given."""
    try:
        return ExtractionConfig.from_file(config) if config else ExtractionConfig.from_env()
    except (ValidationError, ValueError) as e:
        click.echo(f"Error: Invalid configuration: {e}", err=True)
        sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="tika-metadata")
def main():
    """Extract document metadata with Apache Tika."""


@main.command()
@click.option('--file', '-f', 'file_path', type=str, help='Path of the file to extract metadata for')
@click.option('--host', type=str, help='Tika server hostname or IP address (overrides config)')
@click.option('--port', type=int, help='Tika server port (overrides config)')
@click.option('--format', 'output_format', type=click.Choice(['json', 'dump', 'text']), default='dump',
              help='json: raw Tika metadata, dump: normalized metadata record, text: text content')
@click.option('--test-connection', is_flag=True, help='Only test the connection to the Tika server')
@click.option('--config', '-c', type=click.Path(exists=True), help='Configuration file path')
@click.option('--debug', is_flag=True, help='Enable debug logging')
def extract(
    file_path: Optional[str],
    host: Optional[str],
    port: Optional[int],
    output_format: str,
    test_connection: bool,
    config: Optional[str],
    debug: bool,
):
    """Extract metadata from a file with a Tika server."""
    extraction_config = _load_config(config)
    LoggerManager.setup_logging(LogLevel.DEBUG if debug else extraction_config.log_level, force=True)

    extraction_config.service_type = ServiceType.SERVER
    if host:
        extraction_config.server.host = host
    if port:
        extraction_config.server.port = port

    if not extraction_config.server.host:
        click.echo("Error: No Tika server host set, pass --host or set it in the configuration.", err=True)
        sys.exit(1)

    extractor = TikaExtractor(extraction_config)

    try:
        if test_connection:
            response = extractor.get_server().test_connection()
            if response.status_code != 200:
                click.echo(f"✗ Tika server answered {response.status_code} {response.reason}", err=True)
                sys.exit(1)
            click.echo(f"✓ Connected to Tika server at {extraction_config.server.base_uri}")
            return

        if not file_path:
            click.echo("Error: No file given, pass --file with the file to extract metadata for.", err=True)
            sys.exit(1)

        resource = FileResource.from_path(file_path)
        if resource.is_directory or not resource.path.exists():
            click.echo(f"Error: File does not exist: {file_path}", err=True)
            sys.exit(1)

        if output_format == 'json':
            output = extractor.extract(resource, ResourceType.FILE, ExtractionOption.JSON_METADATA)
        elif output_format == 'text':
            output = extractor.extract_file_content(resource)
        else:
            record = extractor.extract_file_metadata(resource)
            output = None
            if record is not None:
                output = json.dumps({"variant": record.variant_tag, **record.get_record()}, indent=2)

    except TikaMetadataError as e:
        click.echo(f"✗ Extraction failed: {e}", err=True)
        sys.exit(1)

    if not output:
        click.echo(f"⚠ No {output_format} output for {file_path}", err=True)
        return

    click.echo(output)


@main.command()
@click.option('--config', '-c', type=click.Path(exists=True), help='Configuration file path')
def status(config: Optional[str]):
    """Report whether the configured Tika service is ready."""
    extraction_config = _load_config(config)
    LoggerManager.setup_logging(extraction_config.log_level, force=True)

    service_status = TikaExtractor(extraction_config).service_status()
    click.echo(json.dumps(service_status))

    if not service_status["ready"]:
        sys.exit(1)


if __name__ == '__main__':
    main()
