"""
Command-line interface for LeadFill
"""
import asyncio
import json
from pathlib import Path

import click

from core.config import load_settings
from core.exceptions import LeadFillError
from core.logging import setup_logging


def _settings():
    try:
        settings = load_settings()
    except LeadFillError as e:
        raise click.ClickException(e.message) from e
    setup_logging(settings)
    return settings


@click.group()
@click.version_option(version="0.1.0")
def cli():
    """LeadFill CLI - enrich business lead lists with Google Places data"""
    pass


@cli.command()
@click.option("--bucket", required=True, help="Bucket holding the input CSV")
@click.option("--key", required=True, help="Key of the input CSV")
def transform(bucket: str, key: str):
    """Run one pipeline invocation against an object in S3"""
    from d0_gateway.storage import StorageLocation
    from d11_orchestration.pipeline import TransformPipeline

    settings = _settings()

    async def run():
        async with TransformPipeline.from_settings(settings) as pipeline:
            return await pipeline.run(StorageLocation(bucket=bucket, key=key))

    try:
        location = asyncio.run(run())
    except LeadFillError as e:
        raise click.ClickException(e.message) from e

    click.echo(location.uri)


@cli.command("transform-file")
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("output_path", type=click.Path(dir_okay=False, writable=True, path_type=Path))
def transform_file(input_path: Path, output_path: Path):
    """Enrich a local CSV file without touching S3"""
    from d11_orchestration.pipeline import TransformPipeline

    settings = _settings()

    async def run():
        async with TransformPipeline.from_settings(settings) as pipeline:
            return await pipeline.transform(input_path.read_bytes())

    try:
        output, result = asyncio.run(run())
    except LeadFillError as e:
        raise click.ClickException(e.message) from e

    output_path.write_bytes(output)
    click.echo(
        f"✓ {len(result.records)} records written to {output_path} "
        f"({result.resolved} resolved, {result.unresolved} unresolved, {result.failed} failed)"
    )


@cli.command("count-resolved")
@click.option("--key", required=True, help="Key of an enriched output CSV")
@click.option("--bucket", default=None, help="Bucket (defaults to OUTPUT_BUCKET)")
def count_resolved(key: str, bucket: str):
    """Count output rows with a resolved address using S3 Select"""
    from d0_gateway.storage import S3ObjectStore, StorageLocation

    settings = _settings()
    storage = S3ObjectStore(region_name=settings.aws_region)

    try:
        count = storage.count_resolved_rows(StorageLocation(bucket=bucket or settings.output_bucket, key=key))
    except LeadFillError as e:
        raise click.ClickException(e.message) from e

    click.echo(str(count))


@cli.command("check-config")
def check_config():
    """Display the effective configuration with secrets masked"""
    settings = _settings()
    click.echo(json.dumps(settings.model_dump(), indent=2, default=str))


def main():
    """Main entry point"""
    cli()


if __name__ == "__main__":
    main()
