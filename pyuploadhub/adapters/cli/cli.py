import os

import click

from pyuploadhub.config.settings import get_config_manager
from pyuploadhub.logging.setup import setup_logging, get_logger
from pyuploadhub.core.storage import PathCreationError
from pyuploadhub.core.uploads import RawUpload, UploadPipeline

logger = get_logger(__name__)

DATE_FORMATS = ["%Y-%m-%d", "%Y-%m-%dT%H:%M:%S"]


def get_pipeline(ctx) -> UploadPipeline:
    """Build the upload pipeline from the loaded configuration."""
    if "PIPELINE" not in ctx.obj:
        ctx.obj["PIPELINE"] = UploadPipeline(
            ctx.obj["CONFIG_MANAGER"].upload_settings)
    return ctx.obj["PIPELINE"]


def report(ctx, outcome):
    """Echo an outcome; a failed outcome exits with status 1."""
    if outcome.ok:
        click.echo(outcome.message)
        return
    click.echo(f"Failed: {outcome.message}", err=True)
    ctx.exit(1)


@click.group()
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False),
              help="Path to config.yaml (default: search PYUPLOADHUB_CONFIG_PATH, ./config.yaml)")
@click.pass_context
def cli(ctx, config_path):
    """PyUploadHub storage CLI"""
    ctx.ensure_object(dict)
    config_manager = get_config_manager()
    config_manager.load(config_path)
    setup_logging(config_manager.logging_config)
    ctx.obj["CONFIG_MANAGER"] = config_manager


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--timestamp", type=click.DateTime(formats=DATE_FORMATS),
              help="Date folder to store the file under (default: today, UTC)")
@click.pass_context
def add(ctx, file, timestamp):
    """Copy a local file into storage."""
    pipeline = get_pipeline(ctx)
    uploaded_file = RawUpload(
        name=os.path.basename(file),
        tmp_name=os.path.abspath(file),
        local_file=True,
    )
    try:
        outcome = pipeline.add_file(uploaded_file, {"timestamp": timestamp})
    except PathCreationError as e:
        raise click.ClickException(str(e))

    report(ctx, outcome)
    click.echo(f"Path: {outcome.result}")


@cli.command()
@click.argument("filename")
@click.option("--timestamp", type=click.DateTime(formats=DATE_FORMATS),
              help="Date folder the file was stored under (default: today, UTC)")
@click.pass_context
def remove(ctx, filename, timestamp):
    """Remove a stored file."""
    try:
        outcome = get_pipeline(ctx).remove_file(filename, timestamp)
    except PathCreationError as e:
        raise click.ClickException(str(e))
    report(ctx, outcome)


@cli.command()
@click.argument("files", nargs=-1, required=True)
@click.pass_context
def validate(ctx, files):
    """Check file types against the configured allow-list."""
    pipeline = get_pipeline(ctx)
    upload_fields = {
        "name": [os.path.basename(f) for f in files],
        "tmp_name": list(files),
    }
    report(ctx, pipeline.validate_uploads(upload_fields, pipeline.allow_list))


@cli.command()
@click.option("--timestamp", type=click.DateTime(formats=DATE_FORMATS),
              help="Date to resolve (default: today, UTC)")
@click.option("--no-date-folder", is_flag=True, help="Print the storage root only")
@click.pass_context
def path(ctx, timestamp, no_date_folder):
    """Print (and create) the storage directory for a date."""
    try:
        directory = get_pipeline(ctx).storage_path(
            timestamp, include_date_folder=not no_date_folder)
    except PathCreationError as e:
        raise click.ClickException(str(e))
    click.echo(directory)


if __name__ == "__main__":
    cli()
