# cli.py
import logging

import click

from download_server.adapters.document_store import Collection, DocumentStoreFactory
from download_server.errors import ApiError, ConfigurationError
from download_server.settings import configure_logging, get_settings

# Configure logging
logger = logging.getLogger(__name__)


@click.group()
def cli():
    """CLI commands for the file download server"""
    pass


@cli.command()
@click.option("--host", default=None, help="Bind address (defaults to HOST)")
@click.option("--port", type=int, default=None, help="Port (defaults to PORT)")
@click.option("--reload", is_flag=True, help="Reload on code changes")
def serve(host, port, reload):
    """Run the API server with uvicorn"""
    import uvicorn

    settings = get_settings()
    configure_logging(settings.log_level)
    host = host or settings.host
    port = port or settings.port

    logger.info(f"Server starting on {host}:{port}")
    logger.info(f"Environment: {settings.environment}")
    if settings.storage_backend == "github":
        logger.info(f"GitHub Repo: {settings.repository}")
    else:
        logger.info(f"Local storage: {settings.storage_dir}")

    if reload:
        uvicorn.run("download_server.main:create_app", factory=True, host=host, port=port, reload=True)
    else:
        from download_server.main import create_app
        uvicorn.run(create_app(settings), host=host, port=port)


@cli.command()
def show_config():
    """Show current configuration"""
    settings = get_settings()

    click.echo("Current Configuration:")
    for key, value in settings.masked_dict().items():
        click.echo(f"  {key}: {value}")


@cli.command()
def check_store():
    """Read both collections and report how many records each holds"""
    settings = get_settings()
    configure_logging(settings.log_level)

    try:
        store = DocumentStoreFactory.get_store(settings)
        for collection in Collection:
            snapshot = store.read(collection)
            revision = snapshot.revision or "not created yet"
            click.echo(
                f"{collection.value}: {len(snapshot.records)} records "
                f"({store.path_for(collection)} @ {revision})"
            )
    except ConfigurationError as e:
        raise click.ClickException(str(e))
    except ApiError as e:
        raise click.ClickException(f"{e.message}: {e.error}" if e.error else e.message)


if __name__ == "__main__":
    cli()
