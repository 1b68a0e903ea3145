"""Main CLI entry point for nrps-predictor.

Provides the command group with global options and the predict subcommand.
"""

import logging
from pathlib import Path

import click
import structlog
from pydantic import ValidationError

from nrps_predictor import __version__
from nrps_predictor.config import default_config, load_config
from nrps_predictor.cli.predict_cmd import predict
from nrps_predictor.svm import ModelStore


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

# Engine modules log through structlog; route it into stdlib logging on stderr
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.processors.KeyValueRenderer(key_order=['event']),
    ],
    logger_factory=structlog.stdlib.LoggerFactory(),
    wrapper_class=structlog.stdlib.BoundLogger,
)


@click.group()
@click.version_option(__version__, prog_name='nrps-predictor')
@click.option(
    '--config',
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help='Path to configuration YAML file (defaults apply without one)'
)
@click.option(
    '--verbose',
    is_flag=True,
    help='Enable verbose logging (DEBUG level)'
)
@click.pass_context
def cli(ctx, config, verbose):
    """nrps-predictor: substrate specificity prediction for NRPS adenylation domains.

    Combines a Stachelhaus code lookup with trained SVM classifiers at
    several substrate granularities.
    """
    ctx.ensure_object(dict)
    ctx.obj['config_path'] = config
    ctx.obj['verbose'] = verbose

    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logging.debug("Verbose logging enabled")
    else:
        logging.getLogger().setLevel(logging.WARNING)


@cli.command()
@click.pass_context
def info(ctx):
    """Display configuration summary and the scheme load report."""
    config_path = ctx.obj['config_path']

    click.echo(f"nrps-predictor v{__version__}")
    click.echo(f"Config: {config_path if config_path else '(defaults)'}")
    click.echo()

    try:
        config = load_config(config_path) if config_path else default_config()
    except (FileNotFoundError, ValidationError) as e:
        click.echo(click.style(f"Error loading config: {e}", fg='red'), err=True)
        ctx.exit(1)

    click.echo(f"Config Hash: {config.config_hash()[:16]}...")
    click.echo()

    click.echo(click.style("Paths:", bold=True))
    click.echo(f"  Model Directory: {config.model_dir}")
    table_path = config.signature_table_path()
    click.echo(f"  Stachelhaus Table: {table_path if table_path else '(bundled)'}")
    click.echo()

    settings = config.prediction
    click.echo(click.style("Prediction:", bold=True))
    click.echo(f"  Count: {settings.count}")
    click.echo(f"  Skip Stachelhaus: {settings.skip_stachelhaus}")
    click.echo(f"  Skip NRPS2: {settings.skip_v2}")
    click.echo(f"  Skip NRPS3: {settings.skip_v3}")
    click.echo(f"  Workers: {settings.workers}")
    click.echo()

    store = ModelStore.load(config.model_dir, config.requested_schemes())
    click.echo(click.style("Schemes:", bold=True))
    for scheme, artifact in store.artifacts.items():
        click.echo(click.style(
            f"  {scheme}: {artifact.n_classes} classes, {artifact.kernel.kernel_type} kernel",
            fg='green'
        ))
    for scheme, failure in store.failures.items():
        click.echo(click.style(f"  {scheme}: unavailable ({failure.reason})", fg='yellow'))
    if not store.artifacts and not store.failures:
        click.echo("  (none found)")


# Register commands
cli.add_command(predict)


if __name__ == '__main__':
    cli()
