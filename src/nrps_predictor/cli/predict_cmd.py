"""Predict command: substrate specificity for a file of A-domain signatures.

Steps:
- Resolve configuration (YAML file plus command-line overrides)
- Load the Stachelhaus reference table and the classifier schemes
- Parse the signature file, rejecting malformed lines individually
- Predict every domain and print the table to stdout
"""

import logging
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from nrps_predictor.config import load_config_with_overrides
from nrps_predictor.errors import ArtifactLoadError, TableBuildError
from nrps_predictor.output import records_to_frame, render_table, write_prediction_output
from nrps_predictor.persistence import ProvenanceTracker
from nrps_predictor.prediction import Predictor, parse_domains, summarise_run
from nrps_predictor.stachelhaus import load_bundled_table, load_signature_table
from nrps_predictor.svm import ModelStore

logger = logging.getLogger(__name__)


def progress(message: str, **style) -> None:
    """Progress goes to stderr so stdout holds only the table."""
    click.echo(click.style(message, **style), err=True)


@click.command('predict')
@click.argument(
    'signatures',
    type=click.Path(path_type=Path),
)
@click.option(
    '--model-dir',
    type=click.Path(path_type=Path),
    default=None,
    help='Directory with one subdirectory per classification scheme'
)
@click.option(
    '--stachelhaus-signatures',
    type=click.Path(path_type=Path),
    default=None,
    help='Stachelhaus reference table (TSV)'
)
@click.option(
    '-c', '--count',
    type=int,
    default=None,
    help='Number of ranked predictions per scheme'
)
@click.option(
    '--skip-stachelhaus',
    is_flag=True,
    help='Skip the Stachelhaus signature lookup'
)
@click.option(
    '--skip-v2',
    is_flag=True,
    help='Skip NRPS2_* schemes'
)
@click.option(
    '--skip-v3',
    is_flag=True,
    help='Skip NRPS3_* schemes'
)
@click.option(
    '--scheme', 'schemes',
    multiple=True,
    help='Only predict with this scheme (repeatable)'
)
@click.option(
    '--workers',
    type=int,
    default=None,
    help='Worker threads for prediction'
)
@click.option(
    '--output-dir',
    type=click.Path(path_type=Path),
    default=None,
    help='Also write TSV output and provenance to this directory'
)
@click.pass_context
def predict(ctx, signatures, model_dir, stachelhaus_signatures, count, skip_stachelhaus,
            skip_v2, skip_v3, schemes, workers, output_dir):
    """Predict A-domain substrate specificity from active-site signatures.

    SIGNATURES is a tab-separated file with one domain per line, either
    SIGNATURE<TAB>NAME or SIGNATURE<TAB>SUBSTRATE<TAB>NAME.

    Examples:

        nrps-predictor predict signatures.tsv

        nrps-predictor predict signatures.tsv --model-dir models -c 3 --skip-v2
    """
    config_path = ctx.obj['config_path']

    overrides = {
        'model_dir': model_dir,
        'stachelhaus_signatures': stachelhaus_signatures,
        'prediction.count': count,
        'prediction.skip_stachelhaus': True if skip_stachelhaus else None,
        'prediction.skip_v2': True if skip_v2 else None,
        'prediction.skip_v3': True if skip_v3 else None,
        'prediction.schemes': list(schemes) if schemes else None,
        'prediction.workers': workers,
        'output.output_dir': output_dir,
    }

    try:
        config = load_config_with_overrides(config_path, overrides)
    except (FileNotFoundError, ValidationError) as e:
        progress(f"Error loading config: {e}", fg='red')
        sys.exit(1)

    settings = config.prediction
    provenance = ProvenanceTracker.from_config(config)

    # Reference table
    table_path = config.signature_table_path()
    try:
        if table_path is None:
            table = load_bundled_table()
            table_source = "bundled"
        else:
            table = load_signature_table(table_path)
            table_source = str(table_path)
    except TableBuildError as e:
        progress(f"Error loading Stachelhaus table: {e}", fg='red')
        logger.error("Stachelhaus table could not be built: %s", e)
        sys.exit(1)
    progress(f"Stachelhaus table: {len(table)} entries ({table_source})")
    provenance.record_reference_table(table_source, len(table))

    # Classifier schemes
    store = ModelStore.load(config.model_dir, config.requested_schemes())
    for scheme, failure in store.failures.items():
        progress(f"  Scheme {scheme} unavailable: {failure.reason}", fg='yellow')
    active = config.active_schemes(list(store.schemes) + list(store.failures))
    try:
        store.require_usable(active)
    except ArtifactLoadError as e:
        progress(f"Error: {e}", fg='red')
        sys.exit(1)
    progress(f"Schemes: {', '.join(active)}")
    provenance.record_models(store, active)

    # Inputs
    try:
        report = parse_domains(signatures)
    except FileNotFoundError as e:
        progress(f"Error: {e}", fg='red')
        sys.exit(1)
    for rejected in report.rejected:
        progress(f"  Skipping line {rejected.line_number}: {rejected.msg}", fg='yellow')
    progress(f"Domains: {len(report.domains)} accepted, {len(report.rejected)} rejected")
    provenance.record_inputs(report)

    predictor = Predictor(
        table,
        store,
        active_schemes=active,
        refinement_hits=settings.refinement_hits,
        min_short_matches=settings.min_short_matches,
        skip_stachelhaus=settings.skip_stachelhaus,
    )
    records = predictor.predict_all(report.domains, workers=settings.workers)

    summary = summarise_run(records, store, report)
    provenance.record_summary(summary)

    click.echo(render_table(records, predictor.active_schemes, settings.count), nl=False)

    if config.output.output_dir is not None:
        df = records_to_frame(records, predictor.active_schemes)
        paths = write_prediction_output(
            df,
            config.output.output_dir,
            config.output.filename_base,
        )
        provenance.record_output(paths['tsv'])
        sidecar = provenance.save_sidecar(paths['tsv'])
        progress(f"Wrote {paths['tsv']} and {sidecar.name}", fg='green')
