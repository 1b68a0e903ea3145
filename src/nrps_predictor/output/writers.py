"""Machine-readable TSV writer."""

from collections.abc import Sequence
from pathlib import Path

import polars as pl

from nrps_predictor.prediction.models import PredictionRecord


def records_to_frame(
    records: Sequence[PredictionRecord],
    schemes: Sequence[str],
) -> pl.DataFrame:
    """
    Flatten prediction records into one row per domain.

    Columns: name, signature, query_code (the query's own Stachelhaus code),
    stachelhaus_match (the reference code that produced the call),
    stachelhaus_call, aa10_score, aa34_score, refinement (``call(similarity)``
    joined with ``|``) and refinement_signatures (the matched long signatures
    in the same order), then per scheme ``<scheme>`` (label or N/A),
    ``<scheme>_confidence`` and ``<scheme>_status``.
    Scores and the matched code are null where there is no call.
    """
    schema: dict[str, pl.DataType] = {
        "name": pl.Utf8,
        "signature": pl.Utf8,
        "query_code": pl.Utf8,
        "stachelhaus_match": pl.Utf8,
        "stachelhaus_call": pl.Utf8,
        "aa10_score": pl.Float64,
        "aa34_score": pl.Float64,
        "refinement": pl.Utf8,
        "refinement_signatures": pl.Utf8,
    }
    for scheme in schemes:
        schema[scheme] = pl.Utf8
        schema[f"{scheme}_confidence"] = pl.Float64
        schema[f"{scheme}_status"] = pl.Utf8

    columns: dict[str, list] = {name: [] for name in schema}
    for record in records:
        stach = record.stachelhaus
        columns["name"].append(record.identifier)
        columns["signature"].append(record.signature)
        columns["query_code"].append(stach.query_short)
        columns["stachelhaus_match"].append(stach.short_signature if stach.has_call else None)
        columns["stachelhaus_call"].append(stach.call_label)
        columns["aa10_score"].append(stach.confidence if stach.has_call else None)
        columns["aa34_score"].append(stach.long_similarity if stach.has_call else None)
        columns["refinement"].append(
            "|".join(f"{hit.call}({hit.similarity:.2f})" for hit in stach.refinement)
        )
        columns["refinement_signatures"].append(
            "|".join(hit.long_signature for hit in stach.refinement)
        )
        for scheme in schemes:
            result = record.get(scheme)
            columns[scheme].append(result.label if result else "N/A")
            columns[f"{scheme}_confidence"].append(result.confidence if result else None)
            columns[f"{scheme}_status"].append(result.status if result else "unavailable")

    return pl.DataFrame(columns, schema=schema)


def write_prediction_output(
    df: pl.DataFrame,
    output_dir: Path,
    filename_base: str = "predictions",
) -> dict:
    """
    Write predictions to TSV.

    Args:
        df: Frame from records_to_frame
        output_dir: Directory to write output files (created if doesn't exist)
        filename_base: Base filename without extension

    Returns:
        Dictionary with output file paths: {"tsv": Path to TSV file}

    Notes:
        - Row order is input order, never re-sorted
        - Provenance is written separately by ProvenanceTracker.save_sidecar
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    tsv_path = output_dir / f"{filename_base}.tsv"
    df.write_csv(tsv_path, separator="\t", include_header=True)

    return {"tsv": tsv_path}
