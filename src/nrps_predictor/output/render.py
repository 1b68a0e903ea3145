"""Human-readable prediction table.

One header line, then one line per domain:

    Name  Stach  AA10 score  AA34 score  <scheme>...

Multiple Stachelhaus calls and their scores are joined with '|'. Scheme
columns list the best predictions as ``class(score)`` joined with '|'.
Anything without a call is rendered as N/A.
"""

from collections.abc import Sequence

from nrps_predictor.prediction.models import PredictionRecord
from nrps_predictor.stachelhaus.models import NO_CALL, StachelhausResult

TABLE_HEADER = ("Name", "Stach", "AA10 score", "AA34 score")


def format_score(score: float) -> str:
    return f"{score:.2f}"


def stachelhaus_cells(result: StachelhausResult) -> list[str]:
    """Stach, AA10 score and AA34 score cells for one lookup result."""
    if not result.has_call:
        return [NO_CALL, NO_CALL, NO_CALL]
    n = len(result.calls)
    return [
        result.call_label,
        "|".join([format_score(result.confidence)] * n),
        "|".join([format_score(result.long_similarity)] * n),
    ]


def scheme_cell(record: PredictionRecord, scheme: str, count: int) -> str:
    scheme_result = record.get(scheme)
    if scheme_result is None:
        return NO_CALL
    best = scheme_result.best_n(count)
    if not best:
        return NO_CALL
    return "|".join(f"{name}({format_score(score)})" for name, score in best)


def render_table(
    records: Sequence[PredictionRecord],
    schemes: Sequence[str],
    count: int = 1,
) -> str:
    """
    Render records as the tab-separated prediction table.

    Args:
        records: Prediction records in output order
        schemes: Scheme columns, in output order
        count: Ranked predictions per scheme cell (ties extend it)

    Returns:
        Table text ending in a newline

    Raises:
        ValueError: If count < 1
    """
    if count < 1:
        raise ValueError(f"count must be >= 1, got {count}")

    lines = ["\t".join([*TABLE_HEADER, *schemes])]
    for record in records:
        cells = [record.identifier, *stachelhaus_cells(record.stachelhaus)]
        cells.extend(scheme_cell(record, scheme, count) for scheme in schemes)
        lines.append("\t".join(cells))
    return "\n".join(lines) + "\n"
