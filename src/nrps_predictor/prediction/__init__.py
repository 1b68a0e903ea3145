"""Prediction pipeline.

Parses signature files into validated domains, runs the Stachelhaus lookup
and every active classification scheme per domain, and accounts for rejected
inputs and unavailable schemes.
"""

from nrps_predictor.prediction.models import (
    STATUS_CALLED,
    STATUS_ENCODING_ERROR,
    STATUS_NO_CONFIDENT_CALL,
    STATUS_UNAVAILABLE,
    ADomain,
    InputReport,
    PredictionRecord,
    SchemeResult,
)
from nrps_predictor.prediction.inputs import (
    parse_domain_line,
    parse_domains,
    parse_domains_from_lines,
)
from nrps_predictor.prediction.pipeline import Predictor, RunSummary, summarise_run

__all__ = [
    "STATUS_CALLED",
    "STATUS_ENCODING_ERROR",
    "STATUS_NO_CONFIDENT_CALL",
    "STATUS_UNAVAILABLE",
    "ADomain",
    "InputReport",
    "PredictionRecord",
    "SchemeResult",
    "parse_domain_line",
    "parse_domains",
    "parse_domains_from_lines",
    "Predictor",
    "RunSummary",
    "summarise_run",
]
