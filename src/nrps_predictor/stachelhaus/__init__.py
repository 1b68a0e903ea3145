"""Stachelhaus code lookup.

Matches the 10-residue Stachelhaus code derived from a query signature
against a curated reference table:
- Exact matches report the majority-weighted substrate call(s)
- Otherwise nearest neighbours by Hamming distance, confidence (10 - d) / 10
- Independently, the top long-signature (34 residue) matches per substrate
"""

from nrps_predictor.stachelhaus.models import (
    DEFAULT_REFINEMENT_HITS,
    NO_CALL,
    RefinementHit,
    SignatureEntry,
    StachelhausResult,
)
from nrps_predictor.stachelhaus.table import (
    REFERENCE_COLUMNS,
    SignatureTable,
    load_bundled_table,
    load_signature_table,
)
from nrps_predictor.stachelhaus.match import StachelhausMatcher

__all__ = [
    "DEFAULT_REFINEMENT_HITS",
    "NO_CALL",
    "RefinementHit",
    "SignatureEntry",
    "StachelhausResult",
    "REFERENCE_COLUMNS",
    "SignatureTable",
    "load_bundled_table",
    "load_signature_table",
    "StachelhausMatcher",
]
