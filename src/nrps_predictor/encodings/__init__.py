"""Feature encodings for active-site signatures.

- wold: normalised z-scales (hydrophobicity, size, polarity/charge) per residue
- identity: one-hot residue identity per position
"""

from nrps_predictor.encodings.models import (
    IDENTITY_WIDTH,
    WOLD_PROPERTIES,
    EncodingDescriptor,
)
from nrps_predictor.encodings.encode import FeatureVector, encode

__all__ = [
    "IDENTITY_WIDTH",
    "WOLD_PROPERTIES",
    "EncodingDescriptor",
    "FeatureVector",
    "encode",
]
