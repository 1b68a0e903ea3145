"""Signature to feature vector encoding."""

import numpy as np

from nrps_predictor.encodings import identity, wold
from nrps_predictor.encodings.models import EncodingDescriptor
from nrps_predictor.errors import EncodingError

# Feature vectors are read-only float64 arrays
FeatureVector = np.ndarray


def encode(signature: str, descriptor: EncodingDescriptor) -> FeatureVector:
    """Encode a signature according to a descriptor.

    Args:
        signature: Upper-case signature string
        descriptor: Positions and per-residue encoding to use

    Returns:
        Read-only float64 vector of length descriptor.output_length

    Raises:
        EncodingError: If the signature length differs from descriptor.signature_length
    """
    if len(signature) != descriptor.signature_length:
        raise EncodingError(
            f"Signature {signature!r} has {len(signature)} residues, "
            f"encoding expects {descriptor.signature_length}"
        )

    values: list[float] = []
    for position in descriptor.selected_positions:
        residue = signature[position]
        if descriptor.scheme == "identity":
            values.extend(identity.encode_residue(residue))
        else:
            values.extend(wold.encode_residue(residue, descriptor.properties))

    vector = np.asarray(values, dtype=np.float64)
    vector.setflags(write=False)
    return vector
