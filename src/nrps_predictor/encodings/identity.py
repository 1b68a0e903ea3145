"""One-hot residue identity encoding."""

from nrps_predictor.signatures import STANDARD_AMINO_ACIDS

_INDEX = {aa: i for i, aa in enumerate(STANDARD_AMINO_ACIDS)}


def encode_residue(residue: str) -> list[float]:
    # unknown residues and gaps stay all-zero
    encoded = [0.0] * len(STANDARD_AMINO_ACIDS)
    idx = _INDEX.get(residue)
    if idx is not None:
        encoded[idx] = 1.0
    return encoded
