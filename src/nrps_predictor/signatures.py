"""Active-site signature helpers shared by the matcher, encoders and input parsing."""

from nrps_predictor.errors import InputValidationError

LONG_SIGNATURE_LENGTH = 34
SHORT_SIGNATURE_LENGTH = 10

# Long-signature indices of the Stachelhaus code; the tenth residue is the
# invariant Lys517 which is not part of the extracted 34 residues.
SHORT_SIGNATURE_POSITIONS = (5, 6, 9, 12, 14, 16, 21, 29, 30)
INVARIANT_LYSINE = "K"

STANDARD_AMINO_ACIDS = "ACDEFGHIKLMNPQRSTVWY"
# X marks an unknown residue, - a gap in the extracted signature
SIGNATURE_ALPHABET = frozenset(STANDARD_AMINO_ACIDS + "X-")


def normalise_signature(signature: str) -> str:
    """Strip whitespace and upper-case a raw signature."""
    return signature.strip().upper()


def validate_signature(signature: str, length: int = LONG_SIGNATURE_LENGTH) -> str:
    """Check length and alphabet of a signature.

    Args:
        signature: Signature string, already normalised
        length: Expected number of residues

    Returns:
        The signature, unchanged

    Raises:
        InputValidationError: On wrong length or residues outside the alphabet
    """
    if len(signature) != length:
        raise InputValidationError(
            f"Signature {signature!r} has {len(signature)} residues, expected {length}"
        )
    invalid = sorted(set(signature) - SIGNATURE_ALPHABET)
    if invalid:
        raise InputValidationError(
            f"Signature {signature!r} contains invalid residues: {''.join(invalid)}"
        )
    return signature


def extract_short_signature(long_signature: str) -> str:
    """Project a 34-residue signature onto its 10-residue Stachelhaus code.

    Raises:
        InputValidationError: If the long signature is not 34 residues
    """
    if len(long_signature) != LONG_SIGNATURE_LENGTH:
        raise InputValidationError(
            f"Cannot extract Stachelhaus code from {long_signature!r}: "
            f"expected {LONG_SIGNATURE_LENGTH} residues, got {len(long_signature)}"
        )
    short = "".join(long_signature[i] for i in SHORT_SIGNATURE_POSITIONS)
    return short + INVARIANT_LYSINE


def hamming_distance(a: str, b: str) -> int:
    """Count differing positions of two equal-length strings."""
    if len(a) != len(b):
        raise ValueError(f"Hamming distance needs equal lengths, got {len(a)} and {len(b)}")
    return sum(1 for x, y in zip(a, b) if x != y)


def similarity(a: str, b: str) -> float:
    """Normalised identity, 1 - hamming / length."""
    if not a:
        return 0.0
    return 1.0 - hamming_distance(a, b) / len(a)
