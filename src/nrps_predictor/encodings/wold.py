"""Wold z-scale encoding: hydrophobicity, size and polarity/charge per residue.

Values are normalised with fixed per-property mean and standard deviation.
Residues outside the table (X, gaps) encode as a raw value of 0.0.
"""

HYDROPHOBICITY = {
    "A": 0.07, "R": 2.88, "N": 3.22, "D": 3.64, "C": 0.71,
    "Q": 2.18, "E": 3.08, "G": 2.23, "H": 2.41, "I": -4.44,
    "L": -4.19, "K": 2.84, "M": -2.49, "F": -4.92, "P": -1.22,
    "S": 1.96, "T": 0.92, "W": -4.75, "Y": -1.39, "V": -2.69,
}
HYDROPHOBICITY_MEAN = 0.001923076923076976
HYDROPHOBICITY_STDEV = 2.6160275521955336

SIZE = {
    "A": -1.73, "R": 2.52, "N": 1.45, "D": 1.13, "C": -0.97,
    "Q": 0.53, "E": 0.39, "G": -5.36, "H": 1.74, "I": -1.68,
    "L": -1.03, "K": 1.41, "M": -0.27, "F": 1.3, "P": 0.88,
    "S": -1.63, "T": -2.09, "W": 3.65, "Y": 2.32, "V": -2.53,
}
SIZE_MEAN = 0.0011538461538461635
SIZE_STDEV = 1.8589595518420015

POLARITY_CHARGE = {
    "A": 0.09, "R": -3.44, "N": 0.84, "D": 2.36, "C": 4.13,
    "Q": -1.14, "E": -0.07, "G": 0.3, "H": 1.11, "I": -1.03,
    "L": -0.98, "K": -3.14, "M": -0.41, "F": 0.45, "P": 2.23,
    "S": 0.57, "T": -1.4, "W": 0.85, "Y": 0.01, "V": -1.29,
}
POLARITY_CHARGE_MEAN = 0.0015384615384615096
POLARITY_CHARGE_STDEV = 1.545268112160973

SCALES = {
    "hydrophobicity": (HYDROPHOBICITY, HYDROPHOBICITY_MEAN, HYDROPHOBICITY_STDEV),
    "size": (SIZE, SIZE_MEAN, SIZE_STDEV),
    "polarity_charge": (POLARITY_CHARGE, POLARITY_CHARGE_MEAN, POLARITY_CHARGE_STDEV),
}


def normalise(value: float, mean: float, stdev: float) -> float:
    return (value - mean) / stdev


def encode_residue(residue: str, properties) -> list[float]:
    """Encode one residue as the requested normalised z-scales."""
    encoded = []
    for prop in properties:
        table, mean, stdev = SCALES[prop]
        encoded.append(normalise(table.get(residue, 0.0), mean, stdev))
    return encoded
