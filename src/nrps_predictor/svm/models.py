"""Data models for classifier artifacts and their results."""

from dataclasses import dataclass, field
from pathlib import Path

import numpy as np
from pydantic import BaseModel, ConfigDict, Field

from nrps_predictor.encodings import EncodingDescriptor
from nrps_predictor.svm.kernels import Kernel

# Artifact schema versions this release can read
SUPPORTED_SCHEMA_VERSIONS = (1,)

# Metadata file marking a scheme directory
SCHEME_METADATA_FILE = "scheme.yaml"

# Canonical output order of the NRPSPredictor scheme families
KNOWN_SCHEMES = (
    "NRPS3_THREE_CLUSTER",
    "NRPS3_LARGE_CLUSTER",
    "NRPS3_SMALL_CLUSTER",
    "NRPS3_SINGLE_CLUSTER",
    "NRPS2_THREE_CLUSTER",
    "NRPS2_THREE_CLUSTER_FUNGAL",
    "NRPS2_LARGE_CLUSTER",
    "NRPS2_SMALL_CLUSTER",
    "NRPS2_SINGLE_CLUSTER",
)


def scheme_sort_key(scheme: str) -> tuple[int, str]:
    """Known schemes first in canonical order, then others alphabetically."""
    if scheme in KNOWN_SCHEMES:
        return (KNOWN_SCHEMES.index(scheme), scheme)
    return (len(KNOWN_SCHEMES), scheme)


class SchemeMetadata(BaseModel):
    """Contents of a scheme directory's scheme.yaml."""

    model_config = ConfigDict(extra="forbid")

    schema_version: int = Field(..., description="Artifact schema version")
    scheme: str = Field(..., min_length=1, description="Scheme identifier")
    description: str = Field(default="", description="Free-text description")
    encoding: EncodingDescriptor = Field(..., description="Feature encoding")
    feature_dimension: int = Field(..., ge=1, description="Declared feature dimensionality")
    classes: list[str] = Field(..., min_length=2, description="Class names, indexed by model label")
    min_confidence: float = Field(
        default=0.0,
        ge=0.0,
        le=1.0,
        description="Calls below this confidence are reported as N/A",
    )
    model_file: str = Field(default="model.svm", description="LIBSVM model file name")


@dataclass(frozen=True)
class ModelArtifact:
    """A parsed, validated one-vs-one multi-class SVM.

    Arrays are read-only. Support vectors are grouped by class in the order
    of `classes`; `coefficients` has shape (k - 1, n_sv) as in LIBSVM.

    Attributes:
        scheme: Scheme identifier
        encoding: Feature encoding descriptor
        classes: Class names in model label order
        kernel: Kernel with parameters
        support_vectors: (n_sv, feature_dimension) array
        coefficients: (k - 1, n_sv) dual coefficients
        class_counts: Support vectors per class
        rho: Bias per class pair, pair order (0,1), (0,2), ..., (k-2,k-1)
        prob_a: Platt sigmoid slope per pair, or None without calibration
        prob_b: Platt sigmoid offset per pair, or None without calibration
        min_confidence: Minimum confidence for a call
        description: Free-text description from scheme.yaml
        source: Directory the artifact was loaded from
    """

    scheme: str
    encoding: EncodingDescriptor
    classes: tuple[str, ...]
    kernel: Kernel
    support_vectors: np.ndarray
    coefficients: np.ndarray
    class_counts: tuple[int, ...]
    rho: tuple[float, ...]
    prob_a: tuple[float, ...] | None = None
    prob_b: tuple[float, ...] | None = None
    min_confidence: float = 0.0
    description: str = ""
    source: Path | None = None

    @property
    def n_classes(self) -> int:
        return len(self.classes)

    @property
    def feature_dimension(self) -> int:
        return self.support_vectors.shape[1]

    @property
    def has_probability(self) -> bool:
        return self.prob_a is not None and self.prob_b is not None

    @property
    def class_starts(self) -> tuple[int, ...]:
        """Index of each class's first support vector."""
        starts = [0]
        for count in self.class_counts[:-1]:
            starts.append(starts[-1] + count)
        return tuple(starts)

    def class_pairs(self) -> list[tuple[int, int]]:
        """Class index pairs in decision-function order."""
        k = self.n_classes
        return [(i, j) for i in range(k) for j in range(i + 1, k)]


@dataclass(frozen=True)
class ClassifierResult:
    """A confident call from one scheme.

    Attributes:
        scheme: Scheme identifier
        labels: Winning class, or several classes for an unresolved vote tie
        confidence: Coupled probability, or vote fraction without calibration
        votes: Pairwise votes per class, in model class order
        probabilities: Coupled probabilities per class, None without calibration
        ranking: (class, score) for all classes, best first
    """

    scheme: str
    labels: tuple[str, ...]
    confidence: float
    votes: tuple[int, ...] = ()
    probabilities: tuple[float, ...] | None = None
    ranking: tuple[tuple[str, float], ...] = field(default_factory=tuple)

    @property
    def label(self) -> str:
        return "|".join(self.labels)

    @property
    def is_joint(self) -> bool:
        return len(self.labels) > 1


@dataclass(frozen=True)
class NoConfidentCall:
    """The best class fell below the scheme's minimum confidence.

    `best_guess` keeps the rejected call for diagnostics; it is never rendered
    as a prediction.
    """

    scheme: str
    min_confidence: float
    best_guess: ClassifierResult | None = None

    @property
    def confidence(self) -> float:
        return self.best_guess.confidence if self.best_guess else 0.0
