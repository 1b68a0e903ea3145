"""Multi-class SVM classifiers.

Each scheme (classification granularity) is one trained one-vs-one SVM:
- load: parse and validate scheme.yaml plus a LIBSVM model into a ModelArtifact
- store: load all schemes of a model directory, isolating failures
- classify: pairwise votes with Platt-coupled probabilities
"""

from nrps_predictor.svm.kernels import KERNEL_TYPES, Kernel
from nrps_predictor.svm.models import (
    KNOWN_SCHEMES,
    SCHEME_METADATA_FILE,
    SUPPORTED_SCHEMA_VERSIONS,
    ClassifierResult,
    ModelArtifact,
    NoConfidentCall,
    SchemeMetadata,
    scheme_sort_key,
)
from nrps_predictor.svm.load import load_artifact, load_metadata, parse_model
from nrps_predictor.svm.classify import (
    classify,
    couple_probabilities,
    decision_values,
    sigmoid_predict,
)
from nrps_predictor.svm.store import ModelStore

__all__ = [
    "KERNEL_TYPES",
    "Kernel",
    "KNOWN_SCHEMES",
    "SCHEME_METADATA_FILE",
    "SUPPORTED_SCHEMA_VERSIONS",
    "ClassifierResult",
    "ModelArtifact",
    "NoConfidentCall",
    "SchemeMetadata",
    "scheme_sort_key",
    "load_artifact",
    "load_metadata",
    "parse_model",
    "classify",
    "couple_probabilities",
    "decision_values",
    "sigmoid_predict",
    "ModelStore",
]
