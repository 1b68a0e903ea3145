"""Load and validate classifier artifacts from scheme directories.

A scheme directory holds a scheme.yaml with metadata and the encoding
descriptor, plus a LIBSVM text model:

    svm_type c_svc
    kernel_type rbf
    gamma 0.0625
    nr_class 3
    total_sv 6
    rho 0.12 -0.4 0.33
    label 0 1 2
    probA -1.9 -2.1 -1.7
    probB 0.01 -0.02 0.1
    nr_sv 2 2 2
    SV
    0.5 -0.25 1:0.13 2:-1.02 ...

Model labels are indices into the `classes` list of scheme.yaml. Loading is
all-or-nothing: any inconsistency raises ArtifactLoadError.
"""

import math
from dataclasses import replace
from pathlib import Path

import numpy as np
import structlog
import yaml
from pydantic import ValidationError

from nrps_predictor.errors import ArtifactLoadError
from nrps_predictor.svm.kernels import KERNEL_TYPES, REQUIRED_PARAMETERS, Kernel
from nrps_predictor.svm.models import (
    SCHEME_METADATA_FILE,
    SUPPORTED_SCHEMA_VERSIONS,
    ModelArtifact,
    SchemeMetadata,
)

logger = structlog.get_logger()

# LIBSVM kernel_type names mapped to ours
LIBSVM_KERNELS = {
    "linear": "linear",
    "polynomial": "polynomial",
    "poly": "polynomial",
    "rbf": "rbf",
    "sigmoid": "sigmoid",
}

HEADER_FIELDS = {
    "svm_type",
    "kernel_type",
    "degree",
    "gamma",
    "coef0",
    "nr_class",
    "total_sv",
    "rho",
    "label",
    "probA",
    "probB",
    "nr_sv",
}


def _parse_number(scheme: str, name: str, raw: str, kind=float):
    try:
        value = kind(raw)
    except ValueError:
        raise ArtifactLoadError(scheme, f"{name}: {raw!r} is not a valid {kind.__name__}") from None
    if kind is float and not math.isfinite(value):
        raise ArtifactLoadError(scheme, f"{name}: {raw!r} is not finite")
    return value


def load_metadata(scheme_dir: Path) -> SchemeMetadata:
    """Parse and validate scheme.yaml of a scheme directory."""
    scheme = scheme_dir.name
    metadata_path = scheme_dir / SCHEME_METADATA_FILE
    if not metadata_path.exists():
        raise ArtifactLoadError(scheme, f"missing {SCHEME_METADATA_FILE}")

    try:
        with open(metadata_path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ArtifactLoadError(scheme, f"invalid YAML in {SCHEME_METADATA_FILE}: {e}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ArtifactLoadError(scheme, f"cannot read {SCHEME_METADATA_FILE}: {e}") from e

    try:
        metadata = SchemeMetadata.model_validate(raw)
    except ValidationError as e:
        # Flatten pydantic's report into a single line per problem
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'metadata'}: {err['msg']}"
            for err in e.errors()
        )
        raise ArtifactLoadError(scheme, f"invalid {SCHEME_METADATA_FILE}: {problems}") from e

    if metadata.scheme != scheme:
        raise ArtifactLoadError(
            scheme, f"scheme.yaml declares scheme {metadata.scheme!r}, directory is {scheme!r}"
        )
    if metadata.schema_version not in SUPPORTED_SCHEMA_VERSIONS:
        raise ArtifactLoadError(
            scheme,
            f"unsupported schema_version {metadata.schema_version} "
            f"(supported: {', '.join(str(v) for v in SUPPORTED_SCHEMA_VERSIONS)})",
        )
    if metadata.feature_dimension != metadata.encoding.output_length:
        raise ArtifactLoadError(
            scheme,
            f"feature_dimension {metadata.feature_dimension} does not match "
            f"encoding output length {metadata.encoding.output_length}",
        )
    if len(set(metadata.classes)) != len(metadata.classes):
        raise ArtifactLoadError(scheme, "duplicate class names in classes")

    return metadata


def parse_header(scheme: str, lines) -> dict[str, list[str]]:
    """Read header fields up to the SV marker.

    Args:
        scheme: Scheme identifier for error reporting
        lines: Iterator over model file lines; left positioned after 'SV'
    """
    header: dict[str, list[str]] = {}
    for line in lines:
        parts = line.split()
        if not parts:
            continue
        if parts[0] == "SV":
            return header
        key, values = parts[0], parts[1:]
        if key not in HEADER_FIELDS:
            raise ArtifactLoadError(scheme, f"unknown model header field {key!r}")
        if key in header:
            raise ArtifactLoadError(scheme, f"duplicate model header field {key!r}")
        if not values:
            raise ArtifactLoadError(scheme, f"model header field {key!r} has no value")
        header[key] = values
    raise ArtifactLoadError(scheme, "model file has no SV section")


def parse_support_vector(
    scheme: str,
    line: str,
    n_coefficients: int,
    dimension: int,
) -> tuple[list[float], np.ndarray]:
    """Parse one 'coef... idx:value ...' line into coefficients and a dense vector."""
    tokens = line.split("#", 1)[0].split()
    if len(tokens) < n_coefficients:
        raise ArtifactLoadError(
            scheme, f"support vector line has fewer than {n_coefficients} coefficients: {line!r}"
        )
    coefs = [
        _parse_number(scheme, "support vector coefficient", raw)
        for raw in tokens[:n_coefficients]
    ]

    values = np.zeros(dimension, dtype=np.float64)
    seen: set[int] = set()
    for token in tokens[n_coefficients:]:
        idx_raw, sep, value_raw = token.partition(":")
        if not sep:
            raise ArtifactLoadError(scheme, f"malformed feature {token!r} in support vector")
        idx = _parse_number(scheme, "feature index", idx_raw, int)
        if not 1 <= idx <= dimension:
            raise ArtifactLoadError(
                scheme, f"feature index {idx} outside declared dimension {dimension}"
            )
        if idx in seen:
            raise ArtifactLoadError(scheme, f"feature index {idx} repeated in support vector")
        seen.add(idx)
        values[idx - 1] = _parse_number(scheme, "feature value", value_raw)
    return coefs, values


def _build_kernel(scheme: str, header: dict[str, list[str]]) -> Kernel:
    kernel_name = header.get("kernel_type", [""])[0]
    kernel_type = LIBSVM_KERNELS.get(kernel_name)
    if kernel_type is None:
        raise ArtifactLoadError(
            scheme, f"unsupported kernel_type {kernel_name!r} (supported: {', '.join(KERNEL_TYPES)})"
        )

    params = {}
    for name in REQUIRED_PARAMETERS[kernel_type]:
        if name not in header:
            raise ArtifactLoadError(scheme, f"{kernel_type} kernel requires {name}")
        kind = int if name == "degree" else float
        params[name] = _parse_number(scheme, name, header[name][0], kind)
    return Kernel(kernel_type=kernel_type, **params)


def _floats(scheme: str, header: dict[str, list[str]], key: str) -> tuple[float, ...]:
    return tuple(_parse_number(scheme, key, raw) for raw in header[key])


def _ints(scheme: str, header: dict[str, list[str]], key: str) -> tuple[int, ...]:
    return tuple(_parse_number(scheme, key, raw, int) for raw in header[key])


def parse_model(scheme: str, handle, metadata: SchemeMetadata) -> ModelArtifact:
    """Parse a LIBSVM model stream against its validated metadata.

    Raises:
        ArtifactLoadError: On any structural or numeric inconsistency
    """
    lines = iter(handle)
    header = parse_header(scheme, lines)

    for required in ("svm_type", "kernel_type", "nr_class", "total_sv", "rho", "label", "nr_sv"):
        if required not in header:
            raise ArtifactLoadError(scheme, f"model header lacks {required}")
    if header["svm_type"][0] != "c_svc":
        raise ArtifactLoadError(scheme, f"unsupported svm_type {header['svm_type'][0]!r}")

    kernel = _build_kernel(scheme, header)

    n_classes = _parse_number(scheme, "nr_class", header["nr_class"][0], int)
    if n_classes < 2:
        raise ArtifactLoadError(scheme, f"nr_class must be at least 2, got {n_classes}")
    n_pairs = n_classes * (n_classes - 1) // 2

    labels = _ints(scheme, header, "label")
    if len(labels) != n_classes:
        raise ArtifactLoadError(
            scheme, f"label lists {len(labels)} classes but nr_class is {n_classes}"
        )
    if len(set(labels)) != len(labels):
        raise ArtifactLoadError(scheme, "duplicate class labels give duplicate pairwise decision functions")
    unknown = [lab for lab in labels if not 0 <= lab < len(metadata.classes)]
    if unknown:
        raise ArtifactLoadError(
            scheme, f"model labels {unknown} not present in declared classes ({len(metadata.classes)} classes)"
        )

    rho = _floats(scheme, header, "rho")
    if len(rho) != n_pairs:
        raise ArtifactLoadError(
            scheme, f"expected {n_pairs} pairwise decision functions for {n_classes} classes, got {len(rho)}"
        )

    prob_a = prob_b = None
    if ("probA" in header) != ("probB" in header):
        raise ArtifactLoadError(scheme, "probA and probB must be given together")
    if "probA" in header:
        prob_a = _floats(scheme, header, "probA")
        prob_b = _floats(scheme, header, "probB")
        if len(prob_a) != n_pairs or len(prob_b) != n_pairs:
            raise ArtifactLoadError(
                scheme, f"probA/probB need {n_pairs} values, got {len(prob_a)}/{len(prob_b)}"
            )

    class_counts = _ints(scheme, header, "nr_sv")
    if len(class_counts) != n_classes:
        raise ArtifactLoadError(
            scheme, f"nr_sv lists {len(class_counts)} classes but nr_class is {n_classes}"
        )
    if any(count < 0 for count in class_counts):
        raise ArtifactLoadError(scheme, "nr_sv counts must be non-negative")

    total_sv = _parse_number(scheme, "total_sv", header["total_sv"][0], int)
    if total_sv != sum(class_counts):
        raise ArtifactLoadError(
            scheme, f"total_sv {total_sv} does not equal sum of nr_sv {sum(class_counts)}"
        )

    dimension = metadata.feature_dimension
    coefficients: list[list[float]] = []
    vectors: list[np.ndarray] = []
    for line in lines:
        if not line.strip():
            continue
        coefs, values = parse_support_vector(scheme, line, n_classes - 1, dimension)
        coefficients.append(coefs)
        vectors.append(values)

    if len(vectors) != total_sv:
        raise ArtifactLoadError(
            scheme, f"total_sv is {total_sv} but {len(vectors)} support vectors were read"
        )

    support_vectors = np.vstack(vectors) if vectors else np.zeros((0, dimension))
    coef_matrix = (
        np.array(coefficients, dtype=np.float64).T
        if coefficients
        else np.zeros((n_classes - 1, 0))
    )
    support_vectors.setflags(write=False)
    coef_matrix.setflags(write=False)

    return ModelArtifact(
        scheme=scheme,
        encoding=metadata.encoding,
        classes=tuple(metadata.classes[lab] for lab in labels),
        kernel=kernel,
        support_vectors=support_vectors,
        coefficients=coef_matrix,
        class_counts=class_counts,
        rho=rho,
        prob_a=prob_a,
        prob_b=prob_b,
        min_confidence=metadata.min_confidence,
        description=metadata.description,
    )


def load_artifact(scheme_dir: Path | str) -> ModelArtifact:
    """Load one scheme directory into a validated ModelArtifact.

    Args:
        scheme_dir: Directory containing scheme.yaml and the model file

    Returns:
        Immutable ModelArtifact

    Raises:
        ArtifactLoadError: With the scheme identifier and reason on any failure
    """
    scheme_dir = Path(scheme_dir)
    scheme = scheme_dir.name
    logger.debug("artifact_load_start", scheme=scheme, path=str(scheme_dir))

    metadata = load_metadata(scheme_dir)

    model_path = scheme_dir / metadata.model_file
    if not model_path.exists():
        raise ArtifactLoadError(scheme, f"model file not found: {model_path.name}")

    try:
        with open(model_path, "r") as handle:
            artifact = parse_model(scheme, handle, metadata)
    except (OSError, UnicodeDecodeError) as e:
        raise ArtifactLoadError(scheme, f"cannot read {model_path.name}: {e}") from e

    artifact = replace(artifact, source=scheme_dir)

    logger.info(
        "artifact_load_complete",
        scheme=scheme,
        classes=artifact.n_classes,
        support_vectors=artifact.support_vectors.shape[0],
        kernel=artifact.kernel.kernel_type,
        calibrated=artifact.has_probability,
    )
    return artifact
