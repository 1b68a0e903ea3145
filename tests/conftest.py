"""Shared fixtures: small hand-checkable reference tables and classifier artifacts."""

from pathlib import Path

import pytest
import yaml

from nrps_predictor.signatures import SHORT_SIGNATURE_POSITIONS

# bpsA (indigoidine synthetase) A domain, Stachelhaus code DAFYLGMMCK
BPSA_SIGNATURE = "LDASFDASLFEMYLLTGGDRNMYGPTEATMCATW"

# Identity encoding of position 0 only: 20 features, L is feature 10, F feature 5
FIRST_RESIDUE_ENCODING = {"scheme": "identity", "positions": [0]}

# Linear two-class model: +1 for L at position 0, -1 for F
BINARY_MODEL = """\
svm_type c_svc
kernel_type linear
nr_class 2
total_sv 2
rho 0
label 0 1
nr_sv 1 1
SV
1 10:1
-1 5:1
"""

# Same model with Platt calibration: P(Leu | d=1) = 1 / (1 + exp(-2))
CALIBRATED_BINARY_MODEL = BINARY_MODEL.replace("nr_sv 1 1\n", "probA -2\nprobB 0\nnr_sv 1 1\n")


def three_class_model(rho: tuple[float, float, float], calibrated: bool = False) -> str:
    """Three-class model without support vectors: each decision value is -rho."""
    lines = [
        "svm_type c_svc",
        "kernel_type linear",
        "nr_class 3",
        "total_sv 0",
        "rho " + " ".join(str(r) for r in rho),
        "label 0 1 2",
    ]
    if calibrated:
        lines += ["probA -2 -2 -2", "probB 0 0 0"]
    lines += ["nr_sv 0 0 0", "SV", ""]
    return "\n".join(lines)


def make_long_signature(code: str, filler: str = "A") -> str:
    """34-residue signature whose Stachelhaus projection is code + K."""
    residues = [filler] * 34
    for position, residue in zip(SHORT_SIGNATURE_POSITIONS, code):
        residues[position] = residue
    return "".join(residues)


def table_row(code: str, call: str, references: str = "ref1", filler: str = "A",
              all_calls: str | None = None) -> str:
    """One reference table line for a 9-residue code."""
    long = make_long_signature(code, filler)
    return "\t".join([code + "K", long, all_calls or call, call, references])


def write_table(path: Path, rows: list[str]) -> Path:
    path.write_text("\n".join(rows) + "\n")
    return path


def write_scheme(
    model_dir: Path,
    scheme: str,
    classes: list[str],
    model_text: str,
    encoding: dict | None = None,
    feature_dimension: int = 20,
    min_confidence: float = 0.0,
    schema_version: int = 1,
    **extra,
) -> Path:
    """Write scheme.yaml plus model.svm into model_dir/scheme."""
    scheme_dir = model_dir / scheme
    scheme_dir.mkdir(parents=True, exist_ok=True)
    metadata = {
        "schema_version": schema_version,
        "scheme": scheme,
        "encoding": encoding if encoding is not None else FIRST_RESIDUE_ENCODING,
        "feature_dimension": feature_dimension,
        "classes": classes,
        "min_confidence": min_confidence,
        **extra,
    }
    (scheme_dir / "scheme.yaml").write_text(yaml.safe_dump(metadata, sort_keys=False))
    (scheme_dir / "model.svm").write_text(model_text)
    return scheme_dir


@pytest.fixture
def model_dir(tmp_path) -> Path:
    """Model directory with two working schemes."""
    root = tmp_path / "models"
    write_scheme(root, "NRPS2_SINGLE_CLUSTER", ["Leu", "Phe"], BINARY_MODEL)
    write_scheme(root, "NRPS3_SINGLE_CLUSTER", ["Leu", "Phe"], CALIBRATED_BINARY_MODEL)
    return root
