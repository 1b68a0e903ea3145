"""Tests for loading and validating classifier artifacts."""

import pytest

from nrps_predictor.errors import ArtifactLoadError
from nrps_predictor.svm import load_artifact, load_metadata

from conftest import BINARY_MODEL, CALIBRATED_BINARY_MODEL, three_class_model, write_scheme


def test_load_binary_artifact(tmp_path):
    scheme_dir = write_scheme(tmp_path, "NRPS2_SINGLE_CLUSTER", ["Leu", "Phe"], BINARY_MODEL,
                              description="test scheme")
    artifact = load_artifact(scheme_dir)

    assert artifact.scheme == "NRPS2_SINGLE_CLUSTER"
    assert artifact.classes == ("Leu", "Phe")
    assert artifact.kernel.kernel_type == "linear"
    assert artifact.support_vectors.shape == (2, 20)
    assert artifact.coefficients.shape == (1, 2)
    assert artifact.support_vectors[0, 9] == 1.0
    assert artifact.support_vectors[1, 4] == 1.0
    assert artifact.class_counts == (1, 1)
    assert artifact.rho == (0.0,)
    assert not artifact.has_probability
    assert artifact.description == "test scheme"
    assert artifact.source == scheme_dir


def test_artifact_arrays_are_read_only(tmp_path):
    artifact = load_artifact(write_scheme(tmp_path, "S", ["Leu", "Phe"], BINARY_MODEL))
    with pytest.raises(ValueError):
        artifact.support_vectors[0, 0] = 5.0


def test_load_calibrated_artifact(tmp_path):
    artifact = load_artifact(write_scheme(tmp_path, "S", ["Leu", "Phe"], CALIBRATED_BINARY_MODEL))
    assert artifact.has_probability
    assert artifact.prob_a == (-2.0,)
    assert artifact.prob_b == (0.0,)


def test_labels_map_into_classes(tmp_path):
    """Model label order decides class order, not the scheme.yaml list order."""
    model = BINARY_MODEL.replace("label 0 1", "label 1 0")
    artifact = load_artifact(write_scheme(tmp_path, "S", ["Leu", "Phe"], model))
    assert artifact.classes == ("Phe", "Leu")


def test_rbf_kernel_parameters(tmp_path):
    model = BINARY_MODEL.replace("kernel_type linear", "kernel_type rbf\ngamma 0.5")
    artifact = load_artifact(write_scheme(tmp_path, "S", ["Leu", "Phe"], model))
    assert artifact.kernel.kernel_type == "rbf"
    assert artifact.kernel.gamma == 0.5


def test_support_vector_comments_ignored(tmp_path):
    model = BINARY_MODEL.replace("1 10:1\n", "1 10:1 # leucine\n")
    artifact = load_artifact(write_scheme(tmp_path, "S", ["Leu", "Phe"], model))
    assert artifact.support_vectors.shape == (2, 20)


def test_metadata_scheme_must_match_directory(tmp_path):
    scheme_dir = write_scheme(tmp_path, "S", ["Leu", "Phe"], BINARY_MODEL)
    (scheme_dir / "scheme.yaml").write_text(
        (scheme_dir / "scheme.yaml").read_text().replace("scheme: S", "scheme: OTHER")
    )
    with pytest.raises(ArtifactLoadError):
        load_metadata(scheme_dir)


@pytest.mark.parametrize(
    "kwargs, message",
    [
        ({"schema_version": 2}, "schema"),
        ({"feature_dimension": 21}, "dimension"),
        ({"unexpected": True}, "scheme.yaml"),
    ],
)
def test_invalid_metadata(tmp_path, kwargs, message):
    scheme_dir = write_scheme(tmp_path, "S", ["Leu", "Phe"], BINARY_MODEL, **kwargs)
    with pytest.raises(ArtifactLoadError, match=message):
        load_artifact(scheme_dir)


def test_duplicate_classes_rejected(tmp_path):
    scheme_dir = write_scheme(tmp_path, "S", ["Leu", "Leu"], BINARY_MODEL)
    with pytest.raises(ArtifactLoadError, match="duplicate"):
        load_artifact(scheme_dir)


def test_missing_model_file(tmp_path):
    scheme_dir = write_scheme(tmp_path, "S", ["Leu", "Phe"], BINARY_MODEL)
    (scheme_dir / "model.svm").unlink()
    with pytest.raises(ArtifactLoadError, match="model file not found"):
        load_artifact(scheme_dir)


def test_invalid_yaml(tmp_path):
    scheme_dir = write_scheme(tmp_path, "S", ["Leu", "Phe"], BINARY_MODEL)
    (scheme_dir / "scheme.yaml").write_text("classes: [Leu, Phe\n")
    with pytest.raises(ArtifactLoadError, match="YAML"):
        load_artifact(scheme_dir)


@pytest.mark.parametrize(
    "old, new",
    [
        ("svm_type c_svc", "svm_type nu_svc"),
        ("kernel_type linear", "kernel_type precomputed"),
        ("kernel_type linear", "kernel_type rbf"),
        ("nr_class 2", "nr_class 3"),
        ("total_sv 2", "total_sv 3"),
        ("rho 0", "rho 0 1"),
        ("rho 0", "rho nan"),
        ("label 0 1", "label 0 5"),
        ("label 0 1", "label 0 0"),
        ("nr_sv 1 1", "nr_sv 2 1"),
        ("nr_sv 1 1", "nr_sv 1"),
        ("nr_sv 1 1", "nr_sv 1 1\nprobA -2"),
        ("1 10:1\n", "1 21:1\n"),
        ("1 10:1\n", "1 10:1 10:2\n"),
        ("1 10:1\n", "1 10=1\n"),
        ("1 10:1\n", "x 10:1\n"),
        ("SV\n", ""),
        ("nr_class 2\n", "nr_class 2\nweird 1\n"),
    ],
)
def test_corrupt_model_rejected(tmp_path, old, new):
    model = BINARY_MODEL.replace(old, new)
    assert model != BINARY_MODEL
    scheme_dir = write_scheme(tmp_path, "S", ["Leu", "Phe"], model)
    with pytest.raises(ArtifactLoadError) as exc_info:
        load_artifact(scheme_dir)
    assert exc_info.value.scheme == "S"


def test_three_class_model_without_support_vectors(tmp_path):
    model = three_class_model((-1, 1, -1))
    artifact = load_artifact(write_scheme(tmp_path, "S", ["A", "B", "C"], model))
    assert artifact.n_classes == 3
    assert artifact.support_vectors.shape == (0, 20)
    assert artifact.class_pairs() == [(0, 1), (0, 2), (1, 2)]
