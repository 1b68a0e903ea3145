"""Tests for kernels, pairwise decisions, probability coupling and classification."""

import math

import numpy as np
import pytest

from nrps_predictor.encodings import EncodingDescriptor, encode
from nrps_predictor.errors import EncodingError
from nrps_predictor.svm import (
    ClassifierResult,
    Kernel,
    NoConfidentCall,
    classify,
    couple_probabilities,
    decision_values,
    load_artifact,
    sigmoid_predict,
)

from conftest import (
    BINARY_MODEL,
    BPSA_SIGNATURE,
    CALIBRATED_BINARY_MODEL,
    three_class_model,
    write_scheme,
)

FIRST_RESIDUE = EncodingDescriptor(scheme="identity", positions=(0,))


def first_residue_vector(residue: str) -> np.ndarray:
    return encode(residue + BPSA_SIGNATURE[1:], FIRST_RESIDUE)


@pytest.fixture
def binary_artifact(tmp_path):
    return load_artifact(write_scheme(tmp_path, "S", ["Leu", "Phe"], BINARY_MODEL))


@pytest.fixture
def calibrated_artifact(tmp_path):
    return load_artifact(write_scheme(tmp_path, "S", ["Leu", "Phe"], CALIBRATED_BINARY_MODEL))


def test_kernels():
    svs = np.array([[1.0, 0.0], [1.0, 2.0]])
    x = np.array([1.0, 1.0])

    assert Kernel("linear").compute(svs, x).tolist() == [1.0, 3.0]
    assert Kernel("rbf", gamma=0.5).compute(svs, x).tolist() == pytest.approx(
        [math.exp(-0.5), math.exp(-0.5)]
    )
    assert Kernel("polynomial", gamma=1.0, degree=2, coef0=1.0).compute(svs, x).tolist() == [4.0, 16.0]
    assert Kernel("sigmoid", gamma=1.0, coef0=0.0).compute(svs, x).tolist() == pytest.approx(
        [math.tanh(1.0), math.tanh(3.0)]
    )


def test_kernel_requires_parameters():
    with pytest.raises(ValueError):
        Kernel("rbf")
    with pytest.raises(ValueError):
        Kernel("precomputed")


def test_decision_values(binary_artifact):
    assert decision_values(binary_artifact, first_residue_vector("L")) == [1.0]
    assert decision_values(binary_artifact, first_residue_vector("F")) == [-1.0]
    assert decision_values(binary_artifact, first_residue_vector("A")) == [0.0]


def test_decision_values_dimension_mismatch(binary_artifact):
    with pytest.raises(EncodingError):
        decision_values(binary_artifact, np.zeros(3))


def test_classify_binary_uncalibrated(binary_artifact):
    """Without calibration confidence is the vote fraction."""
    result = classify(binary_artifact, first_residue_vector("L"))

    assert isinstance(result, ClassifierResult)
    assert result.label == "Leu"
    assert result.confidence == 1.0
    assert result.votes == (1, 0)
    assert result.probabilities is None
    assert result.ranking == (("Leu", 1.0), ("Phe", 0.0))


def test_zero_decision_votes_for_second_class(binary_artifact):
    result = classify(binary_artifact, first_residue_vector("A"))
    assert result.label == "Phe"


def test_classify_binary_calibrated(calibrated_artifact):
    """Two classes: the coupled probability equals the Platt estimate."""
    result = classify(calibrated_artifact, first_residue_vector("L"))

    expected = 1.0 / (1.0 + math.exp(-2.0))
    assert result.label == "Leu"
    assert result.confidence == pytest.approx(expected, abs=0.01)
    assert sum(result.probabilities) == pytest.approx(1.0)
    assert result.ranking[0][0] == "Leu"


def test_classification_is_deterministic(calibrated_artifact):
    vector = first_residue_vector("F")
    assert classify(calibrated_artifact, vector) == classify(calibrated_artifact, vector)


def test_sigmoid_predict_stable_for_extremes():
    assert sigmoid_predict(1000.0, -1.0, 0.0) == pytest.approx(1.0)
    assert sigmoid_predict(-1000.0, -1.0, 0.0) == pytest.approx(0.0)
    assert sigmoid_predict(0.0, -1.0, 0.0) == 0.5


def test_couple_probabilities_sums_to_one():
    r = [
        [0.0, 0.9, 0.8],
        [0.1, 0.0, 0.6],
        [0.2, 0.4, 0.0],
    ]
    p = couple_probabilities(r)

    assert sum(p) == pytest.approx(1.0, abs=1e-6)
    assert p[0] > p[1] > p[2]


def test_vote_tie_reported_jointly(tmp_path):
    """A 3-way cycle (A beats B, C beats A, B beats C) gives one vote each."""
    artifact = load_artifact(write_scheme(tmp_path, "S", ["A", "B", "C"], three_class_model((-1, 1, -1))))
    result = classify(artifact, first_residue_vector("L"))

    assert result.votes == (1, 1, 1)
    assert result.labels == ("A", "B", "C")
    assert result.is_joint
    assert result.label == "A|B|C"
    assert result.confidence == 0.5


def test_vote_tie_broken_by_probability(tmp_path):
    artifact = load_artifact(write_scheme(
        tmp_path, "S", ["A", "B", "C"], three_class_model((-2, 1, -1), calibrated=True)
    ))
    result = classify(artifact, first_residue_vector("L"))

    assert result.votes == (1, 1, 1)
    assert not result.is_joint
    best = max(range(3), key=lambda c: result.probabilities[c])
    assert result.labels == (artifact.classes[best],)
    assert result.confidence == result.probabilities[best]


def test_clear_winner_three_classes(tmp_path):
    artifact = load_artifact(write_scheme(tmp_path, "S", ["A", "B", "C"], three_class_model((1, 1, -1))))
    result = classify(artifact, first_residue_vector("L"))

    # (A,B) and (A,C) go to the second class, (B,C) to B
    assert result.votes == (0, 2, 1)
    assert result.label == "B"
    assert result.confidence == 1.0
    assert [name for name, _ in result.ranking] == ["B", "C", "A"]


def test_below_min_confidence(tmp_path):
    artifact = load_artifact(write_scheme(
        tmp_path, "S", ["A", "B", "C"], three_class_model((-1, 1, -1)), min_confidence=0.6
    ))
    outcome = classify(artifact, first_residue_vector("L"))

    assert isinstance(outcome, NoConfidentCall)
    assert outcome.min_confidence == 0.6
    assert outcome.confidence == 0.5
    assert outcome.best_guess.label == "A|B|C"


# Three classes with support vectors in every class and two in the first, so
# each pair reads its coefficients from a different row and column block.
# For first residue A the kernel values are (2, -1, 1, 0.5).
THREE_CLASS_SV_MODEL = """\
svm_type c_svc
kernel_type linear
nr_class 3
total_sv 4
rho -0.25 0.25 -0.75
label 0 1 2
nr_sv 2 1 1
SV
1 0.25 1:2
0.75 -0.5 1:-1 2:1
-0.5 2 1:1 3:1
-1 -3 1:0.5 4:1
"""


@pytest.fixture
def three_class_sv_artifact(tmp_path):
    return load_artifact(write_scheme(tmp_path, "S", ["A", "B", "C"], THREE_CLASS_SV_MODEL))


@pytest.mark.parametrize("residue, expected_decisions, expected_votes", [
    ("A", [1.0, 0.25, 1.25], (2, 1, 0)),
    ("C", [1.0, -0.75, 0.75], (1, 1, 1)),
    ("D", [-0.25, -0.25, 2.75], (0, 2, 1)),
])
def test_decision_values_three_classes_with_support_vectors(
    three_class_sv_artifact, residue, expected_decisions, expected_votes
):
    vector = first_residue_vector(residue)

    assert decision_values(three_class_sv_artifact, vector) == expected_decisions
    assert classify(three_class_sv_artifact, vector).votes == expected_votes


def test_three_class_support_vectors_uncalibrated(three_class_sv_artifact):
    result = classify(three_class_sv_artifact, first_residue_vector("A"))

    assert result.label == "A"
    assert result.confidence == 1.0
    assert result.ranking == (("A", 1.0), ("B", 0.5), ("C", 0.0))


def test_three_class_support_vectors_coupled(tmp_path):
    """Pairwise probabilities are logistic(d); coupling optimum is (0.5060, 0.2784, 0.2157)."""
    model = THREE_CLASS_SV_MODEL.replace("nr_sv", "probA -1 -1 -1\nprobB 0 0 0\nnr_sv")
    artifact = load_artifact(write_scheme(tmp_path, "S", ["A", "B", "C"], model))
    result = classify(artifact, first_residue_vector("A"))

    assert result.votes == (2, 1, 0)
    assert result.label == "A"
    assert result.probabilities == pytest.approx((0.5060, 0.2784, 0.2157), abs=0.01)
    assert sum(result.probabilities) == pytest.approx(1.0, abs=1e-6)
    assert result.confidence == result.probabilities[0]
    assert [name for name, _ in result.ranking] == ["A", "B", "C"]
