"""One-vs-one multi-class SVM evaluation with pairwise coupling."""

import math

import numpy as np

from nrps_predictor.errors import EncodingError
from nrps_predictor.svm.models import ClassifierResult, ModelArtifact, NoConfidentCall

# Pairwise probabilities are clamped away from 0 and 1 before coupling
MIN_PAIRWISE_PROBABILITY = 1e-7


def decision_values(artifact: ModelArtifact, vector: np.ndarray) -> list[float]:
    """Evaluate every pairwise decision function.

    Terms are accumulated with math.fsum in ascending support-vector order,
    first over class i's support vectors, then class j's.

    Returns:
        One decision value per class pair, in artifact.class_pairs() order.
        Positive values favour the first class of the pair.

    Raises:
        EncodingError: If the vector does not match the artifact's dimension
    """
    if vector.ndim != 1 or vector.shape[0] != artifact.feature_dimension:
        raise EncodingError(
            f"{artifact.scheme}: feature vector has dimension {vector.shape}, "
            f"model expects {artifact.feature_dimension}"
        )

    kvalues = artifact.kernel.compute(artifact.support_vectors, vector)
    starts = artifact.class_starts
    counts = artifact.class_counts
    coef = artifact.coefficients

    values = []
    for p, (i, j) in enumerate(artifact.class_pairs()):
        terms = [
            coef[j - 1, starts[i] + k] * kvalues[starts[i] + k] for k in range(counts[i])
        ]
        terms.extend(
            coef[i, starts[j] + k] * kvalues[starts[j] + k] for k in range(counts[j])
        )
        values.append(math.fsum(terms) - artifact.rho[p])
    return values


def sigmoid_predict(decision_value: float, a: float, b: float) -> float:
    """Platt sigmoid 1 / (1 + exp(f*A + B)), evaluated without overflow."""
    f_ab = decision_value * a + b
    if f_ab >= 0:
        return math.exp(-f_ab) / (1.0 + math.exp(-f_ab))
    return 1.0 / (1.0 + math.exp(f_ab))


def pairwise_probabilities(artifact: ModelArtifact, decisions: list[float]) -> list[list[float]]:
    """Matrix r where r[i][j] estimates P(class i | class i or j)."""
    k = artifact.n_classes
    r = [[0.0] * k for _ in range(k)]
    for p, (i, j) in enumerate(artifact.class_pairs()):
        prob = sigmoid_predict(decisions[p], artifact.prob_a[p], artifact.prob_b[p])
        prob = min(max(prob, MIN_PAIRWISE_PROBABILITY), 1 - MIN_PAIRWISE_PROBABILITY)
        r[i][j] = prob
        r[j][i] = 1 - prob
    return r


def couple_probabilities(r: list[list[float]]) -> list[float]:
    """Combine pairwise probabilities into class probabilities.

    Wu, Lin and Weng (2004), method 2: fixed-point iteration minimising
    sum_i sum_j (r[j][i] p[i] - r[i][j] p[j])^2 subject to sum(p) = 1.
    """
    k = len(r)
    max_iter = max(100, k)
    eps = 0.005 / k
    p = [1.0 / k] * k
    Q = [[0.0] * k for _ in range(k)]
    Qp = [0.0] * k

    for t in range(k):
        for j in range(t):
            Q[t][t] += r[j][t] * r[j][t]
            Q[t][j] = Q[j][t]
        for j in range(t + 1, k):
            Q[t][t] += r[j][t] * r[j][t]
            Q[t][j] = -r[j][t] * r[t][j]

    for _ in range(max_iter):
        pQp = 0.0
        for t in range(k):
            Qp[t] = math.fsum(Q[t][j] * p[j] for j in range(k))
            pQp += p[t] * Qp[t]
        max_error = max(abs(Qp[t] - pQp) for t in range(k))
        if max_error < eps:
            break
        for t in range(k):
            diff = (-Qp[t] + pQp) / Q[t][t]
            p[t] += diff
            pQp = (pQp + diff * (diff * Q[t][t] + 2 * Qp[t])) / (1 + diff) / (1 + diff)
            for j in range(k):
                Qp[j] = (Qp[j] + diff * Q[t][j]) / (1 + diff)
                p[j] /= 1 + diff

    # Iteration keeps p on the simplex up to rounding; clamp the residue
    return [min(max(value, 0.0), 1.0) for value in p]


def classify(artifact: ModelArtifact, vector: np.ndarray) -> ClassifierResult | NoConfidentCall:
    """Classify an encoded signature with one scheme's artifact.

    Each pairwise decision casts one vote. The class with most votes wins;
    vote ties are settled by coupled probabilities when the artifact is
    calibrated, otherwise all tied classes are reported jointly.

    Confidence is the winner's coupled probability, or its vote fraction
    votes / (k - 1) without calibration. Calls under artifact.min_confidence
    come back as NoConfidentCall.

    Raises:
        EncodingError: If the vector dimension does not match the artifact
    """
    decisions = decision_values(artifact, vector)
    k = artifact.n_classes

    votes = [0] * k
    for p, (i, j) in enumerate(artifact.class_pairs()):
        if decisions[p] > 0:
            votes[i] += 1
        else:
            votes[j] += 1

    probabilities = None
    if artifact.has_probability:
        probabilities = couple_probabilities(pairwise_probabilities(artifact, decisions))

    top_votes = max(votes)
    tied = [c for c in range(k) if votes[c] == top_votes]

    if len(tied) > 1 and probabilities is not None:
        best = max(probabilities[c] for c in tied)
        tied = [c for c in tied if probabilities[c] == best]

    if probabilities is not None:
        scores = probabilities
        confidence = probabilities[tied[0]]
    else:
        scores = [v / (k - 1) for v in votes]
        confidence = top_votes / (k - 1)
    confidence = min(max(confidence, 0.0), 1.0)

    ranking = tuple(
        (artifact.classes[c], scores[c])
        for c in sorted(range(k), key=lambda c: (-votes[c], -scores[c], c))
    )

    result = ClassifierResult(
        scheme=artifact.scheme,
        labels=tuple(artifact.classes[c] for c in tied),
        confidence=confidence,
        votes=tuple(votes),
        probabilities=tuple(probabilities) if probabilities is not None else None,
        ranking=ranking,
    )

    if confidence < artifact.min_confidence:
        return NoConfidentCall(
            scheme=artifact.scheme,
            min_confidence=artifact.min_confidence,
            best_guess=result,
        )
    return result
