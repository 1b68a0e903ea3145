"""Data models for prediction inputs and per-domain results."""

from dataclasses import dataclass, field

from nrps_predictor.errors import InputValidationError
from nrps_predictor.stachelhaus.models import NO_CALL, StachelhausResult
from nrps_predictor.svm.models import ClassifierResult, NoConfidentCall

# SchemeResult.status values
STATUS_CALLED = "called"
STATUS_NO_CONFIDENT_CALL = "no_confident_call"
STATUS_UNAVAILABLE = "unavailable"
STATUS_ENCODING_ERROR = "encoding_error"


@dataclass(frozen=True)
class ADomain:
    """One validated adenylation domain to predict.

    Attributes:
        name: Identifier as given in the signature file
        signature: Upper-case 34-residue active-site signature
    """

    name: str
    signature: str


@dataclass(frozen=True)
class SchemeResult:
    """Outcome of one classification scheme for one domain.

    Attributes:
        scheme: Scheme identifier
        status: called, no_confident_call, unavailable or encoding_error
        result: ClassifierResult for confident calls, NoConfidentCall when
            below threshold, None otherwise
        reason: Why no call was made (load failure, encoding error)
    """

    scheme: str
    status: str
    result: ClassifierResult | NoConfidentCall | None = None
    reason: str = ""

    @property
    def called(self) -> bool:
        return self.status == STATUS_CALLED

    @property
    def label(self) -> str:
        if self.called:
            return self.result.label
        return NO_CALL

    @property
    def confidence(self) -> float | None:
        if self.called:
            return self.result.confidence
        return None

    def best_n(self, count: int) -> list[tuple[str, float]]:
        """Up to count ranked (class, score) pairs, keeping ties with the last one.

        Only confident calls have a ranking; other statuses return [].
        """
        if not self.called:
            return []
        if count < 1:
            raise ValueError(f"count must be >= 1, got {count}")
        ranking = list(self.result.ranking)
        if self.result.is_joint:
            # A joint call is reported as a whole
            count = max(count, len(self.result.labels))
        best = ranking[:count]
        for name, score in ranking[count:]:
            if score != best[-1][1]:
                break
            best.append((name, score))
        return best


@dataclass(frozen=True)
class PredictionRecord:
    """Combined result of all prediction strategies for one domain."""

    identifier: str
    signature: str
    stachelhaus: StachelhausResult
    scheme_results: tuple[SchemeResult, ...] = field(default_factory=tuple)

    def get(self, scheme: str) -> SchemeResult | None:
        for result in self.scheme_results:
            if result.scheme == scheme:
                return result
        return None

    @property
    def schemes(self) -> tuple[str, ...]:
        return tuple(r.scheme for r in self.scheme_results)


@dataclass
class InputReport:
    """Accepted domains and rejected lines from a signature file."""

    domains: list[ADomain] = field(default_factory=list)
    rejected: list[InputValidationError] = field(default_factory=list)

    @property
    def total_lines(self) -> int:
        return len(self.domains) + len(self.rejected)
