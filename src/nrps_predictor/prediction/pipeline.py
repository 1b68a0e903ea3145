"""Prediction pipeline: Stachelhaus lookup plus every active SVM scheme per domain."""

from collections.abc import Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field

import structlog

from nrps_predictor.encodings import encode
from nrps_predictor.errors import EncodingError
from nrps_predictor.prediction.models import (
    STATUS_CALLED,
    STATUS_ENCODING_ERROR,
    STATUS_NO_CONFIDENT_CALL,
    STATUS_UNAVAILABLE,
    ADomain,
    InputReport,
    PredictionRecord,
    SchemeResult,
)
from nrps_predictor.signatures import extract_short_signature, normalise_signature, validate_signature
from nrps_predictor.stachelhaus import (
    DEFAULT_REFINEMENT_HITS,
    SignatureTable,
    StachelhausMatcher,
    StachelhausResult,
)
from nrps_predictor.svm import ModelStore, NoConfidentCall, classify, scheme_sort_key

logger = structlog.get_logger()


class Predictor:
    """Runs all prediction strategies for single domains.

    Holds only immutable collaborators (signature table, model store), so
    predict() can be called from several threads at once.
    """

    def __init__(
        self,
        table: SignatureTable,
        store: ModelStore,
        active_schemes: Iterable[str] | None = None,
        refinement_hits: int = DEFAULT_REFINEMENT_HITS,
        min_short_matches: int = 0,
        skip_stachelhaus: bool = False,
    ):
        """
        Args:
            table: Stachelhaus reference table
            store: Loaded classifier artifacts
            active_schemes: Schemes to report; defaults to every scheme the
                store loaded or failed to load
            refinement_hits: Long-signature hits reported per domain
            min_short_matches: Minimum identical Stachelhaus positions for a
                nearest-neighbour call
            skip_stachelhaus: Report no Stachelhaus call at all
        """
        self.matcher = StachelhausMatcher(
            table,
            refinement_hits=refinement_hits,
            min_short_matches=min_short_matches,
        )
        self.store = store
        self.skip_stachelhaus = skip_stachelhaus

        if active_schemes is None:
            active_schemes = list(store.schemes) + list(store.failures)
        self.active_schemes: tuple[str, ...] = tuple(
            sorted(dict.fromkeys(active_schemes), key=scheme_sort_key)
        )

    def predict_scheme(self, scheme: str, signature: str) -> SchemeResult:
        """Encode and classify one signature with one scheme."""
        artifact = self.store.get(scheme)
        if artifact is None:
            failure = self.store.failures.get(scheme)
            reason = failure.reason if failure is not None else "scheme not loaded"
            return SchemeResult(scheme=scheme, status=STATUS_UNAVAILABLE, reason=reason)

        try:
            vector = encode(signature, artifact.encoding)
            outcome = classify(artifact, vector)
        except EncodingError as e:
            logger.warning("scheme_encoding_failed", scheme=scheme, reason=e.msg)
            return SchemeResult(scheme=scheme, status=STATUS_ENCODING_ERROR, reason=e.msg)

        if isinstance(outcome, NoConfidentCall):
            return SchemeResult(
                scheme=scheme,
                status=STATUS_NO_CONFIDENT_CALL,
                result=outcome,
                reason=f"confidence below {outcome.min_confidence:.2f}",
            )
        return SchemeResult(scheme=scheme, status=STATUS_CALLED, result=outcome)

    def predict(self, identifier: str, signature: str) -> PredictionRecord:
        """Predict one domain.

        Raises:
            InputValidationError: If the signature is not a valid 34-residue signature
        """
        signature = validate_signature(normalise_signature(signature))

        if self.skip_stachelhaus:
            stachelhaus = StachelhausResult.no_call(extract_short_signature(signature))
        else:
            stachelhaus = self.matcher.match(signature)

        scheme_results = tuple(
            self.predict_scheme(scheme, signature) for scheme in self.active_schemes
        )
        return PredictionRecord(
            identifier=identifier,
            signature=signature,
            stachelhaus=stachelhaus,
            scheme_results=scheme_results,
        )

    def predict_all(self, domains: Sequence[ADomain], workers: int = 1) -> list[PredictionRecord]:
        """Predict many domains, optionally in parallel.

        Results are always returned in input order, identical to a
        sequential run.
        """
        if workers < 1:
            raise ValueError(f"workers must be >= 1, got {workers}")

        logger.info("prediction_start", domains=len(domains), workers=workers,
                    schemes=list(self.active_schemes))

        if workers == 1 or len(domains) < 2:
            records = [self.predict(d.name, d.signature) for d in domains]
        else:
            records: list[PredictionRecord | None] = [None] * len(domains)
            with ThreadPoolExecutor(max_workers=min(workers, len(domains))) as executor:
                future_to_index = {
                    executor.submit(self.predict, d.name, d.signature): index
                    for index, d in enumerate(domains)
                }
                for future in as_completed(future_to_index):
                    records[future_to_index[future]] = future.result()

        logger.info("prediction_complete", domains=len(records))
        return records


@dataclass
class RunSummary:
    """Accounting of everything a run accepted, skipped or failed."""

    domains_predicted: int = 0
    inputs_rejected: list[str] = field(default_factory=list)
    schemes_loaded: list[str] = field(default_factory=list)
    schemes_failed: dict[str, str] = field(default_factory=dict)
    stachelhaus_calls: int = 0
    scheme_calls: dict[str, int] = field(default_factory=dict)
    no_confident_calls: dict[str, int] = field(default_factory=dict)
    encoding_errors: dict[str, int] = field(default_factory=dict)


def summarise_run(
    records: Sequence[PredictionRecord],
    store: ModelStore,
    input_report: InputReport | None = None,
) -> RunSummary:
    """Count calls, rejections and failures of a finished run."""
    summary = RunSummary(
        domains_predicted=len(records),
        schemes_loaded=list(store.schemes),
        schemes_failed={scheme: err.reason for scheme, err in store.failures.items()},
    )
    if input_report is not None:
        summary.inputs_rejected = [
            f"line {e.line_number}: {e.msg}" if e.line_number else e.msg
            for e in input_report.rejected
        ]

    for record in records:
        if record.stachelhaus.has_call:
            summary.stachelhaus_calls += 1
        for result in record.scheme_results:
            if result.status == STATUS_CALLED:
                counter = summary.scheme_calls
            elif result.status == STATUS_NO_CONFIDENT_CALL:
                counter = summary.no_confident_calls
            elif result.status == STATUS_ENCODING_ERROR:
                counter = summary.encoding_errors
            else:
                continue
            counter[result.scheme] = counter.get(result.scheme, 0) + 1
    return summary
