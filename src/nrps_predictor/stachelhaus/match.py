"""Stachelhaus code matching with long-signature refinement."""

from collections import defaultdict

import structlog

from nrps_predictor.signatures import (
    LONG_SIGNATURE_LENGTH,
    SHORT_SIGNATURE_LENGTH,
    extract_short_signature,
    hamming_distance,
)
from nrps_predictor.stachelhaus.models import (
    DEFAULT_REFINEMENT_HITS,
    RefinementHit,
    SignatureEntry,
    StachelhausResult,
)
from nrps_predictor.stachelhaus.table import SignatureTable

logger = structlog.get_logger()


def _call_weights(entries: tuple[SignatureEntry, ...] | list[SignatureEntry]) -> dict[str, int]:
    """Sum reference counts per substrate call."""
    weights: dict[str, int] = defaultdict(int)
    for entry in entries:
        weights[entry.call] += entry.reference_count
    return dict(weights)


def _majority_calls(weights: dict[str, int]) -> tuple[str, ...]:
    """Calls carrying the maximum weight, sorted by name."""
    top = max(weights.values())
    return tuple(sorted(call for call, weight in weights.items() if weight == top))


def _ranked_calls(weights: dict[str, int]) -> tuple[str, ...]:
    """All calls, heaviest first, ties by name."""
    return tuple(call for call, _ in sorted(weights.items(), key=lambda kv: (-kv[1], kv[0])))


class StachelhausMatcher:
    """Exact and nearest-neighbour lookup of Stachelhaus codes.

    The matcher never mutates the table and keeps no state between queries,
    so one instance can be shared between threads.
    """

    def __init__(
        self,
        table: SignatureTable,
        refinement_hits: int = DEFAULT_REFINEMENT_HITS,
        min_short_matches: int = 0,
    ):
        """
        Args:
            table: Reference signature table
            refinement_hits: Number of distinct long-signature calls to report
            min_short_matches: Nearest-neighbour hits with fewer identical
                short-signature positions are not reported (0 disables)
        """
        if refinement_hits < 1:
            raise ValueError(f"refinement_hits must be >= 1, got {refinement_hits}")
        if not 0 <= min_short_matches <= SHORT_SIGNATURE_LENGTH:
            raise ValueError(
                f"min_short_matches must be within 0-{SHORT_SIGNATURE_LENGTH}, "
                f"got {min_short_matches}"
            )
        self.table = table
        self.refinement_hits = refinement_hits
        self.min_short_matches = min_short_matches

    def match(self, long_signature: str) -> StachelhausResult:
        """Look up one validated 34-residue signature.

        Raises:
            InputValidationError: If the signature is not 34 residues long
        """
        query_short = extract_short_signature(long_signature)

        if self.table.is_empty():
            return StachelhausResult.no_call(query_short)

        refinement = self.refine(long_signature)

        exact = self.table.exact(query_short)
        if exact:
            return StachelhausResult(
                query_short=query_short,
                calls=_majority_calls(_call_weights(exact)),
                confidence=1.0,
                short_signature=query_short,
                distance=0,
                long_similarity=self._best_long_similarity(long_signature, exact),
                refinement=refinement,
            )

        return self._nearest(query_short, long_signature, refinement)

    def _nearest(
        self,
        query_short: str,
        long_signature: str,
        refinement: tuple[RefinementHit, ...],
    ) -> StachelhausResult:
        """Minimum Hamming distance scan over the distinct short signatures."""
        best_distance = SHORT_SIGNATURE_LENGTH + 1
        nearest: list[str] = []
        for short in self.table.short_signatures:
            distance = hamming_distance(query_short, short)
            if distance < best_distance:
                best_distance = distance
                nearest = [short]
            elif distance == best_distance:
                nearest.append(short)

        if SHORT_SIGNATURE_LENGTH - best_distance < self.min_short_matches:
            logger.debug(
                "stachelhaus_below_min_matches",
                query=query_short,
                matches=SHORT_SIGNATURE_LENGTH - best_distance,
            )
            return StachelhausResult.no_call(query_short, refinement)

        entries = [entry for short in nearest for entry in self.table.exact(short)]
        calls = _ranked_calls(_call_weights(entries))
        lead = [entry for entry in entries if entry.call == calls[0]]

        return StachelhausResult(
            query_short=query_short,
            calls=calls,
            confidence=(SHORT_SIGNATURE_LENGTH - best_distance) / SHORT_SIGNATURE_LENGTH,
            short_signature=min(entry.short for entry in lead),
            distance=best_distance,
            long_similarity=self._best_long_similarity(long_signature, entries),
            refinement=refinement,
        )

    @staticmethod
    def _best_long_similarity(long_signature: str, entries) -> float:
        distance = min(hamming_distance(long_signature, entry.long) for entry in entries)
        return (LONG_SIGNATURE_LENGTH - distance) / LONG_SIGNATURE_LENGTH

    def refine(self, long_signature: str) -> tuple[RefinementHit, ...]:
        """Top distinct calls by long-signature similarity.

        Each call is represented by its closest entry. Ordering is similarity
        descending, then call name, then long signature, so equal scores always
        come out in the same order.
        """
        best: dict[str, tuple[int, str]] = {}
        for entry in self.table:
            distance = hamming_distance(long_signature, entry.long)
            current = best.get(entry.call)
            if current is None or (distance, entry.long) < current:
                best[entry.call] = (distance, entry.long)

        ranked = sorted(best.items(), key=lambda kv: (kv[1][0], kv[0], kv[1][1]))
        return tuple(
            RefinementHit(
                call=call,
                similarity=(LONG_SIGNATURE_LENGTH - distance) / LONG_SIGNATURE_LENGTH,
                long_signature=long,
            )
            for call, (distance, long) in ranked[: self.refinement_hits]
        )
