"""Data models for Stachelhaus signature matching."""

from dataclasses import dataclass, field

# Placeholder rendered whenever a strategy has no call to report
NO_CALL = "N/A"

# Number of long-signature refinement hits reported per input
DEFAULT_REFINEMENT_HITS = 3


@dataclass(frozen=True)
class SignatureEntry:
    """One row of the Stachelhaus reference table.

    Attributes:
        short: 10-residue Stachelhaus code
        long: 34-residue active-site signature
        call: Substrate call for this signature (e.g. "Leu")
        reference_count: Number of reference domains supporting the call
        references: Reference domain identifiers
        all_calls: Raw substrate column as it appears in the reference data
    """

    short: str
    long: str
    call: str
    reference_count: int = 1
    references: tuple[str, ...] = ()
    all_calls: str = ""


@dataclass(frozen=True)
class RefinementHit:
    """Best long-signature match for one distinct substrate call."""

    call: str
    similarity: float
    long_signature: str


@dataclass(frozen=True)
class StachelhausResult:
    """Outcome of one Stachelhaus lookup.

    Attributes:
        query_short: Short signature derived from the query
        calls: Reported substrate calls; several entries mean the matches disagree
            or are tied. Empty when there is no call.
        confidence: 1.0 for an exact match, (10 - d) / 10 for nearest neighbours,
            0.0 for no call
        short_signature: Reference short signature that produced the call
        distance: Hamming distance of the short match (None without a call)
        long_similarity: Long-signature similarity of the best entry behind the call
        refinement: Top long-signature hits, best first
    """

    query_short: str
    calls: tuple[str, ...] = ()
    confidence: float = 0.0
    short_signature: str | None = None
    distance: int | None = None
    long_similarity: float = 0.0
    refinement: tuple[RefinementHit, ...] = field(default_factory=tuple)

    @property
    def has_call(self) -> bool:
        return bool(self.calls)

    @property
    def exact(self) -> bool:
        return self.distance == 0

    @property
    def call_label(self) -> str:
        """Calls joined with '|', or N/A."""
        if not self.calls:
            return NO_CALL
        return "|".join(self.calls)

    @classmethod
    def no_call(
        cls,
        query_short: str = "",
        refinement: tuple[RefinementHit, ...] = (),
    ) -> "StachelhausResult":
        """Sentinel result used for empty tables and skipped lookups."""
        return cls(query_short=query_short, refinement=refinement)
