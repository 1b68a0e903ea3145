"""Error taxonomy for the prediction engine.

Per-input and per-scheme errors are isolated by the pipeline and reported in
the run summary. Only TableBuildError, and an ArtifactLoadError raised when no
scheme at all could be loaded, end a run.
"""


class NrpsError(Exception):
    """Base class for all prediction engine errors."""

    def __init__(self, msg: str):
        self.msg = msg
        super().__init__(msg)

    def __str__(self) -> str:
        return self.msg


class InputValidationError(NrpsError):
    """A single input record (identifier or signature) is malformed.

    Attributes:
        line_number: 1-based line in the signature file, if known
        line: Raw offending text, if known
    """

    def __init__(self, msg: str, line_number: int | None = None, line: str | None = None):
        super().__init__(msg)
        self.line_number = line_number
        self.line = line


class ArtifactLoadError(NrpsError):
    """A classifier artifact is corrupt, incompatible or missing.

    Attributes:
        scheme: Scheme identifier the artifact belongs to
        reason: Human-readable reason for rejection
    """

    def __init__(self, scheme: str, reason: str):
        super().__init__(f"{scheme}: {reason}")
        self.scheme = scheme
        self.reason = reason


class EncodingError(NrpsError):
    """A signature cannot be encoded with a descriptor (length mismatch)."""


class TableBuildError(NrpsError):
    """The Stachelhaus reference dataset is malformed."""
