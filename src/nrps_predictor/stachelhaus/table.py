"""Immutable Stachelhaus signature table built from reference data."""

from collections.abc import Iterable, Iterator
from importlib import resources
from pathlib import Path
from types import MappingProxyType

import polars as pl
import structlog

from nrps_predictor.errors import InputValidationError, TableBuildError
from nrps_predictor.signatures import (
    LONG_SIGNATURE_LENGTH,
    SHORT_SIGNATURE_LENGTH,
    extract_short_signature,
    validate_signature,
)
from nrps_predictor.stachelhaus.models import SignatureEntry

logger = structlog.get_logger()

# Column layout of the reference TSV (no header)
REFERENCE_COLUMNS = ["short", "long", "all_calls", "call", "references"]

BUNDLED_TABLE_NAME = "signatures.tsv"


class SignatureTable:
    """Read-only index of known signature to substrate associations.

    Entries keep their file order. Lookups by exact short signature go through
    a prebuilt index; nearest-neighbour scans iterate the distinct short keys.
    """

    def __init__(self, entries: Iterable[SignatureEntry]):
        self._entries: tuple[SignatureEntry, ...] = tuple(entries)

        index: dict[str, list[SignatureEntry]] = {}
        for entry in self._entries:
            index.setdefault(entry.short, []).append(entry)
        self._index = MappingProxyType(
            {short: tuple(group) for short, group in index.items()}
        )

    @classmethod
    def from_entries(cls, entries: Iterable[SignatureEntry]) -> "SignatureTable":
        return cls(entries)

    @property
    def entries(self) -> tuple[SignatureEntry, ...]:
        return self._entries

    @property
    def short_signatures(self) -> tuple[str, ...]:
        """Distinct short signatures in first-seen order."""
        return tuple(self._index.keys())

    def exact(self, short: str) -> tuple[SignatureEntry, ...]:
        """All entries with exactly this short signature."""
        return self._index.get(short, ())

    def is_empty(self) -> bool:
        return not self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[SignatureEntry]:
        return iter(self._entries)


def _parse_entry(row: dict, line_number: int) -> SignatureEntry:
    """Validate one reference row and build its entry."""
    missing = [col for col in ("short", "long", "call") if not row.get(col)]
    if missing:
        raise TableBuildError(
            f"Line {line_number}: empty or missing column(s) "
            f"{', '.join(missing)}"
        )

    short = row["short"].upper()
    long = row["long"].upper()
    try:
        validate_signature(short, SHORT_SIGNATURE_LENGTH)
        validate_signature(long, LONG_SIGNATURE_LENGTH)
    except InputValidationError as e:
        raise TableBuildError(f"Line {line_number}: {e}") from e

    derived = extract_short_signature(long)
    if derived != short:
        raise TableBuildError(
            f"Line {line_number}: short signature {short} does not match "
            f"the projection {derived} of {long}"
        )

    references = tuple(
        ref.strip() for ref in (row["references"] or "").split(",") if ref.strip()
    )

    return SignatureEntry(
        short=short,
        long=long,
        call=row["call"],
        reference_count=max(len(references), 1),
        references=references,
        all_calls=row["all_calls"] or "",
    )


def _data_line_numbers(path: Path) -> list[int]:
    """1-based file line numbers of the rows polars reads (no comments, no blank lines)."""
    with open(path, "r", encoding="utf-8", errors="replace") as handle:
        return [
            line_number
            for line_number, line in enumerate(handle, start=1)
            if line.rstrip("\r\n") and not line.startswith("#")
        ]


def load_signature_table(path: Path | str) -> SignatureTable:
    """Load the Stachelhaus reference table from a 5-column TSV.

    Columns: short signature, long signature, all calls, winning call,
    comma-separated reference IDs. Lines starting with '#' are ignored.

    Args:
        path: Path to the reference TSV

    Returns:
        Immutable SignatureTable (possibly empty)

    Raises:
        TableBuildError: If the file is missing or any row is malformed
    """
    path = Path(path)
    logger.info("signature_table_load_start", path=str(path))

    if not path.exists():
        raise TableBuildError(f"Stachelhaus signature file not found: {path}")

    try:
        df = pl.read_csv(
            path,
            separator="\t",
            has_header=False,
            infer_schema_length=0,
            quote_char=None,
            comment_prefix="#",
        )
    except pl.exceptions.NoDataError:
        logger.warning("signature_table_empty", path=str(path))
        return SignatureTable(())
    except pl.exceptions.PolarsError as e:
        raise TableBuildError(f"Failed to parse {path}: {e}") from e

    if df.width != len(REFERENCE_COLUMNS):
        raise TableBuildError(
            f"{path}: expected {len(REFERENCE_COLUMNS)} tab-separated columns, found {df.width}"
        )

    df = df.rename(dict(zip(df.columns, REFERENCE_COLUMNS))).with_columns(
        [pl.col(col).str.strip_chars() for col in REFERENCE_COLUMNS]
    )

    line_numbers = _data_line_numbers(path)
    if len(line_numbers) != df.height:
        # Rows no longer line up with physical lines; report row positions
        line_numbers = list(range(1, df.height + 1))

    entries = [
        _parse_entry(row, line_number)
        for line_number, row in zip(line_numbers, df.iter_rows(named=True))
    ]
    table = SignatureTable(entries)

    logger.info(
        "signature_table_load_complete",
        entries=len(table),
        distinct_short=len(table.short_signatures),
    )
    return table


def load_bundled_table() -> SignatureTable:
    """Load the reference table shipped with the package."""
    resource = resources.files("nrps_predictor") / "data" / BUNDLED_TABLE_NAME
    with resources.as_file(resource) as path:
        return load_signature_table(path)
