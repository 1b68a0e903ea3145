"""Signature file parsing.

Each non-blank line is either

    SIGNATURE<TAB>NAME
    SIGNATURE<TAB>SUBSTRATE<TAB>NAME

The three-column form names the domain NAME_SUBSTRATE. A malformed line
rejects only that line; the rest of the file is still read.
"""

from collections.abc import Iterable
from pathlib import Path

import structlog

from nrps_predictor.errors import InputValidationError
from nrps_predictor.prediction.models import ADomain, InputReport
from nrps_predictor.signatures import normalise_signature, validate_signature

logger = structlog.get_logger()


def parse_domain_line(line: str, line_number: int | None = None) -> ADomain:
    """Parse one signature line.

    Raises:
        InputValidationError: If the line has too few columns, an empty name
            or an invalid signature
    """
    parts = [part.strip() for part in line.strip().split("\t")]
    if len(parts) < 2:
        raise InputValidationError(
            "Expected a signature and a name separated by a tab",
            line_number=line_number,
            line=line.rstrip("\n"),
        )

    try:
        signature = validate_signature(normalise_signature(parts[0]))
    except InputValidationError as e:
        raise InputValidationError(e.msg, line_number=line_number, line=line.rstrip("\n")) from e

    if not all(parts[1:3]):
        raise InputValidationError(
            "Empty domain name or substrate column", line_number=line_number, line=line.rstrip("\n")
        )

    if len(parts) == 2:
        name = parts[1]
    else:
        name = f"{parts[2]}_{parts[1]}"

    return ADomain(name=name, signature=signature)


def parse_domains_from_lines(lines: Iterable[str]) -> InputReport:
    """Parse signature lines, collecting rejected lines instead of aborting."""
    report = InputReport()
    for line_number, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        try:
            report.domains.append(parse_domain_line(line, line_number))
        except InputValidationError as e:
            logger.warning("input_rejected", line_number=line_number, reason=e.msg)
            report.rejected.append(e)
    return report


def parse_domains(signature_file: Path | str) -> InputReport:
    """Read a signature file.

    Raises:
        FileNotFoundError: If the file does not exist
    """
    signature_file = Path(signature_file)
    if not signature_file.exists():
        raise FileNotFoundError(f"Signature file not found: {signature_file}")

    with open(signature_file, "r") as handle:
        report = parse_domains_from_lines(handle)

    logger.info(
        "signature_file_parsed",
        path=str(signature_file),
        accepted=len(report.domains),
        rejected=len(report.rejected),
    )
    return report
