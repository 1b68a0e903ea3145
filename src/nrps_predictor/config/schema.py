"""Pydantic models for predictor configuration."""

import hashlib
import json
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from nrps_predictor.signatures import SHORT_SIGNATURE_LENGTH
from nrps_predictor.stachelhaus.models import DEFAULT_REFINEMENT_HITS
from nrps_predictor.svm.models import KNOWN_SCHEMES, scheme_sort_key

SIGNATURES_FILE_NAME = "signatures.tsv"


class PredictionSettings(BaseModel):
    """What to predict and how to report it."""

    count: int = Field(
        default=1,
        ge=1,
        description="Number of ranked predictions reported per scheme (ties extend it)",
    )
    skip_stachelhaus: bool = Field(
        default=False,
        description="Do not run the Stachelhaus signature lookup",
    )
    skip_v2: bool = Field(
        default=False,
        description="Skip all NRPS2_* schemes",
    )
    skip_v3: bool = Field(
        default=False,
        description="Skip all NRPS3_* schemes",
    )
    schemes: list[str] = Field(
        default_factory=list,
        description="Restrict prediction to these schemes (empty = all available)",
    )
    refinement_hits: int = Field(
        default=DEFAULT_REFINEMENT_HITS,
        ge=1,
        description="Long-signature refinement hits reported per domain",
    )
    min_short_matches: int = Field(
        default=0,
        ge=0,
        le=SHORT_SIGNATURE_LENGTH,
        description="Minimum identical Stachelhaus positions for a nearest-neighbour call",
    )
    workers: int = Field(
        default=1,
        ge=1,
        description="Worker threads used for prediction",
    )

    @field_validator("schemes")
    @classmethod
    def unique_schemes(cls, v: list[str]) -> list[str]:
        """Drop duplicates and blank entries, keeping first-seen order."""
        return list(dict.fromkeys(s.strip() for s in v if s.strip()))


class OutputSettings(BaseModel):
    """Where prediction tables are written besides stdout."""

    output_dir: Path | None = Field(
        default=None,
        description="Directory for TSV output and provenance (None = stdout only)",
    )
    filename_base: str = Field(
        default="predictions",
        min_length=1,
        description="Base filename without extension",
    )


class PipelineConfig(BaseModel):
    """Main predictor configuration."""

    model_dir: Path = Field(
        default=Path("data/models"),
        description="Directory with one subdirectory per classification scheme",
    )
    stachelhaus_signatures: Path | None = Field(
        default=None,
        description="Stachelhaus reference table (default: model_dir/signatures.tsv, else bundled)",
    )
    prediction: PredictionSettings = Field(
        default_factory=PredictionSettings,
        description="Prediction settings",
    )
    output: OutputSettings = Field(
        default_factory=OutputSettings,
        description="Output settings",
    )

    def signature_table_path(self) -> Path | None:
        """
        Resolve the Stachelhaus reference table to use.

        Returns:
            Explicitly configured path, else model_dir/signatures.tsv if it
            exists, else None meaning the table bundled with the package.
        """
        if self.stachelhaus_signatures is not None:
            return self.stachelhaus_signatures
        candidate = self.model_dir / SIGNATURES_FILE_NAME
        if candidate.exists():
            return candidate
        return None

    def requested_schemes(self) -> list[str] | None:
        """Explicitly requested schemes after skip filters, or None for all."""
        if not self.prediction.schemes:
            return None
        return self.active_schemes(self.prediction.schemes)

    def active_schemes(self, available: list[str] | tuple[str, ...] | None = None) -> list[str]:
        """
        Resolve the schemes a run reports, in output order.

        Args:
            available: Schemes present in the model store (loaded or failed).
                Defaults to the known scheme list.

        Returns:
            Explicit schemes if configured, else available schemes, minus
            NRPS2_* / NRPS3_* when skipped.
        """
        if self.prediction.schemes:
            candidates = list(self.prediction.schemes)
        elif available is not None:
            candidates = list(available)
        else:
            candidates = list(KNOWN_SCHEMES)

        if self.prediction.skip_v2:
            candidates = [s for s in candidates if not s.startswith("NRPS2_")]
        if self.prediction.skip_v3:
            candidates = [s for s in candidates if not s.startswith("NRPS3_")]
        return sorted(dict.fromkeys(candidates), key=scheme_sort_key)

    def config_hash(self) -> str:
        """
        Compute SHA-256 hash of the configuration.

        Returns a deterministic hash based on all config values,
        recorded in provenance to tie outputs to their settings.
        """
        config_dict = self.model_dump(mode="python")
        config_json = json.dumps(
            config_dict,
            sort_keys=True,
            default=str,
        )
        return hashlib.sha256(config_json.encode()).hexdigest()
