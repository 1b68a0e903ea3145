"""Provenance tracking for prediction runs."""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from nrps_predictor.config import PipelineConfig
    from nrps_predictor.prediction import InputReport, RunSummary
    from nrps_predictor.svm import ModelStore


class ProvenanceTracker:
    """
    Tracks what a prediction run was built from.

    One tracker per run. It records the reference table, which classifier
    schemes loaded or failed, which input lines were rejected and the call
    counts of the finished run, and writes them as the run's only sidecar
    next to the prediction table.
    """

    def __init__(self, predictor_version: str, config: "PipelineConfig"):
        """
        Args:
            predictor_version: Version string (e.g., "0.2.1")
            config: Resolved PipelineConfig of the run
        """
        self.predictor_version = predictor_version
        self.config_hash = config.config_hash()
        self.model_dir = str(config.model_dir)
        self.created_at = datetime.now(timezone.utc)

        self.reference_table: dict = {}
        self.schemes: dict = {"loaded": [], "failed": {}, "active": []}
        self.inputs: dict = {"accepted": 0, "rejected": []}
        self.statistics: dict = {}
        self.output_files: list[str] = []
        self.processing_steps: list[dict] = []

    def record_step(self, step_name: str, details: Optional[dict] = None) -> None:
        """Append a timestamped step to the processing log."""
        step = {
            "step_name": step_name,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        if details:
            step["details"] = details
        self.processing_steps.append(step)

    def get_steps(self) -> list[dict]:
        return self.processing_steps

    def record_reference_table(self, source: str, entries: int) -> None:
        """Record where the Stachelhaus table came from and its size."""
        self.reference_table = {"source": source, "entries": entries}
        self.record_step("load_signature_table", self.reference_table)

    def record_models(self, store: "ModelStore", active: list[str]) -> None:
        """Record loaded, failed and active classifier schemes."""
        self.schemes = {
            "loaded": list(store.schemes),
            "failed": {scheme: err.reason for scheme, err in store.failures.items()},
            "active": list(active),
        }
        self.record_step("load_models", {
            "loaded": len(self.schemes["loaded"]),
            "failed": len(self.schemes["failed"]),
        })

    def record_inputs(self, report: "InputReport") -> None:
        """Record accepted domains and each rejected input line."""
        self.inputs = {
            "accepted": len(report.domains),
            "rejected": [
                {"line": e.line_number, "reason": e.msg} for e in report.rejected
            ],
        }
        self.record_step("parse_signatures", {
            "accepted": self.inputs["accepted"],
            "rejected": len(self.inputs["rejected"]),
        })

    def record_summary(self, summary: "RunSummary") -> None:
        """Record call counts of the finished run."""
        self.statistics = {
            "domains_predicted": summary.domains_predicted,
            "stachelhaus_calls": summary.stachelhaus_calls,
            "scheme_calls": dict(summary.scheme_calls),
            "no_confident_calls": dict(summary.no_confident_calls),
            "encoding_errors": dict(summary.encoding_errors),
        }
        self.record_step("predict", {"domains_predicted": summary.domains_predicted})

    def record_output(self, path: Path) -> None:
        self.output_files.append(Path(path).name)

    def create_metadata(self) -> dict:
        """Full provenance as a plain dictionary."""
        return {
            "predictor_version": self.predictor_version,
            "config_hash": self.config_hash,
            "model_dir": self.model_dir,
            "created_at": self.created_at.isoformat(),
            "reference_table": self.reference_table,
            "schemes": self.schemes,
            "inputs": self.inputs,
            "statistics": self.statistics,
            "output_files": self.output_files,
            "processing_steps": self.processing_steps,
        }

    def save_sidecar(self, output_path: Path) -> Path:
        """
        Save provenance as a JSON sidecar next to an output file.

        Args:
            output_path: Path to the main output file.
                         Sidecar will be saved as {stem}.provenance.json

        Returns:
            Path of the written sidecar
        """
        output_path = Path(output_path)
        sidecar_path = output_path.with_suffix(".provenance.json")
        sidecar_path.parent.mkdir(parents=True, exist_ok=True)

        with open(sidecar_path, "w") as f:
            json.dump(self.create_metadata(), f, indent=2, default=str)
        return sidecar_path

    @staticmethod
    def load_sidecar(sidecar_path: Path) -> dict:
        with open(sidecar_path) as f:
            return json.load(f)

    @classmethod
    def from_config(
        cls,
        config: "PipelineConfig",
        version: Optional[str] = None
    ) -> "ProvenanceTracker":
        """Tracker for config, versioned with nrps_predictor.__version__ by default."""
        if version is None:
            from nrps_predictor import __version__
            version = __version__

        return cls(version, config)
