"""Run provenance."""

from nrps_predictor.persistence.provenance import ProvenanceTracker

__all__ = ["ProvenanceTracker"]
