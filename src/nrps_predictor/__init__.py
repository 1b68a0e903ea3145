"""nrps-predictor: substrate specificity prediction for NRPS adenylation domains."""

__version__ = "0.2.1"
