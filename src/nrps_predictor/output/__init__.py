"""Output generation: the prediction table and TSV file writing."""

from nrps_predictor.output.render import TABLE_HEADER, render_table
from nrps_predictor.output.writers import records_to_frame, write_prediction_output

__all__ = [
    "TABLE_HEADER",
    "render_table",
    "records_to_frame",
    "write_prediction_output",
]
