"""Encoding descriptors: which positions and which per-residue features."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from nrps_predictor.signatures import LONG_SIGNATURE_LENGTH, STANDARD_AMINO_ACIDS

# Wold et al. z-scale properties, in encoding order
WOLD_PROPERTIES = ("hydrophobicity", "size", "polarity_charge")

# Width of the one-hot block per position
IDENTITY_WIDTH = len(STANDARD_AMINO_ACIDS)


class EncodingDescriptor(BaseModel):
    """Describes how a signature is turned into a feature vector.

    Attributes:
        scheme: "wold" (physicochemical z-scales) or "identity" (one-hot residue)
        signature_length: Number of residues the encoder accepts
        positions: 0-based signature positions to encode (None = all, in order)
        properties: Wold properties to emit per position, in order
    """

    model_config = ConfigDict(frozen=True)

    scheme: Literal["wold", "identity"] = Field(
        default="wold",
        description="Per-residue encoding scheme",
    )
    signature_length: int = Field(
        default=LONG_SIGNATURE_LENGTH,
        ge=1,
        description="Expected signature length",
    )
    positions: tuple[int, ...] | None = Field(
        default=None,
        description="Signature positions to encode (0-based), None for all",
    )
    properties: tuple[Literal["hydrophobicity", "size", "polarity_charge"], ...] = Field(
        default=WOLD_PROPERTIES,
        description="Wold z-scale properties encoded per position",
    )

    @model_validator(mode="after")
    def check_positions(self) -> "EncodingDescriptor":
        """Positions must be unique and inside the signature."""
        if self.positions is not None:
            if not self.positions:
                raise ValueError("positions must not be empty")
            if len(set(self.positions)) != len(self.positions):
                raise ValueError("positions must be unique")
            out_of_range = [p for p in self.positions if not 0 <= p < self.signature_length]
            if out_of_range:
                raise ValueError(
                    f"positions {out_of_range} outside signature of length {self.signature_length}"
                )
        if self.scheme == "wold":
            if not self.properties:
                raise ValueError("wold encoding needs at least one property")
            if len(set(self.properties)) != len(self.properties):
                raise ValueError("properties must be unique")
        return self

    @property
    def selected_positions(self) -> tuple[int, ...]:
        if self.positions is None:
            return tuple(range(self.signature_length))
        return self.positions

    @property
    def width(self) -> int:
        """Number of features emitted per position."""
        if self.scheme == "identity":
            return IDENTITY_WIDTH
        return len(self.properties)

    @property
    def output_length(self) -> int:
        """Feature vector dimensionality produced by this descriptor."""
        return len(self.selected_positions) * self.width
