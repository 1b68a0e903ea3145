from .loader import apply_overrides, default_config, load_config, load_config_with_overrides
from .schema import OutputSettings, PipelineConfig, PredictionSettings

__all__ = [
    "apply_overrides",
    "default_config",
    "load_config",
    "load_config_with_overrides",
    "PipelineConfig",
    "PredictionSettings",
    "OutputSettings",
]
