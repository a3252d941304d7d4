"""Engine settings schema and loading.

Public API:
    - EngineSettings: Root settings model
    - SnappingConfig, CabinetsConfig, CabinetTypeConfig, FeaturesConfig,
      ExportConfig: Settings sections
    - load_settings: Load settings from a JSON file
    - load_settings_from_dict: Load settings from a dictionary
    - ConfigError: Exception for configuration errors

Example:
    >>> from pathlib import Path
    >>> from floorplan.application.config import load_settings, ConfigError
    >>>
    >>> try:
    ...     settings = load_settings(Path("floorplan.json"))
    ...     print(settings.snapping.wall_snap_threshold)
    ... except ConfigError as e:
    ...     print(f"Error: {e}")
"""

from floorplan.application.config.loader import (
    ConfigError,
    extract_validation_errors,
    format_json_path,
    format_validation_error_message,
    load_settings,
    load_settings_from_dict,
)
from floorplan.application.config.schema import (
    CabinetsConfig,
    CabinetTypeConfig,
    EngineSettings,
    ExportConfig,
    FeaturesConfig,
    SnappingConfig,
)

__all__ = [
    "CabinetTypeConfig",
    "CabinetsConfig",
    "ConfigError",
    "EngineSettings",
    "ExportConfig",
    "FeaturesConfig",
    "SnappingConfig",
    "extract_validation_errors",
    "format_json_path",
    "format_validation_error_message",
    "load_settings",
    "load_settings_from_dict",
]
