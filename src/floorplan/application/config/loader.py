"""Settings file loader with error handling.

Loads engine settings from JSON files and turns file system errors, JSON
syntax errors and pydantic validation errors into ConfigError with
readable messages.
"""

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from floorplan.application.config.schema import EngineSettings


class ConfigError(Exception):
    """Exception raised for configuration errors.

    Attributes:
        message: The primary error message
        error_type: Category of error (file_not_found, json_parse, validation)
        path: Path to the settings file (if applicable)
        details: Additional error details (line/column for JSON, validation errors, etc.)
    """

    def __init__(
        self,
        message: str,
        error_type: str = "unknown",
        path: Path | None = None,
        details: list[dict[str, Any]] | None = None,
    ) -> None:
        self.message = message
        self.error_type = error_type
        self.path = path
        self.details = details or []
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


def format_json_path(loc: tuple[str | int, ...]) -> str:
    """Format a pydantic location tuple as a JSON path string.

    Examples:
        >>> format_json_path(("cabinets", "cabinet_types", "dishwasher", "fixed_width"))
        'cabinets.cabinet_types.dishwasher.fixed_width'
        >>> format_json_path(("rooms", 0, "points"))
        'rooms[0].points'
    """
    parts: list[str] = []
    for segment in loc:
        if isinstance(segment, int):
            if parts:
                parts[-1] = f"{parts[-1]}[{segment}]"
            else:
                parts.append(f"[{segment}]")
        else:
            parts.append(str(segment))
    return ".".join(parts)


def extract_validation_errors(
    error: PydanticValidationError,
) -> list[dict[str, Any]]:
    """Flatten a pydantic ValidationError into path/message dictionaries."""
    details: list[dict[str, Any]] = []
    for err in error.errors():
        details.append(
            {
                "path": format_json_path(err["loc"]),
                "message": err["msg"],
                "value": err.get("input"),
                "error_type": err["type"],
            }
        )
    return details


def format_validation_error_message(
    details: list[dict[str, Any]], heading: str = "Configuration validation failed:"
) -> str:
    """Format validation error details into a multi-line message."""
    lines = [heading]
    for detail in details:
        path = detail["path"]
        message = detail["message"]
        value = detail.get("value")
        if value is not None and not isinstance(value, (dict, list)):
            lines.append(f"  - {path}: {message} (got: {value!r})")
        else:
            lines.append(f"  - {path}: {message}")
    return "\n".join(lines)


def load_settings(path: Path) -> EngineSettings:
    """Load and validate engine settings from a JSON file.

    Args:
        path: Path to the JSON settings file

    Returns:
        A validated EngineSettings instance

    Raises:
        ConfigError: If the file cannot be loaded or validated.
            The error_type attribute indicates the specific error category:
            - "file_not_found": File does not exist
            - "file_read_error": File exists but cannot be read
            - "json_parse": Invalid JSON syntax
            - "validation": Schema validation failed
    """
    if not path.exists():
        raise ConfigError(
            message=f"Settings file not found: {path}",
            error_type="file_not_found",
            path=path,
        )

    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(
            message=f"Error reading settings file: {path}: {e}",
            error_type="file_read_error",
            path=path,
        )

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ConfigError(
            message=(
                f"Invalid JSON in settings file: {path} "
                f"(line {e.lineno}, column {e.colno}): {e.msg}"
            ),
            error_type="json_parse",
            path=path,
            details=[{"line": e.lineno, "column": e.colno, "message": e.msg}],
        )

    try:
        return EngineSettings.model_validate(data)
    except PydanticValidationError as e:
        details = extract_validation_errors(e)
        raise ConfigError(
            message=format_validation_error_message(details),
            error_type="validation",
            path=path,
            details=details,
        )


def load_settings_from_dict(data: dict[str, Any]) -> EngineSettings:
    """Load and validate engine settings from a dictionary.

    Raises:
        ConfigError: If the data fails validation.
    """
    try:
        return EngineSettings.model_validate(data)
    except PydanticValidationError as e:
        details = extract_validation_errors(e)
        raise ConfigError(
            message=format_validation_error_message(details),
            error_type="validation",
            details=details,
        )
