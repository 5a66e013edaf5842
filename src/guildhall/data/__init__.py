"""Guild definitions: JSON files, their location and their validation errors."""

from .errors import DataError, DataLoadError, DataReferenceError, DataValidationError
from .json_loader import load_json, load_json_object
from .paths import DEFINITIONS_ENV_VAR, get_definitions_path

__all__ = [
    "DEFINITIONS_ENV_VAR",
    "DataError",
    "DataLoadError",
    "DataReferenceError",
    "DataValidationError",
    "get_definitions_path",
    "load_json",
    "load_json_object",
]
