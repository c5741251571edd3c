"""Value tree model, deep merge, and data file loading."""
from .loader import detect_format, load_data_file, load_data_files
from .merge import deep_merge, merge_values
from .values import Value, ValueKind, kind_of, normalize_value

__all__ = [
    "Value",
    "ValueKind",
    "kind_of",
    "normalize_value",
    "deep_merge",
    "merge_values",
    "detect_format",
    "load_data_file",
    "load_data_files",
]
