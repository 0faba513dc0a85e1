from .extractor import FIELD_DEFAULTS, extract_fields
from .processor import DataProcessor, clean_string
from .validation import validate_fields

__all__ = ["FIELD_DEFAULTS", "extract_fields", "DataProcessor", "clean_string", "validate_fields"]
