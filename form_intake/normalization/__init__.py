"""
form_intake/normalization package marker.
"""

from form_intake.normalization.record_normalizer import (
    FORM_NORMALIZER,
    RecordNormalizer,
    normalize_header,
    normalize_headers,
)

__all__ = [
    "FORM_NORMALIZER",
    "RecordNormalizer",
    "normalize_header",
    "normalize_headers",
]
