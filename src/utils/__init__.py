from .crime_taxonomy import (
    CRIME_TYPE_SYNONYMS,
    VIOLENT_TYPES,
    canonical_label,
    normalize_crime_type,
    normalize_status,
    is_violent,
    display_label,
    expand_categories,
)

__all__ = [
    "CRIME_TYPE_SYNONYMS",
    "VIOLENT_TYPES",
    "canonical_label",
    "normalize_crime_type",
    "normalize_status",
    "is_violent",
    "display_label",
    "expand_categories",
]
