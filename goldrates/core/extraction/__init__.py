"""Table extraction and normalization engine."""

from goldrates.core.extraction.classifier import TableClassifier, TableMatch
from goldrates.core.extraction.labels import (
    LabelNormalizer,
    NormalizedLabel,
    VendorLabelRules,
    extract_purity,
)
from goldrates.core.extraction.numeric import NumericFieldParser, parse_decimal
from goldrates.core.extraction.rows import RowExtractor

__all__ = [
    "LabelNormalizer",
    "NormalizedLabel",
    "NumericFieldParser",
    "RowExtractor",
    "TableClassifier",
    "TableMatch",
    "VendorLabelRules",
    "extract_purity",
    "parse_decimal",
]
