"""goldrates - precious metal rate extraction from vendor web pages."""

from goldrates.core.extraction import LabelNormalizer, NumericFieldParser, RowExtractor, TableClassifier
from goldrates.core.models import ExtractionBatch, ExtractionOutcome, RateRecord, RawTable, VendorProfile
from goldrates.core.pipeline import ExtractionPipeline

__version__ = "0.1.0"

__all__ = [
    "ExtractionBatch",
    "ExtractionOutcome",
    "ExtractionPipeline",
    "LabelNormalizer",
    "NumericFieldParser",
    "RateRecord",
    "RawTable",
    "RowExtractor",
    "TableClassifier",
    "VendorProfile",
    "__version__",
]
