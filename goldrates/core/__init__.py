"""goldrates core: extraction engine and its collaborators."""

from goldrates.core.config.settings import ConfigManager, GoldRatesConfig
from goldrates.core.coordinator import RunCoordinator
from goldrates.core.pipeline import ExtractionPipeline

__all__ = ["ConfigManager", "ExtractionPipeline", "GoldRatesConfig", "RunCoordinator"]
