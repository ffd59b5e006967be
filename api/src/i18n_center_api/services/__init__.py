from .backfill import BackfillOrchestrator, application_translator_provider
from .catalog import ComponentCatalog
from .stage_pipeline import StagePipeline
from .sweeper import SlotSweeper
from .translation_store import TranslationStore, VersionPair, stage_label
from .translator import OpenAIEngine, TemplatePreservingTranslator, TranslationEngine

__all__ = [
    "BackfillOrchestrator",
    "ComponentCatalog",
    "OpenAIEngine",
    "SlotSweeper",
    "StagePipeline",
    "TemplatePreservingTranslator",
    "TranslationEngine",
    "TranslationStore",
    "VersionPair",
    "application_translator_provider",
    "stage_label",
]
