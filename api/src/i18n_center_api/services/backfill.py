"""Fan a source-locale payload out to other locales through machine translation."""

import logging
import uuid
from typing import Callable, List, Optional, Sequence

from i18n_center_api.errors import BackfillError, ExternalServiceError, PersistenceError
from i18n_center_api.services.catalog import ComponentCatalog
from i18n_center_api.services.translation_store import StageLike, TranslationStore, stage_label
from i18n_center_api.services.translator import EngineFactory, TemplatePreservingTranslator
from i18n_models import TranslationVersion

logger = logging.getLogger(__name__)

TranslatorProvider = Callable[[uuid.UUID], TemplatePreservingTranslator]


def application_translator_provider(
    catalog: ComponentCatalog,
    engine_factory: EngineFactory,
    placeholder_policy: str = "drop",
) -> TranslatorProvider:
    """Translator keyed on the owning application's engine credentials."""

    def provide(component_id: uuid.UUID) -> TemplatePreservingTranslator:
        component = catalog.get_component(component_id)
        application = catalog.get_application(component.application_id)
        return TemplatePreservingTranslator(engine_factory(application.openai_key), placeholder_policy)

    return provide


class BackfillOrchestrator:
    def __init__(self, store: TranslationStore, translator_for: TranslatorProvider) -> None:
        self.store = store
        self.translator_for = translator_for

    def auto_translate(
        self,
        component_id: uuid.UUID,
        source_locale: str,
        target_locale: str,
        stage: StageLike,
        actor: Optional[str] = None,
    ) -> TranslationVersion:
        """Translate one component into a single target locale and save it."""
        stage = stage_label(stage)
        source = self.store.effective_payload(component_id, source_locale, stage)
        translator = self.translator_for(component_id)

        translated = translator.translate_payload(source, source_locale, target_locale)
        saved = self.store.save(component_id, target_locale, stage, translated, actor)
        logger.info(
            "Translation auto-translated",
            extra={
                "component_id": str(component_id),
                "source_locale": source_locale,
                "target_locale": target_locale,
                "stage": stage,
            },
        )
        return saved

    def backfill(
        self,
        component_id: uuid.UUID,
        source_locale: str,
        target_locales: Sequence[str],
        stage: StageLike,
        actor: Optional[str] = None,
    ) -> List[TranslationVersion]:
        """Translate and save each target locale in order, one at a time.

        The first failure stops the loop with BackfillError naming the locale;
        locales finished before it stay saved.
        """
        stage = stage_label(stage)
        source = self.store.effective_payload(component_id, source_locale, stage)
        translator = self.translator_for(component_id)

        completed: List[TranslationVersion] = []
        for target_locale in target_locales:
            try:
                translated = translator.translate_payload(source, source_locale, target_locale)
                completed.append(self.store.save(component_id, target_locale, stage, translated, actor))
            except (ExternalServiceError, PersistenceError) as exc:
                logger.error(
                    "Backfill aborted",
                    extra={
                        "component_id": str(component_id),
                        "failed_locale": target_locale,
                        "completed_locales": [row.locale for row in completed],
                        "error": str(exc),
                    },
                )
                raise BackfillError(target_locale, completed, exc) from exc

        logger.info(
            "Backfill completed",
            extra={"component_id": str(component_id), "source_locale": source_locale, "targets": list(target_locales)},
        )
        return completed
