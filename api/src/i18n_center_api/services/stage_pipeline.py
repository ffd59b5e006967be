"""Promotion of a saved payload from one stage label to another.

No ordering between stages is enforced: draft -> staging -> production is a
convention of the calling layer, and any pair of labels is accepted here.
"""

import logging
import uuid
from typing import Optional

from i18n_center_api.services.translation_store import StageLike, TranslationStore, stage_label
from i18n_models import TranslationVersion

logger = logging.getLogger(__name__)


class StagePipeline:
    def __init__(self, store: TranslationStore) -> None:
        self.store = store

    def deploy(
        self,
        component_id: uuid.UUID,
        locale: str,
        from_stage: StageLike,
        to_stage: StageLike,
        actor: Optional[str] = None,
    ) -> TranslationVersion:
        """Save the effective payload of `from_stage` as the current `to_stage` payload."""
        source_stage = stage_label(from_stage)
        target_stage = stage_label(to_stage)

        payload = self.store.effective_payload(component_id, locale, source_stage)
        deployed = self.store.save(component_id, locale, target_stage, payload, actor)

        logger.info(
            "Translation deployed",
            extra={
                "component_id": str(component_id),
                "locale": locale,
                "from_stage": source_stage,
                "to_stage": target_stage,
                "actor": actor,
            },
        )
        return deployed

    def revert(
        self,
        component_id: uuid.UUID,
        locale: str,
        stage: StageLike,
        actor: Optional[str] = None,
    ) -> TranslationVersion:
        return self.store.revert(component_id, locale, stage, actor)
