import uuid
from typing import Any, Dict

from sqlalchemy import Index, UniqueConstraint
from sqlmodel import Field

from .base import ActorMixin, BaseModel, JSONType


class TranslationVersion(BaseModel, ActorMixin, table=True):
    """One slot of the two-slot history for a (component, locale, stage) key.

    Slot 1 holds the payload of the first save ever made for the key and is
    never rewritten. Slot 2 holds the current payload.
    """

    __tablename__ = "translation_versions"
    __table_args__ = (
        UniqueConstraint("component_id", "locale", "stage", "version", name="uq_translation_slot"),
        Index("ix_translation_key", "component_id", "locale", "stage"),
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    component_id: uuid.UUID = Field(foreign_key="components.id", index=True)
    locale: str = Field(index=True)
    # Opaque label; draft/staging/production are conventions only
    stage: str = Field(index=True)
    version: int = Field(default=1, index=True)
    data: Dict[str, Any] = Field(default_factory=dict, sa_type=JSONType)
    is_active: bool = Field(default=True, index=True)
