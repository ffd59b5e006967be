import uuid
from typing import Any, Dict, Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field

from .base import ActorMixin, BaseModel, JSONType, SoftDeleteMixin


class Component(BaseModel, ActorMixin, SoftDeleteMixin, table=True):
    """Named content unit; `structure` is an advisory template, never enforced."""

    __tablename__ = "components"
    __table_args__ = (
        UniqueConstraint("application_id", "code", name="uq_component_app_code"),
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    application_id: uuid.UUID = Field(foreign_key="applications.id", index=True)
    code: str = Field(index=True)
    name: str
    description: str = Field(default="")
    structure: Optional[Dict[str, Any]] = Field(default=None, sa_type=JSONType)
    default_locale: str = Field(default="en")
