import uuid
from typing import List, Optional

from sqlalchemy import Text
from sqlmodel import Field

from .base import ActorMixin, BaseModel, JSONType, SoftDeleteMixin


class Application(BaseModel, ActorMixin, SoftDeleteMixin, table=True):
    """An application owning translatable components (e.g. a web storefront)."""

    __tablename__ = "applications"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    code: str = Field(index=True, unique=True)
    name: str
    description: str = Field(default="")
    enabled_languages: List[str] = Field(default_factory=list, sa_type=JSONType)

    # Per-application engine key; excluded from every serialized response
    openai_key: Optional[str] = Field(default=None, sa_type=Text, exclude=True)

    @property
    def has_openai_key(self) -> bool:
        return bool(self.openai_key)
