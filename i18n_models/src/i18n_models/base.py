from datetime import datetime
from typing import Optional

from sqlalchemy import JSON, DateTime, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlmodel import Field, SQLModel

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")


class BaseModel(SQLModel, table=False):
    """Abstract base for ORM models with audit timestamps."""

    # Use per-model columns via sa_type + sa_column_kwargs to avoid reusing
    # the same SQLAlchemy Column instance across multiple tables.
    created_at: datetime | None = Field(
        default=None,
        sa_type=DateTime(timezone=True),
        sa_column_kwargs={"server_default": func.now(), "nullable": True},
    )
    updated_at: datetime | None = Field(
        default=None,
        sa_type=DateTime(timezone=True),
        sa_column_kwargs={
            "server_default": func.now(),
            "onupdate": func.now(),
            "nullable": True,
        },
    )


class ActorMixin(SQLModel, table=False):
    """Opaque actor identifiers supplied by the calling layer."""

    created_by: Optional[str] = Field(default=None, index=True)
    updated_by: Optional[str] = Field(default=None, index=True)


class SoftDeleteMixin(SQLModel, table=False):
    deleted_at: datetime | None = Field(
        default=None,
        sa_type=DateTime(timezone=True),
        sa_column_kwargs={"nullable": True},
        index=True,
    )

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None
