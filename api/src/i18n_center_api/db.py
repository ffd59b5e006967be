from collections.abc import Iterator

from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

from i18n_center_api.settings import get_settings


def build_engine(database_url: str, echo: bool = False):
    if database_url.startswith("sqlite"):
        # Single shared connection so in-memory databases survive across sessions
        return create_engine(
            database_url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(database_url, echo=echo, pool_pre_ping=True)


_settings = get_settings()
engine = build_engine(_settings.database_url, echo=_settings.sql_echo)


def get_session() -> Iterator[Session]:
    with Session(engine) as session:
        yield session
