from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from ordertally.db_models import Base


IN_MEMORY_URLS = ("sqlite://", "sqlite:///:memory:")


def build_session_factory(database_url: str) -> sessionmaker[Session]:
    connect_args: dict[str, object] = {}
    engine_kwargs: dict[str, object] = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    if database_url in IN_MEMORY_URLS:
        # Every session must see the same in-memory database.
        engine_kwargs["poolclass"] = StaticPool

    engine = create_engine(database_url, future=True, connect_args=connect_args, **engine_kwargs)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)

