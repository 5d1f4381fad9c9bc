from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import sessionmaker, Session

from fsmbot.storage.models import Base


def create_session_factory(dsn: str) -> sessionmaker[Session]:
    """Создать engine, таблицы (если их нет) и фабрику сессий."""
    engine = create_engine(dsn, echo=False, pool_pre_ping=True)
    init_db(engine)
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


def init_db(engine: Engine) -> None:
    Base.metadata.create_all(engine)
