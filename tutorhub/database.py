from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from tutorhub.core import config


Base = declarative_base()

# Bounds of a signed 64-bit integer primary key.
MIN_ID = 1
MAX_ID = 2**63 - 1


def build_engine(url: str, **kwargs) -> Engine:
    if url.startswith('sqlite'):
        connect_args = kwargs.setdefault('connect_args', {})
        connect_args.setdefault('check_same_thread', False)
    return create_engine(url, **kwargs)


def build_session_factory(bind: Engine) -> sessionmaker:
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=bind,
    )


engine = build_engine(config.DATABASE_URL)

SessionLocal = build_session_factory(engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind: Engine) -> None:
    # Import for the side effect of registering every table on Base.
    from tutorhub.models import teacher, user  # noqa: F401

    Base.metadata.create_all(bind=bind)
