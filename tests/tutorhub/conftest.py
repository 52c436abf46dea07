import os

os.environ['DATABASE_URL'] = 'sqlite:///:memory:'
os.environ.setdefault('JWT_SECRET_KEY', 'test-secret-key-for-tutorhub-suite-0001')
os.environ['EMAIL_USER'] = ''

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from tutorhub.database import Base, build_engine, build_session_factory, get_db, init_db  # noqa: E402
from tutorhub.main import app  # noqa: E402
from tutorhub.services import mailer  # noqa: E402
from tutorhub.services.account_store import AccountStore  # noqa: E402


@pytest.fixture
def engine():
    test_engine = build_engine('sqlite://', poolclass=StaticPool)
    init_db(test_engine)
    try:
        yield test_engine
    finally:
        Base.metadata.drop_all(bind=test_engine)
        test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def store(db):
    return AccountStore(db)


@pytest.fixture
def sent_emails(monkeypatch: pytest.MonkeyPatch):
    sent: list[dict] = []

    def fake_dispatch(recipient: str, full_name: str, link: str) -> bool:
        sent.append({'recipient': recipient, 'full_name': full_name, 'link': link})
        return True

    monkeypatch.setattr(mailer, 'dispatch_confirmation_email', fake_dispatch)
    return sent


@pytest.fixture
def client(session_factory, sent_emails):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
