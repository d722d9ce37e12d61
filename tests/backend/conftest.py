from datetime import date, datetime
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool

from backend.auth.passwords import pwd_context
from backend.core import config
from backend.database import Base, Database
from backend.main import create_app
from backend.models.education_entry import EducationEntry
from backend.models.user import User

TEST_SECRET = 'test-secret-key-that-is-long-enough-for-hs256'


@pytest.fixture(autouse=True)
def jwt_secret(monkeypatch: pytest.MonkeyPatch) -> str:
    monkeypatch.setattr(config, 'JWT_SECRET_KEY', TEST_SECRET)
    return TEST_SECRET


@pytest.fixture
def database():
    database = Database(
        'sqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=database.engine, tables=[User.__table__, EducationEntry.__table__])
    try:
        yield database
    finally:
        Base.metadata.drop_all(bind=database.engine, tables=[EducationEntry.__table__, User.__table__])
        database.dispose()


@pytest.fixture
def db(database):
    session = database.session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope='session')
def password_hash() -> str:
    return pwd_context.hash('pw1')


@pytest.fixture
def make_user(db, password_hash):
    def _make_user(user_id: str, email: str, full_name: str, role: str = 'user', is_active: bool = True) -> User:
        user = User(
            id=user_id,
            email=email,
            full_name=full_name,
            role=role,
            password_hash=password_hash,
            is_active=is_active,
        )
        db.add(user)
        db.commit()
        return user

    return _make_user


@pytest.fixture
def make_entry(db):
    def _make_entry(user_id: str, activity_date: date, hours: str, description: str = 'Webinar') -> EducationEntry:
        entry = EducationEntry(
            user_id=user_id,
            activity_date=activity_date,
            hours=Decimal(hours),
            description=description,
            category='General',
            created_date=datetime.now(),
        )
        db.add(entry)
        db.commit()
        db.refresh(entry)
        return entry

    return _make_entry


@pytest.fixture
def client(database):
    return TestClient(create_app(database))
