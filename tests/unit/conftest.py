import os

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from symbol_vault.models import Base, User


@pytest.fixture(autouse=True, scope="session")
def set_test_env_vars():
    # Database settings
    os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

    # JWT Authentication settings
    os.environ.setdefault("JWT_SECRET", "test-jwt-secret-key-with-enough-bytes")
    os.environ.setdefault("JWT_ALGORITHM", "HS256")

    # Object storage settings
    os.environ.setdefault("S3_ENDPOINT_URL", "http://localhost:9000")
    os.environ.setdefault("S3_ACCESS_KEY_ID", "test-access-key")
    os.environ.setdefault("S3_SECRET_ACCESS_KEY", "test-secret-key")
    os.environ.setdefault("S3_BUCKET_NAME", "symbol-vault-test")


def _enable_sqlite_foreign_keys(dbapi_conn, connection_record):
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest.fixture
def db_engine():
    # One shared in-memory connection, usable from TestClient worker threads
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    Base.metadata.create_all(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def db_session(db_engine):
    SessionLocal = sessionmaker(bind=db_engine, autoflush=False)
    session = SessionLocal()

    # The anonymous user that unauthenticated uploads belong to
    session.add(User(id=1, username="anonymous", hashed_password="!"))
    session.commit()

    try:
        yield session
    finally:
        session.close()
