import os
import tempfile

# must be set before budgetsmart.data.base is imported
os.environ["DATABASE_URL"] = "sqlite:///" + os.path.join(
    tempfile.mkdtemp(), "budgetsmart-test.db"
)

import pytest
from fastapi.testclient import TestClient

from budgetsmart.data.base import Base, SessionLocal, engine
from budgetsmart.main import app


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        with engine.begin() as conn:
            for table in reversed(Base.metadata.sorted_tables):
                conn.execute(table.delete())


@pytest.fixture
def client(db):
    return TestClient(app)
