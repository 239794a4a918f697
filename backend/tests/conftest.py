import os

# Configure an isolated in-memory database before the app modules are imported.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SEED_DATA"] = "true"
os.environ.pop("BASE_PATH", None)

import pytest
from sqlmodel import Session

from sistema_academico.database import engine, create_db_and_tables, drop_db_and_tables
from sistema_academico.utils.seed_data import seed_database


@pytest.fixture(autouse=True)
def reset_db():
    """Rebuild the schema and reload the demo data before every test."""
    drop_db_and_tables()
    create_db_and_tables()
    with Session(engine) as session:
        seed_database(session)
    yield


@pytest.fixture
def session():
    with Session(engine) as s:
        yield s
