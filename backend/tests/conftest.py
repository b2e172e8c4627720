"""
Point the app at a throwaway SQLite database before anything imports
liftlog.db, then build the schema once for the whole run.
"""
import os
import tempfile

_DB_DIR = tempfile.mkdtemp(prefix="liftlog-tests-")
os.environ.setdefault("DB_URL", f"sqlite+pysqlite:///{_DB_DIR}/liftlog.db")
os.environ.setdefault("SECRET_KEY", "test-secret-not-for-prod")

import pytest

from liftlog.db import Base, engine
from liftlog import models  # noqa: F401


@pytest.fixture(scope="session", autouse=True)
def _schema():
    Base.metadata.create_all(engine)
    yield
    Base.metadata.drop_all(engine)
    engine.dispose()
