"""Shared test configuration."""

import os
import sys
import tempfile

import pytest

# Module-level app in app.py is built from the environment at import time;
# keep it away from real credentials and the working directory.
_TMP = tempfile.mkdtemp(prefix="storefront-tests-")
os.environ.setdefault("DATABASE_URL", f"sqlite:///{os.path.join(_TMP, 'import.db')}")
os.environ.setdefault("ADMIN_PIN", "test-pin")

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app import create_app  # noqa: E402
from config import Settings  # noqa: E402
from database import make_engine  # noqa: E402
from gate import GateConfig  # noqa: E402

SECRET = "xyz123"


@pytest.fixture
def make_app(tmp_path):
    engines = []

    def _make(secret=SECRET, prefix="/admin"):
        settings = Settings(
            gate=GateConfig(secret=secret, prefix=prefix),
            database_url=f"sqlite:///{tmp_path / 'store.db'}",
        )
        engine = make_engine(settings.database_url)
        engines.append(engine)
        app = create_app(settings, engine=engine)
        app.config["TESTING"] = True
        return app

    yield _make
    for engine in engines:
        engine.dispose()


@pytest.fixture
def client(make_app):
    return make_app().test_client()
