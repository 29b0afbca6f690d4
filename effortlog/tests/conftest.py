import os
import sys
import tempfile
from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config as AlembicConfig

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Point the testing config at a throwaway sqlite file before the app is imported.
_TEST_DB_DIR = Path(tempfile.mkdtemp(prefix="effortlog-tests-"))
os.environ.setdefault("TEST_DATABASE_URL", f"sqlite:///{_TEST_DB_DIR / 'test.db'}")

from effortlog import create_app  # noqa: E402
from effortlog.core.auth.auth_service import issue_tokens  # noqa: E402
from effortlog.core.users.services import create_user  # noqa: E402
from effortlog.extensions import db  # noqa: E402


def _alembic_config() -> AlembicConfig:
    cfg = AlembicConfig(str(ROOT / "alembic.ini"))
    cfg.set_main_option("script_location", str(ROOT / "effortlog" / "migrations"))
    cfg.set_main_option("effortlog_env", "testing")
    return cfg


@pytest.fixture(scope="session", autouse=True)
def migrated_db():
    """Apply migrations once per session to mirror production schema."""
    cfg = _alembic_config()
    command.upgrade(cfg, "head")
    yield
    command.downgrade(cfg, "base")


@pytest.fixture()
def app(migrated_db):
    """Per-test app; every table is emptied afterwards."""
    app = create_app("testing")
    yield app
    with app.app_context():
        db.session.rollback()
        for table in reversed(db.metadata.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()
        db.session.remove()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def make_user(app):
    """Factory returning the id of a freshly created user."""

    def _make(email: str = "tracker@example.com", password: str = "secret123") -> int:
        with app.app_context():
            return create_user(email, password).id

    return _make


@pytest.fixture()
def user_id(make_user):
    return make_user()


@pytest.fixture()
def api_headers(app, user_id):
    with app.app_context():
        from effortlog.core.users.services import get_user

        tokens = issue_tokens(get_user(user_id))
    return {"Authorization": f"Bearer {tokens['access_token']}"}
