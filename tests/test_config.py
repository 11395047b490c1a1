import re
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
_DB_HOST_DEFAULT = re.compile(r'os\.getenv\("DB_HOST", "([^"]+)"\)')


def _db_host_default(relative_path):
    match = _DB_HOST_DEFAULT.search((ROOT / relative_path).read_text())
    assert match, relative_path
    return match.group(1)


def test_migrations_and_app_default_to_the_same_database_host():
    assert _db_host_default("alembic/env.py") == _db_host_default("ordning_api/db.py") == "ordning-db"
