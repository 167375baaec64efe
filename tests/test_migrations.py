import importlib.util
import sys
from pathlib import Path

import pytest
import sqlalchemy as sa
from alembic.migration import MigrationContext
from alembic.operations import Operations

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from app.extensions import db
from app import models  # noqa: F401

REVISION = ROOT_DIR / "migrations" / "versions" / "20261019_01_create_scheduling_tables.py"


@pytest.fixture
def revision():
    module_spec = importlib.util.spec_from_file_location("create_scheduling_tables", REVISION)
    module = importlib.util.module_from_spec(module_spec)
    module_spec.loader.exec_module(module)
    return module


@pytest.fixture
def connection():
    engine = sa.create_engine("sqlite://")
    with engine.begin() as conn:
        yield conn
    engine.dispose()


def _run(conn, step):
    context = MigrationContext.configure(conn)
    with Operations.context(context):
        step()


def test_upgrade_creates_every_model_index(revision, connection):
    _run(connection, revision.upgrade)

    inspector = sa.inspect(connection)
    for table in db.metadata.sorted_tables:
        expected = {index.name for index in table.indexes}
        created = {index["name"] for index in inspector.get_indexes(table.name)}
        assert expected <= created, table.name

    students = {index["name"] for index in inspector.get_indexes("students")}
    assert {"ix_students_created_at", "ix_students_deleted_at"} <= students


def test_downgrade_drops_everything(revision, connection):
    _run(connection, revision.upgrade)
    _run(connection, revision.downgrade)

    assert sa.inspect(connection).get_table_names() == []
