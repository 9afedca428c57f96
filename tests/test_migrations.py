import importlib.util
from pathlib import Path

import pytest
from alembic.migration import MigrationContext
from alembic.operations import Operations
from sqlalchemy import create_engine, inspect

from fintrack.database import Base

MIGRATION = Path(__file__).resolve().parents[1] / "alembic" / "versions" / "001_initial.py"


def _load_migration():
    spec = importlib.util.spec_from_file_location("migration_001_initial", MIGRATION)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture()
def migrated_engine(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'migrated.sqlite'}")
    migration = _load_migration()
    with engine.begin() as connection:
        context = MigrationContext.configure(connection)
        with Operations.context(context):
            migration.upgrade()
    yield engine
    engine.dispose()


def _indexes(engine, table):
    return {index["name"]: index for index in inspect(engine).get_indexes(table)}


def test_migration_creates_every_model_table(migrated_engine):
    assert set(Base.metadata.tables) <= set(inspect(migrated_engine).get_table_names())


@pytest.mark.parametrize("table, index_name", [
    ("users", "ix_users_email"),
    ("user_settings", "ix_user_settings_user_id"),
])
def test_unique_indexes_match_models(migrated_engine, table, index_name):
    index = _indexes(migrated_engine, table)[index_name]
    assert index["unique"]

    model_index = next(i for i in Base.metadata.tables[table].indexes if i.name == index_name)
    assert model_index.unique


def test_non_unique_indexes_stay_non_unique(migrated_engine):
    assert not _indexes(migrated_engine, "income")["idx_income_user_period"]["unique"]
